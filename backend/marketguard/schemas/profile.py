"""Profile update schema"""
import re
from typing import Optional

from pydantic import BaseModel, field_validator

from marketguard.schemas.base import RECORD_CONFIG, Schema, clean_text, field_error
from marketguard.utils.validators import normalize_phone_number

NAME_RE = re.compile(r"[A-Za-z][A-Za-z -]*")


class ProfileUpdate(BaseModel):
    """Partial update: only the fields present are checked and returned."""

    model_config = RECORD_CONFIG

    name: Optional[str] = None
    phone_number: Optional[str] = None
    city: Optional[str] = None
    area: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if len(v) < 2:
            raise field_error("Name must be at least 2 characters")
        if len(v) > 100:
            raise field_error("Name too long")
        if not NAME_RE.fullmatch(v):
            raise field_error("Name can only contain letters, spaces and hyphens")
        return v

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        digits = normalize_phone_number(v)
        if digits is None:
            raise field_error("Invalid Indian phone number")
        return digits

    @field_validator("city")
    @classmethod
    def validate_city(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return clean_text(v, "City", min_length=1, max_length=100)

    @field_validator("area")
    @classmethod
    def validate_area(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return clean_text(v, "Area", max_length=200) or None


profile_update_schema = Schema(ProfileUpdate)
