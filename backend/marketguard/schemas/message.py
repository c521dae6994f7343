"""Chat message schema"""
import re
from typing import Optional

from pydantic import BaseModel, field_validator

from marketguard.schemas.base import RECORD_CONFIG, Schema, clean_text, field_error
from marketguard.utils.sanitizer import sanitize_url

SCRIPT_TAG_RE = re.compile(r"<\s*/?\s*script", re.IGNORECASE)


class MessageDraft(BaseModel):
    model_config = RECORD_CONFIG

    message_text: str
    image_url: Optional[str] = None

    @field_validator("message_text")
    @classmethod
    def validate_message_text(cls, v: str) -> str:
        if SCRIPT_TAG_RE.search(v):
            raise field_error("Message contains invalid content")
        v = clean_text(v, "Message", max_length=2000)
        if not v:
            raise field_error("Message cannot be empty")
        return v

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: Optional[str]) -> Optional[str]:
        # disallowed schemes come back empty and are dropped
        return sanitize_url(v) or None


message_schema = Schema(MessageDraft)
