"""Listing (post-an-ad) schema"""
from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from marketguard.schemas.base import RECORD_CONFIG, Schema, clean_text, field_error
from marketguard.utils.safety import detect_prompt_injection
from marketguard.utils.sanitizer import sanitize_plain_text

ItemCondition = Literal["new", "like_new", "good", "fair"]
ItemAge = Literal["<1m", "1-6m", "6-12m", "1-2y", "2-5y", "5y+"]

MAX_PRICE = 10_000_000
MAX_ACCESSORIES = 15
MAX_ACCESSORY_LENGTH = 50


class ContactPreferences(BaseModel):
    model_config = RECORD_CONFIG

    chat: bool = True
    phone: bool = False
    whatsapp: bool = False


class ListingDraft(BaseModel):
    model_config = RECORD_CONFIG

    title: str
    description: str
    price: int = Field(strict=True)
    category_id: str
    subcategory_id: Optional[str] = None
    condition: ItemCondition
    city: str
    area: Optional[str] = None
    item_age: Optional[ItemAge] = None
    # is_negotiable has to stay ahead of min_price: the min_price check
    # reads it from the already validated fields
    is_negotiable: bool = True
    min_price: Optional[float] = Field(default=None, strict=True)
    has_warranty: bool = False
    warranty_expiry: Optional[date] = None
    has_invoice: bool = False
    accessories: List[str] = Field(default_factory=list)
    contact_preferences: ContactPreferences = Field(default_factory=ContactPreferences)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return clean_text(v, "Title", min_length=10, max_length=100)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        if detect_prompt_injection(v):
            raise field_error("Description contains suspicious content")
        return clean_text(v, "Description", min_length=20, max_length=2000)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: int) -> int:
        if v <= 0:
            raise field_error("Price must be positive")
        if v > MAX_PRICE:
            raise field_error("Price exceeds maximum allowed value")
        return v

    @field_validator("category_id")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return clean_text(v, "Category", min_length=1, max_length=50)

    @field_validator("subcategory_id")
    @classmethod
    def validate_subcategory(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return clean_text(v, "Subcategory", max_length=50) or None

    @field_validator("area")
    @classmethod
    def validate_area(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return clean_text(v, "Area", max_length=200) or None

    @field_validator("city")
    @classmethod
    def validate_city(cls, v: str) -> str:
        return clean_text(v, "City", min_length=1, max_length=100)

    @field_validator("min_price")
    @classmethod
    def validate_min_price(cls, v: Optional[float], info: ValidationInfo) -> Optional[float]:
        if v is None:
            return None
        if v < 0:
            raise field_error("Minimum price cannot be negative")
        if v > MAX_PRICE:
            raise field_error("Minimum price exceeds maximum")

        price = info.data.get("price")
        if info.data.get("is_negotiable", True) and price is not None and v > price:
            raise field_error("Minimum price must be less than the listing price")
        return v

    @field_validator("accessories")
    @classmethod
    def validate_accessories(cls, v: List[str]) -> List[str]:
        if len(v) > MAX_ACCESSORIES:
            raise field_error(f"Maximum {MAX_ACCESSORIES} accessories")

        cleaned = []
        for item in v:
            item = sanitize_plain_text(item)
            if not item:
                raise field_error("Accessory name cannot be empty")
            if len(item) > MAX_ACCESSORY_LENGTH:
                raise field_error("Accessory name too long")
            cleaned.append(item)
        return cleaned


listing_schema = Schema(ListingDraft)
