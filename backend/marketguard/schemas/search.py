"""Search query schema"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from marketguard.schemas.base import RECORD_CONFIG, Schema, clean_text, field_error
from marketguard.utils.safety import detect_prompt_injection, detect_sql_injection

MAX_QUERY_LENGTH = 200


class SearchQuery(BaseModel):
    model_config = ConfigDict(**RECORD_CONFIG, populate_by_name=True)

    query: str
    category: Optional[str] = None
    min_price: Optional[float] = Field(default=None, alias="minPrice")
    max_price: Optional[float] = Field(default=None, alias="maxPrice")
    city: Optional[str] = None

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        if len(v) > MAX_QUERY_LENGTH:
            raise field_error("Search query too long")
        # checked before sanitizing, which drops the quotes these rely on
        if detect_sql_injection(v) or detect_prompt_injection(v):
            raise field_error("Search query contains invalid characters")
        return clean_text(v, "Search query", max_length=MAX_QUERY_LENGTH)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return clean_text(v, "Category", max_length=50) or None

    @field_validator("min_price")
    @classmethod
    def validate_min_price(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise field_error("Minimum price cannot be negative")
        return v

    @field_validator("max_price")
    @classmethod
    def validate_max_price(cls, v: Optional[float], info: ValidationInfo) -> Optional[float]:
        if v is None:
            return None
        if v < 0:
            raise field_error("Maximum price cannot be negative")
        min_price = info.data.get("min_price")
        if min_price is not None and v < min_price:
            raise field_error("Maximum price must not be below the minimum price")
        return v

    @field_validator("city")
    @classmethod
    def validate_city(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return clean_text(v, "City", max_length=100) or None


search_query_schema = Schema(SearchQuery)
