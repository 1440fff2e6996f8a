"""
Pydantic schemas for catalog records and shopper interactions
"""
import math
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class ProductRecord(BaseModel):
    """Immutable catalog snapshot entry"""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    category: str = ""
    subcategory: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    materials: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    price: float = Field(ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    average_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)
    sales_count: int = Field(default=0, ge=0)
    image_url: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    class Config:
        frozen = True
        from_attributes = True

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        # Catalog collaborators hand out both numeric and string ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("description", "category", mode="before")
    @classmethod
    def null_text_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("tags", "colors", "materials", "sizes", "images", mode="before")
    @classmethod
    def null_list_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("price")
    @classmethod
    def price_must_be_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("price must be a finite number")
        return value

    @property
    def has_image(self) -> bool:
        return bool(self.image_url) or len(self.images) > 0


class PriceRange(BaseModel):
    """Price bounds; a missing bound is open"""

    min: Optional[float] = None
    max: Optional[float] = None

    def contains(self, price: float) -> bool:
        lower = self.min if self.min is not None else 0.0
        upper = self.max if self.max is not None else math.inf
        return lower <= price <= upper


class InteractionEvent(BaseModel):
    """A tracked shopper interaction: a product view or a search"""

    type: Literal["view", "search"]
    product: Optional[ProductRecord] = None
    query: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def check_payload(self) -> "InteractionEvent":
        if self.type == "view" and self.product is None:
            raise ValueError("view events require a product")
        if self.type == "search" and self.query is None:
            raise ValueError("search events require a query")
        return self
