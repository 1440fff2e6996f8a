"""
Pydantic schemas for query understanding and per-session insights
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from shopsearch.schemas.catalog import PriceRange


class AttributeMatch(BaseModel):
    """A style/occasion/season/fit keyword found in a query"""

    type: str
    value: str

    class Config:
        frozen = True


class QueryEntities(BaseModel):
    """Structured attributes extracted from a query"""

    colors: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    materials: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    attributes: List[AttributeMatch] = Field(default_factory=list)
    price_range: Optional[PriceRange] = None

    def is_empty(self) -> bool:
        return not (
            self.colors
            or self.categories
            or self.materials
            or self.sizes
            or self.attributes
            or self.price_range
        )


class Intent(BaseModel):
    """An intent label with its rule confidence"""

    label: str
    confidence: float = Field(ge=0.0, le=1.0)


class IntentClassification(BaseModel):
    """Primary intent plus every rule that fired"""

    primary: Intent
    matches: List[Intent] = Field(default_factory=list)


class PreferenceScore(BaseModel):
    """One entry of a profile insight list"""

    name: str
    score: float


class UserInsights(BaseModel):
    """Summary of a session's preference model"""

    top_categories: List[PreferenceScore] = Field(default_factory=list)
    top_colors: List[PreferenceScore] = Field(default_factory=list)
    price_range: PriceRange
    total_views: int = 0
    total_searches: int = 0


class ConversationInsights(BaseModel):
    """Summary of a session's conversation state"""

    current_topic: Optional[str] = None
    sentiment: str = "neutral"
    confidence: float = 0.0
    context_size: int = 0
