"""
Pydantic schemas for ranked search results
"""
from typing import Dict, List

from pydantic import BaseModel, Field

from shopsearch.schemas.catalog import ProductRecord
from shopsearch.schemas.query import Intent, QueryEntities


class ScoredProduct(BaseModel):
    """A ranked product with its scoring breakdown"""

    product: ProductRecord
    score: float
    breakdown: Dict[str, float] = Field(default_factory=dict)


class SearchResponse(BaseModel):
    """Everything produced for one shopper query"""

    query: str
    products: List[ScoredProduct] = Field(default_factory=list)
    response: str = ""
    entities: QueryEntities = Field(default_factory=QueryEntities)
    intent: Intent = Field(default_factory=lambda: Intent(label="search", confidence=0.5))
    matched_intents: List[Intent] = Field(default_factory=list)
    sentiment: str = "neutral"
    total_found: int = Field(default=0, ge=0)
    strategy: str = "attention_multi_signal"

    @property
    def product_ids(self) -> List[str]:
        return [item.product.id for item in self.products]
