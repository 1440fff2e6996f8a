"""
Multi-signal product ranking.

Scoring Formula:
    FINAL_SCORE =
        0.4 * semantic_score    +
        0.3 * behavioral_score  +
        0.2 * quality_score     +
        0.1 * intent_score

Semantic score (entity overlap, capped at 1.0):
    color match +0.3, category match +0.4, material match +0.2, price fit +0.1

Behavioral score:
    min(sales / 1000, 0.4) + rating / 5 * 0.3 + min(reviews / 100, 0.3)

Quality score:
    image +0.3, description over 50 chars +0.2, in stock +0.3, has reviews +0.2

Intent score:
    purchase -> 1.0 if in stock else 0.0
    recommend -> rating / 5
    anything else -> 0.5

Equal final scores are ordered by ascending product id.
"""
import logging
from typing import Dict, List, Optional

from shopsearch.config.rule_tables import COLOR_VARIANTS
from shopsearch.engines.recommendation.schemas import ScoredProduct
from shopsearch.schemas.catalog import ProductRecord
from shopsearch.schemas.query import Intent, QueryEntities

logger = logging.getLogger(__name__)


class MultiSignalRanker:
    """Deterministic, explainable product ranking."""

    # Scoring weights - must sum to 1.0
    WEIGHTS = {
        "semantic": 0.4,
        "behavioral": 0.3,
        "quality": 0.2,
        "intent": 0.1,
    }

    SEMANTIC_BONUSES = {
        "color": 0.3,
        "category": 0.4,
        "material": 0.2,
        "price": 0.1,
    }

    def __init__(self, color_variants: Optional[Dict[str, List[str]]] = None):
        self.color_variants = color_variants or COLOR_VARIANTS

    def rank(
        self,
        products: List[ProductRecord],
        entities: QueryEntities,
        intent: Intent,
        signals: Optional[Dict[str, Dict[str, float]]] = None,
    ) -> List[ScoredProduct]:
        """
        Score and sort candidates.

        Args:
            products: Candidate products
            entities: Entities extracted from the query
            intent: Primary intent of the query
            signals: Optional retrieval scores per product id (e.g. attention,
                similarity) copied into each breakdown for explainability

        Returns:
            ScoredProduct list, best first
        """
        signals = signals or {}
        ranked = []

        for product in products:
            breakdown = {
                "semantic": self.semantic_score(product, entities),
                "behavioral": self.behavioral_score(product),
                "quality": self.quality_score(product),
                "intent": self.intent_score(product, intent),
            }
            final_score = sum(breakdown[name] * weight for name, weight in self.WEIGHTS.items())
            breakdown.update(signals.get(product.id, {}))

            ranked.append(ScoredProduct(product=product, score=final_score, breakdown=breakdown))

        ranked.sort(key=lambda item: (-item.score, item.product.id))
        return ranked

    def _color_matches(self, canonical: str, product_color: str) -> bool:
        product_color = product_color.lower()
        if canonical in product_color:
            return True
        return product_color in self.color_variants.get(canonical, [])

    def semantic_score(self, product: ProductRecord, entities: QueryEntities) -> float:
        score = 0.0

        if entities.colors and product.colors:
            if any(
                self._color_matches(color, product_color)
                for color in entities.colors
                for product_color in product.colors
            ):
                score += self.SEMANTIC_BONUSES["color"]

        if entities.categories:
            categories = {category.lower() for category in entities.categories}
            if product.category.lower() in categories:
                score += self.SEMANTIC_BONUSES["category"]

        if entities.materials and product.materials:
            if any(
                material in product_material.lower()
                for material in entities.materials
                for product_material in product.materials
            ):
                score += self.SEMANTIC_BONUSES["material"]

        if entities.price_range and entities.price_range.contains(product.price):
            score += self.SEMANTIC_BONUSES["price"]

        return min(score, 1.0)

    @staticmethod
    def behavioral_score(product: ProductRecord) -> float:
        score = min(product.sales_count / 1000, 0.4)
        score += (product.average_rating / 5) * 0.3
        score += min(product.review_count / 100, 0.3)
        return min(score, 1.0)

    @staticmethod
    def quality_score(product: ProductRecord) -> float:
        score = 0.0
        if product.has_image:
            score += 0.3
        if len(product.description) > 50:
            score += 0.2
        if product.stock_quantity > 0:
            score += 0.3
        if product.review_count > 0:
            score += 0.2
        return score

    @staticmethod
    def intent_score(product: ProductRecord, intent: Intent) -> float:
        if intent.label == "purchase":
            return 1.0 if product.stock_quantity > 0 else 0.0
        if intent.label == "recommend":
            return product.average_rating / 5
        return 0.5
