"""
Session-scoped shopper preference model.

The profile keeps the last viewed products and searches and derives
category/color preferences and a preferred price range from the view
history. Preference weights are counts over the current view window divided
by the largest count, so every weight is in [0, 1] regardless of how many
interactions a session has had.

Recommendation score:
    0.4 * category_preference +
    0.2 * mean color_preference +
    0.2 * price_fit +
    0.1 * popularity (sales / 100, capped at 1) +
    0.1 * rating / 5
"""
import logging
import math
from collections import Counter, deque
from datetime import datetime
from typing import Deque, Dict, List, Optional

from shopsearch.core.config import settings
from shopsearch.schemas.catalog import InteractionEvent, PriceRange, ProductRecord
from shopsearch.schemas.query import PreferenceScore, UserInsights

logger = logging.getLogger(__name__)


class UserProfile:
    """Mutable preference model owned by exactly one session"""

    WEIGHTS = {
        "category": 0.4,
        "color": 0.2,
        "price": 0.2,
        "popularity": 0.1,
        "rating": 0.1,
    }

    # Price fit when nothing has been viewed yet
    NEUTRAL_PRICE_SCORE = 0.5

    def __init__(
        self,
        view_history_size: Optional[int] = None,
        search_history_size: Optional[int] = None,
        price_range_expansion: Optional[float] = None,
    ):
        self.viewed_products: Deque[ProductRecord] = deque(
            maxlen=view_history_size or settings.view_history_size
        )
        self.search_history: Deque[str] = deque(
            maxlen=search_history_size or settings.search_history_size
        )
        self.price_range_expansion = (
            price_range_expansion if price_range_expansion is not None else settings.price_range_expansion
        )
        self.category_preferences: Dict[str, float] = {}
        self.color_preferences: Dict[str, float] = {}
        self.price_range = PriceRange(min=0.0, max=None)
        self.last_interaction: Optional[datetime] = None

    def track(self, event: InteractionEvent) -> None:
        """Apply a view or search event."""
        self.last_interaction = event.timestamp

        if event.type == "view":
            self.record_view(event.product)
        elif event.type == "search":
            self.record_search(event.query)

    def record_view(self, product: ProductRecord) -> None:
        self.viewed_products.append(product)
        self._update_preferences()
        logger.debug(
            f"Profile updated: views={len(self.viewed_products)}, "
            f"categories={len(self.category_preferences)}"
        )

    def record_search(self, query: str) -> None:
        self.search_history.append(query)

    def _update_preferences(self) -> None:
        category_counts = Counter(p.category for p in self.viewed_products if p.category)
        color_counts = Counter(
            color.lower() for p in self.viewed_products for color in p.colors
        )

        # Categories/colors that left the window stay known at weight 0
        self.category_preferences = self._normalize(self.category_preferences, category_counts)
        self.color_preferences = self._normalize(self.color_preferences, color_counts)

        prices = [p.price for p in self.viewed_products]
        if prices:
            self.price_range = PriceRange(
                min=min(prices) * (1 - self.price_range_expansion),
                max=max(prices) * (1 + self.price_range_expansion),
            )

    @staticmethod
    def _normalize(previous: Dict[str, float], counts: Counter) -> Dict[str, float]:
        max_count = max(counts.values(), default=0)
        normalized = {key: 0.0 for key in previous}
        for key, count in counts.items():
            normalized[key] = count / max_count if max_count else 0.0
        return normalized

    def price_score(self, price: float) -> float:
        """1 at the middle of the preferred range, falling to 0 at its edges and outside."""
        low = self.price_range.min or 0.0
        high = self.price_range.max
        if high is None or math.isinf(high):
            return self.NEUTRAL_PRICE_SCORE
        if price < low or price > high:
            return 0.0

        span = high - low
        if span == 0:
            return 1.0

        middle = (low + high) / 2
        return max(0.0, 1 - abs(price - middle) / (span / 2))

    def recommendation_score(self, product: ProductRecord) -> float:
        category_score = self.category_preferences.get(product.category, 0.0)

        color_score = 0.0
        if product.colors:
            color_score = sum(
                self.color_preferences.get(color.lower(), 0.0) for color in product.colors
            ) / len(product.colors)

        popularity_score = min(product.sales_count / 100, 1.0)
        rating_score = product.average_rating / 5

        return (
            category_score * self.WEIGHTS["category"]
            + color_score * self.WEIGHTS["color"]
            + self.price_score(product.price) * self.WEIGHTS["price"]
            + popularity_score * self.WEIGHTS["popularity"]
            + rating_score * self.WEIGHTS["rating"]
        )

    def insights(self, top_n: int = 3) -> UserInsights:
        def top(preferences: Dict[str, float]) -> List[PreferenceScore]:
            ranked = sorted(preferences.items(), key=lambda item: (-item[1], item[0]))
            return [PreferenceScore(name=name, score=round(score, 2)) for name, score in ranked[:top_n]]

        return UserInsights(
            top_categories=top(self.category_preferences),
            top_colors=top(self.color_preferences),
            price_range=self.price_range,
            total_views=len(self.viewed_products),
            total_searches=len(self.search_history),
        )
