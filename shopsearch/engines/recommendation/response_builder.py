"""
Natural-language summaries of search results
"""
from typing import List, Optional

from shopsearch.core.config import settings
from shopsearch.engines.recommendation.schemas import ScoredProduct
from shopsearch.schemas.query import Intent, QueryEntities


def _format_amount(amount: float) -> str:
    return f"{amount:,.0f}"


class ResponseBuilder:
    """Builds the shopper-facing response text from intent, entities and result statistics"""

    HIGH_RATING_THRESHOLD = 4.0

    def __init__(self, currency: Optional[str] = None):
        self.currency = currency or settings.currency

    def build(self, results: List[ScoredProduct], entities: QueryEntities, intent: Intent) -> str:
        count = len(results)
        if count == 0:
            return self.build_no_results(entities)

        if intent.label == "recommend":
            parts = [f"Based on your preferences, I've found {count} perfect matches for you!"]
        elif intent.label == "compare":
            parts = [f"Here are {count} products to compare."]
        else:
            parts = [f"Great! I found {count} products that match your search."]

        if entities.colors:
            parts.append(f"All in {' or '.join(entities.colors)}.")

        if entities.categories:
            parts.append(f"From our {' and '.join(entities.categories)} collection.")

        price_range = entities.price_range
        if price_range:
            if price_range.min is not None and price_range.max is not None:
                parts.append(
                    f"Price range: {_format_amount(price_range.min)} - "
                    f"{_format_amount(price_range.max)} {self.currency}."
                )
            elif price_range.max is not None:
                parts.append(f"All under {_format_amount(price_range.max)} {self.currency}.")
            elif price_range.min is not None:
                parts.append(f"All above {_format_amount(price_range.min)} {self.currency}.")

        prices = [item.product.price for item in results]
        if len(prices) > 1 and min(prices) != max(prices):
            parts.append(
                f"Prices from {_format_amount(min(prices))} to {_format_amount(max(prices))} {self.currency}."
            )

        average_rating = sum(item.product.average_rating for item in results) / count
        if average_rating > self.HIGH_RATING_THRESHOLD:
            parts.append(f"Highly rated products (avg {average_rating:.1f} stars)!")

        return " ".join(parts)

    @staticmethod
    def build_no_results(entities: QueryEntities) -> str:
        response = "I couldn't find exact matches, but let me help you! "

        if entities.colors:
            response += "Try exploring other colors, or "

        if entities.price_range and entities.price_range.max is not None:
            response += "increase your budget slightly, or "

        response += "browse our full collection for more options."
        return response
