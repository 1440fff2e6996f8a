"""
Rule-based query understanding: entity extraction, intent classification and sentiment
"""
import logging
import re
from typing import Dict, List, Optional, Pattern, Tuple

from shopsearch.config import rule_tables
from shopsearch.schemas.catalog import PriceRange
from shopsearch.schemas.query import AttributeMatch, Intent, IntentClassification, QueryEntities

logger = logging.getLogger(__name__)


def _word_pattern(term: str, plurals: bool = False, boundary: str = "a-z0-9") -> Pattern:
    suffix = r"(?:s|es)?" if plurals else ""
    return re.compile(rf"(?<![{boundary}]){re.escape(term)}{suffix}(?![{boundary}])")


def _parse_amount(raw: str) -> Optional[float]:
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        return None


class EntityExtractor:
    """Extracts colors, categories, materials, sizes, attributes and price bounds from query text"""

    def __init__(
        self,
        color_variants: Optional[Dict[str, List[str]]] = None,
        category_variants: Optional[Dict[str, List[str]]] = None,
        materials: Optional[List[str]] = None,
        sizes: Optional[List[str]] = None,
        attribute_keywords: Optional[Dict[str, List[str]]] = None,
        price_patterns: Optional[List[Tuple[str, str]]] = None,
    ):
        self.color_patterns = self._compile_variants(color_variants or rule_tables.COLOR_VARIANTS)
        self.category_patterns = self._compile_variants(category_variants or rule_tables.CATEGORY_VARIANTS)
        self.material_patterns = [
            (material, _word_pattern(material)) for material in (materials or rule_tables.MATERIALS)
        ]
        self.size_patterns = [
            (size, _word_pattern(size, boundary="a-z0-9'")) for size in (sizes or rule_tables.SIZES)
        ]
        self.attribute_patterns = [
            (attr_type, value, _word_pattern(value))
            for attr_type, values in (attribute_keywords or rule_tables.ATTRIBUTE_KEYWORDS).items()
            for value in values
        ]
        self.price_patterns = [
            (re.compile(pattern), bound)
            for pattern, bound in (price_patterns or rule_tables.PRICE_PATTERNS)
        ]

    @staticmethod
    def _compile_variants(table: Dict[str, List[str]]) -> List[Tuple[str, List[Pattern]]]:
        return [
            (canonical, [_word_pattern(variant, plurals=True) for variant in variants])
            for canonical, variants in table.items()
        ]

    def extract(self, text: str) -> QueryEntities:
        """
        Extract structured entities from raw query text.

        Matching is case-insensitive and whole-word. Every collection is
        de-duplicated and ordered by the rule tables, so extraction is
        deterministic. A query with no recognizable signal yields empty
        collections and no price range.
        """
        text_lower = (text or "").lower()
        if not text_lower.strip():
            return QueryEntities()

        colors = [
            canonical
            for canonical, patterns in self.color_patterns
            if any(p.search(text_lower) for p in patterns)
        ]
        categories = [
            canonical
            for canonical, patterns in self.category_patterns
            if any(p.search(text_lower) for p in patterns)
        ]
        materials = [material for material, p in self.material_patterns if p.search(text_lower)]

        sizes: List[str] = []
        for size, pattern in self.size_patterns:
            label = size.upper()
            if pattern.search(text_lower) and label not in sizes:
                sizes.append(label)

        attributes: List[AttributeMatch] = []
        for attr_type, value, pattern in self.attribute_patterns:
            match = AttributeMatch(type=attr_type, value=value)
            if pattern.search(text_lower) and match not in attributes:
                attributes.append(match)

        entities = QueryEntities(
            colors=colors,
            categories=categories,
            materials=materials,
            sizes=sizes,
            attributes=attributes,
            price_range=self.extract_price_range(text_lower),
        )
        logger.debug(f"Extracted entities: {entities.model_dump(exclude_none=True)}")
        return entities

    def extract_price_range(self, text: str) -> Optional[PriceRange]:
        """Apply the price patterns in order; the first one that matches decides the range."""
        text_lower = text.lower()
        for pattern, bound in self.price_patterns:
            match = pattern.search(text_lower)
            if not match:
                continue

            if bound == "range":
                low, high = _parse_amount(match.group(1)), _parse_amount(match.group(2))
                if low is None or high is None:
                    return None
                return PriceRange(min=min(low, high), max=max(low, high))

            amount = _parse_amount(match.group(1))
            if amount is None:
                return None
            if bound == "min":
                return PriceRange(min=amount)
            return PriceRange(max=amount)

        return None


class IntentClassifier:
    """Multi-label keyword classifier with a fixed confidence per rule"""

    def __init__(self, rules: Optional[List[Tuple[str, str, float]]] = None):
        self.rules = [
            (label, re.compile(pattern), confidence)
            for label, pattern, confidence in (rules or rule_tables.INTENT_RULES)
        ]

    def classify(self, text: str) -> IntentClassification:
        """
        Classify the purpose of a query.

        Every matching rule is reported. The primary intent is the match with
        the highest confidence; equal confidences keep rule order. With no match
        the primary intent is search at 0.5.
        """
        text_lower = (text or "").lower()
        matches = [
            Intent(label=label, confidence=confidence)
            for label, pattern, confidence in self.rules
            if pattern.search(text_lower)
        ]

        # sorted() is stable, so rule order breaks confidence ties
        ranked = sorted(matches, key=lambda intent: intent.confidence, reverse=True)
        if ranked:
            primary = ranked[0]
        else:
            label, confidence = rule_tables.DEFAULT_INTENT
            primary = Intent(label=label, confidence=confidence)

        logger.debug(f"Classified intent: {primary.label} ({primary.confidence:.0%})")
        return IntentClassification(primary=primary, matches=ranked)


def analyze_sentiment(text: str) -> str:
    """Return positive/negative/neutral, suffixed with _urgent when urgency cues appear."""
    words = set(re.findall(r"[a-z]+", (text or "").lower()))

    score = sum(1 for word in rule_tables.POSITIVE_WORDS if word in words)
    score -= sum(1 for word in rule_tables.NEGATIVE_WORDS if word in words)

    sentiment = "neutral"
    if score > 0:
        sentiment = "positive"
    elif score < 0:
        sentiment = "negative"

    if any(word in words for word in rule_tables.URGENT_WORDS):
        sentiment += "_urgent"

    return sentiment


# Global instances; both are stateless after construction
entity_extractor = EntityExtractor()
intent_classifier = IntentClassifier()
