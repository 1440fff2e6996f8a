"""
Text normalization shared by indexing, query vectorization and attention scoring
"""
import re
from typing import List

from shopsearch.config.rule_tables import STOP_WORDS
from shopsearch.schemas.catalog import ProductRecord

# Anything that is not a letter or digit becomes whitespace
_NON_ALNUM = re.compile(r"[\W_]+", re.UNICODE)

MIN_TERM_LENGTH = 3


def tokenize(text: str) -> List[str]:
    """
    Split text into lower-cased alphanumeric terms.

    Terms shorter than three characters and stop words are dropped. Order is
    preserved and duplicates are kept, so callers can use positions and counts.
    """
    if not text:
        return []

    normalized = _NON_ALNUM.sub(" ", text.lower())
    return [
        term
        for term in normalized.split()
        if len(term) >= MIN_TERM_LENGTH and term not in STOP_WORDS
    ]


def product_document_text(product: ProductRecord) -> str:
    """Searchable text for a product: name, description, category, subcategory, tags, colors, materials."""
    parts = [
        product.name,
        product.description,
        product.category,
        product.subcategory or "",
        " ".join(product.tags),
        " ".join(product.colors),
        " ".join(product.materials),
    ]
    return " ".join(part for part in parts if part)
