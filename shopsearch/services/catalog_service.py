"""
Catalog snapshot validation.

The catalog collaborator hands over raw records (dicts or ORM-like objects).
Records that fail validation are skipped and logged; the rest of the snapshot
is still usable.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from shopsearch.core.config import settings
from shopsearch.schemas.catalog import ProductRecord

logger = logging.getLogger(__name__)


@dataclass
class CatalogParseResult:
    """Validated products plus what was dropped"""

    products: List[ProductRecord] = field(default_factory=list)
    skipped: int = 0
    truncated: int = 0


def _record_id(raw: Any) -> Any:
    if isinstance(raw, dict):
        return raw.get("id")
    return getattr(raw, "id", None)


def _to_product(raw: Any) -> ProductRecord:
    if isinstance(raw, ProductRecord):
        return raw
    if isinstance(raw, dict):
        return ProductRecord.model_validate(raw)
    return ProductRecord.model_validate(raw, from_attributes=True)


def parse_catalog(records: Iterable[Any], max_size: Optional[int] = None) -> CatalogParseResult:
    """
    Validate a raw catalog snapshot.

    Args:
        records: Raw product records in catalog order
        max_size: Maximum number of products kept (defaults to settings.max_catalog_size)

    Returns:
        CatalogParseResult with valid products in input order
    """
    max_size = max_size if max_size is not None else settings.max_catalog_size
    result = CatalogParseResult()
    seen_ids = set()

    for raw in records:
        try:
            product = _to_product(raw)
        except (ValidationError, OverflowError) as e:
            result.skipped += 1
            logger.warning(f"Skipping invalid catalog record id={_record_id(raw)!r}: {e}")
            continue

        if product.id in seen_ids:
            result.skipped += 1
            logger.warning(f"Skipping duplicate catalog record id={product.id!r}")
            continue

        if len(result.products) >= max_size:
            result.truncated += 1
            continue

        seen_ids.add(product.id)
        result.products.append(product)

    if result.truncated:
        logger.warning(
            f"Catalog exceeds max size {max_size}; dropped {result.truncated} trailing records"
        )

    return result
