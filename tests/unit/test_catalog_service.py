"""
Unit tests for catalog snapshot validation
"""
from dataclasses import dataclass, field
from typing import List

import pytest

from shopsearch.engines.recommendation import SearchEngine
from shopsearch.schemas.catalog import ProductRecord
from shopsearch.services.catalog_service import parse_catalog


@dataclass
class MockProduct:
    """ORM-like product row"""
    id: int
    name: str
    price: float
    category: str = "Bags"
    colors: List[str] = field(default_factory=list)


class TestParseCatalog:
    """Tests for parse_catalog()"""

    @pytest.mark.unit
    def test_valid_records(self, sample_catalog_data):
        result = parse_catalog(sample_catalog_data)

        assert [p.id for p in result.products] == ["p1", "p2", "p3", "p4", "p5"]
        assert result.skipped == 0
        assert result.truncated == 0

    @pytest.mark.unit
    def test_invalid_records_are_skipped(self, sample_catalog_data, caplog):
        records = sample_catalog_data + [
            {"id": "bad-price", "name": "Broken", "price": -5},
            {"id": "no-name", "price": 100},
            {"id": "nan-price", "name": "NaN", "price": float("nan")},
            {"id": "bad-rating", "name": "Rated", "price": 10, "average_rating": 7},
        ]

        with caplog.at_level("WARNING"):
            result = parse_catalog(records)

        assert len(result.products) == 5
        assert result.skipped == 4
        assert "bad-price" in caplog.text

    @pytest.mark.unit
    def test_duplicate_ids_keep_first(self, product_factory):
        records = [
            product_factory(id="x", name="First"),
            product_factory(id="x", name="Second"),
        ]

        result = parse_catalog(records)

        assert [p.name for p in result.products] == ["First"]
        assert result.skipped == 1

    @pytest.mark.unit
    def test_orm_objects_and_numeric_ids(self):
        result = parse_catalog([MockProduct(id=7, name="Tote", price=9000, colors=["tan"])])

        product = result.products[0]
        assert isinstance(product, ProductRecord)
        assert product.id == "7"
        assert product.colors == ["tan"]

    @pytest.mark.unit
    def test_null_optional_fields_are_kept(self):
        """Test that nullable text and list columns do not invalidate a record"""
        records = [
            {"id": "p1", "name": "Velvet Clutch", "description": None, "price": 9000, "colors": None},
            {
                "id": "p2",
                "name": "Straw Hat",
                "category": None,
                "tags": None,
                "materials": None,
                "sizes": None,
                "images": None,
                "price": 4000,
            },
        ]

        result = parse_catalog(records)

        assert [p.id for p in result.products] == ["p1", "p2"]
        assert result.skipped == 0
        assert result.products[0].description == ""
        assert result.products[0].colors == []
        assert result.products[1].category == ""
        assert result.products[1].tags == []

    @pytest.mark.unit
    def test_record_with_null_fields_is_searchable(self):
        engine = SearchEngine()
        engine.rebuild_index([
            {"id": "p1", "name": "Velvet Clutch", "description": None, "category": None, "tags": None, "price": 9000},
            {"id": "p2", "name": "Linen Shirt", "price": 5000},
        ])

        assert engine.process_query("velvet clutch").product_ids == ["p1"]

    @pytest.mark.unit
    def test_max_size_truncates(self, sample_catalog_data):
        result = parse_catalog(sample_catalog_data, max_size=2)

        assert [p.id for p in result.products] == ["p1", "p2"]
        assert result.truncated == 3

    @pytest.mark.unit
    def test_empty_catalog(self):
        result = parse_catalog([])

        assert result.products == []
        assert result.skipped == 0
