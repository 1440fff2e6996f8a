"""
Shared pytest fixtures and configuration for all tests
"""
from datetime import datetime
from typing import Any, Dict, List

import pytest

from shopsearch.engines.recommendation import SearchEngine, SearchIndex
from shopsearch.schemas.catalog import ProductRecord
from shopsearch.services.session_store import Session


def make_product(**overrides) -> ProductRecord:
    """Build a ProductRecord with neutral defaults"""
    data: Dict[str, Any] = {
        "id": "p-test",
        "name": "Test Product",
        "description": "",
        "category": "Misc",
        "price": 1000,
    }
    data.update(overrides)
    return ProductRecord(**data)


@pytest.fixture
def product_factory():
    """Factory for ad-hoc products in scoring tests"""
    return make_product


@pytest.fixture
def sample_catalog_data() -> List[Dict[str, Any]]:
    """Raw catalog records as the catalog collaborator hands them over"""
    return [
        {
            "id": "p1",
            "name": "Navy Blue Denim Jacket",
            "description": "A classic navy denim jacket with button front and two chest pockets, cut for layering.",
            "category": "Jackets",
            "subcategory": "Denim",
            "tags": ["casual", "layering"],
            "colors": ["blue"],
            "materials": ["denim"],
            "sizes": ["M", "L"],
            "price": 18000,
            "stock_quantity": 5,
            "average_rating": 4.5,
            "review_count": 40,
            "sales_count": 300,
            "image_url": "https://cdn.example.com/p1.jpg",
            "created_at": datetime(2024, 1, 10),
        },
        {
            "id": "p2",
            "name": "Red Silk Evening Dress",
            "description": "Floor length silk gown in deep red for weddings and formal evenings out.",
            "category": "Dresses",
            "tags": ["formal", "wedding"],
            "colors": ["red"],
            "materials": ["silk"],
            "price": 45000,
            "stock_quantity": 0,
            "average_rating": 4.8,
            "review_count": 120,
            "sales_count": 800,
            "images": ["https://cdn.example.com/p2-front.jpg"],
        },
        {
            "id": "p3",
            "name": "Black Leather Jacket",
            "description": "Biker leather jacket.",
            "category": "Jackets",
            "colors": ["black"],
            "materials": ["leather"],
            "price": 60000,
            "stock_quantity": 2,
            "average_rating": 4.0,
            "review_count": 10,
            "sales_count": 50,
        },
        {
            "id": "p4",
            "name": "White Cotton Shirt",
            "description": "Crisp cotton shirt with a spread collar, easy to dress up for the office or down for weekends.",
            "category": "Shirts",
            "tags": ["office"],
            "colors": ["white"],
            "materials": ["cotton"],
            "price": 12000,
            "stock_quantity": 20,
            "average_rating": 3.9,
            "review_count": 5,
            "sales_count": 150,
            "image_url": "https://cdn.example.com/p4.jpg",
        },
        {
            "id": "p5",
            "name": "Grey Running Sneakers",
            "description": "Lightweight mesh sneakers with cushioned soles for the gym and daily runs.",
            "category": "Shoes",
            "tags": ["sporty", "gym"],
            "colors": ["gray"],
            "materials": ["polyester"],
            "price": 35000,
            "stock_quantity": 8,
            "average_rating": 4.2,
            "review_count": 60,
            "sales_count": 500,
            "image_url": "https://cdn.example.com/p5.jpg",
        },
    ]


@pytest.fixture
def sample_products(sample_catalog_data) -> List[ProductRecord]:
    return [ProductRecord(**record) for record in sample_catalog_data]


@pytest.fixture
def sample_index(sample_products) -> SearchIndex:
    return SearchIndex.build(sample_products)


@pytest.fixture
def engine(sample_catalog_data) -> SearchEngine:
    """A fresh engine with the sample catalog indexed"""
    search_engine = SearchEngine()
    search_engine.rebuild_index(sample_catalog_data)
    return search_engine


@pytest.fixture
def session() -> Session:
    return Session(session_id="test-session")
