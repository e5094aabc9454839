from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pytest

from rowtable import config
from rowtable.schema import Schema


@pytest.fixture(autouse=True)
def _default_config(monkeypatch):
    """Run every test against the built-in configuration."""
    monkeypatch.setattr(config, "CONFIG", config.AppConfig())


@dataclass
class Product:
    id: int
    name: str
    price: float
    sales_volume: int
    launch_date: date
    category_id: int
    created_at: date


@pytest.fixture
def products_schema():
    return Schema(
        "product",
        [
            ("id", "integer"),
            ("name", "string"),
            ("price", "float"),
            ("sales_volume", "integer"),
            ("launch_date", "date"),
            ("category_id", "integer"),
            ("created_at", "datetime"),
        ],
    )


@pytest.fixture
def product_rows():
    return [
        {
            "id": 1,
            "name": "Widget",
            "price": 50.0,
            "sales_volume": 1200,
            "launch_date": date(2010, 10, 1),
            "category_id": 3,
            "created_at": date(2010, 9, 1),
        },
        {
            "id": 2,
            "name": "Gadget",
            "price": 100.0,
            "sales_volume": 300,
            "launch_date": date(2011, 3, 15),
            "category_id": 3,
            "created_at": date(2011, 2, 1),
        },
        {
            "id": 3,
            "name": "Gizmo",
            "price": 25.5,
            "sales_volume": None,
            "launch_date": date(2012, 7, 4),
            "category_id": 4,
            "created_at": date(2012, 6, 1),
        },
    ]


@pytest.fixture
def product_objects(product_rows):
    return [Product(**row) for row in product_rows]
