"""Shared test fixtures and utilities for the storefront test suite."""

import json
import sys
from pathlib import Path

import pytest

# Modules are imported flat, the same way app.py runs when started directly
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))


SAMPLE_PRODUCTS = [
    {
        "id": "p1",
        "title": "Granule za pse Premium",
        "brand": "Josera",
        "category": "Hrana za kućne ljubimce",
        "subcategory": "Hrana za pse",
        "type": "Suva hrana",
        "price": "7,499",
        "salePrice": "6,499",
        "percentage": "13%",
    },
    {
        "id": "p2",
        "title": "Konzerva za mačke",
        "brand": "Felix",
        "category": "Hrana za kućne ljubimce",
        "subcategory": "Hrana za mačke",
        "type": "Vlažna hrana",
        "price": "189",
        "salePrice": "/",
        "percentage": "/",
    },
    {
        "id": "p3",
        "title": "Пелети за рибице",
        "category": "Pet Food",
        "subcategory": "Fish Food",
        "type": "Pellets",
        "price": "650",
        "salePrice": "/",
    },
    {
        "id": "p4",
        "title": "Gallery",
        "category": "Igračke za kućne ljubimce",
        "subcategory": "Igračke za pse",
        "type": "Loptice",
        "price": "990",
    },
    {
        "id": "p5",
        "title": "Gumena loptica",
        "category": "Igračke za kućne ljubimce",
        "subcategory": "Igračke za pse",
        "type": "Loptice",
        "price": "1,290",
        "salePrice": "990",
    },
]


@pytest.fixture
def sample_products():
    """Raw catalog entries (deep enough copies for tests to mutate)."""
    return [dict(p) for p in SAMPLE_PRODUCTS]


@pytest.fixture
def catalog_path(tmp_path, sample_products):
    """Write the sample catalog to a temporary JSON file."""
    path = tmp_path / "product.json"
    path.write_text(json.dumps(sample_products, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def catalog(sample_products):
    """Catalog snapshot built from the sample entries."""
    from catalog import Catalog
    from models import Product

    return Catalog([Product.from_dict(p) for p in sample_products])


class FakeGateway:
    """Stand-in image gateway recording the ids it was asked for."""

    def __init__(self, images=None, configured=True):
        self.images = images or {}
        self.configured = configured
        self.calls = []

    def fetch_images(self, product_id):
        self.calls.append(product_id)
        return list(self.images.get(product_id, []))

    def fetch_images_batch(self, product_ids):
        ids = [str(pid) for pid in product_ids]
        self.calls.extend(ids)
        return {pid: list(self.images.get(pid, [])) for pid in ids}


@pytest.fixture
def fake_gateway():
    from images import ImageRef

    return FakeGateway(
        images={
            "p1": [ImageRef(url="https://res.example/p1/a.jpg", id="p1/a", width=800, height=600)],
        }
    )


@pytest.fixture
def client(catalog_path, fake_gateway, monkeypatch):
    """Flask test client reading the sample catalog."""
    from app import app

    monkeypatch.setitem(app.config, "CATALOG_PATH", str(catalog_path))
    monkeypatch.setitem(app.extensions, "image_gateway", fake_gateway)
    app.config["TESTING"] = True

    with app.test_client() as test_client:
        yield test_client
