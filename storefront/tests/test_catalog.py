"""Test catalog loading, lookups and category hierarchy queries."""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from catalog import Catalog, load_products
from models import Product


class TestLoadProducts:
    """Tests for load_products()."""

    def test_loads_in_file_order(self, catalog_path):
        products = load_products(catalog_path)
        assert [p.id for p in products] == ["p1", "p2", "p3", "p4", "p5"]

    def test_missing_file_gives_empty_list(self, tmp_path):
        assert load_products(tmp_path / "nope.json") == []

    def test_invalid_json_gives_empty_list(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{not json", encoding="utf-8")
        assert load_products(path) == []

    def test_non_list_top_level_gives_empty_list(self, tmp_path):
        path = tmp_path / "object.json"
        path.write_text(json.dumps({"id": "p1"}), encoding="utf-8")
        assert load_products(path) == []

    def test_non_object_entries_skipped(self, tmp_path):
        path = tmp_path / "mixed.json"
        path.write_text(json.dumps([{"id": "a", "title": "A"}, "junk", 3]), encoding="utf-8")
        products = load_products(path)
        assert [p.id for p in products] == ["a"]

    def test_numeric_ids_normalised_to_str(self, tmp_path):
        path = tmp_path / "numeric.json"
        path.write_text(json.dumps([{"id": 7, "title": "Seven"}]), encoding="utf-8")
        products = load_products(path)
        assert products[0].id == "7"

    def test_deeply_nested_json_gives_empty_list(self, tmp_path):
        path = tmp_path / "nested.json"
        path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
        assert load_products(path) == []
        assert len(Catalog.load(path)) == 0

    def test_catalog_load_is_fail_open(self, tmp_path):
        catalog = Catalog.load(tmp_path / "missing.json")
        assert len(catalog) == 0
        assert catalog.all() == []


class TestProductModel:
    """Tests for Product.from_dict()."""

    def test_extra_fields_kept_in_raw(self):
        product = Product.from_dict({"id": "x", "title": "X", "description": "Opis"})
        assert product.raw["description"] == "Opis"
        assert product.to_dict()["description"] == "Opis"

    def test_type_field_mapped(self):
        product = Product.from_dict({"id": "x", "title": "X", "type": "Peleti"})
        assert product.product_type == "Peleti"

    @pytest.mark.parametrize("sale_price,expected", [("/", False), (None, False), ("", False), ("990", True)])
    def test_on_sale(self, sale_price, expected):
        product = Product.from_dict({"id": "x", "title": "X", "price": "1000", "salePrice": sale_price})
        assert product.on_sale is expected


class TestLookups:
    """Tests for by_id, find_by_slug and recommendations_for."""

    def test_by_id(self, catalog):
        assert catalog.by_id("p2").title == "Konzerva za mačke"

    def test_by_id_accepts_numbers(self):
        catalog = Catalog([Product.from_dict({"id": 5, "title": "Five"})])
        assert catalog.by_id(5).title == "Five"

    def test_by_id_missing(self, catalog):
        assert catalog.by_id("zzz") is None
        assert catalog.by_id(None) is None

    def test_find_by_slug(self, catalog):
        assert catalog.find_by_slug("konzerva-za-macke").id == "p2"

    def test_find_by_slug_cyrillic_title(self, catalog):
        assert catalog.find_by_slug("peleti-za-ribice").id == "p3"

    def test_find_by_slug_is_case_sensitive(self, catalog):
        assert catalog.find_by_slug("Konzerva-za-macke") is None

    def test_find_by_slug_empty(self, catalog):
        assert catalog.find_by_slug("") is None

    def test_find_by_slug_first_match_wins(self):
        catalog = Catalog(
            [
                Product.from_dict({"id": "first", "title": "Loptica"}),
                Product.from_dict({"id": "second", "title": "LOPTICA!"}),
            ]
        )
        assert catalog.find_by_slug("loptica").id == "first"

    def test_recommendations_exclude_self(self, catalog):
        product = catalog.by_id("p1")
        recs = catalog.recommendations_for(product, 8)
        assert product not in recs
        assert [p.id for p in recs] == ["p2"]

    def test_recommendations_keep_catalog_order_and_limit(self):
        products = [
            Product.from_dict({"id": str(i), "title": f"Item {i}", "category": "Igračke"})
            for i in range(12)
        ]
        catalog = Catalog(products)
        recs = catalog.recommendations_for(products[3], 8)
        assert len(recs) == 8
        assert [p.id for p in recs] == ["0", "1", "2", "4", "5", "6", "7", "8"]

    def test_recommendations_zero_limit(self, catalog):
        assert catalog.recommendations_for(catalog.by_id("p1"), 0) == []


class TestCategoryHierarchy:
    """Tests for category_nodes, has_category_path and category_tree."""

    def test_category_nodes_distinct(self, catalog):
        nodes = catalog.category_nodes()
        # p4 and p5 share a triple
        assert len(nodes) == 4
        assert {"category_slug", "subcategory_slug", "type_slug"} <= set(nodes.columns)

    def test_category_nodes_empty_catalog(self):
        nodes = Catalog([]).category_nodes()
        assert nodes.empty

    @pytest.mark.parametrize(
        "segments",
        [
            ["pet-food"],
            ["pet-food", "fish-food"],
            ["pet-food", "fish-food", "pellets"],
            ["hrana-za-kucne-ljubimce", "hrana-za-pse", "suva-hrana"],
        ],
    )
    def test_existing_paths(self, catalog, segments):
        assert catalog.has_category_path(segments)

    @pytest.mark.parametrize(
        "segments",
        [
            [],
            ["fish-food"],
            ["pet-food", "dog-food"],
            ["pet-food", "fish-food", "flakes"],
            ["hrana-za-kucne-ljubimce", "hrana-za-pse", "vlazna-hrana"],
            ["pet-food", "fish-food", "pellets", "extra"],
        ],
    )
    def test_missing_paths(self, catalog, segments):
        assert not catalog.has_category_path(segments)

    def test_segments_lowercased(self, catalog):
        assert catalog.has_category_path(["Pet-Food", "FISH-FOOD"])

    def test_empty_catalog_has_no_paths(self):
        assert not Catalog([]).has_category_path(["pet-food"])

    def test_slug_collision_is_single_target(self):
        catalog = Catalog(
            [
                Product.from_dict({"id": "a", "title": "A", "category": "Pet Food"}),
                Product.from_dict({"id": "b", "title": "B", "category": "pet-food"}),
            ]
        )
        assert catalog.has_category_path(["pet-food"])
        assert [p.id for p in catalog.products_in(["pet-food"])] == ["a", "b"]

    def test_products_in(self, catalog):
        ids = [p.id for p in catalog.products_in(["igracke-za-kucne-ljubimce", "igracke-za-pse"])]
        assert ids == ["p4", "p5"]

    def test_category_tree_structure(self, catalog):
        tree = catalog.category_tree()
        names = [node["name"] for node in tree]
        assert names == ["Hrana za kućne ljubimce", "Pet Food", "Igračke za kućne ljubimce"]

        food = tree[0]
        assert food["slug"] == "hrana-za-kucne-ljubimce"
        assert food["icon"] == "restaurant"
        assert food["data_attr"] == "hrana"
        assert [s["name"] for s in food["subcategories"]] == ["Hrana za pse", "Hrana za mačke"]
        assert food["subcategories"][0]["types"][0]["href"] == "/hrana-za-kucne-ljubimce/hrana-za-pse/suva-hrana"

    def test_category_tree_unknown_category_defaults(self, catalog):
        pet_food = catalog.category_tree()[1]
        assert pet_food["icon"] == "category"
        assert pet_food["data_attr"] == "petfood"

    def test_category_tree_types_sorted(self):
        catalog = Catalog(
            [
                Product.from_dict({"id": "1", "title": "1", "category": "C", "subcategory": "S", "type": "Zeta"}),
                Product.from_dict({"id": "2", "title": "2", "category": "C", "subcategory": "S", "type": "Alfa"}),
            ]
        )
        types = catalog.category_tree()[0]["subcategories"][0]["types"]
        assert [t["name"] for t in types] == ["Alfa", "Zeta"]
