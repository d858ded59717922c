"""Tests for the dress catalog filters and selections."""
from __future__ import annotations

import json
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from components.dress_catalog import (
    CatalogError,
    DressFilter,
    DressNotFound,
    DuplicateSelectionError,
    SelectionNotFound,
    add_category,
    add_dress,
    add_selection,
    categories,
    delete_dress,
    filter_dresses,
    load_dresses,
    normalize_dress,
    remove_selection,
    sizes,
    update_dress,
)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def dresses():
    raw = [
        {"id": 1, "name": "Satin Slip", "description": "Bias-cut satin.", "category": "Evening",
         "size": "S", "color": "Black", "price": 129, "inStock": True, "createdAt": "2025-03-01"},
        {"id": 2, "name": "Tiered Maxi", "description": "Cotton tiers.", "category": "Casual",
         "size": "M", "color": "Cream", "price": "98.5", "inStock": True, "createdAt": "2025-03-04"},
        {"id": 3, "name": "Velvet Gown", "description": "Velvet with satin trim.", "category": "Evening",
         "size": "M", "color": "Burgundy", "price": 320, "inStock": False, "createdAt": "2025-02-20"},
    ]
    return [normalize_dress(d) for d in raw]


class TestNormalize:
    def test_camel_case_and_types(self, dresses):
        maxi = dresses[1]
        assert maxi["price"] == 98.5
        assert maxi["in_stock"] is True
        assert maxi["created_at"] == "2025-03-04"
        assert maxi["image_url"] == ""

    def test_defaults(self):
        d = normalize_dress({"name": "Bare"})
        assert d["price"] == 0.0
        assert d["in_stock"] is True
        assert d["category"] == ""

    def test_explicit_nulls_become_empty_strings(self):
        d = normalize_dress({"id": 9, "name": None, "description": None, "category": None,
                             "imageUrl": None, "createdAt": None, "inStock": None, "price": None})
        for key in ("name", "description", "category", "size", "color", "image_url", "created_at"):
            assert d[key] == ""
        assert d["in_stock"] is True
        assert d["price"] == 0.0

    def test_null_fields_filter_and_sort(self, dresses):
        odd = normalize_dress({"id": 7, "name": None, "description": None, "createdAt": None, "category": "Evening"})
        mixed = dresses + [odd]
        assert filter_dresses(mixed, DressFilter(search="satin"))[0]["id"] == 1
        assert [d["id"] for d in filter_dresses(mixed, DressFilter(category="Evening"))] == [1, 3, 7]

    def test_bundled_catalog(self):
        catalog = load_dresses(PROJECT_ROOT)
        assert len(catalog) == 6
        assert all("in_stock" in d for d in catalog)

    def test_missing_catalog(self, tmp_path):
        assert load_dresses(tmp_path) == []


class TestFilter:
    def test_no_filter_sorted_newest_first(self, dresses):
        assert [d["id"] for d in filter_dresses(dresses, DressFilter())] == [2, 1, 3]

    def test_category_case_insensitive(self, dresses):
        assert [d["id"] for d in filter_dresses(dresses, DressFilter(category="evening"))] == [1, 3]

    def test_size_and_color(self, dresses):
        assert [d["id"] for d in filter_dresses(dresses, DressFilter(size="m", color="BURGUNDY"))] == [3]

    def test_price_range_inclusive(self, dresses):
        hits = filter_dresses(dresses, DressFilter(min_price=98.5, max_price=129))
        assert [d["id"] for d in hits] == [2, 1]

    def test_in_stock(self, dresses):
        assert [d["id"] for d in filter_dresses(dresses, DressFilter(in_stock=False))] == [3]

    def test_search_name_and_description(self, dresses):
        assert [d["id"] for d in filter_dresses(dresses, DressFilter(search="SATIN"))] == [1, 3]

    def test_facets(self, dresses):
        assert categories(dresses) == ["Casual", "Evening"]
        assert sizes(dresses) == ["M", "S"]


class TestSelections:
    def test_add_prepends(self, dresses):
        sels = add_selection([], dresses[0], "for the party")
        sels = add_selection(sels, dresses[2])
        assert [s["dress_id"] for s in sels] == [3, 1]
        assert [s["id"] for s in sels] == [2, 1]
        assert sels[1]["notes"] == "for the party"
        assert sels[0]["dress_name"] == "Velvet Gown"
        assert sels[0]["dress_price"] == 320.0

    def test_duplicate_rejected(self, dresses):
        sels = add_selection([], dresses[0])
        with pytest.raises(DuplicateSelectionError):
            add_selection(sels, dresses[0])

    def test_remove(self, dresses):
        sels = add_selection(add_selection([], dresses[0]), dresses[1])
        left = remove_selection(sels, 1)
        assert [s["dress_id"] for s in left] == [2]
        with pytest.raises(SelectionNotFound):
            remove_selection(left, 1)

    def test_selection_json_serializable(self, dresses):
        json.dumps(add_selection([], dresses[1]))


class TestCatalogManagement:
    def test_add_dress_uses_defaults_and_next_id(self, dresses):
        out = add_dress(dresses, {"name": "  Silk Column ", "price": 210})
        new = out[-1]
        assert new["id"] == 4
        assert new["name"] == "Silk Column"
        assert (new["category"], new["size"], new["color"]) == ("General", "M", "Black")
        assert new["in_stock"] is True
        assert new["created_at"]
        assert len(dresses) == 3

    def test_add_dress_requires_name(self, dresses):
        with pytest.raises(CatalogError, match="Name is required"):
            add_dress(dresses, {"name": "   "})

    def test_add_dress_rejects_negative_price(self, dresses):
        with pytest.raises(CatalogError, match="negative"):
            add_dress(dresses, {"name": "Bargain", "price": -5})

    def test_update_only_given_fields(self, dresses):
        out = update_dress(dresses, 2, price=75, in_stock=False, color=None)
        maxi = out[1]
        assert maxi["price"] == 75.0
        assert maxi["in_stock"] is False
        assert maxi["color"] == "Cream"
        assert maxi["name"] == "Tiered Maxi"
        assert dresses[1]["price"] == 98.5

    def test_update_rejects_unknown_and_missing(self, dresses):
        with pytest.raises(CatalogError, match="Unknown dress fields"):
            update_dress(dresses, 2, sku="X1")
        with pytest.raises(DressNotFound):
            update_dress(dresses, 99, name="Ghost")
        with pytest.raises(CatalogError, match="Name is required"):
            update_dress(dresses, 2, name="")

    def test_delete_dress(self, dresses):
        out = delete_dress(dresses, 1)
        assert [d["id"] for d in out] == [2, 3]
        with pytest.raises(DressNotFound):
            delete_dress(out, 1)

    def test_add_category(self, dresses):
        cats = add_category([], "Bridal", "Wedding gowns", sort_order=2)
        cats = add_category(cats, "Cocktail", sort_order=1)
        assert [c["name"] for c in cats] == ["Cocktail", "Bridal"]
        assert [c["id"] for c in cats] == [2, 1]
        assert categories(dresses, cats) == ["Bridal", "Casual", "Cocktail", "Evening"]

    def test_add_category_rejects_duplicates_and_blank(self):
        cats = add_category([], "Bridal")
        with pytest.raises(CatalogError, match="already exists"):
            add_category(cats, " bridal ")
        with pytest.raises(CatalogError, match="required"):
            add_category(cats, "")
