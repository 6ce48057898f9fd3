"""Tests for product documents, snapshots and the local catalog."""

from decimal import Decimal

import pytest

from storefront.database.products import LocalCatalog, PRODUCTS, parse_document
from storefront.errors import TransientSourceError
from storefront.models.product import (
    ProductDocument,
    product_id_from_variant,
    to_minor_units,
    variant_id_for,
)

from .conftest import run


class TestVariantConvention:
    def test_variant_id_appends_suffix(self):
        assert variant_id_for("p1") == "p1-v1"

    def test_product_id_strips_trailing_suffix(self):
        assert product_id_from_variant("p1-v1") == "p1"

    def test_identifier_without_suffix_passes_through(self):
        assert product_id_from_variant("p1") == "p1"

    def test_suffix_only_stripped_at_end(self):
        assert product_id_from_variant("p1-v1-extra") == "p1-v1-extra"


class TestMinorUnits:
    @pytest.mark.parametrize(
        "amount,expected",
        [
            ("100", 10000),
            ("100.00", 10000),
            ("49.99", 4999),
            ("0.005", 1),
            ("19.995", 2000),
            ("0", 0),
        ],
    )
    def test_rounds_half_up(self, amount, expected):
        assert to_minor_units(Decimal(amount)) == expected

    def test_float_price_does_not_drift(self):
        doc = ProductDocument(id="x", price=0.29)
        assert doc.to_snapshot().price_minor_units == 29


class TestSnapshot:
    def test_defaults_for_sparse_document(self):
        snapshot = ProductDocument(id="p9", price=10).to_snapshot()
        assert snapshot.name == "Unnamed Product"
        assert snapshot.slug == "p9"
        assert snapshot.images == []
        assert snapshot.stock is None
        assert snapshot.variant_id == "p9-v1"

    def test_non_list_images_become_empty(self):
        doc = ProductDocument(id="p9", price=10, images="not-a-list")
        assert doc.images == []

    def test_negative_price_is_rejected(self):
        with pytest.raises(TransientSourceError):
            parse_document("p9", {"price": -1})

    def test_missing_price_is_rejected(self):
        with pytest.raises(TransientSourceError):
            parse_document("p9", {"name": "No price"})


class TestLocalCatalog:
    def test_get_by_id(self, catalog):
        doc = run(catalog.get_product("p1"))
        assert doc.id == "p1"
        assert doc.to_snapshot().price_minor_units == 10000

    def test_get_by_slug(self, catalog):
        doc = run(catalog.get_product("rose-de-taif"))
        assert doc.id == "p2"

    def test_unknown_product(self, catalog):
        assert run(catalog.get_product("nope")) is None

    def test_list_by_category(self, catalog):
        docs = run(catalog.list_products_by_category("oriental"))
        assert [d.id for d in docs] == ["p1", "p4"]

    def test_list_by_category_respects_limit(self, catalog):
        docs = run(catalog.list_products_by_category("oriental", limit=1))
        assert len(docs) == 1

    def test_inactive_product_still_resolves(self, catalog):
        catalog.put("p9", {"name": "Retired Blend", "price": 30, "is_active": False})
        doc = run(catalog.get_product("p9"))
        assert doc.is_active is False
        assert doc.to_snapshot().price_minor_units == 3000

    def test_put_replaces_document(self, catalog):
        catalog.put("p1", {"name": "Oud Royal", "price": 150})
        assert run(catalog.get_product("p1")).to_snapshot().price_minor_units == 15000

    def test_default_seed_catalog_is_valid(self):
        catalog = LocalCatalog()
        for doc_id in PRODUCTS:
            assert run(catalog.get_product(doc_id)).id == doc_id
