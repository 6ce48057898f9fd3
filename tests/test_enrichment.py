"""Tests for the cart enrichment pipeline."""

import asyncio

import pytest

from storefront.errors import TransientSourceError
from storefront.services.enrichment import CartEnrichmentPipeline
from storefront.services.resolver import CatalogSource, ProductResolver

from .conftest import FakeReader, make_cart, run


def make_pipeline(reader, concurrency=4, deadline=1.0, timeout=2.0):
    resolver = ProductResolver([CatalogSource(reader, timeout=timeout)])
    return CartEnrichmentPipeline(resolver, concurrency=concurrency, deadline=deadline)


class SelectiveReader(FakeReader):
    """Fails or stalls for chosen product IDs"""

    def __init__(self, failing=(), stalling=(), **kwargs):
        super().__init__(**kwargs)
        self.failing = set(failing)
        self.stalling = set(stalling)

    async def get_product(self, id_or_slug):
        if id_or_slug in self.failing:
            raise TransientSourceError("boom")
        if id_or_slug in self.stalling:
            await asyncio.sleep(10)
        return await super().get_product(id_or_slug)


class TestEnrich:
    def test_refreshes_snapshots(self):
        cart = make_cart(("p1-v1", 1, 1), ("p2-v1", 2, 1))

        enriched = run(make_pipeline(FakeReader()).enrich(cart))

        prices = [i.product_snapshot.price_minor_units for i in enriched.line_items]
        assert prices == [10000, 4999]
        assert enriched.line_items[0].product_snapshot.name == "Oud Royal"
        assert enriched.line_items[0].product_snapshot.images == ["/img/oud-1.jpg", "/img/oud-2.jpg"]

    def test_preserves_order_and_count(self):
        cart = make_cart(("p4-v1", 1, 1), ("p2-v1", 1, 1), ("p3-v1", 1, 1), ("p1-v1", 1, 1))

        enriched = run(make_pipeline(FakeReader(delay=0.01)).enrich(cart))

        assert [i.variant_id for i in enriched.line_items] == ["p4-v1", "p2-v1", "p3-v1", "p1-v1"]
        assert [i.quantity for i in enriched.line_items] == [1, 1, 1, 1]

    def test_failed_item_keeps_cached_snapshot(self):
        cart = make_cart(("p1-v1", 1, 777), ("p2-v1", 1, 888))

        enriched = run(make_pipeline(SelectiveReader(failing={"p1"})).enrich(cart))

        assert len(enriched.line_items) == 2
        assert enriched.line_items[0].product_snapshot.price_minor_units == 777
        assert enriched.line_items[1].product_snapshot.price_minor_units == 4999

    def test_missing_product_keeps_cached_snapshot(self):
        cart = make_cart(("gone-v1", 1, 555))

        enriched = run(make_pipeline(FakeReader()).enrich(cart))

        assert enriched.line_items[0].product_snapshot.price_minor_units == 555

    def test_deadline_falls_back_to_cached(self):
        cart = make_cart(("p1-v1", 1, 111), ("p2-v1", 1, 222))
        pipeline = make_pipeline(SelectiveReader(stalling={"p2"}), deadline=0.1, timeout=30)

        enriched = run(pipeline.enrich(cart))

        prices = [i.product_snapshot.price_minor_units for i in enriched.line_items]
        assert prices == [10000, 222]

    def test_concurrency_is_bounded(self):
        reader = FakeReader(delay=0.02)
        cart = make_cart(*[(f"p{n}-v1", 1, 1) for n in (1, 2, 3, 4, 1, 2)])

        run(make_pipeline(reader, concurrency=2).enrich(cart))

        assert reader.max_active <= 2
        assert len(reader.calls) == 6

    def test_input_cart_is_not_modified(self):
        cart = make_cart(("p1-v1", 1, 1))
        run(make_pipeline(FakeReader()).enrich(cart))
        assert cart.line_items[0].product_snapshot.price_minor_units == 1

    def test_empty_cart(self):
        cart = make_cart()
        assert run(make_pipeline(FakeReader()).enrich(cart)).line_items == []

    def test_rejects_zero_concurrency(self):
        with pytest.raises(ValueError):
            make_pipeline(FakeReader(), concurrency=0)
