import asyncio
from datetime import datetime, timezone
from typing import Optional

import pytest

from storefront.core.config import Settings
from storefront.core.container import build_services
from storefront.database.products import LocalCatalog
from storefront.errors import TransientSourceError
from storefront.models.cart import Cart, LineItem
from storefront.models.product import ProductSnapshot

DOCUMENTS = {
    "p1": {
        "name": "Oud Royal",
        "slug": "oud-royal",
        "price": 100.00,
        "images": ["/img/oud-1.jpg", "/img/oud-2.jpg"],
        "category_id": "oriental",
        "stock": 50,
    },
    "p2": {
        "name": "Rose de Taif",
        "slug": "rose-de-taif",
        "price": "49.99",
        "images": ["/img/rose.jpg"],
        "category_id": "floral",
        "stock": 20,
    },
    "p3": {
        "name": "Musk Blanc",
        "slug": "musk-blanc",
        "price": 12,
        "images": [],
        "category_id": "musk",
    },
    "p4": {
        "name": "Ambre Nuit",
        "slug": "ambre-nuit",
        "price": 520.00,
        "images": ["/img/ambre.jpg"],
        "category_id": "oriental",
        "stock": 2,
    },
}


def run(coro):
    return asyncio.run(coro)


class FakeReader:
    """Catalog reader with switchable failure modes"""

    def __init__(
        self,
        name: str = "fake",
        documents: Optional[dict] = None,
        fail: bool = False,
        delay: float = 0.0,
    ):
        self.name = name
        self.catalog = LocalCatalog(DOCUMENTS if documents is None else documents)
        self.fail = fail
        self.delay = delay
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0

    async def get_product(self, id_or_slug):
        self.calls.append(id_or_slug)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.fail:
                raise TransientSourceError(f"{self.name} is down")
            return await self.catalog.get_product(id_or_slug)
        finally:
            self.active -= 1

    async def list_products_by_category(self, category_id, limit=50):
        return await self.catalog.list_products_by_category(category_id, limit)


def make_cart(*lines, cart_id="cart_test") -> Cart:
    """Build a cart from (variant_id, quantity, price_minor_units) tuples"""
    now = datetime.now(timezone.utc)
    items = [
        LineItem(
            variant_id=variant_id,
            quantity=quantity,
            product_snapshot=ProductSnapshot(
                product_id=variant_id.removesuffix("-v1"),
                name="Cached",
                slug="cached",
                price_minor_units=price,
                images=["/img/cached.jpg"],
            ),
        )
        for variant_id, quantity, price in lines
    ]
    return Cart(id=cart_id, line_items=items, created_at=now, updated_at=now)


@pytest.fixture()
def settings():
    return Settings(
        cart_token_secret="test-secret",
        catalog_sources=["local"],
        source_timeout_seconds=0.2,
        enrichment_concurrency=4,
        enrichment_deadline_seconds=1.0,
    )


@pytest.fixture()
def catalog():
    return LocalCatalog(DOCUMENTS)


@pytest.fixture()
def services(settings, catalog):
    return build_services(settings, readers=[catalog])
