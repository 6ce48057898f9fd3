"""Service wiring, built once per process"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Optional

from ..database.carts import CartStore
from ..database.http_catalog import HttpCatalog
from ..database.orders import OrderRepository
from ..database.products import CatalogReader, LocalCatalog
from ..security.cart_token import CartTokenCodec
from ..services.checkout import CheckoutProcessor
from ..services.delivery import DeliveryPolicy
from ..services.enrichment import CartEnrichmentPipeline
from ..services.resolver import CatalogSource, ProductResolver
from .config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class Services:
    readers: list[CatalogReader]
    resolver: ProductResolver
    cart_store: CartStore
    enrichment: CartEnrichmentPipeline
    delivery: DeliveryPolicy
    orders: OrderRepository
    checkout: CheckoutProcessor
    tokens: CartTokenCodec
    currency: str = "MAD"

    async def close(self) -> None:
        for reader in self.readers:
            close = getattr(reader, "close", None)
            if close is not None:
                await close()


def build_reader(kind: str, settings: Settings) -> CatalogReader:
    """Create the catalog reader named by a catalog_sources entry"""
    if kind == "local":
        return LocalCatalog()
    if kind == "http":
        if not settings.catalog_api_url:
            raise ValueError("catalog source 'http' requires STOREFRONT_CATALOG_API_URL")
        return HttpCatalog(settings.catalog_api_url, timeout=settings.source_timeout_seconds)
    raise ValueError(f"Unknown catalog source: {kind}")


def build_services(
    settings: Settings,
    readers: Optional[list[CatalogReader]] = None,
    orders: Optional[OrderRepository] = None,
) -> Services:
    """Wire every storefront service from settings"""
    if readers is None:
        readers = [build_reader(kind, settings) for kind in settings.catalog_sources]

    resolver = ProductResolver(
        [CatalogSource(reader, timeout=settings.source_timeout_seconds) for reader in readers],
        not_found_is_final=settings.not_found_is_final,
    )
    cart_store = CartStore(resolver)
    enrichment = CartEnrichmentPipeline(
        resolver,
        concurrency=settings.enrichment_concurrency,
        deadline=settings.enrichment_deadline_seconds,
    )
    delivery = DeliveryPolicy(
        free_threshold=settings.free_delivery_threshold,
        flat_fee=settings.flat_delivery_fee,
        free_zone=settings.free_delivery_cities,
    )
    orders = orders or OrderRepository()
    checkout = CheckoutProcessor(
        cart_store,
        orders,
        enrichment,
        delivery,
        currency=settings.currency,
    )
    tokens = CartTokenCodec(
        settings.cart_token_secret,
        max_age=timedelta(days=settings.cart_token_max_age_days),
    )

    logger.info(f"Catalog sources: {[getattr(r, 'name', type(r).__name__) for r in readers]}")
    return Services(
        readers=readers,
        resolver=resolver,
        cart_store=cart_store,
        enrichment=enrichment,
        delivery=delivery,
        orders=orders,
        checkout=checkout,
        tokens=tokens,
        currency=settings.currency,
    )


@lru_cache()
def get_services() -> Services:
    """Get cached services instance"""
    return build_services(get_settings())
