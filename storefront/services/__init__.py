# Storefront services

from .resolver import CatalogSource, ProductResolver, Resolution, ResolutionStatus
from .enrichment import CartEnrichmentPipeline
from .delivery import DeliveryPolicy
from .checkout import CheckoutProcessor, CheckoutResult, generate_tracking_number

__all__ = [
    "CatalogSource",
    "ProductResolver",
    "Resolution",
    "ResolutionStatus",
    "CartEnrichmentPipeline",
    "DeliveryPolicy",
    "CheckoutProcessor",
    "CheckoutResult",
    "generate_tracking_number",
]
