# Storefront Models

from .product import (
    ProductDocument,
    ProductSnapshot,
    variant_id_for,
    product_id_from_variant,
    to_minor_units,
)
from .cart import (
    Cart,
    LineItem,
    CartSummary,
    AddToCartRequest,
    UpdateCartItemRequest,
    CartResponse,
    ClearCartResponse,
)
from .checkout import (
    Order,
    OrderItem,
    OrderStatus,
    CustomerDetails,
    CheckoutRequest,
    CheckoutResponse,
)

__all__ = [
    "ProductDocument",
    "ProductSnapshot",
    "variant_id_for",
    "product_id_from_variant",
    "to_minor_units",
    "Cart",
    "LineItem",
    "CartSummary",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartResponse",
    "ClearCartResponse",
    "Order",
    "OrderItem",
    "OrderStatus",
    "CustomerDetails",
    "CheckoutRequest",
    "CheckoutResponse",
]
