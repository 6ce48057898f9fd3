"""Storefront error types"""

from typing import Optional


class StorefrontError(Exception):
    """Base exception for storefront errors"""
    pass


class CartNotFoundError(StorefrontError):
    """No cart exists for the given identifier"""

    def __init__(self, cart_id: Optional[str]):
        self.cart_id = cart_id
        super().__init__(f"Cart not found: {cart_id}")


class EmptyCartError(StorefrontError):
    """Cart has no line items"""

    def __init__(self, cart_id: str):
        self.cart_id = cart_id
        super().__init__(f"Cart {cart_id} is empty")


class TransientSourceError(StorefrontError):
    """A catalog source is unreachable, slow or returned garbage"""
    pass


class ProductNotFoundError(StorefrontError):
    """No catalog source knows the requested product"""

    def __init__(self, variant_id: str, message: Optional[str] = None):
        self.variant_id = variant_id
        super().__init__(message or f"Product not found for variant {variant_id}")


class SourcesExhaustedError(ProductNotFoundError):
    """Every catalog source failed transiently"""

    def __init__(self, variant_id: str):
        super().__init__(
            variant_id,
            f"No catalog source could resolve variant {variant_id}",
        )


class InsufficientStockError(StorefrontError):
    """Requested quantity exceeds the stock count"""

    def __init__(self, variant_id: str, requested: int, available: int):
        self.variant_id = variant_id
        self.requested = requested
        self.available = available
        super().__init__(f"Insufficient stock. Available: {available}")


class CheckoutValidationError(StorefrontError):
    """Customer details failed checkout validation"""

    def __init__(self, message: str, missing_fields: Optional[list[str]] = None):
        self.message = message
        self.missing_fields = missing_fields or []
        super().__init__(message)


class PersistenceError(StorefrontError):
    """Order could not be written"""
    pass
