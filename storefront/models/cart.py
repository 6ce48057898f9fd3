"""Cart models for the storefront"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from .product import ProductSnapshot


class LineItem(BaseModel):
    """One variant and its quantity in a cart"""
    variant_id: str
    quantity: int = Field(ge=1)
    product_snapshot: ProductSnapshot

    @property
    def line_subtotal(self) -> int:
        return self.product_snapshot.price_minor_units * self.quantity


class Cart(BaseModel):
    """Shopping cart"""
    id: str
    line_items: list[LineItem] = []
    created_at: datetime
    updated_at: datetime

    def find_item(self, variant_id: str) -> Optional[LineItem]:
        return next(
            (item for item in self.line_items if item.variant_id == variant_id),
            None,
        )

    def quantity_of(self, variant_id: str) -> int:
        item = self.find_item(variant_id)
        return item.quantity if item else 0

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.line_items)

    @property
    def subtotal(self) -> int:
        return sum(item.line_subtotal for item in self.line_items)


class CartSummary(BaseModel):
    """Enriched cart with display totals, amounts in minor units"""
    cart: Optional[Cart] = None
    item_count: int = 0
    subtotal: int = 0
    delivery_fee: int = 0
    total: int = 0
    free_delivery: bool = False
    amount_until_free_delivery: int = 0
    currency: str = "MAD"


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    variant_id: str
    quantity: int = Field(default=1, gt=0)


class UpdateCartItemRequest(BaseModel):
    """Request to set an item's quantity; zero or less removes it"""
    quantity: int


class CartResponse(BaseModel):
    """Cart API response"""
    summary: CartSummary
    message: Optional[str] = None


class ClearCartResponse(BaseModel):
    success: bool
