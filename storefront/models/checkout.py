"""Checkout models for the storefront"""

from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class CustomerDetails(BaseModel):
    """Delivery details entered at checkout"""
    model_config = ConfigDict(frozen=True)

    name: str
    phone: str
    city: str
    address: str
    notes: str = ""


class CheckoutRequest(BaseModel):
    """Request to checkout the current cart.

    Fields default to empty so that missing values are reported by the
    checkout validator as one error listing every missing field.
    """
    customer_name: str = ""
    phone: str = ""
    city: str = ""
    address: str = ""
    notes: str = ""

    def to_customer(self) -> CustomerDetails:
        return CustomerDetails(
            name=self.customer_name,
            phone=self.phone,
            city=self.city,
            address=self.address,
            notes=self.notes,
        )


class OrderItem(BaseModel):
    """Item in an order, amounts in minor units"""
    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str
    unit_price: int
    quantity: int
    line_subtotal: int


class Order(BaseModel):
    """Placed order, amounts in minor units"""
    model_config = ConfigDict(frozen=True)

    id: str
    tracking_number: str
    customer: CustomerDetails
    items: tuple[OrderItem, ...]
    subtotal: int
    delivery_fee: int
    total: int
    currency: str = "MAD"
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime
    updated_at: datetime


class CheckoutResponse(BaseModel):
    """Response from checkout"""
    success: bool
    order: Optional[Order] = None
    cart_cleared: bool = False
    error_message: Optional[str] = None
