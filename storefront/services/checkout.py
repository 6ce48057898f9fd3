"""
Checkout Processor

Turns a cart into an immutable order:

    draft -> validated -> persisted -> cart_cleared

The whole sequence runs under the cart's lock. Any failure before the order
is persisted leaves the cart untouched and nothing written.
"""

import logging
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from ..database.carts import CartStore
from ..database.orders import OrderRepository
from ..errors import (
    CartNotFoundError,
    CheckoutValidationError,
    EmptyCartError,
    PersistenceError,
)
from ..models.cart import Cart
from ..models.checkout import CustomerDetails, Order, OrderItem, OrderStatus
from .delivery import DeliveryPolicy
from .enrichment import CartEnrichmentPipeline

logger = logging.getLogger(__name__)

TRACKING_PREFIX = "TRK-"
TRACKING_ALPHABET = string.ascii_uppercase + string.digits
TRACKING_LENGTH = 10

REQUIRED_FIELDS = {
    "customer_name": "name",
    "phone": "phone",
    "city": "city",
    "address": "address",
}


def generate_tracking_number() -> str:
    """TRK- followed by 10 characters drawn uniformly from A-Z0-9"""
    return TRACKING_PREFIX + "".join(
        secrets.choice(TRACKING_ALPHABET) for _ in range(TRACKING_LENGTH)
    )


class CheckoutState(str, Enum):
    DRAFT = "draft"
    VALIDATED = "validated"
    PERSISTED = "persisted"
    CART_CLEARED = "cart_cleared"


@dataclass
class CheckoutAttempt:
    """One pass through the checkout state machine"""
    cart_id: str
    customer: CustomerDetails
    state: CheckoutState = CheckoutState.DRAFT
    cart: Optional[Cart] = None
    order: Optional[Order] = None
    history: list[CheckoutState] = field(default_factory=lambda: [CheckoutState.DRAFT])

    def advance(self, state: CheckoutState) -> None:
        logger.info(f"Checkout of cart {self.cart_id}: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def reset(self) -> None:
        self.state = CheckoutState.DRAFT
        self.order = None
        self.history.append(CheckoutState.DRAFT)


@dataclass
class CheckoutResult:
    order: Order
    cart_cleared: bool


def validate_customer(customer: CustomerDetails) -> CustomerDetails:
    """Trim customer fields and check the required ones are present"""
    trimmed = CustomerDetails(
        name=customer.name.strip(),
        phone=customer.phone.strip(),
        city=customer.city.strip(),
        address=customer.address.strip(),
        notes=customer.notes.strip(),
    )
    missing = [
        field_name
        for field_name, attr in REQUIRED_FIELDS.items()
        if not getattr(trimmed, attr)
    ]
    if missing:
        raise CheckoutValidationError(
            f"Missing required fields: {', '.join(missing)}",
            missing_fields=missing,
        )
    return trimmed


class CheckoutProcessor:
    """Validates checkout input, prices the cart and places the order"""

    def __init__(
        self,
        cart_store: CartStore,
        orders: OrderRepository,
        enrichment: CartEnrichmentPipeline,
        delivery: DeliveryPolicy,
        currency: str = "MAD",
    ):
        self.cart_store = cart_store
        self.orders = orders
        self.enrichment = enrichment
        self.delivery = delivery
        self.currency = currency

    async def checkout(self, cart_id: Optional[str], customer: CustomerDetails) -> CheckoutResult:
        """
        Place an order for the cart.

        Raises:
            CartNotFoundError: no cart for cart_id, e.g. already checked out
            EmptyCartError: the cart has no lines
            CheckoutValidationError: required customer fields are blank
            PersistenceError: the order could not be saved; cart untouched
        """
        if not cart_id:
            raise CartNotFoundError(cart_id)

        attempt = CheckoutAttempt(cart_id=cart_id, customer=customer)
        async with self.cart_store.lock_for(cart_id):
            try:
                self._validate(attempt)
                attempt.cart = await self._load_cart(cart_id)
                attempt.advance(CheckoutState.VALIDATED)

                attempt.order = self._build_order(attempt.cart, attempt.customer)
                await self._persist(attempt.order)
                attempt.advance(CheckoutState.PERSISTED)
            except Exception:
                attempt.reset()
                raise

            cart_cleared = self._clear_cart(cart_id, attempt.order)
            if cart_cleared:
                attempt.advance(CheckoutState.CART_CLEARED)

        logger.info(
            f"Order {attempt.order.id} created: {attempt.order.total} {self.currency} "
            f"({len(attempt.order.items)} items, tracking {attempt.order.tracking_number})"
        )
        return CheckoutResult(order=attempt.order, cart_cleared=cart_cleared)

    def _validate(self, attempt: CheckoutAttempt) -> None:
        attempt.customer = validate_customer(attempt.customer)

    async def _load_cart(self, cart_id: str) -> Cart:
        cart = await self.cart_store.get(cart_id)
        if cart is None:
            raise CartNotFoundError(cart_id)
        if not cart.line_items:
            raise EmptyCartError(cart_id)

        enriched = await self.enrichment.enrich(cart)
        bad_lines = [item.variant_id for item in enriched.line_items if item.quantity < 1]
        if bad_lines:
            raise CheckoutValidationError(
                f"Invalid quantity for: {', '.join(bad_lines)}",
                missing_fields=[],
            )
        return enriched

    def _build_order(self, cart: Cart, customer: CustomerDetails) -> Order:
        items = tuple(
            OrderItem(
                product_id=line.product_snapshot.product_id,
                name=line.product_snapshot.name,
                unit_price=line.product_snapshot.price_minor_units,
                quantity=line.quantity,
                line_subtotal=line.product_snapshot.price_minor_units * line.quantity,
            )
            for line in cart.line_items
        )
        subtotal = sum(item.line_subtotal for item in items)
        delivery_fee = self.delivery.fee(subtotal, customer.city)
        now = datetime.now(timezone.utc)

        return Order(
            id=self.orders.new_order_id(),
            tracking_number=generate_tracking_number(),
            customer=customer,
            items=items,
            subtotal=subtotal,
            delivery_fee=delivery_fee,
            total=subtotal + delivery_fee,
            currency=self.currency,
            status=OrderStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    async def _persist(self, order: Order) -> None:
        try:
            await self.orders.save(order)
        except Exception as e:
            logger.error(f"Failed to persist order {order.id}: {e}")
            raise PersistenceError(f"Order could not be saved: {e}") from e

    def _clear_cart(self, cart_id: str, order: Order) -> bool:
        # The order already exists; a failed clear is reported, never rolled back
        try:
            self.cart_store.discard(cart_id)
        except Exception:
            logger.exception(f"Order {order.id} placed but cart {cart_id} could not be cleared")
            return False
        return True
