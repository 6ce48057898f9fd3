"""Cart storage for the storefront"""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, AsyncContextManager, AsyncIterator, Optional

from ..errors import InsufficientStockError
from ..models.cart import Cart, LineItem
from ..models.product import ProductSnapshot

if TYPE_CHECKING:
    from ..services.resolver import ProductResolver

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class KeyedLocks:
    """One asyncio.Lock per key, so unrelated keys never contend.

    An entry lives only while some task holds or waits for it.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class CartStore:
    """
    In-memory cart storage.

    Mutations of one cart run under that cart's lock, so concurrent deltas
    on the same cart are applied one after another. Callers only ever get
    copies of stored carts.
    """

    def __init__(self, resolver: "ProductResolver"):
        self.resolver = resolver
        self.carts: dict[str, Cart] = {}
        self._locks = KeyedLocks()

    @staticmethod
    def new_cart_id() -> str:
        return f"cart_{uuid.uuid4().hex}"

    def lock_for(self, cart_id: str) -> AsyncContextManager[None]:
        """Lock serializing every mutation of cart_id"""
        return self._locks.hold(cart_id)

    async def get(self, cart_id: Optional[str]) -> Optional[Cart]:
        """Get a copy of a cart by ID"""
        if not cart_id:
            return None
        cart = self.carts.get(cart_id)
        return cart.model_copy(deep=True) if cart else None

    async def upsert_delta(
        self,
        cart_id: Optional[str],
        variant_id: str,
        quantity_delta: int,
    ) -> Cart:
        """
        Add quantity_delta to a line, creating the cart or line as needed.

        A line whose quantity drops to zero or below is removed.

        Raises:
            ProductNotFoundError: the variant cannot be resolved for a new line
            InsufficientStockError: the new quantity exceeds known stock
        """
        cart_id = cart_id or self.new_cart_id()
        async with self.lock_for(cart_id):
            cart = await self._apply_delta(cart_id, variant_id, quantity_delta)
            return cart.model_copy(deep=True)

    async def set_quantity(self, cart_id: Optional[str], variant_id: str, quantity: int) -> Cart:
        """Set a line's absolute quantity; zero or less removes it"""
        cart_id = cart_id or self.new_cart_id()
        async with self.lock_for(cart_id):
            stored = self.carts.get(cart_id)
            current = stored.quantity_of(variant_id) if stored else 0
            target = max(quantity, 0)
            cart = await self._apply_delta(cart_id, variant_id, target - current)
            return cart.model_copy(deep=True)

    async def remove_item(self, cart_id: Optional[str], variant_id: str) -> Cart:
        """Remove an item from the cart"""
        return await self.set_quantity(cart_id, variant_id, 0)

    async def clear(self, cart_id: Optional[str]) -> bool:
        """Delete a cart. Returns False when there was nothing to delete."""
        if not cart_id:
            return False
        async with self.lock_for(cart_id):
            return self.discard(cart_id)

    def discard(self, cart_id: str) -> bool:
        """Delete a cart; the caller must hold lock_for(cart_id)"""
        if cart_id in self.carts:
            del self.carts[cart_id]
            logger.info(f"Cart {cart_id} cleared")
            return True
        return False

    async def _apply_delta(self, cart_id: str, variant_id: str, quantity_delta: int) -> Cart:
        now = _now()
        existing_cart = self.carts.get(cart_id)
        cart = (
            existing_cart.model_copy(deep=True)
            if existing_cart
            else Cart(id=cart_id, line_items=[], created_at=now, updated_at=now)
        )

        item = cart.find_item(variant_id)
        if item:
            new_quantity = item.quantity + quantity_delta
            if new_quantity <= 0:
                cart.line_items = [i for i in cart.line_items if i.variant_id != variant_id]
                logger.debug(f"Removed {variant_id} from cart {cart_id}")
            elif quantity_delta != 0:
                snapshot = await self.resolver.resolve(variant_id) or item.product_snapshot
                if quantity_delta > 0:
                    self._check_stock(variant_id, new_quantity, snapshot)
                item.quantity = new_quantity
                item.product_snapshot = snapshot
        elif quantity_delta > 0:
            snapshot = await self.resolver.require(variant_id)
            self._check_stock(variant_id, quantity_delta, snapshot)
            cart.line_items.append(
                LineItem(
                    variant_id=variant_id,
                    quantity=quantity_delta,
                    product_snapshot=snapshot,
                )
            )
            logger.info(f"Added {quantity_delta}x {snapshot.name} to cart {cart_id}")

        cart.updated_at = now
        if existing_cart is None and not cart.line_items:
            # Nothing to keep; removals on a missing cart must not create one
            return cart
        self.carts[cart_id] = cart
        logger.debug(f"Cart {cart_id} now has {len(cart.line_items)} items")
        return cart

    @staticmethod
    def _check_stock(variant_id: str, quantity: int, snapshot: ProductSnapshot) -> None:
        if snapshot.stock is not None and quantity > snapshot.stock:
            raise InsufficientStockError(variant_id, quantity, snapshot.stock)
