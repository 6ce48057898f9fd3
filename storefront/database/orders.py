"""Order storage for the storefront"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from ..models.checkout import Order, OrderStatus


class OrderRepository:
    """In-memory order storage"""

    def __init__(self):
        self.orders: dict[str, Order] = {}

    @staticmethod
    def new_order_id() -> str:
        return f"ORD-{uuid.uuid4().hex[:8].upper()}"

    async def save(self, order: Order) -> Order:
        """Persist a newly placed order"""
        if order.id in self.orders:
            raise ValueError(f"Order {order.id} already exists")
        self.orders[order.id] = order
        return order

    async def get(self, order_id: str) -> Optional[Order]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    async def update_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        """Update order status"""
        order = self.orders.get(order_id)
        if not order:
            return None

        updated = order.model_copy(
            update={"status": status, "updated_at": datetime.now(timezone.utc)}
        )
        self.orders[order_id] = updated
        return updated

    async def list_orders(self, limit: int = 50) -> list[Order]:
        """List recent orders"""
        orders = list(self.orders.values())
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders[:limit]
