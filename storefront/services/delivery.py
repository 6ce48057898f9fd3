"""Delivery fee policy, amounts in minor units"""

from typing import Iterable, Optional

FREE_THRESHOLD = 50000
FLAT_FEE = 2500
FREE_ZONE = ("Rabat", "Sale")


def _normalize_city(city: Optional[str]) -> str:
    return (city or "").strip().casefold()


class DeliveryPolicy:
    """Free delivery above a subtotal threshold or inside the free zone,
    a flat fee otherwise."""

    def __init__(
        self,
        free_threshold: int = FREE_THRESHOLD,
        flat_fee: int = FLAT_FEE,
        free_zone: Iterable[str] = FREE_ZONE,
    ):
        self.free_threshold = free_threshold
        self.flat_fee = flat_fee
        self.free_zone = frozenset(_normalize_city(c) for c in free_zone)

    def is_free(self, subtotal: int, city: Optional[str]) -> bool:
        return subtotal >= self.free_threshold or _normalize_city(city) in self.free_zone

    def fee(self, subtotal: int, city: Optional[str]) -> int:
        """Authoritative fee for a subtotal delivered to city"""
        return 0 if self.is_free(subtotal, city) else self.flat_fee

    def estimate(self, subtotal: int, city: Optional[str] = None) -> int:
        """Display estimate; the destination may still be unknown"""
        return self.fee(subtotal, city)

    def amount_until_free(self, subtotal: int) -> int:
        """How much more to spend before the threshold makes delivery free"""
        return max(self.free_threshold - subtotal, 0)
