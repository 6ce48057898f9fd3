"""Product models for the storefront"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

VARIANT_SUFFIX = "-v1"


def variant_id_for(product_id: str) -> str:
    """Every product has exactly one implicit variant"""
    return f"{product_id}{VARIANT_SUFFIX}"


def product_id_from_variant(variant_id: str) -> str:
    """Invert variant_id_for; identifiers without the suffix pass through"""
    if variant_id.endswith(VARIANT_SUFFIX):
        return variant_id[: -len(VARIANT_SUFFIX)]
    return variant_id


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount to integer minor units, rounding half up"""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class ProductDocument(BaseModel):
    """Product record as stored in the catalog"""
    id: str
    name: Optional[str] = None
    slug: Optional[str] = None
    description: str = ""
    price: Decimal = Field(ge=0)
    images: list[str] = []
    category_id: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    is_active: bool = True

    @field_validator("images", mode="before")
    @classmethod
    def _images_as_list(cls, value: Any) -> list:
        return value if isinstance(value, list) else []

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_text(cls, value: Any) -> Any:
        # Floats go through str() so 19.99 stays 19.99
        if isinstance(value, float):
            return str(value)
        return value

    def to_snapshot(self) -> "ProductSnapshot":
        return ProductSnapshot(
            product_id=self.id,
            name=self.name or "Unnamed Product",
            slug=self.slug or self.id,
            price_minor_units=to_minor_units(self.price),
            images=list(self.images),
            stock=self.stock,
        )


class ProductSnapshot(BaseModel):
    """Product fields cached on a cart line"""
    product_id: str
    name: str
    slug: str
    price_minor_units: int = Field(ge=0)
    images: list[str] = []
    stock: Optional[int] = None

    @property
    def variant_id(self) -> str:
        return variant_id_for(self.product_id)
