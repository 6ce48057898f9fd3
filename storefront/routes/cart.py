"""Cart API routes for the storefront"""

import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Header, HTTPException, Query, Response

from ..core.config import settings
from ..core.container import Services, get_services
from ..errors import InsufficientStockError, ProductNotFoundError
from ..models.cart import (
    AddToCartRequest,
    Cart,
    CartResponse,
    CartSummary,
    ClearCartResponse,
    UpdateCartItemRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def get_cart_id(
    cart_token: Optional[str] = Cookie(None, alias=settings.cart_cookie_name),
    x_cart_token: Optional[str] = Header(None),
    services: Services = Depends(get_services),
) -> Optional[str]:
    """Extract the cart ID from the cart token cookie or header"""
    return services.tokens.read(cart_token or x_cart_token)


def set_cart_cookie(response: Response, services: Services, cart_id: str) -> None:
    token = services.tokens.issue(cart_id)
    response.headers["X-Cart-Token"] = token
    response.set_cookie(
        settings.cart_cookie_name,
        token,
        max_age=settings.cart_token_max_age_seconds,
        httponly=True,
        secure=settings.cart_cookie_secure,
        samesite="lax",
    )


def clear_cart_cookie(response: Response) -> None:
    response.delete_cookie(settings.cart_cookie_name)


def summarize(cart: Optional[Cart], services: Services, city: Optional[str] = None) -> CartSummary:
    """Display totals for an enriched cart"""
    if cart is None:
        return CartSummary(currency=services.currency)

    subtotal = cart.subtotal
    delivery_fee = services.delivery.estimate(subtotal, city)
    return CartSummary(
        cart=cart,
        item_count=cart.item_count,
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        total=subtotal + delivery_fee,
        free_delivery=delivery_fee == 0,
        amount_until_free_delivery=services.delivery.amount_until_free(subtotal),
        currency=services.currency,
    )


async def enriched_summary(
    cart: Optional[Cart], services: Services, city: Optional[str] = None
) -> CartSummary:
    if cart is None:
        return summarize(None, services, city)
    return summarize(await services.enrichment.enrich(cart), services, city)


@router.get("", response_model=CartResponse)
async def get_cart(
    city: Optional[str] = Query(None, description="Destination city for the delivery estimate"),
    cart_id: Optional[str] = Depends(get_cart_id),
    services: Services = Depends(get_services),
):
    """Get the current cart, enriched with up-to-date product data"""
    cart = await services.cart_store.get(cart_id)
    return CartResponse(summary=await enriched_summary(cart, services, city))


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    response: Response,
    cart_id: Optional[str] = Depends(get_cart_id),
    services: Services = Depends(get_services),
):
    """Add an item to the cart, creating the cart if needed"""
    try:
        cart = await services.cart_store.upsert_delta(
            cart_id, request.variant_id, request.quantity
        )
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if cart.id != cart_id:
        logger.info(f"Issued new cart {cart.id}")
    set_cart_cookie(response, services, cart.id)

    return CartResponse(
        summary=await enriched_summary(cart, services),
        message=f"Added {request.quantity}x {request.variant_id} to cart",
    )


@router.put("/items/{variant_id}", response_model=CartResponse)
async def update_cart_item(
    variant_id: str,
    request: UpdateCartItemRequest,
    response: Response,
    cart_id: Optional[str] = Depends(get_cart_id),
    services: Services = Depends(get_services),
):
    """Set an item's quantity; zero or less removes it"""
    if not cart_id:
        raise HTTPException(status_code=404, detail="Cart not found")

    try:
        cart = await services.cart_store.set_quantity(cart_id, variant_id, request.quantity)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CartResponse(summary=await enriched_summary(cart, services), message="Cart updated")


@router.delete("/items/{variant_id}", response_model=CartResponse)
async def remove_from_cart(
    variant_id: str,
    cart_id: Optional[str] = Depends(get_cart_id),
    services: Services = Depends(get_services),
):
    """Remove an item from the cart"""
    if not cart_id:
        raise HTTPException(status_code=404, detail="Cart not found")

    cart = await services.cart_store.remove_item(cart_id, variant_id)
    return CartResponse(summary=await enriched_summary(cart, services), message="Item removed")


@router.delete("", response_model=ClearCartResponse)
async def clear_cart(
    response: Response,
    cart_id: Optional[str] = Depends(get_cart_id),
    services: Services = Depends(get_services),
):
    """Empty the cart and forget its token"""
    if not cart_id:
        return ClearCartResponse(success=False)

    await services.cart_store.clear(cart_id)
    clear_cart_cookie(response)
    return ClearCartResponse(success=True)
