"""Checkout API routes for the storefront"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ..core.container import Services, get_services
from ..errors import (
    CartNotFoundError,
    CheckoutValidationError,
    EmptyCartError,
    PersistenceError,
)
from ..models.checkout import CheckoutRequest, CheckoutResponse, Order
from .cart import clear_cart_cookie, get_cart_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])


@router.post("", response_model=CheckoutResponse)
async def checkout(
    request: CheckoutRequest,
    response: Response,
    cart_id: Optional[str] = Depends(get_cart_id),
    services: Services = Depends(get_services),
):
    """
    Place an order for the current cart.

    Prices and totals are always recomputed server-side from the catalog.
    """
    try:
        result = await services.checkout.checkout(cart_id, request.to_customer())
    except CartNotFoundError:
        raise HTTPException(status_code=404, detail="Cart not found")
    except EmptyCartError:
        raise HTTPException(status_code=409, detail="Cart is empty")
    except CheckoutValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": e.message, "missing_fields": e.missing_fields},
        )
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))

    if result.cart_cleared:
        clear_cart_cookie(response)

    return CheckoutResponse(
        success=True,
        order=result.order,
        cart_cleared=result.cart_cleared,
    )


@router.get("/orders/{order_id}", response_model=Order)
async def get_order(
    order_id: str,
    services: Services = Depends(get_services),
):
    """Get order details"""
    order = await services.orders.get(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.get("/orders", response_model=list[Order])
async def list_orders(
    limit: int = Query(50, ge=1, le=200),
    services: Services = Depends(get_services),
):
    """List recent orders"""
    return await services.orders.list_orders(limit=limit)
