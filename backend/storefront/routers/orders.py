from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from storefront.config import get_db, get_pricing_policy
from storefront.core.auth import get_principal, require_admin, require_customer
from storefront.repositories import orders as orders_repo
from storefront.schemas.order import CheckoutBody, OrderOut, StatusUpdateBody
from storefront.schemas.principal import Principal
from storefront.services.checkout import CheckoutError, place_order
from storefront.services.pricing import PricingPolicy

logger = logging.getLogger("storefront.orders")

router = APIRouter(prefix="/orders", tags=["Orders"])
admin_router = APIRouter(prefix="/orders", tags=["Admin: Orders"], dependencies=[Depends(require_admin)])


def _matches(order: dict, needle: str) -> bool:
    needle = needle.lower()
    return any(
        needle in str(order.get(field) or "").lower()
        for field in ("id", "status", "payment_method")
    )


@router.post(
    "",
    response_model=OrderOut,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"description": "Order already placed with this checkout_id"}},
)
def create_order(
    payload: CheckoutBody,
    response: Response,
    checkout_id: Optional[str] = Query(
        None,
        description="Idempotency key: the same checkout_id never creates a second order.",
    ),
    principal: Principal = Depends(require_customer),
    policy: PricingPolicy = Depends(get_pricing_policy),
    db=Depends(get_db),
):
    """
    Submits the current cart as an order.
    - 201 with the new order; 200 with the earlier one when `checkout_id` repeats
    - 400 when the cart is empty
    - the cart is cleared once the order is stored
    """
    try:
        order, created = place_order(db, principal.uid, payload, policy, checkout_id=checkout_id)
    except CheckoutError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not created:
        response.status_code = status.HTTP_200_OK
    return order


@router.get("/my", response_model=List[OrderOut])
def list_my_orders(
    q: Optional[str] = Query(None, description="Search in order id, status or payment method"),
    principal: Principal = Depends(get_principal),
    db=Depends(get_db),
):
    orders = orders_repo.list_orders_for_user(db, principal.uid)
    if q and q.strip():
        orders = [o for o in orders if _matches(o, q.strip())]
    return orders


@router.get("/{order_id}", response_model=OrderOut)
def get_order_detail(order_id: str, principal: Principal = Depends(get_principal), db=Depends(get_db)):
    """Single order: customers see their own, admins see all."""
    order = orders_repo.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    if order.get("user_id") != principal.uid and principal.role != "admin":
        raise HTTPException(status_code=403, detail="Not allowed")
    return order


@admin_router.get("", response_model=List[OrderOut])
def admin_list_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    db=Depends(get_db),
):
    orders = orders_repo.list_all_orders(db)
    if status_filter:
        orders = [o for o in orders if o.get("status") == status_filter]
    return orders


@admin_router.patch("/{order_id}/status", response_model=OrderOut)
def admin_update_status(order_id: str, payload: StatusUpdateBody, db=Depends(get_db)):
    order = orders_repo.update_status(db, order_id, payload.status)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    logger.info("Order %s moved to %s", order_id, payload.status)
    return order
