# storefront/services/checkout.py
"""
ONE CHECKOUT → ONE ORDER

- The whole cart is stored under `items`, each line with its product snapshot.
- Totals are computed from the cart at submission time with the injected policy.
- Repeating a checkout with the same `checkout_id` returns the existing order.
- On success the customer profile is upserted and the cart is cleared, in the same
  transaction that stores the order.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from firebase_admin import firestore

from storefront.repositories import carts as carts_repo
from storefront.repositories import orders as orders_repo
from storefront.repositories import profiles as profiles_repo
from storefront.schemas.order import CheckoutBody
from storefront.services.cart_store import CartLine
from storefront.services.pricing import OrderTotals, PricingPolicy

logger = logging.getLogger("storefront.checkout")

__all__ = ["CheckoutError", "build_order_doc", "place_order"]


class CheckoutError(ValueError):
    """Checkout cannot proceed with the given cart/payload."""


def _order_item(line: CartLine) -> Dict[str, Any]:
    p = line.product
    return {
        "product_id": p.id,
        "name": p.name,
        "category": p.category,
        "image": p.image,
        "quantity": line.quantity,
        "unit_price": float(p.price),
        "line_total": float(line.line_total),
    }


def _payment_status(method: str) -> str:
    # Cash on delivery is collected later; UPI/card are confirmed by the client flow
    return "pending" if method == "cod" else "completed"


def build_order_doc(
    uid: str,
    payload: CheckoutBody,
    lines: List[CartLine],
    totals: OrderTotals,
    checkout_id: Optional[str] = None,
) -> Dict[str, Any]:
    shipping = payload.shipping
    return {
        "user_id": uid,
        "status": "pending",
        "payment_method": payload.payment_method,
        "payment_status": _payment_status(payload.payment_method),
        "upi_transaction_id": payload.upi_id if payload.payment_method == "upi" else None,
        "shipping_address": shipping.one_line(),
        "shipping": shipping.model_dump(),
        "items": [_order_item(line) for line in lines],
        "totals": totals.as_out(),
        "note": payload.note,
        "checkout_id": checkout_id,
    }


def place_order(
    db,
    uid: str,
    payload: CheckoutBody,
    policy: PricingPolicy,
    checkout_id: Optional[str] = None,
) -> Tuple[Dict[str, Any], bool]:
    """
    Submit the user's saved cart as an order.

    The order, the profile update and the cart deletion are written in one
    transaction: either all of them land or none do. Returns `(order, created)`;
    `created` is False when `checkout_id` matched an order placed earlier.
    Raises CheckoutError when the cart is empty.
    """
    order_id = orders_repo.new_order_id(uid, checkout_id)

    @firestore.transactional
    def _submit(transaction) -> Optional[OrderTotals]:
        if checkout_id and orders_repo.get_order(db, order_id, transaction=transaction):
            return None

        cart = carts_repo.load_cart(db, uid, transaction=transaction)
        lines = cart.get_items()
        if not lines:
            raise CheckoutError("Cart is empty. Add products before checking out.")

        totals = cart.totals(policy)
        order_doc = build_order_doc(uid, payload, lines, totals, checkout_id=checkout_id)
        orders_repo.create_order(db, order_doc, order_id=order_id, transaction=transaction)

        # Save contact details for the next checkout
        profile = payload.shipping.model_dump(exclude={"email"})
        profiles_repo.upsert_profile(db, uid, profile, transaction=transaction)

        carts_repo.delete_cart(db, uid, transaction=transaction)
        return totals

    totals = _submit(db.transaction())
    if totals is None:
        logger.info("Checkout %s already placed as order %s", checkout_id, order_id)
        return orders_repo.get_order(db, order_id), False

    logger.info(
        "Order %s placed by %s: %d items, total %s %s",
        order_id, uid, totals.item_count, totals.total, totals.currency,
    )
    return orders_repo.get_order(db, order_id), True
