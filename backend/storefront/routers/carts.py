"""
storefront/routers/carts.py
Cart endpoints (signed-in users, guests included): add, change quantity, remove one,
clear, and read the cart with its totals.

Behavior
- Each change loads the user's cart into a `CartStore`, applies it and saves it inside
  one Firestore transaction, so overlapping requests for the same user both land.
- Add reads the product from the catalog once and stores that snapshot in the line;
  later price changes do not touch lines already in the cart.
- Changing or removing a product that is not in the cart is a no-op, not a 404.
- Totals are recomputed on every read with the configured pricing policy.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from storefront.config import get_db, get_pricing_policy
from storefront.core.auth import get_principal
from storefront.repositories import carts as carts_repo
from storefront.repositories import products as products_repo
from storefront.schemas.cart import AddItemBody, CartOut, TotalsOut, UpdateQuantityBody
from storefront.schemas.principal import Principal
from storefront.services.cart_store import CartStore
from storefront.services.pricing import PricingPolicy

logger = logging.getLogger("storefront.cart")

router = APIRouter(prefix="/cart", tags=["Cart"])


def _totals_out(store: CartStore, policy: PricingPolicy) -> TotalsOut:
    return TotalsOut(
        **store.totals(policy).as_out(),
        free_shipping_threshold=float(policy.free_shipping_threshold),
    )


def _cart_out(uid: str, store: CartStore, policy: PricingPolicy) -> CartOut:
    return CartOut(
        user_id=uid,
        items=[
            {"product": line.product, "quantity": line.quantity, "line_total": float(line.line_total)}
            for line in store.get_items()
        ],
        totals=_totals_out(store, policy),
    )


@router.get("", response_model=CartOut)
def get_cart(
    principal: Principal = Depends(get_principal),
    policy: PricingPolicy = Depends(get_pricing_policy),
    db=Depends(get_db),
):
    """Full cart: lines in insertion order plus totals."""
    store = carts_repo.load_cart(db, principal.uid)
    return _cart_out(principal.uid, store, policy)


@router.get("/total", response_model=TotalsOut)
def cart_total(
    principal: Principal = Depends(get_principal),
    policy: PricingPolicy = Depends(get_pricing_policy),
    db=Depends(get_db),
):
    """Only the up-to-date totals (subtotal, shipping, tax, total)."""
    store = carts_repo.load_cart(db, principal.uid)
    return _totals_out(store, policy)


@router.post("/items", response_model=CartOut)
def add_to_cart(
    payload: AddItemBody,
    principal: Principal = Depends(get_principal),
    policy: PricingPolicy = Depends(get_pricing_policy),
    db=Depends(get_db),
):
    product = products_repo.get_product(db, payload.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    store = carts_repo.update_cart(db, principal.uid, lambda cart: cart.add_item(product, payload.quantity))
    logger.debug("Cart %s: +%d x %s", principal.uid, payload.quantity, product.id)
    return _cart_out(principal.uid, store, policy)


@router.patch("/items/{product_id}", response_model=CartOut)
def update_cart_item(
    product_id: str,
    payload: UpdateQuantityBody,
    principal: Principal = Depends(get_principal),
    policy: PricingPolicy = Depends(get_pricing_policy),
    db=Depends(get_db),
):
    store = carts_repo.update_cart(
        db, principal.uid, lambda cart: cart.update_quantity(product_id, payload.quantity)
    )
    return _cart_out(principal.uid, store, policy)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_cart_item(
    product_id: str,
    principal: Principal = Depends(get_principal),
    policy: PricingPolicy = Depends(get_pricing_policy),
    db=Depends(get_db),
):
    store = carts_repo.update_cart(db, principal.uid, lambda cart: cart.remove_item(product_id))
    return _cart_out(principal.uid, store, policy)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_cart(principal: Principal = Depends(get_principal), db=Depends(get_db)):
    """Clear the entire cart."""
    carts_repo.delete_cart(db, principal.uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
