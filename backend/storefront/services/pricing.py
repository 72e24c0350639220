"""
storefront/services/pricing.py - Order total calculation.

`compute_totals` is a pure function: it reads the cart lines and a pricing policy
and returns subtotal, shipping, tax and grand total. Nothing is cached; callers
recompute on every read.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable

from pydantic import BaseModel, Field

CENTS = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    return Decimal(str(value))


class PricingPolicy(BaseModel):
    """Pricing rules applied when computing order totals."""
    free_shipping_threshold: Decimal = Field(..., ge=0)
    flat_shipping_cost: Decimal = Field(..., ge=0)
    tax_rate: Decimal = Field(..., ge=0, le=1)
    currency: str = "INR"

    model_config = {"frozen": True}


class OrderTotals(BaseModel):
    item_count: int = 0
    subtotal: Decimal = Decimal("0")
    shipping_cost: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    currency: str = "INR"

    def as_out(self) -> Dict[str, Any]:
        """Float rendering for JSON responses and Firestore documents."""
        return {
            "item_count": self.item_count,
            "subtotal": float(self.subtotal),
            "shipping_cost": float(self.shipping_cost),
            "tax": float(self.tax),
            "total": float(self.total),
            "currency": self.currency,
        }


def compute_totals(lines: Iterable[Any], policy: PricingPolicy) -> OrderTotals:
    """
    Derive order totals from cart lines.

    Each line needs `product.price` and `quantity`. Shipping is free when the
    subtotal reaches the threshold, and nothing is charged for an empty cart.
    Tax is rounded half-up to cents.
    """
    subtotal = Decimal("0")
    item_count = 0
    for line in lines:
        price = to_money(line.product.price)
        qty = line.quantity
        if price < 0:
            raise ValueError(f"negative price for product {line.product.id!r}")
        if isinstance(qty, bool) or not isinstance(qty, int) or qty < 1:
            raise ValueError(f"invalid quantity {qty!r} for product {line.product.id!r}")
        subtotal += price * qty
        item_count += qty

    if item_count == 0 or subtotal >= policy.free_shipping_threshold:
        shipping = Decimal("0")
    else:
        shipping = policy.flat_shipping_cost

    tax = (subtotal * policy.tax_rate).quantize(CENTS, rounding=ROUND_HALF_UP)
    total = (subtotal + shipping + tax).quantize(CENTS, rounding=ROUND_HALF_UP)

    return OrderTotals(
        item_count=item_count,
        subtotal=subtotal.quantize(CENTS, rounding=ROUND_HALF_UP),
        shipping_cost=shipping.quantize(CENTS, rounding=ROUND_HALF_UP),
        tax=tax,
        total=total,
        currency=policy.currency.upper(),
    )
