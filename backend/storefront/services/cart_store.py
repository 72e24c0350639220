"""
storefront/services/cart_store.py - Shopping cart state.

A `CartStore` holds one user's cart in memory: an insertion-ordered mapping from
product id to a `CartLine` (product snapshot + quantity). It is built per request
from the persisted cart (see `storefront.repositories.carts`) and is never shared
between users or kept at module level.

Invalid input is not an error here: a non-positive or non-integer quantity and an
unknown product id turn the call into a no-op. Every mutator returns True when the
cart actually changed.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, Iterator, List, Optional

from pydantic import BaseModel, Field, ValidationError

from storefront.schemas.product import Product
from storefront.services.pricing import OrderTotals, PricingPolicy, compute_totals, to_money

logger = logging.getLogger("storefront.cart")


def _valid_quantity(quantity: Any) -> bool:
    # bool is an int subclass; True must not count as 1
    return isinstance(quantity, int) and not isinstance(quantity, bool) and quantity >= 1


class CartLine(BaseModel):
    product: Product
    quantity: int = Field(..., ge=1)

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> Decimal:
        return to_money(self.product.price) * self.quantity


class CartStore:
    def __init__(self, lines: Optional[Iterable[CartLine]] = None):
        self._lines: Dict[str, CartLine] = {}
        for line in lines or ():
            self._merge(line)

    def _merge(self, line: CartLine) -> None:
        # Two lines for one product collapse into the first, quantities summed
        existing = self._lines.get(line.product_id)
        if existing is not None:
            existing.quantity += line.quantity
        else:
            self._lines[line.product_id] = line.model_copy()

    # ---------- mutations ----------
    def add_item(self, product: Product, quantity: int = 1) -> bool:
        """Add `quantity` of `product`, merging into an existing line."""
        if not _valid_quantity(quantity):
            logger.debug("Ignoring add of %r with invalid quantity %r", product.id, quantity)
            return False
        line = self._lines.get(product.id)
        if line is not None:
            line.quantity += quantity
        else:
            self._lines[product.id] = CartLine(product=product, quantity=quantity)
        return True

    def update_quantity(self, product_id: str, quantity: int) -> bool:
        """Set the quantity of an existing line."""
        if not _valid_quantity(quantity):
            logger.debug("Ignoring update of %r with invalid quantity %r", product_id, quantity)
            return False
        line = self._lines.get(product_id)
        if line is None:
            return False
        line.quantity = quantity
        return True

    def remove_item(self, product_id: str) -> bool:
        return self._lines.pop(product_id, None) is not None

    def clear(self) -> bool:
        had_items = bool(self._lines)
        self._lines.clear()
        return had_items

    # ---------- reads ----------
    def get_items(self) -> List[CartLine]:
        return list(self._lines.values())

    def get(self, product_id: str) -> Optional[CartLine]:
        return self._lines.get(product_id)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def totals(self, policy: PricingPolicy) -> OrderTotals:
        return compute_totals(self._lines.values(), policy)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.get_items())

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._lines

    # ---------- persistence ----------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [
                {"product": line.product.model_dump(), "quantity": line.quantity}
                for line in self._lines.values()
            ]
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CartStore":
        """Rebuild a cart from its stored form, dropping lines that no longer validate."""
        store = cls()
        for raw in (data or {}).get("items", []) or []:
            try:
                line = CartLine.model_validate(raw)
            except ValidationError as exc:
                logger.warning("Dropping malformed cart line %r: %s", raw, exc.errors()[:1])
                continue
            store._merge(line)
        return store
