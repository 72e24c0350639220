"""
storefront/schemas/cart.py - Pydantic models for Cart requests and responses.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from storefront.schemas.product import Product

_INVISIBLE = ("\u200b", "\u200c", "\u200d", "\ufeff", "\xa0")


class AddItemBody(BaseModel):
    """Add to cart by product ID."""
    product_id: str = Field(..., description="Product ID (the same 'id' you see in /products).")
    quantity: int = Field(1, ge=1, le=10000, description="Quantity (>=1).")

    @field_validator("product_id")
    @classmethod
    def _clean_pid(cls, v: str) -> str:
        v = (v or "").strip()
        for ch in _INVISIBLE:
            v = v.replace(ch, "")
        if not v:
            raise ValueError("product_id cannot be empty")
        return v


class UpdateQuantityBody(BaseModel):
    quantity: int = Field(..., ge=1, le=10000, description="New quantity (>=1).")


class CartLineOut(BaseModel):
    product: Product
    quantity: int
    line_total: float


class TotalsOut(BaseModel):
    item_count: int
    subtotal: float
    shipping_cost: float
    tax: float
    total: float
    currency: str
    free_shipping_threshold: Optional[float] = None


class CartOut(BaseModel):
    user_id: str
    items: List[CartLineOut] = Field(default_factory=list)
    totals: TotalsOut
