# storefront/schemas/order.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from storefront.schemas.cart import TotalsOut

# Order lifecycle
OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled", "completed"]
PaymentMethod = Literal["upi", "cod", "card"]
PaymentStatus = Literal["pending", "completed"]


class ShippingAddress(BaseModel):
    full_name: str = Field(..., min_length=2, description="Full name is required")
    email: EmailStr
    phone: str = Field(..., min_length=10, description="Valid phone number is required")
    address: str = Field(..., min_length=5, description="Address is required")
    city: str = Field(..., min_length=2, description="City is required")
    state: str = Field(..., min_length=2, description="State is required")
    postal_code: str = Field(..., min_length=6, description="Valid postal code is required")

    @field_validator("full_name", "phone", "address", "city", "state", "postal_code", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    def one_line(self) -> str:
        return f"{self.address}, {self.city}, {self.state} {self.postal_code}"


# (Input) checkout payload
class CheckoutBody(BaseModel):
    shipping: ShippingAddress
    payment_method: PaymentMethod = "upi"
    upi_id: Optional[str] = Field(None, description="UPI transaction/VPA id (UPI only)")
    # Card details are accepted for form parity but never persisted
    card_number: Optional[str] = None
    card_expiry: Optional[str] = None
    card_cvv: Optional[str] = None
    note: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def _payment_details(self):
        if self.payment_method == "upi" and not (self.upi_id or "").strip():
            raise ValueError("upi_id is required for UPI payments")
        return self


class OrderItemOut(BaseModel):
    product_id: str
    name: str
    category: Optional[str] = None
    image: Optional[str] = None
    quantity: int
    unit_price: float
    line_total: float


class OrderOut(BaseModel):
    id: str
    user_id: str
    status: OrderStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    upi_transaction_id: Optional[str] = None
    shipping_address: str
    shipping: Optional[dict] = None
    items: List[OrderItemOut] = Field(default_factory=list)
    totals: TotalsOut
    note: Optional[str] = None
    checkout_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StatusUpdateBody(BaseModel):
    status: OrderStatus
