"""
# `storefront/schemas/product.py` — Product schemas

## Overview
Pydantic models for the catalog. `Product` is the snapshot that travels into cart
lines and order items; it is never mutated after it has been read from the catalog.

| Field       | Type        | Required | Notes |
|-------------|-------------|----------|-------|
| id          | `str`       | ✔        | Unique product id |
| name        | `str`       | ✔        | Display name |
| price       | `float`     | ✔        | Unit price (≥0) |
| category    | `str`       | ✔        | Category label |
| image       | `str`       | ✖        | Image URL |
| description | `str`       | ✖        | Long description |
| is_new      | `bool`      | ✖        | "New" badge |
| is_sale     | `bool`      | ✖        | "Sale" badge |

`ProductCreate` / `ProductUpdate` are the admin inputs.
"""
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ProductBase(BaseModel):
    """Common product fields for creation and display."""
    name: str = Field(..., min_length=1, description="Product name")
    price: float = Field(..., ge=0, description="Unit price")
    category: str = Field(..., min_length=1, description="Category label")
    image: str = Field("", description="Image URL")
    description: str = Field("", description="Detailed description of the product")
    is_new: bool = Field(False, description="Show the 'New' badge")
    is_sale: bool = Field(False, description="Show the 'Sale' badge")


class Product(ProductBase):
    id: str = Field(..., min_length=1, description="Product ID")

    model_config = {"frozen": True}


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    """Schema for updating product fields (admin). Only provided fields change."""
    name: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = None
    description: Optional[str] = None
    is_new: Optional[bool] = None
    is_sale: Optional[bool] = None

    @field_validator("name", "category")
    @classmethod
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v
