"""
# `storefront/routers/products.py` — Product endpoints

## Public
### `GET /products`
Lists non-deleted products, newest first.
Optional filters: `category`, `is_new`, `is_sale` (the home page uses the flags for
its featured strip).

### `GET /products/{product_id}`
Single product; `404` when missing or soft-deleted.

## Admin (`/admin/products`, admin claim required)
- `POST /`             → create
- `PUT /{product_id}`  → partial update (only provided fields change)
- `DELETE /{product_id}?hard=` → soft delete by default, `hard=true` removes the document

Products already sitting in carts keep the snapshot taken when they were added.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from storefront.config import get_db
from storefront.core.auth import require_admin
from storefront.repositories import products as products_repo
from storefront.schemas.product import Product, ProductCreate, ProductUpdate

logger = logging.getLogger("storefront.products")

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=List[Product], summary="List Products")
def list_products(
    category: Optional[str] = Query(None, description="Category label (optional)"),
    is_new: Optional[bool] = Query(None),
    is_sale: Optional[bool] = Query(None),
    db=Depends(get_db),
):
    return products_repo.list_products(db, category=category, is_new=is_new, is_sale=is_sale)


@router.get("/{product_id}", response_model=Product, summary="Get Product")
def get_product(product_id: str, db=Depends(get_db)):
    product = products_repo.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# Admin sub-router for product management
admin_router = APIRouter(
    prefix="/products",
    tags=["Admin: Products"],
    dependencies=[Depends(require_admin)],
)


@admin_router.post("", response_model=Product, status_code=status.HTTP_201_CREATED, summary="Create Product")
def create_product(product_in: ProductCreate, db=Depends(get_db)):
    product = products_repo.create_product(db, product_in)
    logger.info("Product %s created (%s)", product.id, product.name)
    return product


@admin_router.put("/{product_id}", response_model=Product, summary="Update Product")
def update_product(product_id: str, patch: ProductUpdate, db=Depends(get_db)):
    product = products_repo.update_product(db, product_id, patch)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@admin_router.delete("/{product_id}", summary="Delete Product")
def delete_product(product_id: str, hard: bool = False, db=Depends(get_db)):
    if not products_repo.delete_product(db, product_id, hard=hard):
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info("Product %s %s-deleted", product_id, "hard" if hard else "soft")
    return {"detail": "Product hard-deleted" if hard else "Product soft-deleted"}
