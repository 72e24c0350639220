"""Product catalog stored in the `products` collection."""
from typing import Any, Dict, List, Optional

from google.cloud.firestore_v1 import SERVER_TIMESTAMP, FieldFilter

from storefront.config import settings
from storefront.schemas.product import Product, ProductCreate, ProductUpdate


def _col(db):
    return db.collection(settings.collection("products"))


def _to_product(doc_id: str, src: Dict[str, Any]) -> Product:
    return Product(
        id=src.get("id", doc_id),
        name=src.get("name", ""),
        price=float(src.get("price", 0) or 0),
        category=src.get("category", "") or "uncategorized",
        image=src.get("image", "") or "",
        description=src.get("description", "") or "",
        is_new=bool(src.get("is_new", False)),
        is_sale=bool(src.get("is_sale", False)),
    )


def _created_key(src: Dict[str, Any]):
    ts = src.get("created_at")
    return ts.timestamp() if hasattr(ts, "timestamp") else 0


def list_products(
    db,
    category: Optional[str] = None,
    is_new: Optional[bool] = None,
    is_sale: Optional[bool] = None,
) -> List[Product]:
    """
    Non-deleted products, newest first.
    Sorting happens here so no composite index is needed for the filters.
    """
    q = _col(db).where(filter=FieldFilter("is_deleted", "==", False))
    if category:
        q = q.where(filter=FieldFilter("category", "==", category))
    if is_new is not None:
        q = q.where(filter=FieldFilter("is_new", "==", is_new))
    if is_sale is not None:
        q = q.where(filter=FieldFilter("is_sale", "==", is_sale))

    rows = [(d.id, d.to_dict() or {}) for d in q.stream()]
    rows.sort(key=lambda r: _created_key(r[1]), reverse=True)
    return [_to_product(doc_id, src) for doc_id, src in rows]


def get_product(db, product_id: str) -> Optional[Product]:
    snap = _col(db).document(product_id).get()
    if not snap.exists:
        return None
    src = snap.to_dict() or {}
    if src.get("is_deleted"):
        return None
    return _to_product(snap.id, src)


def create_product(db, product_in: ProductCreate) -> Product:
    ref = _col(db).document()
    data = product_in.model_dump()
    data.update(id=ref.id, is_deleted=False, created_at=SERVER_TIMESTAMP)
    ref.set(data)
    return _to_product(ref.id, data)


def update_product(db, product_id: str, patch: ProductUpdate) -> Optional[Product]:
    ref = _col(db).document(product_id)
    snap = ref.get()
    if not snap.exists or (snap.to_dict() or {}).get("is_deleted"):
        return None
    update_data = patch.model_dump(exclude_none=True)
    if update_data:
        update_data["updated_at"] = SERVER_TIMESTAMP
        ref.update(update_data)
    return _to_product(product_id, ref.get().to_dict() or {})


def delete_product(db, product_id: str, hard: bool = False) -> bool:
    """
    • hard=True  → document removed
    • hard=False → is_deleted = True
    Returns False when the product does not exist.
    """
    ref = _col(db).document(product_id)
    if not ref.get().exists:
        return False
    if hard:
        ref.delete()
    else:
        ref.update({"is_deleted": True, "updated_at": SERVER_TIMESTAMP})
    return True


def count_products(db) -> int:
    q = _col(db).where(filter=FieldFilter("is_deleted", "==", False))
    return sum(1 for _ in q.stream())
