"""Submitted orders stored in the `orders` collection."""
import uuid
from typing import Any, Dict, List, Optional

from google.cloud.firestore_v1 import SERVER_TIMESTAMP, FieldFilter

from storefront.config import settings


def _col(db):
    return db.collection(settings.collection("orders"))


def _with_id(snap) -> Dict[str, Any]:
    data = snap.to_dict() or {}
    data["id"] = snap.id
    return data


def _newest_first(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    def key(d):
        ts = d.get("created_at")
        return ts.timestamp() if hasattr(ts, "timestamp") else 0
    return sorted(docs, key=key, reverse=True)


def new_order_id(uid: str, checkout_id: Optional[str] = None) -> str:
    """Random id; with a checkout_id the id is derived from (uid, checkout_id) so a repeat hits the same document."""
    if checkout_id:
        return str(uuid.uuid5(uuid.NAMESPACE_URL, f"storefront:orders:{uid}:{checkout_id}"))
    return str(uuid.uuid4())


def create_order(db, order_doc: Dict[str, Any], order_id: Optional[str] = None, transaction=None) -> str:
    order_id = order_id or str(uuid.uuid4())
    doc = dict(order_doc)
    doc.update(created_at=SERVER_TIMESTAMP, updated_at=SERVER_TIMESTAMP)
    ref = _col(db).document(order_id)
    if transaction is not None:
        transaction.set(ref, doc)
    else:
        ref.set(doc)
    return order_id


def get_order(db, order_id: str, transaction=None) -> Optional[Dict[str, Any]]:
    snap = _col(db).document(order_id).get(transaction=transaction)
    return _with_id(snap) if snap.exists else None


def find_by_checkout_id(db, uid: str, checkout_id: str) -> Optional[Dict[str, Any]]:
    q = (
        _col(db)
        .where(filter=FieldFilter("user_id", "==", uid))
        .where(filter=FieldFilter("checkout_id", "==", checkout_id))
        .limit(1)
        .stream()
    )
    snap = next(iter(q), None)
    return _with_id(snap) if snap else None


def list_orders_for_user(db, uid: str) -> List[Dict[str, Any]]:
    # No order_by: avoids requiring a composite index on (user_id, created_at)
    q = _col(db).where(filter=FieldFilter("user_id", "==", uid)).stream()
    return _newest_first([_with_id(s) for s in q])


def list_all_orders(db) -> List[Dict[str, Any]]:
    return _newest_first([_with_id(s) for s in _col(db).stream()])


def update_status(db, order_id: str, status: str) -> Optional[Dict[str, Any]]:
    ref = _col(db).document(order_id)
    if not ref.get().exists:
        return None
    ref.update({"status": status, "updated_at": SERVER_TIMESTAMP})
    return _with_id(ref.get())
