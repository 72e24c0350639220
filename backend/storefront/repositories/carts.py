"""Per-user carts stored as `carts/{uid}` documents."""
from typing import Callable

from firebase_admin import firestore
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from storefront.config import settings
from storefront.services.cart_store import CartStore


def _doc(db, uid: str):
    return db.collection(settings.collection("carts")).document(uid)


def load_cart(db, uid: str, transaction=None) -> CartStore:
    snap = _doc(db, uid).get(transaction=transaction)
    if not snap.exists:
        return CartStore()
    return CartStore.from_dict(snap.to_dict() or {})


def save_cart(db, uid: str, store: CartStore, transaction=None) -> None:
    data = store.to_dict()
    data["updated_at"] = SERVER_TIMESTAMP
    ref = _doc(db, uid)
    if transaction is not None:
        transaction.set(ref, data)
    else:
        ref.set(data)


def delete_cart(db, uid: str, transaction=None) -> None:
    ref = _doc(db, uid)
    if transaction is not None:
        transaction.delete(ref)
    else:
        ref.delete()


def update_cart(db, uid: str, change: Callable[[CartStore], bool]) -> CartStore:
    """
    Loads the cart, applies `change` and saves it when `change` returns True, all in
    one transaction. On contention Firestore reruns the whole step against the fresh
    cart, so `change` must only act on the store it is given.
    """

    @firestore.transactional
    def _apply(transaction):
        store = load_cart(db, uid, transaction=transaction)
        if change(store):
            save_cart(db, uid, store, transaction=transaction)
        return store

    return _apply(db.transaction())
