"""Customer profiles (`users/{uid}`), used to pre-fill checkout."""
from typing import Any, Dict, Optional

from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from storefront.config import settings

PROFILE_FIELDS = ("full_name", "phone", "address", "city", "state", "postal_code")


def _doc(db, uid: str):
    return db.collection(settings.collection("users")).document(uid)


def get_profile(db, uid: str) -> Optional[Dict[str, Any]]:
    snap = _doc(db, uid).get()
    return snap.to_dict() if snap.exists else None


def upsert_profile(db, uid: str, data: Dict[str, Any], transaction=None) -> Dict[str, Any]:
    """
    Merges the known profile fields into `users/{uid}`. Returns the stored profile,
    or just the staged patch when the write is part of a transaction.
    """
    patch = {k: data[k] for k in PROFILE_FIELDS if data.get(k) is not None}
    patch["updated_at"] = SERVER_TIMESTAMP
    ref = _doc(db, uid)
    if transaction is not None:
        transaction.set(ref, patch, merge=True)
        return patch
    ref.set(patch, merge=True)
    return get_profile(db, uid) or {}
