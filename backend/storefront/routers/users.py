"""
# `storefront/routers/users.py` — Customer profile

### `GET /users/me/profile`
Saved checkout details of the signed-in customer (empty fields when none saved yet).

### `PUT /users/me/profile`
Partial update; only provided fields are written. Checkout also updates the
profile with the address it was given.
"""
from fastapi import APIRouter, Depends

from storefront.config import get_db
from storefront.core.auth import get_principal, require_customer
from storefront.repositories import profiles as profiles_repo
from storefront.schemas.principal import Principal
from storefront.schemas.user import ProfileOut, ProfileUpdate

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me/profile", response_model=ProfileOut)
def get_my_profile(principal: Principal = Depends(get_principal), db=Depends(get_db)):
    data = profiles_repo.get_profile(db, principal.uid) or {}
    if not data.get("full_name") and principal.display_name:
        data["full_name"] = principal.display_name
    return ProfileOut(**{k: data.get(k) or "" for k in profiles_repo.PROFILE_FIELDS})


@router.put("/me/profile", response_model=ProfileOut)
def update_my_profile(
    payload: ProfileUpdate,
    principal: Principal = Depends(require_customer),
    db=Depends(get_db),
):
    data = profiles_repo.upsert_profile(db, principal.uid, payload.model_dump(exclude_none=True))
    return ProfileOut(**{k: data.get(k) or "" for k in profiles_repo.PROFILE_FIELDS})
