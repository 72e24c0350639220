"""
# `storefront/core/auth.py` — Authentication & authorization

Verifies **Firebase ID tokens** and turns them into a `Principal`. Endpoints use the
dependencies below with `Depends(...)`.

- **Authentication:** `Authorization: Bearer <Firebase ID token>`, verified with the
  Firebase Admin SDK (`check_revoked=True`, so tokens revoked at logout are refused).
- **Roles:**
  - anonymous sign-in provider → `guest`
  - custom claim `admin=True` → `admin`
  - anything else → `user`

| Dependency          | Accepts              | Otherwise |
|---------------------|----------------------|-----------|
| `get_principal`     | guest / user / admin | 401       |
| `require_customer`  | user / admin         | 403       |
| `require_admin`     | admin                | 403       |

> `firebase_admin` must be initialised before tokens are verified; `get_principal`
> calls `init_firebase()` for that reason.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from firebase_admin import auth as fb_auth

from storefront.config import init_firebase
from storefront.schemas.principal import Principal

logger = logging.getLogger("storefront.auth")


def _extract_bearer_token(request: Request) -> Optional[str]:
    """
    Reads the token from `Authorization: Bearer <id_token>`.
    Returns None when the header is missing or malformed.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_id_token(id_token: str) -> dict:
    init_firebase()
    try:
        return fb_auth.verify_id_token(id_token, check_revoked=True)
    except fb_auth.ExpiredIdTokenError:
        raise _unauthorized("Token expired")
    except fb_auth.RevokedIdTokenError:
        raise _unauthorized("Session revoked")
    except fb_auth.UserDisabledError:
        raise _unauthorized("Account disabled")
    except (fb_auth.InvalidIdTokenError, fb_auth.CertificateFetchError, ValueError) as exc:
        logger.info("Rejected ID token: %s", exc)
        raise _unauthorized("Invalid authentication token")


def token_to_principal(decoded: dict) -> Principal:
    """Builds a Principal from decoded token claims."""
    uid = decoded.get("uid") or decoded.get("user_id")
    if not uid:
        raise _unauthorized("Invalid token payload")

    provider = (decoded.get("firebase") or {}).get("sign_in_provider")
    if provider == "anonymous":
        role = "guest"
    elif decoded.get("admin") is True:
        role = "admin"
    else:
        role = "user"

    return Principal(
        uid=uid,
        role=role,
        email=decoded.get("email"),
        display_name=decoded.get("name"),
    )


# --------- FastAPI Dependencies --------- #

def get_principal(request: Request) -> Principal:
    """Token required; guest/user/admin are all accepted."""
    token = _extract_bearer_token(request)
    if not token:
        raise _unauthorized("Authentication credentials were not provided")
    return token_to_principal(_decode_id_token(token))


def require_customer(principal: Principal = Depends(get_principal)) -> Principal:
    """Blocks guest (anonymous) sessions from placing orders."""
    if principal.role == "guest":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Guest users are not allowed for this action.",
        )
    return principal


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if principal.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal
