#!/usr/bin/env python3
"""
Grants or revokes the `admin` custom claim on a Firebase Auth user.

    storefront-set-admin someone@example.com
    storefront-set-admin --revoke someone@example.com

The user has to sign out and back in before the new claim shows up in their ID token.
"""
import argparse
import logging
import sys

from firebase_admin import auth

from storefront.config import init_firebase

logger = logging.getLogger("storefront.admin_claims")


def set_admin_claim(user_email: str, admin: bool = True) -> dict:
    """Sets `admin` on the user's custom claims (other claims are kept) and returns them."""
    init_firebase()
    user = auth.get_user_by_email(user_email)
    claims = dict(user.custom_claims or {})
    if admin:
        claims["admin"] = True
    else:
        claims.pop("admin", None)
    auth.set_custom_user_claims(user.uid, claims or None)
    logger.info("Admin claim %s for %s (%s)", "granted" if admin else "revoked", user_email, user.uid)
    return claims


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Grant or revoke the storefront admin claim.")
    parser.add_argument("email", help="E-mail of the Firebase Auth user")
    parser.add_argument("--revoke", action="store_true", help="Remove the admin claim instead")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        claims = set_admin_claim(args.email, admin=not args.revoke)
    except auth.UserNotFoundError:
        logger.error("User not found: %s", args.email)
        return 1
    logger.info("Custom claims now: %s", claims)
    return 0


if __name__ == "__main__":
    sys.exit(main())
