"""Password hashing and Google ID token verification."""

from __future__ import annotations

from typing import Any

import requests
from passlib.hash import pbkdf2_sha256 as hasher

from smartspend.core.exceptions import AuthError

GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
_GOOGLE_ISSUERS = {"accounts.google.com", "https://accounts.google.com"}


def hash_password(raw: str) -> str:
    return hasher.hash(raw)


def verify_password(raw: str, password_hash: str | None) -> bool:
    """Check a password against a stored hash; accounts without one never match."""
    if not password_hash:
        return False
    try:
        return hasher.verify(raw, password_hash)
    except ValueError:
        # Malformed hash in the store
        return False


def verify_google_token(id_token: str, client_id: str, timeout: float = 10.0) -> dict[str, Any]:
    """Verify a Google Sign-In ID token and return its payload.

    The token is checked by Google's tokeninfo endpoint; we then make sure
    it was issued for our client id by Google.
    """
    if not id_token:
        raise AuthError("Google token is required.")
    if not client_id:
        raise AuthError("Google sign-in is not configured.")

    try:
        resp = requests.get(GOOGLE_TOKENINFO_URL, params={"id_token": id_token}, timeout=timeout)
    except requests.RequestException as e:
        raise AuthError(f"Could not reach Google: {e}") from e

    if resp.status_code != 200:
        raise AuthError("Invalid Google token.")

    payload = resp.json()
    if payload.get("aud") != client_id:
        raise AuthError("Google token was issued for a different client.")
    if payload.get("iss") not in _GOOGLE_ISSUERS:
        raise AuthError("Google token has an unexpected issuer.")
    if not payload.get("sub") or not payload.get("email"):
        raise AuthError("Google token is missing account details.")
    return payload
