"""
Security helpers for password hashing and session tokens.

Session tokens are compact JSON Web Tokens signed with HMAC‑SHA256
and base64url encoded.  Each token carries the account identifier in
``sub`` and an expiration timestamp in ``exp``; nothing is stored
server side, so a token stays valid until it expires.  The signing
secret comes from the application settings.

Passwords are hashed with PBKDF2‑HMAC‑SHA256 using a random 16‑byte
salt per password and a configurable iteration count.  The stored
value has the form ``<iterations>$<salt hex>$<hash hex>`` so the cost
factor can be raised later without invalidating existing accounts.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Header, HTTPException, status

from .config import settings

logger = logging.getLogger(__name__)


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC‑SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[int] = None,
    now: Optional[int] = None,
) -> str:
    """Create a signed JWT with the given claims.

    The claims are extended with ``exp``, the expiration time as a
    UNIX timestamp.  The result has the form
    ``header.payload.signature`` with each part base64url encoded.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"sub": "42"}``).
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.
    now : Optional[int]
        Issuance time as a UNIX timestamp; the current time if omitted.

    Returns
    -------
    str
        A signed JWT.
    """
    to_encode = data.copy()
    issued_at = int(time.time()) if now is None else int(now)
    exp_seconds = settings.access_token_expire_minutes * 60 if expires_delta is None else expires_delta
    to_encode["exp"] = issued_at + exp_seconds
    header = {"alg": settings.algorithm, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, now: Optional[int] = None) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT.

    Checks the HMAC signature and the ``exp`` claim.  Returns the
    payload dictionary if the token is valid and unexpired at ``now``,
    otherwise ``None``.  Expired, forged and malformed tokens are not
    distinguished.
    """
    try:
        parts = token.split(".")
        if len(parts) != 3:
            return None
        header_b64, payload_b64, signature_b64 = parts
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, settings.secret_key)
        actual_sig = _b64_url_decode(signature_b64)
        # Constant‑time comparison to prevent timing attacks
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        if not isinstance(data, dict) or data.get("exp") is None:
            return None
        current = int(time.time()) if now is None else int(now)
        if int(data["exp"]) < current:
            return None
        return data
    except (ValueError, TypeError, UnicodeDecodeError):
        # binascii.Error and json.JSONDecodeError are ValueError subclasses
        return None


def create_session_token(user_id: int, now: Optional[int] = None) -> str:
    """Issue a session token whose only claim is the account identifier."""
    return create_access_token({"sub": str(user_id)}, now=now)


@dataclass
class CurrentUser:
    """Identity extracted from a verified session token."""

    user_id: int


def _extract_token(authorization: str) -> str:
    # Accept both a bare token and the conventional "Bearer <token>" form.
    scheme, _, credentials = authorization.strip().partition(" ")
    if credentials and scheme.lower() == "bearer":
        return credentials.strip()
    return authorization.strip()


def get_current_user(authorization: Optional[str] = Header(None)) -> CurrentUser:
    """Dependency that verifies the caller's session token.

    A missing ``Authorization`` header yields 401 "No token provided".
    Any verification failure (bad signature, expired, malformed) yields
    401 "Unauthorized".  On success the account identifier is returned
    to the handler.
    """
    if not authorization or not authorization.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
        )
    payload = decode_access_token(_extract_token(authorization))
    try:
        user_id = int(payload["sub"]) if payload else None
    except (KeyError, TypeError, ValueError):
        user_id = None
    if user_id is None:
        logger.debug("Rejected session token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return CurrentUser(user_id=user_id)


def optional_protection(authorization: Optional[str] = Header(None)) -> Optional[CurrentUser]:
    """Enforce ``get_current_user`` only when the settings ask for it.

    Used on certificate creation, which is public unless
    ``settings.protect_student_creation`` is enabled.
    """
    if not settings.protect_student_creation:
        return None
    return get_current_user(authorization)


def hash_password(password: str, iterations: Optional[int] = None) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    A 16‑byte random salt is generated for each password, so hashing
    the same password twice yields different strings.

    Parameters
    ----------
    password : str
        The plain text password to hash.
    iterations : Optional[int]
        PBKDF2 iteration count; defaults to
        ``settings.password_hash_iterations``.

    Returns
    -------
    str
        ``<iterations>$<salt hex>$<hash hex>``.
    """
    rounds = iterations or settings.password_hash_iterations
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return f"{rounds}${salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored hash string.

    Recomputes the PBKDF2‑HMAC digest with the stored salt and
    iteration count and compares it in constant time.  Malformed
    stored values never match.
    """
    try:
        rounds_str, salt_hex, hash_hex = hashed_password.split("$", 2)
        rounds = int(rounds_str)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        return False
    if rounds <= 0:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, rounds)
    return hmac.compare_digest(dk, stored_hash)
