"""
Security helpers for password hashing and JWT authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC‑SHA256 signatures and base64url encoding.  Tokens embed the
user's identity (``sub``, ``email``, ``name``) and ``role`` claims plus
an expiration timestamp (``exp``).  The secret key from the
application settings is used to sign and verify the token.  A token
with a valid signature that has not expired is always honoured; there
is no revocation list.

Clients present the token either as ``Authorization: Bearer <token>``
or through the ``authToken`` cookie set at login.

Authorization is decided in one place, ``is_authorized``, which every
route reaches through the ``require_roles`` dependency factory.

Passwords are hashed using PBKDF2‑HMAC with SHA‑256 and a random salt.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import time
from typing import Any, Callable, Dict, Iterable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .states import ADMIN_ROLES

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 100_000


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


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT token with the given payload.

    The payload is extended with an ``exp`` field representing the
    expiration time as a UNIX timestamp.  The token is a string of the
    form ``header.payload.signature``, where each part is base64url
    encoded.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"sub": "1", "role": "user"}``).
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.

    Returns
    -------
    str
        A signed JWT token.
    """
    to_encode = data.copy()
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": settings.algorithm, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT token.

    Returns the payload dictionary when the signature matches and the
    ``exp`` claim lies in the future, otherwise ``None``.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    expected_sig = _sign(signing_input, settings.secret_key)
    try:
        actual_sig = _b64_url_decode(signature_b64)
        # Constant‑time comparison to prevent timing attacks
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    if data.get("exp") is None or int(data["exp"]) < int(time.time()):
        return None
    return data


def token_for_user(user: Dict[str, Any], remember_me: bool = False) -> str:
    """Issue an access token carrying the user's identity and role."""
    lifetime = settings.remember_me_expire_days * 24 * 60 * 60 if remember_me else None
    return create_access_token(
        {
            "sub": str(user["id"]),
            "email": user["email"],
            "name": user["name"],
            "role": user["role"],
        },
        expires_delta=lifetime,
    )


security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict[str, Any]:
    """Dependency that retrieves the current authenticated identity.

    The bearer header takes precedence over the cookie.  If neither is
    present, or the token is invalid/expired, an HTTP 401 error is
    raised.  On success returns the decoded claims with ``user_id``
    added as an integer.
    """
    token = credentials.credentials if credentials else request.cookies.get(settings.auth_cookie_name)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(token)
    if not payload or not str(payload.get("sub", "")).isdigit():
        logger.info("Rejected invalid or expired token on %s", request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload["user_id"] = int(payload["sub"])
    return payload


# ---------------------------------------------------------------------------
# Role-based access control
# ---------------------------------------------------------------------------

def is_authorized(identity: Dict[str, Any], allowed_roles: Iterable[str]) -> bool:
    """Single authorization policy: allow when the role is in ``allowed_roles``."""
    return identity.get("role") in set(allowed_roles)


def require_roles(*roles: str) -> Callable[..., Dict[str, Any]]:
    """Dependency factory enforcing that the caller holds one of ``roles``.

    Use as ``Depends(require_roles("admin", "super_admin"))``.
    Unauthenticated callers get 401 from ``get_current_user``;
    authenticated callers with another role get 403.
    """

    def _role_dependency(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if not is_authorized(current_user, roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _role_dependency


require_admin = require_roles(*ADMIN_ROLES)


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    A 16‑byte random salt is generated for each password.  The
    resulting string contains the salt and hash in hex separated by
    ``$``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored ``salt$hash`` string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
