"""
Postboard Backend — Access Token Helpers
==========================================

What:  Issue and verify HS256 JWT access tokens (PyJWT).
How:   `sub` carries the user id as a string; `type` must be "access".
Who:   `decode_access_token` is used by the auth dependency;
       `create_access_token` by operators' tooling and the test suite.
"""

import time
from typing import Any, Dict, Optional

import jwt

from postboard.config import settings
from postboard.exceptions import AuthenticationError


def create_access_token(user_id: int, expires_in_minutes: Optional[int] = None) -> str:
    issued_at = int(time.time())
    lifetime = expires_in_minutes if expires_in_minutes is not None else settings.access_token_expire_minutes
    payload = {
        "sub": str(user_id),
        "type": "access",
        "iat": issued_at,
        "exp": issued_at + lifetime * 60,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthenticationError("Access token is empty")

    try:
        payload = jwt.decode(raw, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Access token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid access token") from exc

    if str(payload.get("type") or "").lower() != "access":
        raise AuthenticationError("Token is not an access token")
    return payload


def user_id_from_token(token: str) -> int:
    """Validated user id carried by an access token."""
    payload = decode_access_token(token)
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Access token has no valid subject") from exc
