"""
JWT utilities for session tokens.

Tokens carry ``userId``, ``email`` and ``role`` plus the standard
iss/aud/iat/exp/jti claims and are signed with HS256.
"""

from __future__ import annotations

import time
import uuid
from typing import Any

import jwt

from ordo_shared.config.logging import get_logger
from ordo_shared.config.settings import JWT_AUDIENCE, JWT_ISSUER, JWT_SECRET, settings
from ordo_shared.utils.exceptions import UnauthorizedError

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def token_ttl_seconds() -> int:
    return settings.jwt_expire_days * 24 * 60 * 60


def sign_jwt(payload: dict[str, Any], ttl_seconds: int | None = None) -> str:
    """
    Sign a JWT token with the given payload.

    Args:
        payload: Claims to include in the token (userId, email, role).
        ttl_seconds: Token lifetime in seconds. Defaults to ``jwt_expire_days``.

    Returns:
        Signed JWT token string.
    """
    if ttl_seconds is None:
        ttl_seconds = token_ttl_seconds()

    now = int(time.time())
    data = {
        **payload,
        "sub": str(payload["userId"]),
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def sign_session_token(user_id: int, email: str, role: str) -> str:
    """Create the session token returned by login and register."""
    return sign_jwt({"userId": user_id, "email": email, "role": role})


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Raises:
        UnauthorizedError: If the token is invalid, expired or lacks required claims.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError as e:
        # Generic message to the client, real reason to the log
        logger.debug("JWT validation failed", error=str(e))
        raise UnauthorizedError("Invalid token")

    user_id = payload.get("userId")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise UnauthorizedError("Invalid token: malformed userId claim")
    if "role" not in payload:
        raise UnauthorizedError("Invalid token: missing role claim")

    return payload


def strip_bearer(authorization: str | None) -> str | None:
    """Return the raw token from an ``Authorization: Bearer <jwt>`` header value."""
    if not authorization:
        return None
    if authorization.startswith(BEARER_PREFIX):
        token = authorization[len(BEARER_PREFIX):].strip()
        return token or None
    return None
