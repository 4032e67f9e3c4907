"""
Request context - who is calling, resolved once per request.

Credentials come from two adapters, the ``Authorization: Bearer`` header and
the session cookie, and feed a single resolver. A bad or stale credential
never fails the request: the caller is treated as anonymous and the route's
guards decide what happens next.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Cookie, Depends, Header
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ordo_api.models import User
from ordo_shared.config.logging import get_logger
from ordo_shared.config.settings import settings
from ordo_shared.infrastructure.db import get_db
from ordo_shared.security.auth import strip_bearer, verify_jwt
from ordo_shared.utils.exceptions import UnauthorizedError

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthUser:
    """Identity attached to an authenticated request."""

    id: int
    email: str
    role: str


@dataclass
class RequestContext:
    db: Session
    user: AuthUser | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def role(self) -> str | None:
        return self.user.role if self.user else None


def bearer_credential(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> str | None:
    return strip_bearer(authorization)


def cookie_credential(
    session_token: str | None = Cookie(default=None, alias=settings.session_cookie_name),
) -> str | None:
    return session_token or None


def resolve_user(db: Session, token: str | None) -> AuthUser | None:
    """
    Verify the token and load the active user it names.

    Returns None for a missing, invalid or expired token, or when the user
    no longer exists or has been deactivated.
    """
    if not token:
        return None

    try:
        payload = verify_jwt(token)
        user = db.scalar(
            select(User).where(User.id == payload["userId"], User.is_active.is_(True))
        )
    except UnauthorizedError:
        return None
    except SQLAlchemyError as e:
        logger.warning("User lookup failed while building request context", error=str(e))
        return None

    if user is None:
        logger.debug("Token refers to a missing or inactive user", user_id=payload.get("userId"))
        return None

    return AuthUser(id=user.id, email=user.email, role=user.role)


def get_request_context(
    db: Session = Depends(get_db),
    bearer_token: str | None = Depends(bearer_credential),
    cookie_token: str | None = Depends(cookie_credential),
) -> RequestContext:
    """
    FastAPI dependency building the per-request context.

    The bearer header takes precedence over the cookie when both are sent.
    """
    user = resolve_user(db, bearer_token or cookie_token)
    return RequestContext(db=db, user=user)
