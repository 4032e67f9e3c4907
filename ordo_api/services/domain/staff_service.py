"""
Account Service - login, registration and staff management.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ordo_api.models import User
from ordo_shared.config.constants import Roles
from ordo_shared.config.logging import audit_auth_event, get_logger, mask_email
from ordo_shared.infrastructure.db import safe_commit
from ordo_shared.security.auth import sign_session_token
from ordo_shared.security.password import hash_password, verify_password
from ordo_shared.utils.exceptions import DuplicateEntityError, NotFoundError, UnauthorizedError
from ordo_shared.utils.schemas import (
    RegisterRequest,
    StaffCreateRequest,
    StaffUpdateRequest,
)

logger = get_logger(__name__)


class StaffService:
    def __init__(self, db: Session):
        self._db = db

    def _get_by_email(self, email: str) -> User | None:
        return self._db.scalar(select(User).where(User.email == email.lower()))

    def _ensure_email_free(self, email: str) -> None:
        if self._get_by_email(email) is not None:
            raise DuplicateEntityError("User with email", mask_email(email))

    # =========================================================================
    # Authentication
    # =========================================================================

    def authenticate(self, email: str, password: str, ip_address: str | None = None) -> tuple[User, str]:
        """
        Check credentials and issue a session token.

        Unknown email, inactive account and wrong password all fail the same way.
        """
        user = self._get_by_email(email)
        if user is None or not user.is_active or not verify_password(password, user.password):
            audit_auth_event(
                "LOGIN",
                user_id=user.id if user else None,
                email=email,
                success=False,
                reason="invalid credentials",
                ip_address=ip_address,
            )
            raise UnauthorizedError("Invalid credentials")

        audit_auth_event("LOGIN", user_id=user.id, email=email, ip_address=ip_address)
        return user, sign_session_token(user.id, user.email, user.role)

    def register(self, data: RegisterRequest) -> tuple[User, str]:
        self._ensure_email_free(data.email)

        user = User(
            email=data.email.lower(),
            name=data.name,
            phone=data.phone,
            password=hash_password(data.password),
            role=Roles.CUSTOMER,
        )
        self._db.add(user)
        safe_commit(self._db)
        self._db.refresh(user)

        audit_auth_event("REGISTER", user_id=user.id, email=user.email)
        return user, sign_session_token(user.id, user.email, user.role)

    def get_profile(self, user_id: int) -> User:
        user = self._db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    # =========================================================================
    # Staff management
    # =========================================================================

    def create_staff(self, data: StaffCreateRequest, created_by: int | None = None) -> User:
        self._ensure_email_free(data.email)

        user = User(
            email=data.email.lower(),
            name=data.name,
            phone=data.phone,
            password=hash_password(data.password),
            role=data.role,
        )
        self._db.add(user)
        safe_commit(self._db)
        self._db.refresh(user)

        audit_auth_event("STAFF_CREATED", user_id=user.id, email=user.email, role=user.role, created_by=created_by)
        return user

    def list_staff(self) -> list[User]:
        """Staff accounts, active first, then newest first."""
        return list(
            self._db.scalars(
                select(User)
                .where(User.role.in_(Roles.STAFF))
                .order_by(User.is_active.desc(), User.created_at.desc(), User.id.desc())
            )
        )

    def _get_staff(self, user_id: int) -> User:
        user = self._db.get(User, user_id)
        if user is None or user.role not in Roles.STAFF:
            raise NotFoundError("Staff member", user_id)
        return user

    def update_staff(self, user_id: int, data: StaffUpdateRequest, updated_by: int | None = None) -> User:
        user = self._get_staff(user_id)
        changes = data.model_dump(exclude_unset=True)
        for key, value in changes.items():
            setattr(user, key, value)
        safe_commit(self._db)
        self._db.refresh(user)
        logger.info("Staff member updated", user_id=user_id, fields=sorted(changes), updated_by=updated_by)
        return user

    def deactivate_staff(self, user_id: int, deactivated_by: int | None = None) -> User:
        user = self._get_staff(user_id)
        user.is_active = False
        safe_commit(self._db)
        self._db.refresh(user)
        audit_auth_event("STAFF_DEACTIVATED", user_id=user_id, email=user.email, deactivated_by=deactivated_by)
        return user
