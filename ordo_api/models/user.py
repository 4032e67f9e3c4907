"""
User model: customers with an account and staff members.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import AuditMixin, Base, IdType


class User(AuditMixin, Base):
    """
    A login-capable account.

    role is CUSTOMER for self-registered accounts, or one of the staff roles
    (ADMIN, KITCHEN, WAITER, CASHIER) for accounts created by an admin.
    Users are never hard-deleted; deactivation clears is_active.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)  # bcrypt hash
    role: Mapped[str] = mapped_column(Text, nullable=False, default="CUSTOMER")
    phone: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint(
            "role IN ('CUSTOMER', 'ADMIN', 'KITCHEN', 'WAITER', 'CASHIER')",
            name="chk_user_role_valid",
        ),
        Index("ix_user_role_active", "role", "is_active"),
    )

    @property
    def is_staff(self) -> bool:
        return self.role != "CUSTOMER"

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
