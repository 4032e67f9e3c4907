"""
Customer model: the person behind orders and reservations, keyed by phone.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType

if TYPE_CHECKING:
    from .order import Order
    from .reservation import Reservation


class Customer(AuditMixin, Base):
    """
    Created implicitly the first time a phone number orders or books.
    At most one row per phone (unique constraint).
    """

    __tablename__ = "customer"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    phone: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text)
    # Delivery addresses the customer has used, newest last
    addresses: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    orders: Mapped[list["Order"]] = relationship(back_populates="customer")
    reservations: Mapped[list["Reservation"]] = relationship(back_populates="customer")

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name='{self.name}')>"
