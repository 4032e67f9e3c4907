"""
Reservation models: Reservation, DiningTable.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType

if TYPE_CHECKING:
    from .customer import Customer


class DiningTable(AuditMixin, Base):
    """
    A physical table. When any active table exists, reservation slot
    capacity is derived from the tables that fit the party.
    """

    __tablename__ = "dining_table"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    number: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    seats: Mapped[int] = mapped_column(Integer, nullable=False)
    label: Mapped[Optional[str]] = mapped_column(Text)

    reservations: Mapped[list["Reservation"]] = relationship(back_populates="dining_table")

    __table_args__ = (
        CheckConstraint("seats > 0", name="chk_dining_table_seats_positive"),
    )

    def __repr__(self) -> str:
        return f"<DiningTable(id={self.id}, number={self.number}, seats={self.seats})>"


class Reservation(AuditMixin, Base):
    """
    A table booking request. Starts PENDING and is moved along by staff.
    reservation_time is a local "HH:MM" string on the 30-minute grid.
    """

    __tablename__ = "reservation"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    customer_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("customer.id"), nullable=False, index=True
    )
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    customer_phone: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    reservation_date: Mapped[date] = mapped_column(Date, nullable=False)
    reservation_time: Mapped[str] = mapped_column(Text, nullable=False)
    party_size: Mapped[int] = mapped_column(Integer, nullable=False)
    table_preferences: Mapped[Optional[str]] = mapped_column(Text)
    special_requests: Mapped[Optional[str]] = mapped_column(Text)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(Text, default="PENDING", nullable=False, index=True)
    dining_table_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("dining_table.id"), index=True
    )

    customer: Mapped["Customer"] = relationship(back_populates="reservations")
    dining_table: Mapped[Optional["DiningTable"]] = relationship(back_populates="reservations")

    __table_args__ = (
        CheckConstraint("party_size BETWEEN 1 AND 20", name="chk_reservation_party_size"),
        Index("ix_reservation_slot", "reservation_date", "reservation_time"),
        Index("ix_reservation_date_status", "reservation_date", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, date={self.reservation_date}, "
            f"time='{self.reservation_time}', status='{self.status}')>"
        )
