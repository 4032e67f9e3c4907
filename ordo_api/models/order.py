"""
Order models: Order, OrderItem.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType

if TYPE_CHECKING:
    from .customer import Customer
    from .menu import MenuItem


class Order(AuditMixin, Base):
    """
    A customer order. Created together with its items in one transaction.

    Amounts are integer cents and always satisfy
    total = subtotal + tax + delivery_fee + tip - discount.
    """

    # "order" is a reserved word in SQL
    __tablename__ = "customer_order"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    order_number: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    customer_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("customer.id"), nullable=False, index=True
    )
    order_type: Mapped[str] = mapped_column(Text, nullable=False)  # DINE_IN, TAKEOUT, DELIVERY
    status: Mapped[str] = mapped_column(Text, default="PENDING", nullable=False, index=True)

    subtotal_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    tax_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    delivery_fee_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tip_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    discount_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    payment_status: Mapped[str] = mapped_column(Text, default="PENDING", nullable=False, index=True)
    payment_method: Mapped[str] = mapped_column(Text, nullable=False)  # cash, card, transfer
    payment_reference: Mapped[Optional[str]] = mapped_column(Text)

    # Snapshot of who ordered and where, independent of later customer edits
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    customer_phone: Mapped[str] = mapped_column(Text, nullable=False)
    delivery_address: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON)
    table_number: Mapped[Optional[str]] = mapped_column(Text)
    special_instructions: Mapped[Optional[str]] = mapped_column(Text)

    estimated_ready_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    ready_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    delivered_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    customer: Mapped["Customer"] = relationship(back_populates="orders")
    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    __table_args__ = (
        CheckConstraint("subtotal_cents >= 0", name="chk_order_subtotal_non_negative"),
        CheckConstraint("total_cents >= 0", name="chk_order_total_non_negative"),
        CheckConstraint(
            "order_type IN ('DINE_IN', 'TAKEOUT', 'DELIVERY')",
            name="chk_order_type_valid",
        ),
        Index("ix_order_status_created", "status", "created_at"),
        Index("ix_order_payment_created", "payment_status", "created_at"),
    )

    def recompute_total(self) -> int:
        """Recompute total_cents from its parts and return it."""
        self.total_cents = (
            self.subtotal_cents
            + self.tax_amount_cents
            + self.delivery_fee_cents
            + (self.tip_amount_cents or 0)
            - (self.discount_amount_cents or 0)
        )
        return self.total_cents

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, order_number='{self.order_number}', status='{self.status}')>"


class OrderItem(Base):
    """
    A line of an order. Immutable after creation.
    unit_price_cents is the price at order time including applied modifiers.
    """

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("customer_order.id", ondelete="CASCADE"), nullable=False, index=True
    )
    menu_item_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("menu_item.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    # [{"id", "name", "price_adjustment_cents", "selected_options"}]
    modifiers: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    special_instructions: Mapped[Optional[str]] = mapped_column(Text)

    order: Mapped["Order"] = relationship(back_populates="items")
    menu_item: Mapped["MenuItem"] = relationship()

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_order_item_qty_positive"),
        CheckConstraint("unit_price_cents >= 0", name="chk_order_item_price_non_negative"),
    )

    @property
    def menu_item_name(self) -> str | None:
        return self.menu_item.name if self.menu_item is not None else None

    def __repr__(self) -> str:
        return f"<OrderItem(id={self.id}, order_id={self.order_id}, qty={self.quantity})>"
