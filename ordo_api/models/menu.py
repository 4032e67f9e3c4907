"""
Menu models: MenuCategory, MenuItem, ItemModifier.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import JSON, Boolean, CheckConstraint, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType


class MenuCategory(AuditMixin, Base):
    """
    A section of the menu (e.g. "Entradas", "Bebidas").
    Deleting a category soft-deletes it (is_active=False).
    """

    __tablename__ = "menu_category"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    items: Mapped[list["MenuItem"]] = relationship(back_populates="category")

    __table_args__ = (
        Index("ix_menu_category_active_order", "is_active", "sort_order"),
    )

    def __repr__(self) -> str:
        return f"<MenuCategory(id={self.id}, name='{self.name}')>"


class MenuItem(AuditMixin, Base):
    """A dish or drink. Prices are integer cents."""

    __tablename__ = "menu_item"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    category_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("menu_category.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    image_urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    preparation_time_minutes: Mapped[Optional[int]] = mapped_column(Integer)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    ingredients: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    allergens: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # {"vegetarian", "vegan", "gluten_free", "spicy_level"}
    dietary_info: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    category: Mapped["MenuCategory"] = relationship(back_populates="items")
    modifiers: Mapped[list["ItemModifier"]] = relationship(
        back_populates="menu_item",
        cascade="all, delete-orphan",
        order_by="ItemModifier.id",
    )

    __table_args__ = (
        CheckConstraint("price_cents > 0", name="chk_menu_item_price_positive"),
        Index("ix_menu_item_category_available", "category_id", "is_available"),
    )

    def __repr__(self) -> str:
        return f"<MenuItem(id={self.id}, name='{self.name}', price_cents={self.price_cents})>"


class ItemModifier(Base):
    """
    An optional add-on or variation for a menu item ("Extra queso", "Tamaño").
    Hard-deleted, owned by exactly one MenuItem.
    """

    __tablename__ = "item_modifier"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    menu_item_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("menu_item.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    price_adjustment_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # [{"name": "Grande"}, {"name": "Chica"}]
    options: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    menu_item: Mapped["MenuItem"] = relationship(back_populates="modifiers")

    def __repr__(self) -> str:
        return f"<ItemModifier(id={self.id}, name='{self.name}', menu_item_id={self.menu_item_id})>"
