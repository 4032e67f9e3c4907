"""
Menu Service.

Categories, items and modifiers. Reads used by the storefront only return
active categories and available items; staff writes go through the same
service.

Usage:
    service = MenuService(db)
    categories = service.list_categories_with_preview()
    item = service.toggle_availability(item_id, is_available=False)
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.orm import Session, selectinload

from ordo_api.models import ItemModifier, MenuCategory, MenuItem
from ordo_shared.config.logging import get_logger
from ordo_shared.infrastructure.db import safe_commit
from ordo_shared.utils.exceptions import NotFoundError, PreconditionFailedError
from ordo_shared.utils.schemas import (
    CategoryCreate,
    CategoryPreviewOutput,
    CategoryUpdate,
    MenuItemCreate,
    MenuItemPreview,
    MenuItemUpdate,
    ModifierCreate,
    ModifierUpdate,
)
from ordo_shared.utils.validators import escape_like_pattern, sanitize_search_term

logger = get_logger(__name__)

PREVIEW_ITEMS = 3
FEATURED_LIMIT = 6
SEARCH_LIMIT = 20


class MenuService:
    def __init__(self, db: Session):
        self._db = db

    # =========================================================================
    # Categories
    # =========================================================================

    def get_category(self, category_id: int, *, active_only: bool = True) -> MenuCategory:
        category = self._db.get(MenuCategory, category_id)
        if category is None or (active_only and not category.is_active):
            raise NotFoundError("Category", category_id)
        return category

    def list_categories_with_preview(self) -> list[CategoryPreviewOutput]:
        """Active categories with a short preview of available items and their count."""
        categories = self._db.scalars(
            select(MenuCategory)
            .where(MenuCategory.is_active.is_(True))
            .order_by(MenuCategory.sort_order, MenuCategory.id)
        ).all()

        counts = dict(
            self._db.execute(
                select(MenuItem.category_id, func.count(MenuItem.id))
                .where(MenuItem.is_available.is_(True), MenuItem.is_active.is_(True))
                .group_by(MenuItem.category_id)
            ).all()
        )

        result = []
        for category in categories:
            preview = self._db.scalars(
                select(MenuItem)
                .where(
                    MenuItem.category_id == category.id,
                    MenuItem.is_available.is_(True),
                    MenuItem.is_active.is_(True),
                )
                .order_by(MenuItem.is_featured.desc(), MenuItem.name)
                .limit(PREVIEW_ITEMS)
            ).all()
            result.append(
                CategoryPreviewOutput(
                    id=category.id,
                    name=category.name,
                    description=category.description,
                    sort_order=category.sort_order,
                    is_active=category.is_active,
                    preview_items=[MenuItemPreview.model_validate(item) for item in preview],
                    item_count=counts.get(category.id, 0),
                )
            )
        return result

    def create_category(self, data: CategoryCreate) -> MenuCategory:
        category = MenuCategory(**data.model_dump())
        self._db.add(category)
        safe_commit(self._db)
        self._db.refresh(category)
        logger.info("Category created", category_id=category.id, name=category.name)
        return category

    def update_category(self, category_id: int, data: CategoryUpdate) -> MenuCategory:
        category = self.get_category(category_id, active_only=False)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(category, key, value)
        safe_commit(self._db)
        self._db.refresh(category)
        return category

    def delete_category(self, category_id: int) -> MenuCategory:
        """
        Soft-delete a category.

        Refused while the category still has available items.
        """
        category = self.get_category(category_id)
        available = self._db.scalar(
            select(func.count(MenuItem.id)).where(
                MenuItem.category_id == category_id,
                MenuItem.is_available.is_(True),
                MenuItem.is_active.is_(True),
            )
        ) or 0
        if available:
            raise PreconditionFailedError(
                "Cannot delete a category with available items",
                category_id=category_id,
                available_items=available,
            )

        category.soft_delete()
        safe_commit(self._db)
        logger.info("Category deleted", category_id=category_id)
        return category

    # =========================================================================
    # Items
    # =========================================================================

    def _available_items(self):
        return (
            select(MenuItem)
            .options(selectinload(MenuItem.modifiers))
            .join(MenuCategory, MenuItem.category_id == MenuCategory.id)
            .where(
                MenuItem.is_available.is_(True),
                MenuItem.is_active.is_(True),
                MenuCategory.is_active.is_(True),
            )
        )

    def get_full_menu(self) -> list[dict[str, Any]]:
        """Active categories, each with its available items (featured first)."""
        categories = self._db.scalars(
            select(MenuCategory)
            .where(MenuCategory.is_active.is_(True))
            .order_by(MenuCategory.sort_order, MenuCategory.id)
        ).all()
        items = self._db.scalars(
            self._available_items().order_by(MenuItem.is_featured.desc(), MenuItem.name)
        ).all()

        by_category: dict[int, list[MenuItem]] = {}
        for item in items:
            by_category.setdefault(item.category_id, []).append(item)

        return [
            {"category": category, "items": by_category.get(category.id, [])}
            for category in categories
        ]

    def list_items_by_category(self, category_id: int) -> list[MenuItem]:
        return list(
            self._db.scalars(
                self._available_items()
                .where(MenuItem.category_id == category_id)
                .order_by(MenuItem.is_featured.desc(), MenuItem.name)
            )
        )

    def get_item(self, item_id: int) -> MenuItem:
        item = self._db.scalar(
            select(MenuItem)
            .options(selectinload(MenuItem.modifiers))
            .where(MenuItem.id == item_id, MenuItem.is_active.is_(True))
        )
        if item is None:
            raise NotFoundError("Menu item", item_id)
        return item

    def list_featured(self) -> list[MenuItem]:
        return list(
            self._db.scalars(
                self._available_items()
                .where(MenuItem.is_featured.is_(True))
                .order_by(MenuItem.name)
                .limit(FEATURED_LIMIT)
            )
        )

    def search_items(self, query: str, category_id: int | None = None) -> list[MenuItem]:
        """
        Case-insensitive match on name, description or ingredients.
        Featured items first, at most SEARCH_LIMIT results.
        """
        term = sanitize_search_term(query)
        pattern = f"%{escape_like_pattern(term.lower())}%"

        stmt = self._available_items().where(
            or_(
                func.lower(MenuItem.name).like(pattern, escape="\\"),
                func.lower(func.coalesce(MenuItem.description, "")).like(pattern, escape="\\"),
                func.lower(cast(MenuItem.ingredients, String)).like(pattern, escape="\\"),
            )
        )
        if category_id is not None:
            stmt = stmt.where(MenuItem.category_id == category_id)

        return list(
            self._db.scalars(
                stmt.order_by(MenuItem.is_featured.desc(), MenuItem.name).limit(SEARCH_LIMIT)
            )
        )

    def create_item(self, data: MenuItemCreate) -> MenuItem:
        self.get_category(data.category_id)

        item = MenuItem(**data.model_dump())
        self._db.add(item)
        safe_commit(self._db)
        self._db.refresh(item)
        logger.info("Menu item created", item_id=item.id, name=item.name, price_cents=item.price_cents)
        return item

    def update_item(self, item_id: int, data: MenuItemUpdate) -> MenuItem:
        item = self.get_item(item_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("category_id") is not None:
            self.get_category(changes["category_id"])
        for key, value in changes.items():
            setattr(item, key, value)
        safe_commit(self._db)
        self._db.refresh(item)
        return item

    def toggle_availability(self, item_id: int, is_available: bool) -> MenuItem:
        """Set availability to the given value. Repeating the call changes nothing."""
        item = self.get_item(item_id)
        if item.is_available != is_available:
            item.is_available = is_available
            safe_commit(self._db)
            self._db.refresh(item)
            logger.info("Menu item availability changed", item_id=item_id, is_available=is_available)
        return item

    # =========================================================================
    # Modifiers
    # =========================================================================

    def get_modifier(self, modifier_id: int) -> ItemModifier:
        modifier = self._db.get(ItemModifier, modifier_id)
        if modifier is None:
            raise NotFoundError("Modifier", modifier_id)
        return modifier

    def create_modifier(self, data: ModifierCreate) -> ItemModifier:
        self.get_item(data.menu_item_id)

        modifier = ItemModifier(**data.model_dump())
        self._db.add(modifier)
        safe_commit(self._db)
        self._db.refresh(modifier)
        logger.info("Modifier created", modifier_id=modifier.id, menu_item_id=modifier.menu_item_id)
        return modifier

    def update_modifier(self, modifier_id: int, data: ModifierUpdate) -> ItemModifier:
        modifier = self.get_modifier(modifier_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(modifier, key, value)
        safe_commit(self._db)
        self._db.refresh(modifier)
        return modifier

    def delete_modifier(self, modifier_id: int) -> None:
        modifier = self.get_modifier(modifier_id)
        self._db.delete(modifier)
        safe_commit(self._db)
        logger.info("Modifier deleted", modifier_id=modifier_id)
