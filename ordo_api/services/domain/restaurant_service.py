"""
Restaurant Service.

Configuration singleton, open/closed status, dashboard stats and the
dining-table inventory.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ordo_api.models import Customer, DiningTable, Order, Reservation, RestaurantConfig
from ordo_shared.config.constants import OrderStatus, PaymentStatus, ReservationStatus
from ordo_shared.config.logging import get_logger
from ordo_shared.infrastructure.db import safe_commit
from ordo_shared.utils.clock import local_day_bounds, restaurant_now, restaurant_today
from ordo_shared.utils.exceptions import ConflictError, DuplicateEntityError, NotFoundError
from ordo_shared.utils.schemas import (
    DiningTableCreate,
    DiningTableUpdate,
    IsOpenOutput,
    RestaurantConfigCreate,
    RestaurantConfigUpdate,
    RestaurantStats,
)

from .schedule import day_window, weekday_name

logger = get_logger(__name__)


class RestaurantService:
    def __init__(self, db: Session):
        self._db = db

    # =========================================================================
    # Configuration
    # =========================================================================

    def get_active_config(self) -> RestaurantConfig | None:
        return self._db.scalar(
            select(RestaurantConfig)
            .where(RestaurantConfig.is_active.is_(True))
            .order_by(RestaurantConfig.id)
            .limit(1)
        )

    def require_config(self) -> RestaurantConfig:
        config = self.get_active_config()
        if config is None:
            raise NotFoundError("Restaurant configuration")
        return config

    def get_by_slug(self, slug: str) -> RestaurantConfig:
        config = self._db.scalar(
            select(RestaurantConfig).where(
                RestaurantConfig.slug == slug,
                RestaurantConfig.is_active.is_(True),
            )
        )
        if config is None:
            raise NotFoundError("Restaurant", slug)
        return config

    def create_config(self, data: RestaurantConfigCreate) -> RestaurantConfig:
        if self.get_active_config() is not None:
            raise ConflictError("Restaurant configuration already exists")

        config = RestaurantConfig(**data.model_dump())
        self._db.add(config)
        safe_commit(self._db)
        self._db.refresh(config)
        logger.info("Restaurant configuration created", config_id=config.id, slug=config.slug)
        return config

    def update_config(self, data: RestaurantConfigUpdate) -> RestaurantConfig:
        config = self.require_config()
        changes = data.model_dump(exclude_unset=True)
        for key, value in changes.items():
            # JSON columns are replaced wholesale
            setattr(config, key, value)
        safe_commit(self._db)
        self._db.refresh(config)
        logger.info("Restaurant configuration updated", config_id=config.id, fields=sorted(changes))
        return config

    # =========================================================================
    # Status
    # =========================================================================

    def is_open(self) -> IsOpenOutput:
        """Whether the restaurant is open right now, in restaurant-local time."""
        now = restaurant_now()
        current_time = now.strftime("%H:%M")
        config = self.get_active_config()
        if config is None:
            return IsOpenOutput(
                is_open=False,
                reason="Restaurant configuration not found",
                current_time=current_time,
            )

        today = now.date()
        schedule = config.day_schedule(weekday_name(today))
        window = day_window(config.opening_hours, today)
        if window is None:
            return IsOpenOutput(
                is_open=False,
                reason="Closed today",
                restaurant_name=config.name,
                opening_hours=schedule,
                current_time=current_time,
            )

        minutes = now.hour * 60 + now.minute
        is_open = window.contains(minutes)
        return IsOpenOutput(
            is_open=is_open,
            reason=None if is_open else "Outside opening hours",
            restaurant_name=config.name,
            opening_hours=schedule,
            current_time=current_time,
        )

    def get_stats(self) -> RestaurantStats:
        """Dashboard counters for the current restaurant-local day."""
        today = restaurant_today()
        start, end = local_day_bounds(today)

        today_orders = self._db.scalar(
            select(func.count(Order.id)).where(
                Order.created_at >= start,
                Order.created_at < end,
                Order.status != OrderStatus.CANCELLED,
            )
        ) or 0
        today_reservations = self._db.scalar(
            select(func.count(Reservation.id)).where(
                Reservation.reservation_date == today,
                Reservation.status != ReservationStatus.CANCELLED,
            )
        ) or 0
        total_customers = self._db.scalar(select(func.count(Customer.id))) or 0
        today_sales = self._db.scalar(
            select(func.coalesce(func.sum(Order.total_cents), 0)).where(
                Order.created_at >= start,
                Order.created_at < end,
                Order.payment_status == PaymentStatus.PAID,
            )
        ) or 0

        return RestaurantStats(
            today_orders=today_orders,
            today_reservations=today_reservations,
            total_customers=total_customers,
            today_sales_cents=int(today_sales),
        )

    # =========================================================================
    # Dining tables
    # =========================================================================

    def list_tables(self, include_inactive: bool = False) -> list[DiningTable]:
        query = select(DiningTable).order_by(DiningTable.number)
        if not include_inactive:
            query = query.where(DiningTable.is_active.is_(True))
        return list(self._db.scalars(query))

    def get_table(self, table_id: int) -> DiningTable:
        table = self._db.get(DiningTable, table_id)
        if table is None:
            raise NotFoundError("Dining table", table_id)
        return table

    def create_table(self, data: DiningTableCreate) -> DiningTable:
        exists = self._db.scalar(select(DiningTable.id).where(DiningTable.number == data.number))
        if exists is not None:
            raise DuplicateEntityError("Dining table", str(data.number))

        table = DiningTable(**data.model_dump())
        self._db.add(table)
        safe_commit(self._db)
        self._db.refresh(table)
        logger.info("Dining table created", table_id=table.id, number=table.number, seats=table.seats)
        return table

    def update_table(self, table_id: int, data: DiningTableUpdate) -> DiningTable:
        table = self.get_table(table_id)
        changes: dict[str, Any] = data.model_dump(exclude_unset=True)
        for key, value in changes.items():
            setattr(table, key, value)
        safe_commit(self._db)
        self._db.refresh(table)
        return table
