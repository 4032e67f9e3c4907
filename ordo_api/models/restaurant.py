"""
Restaurant configuration model (one active row per deployment).
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import JSON, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import AuditMixin, Base, IdType


class RestaurantConfig(AuditMixin, Base):
    """
    Name, schedule, enabled services and delivery pricing of the restaurant.

    opening_hours: {"monday": {"open": "09:00", "close": "22:00", "is_closed": false}, ...}
    services: {"dine_in", "takeout", "delivery", "reservations"} booleans
    delivery_config: {"fee_cents", "minimum_order_cents", "radius_km",
                      "estimated_time_minutes", "free_over_cents"}
    """

    __tablename__ = "restaurant_config"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    contact_info: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    address: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    opening_hours: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    services: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    delivery_config: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    branding: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    def day_schedule(self, weekday: str) -> dict[str, Any] | None:
        return (self.opening_hours or {}).get(weekday)

    def service_enabled(self, service: str) -> bool:
        return bool((self.services or {}).get(service, False))

    def __repr__(self) -> str:
        return f"<RestaurantConfig(id={self.id}, slug='{self.slug}')>"
