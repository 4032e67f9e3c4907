"""
Configuration module: Settings, logging, constants.
"""

from ordo_shared.config.settings import settings, DATABASE_URL
from ordo_shared.config.logging import get_logger, setup_logging
from ordo_shared.config.constants import (
    Roles,
    OrderStatus,
    ReservationStatus,
    ADMIN_ONLY,
    KITCHEN_ROLES,
    STAFF_ROLES,
)

__all__ = [
    # settings
    "settings",
    "DATABASE_URL",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "Roles",
    "OrderStatus",
    "ReservationStatus",
    "ADMIN_ONLY",
    "KITCHEN_ROLES",
    "STAFF_ROLES",
]
