"""
Centralized constants for the backend application.

Usage:
    from ordo_shared.config.constants import Roles, STAFF_ROLES, OrderStatus

    if user.role in STAFF_ROLES:
        ...

    if order.status == OrderStatus.PENDING:
        ...
"""

from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Roles:
    """User role constants."""

    CUSTOMER: Final[str] = "CUSTOMER"
    ADMIN: Final[str] = "ADMIN"
    KITCHEN: Final[str] = "KITCHEN"
    WAITER: Final[str] = "WAITER"
    CASHIER: Final[str] = "CASHIER"

    ALL: Final[list[str]] = [CUSTOMER, ADMIN, KITCHEN, WAITER, CASHIER]
    STAFF: Final[list[str]] = [ADMIN, KITCHEN, WAITER, CASHIER]


# Role groups for route guards
ADMIN_ONLY: Final[frozenset[str]] = frozenset({Roles.ADMIN})
KITCHEN_ROLES: Final[frozenset[str]] = frozenset({Roles.ADMIN, Roles.KITCHEN})
STAFF_ROLES: Final[frozenset[str]] = frozenset(
    {Roles.ADMIN, Roles.KITCHEN, Roles.WAITER, Roles.CASHIER}
)


# =============================================================================
# Orders
# =============================================================================


class OrderType:
    DINE_IN: Final[str] = "DINE_IN"
    TAKEOUT: Final[str] = "TAKEOUT"
    DELIVERY: Final[str] = "DELIVERY"

    ALL: Final[list[str]] = [DINE_IN, TAKEOUT, DELIVERY]


class OrderStatus:
    """Order status constants, listed in lifecycle order."""

    PENDING: Final[str] = "PENDING"
    CONFIRMED: Final[str] = "CONFIRMED"
    PREPARING: Final[str] = "PREPARING"
    READY: Final[str] = "READY"
    OUT_FOR_DELIVERY: Final[str] = "OUT_FOR_DELIVERY"
    DELIVERED: Final[str] = "DELIVERED"
    COMPLETED: Final[str] = "COMPLETED"
    CANCELLED: Final[str] = "CANCELLED"

    # Forward chain, CANCELLED sits outside it
    CHAIN: Final[list[str]] = [
        PENDING, CONFIRMED, PREPARING, READY, OUT_FOR_DELIVERY, DELIVERED, COMPLETED,
    ]
    ALL: Final[list[str]] = CHAIN + [CANCELLED]
    TERMINAL: Final[list[str]] = [COMPLETED, CANCELLED]
    ACTIVE: Final[list[str]] = [PENDING, CONFIRMED, PREPARING, READY, OUT_FOR_DELIVERY]
    KITCHEN_VISIBLE: Final[list[str]] = [CONFIRMED, PREPARING]


class PaymentStatus:
    PENDING: Final[str] = "PENDING"
    PAID: Final[str] = "PAID"

    ALL: Final[list[str]] = [PENDING, PAID]


def _build_order_transitions() -> dict[str, list[str]]:
    transitions: dict[str, list[str]] = {}
    chain = OrderStatus.CHAIN
    for index, status in enumerate(chain):
        if status in OrderStatus.TERMINAL:
            transitions[status] = []
        else:
            # Any forward move, skipping intermediate states, or a cancel
            transitions[status] = chain[index + 1:] + [OrderStatus.CANCELLED]
    transitions[OrderStatus.CANCELLED] = []
    return transitions


ORDER_TRANSITIONS: Final[dict[str, list[str]]] = _build_order_transitions()


# =============================================================================
# Reservations
# =============================================================================


class ReservationStatus:
    PENDING: Final[str] = "PENDING"
    CONFIRMED: Final[str] = "CONFIRMED"
    SEATED: Final[str] = "SEATED"
    COMPLETED: Final[str] = "COMPLETED"
    CANCELLED: Final[str] = "CANCELLED"
    NO_SHOW: Final[str] = "NO_SHOW"

    ALL: Final[list[str]] = [PENDING, CONFIRMED, SEATED, COMPLETED, CANCELLED, NO_SHOW]
    # Statuses that hold a slot
    HOLDING: Final[list[str]] = [PENDING, CONFIRMED, SEATED]
    UPCOMING: Final[list[str]] = [PENDING, CONFIRMED]


RESERVATION_TRANSITIONS: Final[dict[str, list[str]]] = {
    ReservationStatus.PENDING: [
        ReservationStatus.CONFIRMED,
        ReservationStatus.CANCELLED,
        ReservationStatus.NO_SHOW,
    ],
    ReservationStatus.CONFIRMED: [
        ReservationStatus.SEATED,
        ReservationStatus.CANCELLED,
        ReservationStatus.NO_SHOW,
    ],
    ReservationStatus.SEATED: [ReservationStatus.COMPLETED],
    ReservationStatus.COMPLETED: [],  # Terminal
    ReservationStatus.CANCELLED: [],  # Terminal
    ReservationStatus.NO_SHOW: [],  # Terminal
}


# =============================================================================
# Restaurant schedule
# =============================================================================

WEEKDAYS: Final[list[str]] = [
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
]


# =============================================================================
# Validation helpers
# =============================================================================


def validate_order_transition(current_status: str, target_status: str) -> bool:
    """Return True when an order may move from current_status to target_status."""
    return target_status in ORDER_TRANSITIONS.get(current_status, [])


def validate_reservation_transition(current_status: str, target_status: str) -> bool:
    """Return True when a reservation may move from current_status to target_status."""
    return target_status in RESERVATION_TRANSITIONS.get(current_status, [])
