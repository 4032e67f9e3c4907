"""
Domain Services - business logic behind the routers.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Model (entity)

Usage:
    from ordo_api.services.domain import OrderService

    service = OrderService(db)
    order = service.create(body)
"""

from .customer_service import CustomerService
from .menu_service import MenuService
from .order_service import OrderService
from .reservation_service import ReservationService
from .restaurant_service import RestaurantService
from .staff_service import StaffService

__all__ = [
    "CustomerService",
    "MenuService",
    "OrderService",
    "ReservationService",
    "RestaurantService",
    "StaffService",
]
