"""
SQLAlchemy ORM Models Package.

- base: Base class and AuditMixin
- user: User (customers with accounts and staff)
- customer: Customer (resolved by phone)
- menu: MenuCategory, MenuItem, ItemModifier
- order: Order, OrderItem
- reservation: Reservation, DiningTable
- restaurant: RestaurantConfig
"""

from .base import AuditMixin, Base
from .customer import Customer
from .menu import ItemModifier, MenuCategory, MenuItem
from .order import Order, OrderItem
from .reservation import DiningTable, Reservation
from .restaurant import RestaurantConfig
from .user import User

__all__ = [
    "Base",
    "AuditMixin",
    "User",
    "Customer",
    "MenuCategory",
    "MenuItem",
    "ItemModifier",
    "Order",
    "OrderItem",
    "Reservation",
    "DiningTable",
    "RestaurantConfig",
]
