"""
Services module for business logic.

- domain/: Application services (orders, reservations, menu, restaurant, staff)
- permissions/: Request context and role guards
"""
