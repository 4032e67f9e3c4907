"""
Ordo REST API: menu, orders, reservations and staff accounts for a single restaurant.
"""
