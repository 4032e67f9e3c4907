"""
Reservation routers - /api/reservations/*
"""

from .routes import router

__all__ = ["router"]
