"""
Restaurant routers - /api/restaurant/*
Configuration, opening status, dashboard stats and dining tables.
"""

from .routes import router

__all__ = ["router"]
