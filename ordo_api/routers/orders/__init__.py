"""
Order routers - /api/orders/*
Checkout, tracking, kitchen queue, payment and sales stats.
"""

from .routes import router

__all__ = ["router"]
