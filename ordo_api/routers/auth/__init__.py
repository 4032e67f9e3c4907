"""
Authentication routers - /api/auth/*
Handles login, registration, logout, profile and staff accounts.
"""

from .routes import router

__all__ = ["router"]
