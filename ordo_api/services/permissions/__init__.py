"""
Permissions: request context construction and role guards.
"""

from .context import AuthUser, RequestContext, get_request_context, resolve_user
from .guards import (
    admin_procedure,
    is_authed,
    kitchen_procedure,
    protected_procedure,
    public_procedure,
    require_role,
    staff_procedure,
)

__all__ = [
    "AuthUser",
    "RequestContext",
    "get_request_context",
    "resolve_user",
    "is_authed",
    "require_role",
    "public_procedure",
    "protected_procedure",
    "admin_procedure",
    "kitchen_procedure",
    "staff_procedure",
]
