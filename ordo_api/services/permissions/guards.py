"""
Authorization guards shared by every router.

Routes compose these as dependencies; a route without a guard is public.

Usage:
    @router.get("/kitchen")
    def kitchen_orders(ctx: RequestContext = Depends(kitchen_procedure)):
        ...
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from fastapi import Depends

from ordo_shared.config.constants import ADMIN_ONLY, KITCHEN_ROLES, STAFF_ROLES
from ordo_shared.utils.exceptions import InsufficientRoleError, UnauthorizedError

from .context import RequestContext, get_request_context


def is_authed(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
    """Reject anonymous callers with UNAUTHORIZED."""
    if ctx.user is None:
        raise UnauthorizedError("You must be logged in to access this resource")
    return ctx


def require_role(allowed_roles: Iterable[str]) -> Callable[..., RequestContext]:
    """
    Build a guard admitting only the given roles.

    No user -> UNAUTHORIZED; user with another role -> FORBIDDEN.
    """
    allowed = frozenset(allowed_roles)
    ordered = sorted(allowed)

    def guard(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        if ctx.user is None:
            raise UnauthorizedError("Authentication required")
        if ctx.user.role not in allowed:
            raise InsufficientRoleError(ordered, user_id=ctx.user.id, role=ctx.user.role)
        return ctx

    return guard


# Procedure tiers
public_procedure = get_request_context
protected_procedure = is_authed
admin_procedure = require_role(ADMIN_ONLY)
kitchen_procedure = require_role(KITCHEN_ROLES)
staff_procedure = require_role(STAFF_ROLES)
