"""
Centralized HTTP exceptions for consistent error handling.

Every exception carries a machine-readable ``code`` in addition to the HTTP
status, so clients can branch on the error kind without parsing messages.

Usage:
    from ordo_shared.utils.exceptions import NotFoundError, ForbiddenError

    raise NotFoundError("Order", order_number)
    raise ForbiddenError("cancel this reservation")
    raise PreconditionFailedError("Minimum order for delivery is $150.00")
"""

from typing import Any

from fastapi import HTTPException, status

from ordo_shared.config.logging import get_logger

logger = get_logger(__name__)


class ErrorCode:
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    BAD_REQUEST = "BAD_REQUEST"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    code: str = ErrorCode.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        status_code: int,
        detail: str,
        code: str | None = None,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        if code is not None:
            self.code = code

        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, code=self.code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 401 / 403
# =============================================================================


class UnauthorizedError(AppException):
    """Caller is not authenticated (401)."""

    code = ErrorCode.UNAUTHORIZED

    def __init__(self, detail: str = "You must be logged in to access this resource", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            log_level="info",
            **log_context,
        )


class ForbiddenError(AppException):
    """
    Authorization/permission error (403).

    Usage:
        raise ForbiddenError("cancel this reservation")
    """

    code = ErrorCode.FORBIDDEN

    def __init__(self, action: str | None = None, detail: str | None = None, **log_context: Any):
        if detail is None:
            detail = f"Not allowed to {action}" if action else "Access denied"

        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            action=action,
            **log_context,
        )


class InsufficientRoleError(ForbiddenError):
    """User doesn't have one of the required roles."""

    def __init__(self, required_roles: list[str], **log_context: Any):
        roles_str = ", ".join(required_roles)
        super().__init__(
            detail=f"Access denied. Required roles: {roles_str}",
            required_roles=required_roles,
            **log_context,
        )


# =============================================================================
# 404
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Menu item", 123)
        raise NotFoundError("Restaurant configuration")
    """

    code = ErrorCode.NOT_FOUND

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 400
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("The restaurant is closed on sunday", field="reservation_date")
    """

    code = ErrorCode.BAD_REQUEST

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            **log_context,
        )


# =============================================================================
# 409
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409).

    Usage:
        raise ConflictError("A user with this email already exists")
    """

    code = ErrorCode.CONFLICT

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            **log_context,
        )


class DuplicateEntityError(ConflictError):
    """Entity already exists."""

    def __init__(self, entity: str, identifier: str | None = None, **log_context: Any):
        if identifier:
            detail = f"{entity} '{identifier}' already exists"
        else:
            detail = f"{entity} already exists"

        super().__init__(detail, entity=entity, identifier=identifier, **log_context)


# =============================================================================
# 412
# =============================================================================


class PreconditionFailedError(AppException):
    """
    The request is well-formed but the current state forbids it (412).

    Usage:
        raise PreconditionFailedError("Cannot delete a category with available items")
    """

    code = ErrorCode.PRECONDITION_FAILED

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_412_PRECONDITION_FAILED,
            detail=detail,
            **log_context,
        )


class InvalidTransitionError(PreconditionFailedError):
    """Invalid status transition."""

    def __init__(self, entity: str, from_status: str, to_status: str, **log_context: Any):
        detail = f"Invalid {entity} transition from '{from_status}' to '{to_status}'"
        super().__init__(detail, entity=entity, from_status=from_status, to_status=to_status, **log_context)

