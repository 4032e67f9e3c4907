"""
Utilities module: Exceptions, validators, schemas, clock helpers.
"""

from ordo_shared.utils.exceptions import (
    NotFoundError,
    ForbiddenError,
    ValidationError,
    ConflictError,
    PreconditionFailedError,
    UnauthorizedError,
)
from ordo_shared.utils.validators import (
    validate_image_url,
    escape_like_pattern,
    parse_hhmm,
)

__all__ = [
    # exceptions
    "NotFoundError",
    "ForbiddenError",
    "ValidationError",
    "ConflictError",
    "PreconditionFailedError",
    "UnauthorizedError",
    # validators
    "validate_image_url",
    "escape_like_pattern",
    "parse_hhmm",
]
