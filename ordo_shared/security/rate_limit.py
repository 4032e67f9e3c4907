"""
Rate limiting using slowapi, keyed by client IP.
Protects the public auth endpoints from credential stuffing.

Usage in a router:

    from ordo_shared.security.rate_limit import limiter

    @router.post("/login")
    @limiter.limit(settings.login_rate_limit)
    def login(request: Request, ...):
        ...
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from ordo_shared.config.logging import get_logger
from ordo_shared.config.settings import settings
from ordo_shared.utils.exceptions import ErrorCode

logger = get_logger(__name__)

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return a JSON 429 with retry information."""
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        ip_address=get_remote_address(request),
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Too many requests. Try again later.",
            "code": ErrorCode.TOO_MANY_REQUESTS,
            "retry_after": exc.detail,
        },
        headers={"Retry-After": "60"},
    )
