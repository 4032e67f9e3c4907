"""
X-Request-ID propagation.

A client-supplied request ID is reused when it looks sane, otherwise a new
one is generated. The ID is echoed on the response and stamped on every log
record emitted while the request is handled.
"""

import re
import uuid
from contextvars import ContextVar

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

REQUEST_ID_HEADER = "X-Request-ID"
_ACCEPTABLE_ID = re.compile(r"^[A-Za-z0-9._\-]{1,64}$")

_request_id: ContextVar[str] = ContextVar("request_id", default="")


def _incoming_or_new(request: Request) -> str:
    candidate = request.headers.get(REQUEST_ID_HEADER, "")
    if _ACCEPTABLE_ID.match(candidate):
        return candidate
    return uuid.uuid4().hex


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _incoming_or_new(request)
        request.state.request_id = request_id
        token = _request_id.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _request_id.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class CorrelationIdFilter:
    """logging filter: sets record.request_id ("-" outside a request)."""

    def filter(self, record) -> bool:
        record.request_id = _request_id.get() or "-"
        return True
