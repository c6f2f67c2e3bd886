"""Request correlation IDs.

Every request gets an ``X-Correlation-ID``: the caller's own value when it
sends one, a fresh short id otherwise. The id is echoed on the response,
exposed on ``request.state`` and stamped onto every log record emitted while
the request is handled, so upstream VNDB and torrent index failures can be
traced back to the page or API call that triggered them.
"""

import logging
import uuid
from contextvars import ContextVar

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

CORRELATION_HEADER = "X-Correlation-ID"
MAX_CORRELATION_ID_LENGTH = 64

_current_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str:
    """Correlation ID of the request being handled, or "" outside a request."""
    return _current_id.get() or ""


def new_correlation_id() -> str:
    return uuid.uuid4().hex[:16]


class CorrelationIDLogFilter(logging.Filter):
    """Adds ``correlation_id`` to log records ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        incoming = request.headers.get(CORRELATION_HEADER, "").strip()
        correlation_id = incoming[:MAX_CORRELATION_ID_LENGTH] or new_correlation_id()
        request.state.correlation_id = correlation_id

        token = _current_id.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            _current_id.reset(token)

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
