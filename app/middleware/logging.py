"""
Request logging middleware.

Assigns every request a short correlation id and a logger bound to it.
Handlers receive both through the get_request_context dependency.
"""

import secrets
import time
from dataclasses import dataclass

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.utils.logging import ContextLoggerAdapter, get_logger

REQUEST_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
REQUEST_ID_LENGTH = 12
REQUEST_ID_HEADER = "X-Request-ID"


def generate_request_id() -> str:
    """Random 12 character id drawn from [0-9a-z]."""
    return "".join(secrets.choice(REQUEST_ID_ALPHABET) for _ in range(REQUEST_ID_LENGTH))


@dataclass(frozen=True)
class RequestContext:
    """Per-request correlation id and the logger that stamps it on every line."""

    request_id: str
    logger: ContextLoggerAdapter

    @classmethod
    def create(cls, logger_name: str = "app.request") -> "RequestContext":
        request_id = generate_request_id()
        return cls(request_id=request_id, logger=get_logger(logger_name, request_id=request_id))


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Build a RequestContext per request and log each completed request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        context = RequestContext.create()
        request.state.context = context

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        response.headers[REQUEST_ID_HEADER] = context.request_id
        context.logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            }
        )
        return response


def get_request_context(request: Request) -> RequestContext:
    """
    FastAPI dependency returning the context built by the middleware.

    Falls back to a fresh context when the middleware is not installed.
    """
    context = getattr(request.state, "context", None)
    if context is None:
        context = RequestContext.create()
        request.state.context = context
    return context
