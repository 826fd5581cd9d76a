"""HTTP middleware."""

from app.middleware.logging import (
    RequestContext,
    RequestLoggingMiddleware,
    generate_request_id,
    get_request_context,
)

__all__ = [
    "RequestContext",
    "RequestLoggingMiddleware",
    "generate_request_id",
    "get_request_context",
]
