"""
Utility modules for the Error Log Ingestor.
"""

from app.utils.logging import (
    get_logger,
    setup_logging,
    log_validation_failure,
    log_store_call,
    log_error_with_context,
)
from app.utils.metrics import (
    track_store_call,
    emit_metric,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "log_validation_failure",
    "log_store_call",
    "log_error_with_context",
    "track_store_call",
    "emit_metric",
]
