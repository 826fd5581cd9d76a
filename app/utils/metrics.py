"""
Metrics emission for observability.

This module provides:
- Timing of timeseries store calls
- A log-backed metric emitter
"""

import time
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from app.utils.logging import get_logger, log_store_call

logger = get_logger(__name__)


class StoreCallTimer:
    """Timing result of a single store call, filled in when the call ends."""

    def __init__(self, operation: str, bucket: str):
        self.operation = operation
        self.bucket = bucket
        self.duration_ms: Optional[float] = None
        self.error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.duration_ms is not None and self.error is None


@contextmanager
def track_store_call(logger_adapter, operation: str, bucket: str) -> Iterator[StoreCallTimer]:
    """
    Context manager to time a timeseries store call.

    Usage:
        with track_store_call(ctx.logger, "write", "errors"):
            store.write(point)

    Args:
        logger_adapter: Logger for logging the call
        operation: Store operation name
        bucket: Target bucket

    Yields:
        StoreCallTimer populated once the block exits
    """
    timer = StoreCallTimer(operation, bucket)
    start_time = time.perf_counter()

    try:
        yield timer
    except Exception as e:
        timer.error = str(e)
        raise
    finally:
        timer.duration_ms = (time.perf_counter() - start_time) * 1000

        log_store_call(
            logger_adapter,
            operation=operation,
            bucket=bucket,
            duration_ms=timer.duration_ms,
            error=timer.error
        )
        emit_metric(
            "store_call_duration_ms",
            timer.duration_ms,
            operation=operation,
            outcome="ok" if timer.succeeded else "error",
        )


def emit_metric(metric_name: str, value: float, **tags: Any) -> None:
    """
    Emit a metric as a debug log line.

    Args:
        metric_name: Metric name
        value: Metric value
        **tags: Metric tags/labels
    """
    logger.debug(
        f"Metric: {metric_name}",
        extra={
            "metric_name": metric_name,
            "metric_value": value,
            "metric_tags": tags,
        }
    )
