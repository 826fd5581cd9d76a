"""
Error report ingestion.

Validates an incoming report and writes it to the timeseries store as a
single error_logs point. Each step raises an IngestionError subclass that
the API layer turns into the HTTP response.
"""

import json
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol

from pydantic import ValidationError

from app.errors import MalformedInputError, PersistenceError, ProtocolError
from app.middleware.logging import RequestContext
from app.models.point import StoredPoint
from app.models.report import ErrorReport
from app.services.timeseries_store import StoreWriteError
from app.utils.logging import log_error_with_context, log_validation_failure
from app.utils.metrics import track_store_call

JSON_MEDIA_TYPE = "application/json"


class PointWriter(Protocol):
    """What the ingestor needs from a store."""

    bucket: str

    def write(self, point: StoredPoint) -> None: ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def media_type(content_type: Optional[str]) -> str:
    """Bare, lower-cased media type of a Content-Type header value."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


class ReportIngestor:
    """
    Validate → build → write pipeline for error reports.

    Shared by all requests; holds no per-request state.
    """

    def __init__(self, store: PointWriter, clock: Callable[[], datetime] = utc_now):
        """
        Initialize the ingestor.

        Args:
            store: Timeseries store receiving points
            clock: Source of ingestion timestamps
        """
        self.store = store
        self._clock = clock

    def check_content_type(self, content_type: Optional[str], ctx: RequestContext) -> None:
        """
        Reject anything that is not application/json.

        Raises:
            ProtocolError: On a missing or different media type
        """
        if media_type(content_type) != JSON_MEDIA_TYPE:
            log_validation_failure(
                ctx.logger,
                f"Invalid Content-Type. Expected {JSON_MEDIA_TYPE}, got {content_type!r}",
                content_type=content_type,
            )
            raise ProtocolError()

    def parse_report(self, body: bytes, ctx: RequestContext) -> ErrorReport:
        """
        Decode and validate a request body.

        Args:
            body: Raw request body
            ctx: Request context

        Returns:
            ErrorReport with all required fields non-empty

        Raises:
            MalformedInputError: If the body is not a JSON report or lacks required fields
        """
        try:
            data: Any = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            log_validation_failure(ctx.logger, f"Error unmarshalling JSON: {e}")
            raise MalformedInputError("Error unmarshalling JSON") from e

        try:
            report = ErrorReport.model_validate(data if data is not None else {})
        except ValidationError as e:
            log_validation_failure(
                ctx.logger,
                f"Error unmarshalling JSON: {e.error_count()} invalid value(s)",
                errors=[error["msg"] for error in e.errors()],
            )
            raise MalformedInputError("Error unmarshalling JSON") from e

        missing = report.missing_fields()
        if missing:
            log_validation_failure(
                ctx.logger,
                "Missing required fields in the JSON payload",
                missing_fields=missing,
            )
            raise MalformedInputError("Missing required fields in the JSON payload")

        return report

    def build_point(self, report: ErrorReport) -> StoredPoint:
        """Build the error_logs point, timestamped now."""
        return StoredPoint.from_report(report, timestamp=self._clock())

    def write_point(self, point: StoredPoint, ctx: RequestContext) -> None:
        """
        Write the point, blocking until the store answers.

        Raises:
            PersistenceError: If the store write fails
        """
        log = ctx.logger.with_context(
            service=point.tags["service"],
            endpoint=point.tags["endpoint"],
            measurement=point.measurement,
        )
        log.info("Attempting ingestion to DB")

        try:
            with track_store_call(log, "write", self.store.bucket):
                self.store.write(point)
        except StoreWriteError as e:
            log_error_with_context(log, "Error writing point to InfluxDB", e)
            raise PersistenceError() from e

    def ingest(self, body: bytes, ctx: RequestContext) -> StoredPoint:
        """
        Run decode, validate, build and write for one request body.

        The Content-Type check happens before the body is read, see
        check_content_type().

        Returns:
            The point that was written
        """
        report = self.parse_report(body, ctx)
        point = self.build_point(report)
        self.write_point(point, ctx)
        return point
