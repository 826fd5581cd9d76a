"""Timeseries point data models."""

from datetime import datetime
from typing import Dict, Union

from pydantic import BaseModel, Field

from app.models.report import ErrorReport

ERROR_LOGS_MEASUREMENT = "error_logs"

FieldValue = Union[str, int, float, bool]


class StoredPoint(BaseModel):
    """One timestamped record destined for the timeseries store."""

    measurement: str = ERROR_LOGS_MEASUREMENT
    tags: Dict[str, str] = Field(default_factory=dict)
    fields: Dict[str, FieldValue] = Field(default_factory=dict)
    timestamp: datetime

    @classmethod
    def from_report(cls, report: ErrorReport, timestamp: datetime) -> "StoredPoint":
        """
        Build the error_logs point for a validated report.

        service and endpoint become tags; error is always a field and
        traceback only when non-empty.

        Args:
            report: Report whose required fields are all non-empty
            timestamp: Ingestion time

        Returns:
            StoredPoint ready to be written
        """
        fields: Dict[str, FieldValue] = {"error": report.error}
        if report.traceback:
            fields["traceback"] = report.traceback

        return cls(
            tags={"service": report.service, "endpoint": report.endpoint},
            fields=fields,
            timestamp=timestamp,
        )
