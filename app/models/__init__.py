"""Data models for the Error Log Ingestor."""

from .point import ERROR_LOGS_MEASUREMENT, StoredPoint
from .report import REQUIRED_FIELDS, ErrorReport

__all__ = [
    # Wire models
    "ErrorReport",
    "REQUIRED_FIELDS",
    # Timeseries models
    "StoredPoint",
    "ERROR_LOGS_MEASUREMENT",
]
