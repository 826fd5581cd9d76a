"""Business logic services package."""

from app.services.timeseries_store import (
    TimeseriesStore,
    StoreConnectionError,
    StoreWriteError,
)
from app.services.ingestion import (
    ReportIngestor,
    PointWriter,
)

__all__ = [
    'TimeseriesStore',
    'StoreConnectionError',
    'StoreWriteError',
    'ReportIngestor',
    'PointWriter',
]
