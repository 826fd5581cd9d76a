"""
InfluxDB client wrapper for the error_logs timeseries.

This service provides:
- One-time organization lookup at startup
- Blocking point writes to the configured bucket
- Client lifecycle management

The underlying client keeps its own connection pool and is safe to share
between concurrent requests.
"""

import logging
from typing import Optional

from influxdb_client import InfluxDBClient, Point, WritePrecision
from influxdb_client.client.exceptions import InfluxDBError
from influxdb_client.client.write_api import SYNCHRONOUS, WriteApi
from influxdb_client.rest import ApiException
from urllib3.exceptions import HTTPError

from app.config import Settings
from app.models.point import StoredPoint


logger = logging.getLogger(__name__)

# Failures the client surfaces for HTTP errors, connection problems and timeouts
STORE_ERRORS = (ApiException, InfluxDBError, HTTPError, OSError)


class StoreConnectionError(Exception):
    """Raised when the organization cannot be resolved at startup."""
    pass


class StoreWriteError(Exception):
    """Raised when a point could not be written."""
    pass


class TimeseriesStore:
    """
    InfluxDB wrapper writing StoredPoints synchronously.

    Call resolve_organization() once before serving traffic; writes are
    addressed to the resolved organization id.
    """

    def __init__(
        self,
        url: str,
        token: str,
        organization: str,
        bucket: str,
        timeout_ms: int = 10_000,
        client: Optional[InfluxDBClient] = None
    ):
        """
        Initialize the store.

        Args:
            url: InfluxDB base URL
            token: API token
            organization: Organization name
            bucket: Bucket receiving error_logs points
            timeout_ms: HTTP timeout for store calls
            client: Pre-built client (tests inject a mock here)
        """
        self.organization = organization
        self.bucket = bucket
        self.organization_id: Optional[str] = None
        self._client = client or InfluxDBClient(
            url=url,
            token=token,
            org=organization,
            timeout=timeout_ms
        )
        self._write_api: Optional[WriteApi] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TimeseriesStore":
        """Build a store from application settings."""
        return cls(
            url=settings.influxdb_host,
            token=settings.influxdb_token,
            organization=settings.influxdb_organization,
            bucket=settings.influxdb_bucket,
            timeout_ms=settings.influxdb_timeout_ms
        )

    def resolve_organization(self) -> str:
        """
        Look up the configured organization and remember its id.

        Returns:
            The organization id

        Raises:
            StoreConnectionError: If the lookup fails or the organization does not exist
        """
        try:
            organizations = self._client.organizations_api().find_organizations(org=self.organization)
        except STORE_ERRORS as e:
            logger.error(f"Failed to lookup organization named {self.organization!r}: {e}")
            raise StoreConnectionError(
                f"Cannot access InfluxDB organization {self.organization!r}: {e}"
            ) from e

        if not organizations:
            logger.error(f"Organization named {self.organization!r} not found")
            raise StoreConnectionError(f"InfluxDB organization {self.organization!r} not found")

        self.organization_id = organizations[0].id
        self._write_api = self._client.write_api(write_options=SYNCHRONOUS)

        logger.info(
            f"Organization found: {self.organization}",
            extra={"organization_id": self.organization_id, "bucket": self.bucket}
        )
        return self.organization_id

    def write(self, point: StoredPoint) -> None:
        """
        Write one point and block until InfluxDB acknowledges it.

        Args:
            point: Point to persist

        Raises:
            RuntimeError: If resolve_organization() has not succeeded
            StoreWriteError: If the write fails
        """
        if self._write_api is None:
            raise RuntimeError("Organization not resolved. Call resolve_organization() first.")

        try:
            self._write_api.write(
                bucket=self.bucket,
                org=self.organization_id,
                record=to_influx_point(point)
            )
        except STORE_ERRORS as e:
            raise StoreWriteError(f"Error writing point to InfluxDB: {e}") from e

        logger.debug(f"Wrote {point.measurement} point to bucket {self.bucket}")

    def close(self) -> None:
        """
        Close the write API and the client.

        Should be called during application shutdown.
        """
        if self._write_api is not None:
            self._write_api.close()
            self._write_api = None

        self._client.close()
        logger.info("InfluxDB client closed")


def to_influx_point(point: StoredPoint) -> Point:
    """
    Convert a StoredPoint to an influxdb_client Point.

    Args:
        point: Point to convert

    Returns:
        Point timestamped with nanosecond precision
    """
    influx_point = Point(point.measurement)

    for key, value in point.tags.items():
        influx_point = influx_point.tag(key, value)

    for key, value in point.fields.items():
        influx_point = influx_point.field(key, value)

    return influx_point.time(point.timestamp, WritePrecision.NS)
