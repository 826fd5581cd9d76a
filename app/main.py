"""
FastAPI application entry point.

Run with ``python -m app.main`` or ``uvicorn app.main:build_app --factory``.
"""

import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from pydantic import ValidationError

from app.api import ingest
from app.config import Settings, missing_settings
from app.errors import IngestionError
from app.middleware.logging import RequestLoggingMiddleware
from app.services.ingestion import PointWriter, ReportIngestor
from app.services.timeseries_store import StoreConnectionError, TimeseriesStore
from app.utils.logging import setup_logging, get_logger

logger = get_logger(__name__)

VERSION = "0.1.0"


def create_app(store: PointWriter) -> FastAPI:
    """
    Create the FastAPI application around a ready store.

    Args:
        store: Store whose organization has already been resolved

    Returns:
        Configured FastAPI application
    """
    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        logger.info("Shutting down Error Log Ingestor")
        close = getattr(store, "close", None)
        if close is not None:
            close()

    app = FastAPI(
        lifespan=lifespan,
        title="Error Log Ingestor",
        description="Receives error reports and stores them as InfluxDB points",
        version=VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.ingestor = ReportIngestor(store)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_exception_handler(IngestionError, ingest.ingestion_error_handler)
    app.include_router(ingest.router)

    return app


def bootstrap(settings: Settings) -> TimeseriesStore:
    """
    Connect to InfluxDB and resolve the organization.

    Raises:
        StoreConnectionError: If the organization cannot be resolved
    """
    store = TimeseriesStore.from_settings(settings)
    try:
        organization_id = store.resolve_organization()
    except StoreConnectionError:
        store.close()
        raise

    logger.info(
        f"Organization ID: {organization_id}",
        extra={"bucket": settings.influxdb_bucket}
    )
    return store


def load_settings() -> Settings:
    """
    Load settings, exiting the process if any required variable is missing.
    """
    try:
        return Settings()
    except ValidationError as e:
        setup_logging()
        missing = missing_settings(e)
        for name in missing:
            logger.critical(f"Missing environment variable {name}")
        if not missing:
            logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)


def build_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory for ASGI servers.

    Exits the process before serving when configuration or the
    organization lookup fails.
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    try:
        store = bootstrap(settings)
    except StoreConnectionError as e:
        logger.critical(f"Cannot start server without InfluxDB organization access: {e}")
        sys.exit(1)

    return create_app(store)


def main() -> None:
    """Start the HTTP server."""
    import uvicorn

    settings = load_settings()
    app = build_app(settings)

    logger.info(f"Starting Error Log Ingestor on port {settings.http_port}")
    uvicorn.run(app, host=settings.http_host, port=settings.http_port, log_config=None)


if __name__ == "__main__":
    main()
