"""
Unit tests for application bootstrap.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, patch
import os

from app.config import Settings
from app.main import bootstrap, build_app, create_app, load_settings
from app.services.timeseries_store import StoreConnectionError


@pytest.fixture
def settings(influx_env):
    with patch.dict(os.environ, influx_env):
        return Settings()


def test_create_app_serves_ingestion(store, valid_report):
    """Test the created app routes POST / to the given store."""
    client = TestClient(create_app(store))

    response = client.post("/", json=valid_report)

    assert response.status_code == 200
    assert len(store.points) == 1


def test_create_app_has_no_docs_routes(store):
    """Test POST / is the only route exposed."""
    client = TestClient(create_app(store))

    assert client.get("/docs").status_code == 404
    assert client.get("/openapi.json").status_code == 404


def test_shutdown_closes_store(store):
    """Test the store is closed on application shutdown."""
    with TestClient(create_app(store)):
        assert store.closed is False

    assert store.closed is True


def test_bootstrap_resolves_organization(settings):
    """Test bootstrap returns a store with a resolved organization."""
    fake_store = MagicMock()
    fake_store.resolve_organization.return_value = "org-123"

    with patch("app.main.TimeseriesStore.from_settings", return_value=fake_store) as from_settings:
        result = bootstrap(settings)

    assert result is fake_store
    from_settings.assert_called_once_with(settings)
    fake_store.resolve_organization.assert_called_once()


def test_bootstrap_closes_store_on_lookup_failure(settings):
    """Test a failed lookup propagates and releases the client."""
    fake_store = MagicMock()
    fake_store.resolve_organization.side_effect = StoreConnectionError("unauthorized")

    with patch("app.main.TimeseriesStore.from_settings", return_value=fake_store):
        with pytest.raises(StoreConnectionError):
            bootstrap(settings)

    fake_store.close.assert_called_once()


def test_build_app(settings, store):
    """Test the factory wires the bootstrapped store into the app."""
    with patch("app.main.setup_logging"), patch("app.main.bootstrap", return_value=store):
        app = build_app(settings)

    assert isinstance(app, FastAPI)
    assert app.state.ingestor.store is store


def test_build_app_exits_without_organization(settings):
    """Test the process exits before serving when the lookup fails."""
    with patch("app.main.setup_logging"), \
            patch("app.main.bootstrap", side_effect=StoreConnectionError("not found")):
        with pytest.raises(SystemExit) as exc_info:
            build_app(settings)

    assert exc_info.value.code == 1


def test_load_settings_exits_on_missing_variable(influx_env):
    """Test the process exits when a required variable is absent."""
    env = {key: value for key, value in influx_env.items() if key != "DOCKER_INFLUXDB_TOKEN"}

    with patch.dict(os.environ, env, clear=True), patch("app.main.setup_logging"), \
            patch("app.main.logger") as logger:
        with pytest.raises(SystemExit) as exc_info:
            load_settings()

    assert exc_info.value.code == 1
    message = logger.critical.call_args.args[0]
    assert message.upper() == "MISSING ENVIRONMENT VARIABLE DOCKER_INFLUXDB_TOKEN"


def test_load_settings(influx_env):
    """Test settings load when the environment is complete."""
    with patch.dict(os.environ, influx_env):
        settings = load_settings()

    assert settings.influxdb_bucket == "test_bucket"
