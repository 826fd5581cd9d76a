"""
Unit tests for configuration management.
"""

import pytest
from unittest.mock import patch
import os

from pydantic import ValidationError


def test_settings_loads_from_environment(influx_env):
    """Test that settings can be loaded from environment variables."""
    with patch.dict(os.environ, {
        **influx_env,
        'DOCKER_INFLUXDB_TIMEOUT_MS': '2500',
        'LOG_LEVEL': 'DEBUG',
        'HTTP_PORT': '8080',
    }):
        from app.config import Settings
        settings = Settings()

        assert settings.influxdb_host == 'http://localhost:8086'
        assert settings.influxdb_token == 'test_token'
        assert settings.influxdb_organization == 'test_org'
        assert settings.influxdb_bucket == 'test_bucket'
        assert settings.influxdb_timeout_ms == 2500
        assert settings.log_level == 'DEBUG'
        assert settings.http_port == 8080


def test_settings_has_default_values(influx_env):
    """Test that settings have appropriate default values."""
    with patch.dict(os.environ, influx_env):
        from app.config import Settings
        settings = Settings()

        assert settings.influxdb_timeout_ms == 10000
        assert settings.log_level == 'INFO'
        assert settings.http_host == '0.0.0.0'
        assert settings.http_port == 80


@pytest.mark.parametrize("missing", [
    'DOCKER_INFLUXDB_HOST',
    'DOCKER_INFLUXDB_TOKEN',
    'DOCKER_INFLUXDB_ORGANIZATION',
    'DOCKER_INFLUXDB_BUCKET',
])
def test_settings_require_influxdb_variables(influx_env, missing):
    """Test that every InfluxDB variable is mandatory."""
    env = {key: value for key, value in influx_env.items() if key != missing}

    with patch.dict(os.environ, env, clear=True):
        from app.config import Settings, missing_settings

        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None)

        assert [name.upper() for name in missing_settings(exc_info.value)] == [missing]


def test_missing_settings_ignores_invalid_values(influx_env):
    """Test that a malformed value is not reported as missing."""
    with patch.dict(os.environ, {**influx_env, 'HTTP_PORT': 'eighty'}):
        from app.config import Settings, missing_settings

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert missing_settings(exc_info.value) == []


def test_settings_ignore_unrelated_env_file_keys(influx_env, tmp_path, monkeypatch):
    """Test a .env shared with the InfluxDB container loads cleanly."""
    lines = [f"{key}={value}" for key, value in influx_env.items()]
    lines += [
        "PROXY_URL=errors.example.com",
        "DOCKER_INFLUXDB_INIT_MODE=setup",
        "DOCKER_INFLUXDB_INIT_USERNAME=admin",
    ]
    (tmp_path / ".env").write_text("\n".join(lines) + "\n")
    monkeypatch.chdir(tmp_path)

    with patch.dict(os.environ, {}, clear=True):
        from app.config import Settings
        settings = Settings()

    assert settings.influxdb_host == 'http://localhost:8086'
    assert settings.influxdb_bucket == 'test_bucket'
