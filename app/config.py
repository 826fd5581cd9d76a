"""
Application configuration management.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # InfluxDB
    influxdb_host: str = Field(validation_alias="DOCKER_INFLUXDB_HOST")
    influxdb_token: str = Field(validation_alias="DOCKER_INFLUXDB_TOKEN")
    influxdb_organization: str = Field(validation_alias="DOCKER_INFLUXDB_ORGANIZATION")
    influxdb_bucket: str = Field(validation_alias="DOCKER_INFLUXDB_BUCKET")
    influxdb_timeout_ms: int = Field(default=10_000, validation_alias="DOCKER_INFLUXDB_TIMEOUT_MS")

    # Application
    log_level: str = "INFO"
    http_host: str = "0.0.0.0"
    http_port: int = 80

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


def missing_settings(error) -> list[str]:
    """
    Names of the environment variables a settings ValidationError reports as missing.

    Args:
        error: pydantic ValidationError raised by Settings()

    Returns:
        Variable names in the order pydantic reported them
    """
    return [
        str(item["loc"][0])
        for item in error.errors()
        if item["type"] == "missing" and item.get("loc")
    ]
