"""
Error taxonomy for the ingestion endpoint.

Each error carries the HTTP status and the message returned to the caller.
The message is deliberately generic; internal detail belongs in the logs.
"""


class IngestionError(Exception):
    """Base class for failures while handling an error report."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, public_message: str | None = None):
        if public_message is not None:
            self.public_message = public_message
        super().__init__(self.public_message)


class ProtocolError(IngestionError):
    """Request does not speak the expected media type."""

    status_code = 415
    public_message = "Content-Type must be application/json"


class MalformedInputError(IngestionError):
    """Request body is unreadable, not JSON, or missing required fields."""

    status_code = 400
    public_message = "Malformed error report"


class PersistenceError(IngestionError):
    """The timeseries store rejected or failed the write. May be transient."""

    status_code = 500
    public_message = "Error writing point to InfluxDB"
