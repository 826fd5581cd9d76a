"""Error report wire models."""

import re
from typing import List, Optional

from pydantic import BaseModel, StrictStr, field_validator

REQUIRED_FIELDS = ("service", "endpoint", "error")

# json.loads pairs valid surrogates; any left over are lone and unencodable
_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


class ErrorReport(BaseModel):
    """Error report posted by a failing service."""

    service: Optional[StrictStr] = None
    endpoint: Optional[StrictStr] = None
    error: Optional[StrictStr] = None
    traceback: Optional[StrictStr] = None

    @field_validator("service", "endpoint", "error", "traceback")
    @classmethod
    def replace_lone_surrogates(cls, value: Optional[str]) -> Optional[str]:
        """Swap lone surrogate escapes for U+FFFD so the value encodes as UTF-8."""
        if value is None:
            return value
        return _LONE_SURROGATE.sub("\ufffd", value)

    def missing_fields(self) -> List[str]:
        """Required fields that are absent, null or empty."""
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]
