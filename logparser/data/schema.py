"""
Canonical record schema produced by every log format parser.

This module defines the standardized representation of a single log line
after extraction and normalization. JSON, logfmt and free-text lines are all
converted to this schema.

Design rationale:
- Three fixed fields (timestamp, level, message) plus a residual field map
- Timestamps are timezone-aware; naive sources are read as UTC
- Severity levels normalized to a closed set of five
- Residual fields keep their decoded JSON types (str, number, bool, null,
  object, array); logfmt fields are always strings
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field

from logparser.core.exceptions import ConfigurationError

# Closed set of values a residual field may carry
FieldValue = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]


class LogLevel(str, Enum):
    """
    Canonical log severity levels.

    Normalized from common aliases (e.g., "wrn" -> "WARN", "ftl" -> "FATAL").
    Anything unrecognized becomes INFO.
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    FATAL = "FATAL"


class LogFormat(str, Enum):
    """
    Supported wire formats.

    AUTO is only meaningful when requesting a parse; extraction always runs
    against JSON, LOGFMT or TEXT.
    """
    AUTO = "auto"
    JSON = "json"
    LOGFMT = "logfmt"
    TEXT = "text"

    @classmethod
    def from_name(cls, name: str) -> "LogFormat":
        """
        Resolve a format name, case-insensitively.

        Raises:
            ConfigurationError: If the name is not a known format
        """
        if isinstance(name, cls):
            return name

        try:
            return cls(str(name).strip().lower())
        except ValueError as e:
            raise ConfigurationError(f"Unknown log format: {name!r}") from e


def format_name(value: Any) -> str:
    """Return the canonical name of a format, or "unknown"."""
    if isinstance(value, LogFormat):
        return value.value
    return "unknown"


class LogRecord(BaseModel):
    """
    Canonical representation of a single parsed log line.

    Attributes:
        timestamp: When the event occurred (extraction time if the line had none)
        level: Severity level (DEBUG, INFO, WARN, ERROR, FATAL)
        message: Log message text (may be empty)
        fields: Residual key/value pairs not lifted into the fields above

    Notes:
        - Records are frozen once built
        - fields never contains a key consumed as timestamp, level or message
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(
        ...,
        description="Timezone-aware timestamp of the event"
    )

    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Severity level (normalized)"
    )

    message: str = Field(
        default="",
        description="Log message text"
    )

    fields: Dict[str, FieldValue] = Field(
        default_factory=dict,
        description="Residual fields not covered by the fixed schema"
    )

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a JSON-compatible dict.

        Keys are timestamp, level, message and fields; fields is omitted
        when empty.
        """
        exclude = None if self.fields else {"fields"}
        return self.model_dump(mode="json", exclude=exclude)

    def to_json(self) -> str:
        """Serialize to a single-line JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False)
