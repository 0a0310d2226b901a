"""
Log normalization: canonical severity levels and timestamps.

Shared by every format parser. Converts the many spellings of a severity
into LogLevel and the many shapes of a timestamp into a timezone-aware
datetime.

Design:
- Level normalization never fails; unknown input becomes INFO
- Timestamp parsing tries a fixed, ordered list of formats
- Timestamp failures raise TimestampParseError; callers decide the fallback
- Naive timestamps are read as UTC
"""

import re
from datetime import datetime, timezone
from typing import Any, Tuple

from logparser.core.exceptions import LogParserError
from logparser.data.schema import LogLevel


class NormalizationError(LogParserError):
    """Raised when a value cannot be normalized."""
    pass


class TimestampParseError(NormalizationError):
    """
    Raised when a timestamp value cannot be parsed.

    Attributes:
        type: What was being parsed (always "timestamp")
        value: The offending raw value
        reason: Why parsing failed
    """

    def __init__(self, value: Any, reason: str, type: str = "timestamp"):
        super().__init__(reason)
        self.type = type
        self.value = value
        self.reason = reason

    def __repr__(self) -> str:
        return f"TimestampParseError(type={self.type!r}, value={self.value!r}, reason={self.reason!r})"


# Aliases and canonical names, upper-cased
LEVEL_ALIASES = {
    "DEBUG": LogLevel.DEBUG,
    "DBG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "INF": LogLevel.INFO,
    "WARN": LogLevel.WARN,
    "WARNING": LogLevel.WARN,
    "WRN": LogLevel.WARN,
    "ERROR": LogLevel.ERROR,
    "ERR": LogLevel.ERROR,
    "FATAL": LogLevel.FATAL,
    "FTL": LogLevel.FATAL,
}

# Tried in order; first successful parse wins
TIMESTAMP_FORMATS: Tuple[str, ...] = (
    "%Y-%m-%dT%H:%M:%S%z",      # RFC 3339 with offset
    "%Y-%m-%dT%H:%M:%S.%f%z",   # RFC 3339 with fractional (up to nano) seconds
    "%Y-%m-%dT%H:%M:%S.%fZ",    # millisecond UTC "Z" form
    "%Y-%m-%d %H:%M:%S",        # space-separated date-time
    "%b %d %H:%M:%S",           # syslog, no year
)

# strptime's %f stops at microseconds
_SUBMICRO_FRACTION = re.compile(r"(\.\d{6})\d+")


def utc_now() -> datetime:
    """Current time, used whenever a line carries no usable timestamp."""
    return datetime.now(timezone.utc)


def normalize_level(raw: Any) -> LogLevel:
    """
    Normalize a log level to the canonical enum.

    Handles common aliases:
    - DBG -> DEBUG, INF -> INFO
    - WRN / WARNING -> WARN
    - ERR -> ERROR, FTL -> FATAL
    - Case-insensitive

    Args:
        raw: Level string (non-strings are treated as unrecognized)

    Returns:
        LogLevel enum value; INFO for anything unrecognized
    """
    if not isinstance(raw, str):
        return LogLevel.INFO

    return LEVEL_ALIASES.get(raw.upper(), LogLevel.INFO)


def parse_timestamp_with_format(value: str, fmt: str) -> datetime:
    """
    Parse a timestamp string against one explicit strptime format.

    - Fractions longer than six digits are truncated to microseconds
    - Formats without a year take the current UTC year
    - Results without an offset are read as UTC

    Args:
        value: Timestamp text
        fmt: strptime format

    Returns:
        Timezone-aware datetime

    Raises:
        TimestampParseError: If the value does not match the format
    """
    text = value
    if "%f" in fmt:
        text = _SUBMICRO_FRACTION.sub(r"\1", text)

    if "%Y" not in fmt and "%y" not in fmt:
        text = f"{utc_now().year} {text}"
        fmt = f"%Y {fmt}"

    try:
        dt = datetime.strptime(text, fmt)
    except ValueError as e:
        raise TimestampParseError(value, f"does not match format {fmt}") from e

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a timestamp from a string or a number.

    Supports:
    - RFC 3339: 2024-01-02T15:04:05Z, 2024-01-02T15:04:05+02:00
    - RFC 3339 nano: 2024-01-02T15:04:05.123456789Z
    - Millisecond UTC: 2024-01-02T15:04:05.000Z
    - Date-time: 2024-01-02 15:04:05
    - Syslog: Jan 02 15:04:05
    - Epoch seconds as a number: 1704207845

    Args:
        value: Timestamp string or number

    Returns:
        Timezone-aware datetime

    Raises:
        TimestampParseError: If the value is not a recognized timestamp
    """
    # bool is an int subclass but never a timestamp
    if isinstance(value, bool):
        raise TimestampParseError(value, "unsupported timestamp type")

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(int(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise TimestampParseError(value, "epoch seconds out of range") from e

    if not isinstance(value, str):
        raise TimestampParseError(value, "unsupported timestamp type")

    for fmt in TIMESTAMP_FORMATS:
        try:
            return parse_timestamp_with_format(value, fmt)
        except TimestampParseError:
            continue

    raise TimestampParseError(value, "unknown time format")
