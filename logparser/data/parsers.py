"""
Log parsing rules, one parser per wire format.

Converts a single trimmed log line into a LogRecord. Three formats:

- JSON: one object per line; well-known keys become timestamp/level/message
- logfmt: key=value pairs; same lifting, values stay strings
- text: free-form lines matched against an ordered pattern table

Design:
- Each parser turns one line into one record
- Known keys are removed from the residual fields once lifted
- Missing timestamp falls back to the extraction time, missing level to INFO
- Error policy is per parser: JSON is fail-fast (a decode error aborts the
  whole batch), logfmt and text are best-effort and never fail on a line
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from logparser.core.exceptions import ConfigurationError, LogParserError
from logparser.data.normalizers import (
    TimestampParseError,
    normalize_level,
    parse_timestamp,
    parse_timestamp_with_format,
    utc_now,
)
from logparser.data.patterns import TEXT_PATTERNS, TextPattern
from logparser.data.schema import LogFormat, LogLevel, LogRecord
from logparser.data.tokenizer import tokenize_logfmt

logger = logging.getLogger(__name__)

# Candidate keys, checked in order
JSON_TIMESTAMP_KEYS = ("timestamp", "time", "@timestamp", "ts")
JSON_LEVEL_KEYS = ("level", "severity", "log.level")
JSON_MESSAGE_KEYS = ("message", "msg", "log")

LOGFMT_TIMESTAMP_KEYS = ("timestamp", "time", "ts")
LOGFMT_LEVEL_KEYS = ("level",)
LOGFMT_MESSAGE_KEYS = ("msg", "message")


class ParsingError(LogParserError):
    """Raised when a log line cannot be parsed."""
    pass


class DecodeError(ParsingError):
    """
    Raised when a JSON line is not a valid JSON object.

    Attributes:
        line: The offending line
        reason: Decoder message
        line_number: 1-based position in the batch, when known
    """

    def __init__(self, line: str, reason: str, line_number: Optional[int] = None):
        super().__init__(f"invalid JSON: {reason}")
        self.line = line
        self.reason = reason
        self.line_number = line_number


def _lift_timestamp(raw: Dict[str, Any], keys: Sequence[str]) -> Optional[datetime]:
    """Pop the first candidate key whose value parses as a timestamp."""
    for key in keys:
        if key not in raw:
            continue
        try:
            ts = parse_timestamp(raw[key])
        except TimestampParseError as e:
            logger.debug(f"Ignoring unparseable {key}={e.value!r}: {e.reason}")
            continue
        del raw[key]
        return ts
    return None


def _lift_string(raw: Dict[str, Any], keys: Sequence[str]) -> Optional[str]:
    """Pop the first candidate key holding a string value."""
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str):
            del raw[key]
            return value
    return None


class BaseParser(ABC):
    """
    Abstract base for line parsers.

    Attributes:
        format: Wire format handled by the parser
        fail_fast: If True, a ParsingError aborts the whole batch;
            otherwise the offending line is skipped
    """

    format: LogFormat
    fail_fast: bool = False

    @abstractmethod
    def parse_line(self, line: str) -> LogRecord:
        """
        Parse one log line.

        Args:
            line: A single log line

        Returns:
            Parsed LogRecord

        Raises:
            ParsingError: If the line cannot be parsed
        """
        pass

    @staticmethod
    def _clean(line: str) -> str:
        line = line.strip()
        if not line:
            raise ParsingError("Empty log line")
        return line


class JSONLineParser(BaseParser):
    """
    Parses one JSON object per line.

    Well-known keys, checked in order:
        - timestamp: timestamp / time / @timestamp / ts (first that parses)
        - level: level / severity / log.level (first string value)
        - message: message / msg / log (first string value)

    Every other top-level key is kept in fields with its decoded type.
    """

    format = LogFormat.JSON
    fail_fast = True

    def parse_line(self, line: str) -> LogRecord:
        line = self._clean(line)

        try:
            raw = json.loads(line)
        except json.JSONDecodeError as e:
            raise DecodeError(line, str(e)) from e
        except RecursionError as e:
            raise DecodeError(line, "nesting too deep") from e

        if not isinstance(raw, dict):
            raise DecodeError(line, f"expected object, got {type(raw).__name__}")

        timestamp = _lift_timestamp(raw, JSON_TIMESTAMP_KEYS)
        level = _lift_string(raw, JSON_LEVEL_KEYS)
        message = _lift_string(raw, JSON_MESSAGE_KEYS)

        return LogRecord(
            timestamp=timestamp or utc_now(),
            level=normalize_level(level) if level is not None else LogLevel.INFO,
            message=message or "",
            fields=raw,
        )


class LogfmtLineParser(BaseParser):
    """
    Parses logfmt lines:

        time=2024-01-02T15:04:05Z level=error msg="Connection timeout" service=worker

    Lifts timestamp / time / ts, level, and msg / message. Remaining pairs
    are kept as string fields (logfmt has no other value types).
    """

    format = LogFormat.LOGFMT

    def parse_line(self, line: str) -> LogRecord:
        line = self._clean(line)
        pairs: Dict[str, Any] = dict(tokenize_logfmt(line))

        timestamp = _lift_timestamp(pairs, LOGFMT_TIMESTAMP_KEYS)
        level = _lift_string(pairs, LOGFMT_LEVEL_KEYS)
        message = _lift_string(pairs, LOGFMT_MESSAGE_KEYS)

        return LogRecord(
            timestamp=timestamp or utc_now(),
            level=normalize_level(level) if level is not None else LogLevel.INFO,
            message=message or "",
            fields=pairs,
        )


class TextLineParser(BaseParser):
    """
    Parses free-form text lines against an ordered pattern table.

    Examples:
        Jan 02 15:04:05 web-1 sshd[42]: [WARN] Too many attempts
        2024-01-02 15:04:05 [ERROR] Failed to connect to database
        2024-01-02T15:04:05.000Z [INFO] Cache warmed
        [INFO] Starting application

    The first matching pattern decides the record; a line that matches no
    pattern becomes an INFO record whose message is the whole line.
    """

    format = LogFormat.TEXT

    def __init__(self, patterns: Optional[Tuple[TextPattern, ...]] = None):
        """
        Initialize parser with a pattern table.

        Args:
            patterns: Ordered patterns (defaults to the built-in table)
        """
        self.patterns = TEXT_PATTERNS if patterns is None else tuple(patterns)

    def parse_line(self, line: str) -> LogRecord:
        line = self._clean(line)

        timestamp: Optional[datetime] = None
        level = LogLevel.INFO
        message = line

        for pattern in self.patterns:
            match = pattern.regex.match(line)
            if match is None:
                continue

            if pattern.timestamp_group and pattern.timestamp_format:
                ts_text = match.group(pattern.timestamp_group)
                if ts_text is not None:
                    try:
                        timestamp = parse_timestamp_with_format(ts_text, pattern.timestamp_format)
                    except TimestampParseError:
                        pass  # Keep the fallback timestamp

            if pattern.level_group and match.group(pattern.level_group) is not None:
                level = normalize_level(match.group(pattern.level_group))

            if pattern.message_group and match.group(pattern.message_group) is not None:
                message = match.group(pattern.message_group)

            break  # First matching pattern wins

        return LogRecord(
            timestamp=timestamp or utc_now(),
            level=level,
            message=message,
        )


_PARSERS: Dict[LogFormat, BaseParser] = {
    LogFormat.JSON: JSONLineParser(),
    LogFormat.LOGFMT: LogfmtLineParser(),
    LogFormat.TEXT: TextLineParser(),
}


def get_parser(format: LogFormat) -> BaseParser:
    """
    Return the parser for a concrete format.

    Raises:
        ConfigurationError: If format is AUTO or not a LogFormat
    """
    try:
        return _PARSERS[format]
    except KeyError:
        raise ConfigurationError(f"No parser for format: {format!r}") from None


def parse_lines(lines: Iterable[str], parser: BaseParser) -> List[LogRecord]:
    """
    Parse lines in order with one parser, honoring its error policy.

    Args:
        lines: Trimmed, non-empty log lines
        parser: Parser for the batch

    Returns:
        One record per parsed line, in input order

    Raises:
        ParsingError: From a fail-fast parser; processing stops at that line

    Example:
        records = parse_lines(lines, get_parser(LogFormat.LOGFMT))
    """
    records = []
    skipped = 0

    for line_number, line in enumerate(lines, start=1):
        try:
            records.append(parser.parse_line(line))
        except ParsingError as e:
            if parser.fail_fast:
                if isinstance(e, DecodeError) and e.line_number is None:
                    e.line_number = line_number
                raise
            logger.debug(f"Skipped line {line_number}: {e}")
            skipped += 1

    if skipped:
        logger.debug(f"Parsed {len(records)} {parser.format.value} lines, skipped {skipped}")

    return records
