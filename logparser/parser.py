"""
Public parsing façade.

LogParser takes raw input (a stream, a string, or pre-split lines), cleans
it into lines, picks the format (fixed or auto-detected from a sample), and
hands the whole batch to the matching line parser.

Error behavior depends on the format: a JSON batch stops at the first line
that is not a JSON object, while logfmt and text batches always complete.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Union

from logparser.core.config import config
from logparser.core.exceptions import ConfigurationError
from logparser.data.detector import detect_format
from logparser.data.ingestion import LineSource, iter_lines, split_lines
from logparser.data.parsers import get_parser, parse_lines
from logparser.data.schema import LogFormat, LogRecord


class LogParser:
    """
    Parses batches of log lines into LogRecord objects.

    Example:
        parser = LogParser.with_format("logfmt")
        records = parser.parse_text('level=error msg="Connection timeout"')
    """

    def __init__(
        self,
        format: Union[LogFormat, str] = LogFormat.AUTO,
        max_line_bytes: Optional[int] = None,
    ):
        """
        Args:
            format: Format of every line, or AUTO to detect per batch
            max_line_bytes: Line limit for parse(); defaults to config.max_line_bytes

        Raises:
            ConfigurationError: If format is not a known format or max_line_bytes is not positive
        """
        if not isinstance(format, str):
            raise ConfigurationError(f"Unknown log format: {format!r}")

        self.format = LogFormat.from_name(format)
        if max_line_bytes is None:
            max_line_bytes = config.max_line_bytes
        if max_line_bytes < 1:
            raise ConfigurationError(f"max_line_bytes must be positive, got {max_line_bytes}")
        self.max_line_bytes = max_line_bytes

    @classmethod
    def auto_detect(cls) -> "LogParser":
        """Parser that detects the format of each batch."""
        return cls(LogFormat.AUTO)

    @classmethod
    def with_format(cls, format: Union[LogFormat, str]) -> "LogParser":
        """Parser bound to one format (json, logfmt or text)."""
        return cls(format)

    def __repr__(self) -> str:
        return f"LogParser(format={self.format.value!r})"

    def resolve_format(self, lines: List[str]) -> LogFormat:
        """Format used for a batch: the fixed one, or the detected one."""
        if self.format is LogFormat.AUTO:
            return detect_format(lines)
        return self.format

    def parse_lines(self, lines: Iterable[str]) -> List[LogRecord]:
        """
        Parse already-cleaned lines.

        Args:
            lines: Trimmed, non-empty log lines

        Returns:
            One record per line, in order (empty list for no lines)

        Raises:
            DecodeError: In JSON mode, on the first line that is not a JSON object
        """
        lines = list(lines)
        if not lines:
            return []

        format = self.resolve_format(lines)
        return parse_lines(lines, get_parser(format))

    def parse(self, source: LineSource) -> List[LogRecord]:
        """
        Parse a text/binary stream or an iterable of lines.

        Raises:
            LineTooLongError: If a line exceeds max_line_bytes
            DecodeError: In JSON mode, on the first invalid line
        """
        return self.parse_lines(iter_lines(source, self.max_line_bytes))

    def parse_text(self, text: str) -> List[LogRecord]:
        """
        Parse an in-memory string holding one or more lines.

        Raises:
            DecodeError: In JSON mode, on the first invalid line
        """
        return self.parse_lines(split_lines(text))


def parse(source: LineSource) -> List[LogRecord]:
    """Parse a stream with format auto-detection."""
    return LogParser.auto_detect().parse(source)


def parse_text(text: str) -> List[LogRecord]:
    """Parse a string with format auto-detection."""
    return LogParser.auto_detect().parse_text(text)
