"""
Line sources: turn streams and strings into clean log lines.

Every parser consumes an ordered sequence of trimmed, non-empty lines. This
module produces that sequence from a text or binary stream (bounded line
length) or from an in-memory string.

Design:
- Iterator-based for memory efficiency with large inputs
- Blank lines are dropped, surrounding whitespace stripped
- Lines longer than the limit are a hard error, never silently truncated
"""

import logging
from pathlib import Path
from typing import IO, Iterable, Iterator, List, Union

from logparser.core.exceptions import LogParserError

logger = logging.getLogger(__name__)

# Bounded line buffer (1 MiB)
DEFAULT_MAX_LINE_BYTES = 1024 * 1024

LineSource = Union[IO[str], IO[bytes], Iterable[str], Iterable[bytes]]


class LogIngestionError(LogParserError):
    """Base exception for log ingestion failures."""
    pass


class LineTooLongError(LogIngestionError):
    """
    Raised when a line exceeds the configured maximum length.

    Attributes:
        line_number: 1-based line position in the source
        limit: Maximum allowed length in bytes
    """

    def __init__(self, line_number: int, limit: int):
        super().__init__(f"Line {line_number} exceeds {limit} bytes")
        self.line_number = line_number
        self.limit = limit


def iter_lines(
    source: LineSource,
    max_line_bytes: int = DEFAULT_MAX_LINE_BYTES,
) -> Iterator[str]:
    """
    Read clean lines from a stream or any iterable of lines.

    Args:
        source: Text/binary file object, or an iterable of str/bytes lines
        max_line_bytes: Maximum length of a single line, newline excluded

    Yields:
        Trimmed, non-empty lines in input order

    Raises:
        LineTooLongError: If a line is longer than max_line_bytes
    """
    for line_number, raw in enumerate(source, start=1):
        if isinstance(raw, bytes):
            raw = raw.rstrip(b"\r\n")
            size = len(raw)
            line = raw.decode("utf-8", errors="replace")
        else:
            line = raw.rstrip("\r\n")
            size = len(line.encode("utf-8"))

        if size > max_line_bytes:
            raise LineTooLongError(line_number, max_line_bytes)

        line = line.strip()
        if line:
            yield line


def split_lines(text: str) -> List[str]:
    """
    Split an in-memory string into clean lines.

    Splits on newline only; each piece is stripped and blanks are dropped.
    """
    lines = []
    for line in text.split("\n"):
        line = line.strip()
        if line:
            lines.append(line)
    return lines


def read_file_lines(
    filepath: Union[str, Path],
    max_line_bytes: int = DEFAULT_MAX_LINE_BYTES,
) -> List[str]:
    """
    Read all clean lines from a file.

    Raises:
        LogIngestionError: If the file cannot be read
        LineTooLongError: If a line is longer than max_line_bytes
    """
    filepath = Path(filepath)
    try:
        with open(filepath, "rb") as f:
            return list(iter_lines(f, max_line_bytes))
    except OSError as e:
        logger.error(f"Error reading log file {filepath}: {e}")
        raise LogIngestionError(f"Failed to read log file: {e}") from e
