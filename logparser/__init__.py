"""
logparser: turn heterogeneous log lines into uniform structured records.

Supports JSON, logfmt and free-form text lines, with best-effort format
auto-detection:

    import logparser

    records = logparser.parse_text('{"level":"error","msg":"boom"}')
    records[0].level    # LogLevel.ERROR
"""

from logparser.core.exceptions import ConfigurationError, LogParserError
from logparser.data.ingestion import LineTooLongError, LogIngestionError
from logparser.data.normalizers import TimestampParseError
from logparser.data.parsers import DecodeError, ParsingError
from logparser.data.schema import LogFormat, LogLevel, LogRecord, format_name
from logparser.parser import LogParser, parse, parse_text

__version__ = "0.1.0"

__all__ = [
    "LogParser",
    "parse",
    "parse_text",
    "LogRecord",
    "LogLevel",
    "LogFormat",
    "format_name",
    "LogParserError",
    "ConfigurationError",
    "ParsingError",
    "DecodeError",
    "TimestampParseError",
    "LogIngestionError",
    "LineTooLongError",
]
