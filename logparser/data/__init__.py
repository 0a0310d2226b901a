"""
Data module: line ingestion, format detection, parsing, and normalization.

Converts raw log lines into LogRecord objects. Pipeline:

    Raw text / stream
        ↓
    Ingestion (logparser/data/ingestion.py) → clean lines
        ↓
    Detection (logparser/data/detector.py) → LogFormat (when AUTO)
        ↓
    Parsing (logparser/data/parsers.py, tokenizer.py, patterns.py)
        ↓
    Normalization (logparser/data/normalizers.py) → LogRecord
"""

from logparser.data.detector import (
    detect_format,
    is_json_line,
    is_logfmt_line,
)
from logparser.data.ingestion import (
    LineTooLongError,
    LogIngestionError,
    iter_lines,
    read_file_lines,
    split_lines,
)
from logparser.data.normalizers import (
    NormalizationError,
    TimestampParseError,
    normalize_level,
    parse_timestamp,
)
from logparser.data.parsers import (
    DecodeError,
    JSONLineParser,
    LogfmtLineParser,
    ParsingError,
    TextLineParser,
    get_parser,
    parse_lines,
)
from logparser.data.patterns import TEXT_PATTERNS, TextPattern
from logparser.data.schema import (
    LogFormat,
    LogLevel,
    LogRecord,
    format_name,
)
from logparser.data.tokenizer import tokenize_logfmt

__all__ = [
    # Schema
    "LogRecord",
    "LogLevel",
    "LogFormat",
    "format_name",

    # Ingestion
    "iter_lines",
    "split_lines",
    "read_file_lines",
    "LogIngestionError",
    "LineTooLongError",

    # Detection
    "detect_format",
    "is_json_line",
    "is_logfmt_line",

    # Parsing
    "parse_lines",
    "get_parser",
    "JSONLineParser",
    "LogfmtLineParser",
    "TextLineParser",
    "TextPattern",
    "TEXT_PATTERNS",
    "tokenize_logfmt",
    "ParsingError",
    "DecodeError",

    # Normalization
    "normalize_level",
    "parse_timestamp",
    "NormalizationError",
    "TimestampParseError",
]
