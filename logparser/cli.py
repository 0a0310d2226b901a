"""
Command-line entry point.

Reads a log file (or stdin), parses it, and prints one JSON record per line:

    logparser app.log
    logparser --format logfmt < worker.log
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from logparser.core.config import ParserSettings
from logparser.core.exceptions import LogParserError
from logparser.core.logging_config import setup_logging
from logparser.data.ingestion import read_file_lines
from logparser.data.schema import LogFormat
from logparser.parser import LogParser

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logparser",
        description="Convert JSON, logfmt or plain-text logs into JSON records",
    )
    parser.add_argument("file", nargs="?", help="Log file to parse (default: stdin)")
    parser.add_argument(
        "--format",
        choices=[f.value for f in LogFormat],
        default=None,
        help="Input format (default: LOGPARSER_DEFAULT_FORMAT or auto)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level for diagnostics",
    )
    parser.add_argument("--env-file", default=None, help="Extra .env file to load")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    load_dotenv(args.env_file)
    settings = ParserSettings()
    setup_logging(level=args.log_level or settings.log_level, log_file=settings.log_file)

    log_parser = LogParser(args.format or settings.default_format, settings.max_line_bytes)
    logger.debug("Parsing %s with %r", args.file or "<stdin>", log_parser)

    try:
        if args.file:
            records = log_parser.parse_lines(read_file_lines(args.file, log_parser.max_line_bytes))
        else:
            records = log_parser.parse(getattr(sys.stdin, "buffer", sys.stdin))
    except LogParserError as exc:
        logger.debug("Parse failed", exc_info=True)
        print(f"logparser: {exc}", file=sys.stderr)
        return 1

    for record in records:
        sys.stdout.write(record.to_json() + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
