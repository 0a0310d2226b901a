"""
Custom exceptions for the log parser.

Every error raised by the package derives from LogParserError so callers can
catch the whole family at once. Module-specific errors (parsing,
normalization, ingestion) live next to the code that raises them and extend
this base.
"""


class LogParserError(Exception):
    """Base exception for all log parsing failures."""
    pass


class ConfigurationError(LogParserError):
    """Raised when configuration is invalid (e.g., unknown format name)."""
    pass
