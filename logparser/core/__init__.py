"""
Core module: Configuration, logging, and exception handling.

Settings and logging setup are imported from their submodules
(logparser.core.config, logparser.core.logging_config) so that the data
layer can depend on the exceptions here without pulling in settings.
"""

from .exceptions import (
    ConfigurationError,
    LogParserError,
)

__all__ = [
    "ConfigurationError",
    "LogParserError",
]
