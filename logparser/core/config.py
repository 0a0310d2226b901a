"""
Runtime configuration for the log parser.

Settings come from the environment (prefix LOGPARSER_) or a local .env file,
with conservative defaults. Only ambient concerns live here: the extraction
rules themselves (alias keys, detection thresholds, pattern table) are fixed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logparser.data.ingestion import DEFAULT_MAX_LINE_BYTES
from logparser.data.schema import LogFormat


class ParserSettings(BaseSettings):
	"""
	Global configuration with environment overrides.

	Notes:
	- log_file enables a rotating file handler in setup_logging().
	- default_format is what the CLI uses when --format is not given.
	- max_line_bytes bounds a single line read from a stream.
	"""

	model_config = SettingsConfigDict(env_prefix="LOGPARSER_", env_file=".env", extra="ignore")

	log_level: str = Field("WARNING", description="Default logging level")
	log_file: Optional[Path] = Field(None, description="Optional log file path")
	default_format: LogFormat = Field(LogFormat.AUTO, description="Format used when none is requested")
	max_line_bytes: int = Field(DEFAULT_MAX_LINE_BYTES, ge=1, description="Maximum line length in bytes")

	@field_validator("log_level")
	@classmethod
	def _upper_level(cls, value: str) -> str:
		return value.strip().upper()

	@field_validator("default_format", mode="before")
	@classmethod
	def _lower_format(cls, value: object) -> object:
		if isinstance(value, str):
			return value.strip().lower()
		return value


config = ParserSettings()
