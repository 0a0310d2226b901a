"""
Free-text line patterns.

The pattern table is built once at import time and never changes. Order
matters: the text parser stops at the first pattern that matches a line.

Capture-group indexes are 1-based; None means the pattern does not capture
that field.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextPattern:
    """
    A precompiled free-text line pattern.

    Attributes:
        name: Short identifier (for logging and tests)
        regex: Compiled line pattern, anchored at both ends
        timestamp_format: strptime format for the timestamp group, if any
        timestamp_group: Group holding the timestamp
        level_group: Group holding the level
        message_group: Group holding the message
    """

    name: str
    regex: re.Pattern
    timestamp_format: Optional[str] = None
    timestamp_group: Optional[int] = None
    level_group: Optional[int] = None
    message_group: Optional[int] = None


@dataclass(frozen=True)
class PatternSpec:
    """Uncompiled pattern definition."""

    name: str
    pattern: str
    timestamp_format: Optional[str] = None
    timestamp_group: Optional[int] = None
    level_group: Optional[int] = None
    message_group: Optional[int] = None


DEFAULT_PATTERN_SPECS: Tuple[PatternSpec, ...] = (
    # Jan 02 15:04:05 hostname process[pid]: message
    PatternSpec(
        name="syslog",
        pattern=r"^(\w{3}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2})\s+\S+\s+\S+:\s+\[?(\w+)\]?\s+(.*)$",
        timestamp_format="%b %d %H:%M:%S",
        timestamp_group=1,
        level_group=2,
        message_group=3,
    ),
    # 2024-01-02 15:04:05 [LEVEL] message
    PatternSpec(
        name="datetime_bracketed",
        pattern=r"^(\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}:\d{2})\s+\[(\w+)\]\s+(.*)$",
        timestamp_format="%Y-%m-%d %H:%M:%S",
        timestamp_group=1,
        level_group=2,
        message_group=3,
    ),
    # 2024-01-02T15:04:05.000Z [LEVEL] message
    PatternSpec(
        name="iso8601",
        pattern=r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z?)\s+\[?(\w+)\]?\s+(.*)$",
        timestamp_format="%Y-%m-%dT%H:%M:%S.%f%z",
        timestamp_group=1,
        level_group=2,
        message_group=3,
    ),
    # [LEVEL] message
    PatternSpec(
        name="bracketed_level",
        pattern=r"^\[(\w+)\]\s+(.*)$",
        level_group=1,
        message_group=2,
    ),
)


def compile_patterns(specs: Iterable[PatternSpec]) -> Tuple[TextPattern, ...]:
    """
    Compile pattern definitions, preserving order.

    Definitions whose regex does not compile are dropped; the rest of the
    table is still usable.
    """
    compiled = []
    for spec in specs:
        try:
            regex = re.compile(spec.pattern)
        except re.error as e:
            logger.debug(f"Dropping text pattern {spec.name!r}: {e}")
            continue

        compiled.append(
            TextPattern(
                name=spec.name,
                regex=regex,
                timestamp_format=spec.timestamp_format,
                timestamp_group=spec.timestamp_group,
                level_group=spec.level_group,
                message_group=spec.message_group,
            )
        )

    return tuple(compiled)


TEXT_PATTERNS: Tuple[TextPattern, ...] = compile_patterns(DEFAULT_PATTERN_SPECS)
