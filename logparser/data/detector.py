"""
Log format auto-detection.

Scores a small sample of lines against simple JSON and logfmt heuristics and
picks the format for the whole batch. Best-effort only: the thresholds are
fixed constants, and logfmt lines without one of the well-known keys
(level, msg, time, timestamp) are never recognized as logfmt.
"""

import json
import logging
from collections import Counter
from typing import Sequence

from logparser.data.schema import LogFormat

logger = logging.getLogger(__name__)

DETECTION_SAMPLE_SIZE = 10
LOGFMT_MARKERS = ("level=", "msg=", "time=", "timestamp=")


def is_json_line(line: str) -> bool:
    """True if the line is a brace-delimited JSON object."""
    line = line.strip()
    if not (line.startswith("{") and line.endswith("}")):
        return False

    try:
        return isinstance(json.loads(line), dict)
    except (json.JSONDecodeError, RecursionError):
        return False


def is_logfmt_line(line: str) -> bool:
    """True if the line has '=' and at least one well-known logfmt key."""
    return "=" in line and any(marker in line for marker in LOGFMT_MARKERS)


def detect_format(lines: Sequence[str]) -> LogFormat:
    """
    Detect the format of a batch from its first lines.

    Every sampled line scores for TEXT; JSON and logfmt score per line when
    their heuristic matches. Half the TEXT score uses integer division.

    Decision:
    - JSON if json > logfmt and json > text // 2
    - else LOGFMT if logfmt > text // 2
    - else TEXT

    Args:
        lines: Trimmed log lines (only the first DETECTION_SAMPLE_SIZE are read)

    Returns:
        JSON, LOGFMT or TEXT (TEXT for an empty batch)
    """
    sample = list(lines[:DETECTION_SAMPLE_SIZE])
    if not sample:
        return LogFormat.TEXT

    scores: Counter = Counter()
    for line in sample:
        if is_json_line(line):
            scores[LogFormat.JSON] += 1
        if is_logfmt_line(line):
            scores[LogFormat.LOGFMT] += 1
        scores[LogFormat.TEXT] += 1

    half_text = scores[LogFormat.TEXT] // 2

    if scores[LogFormat.JSON] > scores[LogFormat.LOGFMT] and scores[LogFormat.JSON] > half_text:
        detected = LogFormat.JSON
    elif scores[LogFormat.LOGFMT] > half_text:
        detected = LogFormat.LOGFMT
    else:
        detected = LogFormat.TEXT

    logger.debug(
        f"Detected {detected.value} from {len(sample)} lines "
        f"(json={scores[LogFormat.JSON]}, logfmt={scores[LogFormat.LOGFMT]}, text={scores[LogFormat.TEXT]})"
    )
    return detected
