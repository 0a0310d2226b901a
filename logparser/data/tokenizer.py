"""
logfmt tokenizer: split one `key=value key2="quoted value"` line into pairs.

Implemented as an explicit three-state automaton so quoting and escaping
edge cases stay easy to follow and to test in isolation:

    READING_KEY   --'='-->  READING_VALUE
    READING_VALUE --'"'-->  READING_QUOTED_VALUE
    READING_VALUE --' '-->  READING_KEY            (emits the pair)
    READING_QUOTED_VALUE --'"'--> READING_VALUE

A character counts as escaped when the character right before it is a
backslash; escaped delimiters are kept as literal text. The tokenizer never
raises: unbalanced quotes simply run to the end of the line.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class TokenizerState(str, Enum):
    """States of the logfmt automaton."""
    READING_KEY = "reading_key"
    READING_VALUE = "reading_value"
    READING_QUOTED_VALUE = "reading_quoted_value"


@dataclass
class _Scan:
    """Mutable scan state for a single line."""

    state: TokenizerState = TokenizerState.READING_KEY
    key: List[str] = field(default_factory=list)
    value: List[str] = field(default_factory=list)
    pairs: Dict[str, str] = field(default_factory=dict)

    def emit(self) -> None:
        key = "".join(self.key)
        if key:
            self.pairs[key] = "".join(self.value)
        self.key.clear()
        self.value.clear()
        self.state = TokenizerState.READING_KEY


def tokenize_logfmt(line: str) -> Dict[str, str]:
    """
    Split a logfmt line into key/value pairs.

    Args:
        line: One log line

    Returns:
        Dict of key -> raw string value; later duplicates overwrite earlier ones

    Notes:
        - Quotes delimit a value but are not part of it
        - Escaped quotes (\\") are kept verbatim, backslash included
        - A trailing key with no '=' is dropped
    """
    scan = _Scan()

    for i, ch in enumerate(line):
        escaped = i > 0 and line[i - 1] == "\\"

        if scan.state is TokenizerState.READING_KEY:
            if ch == "=" and not escaped:
                scan.state = TokenizerState.READING_VALUE
            else:
                scan.key.append(ch)

        elif scan.state is TokenizerState.READING_VALUE:
            if ch == '"' and not escaped:
                scan.state = TokenizerState.READING_QUOTED_VALUE
            elif ch == " " and not escaped:
                scan.emit()
            else:
                scan.value.append(ch)

        else:
            if ch == '"' and not escaped:
                scan.state = TokenizerState.READING_VALUE
            else:
                scan.value.append(ch)

    # Only keys whose '=' was consumed are emitted at end of line
    if scan.state is not TokenizerState.READING_KEY:
        scan.emit()

    return scan.pairs
