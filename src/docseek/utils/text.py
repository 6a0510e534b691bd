"""Text helpers: tokenization and whitespace cleanup."""

from __future__ import annotations

import re
from typing import Iterable, List

DELIMITERS = "'.()`,\" \n"

_SPLIT_PATTERN = re.compile("[" + re.escape(DELIMITERS) + "]")


def tokenize(text: str) -> List[str]:
    """Lowercase text and split it into word tokens.

    Splits on quotes, periods, parentheses, backticks, commas, spaces and
    newlines. Empty fragments between consecutive delimiters are dropped, so
    no token ever contains a delimiter.
    """
    return [word for word in _SPLIT_PATTERN.split(text.lower()) if word]


def normalize_whitespace(lines: Iterable[str]) -> str:
    """Collapse whitespace and join lines."""
    return "\n".join(line.strip() for line in lines if line.strip())
