"""Text normalization and tokenization for the local sentiment engine."""

from __future__ import annotations

import re
from typing import Any, List

# Quotes, sentence punctuation and the Spanish opening marks
PUNCTUATION_REGEX = re.compile(r"[“”\"'.!,;:()¿?¡]")
WHITESPACE_REGEX = re.compile(r"\s+")


def normalize_text(text: Any) -> str:
    """Lowercase ``text`` and blank out punctuation.

    Runs of whitespace collapse to a single space and the result is
    trimmed, which makes it suitable for phrase (substring) search.
    Anything that is not a string is treated as empty text.
    """
    if not isinstance(text, str):
        return ""
    cleaned = PUNCTUATION_REGEX.sub(" ", text.lower())
    return WHITESPACE_REGEX.sub(" ", cleaned).strip()


def tokenize(text: Any) -> List[str]:
    """Split normalized text into word tokens; empty text yields no tokens."""
    normalized = normalize_text(text)
    return normalized.split(" ") if normalized else []


__all__ = ["normalize_text", "tokenize"]
