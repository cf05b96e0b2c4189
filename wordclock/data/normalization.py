"""Shared helpers for word normalization."""

from __future__ import annotations

import re
import unicodedata

WORD_RE = re.compile(r"[^A-Z]")

# Letters NFKD does not decompose into an ASCII base.
SPECIAL_LETTERS = {
    "ß": "SS",
    "Æ": "AE",
    "æ": "AE",
    "Œ": "OE",
    "œ": "OE",
    "Ø": "O",
    "ø": "O",
    "Ł": "L",
    "ł": "L",
}


def clean_word(text: str) -> str:
    """Return a normalized uppercase ASCII representation of ``text``."""

    if not text:
        return ""
    transformed = []
    for char in text:
        if char in SPECIAL_LETTERS:
            transformed.append(SPECIAL_LETTERS[char])
            continue
        for part in unicodedata.normalize("NFKD", char):
            if not unicodedata.combining(part):
                transformed.append(part)
    return WORD_RE.sub("", "".join(transformed).upper())


__all__ = ["clean_word", "SPECIAL_LETTERS"]
