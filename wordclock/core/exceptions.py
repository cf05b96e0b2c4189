"""Custom exception hierarchy for word-clock grid builds."""

from __future__ import annotations


class WordClockError(Exception):
    """Base exception for build failures."""


class EmptyPhrase(WordClockError):
    """Raised when a phrase (or the whole corpus) yields no tokens."""

    def __init__(self, message: str, phrase_index: int | None = None) -> None:
        super().__init__(message)
        self.phrase_index = phrase_index


class TokenTooWide(WordClockError):
    """Raised when a token is longer than the grid is wide."""


class GridConflict(WordClockError):
    """Raised when two different letters claim the same cell."""


class FrozenGridError(WordClockError):
    """Raised when writing to a grid that was handed off for reading."""


class ValidationError(WordClockError):
    """Raised when the post-build integrity checks fail."""


class ArtifactError(WordClockError):
    """Raised when a JSON artifact cannot be read or has the wrong shape."""
