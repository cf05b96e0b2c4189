"""Shared constants and enumerations for the word-clock builder."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class Axis(str, Enum):
    """Axes a token can be laid along."""

    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"

    @property
    def step(self) -> Tuple[int, int]:
        return (0, 1) if self is Axis.HORIZONTAL else (1, 0)

    @property
    def perpendicular(self) -> "Axis":
        return Axis.VERTICAL if self is Axis.HORIZONTAL else Axis.HORIZONTAL


class OverlapKind(str, Enum):
    """Ways a token can share letters with an already placed anchor.

    The declaration order is also the tie-break order used when ranking
    candidates with the same shared-letter count.
    """

    INSIDE = "INSIDE"  # token is a substring of the anchor
    AROUND = "AROUND"  # anchor is a substring of the token
    CHAIN_AFTER = "CHAIN_AFTER"  # anchor suffix == token prefix
    CHAIN_BEFORE = "CHAIN_BEFORE"  # token suffix == anchor prefix
    CROSS = "CROSS"  # one letter shared on the perpendicular axis

    @property
    def rank(self) -> int:
        return list(OverlapKind).index(self)


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    @property
    def area(self) -> int:
        return self.rows * self.cols
