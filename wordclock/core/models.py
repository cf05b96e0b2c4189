"""Data models supporting the word-clock builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple

from .constants import Axis, OverlapKind

Coord = Tuple[int, int]


@dataclass
class PhraseRecord:
    """A displayable phrase as handed over by the phrase generator."""

    text: str
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Token:
    """A distinct word form drawn once in the grid and shared by phrases."""

    id: int
    text: str
    references: Tuple[Tuple[int, int], ...] = ()

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def phrase_ids(self) -> Tuple[int, ...]:
        seen: Dict[int, None] = {}
        for phrase_id, _ in self.references:
            seen.setdefault(phrase_id, None)
        return tuple(seen)

    @property
    def phrase_count(self) -> int:
        return len(self.phrase_ids)


@dataclass(frozen=True)
class Phrase:
    """One displayable sentence, expressed as token ids in reading order."""

    id: int
    text: str
    token_ids: Tuple[int, ...]
    tags: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class OverlapCandidate:
    """A way to lay ``token_id`` so that it shares letters with ``anchor_id``.

    For same-axis kinds ``offset`` is the index, along the anchor's axis, of
    the token's first letter relative to the anchor's first letter. For
    ``CROSS`` the token goes on the perpendicular axis and its
    ``token_index``-th letter sits on the anchor's ``anchor_index``-th cell.
    """

    token_id: int
    anchor_id: int
    kind: OverlapKind
    shared: int
    offset: int = 0
    token_index: int = 0
    anchor_index: int = 0

    def rank_key(self) -> Tuple[int, int, int, int, int, int]:
        return (
            -self.shared,
            self.anchor_id,
            self.kind.rank,
            self.offset,
            self.anchor_index,
            self.token_index,
        )


@dataclass
class Cell:
    """Represents a grid cell with metadata."""

    letter: Optional[str] = None
    part_of_token_ids: Set[int] = field(default_factory=set)

    def is_empty(self) -> bool:
        return self.letter is None


@dataclass(frozen=True)
class Placement:
    """The cells assigned to a token, one per letter in text order."""

    token_id: int
    origin: Coord
    axis: Axis
    cells: Tuple[Coord, ...]

    @classmethod
    def along(cls, token_id: int, origin: Coord, axis: Axis, length: int) -> "Placement":
        return cls(token_id=token_id, origin=origin, axis=axis, cells=axis_cells(origin, axis, length))


def axis_cells(origin: Coord, axis: Axis, length: int) -> Tuple[Coord, ...]:
    dr, dc = axis.step
    row, col = origin
    return tuple((row + dr * i, col + dc * i) for i in range(length))
