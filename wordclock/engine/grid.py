"""Grid representation and helper utilities."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import AbstractSet, Any, Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from ..core.constants import LETTERS, Bounds
from ..core.exceptions import FrozenGridError, GridConflict
from ..core.models import Cell, Coord, Token
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class AspectRatio:
    """Target ``horizontal:vertical`` proportion of the displayed grid."""

    horizontal: int = 1
    vertical: int = 1

    def __post_init__(self) -> None:
        if self.horizontal <= 0 or self.vertical <= 0:
            raise ValueError(f"Aspect ratio sides must be positive: {self}")

    @classmethod
    def parse(cls, text: str) -> "AspectRatio":
        horizontal, sep, vertical = text.partition(":")
        if not sep:
            raise ValueError(f"Missing colon (:) in aspect ratio {text!r}")
        return cls(horizontal=int(horizontal), vertical=int(vertical))

    def cover(self, width: int, height: int) -> Tuple[int, int]:
        """Smallest ``(width, height)`` covering the given rectangle at this ratio.

        Widening is preferred; rows are only added when the rectangle is
        already wider than the ratio allows.
        """

        width_for_ratio = -(-self.horizontal * height // self.vertical)
        if width_for_ratio >= width:
            return width_for_ratio, height
        height_for_ratio = -(-self.vertical * width // self.horizontal)
        return width, height_for_ratio

    def __str__(self) -> str:
        return f"{self.horizontal}:{self.vertical}"


@dataclass
class GridConfig:
    """Configuration values driving the grid layout."""

    width: Optional[int] = None
    aspect_ratio: AspectRatio = AspectRatio()
    allow_vertical: bool = False
    first_fit: bool = False
    seed: int = 0

    def resolve_width(self, tokens: Sequence[Token]) -> int:
        """Fixed width if configured, otherwise one derived from the corpus."""

        if self.width is not None:
            if self.width <= 0:
                raise ValueError(f"Grid width must be positive, got {self.width}")
            return self.width
        longest = max((token.length for token in tokens), default=1)
        letters = sum(token.length for token in tokens)
        ratio = self.aspect_ratio
        balanced = math.ceil(math.sqrt(letters * ratio.horizontal / ratio.vertical))
        return max(longest, balanced, 1)


class LetterGrid:
    """Fixed-width letter grid whose height grows on demand."""

    def __init__(self, width: int) -> None:
        if width <= 0:
            raise ValueError(f"Grid width must be positive, got {width}")
        self.width = width
        self.cells: List[List[Cell]] = []
        self._assigned_count = 0
        self._frozen = False

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def height(self) -> int:
        return len(self.cells)

    @property
    def bounds(self) -> Bounds:
        return Bounds(rows=self.height, cols=self.width)

    @property
    def assigned_count(self) -> int:
        return self._assigned_count

    @property
    def frozen(self) -> bool:
        return self._frozen

    def accepts(self, row: int, col: int) -> bool:
        """Whether a write could target ``(row, col)``; rows below the grid grow it."""

        return row >= 0 and 0 <= col < self.width

    def add_row(self) -> int:
        self._ensure_writable()
        self.cells.append([Cell() for _ in range(self.width)])
        return self.height - 1

    def _ensure_rows(self, rows: int) -> None:
        while self.height < rows:
            self.add_row()

    def freeze(self) -> "LetterGrid":
        """Hand the grid off for reading; later writes raise."""

        self._frozen = True
        return self

    def _ensure_writable(self) -> None:
        if self._frozen:
            raise FrozenGridError("Grid is frozen and can no longer be written")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def letter(self, row: int, col: int) -> Optional[str]:
        if not self.bounds.contains(row, col):
            return None
        return self.cells[row][col].letter

    def owners(self, row: int, col: int) -> Set[int]:
        if not self.bounds.contains(row, col):
            return set()
        return self.cells[row][col].part_of_token_ids

    def letters(self) -> Iterator[Tuple[Coord, str]]:
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                if cell.letter is not None:
                    yield (r, c), cell.letter

    def read(self, coords: Iterable[Coord]) -> str:
        return "".join(self.letter(row, col) or "" for row, col in coords)

    def can_write(
        self,
        coords: Sequence[Coord],
        text: str,
        forbidden_owners: AbstractSet[int] = frozenset(),
    ) -> bool:
        """Dry-run a write: in bounds, letters agree, no forbidden sharing."""

        if len(coords) != len(text):
            return False
        for (row, col), letter in zip(coords, text):
            if not self.accepts(row, col):
                return False
            existing = self.letter(row, col)
            if existing is None:
                continue
            if existing != letter:
                return False
            if forbidden_owners and not forbidden_owners.isdisjoint(self.owners(row, col)):
                return False
        return True

    # ------------------------------------------------------------------
    # Word placement
    # ------------------------------------------------------------------
    def write(self, token_id: int, coords: Sequence[Coord], text: str) -> int:
        """Commit ``text`` over ``coords`` and return how many cells were reused."""

        self._ensure_writable()
        if len(coords) != len(text):
            raise GridConflict(f"Token {token_id}: {len(text)} letters for {len(coords)} cells")

        for (row, col), letter in zip(coords, text):
            if not self.accepts(row, col):
                raise GridConflict(f"Token {token_id} extends outside grid at {(row, col)}")
            existing = self.letter(row, col)
            if existing is not None and existing != letter:
                raise GridConflict(
                    f"Token {token_id} writes {letter!r} over {existing!r} at {(row, col)}"
                )

        # All checks passed, mutate grid
        self._ensure_rows(max(row for row, _ in coords) + 1)
        reused = 0
        for (row, col), letter in zip(coords, text):
            cell = self.cells[row][col]
            if cell.letter is None:
                self._assigned_count += 1
                cell.letter = letter
            else:
                reused += 1
            cell.part_of_token_ids.add(token_id)
        return reused

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def minimal_rows(self) -> List[List[Optional[str]]]:
        return [[cell.letter for cell in row] for row in self.cells]

    def display_rows(self, aspect_ratio: AspectRatio = AspectRatio(), seed: int = 0) -> List[str]:
        """Cover the grid at ``aspect_ratio``, filling blanks with seeded letters."""

        width, height = aspect_ratio.cover(self.width, self.height)
        rng = random.Random(seed)
        rows: List[str] = []
        for r in range(height):
            rows.append(
                "".join(self.letter(r, c) or rng.choice(LETTERS) for c in range(width))
            )
        LOGGER.debug(
            "Display grid %dx%d covers minimal %dx%d at %s",
            height,
            width,
            self.height,
            self.width,
            aspect_ratio,
        )
        return rows

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "assigned_cells": self.assigned_count,
            "minimal_grid": self.minimal_rows(),
        }
