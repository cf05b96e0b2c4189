"""Greedy placement of tokens into the letter grid.

Tokens are visited once, most shared and longest first, but never before a
word that precedes them in some phrase. Each one takes the best-ranked
overlap with an already placed token whose cells agree with the grid and
keep every phrase in reading order; failing that (and only when enabled),
the first free spot in an existing row; failing that, a new row. Nothing is
ever moved once written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..core.constants import Axis, OverlapKind
from ..core.exceptions import GridConflict, TokenTooWide
from ..core.models import OverlapCandidate, Placement, Token
from ..data.tokenizer import TokenTable
from ..utils.logger import get_logger
from .grid import GridConfig, LetterGrid
from .overlap import OverlapIndex
from .reading_order import ReadingOrder

LOGGER = get_logger(__name__)


@dataclass
class GridLayout:
    """The filled grid plus the placement chosen for every token."""

    grid: LetterGrid
    placements: Dict[int, Placement]
    reused_letters: int = 0
    fresh_rows: int = 0
    sources: Dict[int, str] = field(default_factory=dict)

    def placement(self, token_id: int) -> Placement:
        return self.placements[token_id]


def placement_priority(token: Token) -> Tuple[int, int, int]:
    """Most referenced, then longest, then first seen."""

    return (-token.phrase_count, -token.length, token.id)


def placement_order(tokens: Iterable[Token], reading_order: ReadingOrder) -> List[Token]:
    return reading_order.visit_order(tokens, placement_priority)


class GridPlacer:
    """Assigns every token exactly one conflict-free placement."""

    def __init__(self, table: TokenTable, index: OverlapIndex, config: GridConfig) -> None:
        self.table = table
        self.index = index
        self.config = config
        self.reading_order = ReadingOrder.from_table(table)
        self.grid = LetterGrid(config.resolve_width(table.tokens))
        self.placements: Dict[int, Placement] = {}
        self._sources: Dict[int, str] = {}
        self._reused = 0
        self._fresh_rows = 0

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def place_all(self) -> GridLayout:
        order = placement_order(self.table.tokens, self.reading_order)
        LOGGER.info("Placing %d tokens into a grid %d wide", len(order), self.grid.width)
        for token in order:
            self._place(token)
        self.grid.freeze()
        LOGGER.info(
            "Placed %d tokens: %dx%d grid, %d assigned cells, %d reused letters",
            len(self.placements),
            self.grid.height,
            self.grid.width,
            self.grid.assigned_count,
            self._reused,
        )
        return GridLayout(
            grid=self.grid,
            placements=dict(sorted(self.placements.items())),
            reused_letters=self._reused,
            fresh_rows=self._fresh_rows,
            sources=dict(sorted(self._sources.items())),
        )

    # ------------------------------------------------------------------
    # Placement steps
    # ------------------------------------------------------------------
    def _place(self, token: Token) -> None:
        if token.id in self.placements:
            raise GridConflict(f"Token {token.text} is already placed")
        if token.length > self.grid.width:
            raise TokenTooWide(
                f"Token {token.text} ({token.length} letters) exceeds grid width {self.grid.width}"
            )

        forbidden = self.table.co_occurring(token.id)
        placement = self._from_candidates(token, forbidden)
        source = "overlap"
        if placement is None and self.config.first_fit:
            placement = self._first_fit(token, forbidden)
            source = "first_fit"
        if placement is None:
            placement = Placement.along(token.id, (self.grid.height, 0), Axis.HORIZONTAL, token.length)
            if not self._keeps_reading_order(placement):
                raise GridConflict(f"Token {token.text} cannot be placed in reading order")
            self.grid.add_row()
            self._fresh_rows += 1
            source = "fresh_row"

        self._commit(token, placement)
        self._sources[token.id] = source
        LOGGER.debug(
            "Placed %s at %s %s via %s",
            token.text,
            placement.origin,
            placement.axis.value,
            source,
        )

    def _from_candidates(self, token: Token, forbidden: FrozenSet[int]) -> Optional[Placement]:
        for candidate in self.index.candidates_for(token.id):
            anchor = self.placements.get(candidate.anchor_id)
            if anchor is None:
                continue
            placement = self._implied_placement(token, candidate, anchor)
            if placement is None:
                continue
            if self._fits(token, placement, forbidden):
                LOGGER.debug(
                    "%s reuses %d letters of %s (%s)",
                    token.text,
                    candidate.shared,
                    self.table.token(candidate.anchor_id).text,
                    candidate.kind.value,
                )
                return placement
        return None

    def _implied_placement(
        self, token: Token, candidate: OverlapCandidate, anchor: Placement
    ) -> Optional[Placement]:
        if candidate.kind is OverlapKind.CROSS:
            if not self.config.allow_vertical:
                return None
            axis = anchor.axis.perpendicular
            pivot_row, pivot_col = anchor.cells[candidate.anchor_index]
            dr, dc = axis.step
            origin = (
                pivot_row - dr * candidate.token_index,
                pivot_col - dc * candidate.token_index,
            )
        else:
            axis = anchor.axis
            dr, dc = axis.step
            origin = (
                anchor.origin[0] + dr * candidate.offset,
                anchor.origin[1] + dc * candidate.offset,
            )
        if token.length == 1:
            axis = Axis.HORIZONTAL
        placement = Placement.along(token.id, origin, axis, token.length)
        if not all(self.grid.accepts(row, col) for row, col in placement.cells):
            return None
        return placement

    def _first_fit(self, token: Token, forbidden: FrozenSet[int]) -> Optional[Placement]:
        for row in range(self.grid.height):
            for col in range(self.grid.width - token.length + 1):
                placement = Placement.along(token.id, (row, col), Axis.HORIZONTAL, token.length)
                if self._fits(token, placement, forbidden):
                    return placement
        return None

    def _fits(self, token: Token, placement: Placement, forbidden: FrozenSet[int]) -> bool:
        if not self.grid.can_write(placement.cells, token.text, forbidden):
            return False
        return self._keeps_reading_order(placement)

    def _keeps_reading_order(self, placement: Placement) -> bool:
        return self.reading_order.allows(placement.token_id, placement.cells, self.placements)

    def _commit(self, token: Token, placement: Placement) -> None:
        self._reused += self.grid.write(token.id, placement.cells, token.text)
        self.placements[token.id] = placement
