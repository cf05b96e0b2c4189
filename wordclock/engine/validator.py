"""Deterministic invariant checks for finished grid builds."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from ..core.exceptions import ValidationError
from ..data.tokenizer import TokenTable
from ..utils.logger import get_logger
from .highlight import Highlight
from .placer import GridLayout
from .reading_order import ReadingOrder


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]
    warnings: List[str] = field(default_factory=list)


class GridValidator:
    """Runs deterministic validation over the final layout.

    Failures stop at the first violated invariant. Warnings never fail the
    build: they name phrases whose word order contradicts another phrase and
    therefore cannot be read left to right.
    """

    def validate(
        self,
        table: TokenTable,
        layout: GridLayout,
        highlights: Mapping[int, Highlight],
    ) -> ValidationResult:
        messages: List[str] = []
        reading_order = ReadingOrder.from_table(table)
        warnings = [
            f"{table.token(earlier).text} is not kept before {table.token(later).text}"
            for earlier, later in reading_order.dropped
        ]
        try:
            self._check_conservation(table, layout)
            self._check_placements(table, layout)
            self._check_cells(table, layout)
            self._check_disjoint_phrases(table, layout)
            self._check_reading_order(table, layout, reading_order)
            self._check_highlights(table, layout, highlights)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages, warnings=warnings)
        return ValidationResult(ok=True, messages=[], warnings=warnings)

    def _check_conservation(self, table: TokenTable, layout: GridLayout) -> None:
        expected = {token.id for token in table.tokens}
        placed = set(layout.placements)
        if placed != expected:
            missing = sorted(expected - placed)
            extra = sorted(placed - expected)
            raise ValidationError(f"Placement set mismatch: missing {missing}, unexpected {extra}")

    def _check_placements(self, table: TokenTable, layout: GridLayout) -> None:
        for token_id, placement in layout.placements.items():
            token = table.token(token_id)
            if len(placement.cells) != token.length:
                raise ValidationError(f"Token {token.text} occupies {len(placement.cells)} cells")
            dr, dc = placement.axis.step
            row, col = placement.origin
            for index, cell in enumerate(placement.cells):
                if cell != (row + dr * index, col + dc * index):
                    raise ValidationError(f"Token {token.text} is not contiguous at {cell}")
            spelled = layout.grid.read(placement.cells)
            if spelled != token.text:
                raise ValidationError(f"Token {token.text} reads {spelled!r} in the grid")

    def _check_cells(self, table: TokenTable, layout: GridLayout) -> None:
        required: Dict[tuple, str] = {}
        for token_id, placement in layout.placements.items():
            text = table.token(token_id).text
            for cell, letter in zip(placement.cells, text):
                previous = required.setdefault(cell, letter)
                if previous != letter:
                    raise ValidationError(
                        f"Cell {cell} needs both {previous!r} and {letter!r}"
                    )
        assigned = {cell for cell, _ in layout.grid.letters()}
        if assigned != set(required):
            raise ValidationError(
                f"{len(assigned ^ set(required))} grid cells disagree with the placements"
            )

    def _check_disjoint_phrases(self, table: TokenTable, layout: GridLayout) -> None:
        for phrase in table.phrases:
            owner: Dict[tuple, int] = {}
            for token_id in dict.fromkeys(phrase.token_ids):
                for cell in layout.placements[token_id].cells:
                    other = owner.setdefault(cell, token_id)
                    if other != token_id:
                        raise ValidationError(
                            f"Phrase {phrase.id}: tokens {other} and {token_id} share cell {cell}"
                        )

    def _check_reading_order(
        self, table: TokenTable, layout: GridLayout, reading_order: ReadingOrder
    ) -> None:
        for earlier, later in reading_order.edges():
            last = max(layout.placements[earlier].cells)
            first = min(layout.placements[later].cells)
            if last >= first:
                raise ValidationError(
                    f"{table.token(later).text} starts at {first}, "
                    f"before {table.token(earlier).text} ends at {last}"
                )

    def _check_highlights(
        self,
        table: TokenTable,
        layout: GridLayout,
        highlights: Mapping[int, Highlight],
    ) -> None:
        for phrase in table.phrases:
            highlight = highlights.get(phrase.id)
            if highlight is None:
                raise ValidationError(f"Phrase {phrase.id} has no highlight")
            expected = "".join(token.text for token in table.phrase_tokens(phrase.id))
            lit = layout.grid.read(highlight.cells)
            if lit != expected:
                raise ValidationError(f"Phrase {phrase.id} lights {lit!r}, expected {expected!r}")
            if " ".join(highlight.read(layout.grid)) != table.phrase_text(phrase.id):
                raise ValidationError(f"Phrase {phrase.id} word grouping is out of order")
