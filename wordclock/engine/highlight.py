"""Per-phrase lists of grid cells to illuminate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple

from ..core.models import Coord, Placement
from ..data.tokenizer import TokenTable
from .grid import LetterGrid


@dataclass(frozen=True)
class Highlight:
    """Cells lighting one phrase, flat and grouped per word."""

    phrase_id: int
    cells: Tuple[Coord, ...]
    words: Tuple[Tuple[int, Tuple[Coord, ...]], ...]

    def read(self, grid: LetterGrid) -> List[str]:
        """Letters under each word's cells, in phrase order."""

        return [grid.read(cells) for _, cells in self.words]

    def to_jsonable(self, table: TokenTable) -> Dict[str, Any]:
        return {
            "id": self.phrase_id,
            "text": table.phrase(self.phrase_id).text,
            "cells": [list(cell) for cell in self.cells],
            "words": [
                {"token": token_id, "cells": [list(cell) for cell in cells]}
                for token_id, cells in self.words
            ],
        }


def extract_highlights(table: TokenTable, placements: Mapping[int, Placement]) -> Dict[int, Highlight]:
    highlights: Dict[int, Highlight] = {}
    for phrase in table.phrases:
        words = tuple((token_id, placements[token_id].cells) for token_id in phrase.token_ids)
        flat = tuple(cell for _, cells in words for cell in cells)
        highlights[phrase.id] = Highlight(phrase_id=phrase.id, cells=flat, words=words)
    return highlights
