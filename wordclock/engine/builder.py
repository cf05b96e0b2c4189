"""Word-clock build orchestration.

Stages run strictly in sequence, each on the complete output of the one
before: tokenize, index overlaps, place, extract highlights, validate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from ..core.exceptions import ValidationError
from ..data.tokenizer import PhraseInput, TokenTable, tokenize
from ..utils.logger import get_logger
from .grid import GridConfig
from .highlight import Highlight, extract_highlights
from .overlap import OverlapIndex
from .placer import GridLayout, GridPlacer
from .validator import GridValidator


LOGGER = get_logger(__name__)


@dataclass
class BuildResult:
    config: GridConfig
    table: TokenTable
    index: OverlapIndex
    layout: GridLayout
    highlights: Dict[int, Highlight]
    warnings: List[str] = field(default_factory=list)

    @property
    def grid(self):
        return self.layout.grid

    def token_table_artifact(self) -> Dict[str, Any]:
        return self.table.to_jsonable()

    def highlight_artifact(self) -> Dict[str, Any]:
        return {
            "phrases": [
                self.highlights[phrase.id].to_jsonable(self.table) for phrase in self.table.phrases
            ]
        }

    def grid_artifact(self) -> Dict[str, Any]:
        grid = self.layout.grid
        payload = grid.to_jsonable()
        payload["grid"] = grid.display_rows(self.config.aspect_ratio, seed=self.config.seed)
        payload["aspect_ratio"] = str(self.config.aspect_ratio)
        payload["placements"] = [
            {
                "token": token_id,
                "text": self.table.token(token_id).text,
                "origin": list(placement.origin),
                "axis": placement.axis.value,
                "cells": [list(cell) for cell in placement.cells],
            }
            for token_id, placement in self.layout.placements.items()
        ]
        payload["phrases"] = self.highlight_artifact()["phrases"]
        payload["stats"] = self.stats()
        payload["warnings"] = list(self.warnings)
        return payload

    def stats(self) -> Dict[str, Any]:
        grid = self.layout.grid
        total_letters = self.table.total_letters
        sources: Dict[str, int] = {}
        for source in self.layout.sources.values():
            sources[source] = sources.get(source, 0) + 1
        return {
            "phrases": len(self.table.phrases),
            "tokens": len(self.table.tokens),
            "token_letters": total_letters,
            "rows": grid.height,
            "cols": grid.width,
            "area": grid.bounds.area,
            "assigned_cells": grid.assigned_count,
            "reused_letters": self.layout.reused_letters,
            "fresh_rows": self.layout.fresh_rows,
            "placement_sources": dict(sorted(sources.items())),
            "fill_ratio": round(grid.assigned_count / grid.bounds.area, 3) if grid.bounds.area else 0.0,
        }


class WordClockBuilder:
    """High-level orchestrator: tokenize, index, place, extract, validate."""

    def __init__(self, config: GridConfig | None = None) -> None:
        self.config = config or GridConfig()
        self.validator = GridValidator()

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    def build(self, phrases: Sequence[PhraseInput]) -> BuildResult:
        return self.build_from_table(tokenize(phrases))

    def build_from_table(self, table: TokenTable) -> BuildResult:
        index = OverlapIndex.build(table.tokens, allow_cross=self.config.allow_vertical)
        layout = GridPlacer(table, index, self.config).place_all()
        highlights = extract_highlights(table, layout.placements)

        validation = self.validator.validate(table, layout, highlights)
        if not validation.ok:
            raise ValidationError(f"Grid validation failed: {validation.messages}")

        LOGGER.info(
            "Built %dx%d grid for %d phrases (%d tokens)",
            layout.grid.height,
            layout.grid.width,
            len(table.phrases),
            len(table.tokens),
        )
        return BuildResult(
            config=self.config,
            table=table,
            index=index,
            layout=layout,
            highlights=highlights,
            warnings=validation.warnings,
        )
