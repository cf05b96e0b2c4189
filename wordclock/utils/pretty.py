"""Pretty-print helpers for word-clock grids."""

from __future__ import annotations

import sys
from collections import Counter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine.builder import BuildResult
    from ..engine.grid import LetterGrid


def format_grid(grid: LetterGrid) -> str:
    width = grid.bounds.cols
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for r in range(grid.bounds.rows):
        row_cells = [grid.letter(r, c) or "." for c in range(width)]
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def print_build_stats(result: BuildResult, *, stream=None) -> None:
    """Print grid + packing stats for a completed build."""

    stream = stream or sys.stdout
    print(format_grid(result.grid), file=stream)

    stats = result.stats()
    print(file=stream)
    print("--- Grid ---", file=stream)
    print(f"  Size:          {stats['rows']} x {stats['cols']} ({stats['area']} cells)", file=stream)
    print(f"  Letters:       {stats['assigned_cells']} ({stats['fill_ratio'] * 100:.0f}%)", file=stream)
    print(f"  Reused:        {stats['reused_letters']} of {stats['token_letters']} token letters", file=stream)
    print(f"  Fresh rows:    {stats['fresh_rows']}", file=stream)

    lengths = [token.length for token in result.table.tokens]
    length_dist = Counter(lengths)
    print(file=stream)
    print("--- Tokens ---", file=stream)
    print(f"  Phrases:       {stats['phrases']}", file=stream)
    print(f"  Tokens:        {stats['tokens']}", file=stream)
    if lengths:
        print(f"  Length range:  {min(lengths)}-{max(lengths)} (avg {sum(lengths) / len(lengths):.1f})", file=stream)
        dist_parts = [f"{l}:{c}" for l, c in sorted(length_dist.items())]
        print(f"  Distribution:  {' '.join(dist_parts)}", file=stream)
    sources = " ".join(f"{name}:{count}" for name, count in stats["placement_sources"].items())
    print(f"  Placed via:    {sources}", file=stream)

    if result.warnings:
        print(file=stream)
        print("--- Warnings ---", file=stream)
        for msg in result.warnings:
            print(f"  {msg}", file=stream)
