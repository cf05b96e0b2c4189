"""Word-clock letter grid builder.

This package exposes the public API surface via:

- ``wordclock.engine.builder.WordClockBuilder``: runs the whole pipeline.
- ``wordclock.data.tokenizer.tokenize``: turns phrases into shared tokens.
- ``wordclock.engine.grid.GridConfig``: width, aspect ratio and axis policy.
"""

from .data.tokenizer import TokenTable, tokenize
from .engine.builder import BuildResult, WordClockBuilder
from .engine.grid import AspectRatio, GridConfig

__all__ = [
    "AspectRatio",
    "BuildResult",
    "GridConfig",
    "TokenTable",
    "WordClockBuilder",
    "tokenize",
]

__version__ = "0.1.0"
