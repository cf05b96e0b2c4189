"""CLI entrypoint for the word-clock grid builder."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict

from wordclock.core.exceptions import WordClockError
from wordclock.data.tokenizer import tokenize
from wordclock.engine.artifact_store import ArtifactStore
from wordclock.engine.builder import WordClockBuilder
from wordclock.engine.grid import AspectRatio, GridConfig
from wordclock.utils.logger import configure_logging, get_logger
from wordclock.utils.pretty import print_build_stats

LOGGER = get_logger("wordclock.cli")


def parse_aspect_ratio(value: str) -> AspectRatio:
    try:
        return AspectRatio.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Pack word-clock phrases into a compact letter grid",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    tokenize_cmd = commands.add_parser("tokenize", help="Split a phrase corpus into shared tokens")
    tokenize_cmd.add_argument("phrases", type=Path, help="Phrase corpus JSON")
    tokenize_cmd.add_argument("output", type=Path, help="Token table JSON to write")

    grid_cmd = commands.add_parser("grid", help="Place a token table into a letter grid")
    grid_cmd.add_argument("tokens", type=Path, help="Token table JSON from the tokenize step")
    grid_cmd.add_argument("output", type=Path, help="Grid artifact JSON to write")
    grid_cmd.add_argument(
        "--highlights-output",
        type=Path,
        metavar="FILE",
        help="Also write the phrase highlight table to FILE",
    )
    grid_cmd.add_argument(
        "--overlaps-output",
        type=Path,
        metavar="FILE",
        help="Also write the token overlap graph to FILE",
    )
    grid_cmd.add_argument("--width", type=int, default=None, help="Fixed grid width in cells")
    grid_cmd.add_argument(
        "--aspect-ratio",
        type=parse_aspect_ratio,
        default=AspectRatio(),
        help="Display aspect ratio as H:V (default 1:1)",
    )
    grid_cmd.add_argument(
        "--allow-vertical",
        action="store_true",
        help="Let tokens cross already placed ones on the vertical axis",
    )
    grid_cmd.add_argument(
        "--first-fit",
        action="store_true",
        help="Try free space in existing rows before opening a new one",
    )
    grid_cmd.add_argument("--seed", type=int, default=0, help="Seed for filler letters")
    grid_cmd.add_argument("--print", action="store_true", help="Print the grid and stats")
    return parser


def run_tokenize(args: argparse.Namespace, store: ArtifactStore) -> None:
    table = tokenize(store.load_phrases(args.phrases))
    store.save(args.output, table.to_jsonable())


def run_grid(args: argparse.Namespace, store: ArtifactStore) -> None:
    config = GridConfig(
        width=args.width,
        aspect_ratio=args.aspect_ratio,
        allow_vertical=args.allow_vertical,
        first_fit=args.first_fit,
        seed=args.seed,
    )
    result = WordClockBuilder(config).build_from_table(store.load_token_table(args.tokens))

    documents: Dict[Path, Any] = {args.output: result.grid_artifact()}
    if args.highlights_output:
        documents[args.highlights_output] = result.highlight_artifact()
    if args.overlaps_output:
        documents[args.overlaps_output] = result.index.to_jsonable()
    store.save_all(documents)

    if args.print:
        print_build_stats(result)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    store = ArtifactStore()
    try:
        if args.command == "tokenize":
            run_tokenize(args, store)
        else:
            run_grid(args, store)
    except WordClockError as exc:
        LOGGER.error("%s failed: %s", args.command, exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
