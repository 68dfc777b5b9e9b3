"""CLI entrypoint for the Kangourou knot puzzle solver."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict

from kangourou.core.constants import DEFAULT_PIECE_COUNTS, PIECE_TYPES
from kangourou.core.exceptions import KangourouError
from kangourou.engine.board import KnotBoard
from kangourou.engine.solver import KnotSolver, SolverConfig
from kangourou.utils.logger import configure_logging
from kangourou.utils.pretty import format_board, print_solutions


def read_board_text(args: argparse.Namespace) -> str:
    """Board text from ``--board`` (with literal ``\\n`` separators) or ``--board-file``."""
    if args.board_file is not None:
        return args.board_file.read_text(encoding="utf-8")
    return args.board.replace("\\n", "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Enumerate every tiling of a shape with the Kangourou knot pieces",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--board",
        type=str,
        help=r"Board rows, e.g. 'XXXXXX\nXXXXXX'; any non-blank character is a tile",
    )
    source.add_argument(
        "--board-file",
        type=Path,
        metavar="FILE",
        help="Text file with one board row per line",
    )
    parser.add_argument(
        "--counts",
        type=int,
        nargs=PIECE_TYPES,
        metavar="N",
        default=list(DEFAULT_PIECE_COUNTS),
        help="Number of pieces of each of the five types (default: %(default)s)",
    )
    parser.add_argument(
        "--show",
        type=int,
        default=1,
        help="How many solutions to draw on stderr (default 1, 0 for none)",
    )
    parser.add_argument("--color", action="store_true", help="Colour the drawn solutions")
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate every solution while searching",
    )
    parser.add_argument(
        "--cross-check",
        action="store_true",
        help="Count the tilings independently with CP-SAT and compare",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if args.show < 0:
        parser.error("--show must be non-negative")
    if any(count < 0 for count in args.counts):
        parser.error("--counts must be non-negative")

    try:
        board = KnotBoard.from_text(read_board_text(args))
        solver = KnotSolver(board, SolverConfig(validate_solutions=args.validate))
        solutions = solver.solve(args.counts)
    except (KangourouError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(format_board(board), file=sys.stderr)
    print(file=sys.stderr)
    if args.show:
        print_solutions(board, solutions, limit=args.show, use_color=args.color, stream=sys.stderr)

    payload: Dict[str, Any] = {
        "width": board.width,
        "height": board.height,
        "tiles": board.tile_count,
        "piece_counts": list(args.counts),
        "solution_count": len(solutions),
        "solutions": [[asdict(move) for move in solution] for solution in solutions],
    }

    mismatch = False
    if args.cross_check:
        from kangourou.engine.cross_check import count_tilings

        expected = count_tilings(board, args.counts)
        payload["cross_check"] = expected
        mismatch = expected is not None and expected != len(solutions)

    output_text = json.dumps(payload, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)

    if mismatch:
        print(
            f"error: CP-SAT counted {payload['cross_check']} tilings, search found {len(solutions)}",
            file=sys.stderr,
        )
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
