"""Plain-text rendering of boards and solutions."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List, Optional, Sequence

from ..core.constants import FINE_PER_TILE
from ..engine.pieces import piece_shape

if TYPE_CHECKING:
    from ..core.models import Move
    from ..engine.board import KnotBoard


LABELS = "123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# One ANSI style per piece type.
COLORS = (
    "\x1b[42m",    # background green
    "\x1b[1;34m",  # bold blue
    "\x1b[35m",    # magenta
    "\x1b[36m",    # cyan
    "\x1b[1;41m",  # background red
)
RESET = "\x1b[m"


def _blank_grid(board: KnotBoard, fill: str = " ") -> List[List[str]]:
    return [
        [fill] * (FINE_PER_TILE * board.width)
        for _ in range(FINE_PER_TILE * board.height)
    ]


def format_board(board: KnotBoard, filled: str = "#", empty: str = ".") -> str:
    """Draw the shape at fine-cell resolution."""

    grid = _blank_grid(board, empty)
    for col, row in board.fine_cells(board.mask):
        grid[row][col] = filled
    return "\n".join("".join(row) for row in grid)


def format_solution(board: KnotBoard, solution: Sequence[Move], use_color: bool = False) -> str:
    """Draw each move's fine cells labelled by placement order.

    Labels run ``1``-``9`` then ``A``-``Z`` and wrap around after that.
    """

    grid = _blank_grid(board)
    for number, move in enumerate(solution):
        label = LABELS[number % len(LABELS)]
        if use_color:
            label = f"{COLORS[move.piece]}{label}{RESET}"
        rows = piece_shape(move.piece).rotations[move.rotation]
        for dy, row_mask in enumerate(rows):
            dx = 0
            while row_mask >> dx:
                if row_mask & (1 << dx):
                    grid[FINE_PER_TILE * move.y + dy][FINE_PER_TILE * move.x + dx] = label
                dx += 1
    return "\n".join("".join(row) for row in grid)


def print_solutions(
    board: KnotBoard,
    solutions: Sequence[Sequence[Move]],
    *,
    limit: Optional[int] = None,
    use_color: bool = False,
    stream=None,
) -> None:
    """Print up to ``limit`` rendered solutions."""

    stream = stream or sys.stdout
    shown = solutions if limit is None else solutions[:limit]
    for index, solution in enumerate(shown, start=1):
        print(f"Solution {index}/{len(solutions)}:", file=stream)
        print(format_solution(board, solution, use_color), file=stream)
        print(file=stream)
