"""Solver for the Kangourou knot tiling puzzle.

This package exposes the public API surface via:

- ``kangourou.engine.board.KnotBoard``: the target shape as a fine-cell bitset.
- ``kangourou.engine.solver.KnotSolver``: enumerates every exact tiling.
- ``kangourou.engine.pieces``: the five piece shapes and their rotations.
"""

from .core.exceptions import InvalidInput, KangourouError, ValidationError
from .core.models import Move, Solution
from .engine.board import KnotBoard, load_board
from .engine.solver import KnotSolver, SolverConfig, solve_board

__all__ = [
    "InvalidInput",
    "KangourouError",
    "ValidationError",
    "Move",
    "Solution",
    "KnotBoard",
    "load_board",
    "KnotSolver",
    "SolverConfig",
    "solve_board",
]

__version__ = "0.1.0"
