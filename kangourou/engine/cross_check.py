"""Independent tiling counter built on OR-Tools CP-SAT.

The model is a plain exact cover: one boolean per legal placement, every
fine cell of the shape covered exactly once and every piece type used
exactly as often as requested. Enumerating all of its solutions gives the
number of distinct tilings, which must match the backtracking search.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from ortools.sat.python import cp_model

from ..core.constants import PIECE_TYPES
from ..core.models import Move
from ..utils.logger import get_logger
from .board import KnotBoard
from .pieces import area_of
from .solver import normalize_piece_counts


LOGGER = get_logger(__name__)


class _TilingCounter(cp_model.CpSolverSolutionCallback):
    """Counts every solution reported during enumeration."""

    def __init__(self) -> None:
        super().__init__()
        self.count = 0

    def on_solution_callback(self) -> None:
        self.count += 1


def legal_placements(board: KnotBoard, piece_counts: Sequence[int]) -> Dict[Move, int]:
    """Every placement of a requested piece that fits inside the shape."""

    placements: Dict[Move, int] = {}
    for y in range(board.height):
        for x in range(board.width):
            if not board.contains(x, y):
                continue
            for piece in range(PIECE_TYPES):
                if piece_counts[piece] == 0:
                    continue
                for rotation in range(len(board.rotations[piece])):
                    mask = board.placement_mask(piece, rotation, x, y)
                    if mask is None or mask & ~board.mask:
                        continue
                    placements[Move(x, y, piece, rotation)] = mask
    return placements


def count_tilings(
    board: KnotBoard,
    piece_counts: Sequence[int],
    timeout: float = 30.0,
) -> Optional[int]:
    """Count the tilings of ``board`` via CP-SAT.

    Args:
        board: Board whose membership mask must be covered.
        piece_counts: Five per-type piece counts.
        timeout: Solver time limit in seconds.

    Returns:
        The number of tilings, or None if the time limit cut enumeration short.
    """
    counts = normalize_piece_counts(piece_counts)
    if area_of(counts) != board.fine_cell_count:
        return 0
    if board.fine_cell_count == 0:
        return 1

    placements = legal_placements(board, counts)
    model = cp_model.CpModel()

    # ------------------------------------------------------------------
    # Step 1: Placement variables, indexed by covered cell and piece type
    # ------------------------------------------------------------------
    by_cell: Dict[int, List[cp_model.IntVar]] = defaultdict(list)
    by_piece: Dict[int, List[cp_model.IntVar]] = defaultdict(list)
    for move, mask in placements.items():
        var = model.new_bool_var(f"p_{move.x}_{move.y}_{move.piece}_{move.rotation}")
        by_piece[move.piece].append(var)
        bit = 0
        while mask:
            if mask & 1:
                by_cell[bit].append(var)
            mask >>= 1
            bit += 1

    # ------------------------------------------------------------------
    # Step 2: Exact cover of the shape, exact piece usage
    # ------------------------------------------------------------------
    remaining = board.mask
    bit = 0
    while remaining:
        if remaining & 1:
            if not by_cell[bit]:
                LOGGER.debug("CP-SAT: fine cell %d cannot be covered", bit)
                return 0
            model.add_exactly_one(by_cell[bit])
        remaining >>= 1
        bit += 1

    for piece, count in enumerate(counts):
        if count == 0:
            continue
        if len(by_piece[piece]) < count:
            return 0
        model.add(sum(by_piece[piece]) == count)

    # ------------------------------------------------------------------
    # Step 3: Enumerate
    # ------------------------------------------------------------------
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.num_workers = 1

    LOGGER.info(
        "CP-SAT: %d placements over %d fine cells, enumerating (timeout=%0.1fs)...",
        len(placements),
        board.fine_cell_count,
        timeout,
    )

    counter = _TilingCounter()
    status = solver.solve(model, counter)

    if status == cp_model.INFEASIBLE:
        return 0
    if status != cp_model.OPTIMAL:
        LOGGER.warning("CP-SAT: enumeration incomplete (status=%s)", solver.status_name(status))
        return None

    LOGGER.info("CP-SAT: %d tiling(s) in %.2fs", counter.count, solver.wall_time)
    return counter.count
