"""Backtracking search enumerating every tiling of a board.

The scan walks coarse tiles in row-major order. At the first tile that is
part of the shape but not yet fully covered, every remaining piece type and
rotation anchored at that tile is tried. After a placement the search
re-enters the *same* tile, because one piece may leave some of the tile's
four fine cells uncovered.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..core.constants import DEFAULT_PIECE_COUNTS, PIECE_TYPES
from ..core.exceptions import InvalidInput, ValidationError
from ..core.models import Move, Solution
from ..utils.logger import get_logger
from .board import KnotBoard
from .pieces import area_of
from .validator import SolutionValidator


LOGGER = get_logger(__name__)


@dataclass
class SolverConfig:
    """Configuration values driving a search."""

    piece_counts: Sequence[int] = DEFAULT_PIECE_COUNTS
    validate_solutions: bool = False


@dataclass
class SearchStats:
    nodes: int = 0
    placements: int = 0
    solutions: int = 0
    elapsed: float = 0.0


@dataclass
class SearchState:
    """Mutable state owned by a single :meth:`KnotSolver.solve` call."""

    remaining: List[int]
    requested: Tuple[int, ...] = ()
    covered: int = 0
    moves: List[Move] = field(default_factory=list)
    solutions: List[Solution] = field(default_factory=list)
    stats: SearchStats = field(default_factory=SearchStats)


def normalize_piece_counts(piece_counts: Sequence[int]) -> Tuple[int, ...]:
    """Validate a piece-count vector and return it as a tuple."""

    if isinstance(piece_counts, (str, bytes)):
        raise InvalidInput(f"Piece counts must be a sequence of integers, got {piece_counts!r}")
    try:
        counts = tuple(piece_counts)
    except TypeError as exc:
        raise InvalidInput(f"Piece counts must be a sequence of integers, got {piece_counts!r}") from exc
    if len(counts) != PIECE_TYPES:
        raise InvalidInput(f"Expected {PIECE_TYPES} piece counts, got {len(counts)}")
    for count in counts:
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise InvalidInput(f"Piece counts must be non-negative integers, got {counts!r}")
    return counts


class KnotSolver:
    """Enumerates all exact tilings of a :class:`KnotBoard`."""

    def __init__(self, board: KnotBoard, config: Optional[SolverConfig] = None) -> None:
        self.board = board
        self.config = config or SolverConfig()
        self.validator = SolutionValidator(board)
        self.last_stats: Optional[SearchStats] = None

    def solve(self, piece_counts: Optional[Sequence[int]] = None) -> List[Solution]:
        """Return every tiling that uses exactly ``piece_counts`` pieces.

        Solutions are lists of :class:`Move` in placement order. An empty
        list means either the counts cannot cover the board's area (logged
        as a warning) or the exhaustive search found nothing.
        """

        counts = normalize_piece_counts(
            self.config.piece_counts if piece_counts is None else piece_counts
        )
        area = area_of(counts)
        if area != self.board.fine_cell_count:
            LOGGER.warning(
                "%s tiles need to be covered, but the pieces cover %s",
                self.board.fine_cell_count,
                area,
            )
            self.last_stats = SearchStats()
            return []

        state = SearchState(remaining=list(counts), requested=counts)
        self.last_stats = state.stats
        started = time.perf_counter()
        try:
            if self._search(state, 0, 0):
                # Nothing to cover: the empty move list is the only tiling.
                self._record(state)
        finally:
            state.stats.elapsed = time.perf_counter() - started
            state.stats.solutions = len(state.solutions)
        LOGGER.info(
            "Search finished: %s solution(s), %s nodes, %s placements in %.2fs",
            state.stats.solutions,
            state.stats.nodes,
            state.stats.placements,
            state.stats.elapsed,
        )
        return state.solutions

    # ------------------------------------------------------------------
    # Search internals
    # ------------------------------------------------------------------
    def _next_open_tile(self, covered: int, x: int, y: int) -> Tuple[int, int]:
        """First tile at or after ``(x, y)`` that is in the shape and not full.

        Returns a coordinate with ``y == height`` once the scan is past the
        last row.
        """

        board = self.board
        while True:
            if x >= board.width:
                x, y = 0, y + 1
            if y >= board.height:
                return x, y
            if board.contains(x, y):
                tile_mask = board.tile_mask(x, y)
                if (covered & tile_mask) != tile_mask:
                    return x, y
            x += 1

    def _search(self, state: SearchState, x: int, y: int) -> bool:
        """Explore placements at the first open tile from ``(x, y)``.

        Returns ``True`` only when the board is already complete; callers use
        it to record the move stack, never to stop iterating.
        """

        state.stats.nodes += 1
        x, y = self._next_open_tile(state.covered, x, y)
        if y >= self.board.height:
            return True

        board = self.board
        membership = board.mask

        # Re-entering the tile of the latest move: combinations before it
        # were already tried by the caller's loop.
        first_piece, first_rotation = 0, 0
        if state.moves:
            latest = state.moves[-1]
            if latest.x == x and latest.y == y:
                first_piece, first_rotation = latest.piece, latest.rotation + 1

        for piece in range(first_piece, PIECE_TYPES):
            if state.remaining[piece] == 0:
                continue
            start = first_rotation if piece == first_piece else 0
            for rotation in range(start, len(board.rotations[piece])):
                mask = board.placement_mask(piece, rotation, x, y)
                if mask is None:
                    continue
                if state.covered & mask:
                    continue
                if mask & ~membership:
                    continue

                state.remaining[piece] -= 1
                state.covered |= mask
                state.moves.append(Move(x, y, piece, rotation))
                state.stats.placements += 1
                if self._search(state, x, y):
                    self._record(state)
                state.remaining[piece] += 1
                state.covered &= ~mask
                state.moves.pop()
        return False

    def _record(self, state: SearchState) -> None:
        solution = list(state.moves)
        if self.config.validate_solutions:
            result = self.validator.validate(solution, state.requested)
            if not result.ok:
                raise ValidationError("; ".join(result.messages))
        LOGGER.debug("Solution #%s: %s", len(state.solutions) + 1, solution)
        state.solutions.append(solution)


def solve_board(board: KnotBoard, piece_counts: Optional[Sequence[int]] = None) -> List[Solution]:
    """Enumerate all tilings of ``board`` with a default-configured solver."""

    return KnotSolver(board).solve(piece_counts)
