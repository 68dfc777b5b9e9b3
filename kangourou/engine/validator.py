"""Deterministic integrity checks for a tiling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ..core.constants import PIECE_TYPES
from ..core.exceptions import ValidationError
from ..core.models import Move
from ..utils.logger import get_logger
from .board import KnotBoard


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class SolutionValidator:
    """Checks that a move list tiles the board exactly with the requested pieces."""

    def __init__(self, board: KnotBoard) -> None:
        self.board = board

    def validate(self, solution: Sequence[Move], piece_counts: Sequence[int]) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_moves_in_range(solution)
            covered = self._check_footprints(solution)
            self._check_full_coverage(covered)
            self._check_counts(solution, piece_counts)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def _check_moves_in_range(self, solution: Sequence[Move]) -> None:
        for move in solution:
            if not self.board.contains(move.x, move.y):
                raise ValidationError(f"Move {move.as_tuple()} is anchored outside the shape")
            if not 0 <= move.piece < PIECE_TYPES:
                raise ValidationError(f"Move {move.as_tuple()} has an unknown piece type")
            if not 0 <= move.rotation < len(self.board.rotations[move.piece]):
                raise ValidationError(f"Move {move.as_tuple()} has an unknown rotation")

    def _check_footprints(self, solution: Sequence[Move]) -> int:
        covered = 0
        for move in solution:
            mask = self.board.placement_mask(move.piece, move.rotation, move.x, move.y)
            if mask is None:
                raise ValidationError(f"Move {move.as_tuple()} crosses the right board edge")
            if mask & ~self.board.mask:
                raise ValidationError(f"Move {move.as_tuple()} spills off the shape")
            if mask & covered:
                raise ValidationError(f"Move {move.as_tuple()} overlaps an earlier piece")
            covered |= mask
        return covered

    def _check_full_coverage(self, covered: int) -> None:
        missing = self.board.mask & ~covered
        if missing:
            raise ValidationError(
                f"{bin(missing).count('1')} fine cells left uncovered, first at "
                f"{self.board.fine_cells(missing)[0]}"
            )

    @staticmethod
    def _check_counts(solution: Sequence[Move], piece_counts: Sequence[int]) -> None:
        used = [0] * PIECE_TYPES
        for move in solution:
            used[move.piece] += 1
        if list(piece_counts) != used:
            raise ValidationError(f"Used pieces {used} differ from requested {list(piece_counts)}")
