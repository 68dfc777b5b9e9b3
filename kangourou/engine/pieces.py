"""Piece library: canonical piece geometry and its rotations."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from ..core.constants import (FOOTPRINT_COLS, FOOTPRINT_ROWS, PIECE_BITS, PIECE_TYPES,
                              QUARTER_TURNS)
from ..core.exceptions import InvalidInput
from ..core.models import PieceShape


def _cells(bits: int) -> List[Tuple[int, int]]:
    """Return the occupied ``(col, row)`` cells of a local footprint mask."""

    return [
        (col, row)
        for row in range(FOOTPRINT_ROWS)
        for col in range(FOOTPRINT_COLS)
        if bits & (1 << (row * FOOTPRINT_COLS + col))
    ]


def _turn(col: int, row: int, quarter_turns: int) -> Tuple[int, int]:
    # Pure rotations of the 2x4 frame; odd turns land in a 4x2 frame.
    last_col = FOOTPRINT_COLS - 1
    last_row = FOOTPRINT_ROWS - 1
    if quarter_turns == 0:
        return col, row
    if quarter_turns == 1:
        return row, last_col - col
    if quarter_turns == 2:
        return last_col - col, last_row - row
    return last_row - row, col


def local_rotations(bits: int) -> List[List[int]]:
    """Return the four rotations of a footprint as lists of row masks."""

    cells = _cells(bits)
    rotations: List[List[int]] = []
    for turns in range(QUARTER_TURNS):
        height = FOOTPRINT_ROWS if turns % 2 == 0 else FOOTPRINT_COLS
        rows = [0] * height
        for col, row in cells:
            new_col, new_row = _turn(col, row, turns)
            rows[new_row] |= 1 << new_col
        rotations.append(rows)
    return rotations


def flatten_rotation(rows: Iterable[int], width: int) -> int:
    """Flatten row masks into one board mask anchored at fine cell (0, 0)."""

    stride = 2 * width
    mask = 0
    for index, row in enumerate(rows):
        mask |= row << (index * stride)
    return mask


def _build_piece(index: int, bits: int) -> PieceShape:
    rotations = local_rotations(bits)
    spans = tuple(max(row.bit_length() for row in rows) for rows in rotations)
    return PieceShape(
        index=index,
        bits=bits,
        rotations=tuple(tuple(rows) for rows in rotations),
        spans=spans,
    )


PIECES: Tuple[PieceShape, ...] = tuple(
    _build_piece(index, bits) for index, bits in enumerate(PIECE_BITS)
)


def piece_shape(piece: int) -> PieceShape:
    if not isinstance(piece, int) or isinstance(piece, bool) or not 0 <= piece < PIECE_TYPES:
        raise InvalidInput(f"Unknown piece type: {piece!r}")
    return PIECES[piece]


def fine_cell_count(piece: int) -> int:
    """Number of fine cells covered by one piece of the given type."""

    return piece_shape(piece).fine_cell_count


def rotation_span(piece: int, rotation: int) -> int:
    """Occupied width of a rotation, in fine columns."""

    return piece_shape(piece).spans[rotation]


def rotations_for(piece: int, width: int) -> List[int]:
    """Board-anchored rotation masks of ``piece`` for a board ``width`` tiles wide.

    When the 180 degree rotation coincides with the unrotated footprint the
    piece is point symmetric, so the 270 degree rotation repeats the 90
    degree one as well. Only the first two masks are kept in that case.
    """

    masks = [flatten_rotation(rows, width) for rows in piece_shape(piece).rotations]
    if masks[0] == masks[2]:
        del masks[2:]
    return masks


def area_of(piece_counts: Sequence[int]) -> int:
    """Total fine cells covered by a piece-count vector."""

    return sum(count * PIECES[index].fine_cell_count for index, count in enumerate(piece_counts))
