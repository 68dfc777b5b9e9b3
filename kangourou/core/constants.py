"""Shared constants for the knot puzzle solver.

Every piece is described by a bit mask over a local footprint of 2 fine
columns by 4 fine rows, one bit per fine cell:

    --   --   --   --   --       --
   |  | |x | |xx| |x | |xx|     |01| (bits)
   |x | |x | |x | |x | |x |     |23|
   | x| | x| | x| | x| | x|     |45|
   |  | |  | |  | | x| | x|     |67|
    --   --   --   --   --       --

A coarse tile of the board is quartered into 2x2 fine cells, which is the
resolution at which the irregular piece outlines line up.
"""

from __future__ import annotations

from typing import Tuple

# Fine cells per coarse tile along each axis.
FINE_PER_TILE = 2

# Local piece footprint in fine cells.
FOOTPRINT_COLS = 2
FOOTPRINT_ROWS = 4

POS_00 = 1 << 0
POS_01 = 1 << 1
POS_10 = 1 << 2
POS_11 = 1 << 3
POS_20 = 1 << 4
POS_21 = 1 << 5
POS_30 = 1 << 6
POS_31 = 1 << 7

PIECE_BITS: Tuple[int, ...] = (
    POS_10 | POS_21,
    POS_00 | POS_10 | POS_21,
    POS_00 | POS_01 | POS_10 | POS_21,
    POS_00 | POS_10 | POS_21 | POS_31,
    POS_00 | POS_01 | POS_10 | POS_21 | POS_31,
)

PIECE_TYPES = len(PIECE_BITS)

QUARTER_TURNS = 4

# The full box: 2 + 6 + 4 + 2 + 2 = 16 pieces covering 56 fine cells.
DEFAULT_PIECE_COUNTS: Tuple[int, ...] = (2, 6, 4, 2, 2)
