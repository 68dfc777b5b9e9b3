"""Data models shared by the piece library, board and search engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

Tile = Tuple[int, int]


@dataclass(frozen=True)
class Move:
    """One placement: a piece anchored at a coarse tile in a given rotation."""

    x: int
    y: int
    piece: int
    rotation: int

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.piece, self.rotation)


Solution = List[Move]


@dataclass(frozen=True)
class PieceShape:
    """A canonical piece with its four local rotations.

    ``rotations`` holds one list of row masks per quarter turn, lowest bit
    being the leftmost fine column. ``spans`` is the occupied width of each
    rotation in fine columns.
    """

    index: int
    bits: int
    rotations: Tuple[Tuple[int, ...], ...]
    spans: Tuple[int, ...]

    @property
    def fine_cell_count(self) -> int:
        return bin(self.bits).count("1")
