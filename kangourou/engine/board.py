"""Board model: the target shape as an immutable fine-cell bitset."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.constants import FINE_PER_TILE, PIECE_TYPES
from ..core.exceptions import InvalidInput
from ..core.models import Tile
from ..utils.logger import get_logger
from .pieces import PIECES, rotations_for


LOGGER = get_logger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _coerce_tiles(tiles) -> List[Tile]:
    if tiles is None or isinstance(tiles, (str, bytes)):
        raise InvalidInput(f"Tile coordinates must be a sequence of (x, y) pairs, got {tiles!r}")
    try:
        items = list(tiles)
    except TypeError as exc:
        raise InvalidInput(f"Tile coordinates are not iterable: {tiles!r}") from exc

    coords: List[Tile] = []
    for item in items:
        try:
            x, y = item
        except (TypeError, ValueError) as exc:
            raise InvalidInput(f"Tile coordinate is not an (x, y) pair: {item!r}") from exc
        if not (_is_int(x) and _is_int(y)):
            raise InvalidInput(f"Tile coordinate must hold integers: {item!r}")
        coords.append((x, y))
    return coords


class KnotBoard:
    """The shape to be tiled, on a grid of ``width`` x ``height`` coarse tiles.

    Each coarse tile owns a 2x2 block of fine cells. Fine cell ``(col, row)``
    maps to bit ``row * 2 * width + col`` of :attr:`mask`.
    """

    def __init__(self, width: int, height: int, tiles: Iterable[Tile]) -> None:
        if not (_is_int(width) and _is_int(height)):
            raise InvalidInput(f"Board dimensions must be integers, got {width!r} x {height!r}")
        if width < 0 or height < 0:
            raise InvalidInput(f"Board dimensions must be non-negative, got {width} x {height}")
        coords = _coerce_tiles(tiles)

        self.width = width
        self.height = height
        self.stride = FINE_PER_TILE * width
        self.tiles: Tuple[Tile, ...] = ()
        self._mask = 0
        self._build_mask(coords)
        self.fine_cell_count = bin(self._mask).count("1")
        self.rotations: Tuple[Tuple[int, ...], ...] = tuple(
            tuple(rotations_for(piece, width)) for piece in range(PIECE_TYPES)
        )
        LOGGER.debug(
            "Board %sx%s with %s tiles (%s fine cells)",
            width,
            height,
            len(self.tiles),
            self.fine_cell_count,
        )

    @classmethod
    def from_text(cls, text: str) -> "KnotBoard":
        """Build a board from rows of characters, e.g. ``"XX\\nXX"``.

        Any non-blank character marks a filled tile. Short rows are treated
        as padded with blanks.
        """

        if not isinstance(text, str):
            raise InvalidInput(f"Board text must be a string, got {type(text).__name__}")
        lines = text.splitlines()
        width = max((len(line) for line in lines), default=0)
        tiles = [
            (x, y)
            for y, line in enumerate(lines)
            for x, char in enumerate(line)
            if not char.isspace()
        ]
        return cls(width, len(lines), tiles)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def _build_mask(self, coords: Sequence[Tile]) -> None:
        accepted: List[Tile] = []
        for x, y in coords:
            if not self.in_bounds(x, y):
                LOGGER.warning("%s, %s is outside the %sx%s board", x, y, self.width, self.height)
                continue
            tile_mask = self.tile_mask(x, y)
            if self._mask & tile_mask:
                LOGGER.warning("%s, %s is already set", x, y)
                continue
            self._mask |= tile_mask
            accepted.append((x, y))
        self.tiles = tuple(accepted)

    # ------------------------------------------------------------------
    # Geometry helpers
    # ------------------------------------------------------------------
    @property
    def mask(self) -> int:
        return self._mask

    @property
    def tile_count(self) -> int:
        return len(self.tiles)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_offset(self, x: int, y: int) -> int:
        """Bit index of the top-left fine cell of tile ``(x, y)``."""

        return FINE_PER_TILE * (y * self.stride + x)

    def tile_mask(self, x: int, y: int) -> int:
        p = self.tile_offset(x, y)
        return (0b11 << p) | (0b11 << (p + self.stride))

    def contains(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and bool(self._mask & (1 << self.tile_offset(x, y)))

    def placement_mask(self, piece: int, rotation: int, x: int, y: int) -> Optional[int]:
        """Footprint of a piece anchored at tile ``(x, y)``.

        Returns ``None`` when the rotation is wider than the columns left of
        the right board edge, since its rows would wrap into the next row.
        The caller still has to test the mask against the membership mask.
        """

        if FINE_PER_TILE * x + PIECES[piece].spans[rotation] > self.stride:
            return None
        return self.rotations[piece][rotation] << self.tile_offset(x, y)

    def fine_cells(self, mask: int) -> List[Tuple[int, int]]:
        """Decode a mask into ``(col, row)`` fine-cell coordinates."""

        cells: List[Tuple[int, int]] = []
        if not self.stride:
            return cells
        index = 0
        while mask:
            if mask & 1:
                cells.append((index % self.stride, index // self.stride))
            mask >>= 1
            index += 1
        return cells

    def __repr__(self) -> str:
        return f"KnotBoard(width={self.width}, height={self.height}, tiles={len(self.tiles)})"


def load_board(source, height: Optional[int] = None, tiles: Optional[Iterable[Tile]] = None) -> KnotBoard:
    """Build a board from either a text grid or ``(width, height, tiles)``."""

    if isinstance(source, str):
        return KnotBoard.from_text(source)
    if _is_int(source):
        if not _is_int(height) or tiles is None:
            raise InvalidInput("A numeric width requires an integer height and tile coordinates")
        return KnotBoard(source, height, tiles)
    raise InvalidInput(f"Cannot build a board from {type(source).__name__}")
