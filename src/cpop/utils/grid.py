"""Neighbour geometry for rectangular and axial-hex boards."""
from __future__ import annotations

from typing import Iterator, Tuple

from cpop.components.board_config import GridShape
from cpop.components.board_position import Position, PositionLike, as_position

Offset = Tuple[int, int]

# (d_row, d_col) steps; hex offsets are axial (d_r, d_q).
RECT_OFFSETS: Tuple[Offset, ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))
HEX_OFFSETS: Tuple[Offset, ...] = ((-1, 0), (-1, 1), (0, 1), (1, 0), (1, -1), (0, -1))
# Eight surrounding cells of a rectangular grid (Chebyshev distance 1).
RECT_RING: Tuple[Offset, ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)


def neighbor_offsets(shape: GridShape) -> Tuple[Offset, ...]:
    return HEX_OFFSETS if shape is GridShape.HEX else RECT_OFFSETS


def ring_offsets(shape: GridShape) -> Tuple[Offset, ...]:
    """Offsets of every cell touching the centre (hex: 6 cells, rect: 8 cells)."""
    return HEX_OFFSETS if shape is GridShape.HEX else RECT_RING


def is_adjacent(a: PositionLike, b: PositionLike, shape: GridShape = GridShape.RECT) -> bool:
    ar, ac = as_position(a)
    br, bc = as_position(b)
    return (br - ar, bc - ac) in neighbor_offsets(shape)


def offset_cells(pos: PositionLike, offsets: Tuple[Offset, ...], rows: int, cols: int) -> Iterator[Position]:
    row, col = as_position(pos)
    for d_row, d_col in offsets:
        r, c = row + d_row, col + d_col
        if 0 <= r < rows and 0 <= c < cols:
            yield Position(r, c)
