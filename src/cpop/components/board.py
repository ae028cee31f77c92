from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Tuple

from cpop.components.board_config import BoardConfig, GridShape
from cpop.components.board_position import Position, PositionLike, as_position
from cpop.components.tile import Tile
from cpop.utils.grid import neighbor_offsets, offset_cells

Cells = Tuple[Tuple[Optional[Tile], ...], ...]

SPECIAL_GLYPHS = {
    "line-clear": "=",
    "area-bomb": "*",
    "color-bomb": "@",
    "screen-clear": "#",
}


@dataclass(frozen=True, slots=True)
class Board:
    """Immutable snapshot of the grid.

    ``rng_state`` is the generator state to resume from for the next refill and
    ``next_id`` the next tile id to hand out, so a board value alone is enough to
    replay everything that follows from it.
    """
    config: BoardConfig
    cells: Cells
    rng_state: Any = field(default=None, repr=False)
    next_id: int = 0

    @property
    def rows(self) -> int:
        return self.config.rows

    @property
    def cols(self) -> int:
        return self.config.cols

    @property
    def shape(self) -> GridShape:
        return self.config.shape

    def in_bounds(self, pos: PositionLike) -> bool:
        row, col = as_position(pos)
        return 0 <= row < self.rows and 0 <= col < self.cols

    def tile_at(self, pos: PositionLike) -> Optional[Tile]:
        row, col = as_position(pos)
        return self.cells[row][col]

    def kind_at(self, pos: PositionLike) -> Optional[str]:
        tile = self.tile_at(pos)
        return tile.kind if tile is not None else None

    def positions(self) -> Iterator[Position]:
        for row in range(self.rows):
            for col in range(self.cols):
                yield Position(row, col)

    def tiles(self) -> Iterator[Tile]:
        for row in self.cells:
            for tile in row:
                if tile is not None:
                    yield tile

    def neighbors(self, pos: PositionLike) -> List[Position]:
        return list(offset_cells(pos, neighbor_offsets(self.shape), self.rows, self.cols))

    def is_full(self) -> bool:
        return all(tile is not None for row in self.cells for tile in row)

    def kind_map(self) -> Dict[Position, str]:
        """Positions of every tile that carries a base kind."""
        mapping: Dict[Position, str] = {}
        for tile in self.tiles():
            if tile.kind is not None:
                mapping[tile.position] = tile.kind
        return mapping

    def kinds_layout(self) -> Tuple[Tuple[Optional[str], ...], ...]:
        """Per-cell label grid: the base kind, or the special kind's value for colourless specials."""
        return tuple(
            tuple(_label(tile) for tile in row)
            for row in self.cells
        )

    def with_cells(self, cells: Cells, **changes: Any) -> "Board":
        return replace(self, cells=cells, **changes)

    def pretty(self) -> str:
        """Text grid for debugging: first letter of the kind, glyph suffix for specials."""
        lines: List[str] = []
        for row in self.cells:
            parts: List[str] = []
            for tile in row:
                if tile is None:
                    parts.append(" .")
                    continue
                letter = tile.kind[0] if tile.kind else " "
                glyph = SPECIAL_GLYPHS[tile.special.value] if tile.special else ""
                parts.append((letter + glyph).rjust(2))
            lines.append(" ".join(parts))
        return "\n".join(lines)


def _label(tile: Optional[Tile]) -> Optional[str]:
    if tile is None:
        return None
    if tile.kind is None and tile.special is not None:
        return tile.special.value
    return tile.kind


def cells_from_grid(grid: List[List[Optional[Tile]]]) -> Cells:
    return tuple(tuple(row) for row in grid)


def mutable_grid(board: Board) -> List[List[Optional[Tile]]]:
    return [list(row) for row in board.cells]
