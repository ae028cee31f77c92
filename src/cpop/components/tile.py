from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from cpop.components.board_position import Position


class SpecialKind(Enum):
    LINE_CLEAR = "line-clear"
    AREA_BOMB = "area-bomb"
    COLOR_BOMB = "color-bomb"
    SCREEN_CLEAR = "screen-clear"


# Specials that give up their base kind when promoted and never take part in matches.
COLORLESS_SPECIALS = frozenset({SpecialKind.COLOR_BOMB, SpecialKind.SCREEN_CLEAR})


class Axis(Enum):
    ROW = "row"
    COL = "col"


@dataclass(frozen=True, slots=True)
class Tile:
    """A single tile sitting in one board cell.

    ``id`` follows the tile through swaps and falls so presentation can correlate
    animations; rule logic never looks at it. ``kind`` is the base symbol, or None
    for colourless specials. ``axis`` is only meaningful for line-clear tiles.
    """
    id: int
    kind: Optional[str]
    row: int
    col: int
    special: Optional[SpecialKind] = None
    axis: Optional[Axis] = None

    @property
    def position(self) -> Position:
        return Position(self.row, self.col)

    @property
    def is_special(self) -> bool:
        return self.special is not None

    def moved_to(self, row: int, col: int) -> "Tile":
        return replace(self, row=row, col=col)

    def promoted(self, special: SpecialKind, axis: Optional[Axis] = None) -> "Tile":
        kind = None if special in COLORLESS_SPECIALS else self.kind
        return replace(self, kind=kind, special=special, axis=axis)
