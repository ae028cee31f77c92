from __future__ import annotations

import random
from functools import partial
from typing import Optional, Sequence

from cpop.components.board import Board, cells_from_grid
from cpop.components.board_config import BoardConfig, GridShape, MatchRule, Ruleset
from cpop.components.tile import Axis, SpecialKind, Tile
from cpop.constants import DEFAULT_PALETTE

KIND_LETTERS = {kind[0]: kind for kind in DEFAULT_PALETTE}

# Suffixes on a kind letter; colourless specials stand alone.
SUFFIX_SPECIALS = {
    "*": (SpecialKind.AREA_BOMB, None),
    "=": (SpecialKind.LINE_CLEAR, Axis.ROW),
    "|": (SpecialKind.LINE_CLEAR, Axis.COL),
}
BARE_SPECIALS = {
    "@": SpecialKind.COLOR_BOMB,
    "#": SpecialKind.SCREEN_CLEAR,
}

REFILL_CYCLE = ("purple", "yellow")


class ScriptedRandom(random.Random):
    """Random whose ``choice`` walks a fixed cycle of kinds.

    The cycle position is the whole state, so boards that store it replay the
    same refills.
    """

    def __init__(self, kinds: Sequence[str] = (), x=None):
        self.kinds = tuple(kinds)
        self.index = 0
        super().__init__(x)

    def seed(self, a=None, version=2):
        super().seed(a, version)
        self.index = 0

    def choice(self, seq):
        if not self.kinds:
            return super().choice(seq)
        for _ in range(len(self.kinds)):
            kind = self.kinds[self.index % len(self.kinds)]
            self.index += 1
            if kind in seq:
                return kind
        return seq[0]

    def getstate(self):
        return ("scripted", self.index)

    def setstate(self, state):
        _, self.index = state


def _parse_token(token: str, tile_id: int, row: int, col: int) -> Optional[Tile]:
    if token == ".":
        return None
    if token in BARE_SPECIALS:
        return Tile(id=tile_id, kind=None, row=row, col=col, special=BARE_SPECIALS[token])
    kind = KIND_LETTERS[token[0]]
    if len(token) == 1:
        return Tile(id=tile_id, kind=kind, row=row, col=col)
    special, axis = SUFFIX_SPECIALS[token[1:]]
    return Tile(id=tile_id, kind=kind, row=row, col=col, special=special, axis=axis)


def board_from_rows(
    rows: Sequence[str],
    *,
    refill: Sequence[str] = REFILL_CYCLE,
    palette: Sequence[str] = DEFAULT_PALETTE,
    shape: GridShape = GridShape.RECT,
    match_rule: Optional[MatchRule] = None,
    ruleset: Optional[Ruleset] = None,
) -> Board:
    """Build a board from whitespace separated tokens, one string per row.

    ``r g b y p`` are base kinds, a ``*`` suffix marks an area bomb, ``=``/``|``
    a row/column line clear, ``@`` a colour bomb, ``#`` a screen clear and ``.``
    an empty cell. Tile ids run row-major from 0 and refills cycle ``refill``.
    """
    grid = []
    tile_id = 0
    for row, line in enumerate(rows):
        cells = []
        for col, token in enumerate(line.split()):
            tile = _parse_token(token, tile_id, row, col)
            if tile is not None:
                tile_id += 1
            cells.append(tile)
        grid.append(cells)
    config = BoardConfig(
        rows=len(grid),
        cols=len(grid[0]),
        palette=tuple(palette),
        shape=shape,
        match_rule=match_rule,
        ruleset=ruleset or Ruleset(),
        ensure_playable=False,
        rng_factory=partial(ScriptedRandom, kinds=tuple(refill)),
    )
    rng_state = config.rng_factory().getstate()
    return Board(config, cells_from_grid(grid), rng_state=rng_state, next_id=tile_id)


def stripe_rows(rows: int, cols: int, letters: str = "rgb") -> list[str]:
    """Diagonal stripes of three kinds: no matches and no swap that makes one."""
    return [" ".join(letters[(row + col) % len(letters)] for col in range(cols)) for row in range(rows)]


def layout_of(board: Board) -> list[str]:
    """Inverse of ``board_from_rows`` for base kinds, handy in assertions."""
    lines = []
    for row in board.cells:
        tokens = []
        for tile in row:
            if tile is None:
                tokens.append(".")
            elif tile.special in BARE_SPECIALS.values():
                tokens.append({v: k for k, v in BARE_SPECIALS.items()}[tile.special])
            else:
                tokens.append(tile.kind[0])
        lines.append(" ".join(tokens))
    return lines


# Swapping (3,2) and (4,2) clears the bottom row; the drop lines up three greens.
TWO_STEP = [
    "b g r b g",
    "r b g r b",
    "g r b g b",
    "b g r b r",
    "r r g g r",
]
