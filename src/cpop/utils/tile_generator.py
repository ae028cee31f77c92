from __future__ import annotations

import random
from typing import Any, Iterable, Optional, Sequence

from cpop.components.board_config import BoardConfig
from cpop.components.tile import Tile


class TileGenerator:
    """Seedable source of base-kind tiles.

    Wraps its own ``random.Random`` (built by ``BoardConfig.rng_factory``) rather
    than the module-level one so two boards never share a stream. ``state()``
    snapshots the stream for storage on a Board and ``resume`` picks it up again.
    """

    def __init__(self, palette: Sequence[str], rng: Optional[random.Random] = None, *, next_id: int = 0):
        if not palette:
            raise ValueError("TileGenerator needs a non-empty palette")
        self.palette = tuple(palette)
        self.rng = rng or random.Random()
        self.next_id = next_id

    @classmethod
    def seeded(cls, config: BoardConfig) -> "TileGenerator":
        rng = config.rng_factory()
        rng.seed(config.seed)
        return cls(config.palette, rng)

    @classmethod
    def resume(cls, config: BoardConfig, state: Any, *, next_id: int = 0) -> "TileGenerator":
        rng = config.rng_factory()
        if state is not None:
            rng.setstate(state)
        return cls(config.palette, rng, next_id=next_id)

    def state(self) -> Any:
        return self.rng.getstate()

    def choose_kind(self, exclude: Iterable[str] = ()) -> str:
        excluded = set(exclude)
        available = [kind for kind in self.palette if kind not in excluded]
        if not available:
            available = list(self.palette)
        return self.rng.choice(available)

    def new_tile(self, row: int, col: int, *, exclude: Iterable[str] = ()) -> Tile:
        tile = Tile(id=self.next_id, kind=self.choose_kind(exclude), row=row, col=col)
        self.next_id += 1
        return tile
