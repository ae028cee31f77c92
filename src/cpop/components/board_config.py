from __future__ import annotations

import random
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Tuple

from cpop.components.tile import SpecialKind
from cpop.constants import (
    BASE_POINTS,
    COMBO_CEILING,
    DEFAULT_PALETTE,
    GRID_COLS,
    GRID_ROWS,
    MAX_LAYOUT_ATTEMPTS,
    MIN_MATCH,
)


class GridShape(Enum):
    RECT = "rect"
    HEX = "hex"


class MatchRule(Enum):
    LINES = "lines"
    FLOOD = "flood"


@dataclass(frozen=True, slots=True)
class Ruleset:
    """Scoring and special-tile knobs shared by every resolution loop on a board."""

    base_points: int = BASE_POINTS
    combo_ceiling: int = COMBO_CEILING
    screen_clear_enabled: bool = True
    four_match_special: SpecialKind = SpecialKind.AREA_BOMB

    def __post_init__(self) -> None:
        if self.base_points < 0:
            raise ValueError("base_points must not be negative")
        if self.combo_ceiling < 2:
            raise ValueError("combo_ceiling must allow at least one clear (>= 2)")
        object.__setattr__(self, "four_match_special", SpecialKind(self.four_match_special))
        if self.four_match_special not in (SpecialKind.AREA_BOMB, SpecialKind.LINE_CLEAR):
            raise ValueError("four_match_special must be area-bomb or line-clear")


@dataclass(frozen=True, slots=True)
class BoardConfig:
    """Everything needed to build a board.

    ``seed`` of None means the fill is not reproducible. Hex boards lay axial
    coordinates out as a parallelogram (r in rows, q in cols) and always use
    flood-fill matching.
    """

    rows: int = GRID_ROWS
    cols: int = GRID_COLS
    palette: Tuple[str, ...] = DEFAULT_PALETTE
    seed: Optional[int] = None
    shape: GridShape = GridShape.RECT
    match_rule: Optional[MatchRule] = None
    ruleset: Ruleset = field(default_factory=Ruleset)
    ensure_playable: bool = True
    max_attempts: int = MAX_LAYOUT_ATTEMPTS
    # Builds the Random behind every fill and refill; swap it to script kinds.
    rng_factory: Callable[[], random.Random] = field(default=random.Random, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Board must have at least one cell, got {self.rows}x{self.cols}")
        palette = tuple(self.palette)
        if len(palette) < 2:
            raise ValueError("palette needs at least two kinds")
        if len(set(palette)) != len(palette):
            raise ValueError(f"palette contains duplicate kinds: {palette}")
        object.__setattr__(self, "palette", palette)
        shape = GridShape(self.shape)
        object.__setattr__(self, "shape", shape)
        rule = self.match_rule
        if rule is None:
            rule = MatchRule.FLOOD if shape is GridShape.HEX else MatchRule.LINES
        rule = MatchRule(rule)
        if shape is GridShape.HEX and rule is not MatchRule.FLOOD:
            raise ValueError("hex boards only support flood-fill matching")
        object.__setattr__(self, "match_rule", rule)
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be positive")

    @property
    def min_match(self) -> int:
        return MIN_MATCH

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BoardConfig":
        """Build a config from the plain ``{rows, cols, palette, seed}`` object."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown board config keys: {', '.join(unknown)}")
        values = dict(data)
        palette = values.get("palette")
        if isinstance(palette, int):
            # A bare palette size picks the first N default kinds.
            if not 2 <= palette <= len(DEFAULT_PALETTE):
                raise ValueError(f"palette size must be between 2 and {len(DEFAULT_PALETTE)}")
            values["palette"] = DEFAULT_PALETTE[:palette]
        ruleset = values.get("ruleset")
        if isinstance(ruleset, Mapping):
            values["ruleset"] = Ruleset(**ruleset)
        return cls(**values)
