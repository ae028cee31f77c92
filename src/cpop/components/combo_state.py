from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from cpop.components.board_config import Ruleset


@dataclass(frozen=True, slots=True)
class ComboState:
    """Multiplier and running score for one resolution loop.

    The multiplier starts at 1 and the first clear already bumps it to 2.
    """
    multiplier: int = 1
    score: int = 0

    def after_clear(self, cleared: int, ruleset: Ruleset) -> Tuple["ComboState", int]:
        multiplier = min(self.multiplier + 1, ruleset.combo_ceiling)
        delta = cleared * ruleset.base_points * multiplier
        return ComboState(multiplier=multiplier, score=self.score + delta), delta
