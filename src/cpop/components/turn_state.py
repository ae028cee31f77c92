from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

from cpop.components.board_position import Position


@dataclass(slots=True)
class TurnState:
    """Busy flag and in-flight settle steps for the single active resolution loop."""

    cascade_active: bool = False
    cascade_depth: int = 0
    pending_swap: Optional[Tuple[Position, Position]] = None
    steps: Optional[Iterator] = field(default=None, repr=False)
