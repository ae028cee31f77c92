from __future__ import annotations

from enum import Enum
from typing import Tuple


class RejectReason(Enum):
    """Why a swap request was refused before touching the board."""

    INVALID_POSITION = "invalid_position"
    NOT_ADJACENT = "not_adjacent"


class CpopError(Exception):
    """Base class for engine errors."""


class MoveError(CpopError, ValueError):
    """A swap request that cannot be applied. The board is never mutated."""

    reason: RejectReason

    def __init__(self, message: str, *positions: Tuple[int, int]) -> None:
        super().__init__(message)
        self.positions = tuple(positions)


class InvalidPosition(MoveError):
    reason = RejectReason.INVALID_POSITION


class NotAdjacent(MoveError):
    reason = RejectReason.NOT_ADJACENT
