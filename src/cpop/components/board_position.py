from __future__ import annotations

import operator
from typing import NamedTuple, Tuple, Union

from cpop.errors import InvalidPosition


class Position(NamedTuple):
    """Cell coordinate used as a value-equality key. Compares equal to plain ``(row, col)`` tuples."""
    row: int
    col: int


PositionLike = Union[Position, Tuple[int, int]]


def as_position(value: PositionLike) -> Position:
    """Normalise ``value`` to a ``Position``.

    Only integral coordinates are accepted; floats, bools and anything that is
    not a pair raise ``InvalidPosition`` instead of being coerced.
    """
    if isinstance(value, Position):
        return value
    try:
        row, col = value
    except (TypeError, ValueError):
        raise InvalidPosition(f"Position must be a (row, col) pair, got {value!r}", value) from None
    if isinstance(row, bool) or isinstance(col, bool):
        raise InvalidPosition(f"Position coordinates must be integers, got {value!r}", value)
    try:
        return Position(operator.index(row), operator.index(col))
    except TypeError:
        raise InvalidPosition(f"Position coordinates must be integers, got {value!r}", value) from None
