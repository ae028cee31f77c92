"""C-Pop tile-matching engine.

Deterministic match-three rules: swap validation, run detection, special
tiles, gravity with refill and cascading combos. Board values are immutable;
every operation returns a new Board.
"""

from cpop.components.board import Board
from cpop.components.board_config import BoardConfig, GridShape, MatchRule, Ruleset
from cpop.components.board_position import Position
from cpop.components.combo_state import ComboState
from cpop.components.tile import Axis, SpecialKind, Tile
from cpop.errors import CpopError, InvalidPosition, MoveError, NotAdjacent, RejectReason
from cpop.systems.board_ops import (
    create_board,
    find_valid_swaps,
    has_valid_move,
    is_adjacent,
    reshuffle,
    swap_tiles,
)
from cpop.systems.match import Match, clear_set, find_matches
from cpop.systems.resolution import (
    MoveOutcome,
    Rejected,
    Reverted,
    Settled,
    SettleSequence,
    SettleStep,
    SpecialCreated,
    init_board,
    request_swap,
)

__all__ = [
    "Axis",
    "Board",
    "BoardConfig",
    "ComboState",
    "CpopError",
    "GridShape",
    "InvalidPosition",
    "Match",
    "MatchRule",
    "MoveError",
    "MoveOutcome",
    "NotAdjacent",
    "Position",
    "RejectReason",
    "Rejected",
    "Reverted",
    "Ruleset",
    "SettleSequence",
    "SettleStep",
    "Settled",
    "SpecialCreated",
    "SpecialKind",
    "Tile",
    "clear_set",
    "create_board",
    "find_matches",
    "find_valid_swaps",
    "has_valid_move",
    "init_board",
    "is_adjacent",
    "request_swap",
    "reshuffle",
    "swap_tiles",
]
