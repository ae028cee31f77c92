"""Swap -> match -> clear -> drop -> re-check loop and the public move API."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, FrozenSet, Iterator, Mapping, Optional, Tuple, Union

from cpop.components.board import Board, cells_from_grid, mutable_grid
from cpop.components.board_config import BoardConfig
from cpop.components.board_position import Position, PositionLike
from cpop.components.combo_state import ComboState
from cpop.components.tile import SpecialKind, Tile
from cpop.errors import MoveError, RejectReason
from cpop.systems.activation import Activation, expand_clear_set, wave_order
from cpop.systems.board_ops import create_board, swap_tiles, validate_move
from cpop.systems.gravity import GravityMove, settle_columns
from cpop.systems.match import clear_set, find_matches
from cpop.systems.specials import SpecialPlan, choose_special

logger = logging.getLogger(__name__)

Swap = Tuple[Position, Position]


class ResolutionPhase(Enum):
    IDLE = auto()
    SWAP_APPLIED = auto()
    EVALUATING = auto()
    CLEARING = auto()
    SETTLING = auto()


@dataclass(frozen=True, slots=True)
class SpecialCreated:
    position: Position
    kind: SpecialKind


@dataclass(frozen=True, slots=True)
class SettleStep:
    """One atomic clear + drop + refill transition.

    ``board`` is always complete and match-checked from scratch on the next step,
    so a caller may stop consuming steps after any of them.
    """
    board: Board
    cleared_positions: FrozenSet[Position]
    special_created: Optional[SpecialCreated]
    score_delta: int
    combo_multiplier: int
    depth: int = 1
    activated: Tuple[Activation, ...] = ()
    gravity_moves: Tuple[GravityMove, ...] = ()
    spawned: Tuple[Position, ...] = ()
    wave: Tuple[Tuple[Position, ...], ...] = ()


@dataclass(frozen=True, slots=True)
class ClearPlan:
    cleared: FrozenSet[Position]
    activations: Tuple[Activation, ...]
    special: Optional[SpecialPlan]


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: RejectReason
    board: Board
    message: str = ""


@dataclass(frozen=True, slots=True)
class Reverted:
    """The swap formed nothing; ``board`` is the untouched pre-swap board."""
    board: Board
    swap: Swap
    attempted: Optional[Board] = None


@dataclass(frozen=True, slots=True)
class Settled:
    steps: "SettleSequence"
    swap: Swap


MoveOutcome = Union[Rejected, Reverted, Settled]


class ResolutionLoop:
    """Explicit state machine for a single swap's resolution.

    IDLE -> SWAP_APPLIED -> EVALUATING -> (CLEARING -> SETTLING -> EVALUATING)* -> IDLE
    """

    def __init__(self, board: Board, origin: Position, destination: Position):
        self.board = board
        self.origin = origin
        self.destination = destination
        self.ruleset = board.config.ruleset
        self.phase = ResolutionPhase.SWAP_APPLIED
        self.combo = ComboState()
        self.depth = 0
        self._plan: Optional[ClearPlan] = None

    def evaluate(self) -> Optional[ClearPlan]:
        if self.phase not in (ResolutionPhase.SWAP_APPLIED, ResolutionPhase.EVALUATING):
            raise RuntimeError(f"Cannot evaluate while {self.phase.name}")
        first = self.phase is ResolutionPhase.SWAP_APPLIED
        self.phase = ResolutionPhase.EVALUATING
        plan = self._plan_clear(first)
        self._plan = plan
        self.phase = ResolutionPhase.CLEARING if plan is not None else ResolutionPhase.IDLE
        return plan

    def _plan_clear(self, first: bool) -> Optional[ClearPlan]:
        board = self.board
        matches = find_matches(board)
        partners: Dict[Position, Optional[Tile]] = {}
        if first:
            src_tile = board.tile_at(self.origin)
            dst_tile = board.tile_at(self.destination)
            if dst_tile is not None and dst_tile.is_special:
                partners[self.destination] = src_tile
            if src_tile is not None and src_tile.is_special:
                partners[self.origin] = dst_tile
        if not matches and not partners:
            return None
        special = None
        if first and not partners:
            special = choose_special(matches, self.origin, self.destination, self.ruleset)
            if special is not None and board.tile_at(special.position).is_special:
                # Never overwrite a special that is about to go off.
                special = None
        protected = (special.position,) if special is not None else ()
        cleared, activations = expand_clear_set(
            board,
            clear_set(matches),
            swap_partners=partners,
            protected=protected,
        )
        if not cleared and special is None:
            return None
        return ClearPlan(cleared=cleared, activations=tuple(activations), special=special)

    def clear(self) -> SettleStep:
        if self.phase is not ResolutionPhase.CLEARING or self._plan is None:
            raise RuntimeError(f"Cannot clear while {self.phase.name}")
        plan = self._plan
        working = self.board
        created = None
        if plan.special is not None:
            working = _promote(working, plan.special)
            created = SpecialCreated(plan.special.position, plan.special.kind)
        self.combo, delta = self.combo.after_clear(len(plan.cleared), self.ruleset)
        self.depth += 1

        self.phase = ResolutionPhase.SETTLING
        settled, moves, spawned = settle_columns(working, plan.cleared)
        wave = ()
        if any(activation.kind is SpecialKind.SCREEN_CLEAR for activation in plan.activations):
            wave = wave_order(plan.cleared)
        logger.debug(
            "Cascade %d cleared %d cell(s) x%d -> +%d%s",
            self.depth,
            len(plan.cleared),
            self.combo.multiplier,
            delta,
            f", created {created.kind.value} at {tuple(created.position)}" if created else "",
        )
        step = SettleStep(
            board=settled,
            cleared_positions=plan.cleared,
            special_created=created,
            score_delta=delta,
            combo_multiplier=self.combo.multiplier,
            depth=self.depth,
            activated=plan.activations,
            gravity_moves=tuple(moves),
            spawned=tuple(spawned),
            wave=wave,
        )
        self.board = settled
        self._plan = None
        self.phase = ResolutionPhase.EVALUATING
        return step

    def run(self) -> Iterator[SettleStep]:
        while True:
            if self.phase is not ResolutionPhase.CLEARING and self.evaluate() is None:
                return
            yield self.clear()


class SettleSequence:
    """Lazy, restartable sequence of settle steps.

    Every iteration replays from the post-swap board; the generator state lives
    on the board value so replays produce identical steps.
    """

    def __init__(self, board: Board, origin: Position, destination: Position):
        self.start = board
        self.origin = origin
        self.destination = destination

    def __iter__(self) -> Iterator[SettleStep]:
        return ResolutionLoop(self.start, self.origin, self.destination).run()

    def final_board(self) -> Board:
        board = self.start
        for step in self:
            board = step.board
        return board


def _promote(board: Board, plan: SpecialPlan) -> Board:
    layout = mutable_grid(board)
    row, col = plan.position
    layout[row][col] = layout[row][col].promoted(plan.kind, plan.axis)
    return board.with_cells(cells_from_grid(layout))


def init_board(config: Union[BoardConfig, Mapping]) -> Board:
    """Build a settled starting board from a config or a plain ``{rows, cols, palette, seed}`` mapping."""
    return create_board(config)


def request_swap(board: Board, a: PositionLike, b: PositionLike) -> MoveOutcome:
    """Validate and resolve a swap of ``a`` (origin) into ``b`` (destination)."""
    try:
        origin, destination = validate_move(board, a, b)
    except MoveError as exc:
        logger.debug("Swap %s -> %s rejected: %s", a, b, exc)
        return Rejected(reason=exc.reason, board=board, message=str(exc))
    swapped = swap_tiles(board, origin, destination)
    trial = ResolutionLoop(swapped, origin, destination)
    if trial.evaluate() is None:
        logger.debug("Swap %s -> %s formed nothing, reverting", tuple(origin), tuple(destination))
        return Reverted(board=board, swap=(origin, destination), attempted=swapped)
    return Settled(steps=SettleSequence(swapped, origin, destination), swap=(origin, destination))
