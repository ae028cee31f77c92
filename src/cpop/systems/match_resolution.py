import logging

from esper import World

from cpop.events.bus import (EventBus, EVENT_TICK, EVENT_MATCH_CLEARED, EVENT_SPECIAL_CREATED,
                             EVENT_SPECIAL_ACTIVATED, EVENT_GRAVITY_APPLIED, EVENT_REFILL_COMPLETED,
                             EVENT_SCORE_CHANGED, EVENT_CASCADE_STEP, EVENT_CASCADE_COMPLETE,
                             EVENT_BOARD_RESHUFFLED, EVENT_BOARD_CHANGED)
from cpop.systems.board_ops import has_valid_move, reshuffle
from cpop.systems.resolution import SettleStep
from cpop.systems.turn_state_utils import get_board_state, get_or_create_turn_state, get_score_board

logger = logging.getLogger(__name__)


class MatchResolutionSystem:
    """Plays the in-flight settle steps, one per tick.

    The engine never waits on anything; pacing comes entirely from how often the
    caller emits ``EVENT_TICK``.
    """

    def __init__(self, world: World, event_bus: EventBus, *, reshuffle_on_stalemate: bool = True):
        self.world = world
        self.event_bus = event_bus
        self.reshuffle_on_stalemate = reshuffle_on_stalemate
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    def on_tick(self, sender, **kwargs):
        state = get_or_create_turn_state(self.world)
        if not state.cascade_active or state.steps is None:
            return
        step = next(state.steps, None)
        if step is None:
            self._complete()
            return
        state.cascade_depth = step.depth
        self._apply_step(step)

    def _apply_step(self, step: SettleStep):
        get_board_state(self.world).board = step.board
        score = get_score_board(self.world)
        score.total += step.score_delta
        score.last_delta = step.score_delta
        score.multiplier = step.combo_multiplier

        positions = sorted(step.cleared_positions)
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=step.depth, positions=positions)
        for activation in step.activated:
            self.event_bus.emit(
                EVENT_SPECIAL_ACTIVATED,
                position=activation.position,
                kind=activation.kind.value,
                affected=sorted(activation.affected),
                wave=step.wave,
            )
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=positions, depth=step.depth)
        if step.special_created is not None:
            self.event_bus.emit(
                EVENT_SPECIAL_CREATED,
                position=step.special_created.position,
                kind=step.special_created.kind.value,
            )
        fall_payload = [
            {'from': move.source, 'to': move.target, 'tile_id': move.tile_id}
            for move in step.gravity_moves
        ]
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=fall_payload)
        if step.spawned:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=list(step.spawned))
        self.event_bus.emit(EVENT_SCORE_CHANGED, delta=step.score_delta, total=score.total,
                            multiplier=step.combo_multiplier)

    def _complete(self):
        state = get_or_create_turn_state(self.world)
        depth = state.cascade_depth
        state.cascade_active = False
        state.cascade_depth = 0
        state.pending_swap = None
        state.steps = None
        score = get_score_board(self.world)
        score.multiplier = 1
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth, score=score.total)
        if self.reshuffle_on_stalemate:
            self._reshuffle_if_stuck()

    def _reshuffle_if_stuck(self):
        board_state = get_board_state(self.world)
        if has_valid_move(board_state.board):
            return
        logger.info("No valid swaps left, reshuffling board")
        board_state.board = reshuffle(board_state.board)
        self.event_bus.emit(EVENT_BOARD_RESHUFFLED, reason="stalemate")
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason="stalemate_reset")
