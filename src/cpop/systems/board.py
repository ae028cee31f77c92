import logging

from esper import World

from cpop.events.bus import (EventBus, EVENT_TILE_SWAP_REQUEST, EVENT_TILE_SWAP_REJECTED,
                             EVENT_TILE_SWAP_INVALID, EVENT_TILE_SWAP_VALID)
from cpop.components.board import Board
from cpop.systems.resolution import Rejected, Reverted, request_swap
from cpop.systems.turn_state_utils import get_board_state, get_or_create_turn_state, get_score_board

logger = logging.getLogger(__name__)

REASON_BUSY = "busy"


class BoardSystem:
    """Accepts swap requests for the session board and hands settle steps to the resolver.

    Only one resolution loop may be in flight: requests arriving while
    ``TurnState.cascade_active`` is set are rejected with reason ``busy``.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    @property
    def board(self) -> Board:
        return get_board_state(self.world).board

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if src is None or dst is None:
            return
        state = get_or_create_turn_state(self.world)
        if state.cascade_active:
            logger.debug("Swap %s -> %s ignored while cascade active", src, dst)
            self.event_bus.emit(EVENT_TILE_SWAP_REJECTED, src=src, dst=dst, reason=REASON_BUSY,
                                message="A resolution is already in progress")
            return
        outcome = request_swap(self.board, src, dst)
        if isinstance(outcome, Rejected):
            self.event_bus.emit(EVENT_TILE_SWAP_REJECTED, src=src, dst=dst, reason=outcome.reason.value,
                                message=outcome.message)
            return
        if isinstance(outcome, Reverted):
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, attempted=outcome.attempted)
            return
        state.cascade_active = True
        state.cascade_depth = 0
        state.pending_swap = outcome.swap
        state.steps = iter(outcome.steps)
        get_score_board(self.world).moves += 1
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
