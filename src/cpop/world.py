import random
from dataclasses import replace
from typing import Mapping, Optional, Union

from esper import World

from cpop.events.bus import EventBus, EVENT_BOARD_CHANGED
from cpop.components.board_config import BoardConfig
from cpop.components.board_state import BoardState
from cpop.components.score_board import ScoreBoard
from cpop.components.turn_state import TurnState
from cpop.systems.board_ops import create_board


def create_world(
    event_bus: EventBus,
    config: Union[BoardConfig, Mapping, None] = None,
    *,
    rng: Optional[random.Random] = None,
) -> World:
    """Build the session world: one entity carrying the board, score and turn state.

    ``rng`` only matters when the config has no seed; it then picks the seed so a
    caller-owned Random still makes the session reproducible.
    """
    if config is None:
        config = BoardConfig()
    elif not isinstance(config, BoardConfig):
        config = BoardConfig.from_mapping(config)
    if config.seed is None and rng is not None:
        config = replace(config, seed=rng.getrandbits(32))

    world = World()
    board = create_board(config)
    world.create_entity(BoardState(board=board), ScoreBoard(), TurnState())
    event_bus.emit(EVENT_BOARD_CHANGED, reason="init")
    return world
