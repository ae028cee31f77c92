from esper import World

from cpop.components.board_state import BoardState
from cpop.components.score_board import ScoreBoard
from cpop.components.turn_state import TurnState


def get_or_create_turn_state(world: World) -> TurnState:
    """Return the session's TurnState.

    A world missing one gets a fresh TurnState on the board entity, or on a new
    entity when there is no board yet.
    """
    for _, state in world.get_component(TurnState):
        return state
    state = TurnState()
    for entity, _ in world.get_component(BoardState):
        world.add_component(entity, state)
        return state
    world.create_entity(state)
    return state


def get_board_state(world: World) -> BoardState:
    for _, state in world.get_component(BoardState):
        return state
    raise RuntimeError("BoardState not found; was the world built with create_world?")


def get_score_board(world: World) -> ScoreBoard:
    for _, score in world.get_component(ScoreBoard):
        return score
    raise RuntimeError("ScoreBoard not found; was the world built with create_world?")
