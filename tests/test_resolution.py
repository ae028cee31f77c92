import pytest

from cpop.components.board_config import BoardConfig, Ruleset
from cpop.components.combo_state import ComboState
from cpop.errors import RejectReason
from cpop.systems.board_ops import create_board, find_valid_swaps
from cpop.systems.match import find_matches
from cpop.systems.resolution import (
    Rejected,
    ResolutionLoop,
    ResolutionPhase,
    Reverted,
    Settled,
    init_board,
    request_swap,
)
from tests.helpers import TWO_STEP, board_from_rows, layout_of, stripe_rows

# Swapping (0,2) and (0,3) lines up three reds on the top row.
SINGLE_CLEAR = ["r r g r g b r g"] + stripe_rows(8, 8)[1:]


def test_single_clear_scores_sixty():
    board = board_from_rows(SINGLE_CLEAR)
    outcome = request_swap(board, (0, 2), (0, 3))
    assert isinstance(outcome, Settled)
    steps = list(outcome.steps)
    assert len(steps) == 1
    step = steps[0]
    assert step.cleared_positions == {(0, 0), (0, 1), (0, 2)}
    assert step.score_delta == 60
    assert step.combo_multiplier == 2
    assert step.special_created is None
    assert step.board.is_full()
    assert not find_matches(step.board)
    assert layout_of(step.board)[0] == "p y p g g b r g"


def test_cascade_raises_multiplier_each_step():
    board = board_from_rows(TWO_STEP)
    outcome = request_swap(board, (3, 2), (4, 2))
    steps = list(outcome.steps)

    assert [step.depth for step in steps] == [1, 2]
    assert [step.combo_multiplier for step in steps] == [2, 3]
    assert [step.score_delta for step in steps] == [60, 90]
    assert steps[0].cleared_positions == {(4, 0), (4, 1), (4, 2)}
    assert steps[1].cleared_positions == {(4, 1), (4, 2), (4, 3)}
    assert layout_of(steps[-1].board) == [
        "p y p y g",
        "b y p b b",
        "r g r r b",
        "g b g g r",
        "b r b b r",
    ]


def test_every_step_board_is_complete():
    board = board_from_rows(TWO_STEP)
    for step in request_swap(board, (3, 2), (4, 2)).steps:
        assert step.board.is_full()
        ids = [tile.id for tile in step.board.tiles()]
        assert len(ids) == len(set(ids))


def test_gravity_moves_reported_per_step():
    board = board_from_rows(TWO_STEP)
    first = next(iter(request_swap(board, (3, 2), (4, 2)).steps))
    targets = {move.target for move in first.gravity_moves}
    assert targets == {(r, c) for r in range(1, 5) for c in range(3)}
    assert first.spawned == ((0, 0), (0, 1), (0, 2))


def test_settle_sequence_is_restartable():
    board = board_from_rows(TWO_STEP)
    outcome = request_swap(board, (3, 2), (4, 2))
    assert list(outcome.steps) == list(outcome.steps)
    assert outcome.steps.final_board() == list(outcome.steps)[-1].board


def test_consumer_may_stop_after_any_step():
    board = board_from_rows(TWO_STEP)
    outcome = request_swap(board, (3, 2), (4, 2))
    first = next(iter(outcome.steps))
    assert first.board.is_full()
    assert first.board.tile_at((4, 1)).kind == "green"


def test_not_adjacent_is_rejected_and_board_unchanged():
    board = board_from_rows(SINGLE_CLEAR)
    snapshot = board.kinds_layout()
    outcome = request_swap(board, (0, 0), (2, 2))
    assert isinstance(outcome, Rejected)
    assert outcome.reason is RejectReason.NOT_ADJACENT
    assert outcome.board is board
    assert board.kinds_layout() == snapshot


def test_out_of_bounds_is_rejected():
    board = board_from_rows(SINGLE_CLEAR)
    outcome = request_swap(board, (7, 7), (7, 8))
    assert isinstance(outcome, Rejected)
    assert outcome.reason is RejectReason.INVALID_POSITION
    assert outcome.board is board


def test_swap_without_match_reverts_to_identical_board():
    board = board_from_rows(stripe_rows(5, 5))
    outcome = request_swap(board, (0, 0), (0, 1))
    assert isinstance(outcome, Reverted)
    assert outcome.board is board
    assert outcome.board.kinds_layout() == board.kinds_layout()
    assert outcome.attempted.kind_at((0, 0)) == board.kind_at((0, 1))
    assert outcome.swap == ((0, 0), (0, 1))


def test_same_board_and_swap_replay_identically():
    first = create_board(BoardConfig(seed=2024))
    second = create_board(BoardConfig(seed=2024))
    swap = find_valid_swaps(first)[0]
    steps_a = list(request_swap(first, *swap).steps)
    steps_b = list(request_swap(second, *swap).steps)
    assert steps_a == steps_b
    assert steps_a[-1].board.kinds_layout() == steps_b[-1].board.kinds_layout()


def test_final_board_never_has_matches():
    board = create_board(BoardConfig(seed=11))
    for swap in find_valid_swaps(board)[:5]:
        outcome = request_swap(board, *swap)
        final = outcome.steps.final_board()
        assert final.is_full()
        assert not find_matches(final)


def test_multiplier_stops_at_ceiling():
    ruleset = Ruleset(combo_ceiling=3)
    state = ComboState()
    multipliers = []
    for _ in range(4):
        state, delta = state.after_clear(3, ruleset)
        multipliers.append(state.multiplier)
    assert multipliers == [2, 3, 3, 3]
    assert delta == 3 * 10 * 3
    assert state.score == 60 + 90 + 90 + 90


def test_multiplier_resets_for_each_swap():
    board = board_from_rows(TWO_STEP)
    outcome = request_swap(board, (3, 2), (4, 2))
    list(outcome.steps)
    again = next(iter(request_swap(board, (3, 2), (4, 2)).steps))
    assert again.combo_multiplier == 2


def test_loop_phases_follow_resolution_order():
    board = board_from_rows(SINGLE_CLEAR)
    swapped = request_swap(board, (0, 2), (0, 3)).steps.start
    loop = ResolutionLoop(swapped, (0, 2), (0, 3))
    assert loop.phase is ResolutionPhase.SWAP_APPLIED
    assert loop.evaluate() is not None
    assert loop.phase is ResolutionPhase.CLEARING
    loop.clear()
    assert loop.phase is ResolutionPhase.EVALUATING
    assert loop.evaluate() is None
    assert loop.phase is ResolutionPhase.IDLE
    with pytest.raises(RuntimeError):
        loop.clear()


def test_init_board_accepts_plain_mapping():
    board = init_board({"rows": 5, "cols": 6, "palette": 4, "seed": 3})
    assert (board.rows, board.cols) == (5, 6)
    assert board.is_full()
    assert not find_matches(board)


def test_fractional_position_is_rejected_not_truncated():
    board = board_from_rows(SINGLE_CLEAR)
    outcome = request_swap(board, (0.7, 2), (0, 3))
    assert isinstance(outcome, Rejected)
    assert outcome.reason is RejectReason.INVALID_POSITION
    assert outcome.board is board
