import numpy as np
import pytest

from vanishing_ttt.engine import (
    Applied,
    GameState,
    InvariantViolation,
    PieceMeta,
    Rejected,
    RejectReason,
    apply_move,
    legal_moves,
    new_game,
    oldest_piece_index,
    pending_eviction,
    replay,
)
from vanishing_ttt.game_basics import DRAW, EMPTY, MARK_A, MARK_B


def play(state, *cells):
    for c in cells:
        res = apply_move(state, c, state.current_player)
        assert isinstance(res, Applied), res
        state = res.state
    return state


def test_new_game_is_fresh():
    s = new_game()
    assert s.board == (EMPTY,) * 9
    assert s.metadata == (None,) * 9
    assert s.current_player == MARK_A
    assert s.winner is None
    assert s.move_count == 0
    assert new_game(MARK_B).current_player == MARK_B
    with pytest.raises(ValueError):
        new_game(EMPTY)


def test_placement_records_sequence_and_flips_turn():
    res = apply_move(new_game(), 4, MARK_A)
    assert isinstance(res, Applied)
    s = res.state
    assert s.board[4] == MARK_A
    assert s.metadata[4] == PieceMeta(MARK_A, 0)
    assert s.move_count == 1
    assert s.current_player == MARK_B
    assert res.evicted is None
    assert res.outcome is None


def test_row_win_then_game_over():
    s = play(new_game(), 0, 4, 1, 7, 2)
    assert s.winner == MARK_A
    assert s.current_player == MARK_A
    assert s.move_count == 5
    assert legal_moves(s) == []
    for cell, player in [(5, MARK_B), (5, MARK_A), (42, MARK_B)]:
        res = apply_move(s, cell, player)
        assert res == Rejected(RejectReason.GAME_OVER)


def test_eviction_removes_oldest_piece():
    # O owns 0,1,2 (seq 0,2,4), X owns 4,6 (seq 1,3); constructed directly
    board = (MARK_A, MARK_A, MARK_A, EMPTY, MARK_B, EMPTY, MARK_B, EMPTY, EMPTY)
    meta = (
        PieceMeta(MARK_A, 0), PieceMeta(MARK_A, 2), PieceMeta(MARK_A, 4),
        None, PieceMeta(MARK_B, 1), None, PieceMeta(MARK_B, 3), None, None,
    )
    s = GameState(board=board, metadata=meta, current_player=MARK_A, move_count=5)
    res = apply_move(s, 3, MARK_A)
    assert isinstance(res, Applied)
    assert res.evicted == 0
    t = res.state
    assert [i for i, v in enumerate(t.board) if v == MARK_A] == [1, 2, 3]
    assert [i for i, v in enumerate(t.board) if v == MARK_B] == [4, 6]
    assert t.metadata[0] is None
    assert t.metadata[3] == PieceMeta(MARK_A, 5)
    assert t.winner is None
    assert t.current_player == MARK_B


def test_reachable_eviction_sequence():
    s = play(new_game(), 0, 4, 1, 2, 6, 3)
    assert pending_eviction(s) == 0
    s = play(s, 5)
    assert s.board == (EMPTY, MARK_A, MARK_B, MARK_B, MARK_B, MARK_A, MARK_A, EMPTY, EMPTY)
    assert pending_eviction(s) == 4
    res = apply_move(s, 0, MARK_B)
    assert isinstance(res, Applied)
    assert res.evicted == 4
    assert res.state.board == (MARK_B, MARK_A, MARK_B, MARK_B, EMPTY, MARK_A, MARK_A, EMPTY, EMPTY)
    assert res.state.move_count == 8
    assert res.state.current_player == MARK_A


def test_pending_eviction_none_below_three_pieces():
    s = play(new_game(), 0, 4, 1)
    assert pending_eviction(s) is None
    won = play(new_game(), 0, 4, 1, 7, 2)
    assert pending_eviction(won) is None


@pytest.mark.parametrize(
    "cell,player,reason",
    [
        (-1, MARK_B, RejectReason.OUT_OF_RANGE),
        (9, MARK_B, RejectReason.OUT_OF_RANGE),
        (0, MARK_B, RejectReason.CELL_OCCUPIED),
        (5, MARK_A, RejectReason.NOT_YOUR_TURN),
    ],
)
def test_rejections_leave_state_unchanged(cell, player, reason):
    s = play(new_game(), 0)
    before = (s.board, s.metadata, s.current_player, s.winner, s.move_count)
    res = apply_move(s, cell, player)
    assert isinstance(res, Rejected)
    assert res.reason is reason
    assert not res.ok
    assert (s.board, s.metadata, s.current_player, s.winner, s.move_count) == before


def test_numpy_integer_cells_are_accepted():
    res = apply_move(new_game(), np.int64(4), MARK_A)
    assert isinstance(res, Applied)
    assert res.state.board[4] == MARK_A
    assert type(res.state.metadata[4].sequence_number) is int
    drawn = np.random.default_rng(0).integers(9)
    assert apply_move(new_game(), drawn, MARK_A).ok


@pytest.mark.parametrize("cell", [True, False, 4.0, "4", None])
def test_non_integer_cells_are_out_of_range(cell):
    res = apply_move(new_game(), cell, MARK_A)
    assert res == Rejected(RejectReason.OUT_OF_RANGE)


def test_draw_state_is_over():
    s = GameState(winner=DRAW)
    assert s.is_over and s.is_draw
    assert not new_game().is_draw


def test_game_over_checked_before_range():
    s = play(new_game(), 0, 4, 1, 7, 2)
    assert apply_move(s, 99, MARK_A).reason is RejectReason.GAME_OVER


def test_missing_metadata_is_an_invariant_violation():
    board = (MARK_A, MARK_A, EMPTY, EMPTY, EMPTY, MARK_A, EMPTY, EMPTY, EMPTY)
    s = GameState(board=board, current_player=MARK_A, move_count=3)
    with pytest.raises(InvariantViolation):
        apply_move(s, 8, MARK_A)


def test_oldest_piece_index():
    meta = [None, PieceMeta(MARK_A, 7), PieceMeta(MARK_B, 1), PieceMeta(MARK_A, 3)] + [None] * 5
    assert oldest_piece_index(meta, MARK_A) == 3
    assert oldest_piece_index(meta, MARK_B) == 2
    assert oldest_piece_index([None] * 9, MARK_A) is None


def test_replay_raises_on_rejected_move():
    assert replay([0, 4]).move_count == 2
    with pytest.raises(ValueError):
        replay([0, 0])
    s = replay([4], first_player=MARK_B)
    assert s.board[4] == MARK_B
