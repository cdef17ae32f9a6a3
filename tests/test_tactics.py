from vanishing_ttt.engine import PieceMeta
from vanishing_ttt.game_basics import EMPTY, MARK_A, MARK_B
from vanishing_ttt.tactics import (
    NO_MOVE,
    board_after_eviction,
    completing_moves,
    find_completing_move,
    winning_move_under_eviction,
)

A, B, _ = MARK_A, MARK_B, EMPTY


def meta_for(board, seqs):
    return [None if v == EMPTY else PieceMeta(v, seqs[i]) for i, v in enumerate(board)]


def test_find_completing_move_first_line_wins():
    board = [B, B, _,
             A, A, _,
             _, _, _]
    assert find_completing_move(board, B) == 2
    assert find_completing_move(board, A) == 5
    assert completing_moves(board, A) == [5]


def test_find_completing_move_ignores_blocked_lines():
    board = [B, B, A,
             _, _, _,
             _, _, _]
    assert find_completing_move(board, B) == NO_MOVE
    assert find_completing_move([_] * 9, A) == NO_MOVE


def test_completing_moves_deduplicates():
    board = [A, A, _,
             _, _, A,
             _, _, A]
    assert completing_moves(board, A) == [2, 4]


def test_under_eviction_without_pending_eviction_uses_real_board():
    board = [B, B, _,
             _, A, _,
             _, _, _]
    meta = meta_for(board, {0: 1, 1: 3, 4: 0})
    assert winning_move_under_eviction(board, meta, B) == 2


def test_under_eviction_discards_line_through_oldest_piece():
    # X owns 3 (seq 1), 4 (seq 3), 8 (seq 5); 3 vanishes on the next placement
    board = [_, A, A,
             B, B, _,
             A, _, B]
    meta = meta_for(board, {1: 0, 2: 2, 6: 4, 3: 1, 4: 3, 8: 5})
    assert find_completing_move(board, B) == 5
    assert winning_move_under_eviction(board, meta, B) == 0
    assert board_after_eviction(board, meta, B)[3] == EMPTY


def test_under_eviction_never_targets_the_vacated_cell():
    board = [B, A, _,
             _, B, A,
             _, _, B]
    meta = meta_for(board, {0: 0, 1: 1, 4: 2, 5: 3, 8: 4})
    assert winning_move_under_eviction(board, meta, B) == NO_MOVE


def test_under_eviction_does_not_mutate_inputs():
    board = [B, B, _, A, A, _, B, A, _]
    meta = meta_for(board, {0: 0, 3: 1, 1: 2, 4: 3, 6: 4, 7: 5})
    board_copy, meta_copy = list(board), list(meta)
    winning_move_under_eviction(board, meta, B)
    winning_move_under_eviction(board, meta, A)
    assert board == board_copy
    assert meta == meta_copy
