"""
Rule engine for vanishing tic-tac-toe.

Each player keeps at most three pieces on the board. Placing a fourth first
removes that player's oldest piece, found through the placement metadata:
every placed piece records its owner and a global sequence number taken from
``move_count``.

States are immutable; ``apply_move`` returns a new state wrapped in
``Applied`` or explains the refusal with ``Rejected``. Expected refusals are
values, not exceptions. Only a corrupted state (three pieces but no oldest
one to evict) raises.
"""
from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union

from .game_basics import (
    BOARD_CELLS,
    DRAW,
    EMPTY,
    MARK_A,
    MAX_PIECES,
    check_outcome,
    empty_cells,
    opponent,
)


class PieceMeta(NamedTuple):
    owner: int
    sequence_number: int


Metadata = Tuple[Optional[PieceMeta], ...]


class RejectReason(str, Enum):
    GAME_OVER = "game_over"
    OUT_OF_RANGE = "out_of_range"
    CELL_OCCUPIED = "cell_occupied"
    NOT_YOUR_TURN = "not_your_turn"
    # only produced by the session adapter, never by apply_move
    STALE = "stale"


class InvariantViolation(RuntimeError):
    """Raised when the board and its metadata disagree."""


def _empty_board() -> Tuple[int, ...]:
    return (EMPTY,) * BOARD_CELLS


def _empty_metadata() -> Metadata:
    return (None,) * BOARD_CELLS


@dataclass(frozen=True)
class GameState:
    board: Tuple[int, ...] = field(default_factory=_empty_board)
    metadata: Metadata = field(default_factory=_empty_metadata)
    current_player: int = MARK_A
    winner: Optional[int] = None
    move_count: int = 0

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    @property
    def is_draw(self) -> bool:
        return self.winner == DRAW


@dataclass(frozen=True)
class Applied:
    state: GameState
    evicted: Optional[int] = None
    outcome: Optional[int] = None

    ok = True


@dataclass(frozen=True)
class Rejected:
    reason: RejectReason

    ok = False


MoveResult = Union[Applied, Rejected]


def new_game(first_player: int = MARK_A) -> GameState:
    """Fresh state with ``first_player`` to move."""
    opponent(first_player)  # validates the mark
    return GameState(current_player=first_player)


def count_pieces(metadata: Sequence[Optional[PieceMeta]], player: int) -> int:
    return sum(1 for m in metadata if m is not None and m.owner == player)


def oldest_piece_index(metadata: Sequence[Optional[PieceMeta]], player: int) -> Optional[int]:
    """Index of ``player``'s piece with the smallest sequence number."""
    oldest: Optional[int] = None
    oldest_seq: Optional[int] = None
    for i, m in enumerate(metadata):
        if m is None or m.owner != player:
            continue
        if oldest_seq is None or m.sequence_number < oldest_seq:
            oldest_seq = m.sequence_number
            oldest = i
    return oldest


def pending_eviction(state: GameState) -> Optional[int]:
    """The piece that vanishes when the current player next places, if any."""
    if state.is_over:
        return None
    if count_pieces(state.metadata, state.current_player) < MAX_PIECES:
        return None
    return oldest_piece_index(state.metadata, state.current_player)


def legal_moves(state: GameState) -> List[int]:
    if state.is_over:
        return []
    return empty_cells(state.board)


def apply_move(state: GameState, cell_index: int, acting_player: int) -> MoveResult:
    if state.winner is not None:
        return Rejected(RejectReason.GAME_OVER)
    # numpy integers are cells too; bools are not
    if isinstance(cell_index, bool):
        return Rejected(RejectReason.OUT_OF_RANGE)
    try:
        cell_index = operator.index(cell_index)
    except TypeError:
        return Rejected(RejectReason.OUT_OF_RANGE)
    if not 0 <= cell_index < BOARD_CELLS:
        return Rejected(RejectReason.OUT_OF_RANGE)
    if state.board[cell_index] != EMPTY:
        return Rejected(RejectReason.CELL_OCCUPIED)
    if acting_player != state.current_player:
        return Rejected(RejectReason.NOT_YOUR_TURN)

    board = list(state.board)
    metadata = list(state.metadata)

    # pieces are counted on the board; their age comes from the metadata
    evicted: Optional[int] = None
    if board.count(acting_player) >= MAX_PIECES:
        evicted = oldest_piece_index(metadata, acting_player)
        if evicted is None:
            raise InvariantViolation(
                f"player {acting_player} owns {MAX_PIECES}+ pieces but none is locatable"
            )
        board[evicted] = EMPTY
        metadata[evicted] = None
        logging.debug("evicted piece of player %d at %d", acting_player, evicted)

    board[cell_index] = acting_player
    metadata[cell_index] = PieceMeta(acting_player, state.move_count)

    outcome = check_outcome(board)
    new_state = replace(
        state,
        board=tuple(board),
        metadata=tuple(metadata),
        current_player=acting_player if outcome is not None else opponent(acting_player),
        winner=outcome,
        move_count=state.move_count + 1,
    )
    return Applied(new_state, evicted=evicted, outcome=outcome)


def replay(moves: Sequence[int], first_player: int = MARK_A) -> GameState:
    """Play ``moves`` from a fresh game, alternating players.

    Raises ValueError on the first rejected move.
    """
    state = new_game(first_player)
    for ply, idx in enumerate(moves):
        res = apply_move(state, idx, state.current_player)
        if isinstance(res, Rejected):
            raise ValueError(f"move {ply} at cell {idx} rejected: {res.reason.value}")
        state = res.state
    return state
