"""
Tactics: completing moves and eviction-aware win/block detection.
Notes:
- A line is "completable" by a player when it holds two of their marks and
  one empty cell.
- With vanishing pieces a completable line can be an illusion: if the player
  already owns three pieces, their oldest one disappears as part of the very
  next placement. Searches therefore run on the board as it will look after
  that eviction.
- Only one ply is considered. The opponent's own eviction on a later turn is
  not modelled.
"""
from typing import List, Optional, Sequence

from .engine import PieceMeta, count_pieces, oldest_piece_index
from .game_basics import EMPTY, MAX_PIECES, WIN_PATTERNS

NO_MOVE = -1


def find_completing_move(board: Sequence[int], player: int) -> int:
    """First empty cell that completes a line for ``player``, else NO_MOVE."""
    for pattern in WIN_PATTERNS:
        values = [board[i] for i in pattern]
        if values.count(player) == 2 and values.count(EMPTY) == 1:
            return pattern[values.index(EMPTY)]
    return NO_MOVE


def completing_moves(board: Sequence[int], player: int) -> List[int]:
    """All distinct completing cells for ``player``, in line order."""
    moves: List[int] = []
    for pattern in WIN_PATTERNS:
        values = [board[i] for i in pattern]
        if values.count(player) == 2 and values.count(EMPTY) == 1:
            cell = pattern[values.index(EMPTY)]
            if cell not in moves:
                moves.append(cell)
    return moves


def board_after_eviction(
    board: Sequence[int],
    metadata: Sequence[Optional[PieceMeta]],
    player: int,
) -> List[int]:
    """Copy of ``board`` with ``player``'s oldest piece removed if it is due to vanish."""
    b = list(board)
    if count_pieces(metadata, player) >= MAX_PIECES:
        oldest = oldest_piece_index(metadata, player)
        if oldest is not None:
            b[oldest] = EMPTY
    return b


def winning_move_under_eviction(
    board: Sequence[int],
    metadata: Sequence[Optional[PieceMeta]],
    player: int,
) -> int:
    """Cell that completes a line for ``player`` once their due eviction happens.

    Candidates come from the simulated board but must be empty on the real
    one: the vacated cell of the oldest piece is not playable this turn.
    """
    simulated = board_after_eviction(board, metadata, player)
    for cell in completing_moves(simulated, player):
        if board[cell] == EMPTY:
            return cell
    return NO_MOVE
