"""
Game basics: cell encoding, win lines, serialization and outcome checks.
Notes:
- A board is a list of 9 cells: 0=empty, 1=O (mark A), 2=X (mark B).
- O moves first by default; in CPU games X is the computer.
- Pieces vanish, so piece counts say nothing about whose turn it is. Turn
  order lives in the game state, not on the board.
"""
from typing import List, Optional, Sequence

EMPTY = 0
MARK_A = 1
MARK_B = 2
DRAW = 3

BOARD_CELLS = 9
MAX_PIECES = 3
CENTER = 4
CORNERS = (0, 2, 6, 8)

WIN_PATTERNS = [
    [0, 1, 2], [3, 4, 5], [6, 7, 8],
    [0, 3, 6], [1, 4, 7], [2, 5, 8],
    [0, 4, 8], [2, 4, 6],
]

SYMBOLS = {MARK_A: 'O', MARK_B: 'X'}
PLAYERS_BY_SYMBOL = {'O': MARK_A, 'X': MARK_B}


def opponent(player: int) -> int:
    if player == MARK_A:
        return MARK_B
    if player == MARK_B:
        return MARK_A
    raise ValueError(f"Not a player mark: {player!r}")


def symbol(player: int) -> str:
    return SYMBOLS[player]


def parse_player(text: str) -> int:
    key = text.strip().upper()
    if key not in PLAYERS_BY_SYMBOL:
        raise ValueError(f"Unknown player symbol: {text!r} (expected O or X)")
    return PLAYERS_BY_SYMBOL[key]


def serialize_board(board: Sequence[int]) -> str:
    """Compact digit string, e.g. ``"102010200"``."""
    return ''.join(str(cell) for cell in board)


def empty_cells(board: Sequence[int]) -> List[int]:
    return [i for i, v in enumerate(board) if v == EMPTY]


def get_winner(board: Sequence[int]) -> int:
    """Return the mark owning the first complete line, or EMPTY."""
    for a, b, c in WIN_PATTERNS:
        v = board[a]
        if v != EMPTY and v == board[b] and v == board[c]:
            return v
    return EMPTY


def winning_line(board: Sequence[int]) -> Optional[List[int]]:
    """Cells of the first complete line, or None."""
    for pattern in WIN_PATTERNS:
        a, b, c = pattern
        v = board[a]
        if v != EMPTY and v == board[b] and v == board[c]:
            return list(pattern)
    return None


def check_outcome(board: Sequence[int]) -> Optional[int]:
    """Outcome of the board as it stands: MARK_A, MARK_B, DRAW or None.

    Evaluated on the current cells only. With vanishing pieces a full
    board is rare, but when it happens without a line it is a draw.
    """
    w = get_winner(board)
    if w != EMPTY:
        return w
    if EMPTY not in board:
        return DRAW
    return None


def render_board(board: Sequence[int], highlight: Optional[int] = None) -> str:
    """Plain-text 3x3 grid; empty cells show their index.

    The cell at ``highlight`` (the piece about to vanish) is shown in
    lower case.
    """
    rows = []
    for r in range(3):
        cells = []
        for c in range(3):
            i = r * 3 + c
            v = board[i]
            if v == EMPTY:
                cells.append(str(i))
            elif i == highlight:
                cells.append(SYMBOLS[v].lower())
            else:
                cells.append(SYMBOLS[v])
        rows.append(' ' + ' | '.join(cells))
    return '\n---+---+---\n'.join(rows)
