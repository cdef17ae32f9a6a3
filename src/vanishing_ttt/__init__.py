"""vanishing_ttt package.

Rule engine and CPU strategist for tic-tac-toe with vanishing pieces, plus
snapshot, session, simulation and CLI helpers.

Convenience imports are exposed for common workflows.
"""

from .engine import (
    Applied,
    GameState,
    InvariantViolation,
    PieceMeta,
    Rejected,
    RejectReason,
    apply_move,
    new_game,
    pending_eviction,
)
from .game_basics import DRAW, EMPTY, MARK_A, MARK_B, check_outcome
from .strategy import Difficulty, NumpyRandomSource, choose_move
from .tactics import NO_MOVE, find_completing_move, winning_move_under_eviction

__all__ = [
    "Applied",
    "GameState",
    "InvariantViolation",
    "PieceMeta",
    "Rejected",
    "RejectReason",
    "apply_move",
    "new_game",
    "pending_eviction",
    "DRAW",
    "EMPTY",
    "MARK_A",
    "MARK_B",
    "check_outcome",
    "Difficulty",
    "NumpyRandomSource",
    "choose_move",
    "NO_MOVE",
    "find_completing_move",
    "winning_move_under_eviction",
]
