"""
In-process session adapter.

Stands where a synchronized document store would: it owns the authoritative
state, serializes writers, and pushes snapshots to subscribers. The rule
engine and strategist never see it.

Writers submit moves together with the ``move_count`` they computed against.
If another move was committed in between, the submission is refused as
``STALE`` before it reaches the engine (last-committed-state compare).
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from .engine import Applied, GameState, MoveResult, Rejected, RejectReason, apply_move, new_game
from .game_basics import MARK_A, MARK_B, symbol
from .snapshot import from_dict, to_dict
from .strategy import Difficulty, RandomSource, choose_move
from .tactics import NO_MOVE

Listener = Callable[[Dict[str, Any]], None]


class GameSession:
    def __init__(self, state: Optional[GameState] = None):
        self._state = state if state is not None else new_game()
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any]) -> "GameSession":
        return cls(from_dict(data))

    @property
    def state(self) -> GameState:
        return self._state

    def snapshot(self) -> Dict[str, Any]:
        return to_dict(self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for snapshots after each commit.

        Returns a function that removes the listener again.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: GameState) -> None:
        with self._lock:
            listeners = list(self._listeners)
        data = to_dict(state)
        for listener in listeners:
            listener(data)

    def submit(self, player: int, index: int, expected_move_count: Optional[int] = None) -> MoveResult:
        with self._lock:
            if expected_move_count is not None and expected_move_count != self._state.move_count:
                logging.info(
                    "stale move from player %r: expected move_count=%d, session at %d",
                    player, expected_move_count, self._state.move_count,
                )
                return Rejected(RejectReason.STALE)
            res = apply_move(self._state, index, player)
            if isinstance(res, Applied):
                self._state = res.state
        if isinstance(res, Applied):
            logging.debug("%s played %d (move_count=%d)", symbol(player), index, res.state.move_count)
            self._publish(res.state)
        return res

    def play_cpu(
        self,
        difficulty: "str | Difficulty",
        rng: RandomSource,
        cpu_player: int = MARK_B,
    ) -> Optional[MoveResult]:
        """Let the CPU move if it is its turn. Returns None when it does not play."""
        state = self._state
        if state.is_over or state.current_player != cpu_player:
            return None
        idx = choose_move(state.board, state.metadata, difficulty, rng, cpu_player)
        if idx == NO_MOVE:
            return None
        return self.submit(cpu_player, idx, expected_move_count=state.move_count)

    def reset(self, first_player: int = MARK_A) -> GameState:
        with self._lock:
            self._state = new_game(first_player)
            state = self._state
        self._publish(state)
        return state
