"""
CPU move selection at three difficulty tiers.

- easy: a uniformly random empty cell.
- normal: the hard cascade 70% of the time, easy otherwise.
- hard: eviction-aware win, eviction-aware block, center, random corner,
  random cell. First rule that yields a cell wins.

Randomness is always supplied by the caller through a ``RandomSource`` so a
seeded source reproduces a game exactly.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Protocol, Sequence, TypeVar

import numpy as np

from .engine import PieceMeta
from .game_basics import CENTER, CORNERS, EMPTY, MARK_B, empty_cells, opponent
from .tactics import NO_MOVE, winning_move_under_eviction

T = TypeVar("T")

NORMAL_SMART_PROBABILITY = 0.7


class Difficulty(str, Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"

    @classmethod
    def parse(cls, value: "str | Difficulty") -> "Difficulty":
        if isinstance(value, Difficulty):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            names = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty: {value!r} (expected one of {names})") from None


class RandomSource(Protocol):
    def random(self) -> float:
        """Uniform float in [0, 1)."""
        ...

    def choice(self, items: Sequence[T]) -> T:
        """Uniform pick from a non-empty sequence."""
        ...


class NumpyRandomSource:
    """RandomSource backed by ``numpy.random.default_rng``."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def random(self) -> float:
        return float(self.rng.random())

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("choice from an empty sequence")
        return items[int(self.rng.integers(len(items)))]


def random_move(board: Sequence[int], rng: RandomSource) -> int:
    spots = empty_cells(board)
    if not spots:
        return NO_MOVE
    return int(rng.choice(spots))


def smart_move(
    board: Sequence[int],
    metadata: Sequence[Optional[PieceMeta]],
    rng: RandomSource,
    cpu_player: int = MARK_B,
) -> int:
    if EMPTY not in board:
        return NO_MOVE
    human = opponent(cpu_player)

    win = winning_move_under_eviction(board, metadata, cpu_player)
    if win != NO_MOVE:
        logging.debug("hard: winning move %d", win)
        return win

    block = winning_move_under_eviction(board, metadata, human)
    if block != NO_MOVE:
        logging.debug("hard: blocking move %d", block)
        return block

    if board[CENTER] == EMPTY:
        return CENTER

    corners = [i for i in CORNERS if board[i] == EMPTY]
    if corners:
        return int(rng.choice(corners))

    return random_move(board, rng)


def choose_move(
    board: Sequence[int],
    metadata: Sequence[Optional[PieceMeta]],
    difficulty: "str | Difficulty",
    rng: RandomSource,
    cpu_player: int = MARK_B,
) -> int:
    """Cell index for the CPU to play, or NO_MOVE when the board is full."""
    level = Difficulty.parse(difficulty)
    if level is Difficulty.EASY:
        return random_move(board, rng)
    if level is Difficulty.NORMAL:
        if rng.random() < NORMAL_SMART_PROBABILITY:
            return smart_move(board, metadata, rng, cpu_player)
        return random_move(board, rng)
    return smart_move(board, metadata, rng, cpu_player)
