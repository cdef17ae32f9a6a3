from pathlib import Path

import pytest

pytest.importorskip("pytest_benchmark")

from vanishing_ttt.simulate import MatchArgs, run_matches
from vanishing_ttt.strategy import NumpyRandomSource, choose_move


def test_benchmark_hard_choose_move(benchmark):
    board = [1, 0, 2, 0, 2, 0, 1, 0, 0]
    rng = NumpyRandomSource(0)

    mv = benchmark(lambda: choose_move(board, [None] * 9, "hard", rng))
    assert board[mv] == 0


def test_benchmark_small_run(tmp_path: Path, benchmark):
    def _run():
        return run_matches(MatchArgs(out=tmp_path / "bench", games=20, seed=1))

    out = benchmark(_run)
    assert (out / "matches.csv").exists()
