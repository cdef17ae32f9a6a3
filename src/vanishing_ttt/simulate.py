"""
CPU-vs-CPU match simulation and export.

Plays seeded games between two difficulty tiers, alternating the first
mover, and writes one CSV row per game plus a manifest with the run
arguments, tallies and checksums. Vanishing games can cycle forever, so each
game is capped at ``max_plies`` and recorded as ``unfinished`` if it hits
the cap.
"""
from __future__ import annotations

import csv
import hashlib
import json
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from .engine import Applied, apply_move, new_game
from .game_basics import MARK_A, MARK_B, serialize_board, symbol
from .paths import get_git_commit
from .strategy import Difficulty, NumpyRandomSource, RandomSource, choose_move
from .tactics import NO_MOVE

SIM_VERSION = "1.0.0"
UNFINISHED = "unfinished"
FIELDNAMES = ["game", "first", "a_level", "b_level", "result", "plies", "evictions", "moves", "final_board"]


@dataclass
class MatchArgs:
    out: Path
    games: int = 100
    a_level: str = "hard"
    b_level: str = "normal"
    seed: int = 0
    max_plies: int = 60
    cli_argv: List[str] | None = None


def play_match(
    levels: Dict[int, Difficulty],
    rng: RandomSource,
    first_player: int = MARK_A,
    max_plies: int = 60,
) -> Dict[str, Any]:
    state = new_game(first_player)
    moves: List[int] = []
    evictions = 0
    while not state.is_over and len(moves) < max_plies:
        player = state.current_player
        idx = choose_move(state.board, state.metadata, levels[player], rng, cpu_player=player)
        if idx == NO_MOVE:
            break
        res = apply_move(state, idx, player)
        if not isinstance(res, Applied):
            # choose_move only returns empty cells for the side to move
            raise RuntimeError(f"strategist produced a rejected move: {res.reason.value}")
        if res.evicted is not None:
            evictions += 1
        moves.append(idx)
        state = res.state
    if state.winner is None:
        result = UNFINISHED
    elif state.is_draw:
        result = "draw"
    else:
        result = symbol(state.winner)
    return {
        "first": symbol(first_player),
        "result": result,
        "plies": len(moves),
        "evictions": evictions,
        "moves": " ".join(map(str, moves)),
        "final_board": serialize_board(state.board),
    }


def _sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open('rb') as f:
        for chunk in iter(lambda: f.read(8192), b''):
            h.update(chunk)
    return h.hexdigest()


def run_matches(args: MatchArgs) -> Path:
    if args.games < 1:
        raise ValueError(f"games must be positive: {args.games}")
    if args.max_plies < 1:
        raise ValueError(f"max_plies must be positive: {args.max_plies}")
    levels = {MARK_A: Difficulty.parse(args.a_level), MARK_B: Difficulty.parse(args.b_level)}
    args.out.mkdir(parents=True, exist_ok=True)
    rng = NumpyRandomSource(args.seed)

    logging.info("Playing %d games: O=%s vs X=%s (seed=%d)",
                 args.games, levels[MARK_A].value, levels[MARK_B].value, args.seed)
    rows: List[Dict[str, Any]] = []
    for g in range(args.games):
        first = MARK_A if g % 2 == 0 else MARK_B
        row = play_match(levels, rng, first_player=first, max_plies=args.max_plies)
        row.update({"game": g, "a_level": levels[MARK_A].value, "b_level": levels[MARK_B].value})
        rows.append(row)

    matches_csv = args.out / "matches.csv"
    with matches_csv.open('w', newline='') as f:
        w = csv.DictWriter(f, fieldnames=FIELDNAMES)
        w.writeheader()
        for r in rows:
            w.writerow(r)
    logging.info("Wrote %s (%d rows)", matches_csv, len(rows))

    tally = Counter(r["result"] for r in rows)
    plies = [r["plies"] for r in rows]
    manifest = {
        "sim_version": SIM_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "args": {
            "games": args.games,
            "a_level": levels[MARK_A].value,
            "b_level": levels[MARK_B].value,
            "seed": args.seed,
            "max_plies": args.max_plies,
        },
        "git_commit": get_git_commit(),
        "cli_argv": args.cli_argv,
        "results": {k: tally.get(k, 0) for k in ("O", "X", "draw", UNFINISHED)},
        "mean_plies": sum(plies) / len(plies),
        "total_evictions": sum(r["evictions"] for r in rows),
        "files": {"matches_csv": str(matches_csv)},
        "checksums": {"matches_csv": _sha256_file(matches_csv)},
    }
    (args.out / "manifest.json").write_text(json.dumps(manifest, indent=2))
    logging.info("results=%s", manifest["results"])
    return args.out
