#!/usr/bin/env python3
"""Play every pairing of CPU tiers and append a win-rate table to docs/tier_matrix.md."""
from __future__ import annotations

import argparse
import json
import logging
import math
from pathlib import Path
from typing import Dict, List, Tuple

from vanishing_ttt.paths import data_dir, repo_root
from vanishing_ttt.simulate import MatchArgs, run_matches
from vanishing_ttt.strategy import Difficulty


def ci95(p: float, n: int) -> float:
    if n == 0:
        return float("nan")
    return 1.96 * math.sqrt(p * (1.0 - p) / n)


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--games", type=int, default=200)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--max-plies", type=int, default=60)
    ns = ap.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    levels = [d.value for d in Difficulty]
    table: Dict[Tuple[str, str], Dict[str, int]] = {}
    for a in levels:
        for b in levels:
            out = run_matches(MatchArgs(
                out=data_dir() / "tier_matrix" / f"{a}_vs_{b}",
                games=ns.games,
                a_level=a,
                b_level=b,
                seed=ns.seed,
                max_plies=ns.max_plies,
            ))
            table[(a, b)] = json.loads((out / "manifest.json").read_text())["results"]

    lines = [
        f"\n## Tier matrix (N={ns.games} per pairing, seed={ns.seed}, cap={ns.max_plies} plies)\n",
        "| O | X | O wins | X wins | unfinished |",
        "|---|---|---:|---:|---:|",
    ]
    for (a, b), res in table.items():
        p_o = res["O"] / ns.games
        p_x = res["X"] / ns.games
        lines.append(
            f"| {a} | {b} | {p_o:.2f} ± {ci95(p_o, ns.games):.2f} "
            f"| {p_x:.2f} ± {ci95(p_x, ns.games):.2f} | {res['unfinished']} |"
        )
    md = repo_root() / "docs" / "tier_matrix.md"
    md.parent.mkdir(parents=True, exist_ok=True)
    try:
        prev = md.read_text()
    except FileNotFoundError:
        prev = "# Tier matrix\n\n"
    md.write_text(prev.rstrip() + "\n" + "\n".join(lines) + "\n")
    logging.info("Updated %s", md)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
