from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Optional

from . import snapshot
from .engine import GameState, Rejected, pending_eviction, replay
from .game_basics import MARK_B, parse_player, render_board, symbol, winning_line
from .paths import data_dir, default_difficulty
from .session import GameSession
from .simulate import MatchArgs, run_matches
from .strategy import Difficulty, NumpyRandomSource, choose_move

LEVELS = [d.value for d in Difficulty]


def _add_position_args(p: argparse.ArgumentParser) -> None:
    src = p.add_mutually_exclusive_group()
    src.add_argument("--moves", default="", help='Comma-separated cell indices played from a fresh game, e.g. "0,4,1"')
    src.add_argument("--snapshot", type=Path, help="Load the position from a snapshot JSON file")
    p.add_argument("--first", default="O", help="First mover when replaying --moves (O or X)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="vttt", description="Vanishing tic-tac-toe CLI")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--seed", type=int, default=None, help="Seed for the CPU random source")

    p_play = sub.add_parser("play", help="Play in the terminal against the CPU or another human")
    p_play.add_argument("--mode", choices=["cpu", "local"], default="cpu", help="cpu (you are O) or local two-player")
    p_play.add_argument("--difficulty", choices=LEVELS, default=None,
                        help="CPU level (default: $VTTT_DIFFICULTY or normal)")
    p_play.add_argument("--first", default="O", help="First mover (O or X)")
    p_play.add_argument("--delay", type=float, default=0.0, help="Seconds the CPU waits before moving")
    p_play.add_argument("--load", type=Path, help="Resume from a snapshot JSON file")
    p_play.add_argument("--save", type=Path, help="Write the final snapshot to this file")

    p_move = sub.add_parser("move", help="Replay moves and show the resulting position")
    _add_position_args(p_move)
    p_move.add_argument("--save", type=Path, help="Write the resulting snapshot to this file")

    p_sug = sub.add_parser("suggest", help="Show the CPU move for a position")
    _add_position_args(p_sug)
    p_sug.add_argument("--difficulty", choices=LEVELS, default="hard", help="CPU level (default: hard)")

    p_sim = sub.add_parser("simulate", help="Play CPU-vs-CPU matches and export results")
    p_sim.add_argument("--games", type=int, default=100, help="Number of games (default: 100)")
    p_sim.add_argument("--a", dest="a_level", choices=LEVELS, default="hard", help="Level of O")
    p_sim.add_argument("--b", dest="b_level", choices=LEVELS, default="normal", help="Level of X")
    p_sim.add_argument("--max-plies", type=int, default=60, help="Cap per game (default: 60)")
    p_sim.add_argument("--out", type=Path, default=None, help="Output directory (default: $VTTT_DATA_DIR/matches)")

    return p


def _load_position(ns: argparse.Namespace) -> GameState:
    if ns.snapshot is not None:
        return snapshot.load(ns.snapshot)
    moves = [int(x) for x in ns.moves.split(",") if x.strip()]
    return replay(moves, first_player=parse_player(ns.first))


def _describe(state: GameState) -> str:
    if state.winner is None:
        return "none"
    if state.is_draw:
        return "draw"
    return symbol(state.winner)


def _cmd_play(ns: argparse.Namespace, rng: NumpyRandomSource) -> int:
    if ns.load is not None:
        session = GameSession(snapshot.load(ns.load))
    else:
        session = GameSession()
        session.reset(parse_player(ns.first))
    level = Difficulty.parse(ns.difficulty or default_difficulty())
    cpu: Optional[int] = MARK_B if ns.mode == "cpu" else None

    def show(_data: dict) -> None:
        state = session.state
        print(render_board(state.board, highlight=pending_eviction(state)))
        print()

    unsubscribe = session.subscribe(show)
    show(session.snapshot())
    try:
        while not session.state.is_over:
            state = session.state
            if state.current_player == cpu:
                if ns.delay > 0:
                    time.sleep(ns.delay)
                res = session.play_cpu(level, rng, cpu_player=cpu)
                if res is None:
                    break
                continue
            line = input(f"{symbol(state.current_player)} to move (0-8, q to quit): ").strip().lower()
            if line in ("q", "quit"):
                break
            try:
                idx = int(line)
            except ValueError:
                print("Enter a cell index 0-8.")
                continue
            res = session.submit(state.current_player, idx)
            if isinstance(res, Rejected):
                print(f"Rejected: {res.reason.value}")
    except EOFError:
        pass
    finally:
        unsubscribe()

    logging.info("winner=%s moves=%d", _describe(session.state), session.state.move_count)
    if ns.save is not None:
        snapshot.save(session.state, ns.save)
        logging.info("Saved snapshot to %s", ns.save)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("vanishing-ttt"))
        except Exception:
            print("unknown")
        return 0

    rng = NumpyRandomSource(ns.seed)

    if ns.cmd == "play":
        try:
            return _cmd_play(ns, rng)
        except (ValueError, OSError) as e:
            logging.error("%s", e)
            return 2

    if ns.cmd in ("move", "suggest"):
        try:
            state = _load_position(ns)
        except (ValueError, OSError) as e:
            logging.error("%s", e)
            return 2
        print(render_board(state.board, highlight=pending_eviction(state)))
        if ns.cmd == "move":
            pending = pending_eviction(state)
            logging.info(
                "to_move=%s winner=%s move_count=%d pending_eviction=%s",
                symbol(state.current_player),
                _describe(state),
                state.move_count,
                "none" if pending is None else pending,
            )
            line = winning_line(state.board)
            if line is not None:
                logging.info("winning_line=%s", ",".join(map(str, line)))
            if ns.save is not None:
                snapshot.save(state, ns.save)
                logging.info("Saved snapshot to %s", ns.save)
            return 0
        if state.is_over:
            logging.error("Game is already over (winner=%s).", _describe(state))
            return 2
        idx = choose_move(state.board, state.metadata, ns.difficulty, rng, cpu_player=state.current_player)
        logging.info("to_move=%s difficulty=%s move=%d", symbol(state.current_player), ns.difficulty, idx)
        return 0

    if ns.cmd == "simulate":
        if ns.games < 1 or ns.max_plies < 1:
            logging.error("--games and --max-plies must be positive")
            return 2
        out = run_matches(MatchArgs(
            out=ns.out if ns.out is not None else data_dir() / "matches",
            games=ns.games,
            a_level=ns.a_level,
            b_level=ns.b_level,
            seed=ns.seed if ns.seed is not None else 0,
            max_plies=ns.max_plies,
            cli_argv=list(argv) if argv is not None else None,
        ))
        logging.info("Wrote matches to: %s", out)
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
