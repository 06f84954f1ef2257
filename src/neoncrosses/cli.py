from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional, TextIO

from .benchmarks import BenchmarkArgs, run_benchmark
from .game_basics import DRAW, O, deserialize_board, evaluate, is_valid_state, serialize_board, winning_line
from .paths import runs_dir, stats_file
from .policy import DIFFICULTIES, NO_MOVE, select_move
from .session import AI_MARK, HUMAN_MARK, GameSession
from .stats import GameStats, JsonStatsStore, MemoryStatsStore, format_win_rate, stats_to_dict, total_stats

DEFAULT_THINK_DELAY = 0.6


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="neoncrosses", description="Noughts and crosses against the computer")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--seed", type=int, default=None, help="Global seed for reproducibility")
    p.add_argument(
        "--stats-file",
        type=Path,
        default=None,
        help="Stats file (default: $NEONCROSSES_STATS_FILE or ~/.neoncrosses/stats.json)",
    )

    p_play = sub.add_parser("play", help="Play an interactive game against the computer")
    p_play.add_argument("--difficulty", "-d", choices=DIFFICULTIES, default="medium")
    p_play.add_argument(
        "--think-delay",
        type=float,
        default=DEFAULT_THINK_DELAY,
        help="Seconds to pause before the computer moves (default: 0.6)",
    )
    p_play.add_argument("--no-stats", action="store_true", help="Do not record results")
    p_play.add_argument("--one-based", action="store_true", help="Number cells 1-9 instead of 0-8")

    p_eval = sub.add_parser("evaluate", help="Evaluate a board (9 chars of X, O and .)")
    p_eval.add_argument("--board", required=True, help="Board string, e.g. XX.OO....")

    p_move = sub.add_parser("move", help="Ask the computer for a move on a board")
    p_move.add_argument("--board", required=True, help="Board string, e.g. XX.OO....")
    p_move.add_argument("--difficulty", "-d", choices=DIFFICULTIES, default="hard")
    p_move.add_argument("--mark", choices=["X", "O"], default=O, help="Mark to move for (default: O)")

    p_stats = sub.add_parser("stats", help="Show or reset per-difficulty statistics")
    p_stats.add_argument("--reset", action="store_true", help="Zero all statistics")
    p_stats.add_argument("--json", action="store_true", help="Print stats as JSON")

    p_bench = sub.add_parser("benchmark", help="Play tiers against each other")
    p_bench.add_argument("--x-tier", choices=DIFFICULTIES, default="hard")
    p_bench.add_argument("--o-tier", choices=DIFFICULTIES, default="easy")
    p_bench.add_argument("--games", type=int, default=1000)
    p_bench.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_bench.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for tracking logs (default: $NEONCROSSES_RUNS or ~/.neoncrosses/runs)",
    )

    return p


def _set_global_seed(seed: Optional[int]) -> None:
    if seed is None:
        return
    import random

    import numpy as np

    random.seed(seed)
    np.random.seed(seed)


def _parse_board(raw: str):
    try:
        b = deserialize_board(raw)
    except ValueError as e:
        logging.error("Invalid board string: %s", e)
        return None
    if not is_valid_state(b):
        logging.error("Board is not a valid reachable state.")
        return None
    return b


def render_board(board, one_based: bool = False) -> str:
    offset = 1 if one_based else 0
    cells = [v if v is not None else str(i + offset) for i, v in enumerate(board)]
    rows = [" " + " | ".join(cells[r * 3:r * 3 + 3]) for r in range(3)]
    return "\n---+---+---\n".join(rows)


def _format_stats_line(label: str, s: GameStats) -> str:
    return (f"{label:<8} {s.wins}W / {s.losses}L / {s.draws}D  "
            f"{s.games_played} played  {format_win_rate(s)} win rate")


def _play(ns, store, stdin: TextIO, stdout: TextIO) -> int:
    session = GameSession(ns.difficulty, store=store)
    offset = 1 if ns.one_based else 0

    def say(msg: str = "") -> None:
        print(msg, file=stdout, flush=True)

    say(f"You are {HUMAN_MARK}, the computer is {AI_MARK} ({ns.difficulty}). Type q to quit.")
    while True:
        say(render_board(session.board, ns.one_based))
        if session.is_over:
            outcome = session.result
            say("IT'S A DRAW!" if outcome == DRAW else f"{outcome} WINS! line={list(session.winning_line)}")
            say("Play again? [y/N]")
            answer = stdin.readline()
            if answer.strip().lower() in ("y", "yes"):
                session.reset()
                continue
            return 0
        if session.human_to_move:
            say("YOUR TURN")
            line = stdin.readline()
            if not line or line.strip().lower() in ("q", "quit"):
                return 0
            try:
                session.play_human(int(line.strip()) - offset)
            except ValueError as e:
                # IllegalMoveError is a ValueError too
                say(f"Invalid move: {e}")
        else:
            say("AI THINKING...")
            if ns.think_delay > 0:
                time.sleep(ns.think_delay)
            idx = session.play_ai()
            if idx == NO_MOVE:
                logging.error("Computer found no legal move")
                return 1


def main(argv: list[str] | None = None, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("neon-crosses"), file=stdout)
        except Exception:
            print("unknown", file=stdout)
        return 0

    _set_global_seed(getattr(ns, "seed", None))
    store = JsonStatsStore(ns.stats_file if ns.stats_file is not None else stats_file())

    if ns.cmd == "play":
        if ns.think_delay < 0:
            logging.error("Think delay must be >= 0: %s", ns.think_delay)
            return 2
        return _play(ns, MemoryStatsStore() if ns.no_stats else store, stdin, stdout)

    if ns.cmd == "evaluate":
        b = _parse_board(ns.board)
        if b is None:
            return 2
        line = winning_line(b)
        print(f"outcome={evaluate(b) or 'IN_PROGRESS'} line={list(line) if line else None}", file=stdout)
        return 0

    if ns.cmd == "move":
        b = _parse_board(ns.board)
        if b is None:
            return 2
        if evaluate(b) is not None:
            logging.info("Game is already over: %s", evaluate(b))
            idx = NO_MOVE
        else:
            idx = select_move(b, ns.mark, ns.difficulty)
        logging.debug("board=%s difficulty=%s mark=%s", serialize_board(b), ns.difficulty, ns.mark)
        print(f"move={idx}", file=stdout)
        return 0

    if ns.cmd == "stats":
        if ns.reset:
            try:
                store.reset()
            except OSError as e:
                logging.error("Could not reset stats in %s: %s", store.path, e)
                return 2
            logging.info("Stats reset in %s", store.path)
        data = store.load()
        if ns.json:
            print(json.dumps(stats_to_dict(data), indent=2), file=stdout)
            return 0
        for d in DIFFICULTIES:
            print(_format_stats_line(d.capitalize(), data[d]), file=stdout)
        print(_format_stats_line("Overall", total_stats(data)), file=stdout)
        return 0

    if ns.cmd == "benchmark":
        if ns.games <= 0:
            logging.error("--games must be positive: %s", ns.games)
            return 2
        res = run_benchmark(BenchmarkArgs(
            x_tier=ns.x_tier,
            o_tier=ns.o_tier,
            games=ns.games,
            seed=ns.seed,
            tracking=ns.tracking,
            log_dir=ns.log_dir if ns.log_dir is not None else runs_dir(),
        ))
        print(f"x={res.x_tier} o={res.o_tier} games={res.games}", file=stdout)
        for key, (rate, half) in res.rates.items():
            print(f"{key}={rate:.3f}+/-{half:.3f}", file=stdout)
        print(f"mean_plies={res.mean_plies:.2f}", file=stdout)
        return 0

    parser.print_help(stdout)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
