"""
Self-play benchmark between difficulty tiers.

X always moves first. Each game is driven by the same loop a front end runs:
select a move, apply it, evaluate. Rates carry a 95% normal-approximation
confidence half-width.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np

from .game_basics import DRAW, O, X, apply_move, evaluate, new_board
from .policy import DIFFICULTIES, NO_MOVE, select_move
from .tracking import log_metrics, log_params, maybe_mlflow_run

logger = logging.getLogger(__name__)

Z95 = 1.96


@dataclass
class BenchmarkArgs:
    x_tier: str = "hard"
    o_tier: str = "easy"
    games: int = 1000
    seed: Optional[int] = None
    tracking: str = "none"  # or "mlflow"
    log_dir: Optional[Path] = None


@dataclass
class BenchmarkResult:
    x_tier: str
    o_tier: str
    games: int
    x_wins: int
    o_wins: int
    draws: int
    mean_plies: float
    rates: Dict[str, Tuple[float, float]]

    def as_metrics(self) -> Dict[str, float]:
        metrics: Dict[str, float] = {"mean_plies": self.mean_plies}
        for key, (rate, half) in self.rates.items():
            metrics[f"{key}_rate"] = rate
            metrics[f"{key}_ci95_half"] = half
        return metrics


def play_game(x_tier: str, o_tier: str, rng) -> Tuple[Optional[str], int]:
    """Play one AI-vs-AI game; returns (outcome, plies)."""
    board = new_board()
    tiers = {X: x_tier, O: o_tier}
    mark = X
    plies = 0
    while evaluate(board) is None:
        idx = select_move(board, mark, tiers[mark], rng)
        if idx == NO_MOVE:
            break
        board = apply_move(board, idx, mark)
        plies += 1
        mark = O if mark == X else X
    return evaluate(board), plies


def rate_ci95(hits: np.ndarray) -> Tuple[float, float]:
    if hits.size == 0:
        return (float("nan"), float("nan"))
    p = float(hits.mean())
    half = Z95 * float(np.sqrt(p * (1.0 - p) / hits.size))
    return p, half


def run_benchmark(args: BenchmarkArgs) -> BenchmarkResult:
    for tier in (args.x_tier, args.o_tier):
        if tier not in DIFFICULTIES:
            raise ValueError(f"Unknown difficulty: {tier}")
    if args.games <= 0:
        raise ValueError(f"games must be positive, got {args.games}")

    rng = random.Random(args.seed)
    outcomes: List[Optional[str]] = []
    plies = np.zeros(args.games, dtype=np.int64)
    logger.info("Playing %d games: X=%s vs O=%s", args.games, args.x_tier, args.o_tier)
    with maybe_mlflow_run(args.tracking == "mlflow", run_name="tier_benchmark", log_dir=args.log_dir) as tracked:
        if tracked:
            log_params({
                "x_tier": args.x_tier,
                "o_tier": args.o_tier,
                "games": args.games,
                "seed": args.seed,
            })
        for g in range(args.games):
            outcome, n = play_game(args.x_tier, args.o_tier, rng)
            outcomes.append(outcome)
            plies[g] = n
        results = np.array([o if o is not None else "" for o in outcomes])
        x_hits = results == X
        o_hits = results == O
        d_hits = results == DRAW
        result = BenchmarkResult(
            x_tier=args.x_tier,
            o_tier=args.o_tier,
            games=args.games,
            x_wins=int(x_hits.sum()),
            o_wins=int(o_hits.sum()),
            draws=int(d_hits.sum()),
            mean_plies=float(plies.mean()),
            rates={
                "x_win": rate_ci95(x_hits),
                "o_win": rate_ci95(o_hits),
                "draw": rate_ci95(d_hits),
            },
        )
        if tracked:
            log_metrics(result.as_metrics())
    logger.info(
        "X wins=%d O wins=%d draws=%d mean_plies=%.2f",
        result.x_wins, result.o_wins, result.draws, result.mean_plies,
    )
    return result
