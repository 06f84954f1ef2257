"""neoncrosses package.

Game rules, the three computer opponents, stats persistence, and a terminal
front end for noughts and crosses.

Convenience imports are exposed for common workflows.
"""

from .game_basics import DRAW, WINNING_COMBINATIONS, evaluate, winning_line
from .policy import NO_MOVE, heuristic_move, medium_move, random_move, select_move
from .session import GameSession, IllegalMoveError
from .stats import JsonStatsStore, MemoryStatsStore

__all__ = [
    "DRAW",
    "WINNING_COMBINATIONS",
    "evaluate",
    "winning_line",
    "NO_MOVE",
    "random_move",
    "heuristic_move",
    "medium_move",
    "select_move",
    "GameSession",
    "IllegalMoveError",
    "JsonStatsStore",
    "MemoryStatsStore",
]
