"""
Move selection policies for the three difficulty tiers.

- easy: uniform random over empty cells
- medium: one coin flip per call, heuristic with probability 0.6, random otherwise
- hard: one-ply heuristic (win, block, center, random); no game-tree search

Every policy takes an optional ``rng`` exposing ``random()`` and ``choice()``
(e.g. ``random.Random``). The module-level ``random`` functions are used when
it is omitted.
"""
from __future__ import annotations

import random
from typing import List, Optional

from .game_basics import available_moves
from .tactics import blocking_moves, immediate_winning_moves

NO_MOVE = -1
CENTER = 4
MEDIUM_RANDOM_THRESHOLD = 0.4

EASY = "easy"
MEDIUM = "medium"
HARD = "hard"
DIFFICULTIES = (EASY, MEDIUM, HARD)


def _source(rng):
    return rng if rng is not None else random


def random_move(board: List[Optional[str]], rng=None) -> int:
    moves = available_moves(board)
    if not moves:
        return NO_MOVE
    return _source(rng).choice(moves)


def heuristic_move(board: List[Optional[str]], mark: Optional[str], rng=None) -> int:
    if not mark:
        return NO_MOVE
    wins = immediate_winning_moves(board, mark)
    if wins:
        return wins[0]
    blocks = blocking_moves(board, mark)
    if blocks:
        return blocks[0]
    if board[CENTER] is None:
        return CENTER
    return random_move(board, rng)


def medium_move(board: List[Optional[str]], mark: Optional[str], rng=None) -> int:
    src = _source(rng)
    if src.random() > MEDIUM_RANDOM_THRESHOLD:
        return heuristic_move(board, mark, src)
    return random_move(board, src)


def select_move(board: List[Optional[str]], mark: Optional[str], difficulty: str, rng=None) -> int:
    if difficulty == EASY:
        return random_move(board, rng)
    if difficulty == MEDIUM:
        return medium_move(board, mark, rng)
    if difficulty == HARD:
        return heuristic_move(board, mark, rng)
    raise ValueError(f"Unknown difficulty: {difficulty}")
