"""
A single human-vs-computer game and the bookkeeping around it.

The human is always X and moves first; the computer plays O with the policy
of the chosen difficulty tier. The session owns the board, checks move
legality (the policies do not), and records the finished game in a stats
store exactly once.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .game_basics import DRAW, O, X, apply_move, evaluate, new_board, serialize_board, winning_line
from .policy import DIFFICULTIES, NO_MOVE, select_move
from .stats import DRAW_RESULT, LOSS, WIN, StatsStore, record_result

logger = logging.getLogger(__name__)

HUMAN_MARK = X
AI_MARK = O


class IllegalMoveError(ValueError):
    """Raised when a move is played on an occupied cell, out of turn, or after the game ended."""


class GameSession:
    def __init__(self, difficulty: str, store: Optional[StatsStore] = None, rng=None):
        if difficulty not in DIFFICULTIES:
            raise ValueError(f"Unknown difficulty: {difficulty}")
        self.difficulty = difficulty
        self.store = store
        self.rng = rng
        self.board: List[Optional[str]] = new_board()
        self.human_to_move = True
        self._recorded = False

    @property
    def result(self) -> Optional[str]:
        return evaluate(self.board)

    @property
    def is_over(self) -> bool:
        return self.result is not None

    @property
    def winning_line(self) -> Optional[Tuple[int, int, int]]:
        return winning_line(self.board)

    def reset(self) -> None:
        self.board = new_board()
        self.human_to_move = True
        self._recorded = False

    def _apply(self, index: int, mark: str) -> None:
        if self.is_over:
            raise IllegalMoveError("Game is already over")
        if not isinstance(index, int) or not 0 <= index <= 8:
            raise IllegalMoveError(f"Cell index out of range: {index!r}")
        if self.board[index] is not None:
            raise IllegalMoveError(f"Cell {index} is already taken by {self.board[index]}")
        self.board = apply_move(self.board, index, mark)
        logger.debug("%s -> %d board=%s", mark, index, serialize_board(self.board))
        if self.is_over:
            self._finish()

    def play_human(self, index: int) -> Optional[str]:
        if not self.human_to_move:
            raise IllegalMoveError("It is not the human player's turn")
        self._apply(index, HUMAN_MARK)
        self.human_to_move = False
        return self.result

    def play_ai(self) -> int:
        """Let the computer move; returns the chosen cell or NO_MOVE."""
        if self.human_to_move:
            raise IllegalMoveError("It is not the computer's turn")
        if self.is_over:
            return NO_MOVE
        index = select_move(self.board, AI_MARK, self.difficulty, self.rng)
        if index == NO_MOVE:
            return NO_MOVE
        self._apply(index, AI_MARK)
        self.human_to_move = True
        return index

    def _finish(self) -> None:
        if self._recorded:
            return
        self._recorded = True
        outcome = self.result
        if outcome == DRAW:
            res = DRAW_RESULT
        elif outcome == HUMAN_MARK:
            res = WIN
        else:
            res = LOSS
        logger.info("Game over on %s: %s (line=%s)", self.difficulty, outcome, self.winning_line)
        if self.store is None:
            return
        try:
            self.store.save(record_result(self.store.load(), self.difficulty, res))
        except OSError as e:
            logger.warning("Could not record result for %s: %s: %s", self.difficulty, type(e).__name__, e)
