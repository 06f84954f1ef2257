"""
Tactics: one-ply probes for immediate wins and blocks.
Teaching notes:
- Each probe places a mark on a copy of the board; the caller's board is untouched.
- Results are in ascending index order so the first entry is the lowest cell.
"""
from typing import List, Optional

from .game_basics import apply_move, get_winner, other_mark


def immediate_winning_moves(board: List[Optional[str]], mark: str) -> List[int]:
    wins: List[int] = []
    for i, v in enumerate(board):
        if v is not None:
            continue
        if get_winner(apply_move(board, i, mark)) == mark:
            wins.append(i)
    return wins


def blocking_moves(board: List[Optional[str]], mark: str) -> List[int]:
    """Cells where the opponent of ``mark`` would win on their next move."""
    return immediate_winning_moves(board, other_mark(mark))
