"""
Game basics: board representation, serialization, rules, winner/draw checks, validity.
Teaching notes:
- State is a list of 9 cells: None=empty, "X", "O". X always starts.
- Cells are laid out row-major: 0,1,2 top row; 3,4,5 middle; 6,7,8 bottom.
- A "ply" is a half-move (one player's turn).
- The outcome is never stored; it is recomputed from the board on demand.
"""
from typing import List, Optional, Tuple

X = "X"
O = "O"
EMPTY = None
DRAW = "DRAW"

MARKS = (X, O)

WINNING_COMBINATIONS: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
)

_EMPTY_CHARS = ".-_"


def new_board() -> List[Optional[str]]:
    return [EMPTY] * 9


def serialize_board(board: List[Optional[str]]) -> str:
    return ''.join(cell if cell is not None else '.' for cell in board)


def deserialize_board(board_str: str) -> List[Optional[str]]:
    """Parse a 9-character board string such as ``"X...O...."``.

    ``X``/``O`` (any case) are marks; ``.``, ``-`` and ``_`` are empty cells.
    """
    raw = board_str.strip()
    if len(raw) != 9:
        raise ValueError(f"Board string must have 9 cells, got {len(raw)}: {board_str!r}")
    board: List[Optional[str]] = []
    for ch in raw:
        up = ch.upper()
        if up in MARKS:
            board.append(up)
        elif ch in _EMPTY_CHARS:
            board.append(EMPTY)
        else:
            raise ValueError(f"Invalid cell {ch!r} in board string {board_str!r}")
    return board


def other_mark(mark: str) -> str:
    return O if mark == X else X


def winning_line(board: List[Optional[str]]) -> Optional[Tuple[int, int, int]]:
    """First completed line in scan order (rows, columns, diagonals), or None."""
    for line in WINNING_COMBINATIONS:
        a, b, c = line
        v = board[a]
        if v is not None and v == board[b] and v == board[c]:
            return line
    return None


def get_winner(board: List[Optional[str]]) -> Optional[str]:
    line = winning_line(board)
    return board[line[0]] if line is not None else None


def evaluate(board: List[Optional[str]]) -> Optional[str]:
    """Return "X" or "O" for a won board, "DRAW" for a full board, else None."""
    w = get_winner(board)
    if w is not None:
        return w
    if EMPTY not in board:
        return DRAW
    return None


def available_moves(board: List[Optional[str]]) -> List[int]:
    return [i for i, v in enumerate(board) if v is None]


def apply_move(board: List[Optional[str]], index: int, mark: str) -> List[Optional[str]]:
    b = board[:]
    b[index] = mark
    return b


def get_piece_counts(board: List[Optional[str]]) -> Tuple[int, int]:
    return board.count(X), board.count(O)


def is_valid_state(board: List[Optional[str]]) -> bool:
    if len(board) != 9 or any(v is not None and v not in MARKS for v in board):
        return False
    x_count, o_count = get_piece_counts(board)
    if not (x_count == o_count or x_count == o_count + 1):
        return False

    # no double winners
    def count_wins(p: str) -> int:
        return sum(1 for pat in WINNING_COMBINATIONS if all(board[i] == p for i in pat))
    if count_wins(X) > 0 and count_wins(O) > 0:
        return False
    w = get_winner(board)
    if w == X and x_count != o_count + 1:
        return False
    if w == O and x_count != o_count:
        return False
    return True
