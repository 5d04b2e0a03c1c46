"""
Pure board evaluation over a flat list of cell marks
"""
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

EMPTY = ""


def run_length(size: int) -> int:
    """Marks in a row needed to win: 3 on a 3x3 board, 4 on a 5x5 board"""
    return 4 if size == 5 else 3


@lru_cache(maxsize=None)
def winning_combinations(size: int) -> Tuple[Tuple[int, ...], ...]:
    """
    Enumerate every winning line for a board of the given size

    Lines are ordered rows first, then columns, then top-left to bottom-right
    diagonals, then top-right to bottom-left diagonals. The order matters:
    evaluate_winner reports the first satisfied line.

    Args:
        size: Board edge length

    Returns:
        Tuple of index tuples, each of length run_length(size)
    """
    length = run_length(size)
    lines: List[Tuple[int, ...]] = []

    # Rows
    for row in range(size):
        for start_col in range(size - length + 1):
            lines.append(tuple(row * size + start_col + i for i in range(length)))

    # Columns
    for col in range(size):
        for start_row in range(size - length + 1):
            lines.append(tuple((start_row + i) * size + col for i in range(length)))

    # Diagonals (top-left to bottom-right)
    for row in range(size - length + 1):
        for col in range(size - length + 1):
            lines.append(tuple((row + i) * size + col + i for i in range(length)))

    # Diagonals (top-right to bottom-left)
    for row in range(size - length + 1):
        for col in range(length - 1, size):
            lines.append(tuple((row + i) * size + col - i for i in range(length)))

    return tuple(lines)


def evaluate_winner(board: Sequence[str], size: int) -> Tuple[Optional[str], List[int]]:
    """Return (mark, line) for the first completed line, or (None, []) if nobody has won"""
    for line in winning_combinations(size):
        first = board[line[0]]
        if first == EMPTY:
            continue
        if all(board[idx] == first for idx in line):
            return first, list(line)
    return None, []


def is_draw(board: Sequence[str]) -> bool:
    # Only meaningful once evaluate_winner found no winner
    return all(cell != EMPTY for cell in board)
