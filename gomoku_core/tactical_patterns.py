import numpy as np
from numba import njit

from .config import WIN_LENGTH
from .game_engine import line_shape

SCORE_FIVE          = 1000000
SCORE_OPEN_FOUR     = 120000
SCORE_CLOSED_FOUR   = 25000
SCORE_OPEN_THREE    = 6000
SCORE_CLOSED_THREE  = 1200
SCORE_OPEN_TWO      = 400
SCORE_CLOSED_TWO    = 120
SCORE_OPEN_ONE      = 20

SCORE_OCCUPIED      = -1000000000

BEST_AXIS_WEIGHT    = 5


@njit(cache=True)
def score_shape(count, open_ends, win_length=WIN_LENGTH):
    """Shape value of one axis, by run length relative to the win length and open ends."""
    if count >= win_length:
        return SCORE_FIVE
    missing = win_length - count
    if missing == 1:
        if open_ends == 2:
            return SCORE_OPEN_FOUR
        if open_ends == 1:
            return SCORE_CLOSED_FOUR
    elif missing == 2:
        if open_ends == 2:
            return SCORE_OPEN_THREE
        if open_ends == 1:
            return SCORE_CLOSED_THREE
    elif missing == 3:
        if open_ends == 2:
            return SCORE_OPEN_TWO
        if open_ends == 1:
            return SCORE_CLOSED_TWO
    elif missing == 4:
        if open_ends == 2:
            return SCORE_OPEN_ONE
    return 0


@njit(cache=True)
def center_bonus(row, col, board_size):
    center = board_size // 2
    return 2 * board_size - abs(row - center) - abs(col - center)


@njit(cache=True)
def score_point(grid, row, col, mark, win_length=WIN_LENGTH):
    """
    Value of putting `mark` on the empty cell (row, col), measured without
    modifying the grid.

    score = 5 * strongest axis + sum of the four axes + center bonus

    Returns:
        int, or SCORE_OCCUPIED when the cell is not an empty in-range cell
    """
    board_size = grid.shape[0]
    if not (0 <= row < board_size and 0 <= col < board_size):
        return SCORE_OCCUPIED
    if grid[row, col] != 0:
        return SCORE_OCCUPIED

    directions = ((0, 1), (1, 0), (1, 1), (1, -1))
    best = 0
    total = 0
    for dr, dc in directions:
        count, open_ends = line_shape(grid, row, col, dr, dc, mark)
        s = score_shape(count, open_ends, win_length)
        total += s
        if s > best:
            best = s

    return best * BEST_AXIS_WEIGHT + total + center_bonus(row, col, board_size)


@njit(cache=True)
def score_moves(grid, moves, mark, win_length=WIN_LENGTH):
    """Scores each row of `moves` (an (n, 2) int array) for `mark`."""
    n = moves.shape[0]
    scores = np.zeros(n, dtype=np.int64)
    for i in range(n):
        scores[i] = score_point(grid, moves[i, 0], moves[i, 1], mark, win_length)
    return scores
