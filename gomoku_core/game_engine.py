"""
Game Engine - line scanning kernels
Numba @njit optimized functions over an int8 grid (0 = empty, 1 = black, 2 = white)
"""

import numpy as np
from numba import njit


@njit(cache=True)
def run_length(grid, row, col, dr, dc, mark):
    """
    Counts consecutive cells equal to `mark` walking from (row, col)
    in direction (dr, dc). The starting cell itself is not counted.

    Returns:
        int: number of matching cells before the first out-of-range
        or non-matching cell
    """
    board_size = grid.shape[0]
    count = 0
    r, c = row + dr, col + dc
    while 0 <= r < board_size and 0 <= c < board_size and grid[r, c] == mark:
        count += 1
        r += dr
        c += dc
    return count


@njit(cache=True)
def line_shape(grid, row, col, dr, dc, mark):
    """
    Measures the run through (row, col) along one axis, assuming `mark`
    stands on (row, col). The grid is not modified.

    Args:
        grid: board array
        row, col: anchor cell
        dr, dc: axis direction, one of (0, 1), (1, 0), (1, 1), (1, -1)
        mark: 1 or 2

    Returns:
        (count, open_ends): run length including the anchor, and how many
        of the two cells just past the run are in range and empty (0, 1 or 2)
    """
    board_size = grid.shape[0]
    count = 1
    open_ends = 0

    r, c = row + dr, col + dc
    while 0 <= r < board_size and 0 <= c < board_size and grid[r, c] == mark:
        count += 1
        r += dr
        c += dc
    if 0 <= r < board_size and 0 <= c < board_size and grid[r, c] == 0:
        open_ends += 1

    r, c = row - dr, col - dc
    while 0 <= r < board_size and 0 <= c < board_size and grid[r, c] == mark:
        count += 1
        r -= dr
        c -= dc
    if 0 <= r < board_size and 0 <= c < board_size and grid[r, c] == 0:
        open_ends += 1

    return count, open_ends


@njit(cache=True)
def check_win_at(grid, row, col, mark, win_length):
    """
    Checks whether the stone just placed at (row, col) completes a run of
    at least `win_length` along any of the four axes. Overlines win.

    Returns:
        bool
    """
    if mark == 0:
        return False
    board_size = grid.shape[0]
    if not (0 <= row < board_size and 0 <= col < board_size):
        return False

    directions = ((0, 1), (1, 0), (1, 1), (1, -1))
    for dr, dc in directions:
        count = 1
        count += run_length(grid, row, col, dr, dc, mark)
        count += run_length(grid, row, col, -dr, -dc, mark)
        if count >= win_length:
            return True
    return False


@njit(cache=True)
def find_winner(grid, win_length):
    """
    Scans the whole board for a qualifying run.

    Returns:
        0 (no winner), 1 (black), 2 (white)
    """
    board_size = grid.shape[0]
    for row in range(board_size):
        for col in range(board_size):
            mark = grid[row, col]
            if mark == 0:
                continue
            if check_win_at(grid, row, col, mark, win_length):
                return mark
    return 0


@njit(cache=True)
def candidate_moves(grid, radius=2):
    """
    Returns empty cells near existing stones.

    Args:
        grid: board array
        radius: Chebyshev distance from any stone (inclusive)

    Returns:
        list of (row, col), de-duplicated, in first-seen row-major order.
        On an empty board, only the center cell.
    """
    board_size = grid.shape[0]
    moves = []

    has_stone = False
    for row in range(board_size):
        for col in range(board_size):
            if grid[row, col] != 0:
                has_stone = True
                break
        if has_stone:
            break

    if not has_stone:
        center = board_size // 2
        return [(center, center)]

    seen = np.zeros((board_size, board_size), dtype=np.bool_)
    for row in range(board_size):
        for col in range(board_size):
            if grid[row, col] == 0:
                continue
            for dr in range(-radius, radius + 1):
                for dc in range(-radius, radius + 1):
                    nr, nc = row + dr, col + dc
                    if (0 <= nr < board_size and 0 <= nc < board_size and
                            grid[nr, nc] == 0 and not seen[nr, nc]):
                        seen[nr, nc] = True
                        moves.append((nr, nc))

    return moves


@njit(cache=True)
def is_board_full(grid):
    return np.sum(grid == 0) == 0
