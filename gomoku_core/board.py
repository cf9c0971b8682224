"""
Board state and win detection
"""
from contextlib import contextmanager
from enum import IntEnum
from typing import Iterator, List, Tuple

import numpy as np

from .config import BOARD_SIZE, CANDIDATE_RADIUS, WIN_LENGTH
from .errors import ConfigurationError
from .game_engine import candidate_moves, check_win_at, is_board_full


class Mark(IntEnum):
    """Occupant of a cell. The integer value is the wire code (0/1/2)."""
    EMPTY = 0
    BLACK = 1
    WHITE = 2

    @property
    def opponent(self) -> "Mark":
        if self is Mark.EMPTY:
            raise ValueError("EMPTY has no opponent")
        return Mark.WHITE if self is Mark.BLACK else Mark.BLACK


SYMBOLS = {Mark.EMPTY: '·', Mark.BLACK: '●', Mark.WHITE: '○'}


class Board:
    """
    N x N grid of marks.

    The grid changes only through `place`; placing EMPTY clears a cell,
    which is how moves are taken back.
    """

    def __init__(self, size=BOARD_SIZE, win_length=WIN_LENGTH):
        if size < 1:
            raise ConfigurationError("board size must be positive", context={"size": size})
        if win_length < 1:
            raise ConfigurationError("win length must be positive", context={"win_length": win_length})
        self.size = size
        self.win_length = win_length
        self._grid = np.zeros((size, size), dtype=np.int8)
        self._view = self._grid.view()
        self._view.flags.writeable = False

    def reset(self):
        """Clears every cell."""
        self._grid[:, :] = Mark.EMPTY

    def in_bounds(self, row, col) -> bool:
        """True for integer coordinates on the board."""
        if not isinstance(row, (int, np.integer)) or not isinstance(col, (int, np.integer)):
            return False
        return 0 <= row < self.size and 0 <= col < self.size

    def get(self, row, col) -> Mark:
        """Mark at (row, col); EMPTY for coordinates off the board."""
        if not self.in_bounds(row, col):
            return Mark.EMPTY
        return Mark(int(self._grid[row, col]))

    def place(self, row, col, mark) -> bool:
        """
        Puts `mark` on (row, col).

        Fails without touching the grid if the cell is off the board, or if
        a stone is placed on an occupied cell. Placing EMPTY always succeeds
        on an in-range cell.

        Returns:
            True if the grid now holds `mark` at (row, col)
        """
        try:
            mark = Mark(mark)
        except ValueError:
            return False
        if not self.in_bounds(row, col):
            return False
        if mark is not Mark.EMPTY and self._grid[row, col] != Mark.EMPTY:
            return False
        self._grid[row, col] = mark
        return True

    def check_win(self, row, col, mark) -> bool:
        """True if `mark` at (row, col) completes a run of `win_length` or more."""
        if not self.in_bounds(row, col):
            return False
        return bool(check_win_at(self._grid, row, col, int(mark), self.win_length))

    def is_full(self) -> bool:
        return bool(is_board_full(self._grid))

    def is_empty(self) -> bool:
        return not self._grid.any()

    def stone_count(self) -> int:
        return int(np.count_nonzero(self._grid))

    def candidates(self, radius=CANDIDATE_RADIUS) -> List[Tuple[int, int]]:
        """Empty cells within `radius` of a stone, or the center on an empty board."""
        return [(int(r), int(c)) for r, c in candidate_moves(self._grid, radius)]

    @contextmanager
    def hypothetical(self, row, col, mark) -> Iterator[bool]:
        """
        Temporarily places `mark` on an empty cell.

        Yields whether the stone was placed; the cell is cleared again on
        exit, even if the body raises. Nothing is placed (and nothing is
        reverted) when the cell is occupied or off the board.
        """
        placed = self.get(row, col) is Mark.EMPTY and self.place(row, col, mark)
        try:
            yield placed
        finally:
            if placed:
                self._grid[row, col] = Mark.EMPTY

    @property
    def view(self) -> np.ndarray:
        """Read-only view of the live grid, for the scoring kernels."""
        return self._view

    @property
    def grid(self) -> np.ndarray:
        """Copy of the grid."""
        return self._grid.copy()

    def render(self) -> str:
        lines = ['   ' + ''.join(f'{c:2} ' for c in range(self.size))]
        for r in range(self.size):
            cells = ''.join(f' {SYMBOLS[Mark(int(v))]} ' for v in self._grid[r])
            lines.append(f'{r:2} {cells}')
        return '\n'.join(lines)

    def __repr__(self):
        return f"Board(size={self.size}, win_length={self.win_length}, stones={self.stone_count()})"
