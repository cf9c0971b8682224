"""
Shared pytest fixtures.

Board and session fixtures are function-scoped so every test starts from an
empty position.
"""
import os
import sys

import numpy as np
import pytest

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from gomoku_core import Board, GameMode, ManualScheduler, Mark, MoveSelector, TurnSession  # noqa: E402


def place_all(board, cells, mark):
    for row, col in cells:
        assert board.place(row, col, mark), f"could not place {mark} at {(row, col)}"


def drawn_pattern(size=15):
    """
    Mark for every cell of a full board with no run of five anywhere.

    Rows repeat BBWW shifted by two per row: columns alternate, diagonals
    and rows never exceed runs of two. On 15x15 black gets 113 cells and
    white 112, so the board can be filled by alternating moves.
    """
    return {
        (r, c): Mark.BLACK if (c + 2 * r) % 4 < 2 else Mark.WHITE
        for r in range(size)
        for c in range(size)
    }


def alternating_fill_order(size=15):
    pattern = drawn_pattern(size)
    blacks = [cell for cell, mark in pattern.items() if mark is Mark.BLACK]
    whites = [cell for cell, mark in pattern.items() if mark is Mark.WHITE]
    order = []
    for i, black in enumerate(blacks):
        order.append(black)
        if i < len(whites):
            order.append(whites[i])
    return order


@pytest.fixture
def board():
    return Board()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def selector(rng):
    return MoveSelector(rng=rng)


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def make_session(selector):
    """Factory for sessions; pass scheduler=... for delayed synthetic moves."""
    def _make(mode=GameMode.PVP, **kwargs):
        kwargs.setdefault("selector", selector)
        session = TurnSession(mode, **kwargs)
        session.new_game(mode)
        return session
    return _make
