"""
Shared fixtures: deterministic boards and a controllable clock.
"""
import random

import matplotlib
import pytest

matplotlib.use("Agg")

from game_logic import Board, Cell, Difficulty, place_mine  # noqa: E402


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_board(clock):
    """Build a board whose grid has mines exactly at the given (x, y) positions."""
    def factory(width, height, mines, difficulty=Difficulty.EASY, on_win=None):
        board = Board(difficulty, rng=random.Random(0), clock=clock, on_win=on_win)
        grid = [[Cell() for _ in range(width)] for _ in range(height)]
        for x, y in mines:
            place_mine(grid, x, y)
        board.grid = grid
        return board

    return factory
