import random

import pytest

from game_logic import (
    Cell,
    Difficulty,
    choose_layout,
    generate_grid,
    place_mine,
    visit_neighbors,
)


def count_adjacent_mines(grid, x, y):
    total = 0
    for ny in range(max(0, y - 1), min(len(grid), y + 2)):
        for nx in range(max(0, x - 1), min(len(grid[0]), x + 2)):
            if (nx, ny) != (x, y) and grid[ny][nx].is_mine:
                total += 1
    return total


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_generated_grid_has_exact_mines_and_counts(difficulty):
    for seed in range(5):
        width, height = difficulty.size
        grid = generate_grid(difficulty, (width, height), random.Random(seed))

        assert len(grid) == height
        assert all(len(row) == width for row in grid)
        assert sum(cell.is_mine for row in grid for cell in row) == difficulty.mines
        for y in range(height):
            for x in range(width):
                assert grid[y][x].neighbor_mines == count_adjacent_mines(grid, x, y)


def test_generated_grid_starts_hidden():
    grid = generate_grid(Difficulty.EASY, (10, 8), random.Random(1))
    for row in grid:
        for cell in row:
            assert cell.state.name == "HIDDEN"
            assert cell.highlighted is False


def test_same_seed_same_grid():
    a = generate_grid(Difficulty.MEDIUM, (18, 14), random.Random(7))
    b = generate_grid(Difficulty.MEDIUM, (18, 14), random.Random(7))
    assert [[c.is_mine for c in row] for row in a] == [[c.is_mine for c in row] for row in b]


def test_too_many_mines_rejected():
    with pytest.raises(ValueError):
        generate_grid(Difficulty.EASY, (3, 3))
    with pytest.raises(ValueError):
        generate_grid(Difficulty.EASY, (5, 2))


def test_walker_corner_visits_three_in_fixed_order():
    grid = [[Cell() for _ in range(3)] for _ in range(3)]
    visited = visit_neighbors(grid, 0, 0, lambda cell: True)
    assert visited == [(0, 1), (1, 0), (1, 1)]


def test_walker_center_visits_all_eight():
    grid = [[Cell() for _ in range(3)] for _ in range(3)]
    visited = visit_neighbors(grid, 1, 1, lambda cell: True)
    assert visited == [(1, 0), (1, 2), (0, 1), (2, 1), (2, 2), (0, 2), (2, 0), (0, 0)]


def test_walker_returns_only_matches_and_can_mutate():
    grid = [[Cell() for _ in range(4)] for _ in range(2)]
    place_mine(grid, 3, 0)

    def clear_mine(cell):
        was_mine = cell.is_mine
        cell.is_mine = False
        return was_mine

    assert visit_neighbors(grid, 2, 1, clear_mine) == [(3, 0)]
    assert not grid[0][3].is_mine


def test_walker_on_single_cell_grid():
    grid = [[Cell()]]
    assert visit_neighbors(grid, 0, 0, lambda cell: True) == []


def test_place_mine_bumps_neighbors_only():
    grid = [[Cell() for _ in range(3)] for _ in range(3)]
    place_mine(grid, 1, 1)
    assert grid[1][1].neighbor_mines == 0
    assert all(grid[y][x].neighbor_mines == 1 for y in range(3) for x in range(3) if (x, y) != (1, 1))


def test_difficulty_cycles_in_order():
    assert Difficulty.EASY.next() is Difficulty.MEDIUM
    assert Difficulty.MEDIUM.next() is Difficulty.HARD
    assert Difficulty.HARD.next() is Difficulty.EASY
    assert Difficulty.EASY.previous() is Difficulty.HARD
    assert Difficulty.EASY < Difficulty.MEDIUM < Difficulty.HARD


def test_difficulty_labels():
    assert [d.label for d in Difficulty] == ["Easy", "Medium", "Hard"]
    assert Difficulty.from_label("Hard") is Difficulty.HARD
    assert Difficulty.from_label("hard") is None
    assert [d.mines for d in Difficulty] == [10, 40, 99]


@pytest.mark.parametrize("render_size,expected", [
    (None, (18, 14)),
    ((40, 40), (18, 14)),
    ((14, 18), (14, 18)),
    ((21, 13), (21, 12)),
    ((36, 7), (36, 7)),
    ((5, 5), (18, 14)),
])
def test_medium_layout_adapts_to_render_area(render_size, expected):
    assert choose_layout(Difficulty.MEDIUM, render_size) == expected


def test_every_layout_fits_its_mines():
    from game_logic import LAYOUTS
    for difficulty, layouts in LAYOUTS.items():
        for w, h in layouts:
            assert w * h > difficulty.mines
