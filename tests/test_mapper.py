import pytest

from mapper import cell_origin, cells_that_fit, map_pointer

ORIGIN = (10, 5)
CELL = (3, 3)
BOARD = (4, 2)


def test_first_cell_starts_after_border():
    assert map_pointer((11, 6), ORIGIN, CELL, BOARD) == (0, 0)
    assert map_pointer((13, 8), ORIGIN, CELL, BOARD) == (0, 0)
    assert map_pointer((14, 9), ORIGIN, CELL, BOARD) == (1, 1)


@pytest.mark.parametrize("pointer", [(10, 6), (11, 5), (0, 0), (-4, 7), (9, 100)])
def test_left_of_or_above_board_is_none(pointer):
    assert map_pointer(pointer, ORIGIN, CELL, BOARD) is None


def test_last_cell_span_and_beyond():
    # column 3 occupies dx 9..11, row 1 occupies dy 3..5
    for px in (20, 21, 22):
        assert map_pointer((px, 11), ORIGIN, CELL, BOARD) == (3, 1)
    assert map_pointer((23, 6), ORIGIN, CELL, BOARD) is None
    assert map_pointer((11, 12), ORIGIN, CELL, BOARD) is None


def test_square_cell_size_and_custom_border():
    assert map_pointer((5, 5), (0, 0), 5, (2, 2), border=0) == (1, 1)
    assert map_pointer((10, 0), (0, 0), 5, (2, 2), border=0) is None


def test_degenerate_cell_size_is_none():
    assert map_pointer((50, 50), (0, 0), 0, (10, 10)) is None


def test_cell_origin_maps_back_to_cell():
    for col in range(BOARD[0]):
        for row in range(BOARD[1]):
            assert map_pointer(cell_origin(col, row, ORIGIN, CELL), ORIGIN, CELL, BOARD) == (col, row)


def test_cells_that_fit():
    assert cells_that_fit((100, 50), 3) == (32, 16)
    assert cells_that_fit((1, 1), 3) == (0, 0)
