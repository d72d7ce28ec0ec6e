"""Translate pointer positions on the drawing surface into board cells."""

from typing import Optional, Tuple

BORDER = 1


def _as_pair(value):
    if isinstance(value, int):
        return value, value
    return value


def map_pointer(pointer, origin, cell_size, board_size, border: int = BORDER) -> Optional[Tuple[int, int]]:
    """Return the (col, row) under ``pointer``, or None when it is off the board.

    ``origin`` is where the board frame starts, ``border`` the frame inset before the
    first cell and ``cell_size`` the footprint of one cell (an int or a (w, h) pair).
    """
    px, py = pointer
    ox, oy = origin
    cw, ch = _as_pair(cell_size)
    cols, rows = board_size
    if cw <= 0 or ch <= 0:
        return None

    dx = px - ox - border
    dy = py - oy - border
    if dx < 0 or dy < 0:
        return None

    col, row = dx // cw, dy // ch
    if col >= cols or row >= rows:
        return None
    return col, row


def cell_origin(col: int, row: int, origin, cell_size, border: int = BORDER) -> Tuple[int, int]:
    cw, ch = _as_pair(cell_size)
    ox, oy = origin
    return ox + border + col * cw, oy + border + row * ch


def cells_that_fit(area, cell_size, border: int = BORDER) -> Tuple[int, int]:
    """How many whole cells fit in a drawing area of ``area`` (width, height)."""
    cw, ch = _as_pair(cell_size)
    width, height = area
    return max(0, (width - 2 * border) // cw), max(0, (height - 2 * border) // ch)
