import logging
import random
import time
from dataclasses import dataclass, replace
from datetime import timedelta
from enum import Enum, IntEnum
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class Difficulty(IntEnum):
    EASY = 0
    MEDIUM = 1
    HARD = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def mines(self) -> int:
        return MINE_COUNTS[self]

    @property
    def size(self) -> Tuple[int, int]:
        return LAYOUTS[self][0]

    @classmethod
    def from_label(cls, label: str) -> Optional["Difficulty"]:
        for difficulty in cls:
            if difficulty.label == label:
                return difficulty
        return None

    def next(self) -> "Difficulty":
        members = list(Difficulty)
        return members[(members.index(self) + 1) % len(members)]

    def previous(self) -> "Difficulty":
        members = list(Difficulty)
        return members[(members.index(self) - 1) % len(members)]


MINE_COUNTS = {
    Difficulty.EASY: 10,
    Difficulty.MEDIUM: 40,
    Difficulty.HARD: 99,
}

# (width, height) candidates, most preferred first. Each is also tried transposed.
LAYOUTS = {
    Difficulty.EASY: [(10, 8)],
    Difficulty.MEDIUM: [(18, 14), (21, 12), (28, 9), (36, 7)],
    Difficulty.HARD: [(30, 16), (24, 20), (32, 15), (40, 12), (48, 10), (60, 8)],
}


def choose_layout(difficulty: Difficulty, render_size=None) -> Tuple[int, int]:
    """Pick the board dimensions for a difficulty given the cells available.

    ``render_size`` is ``(columns, rows)`` that the view can display; ``None`` means
    unlimited. Falls back to the reference layout when nothing fits.
    """
    if render_size is None:
        return difficulty.size
    max_w, max_h = render_size
    for w, h in LAYOUTS[difficulty]:
        if w <= max_w and h <= max_h:
            return w, h
        if h <= max_w and w <= max_h:
            return h, w
    logger.warning("No %s layout fits %dx%d cells, using %dx%d",
                   difficulty.label, max_w, max_h, *difficulty.size)
    return difficulty.size


class TileState(Enum):
    HIDDEN = "hidden"
    QUESTION = "question"
    MARKED = "marked"
    VISIBLE = "visible"


class Cell:
    def __init__(self):
        self.is_mine: bool = False
        self.state: TileState = TileState.HIDDEN
        self.neighbor_mines: int = 0
        self.highlighted: bool = False

    def __repr__(self):
        return f"Cell(mine={self.is_mine}, state={self.state.name}, near={self.neighbor_mines})"


Grid = List[List[Cell]]

# up, down, left, right, down-right, down-left, up-right, up-left
NEIGHBOR_OFFSETS = ((0, -1), (0, 1), (-1, 0), (1, 0), (1, 1), (-1, 1), (1, -1), (-1, -1))


def in_bounds(grid: Grid, x: int, y: int) -> bool:
    return 0 <= y < len(grid) and 0 <= x < len(grid[y])


def visit_neighbors(grid: Grid, x: int, y: int, visit: Callable[[Cell], bool]) -> List[Tuple[int, int]]:
    """Call ``visit`` on each in-bounds neighbor of (x, y).

    Returns the coordinates of the neighbors for which ``visit`` returned True.
    """
    matching = []
    for dx, dy in NEIGHBOR_OFFSETS:
        nx, ny = x + dx, y + dy
        if not in_bounds(grid, nx, ny):
            continue
        if visit(grid[ny][nx]):
            matching.append((nx, ny))
    return matching


def _bump_count(cell: Cell) -> bool:
    cell.neighbor_mines += 1
    return False


def place_mine(grid: Grid, x: int, y: int):
    grid[y][x].is_mine = True
    visit_neighbors(grid, x, y, _bump_count)


def generate_grid(difficulty: Difficulty, dimensions: Tuple[int, int], rng: Optional[random.Random] = None) -> Grid:
    width, height = dimensions
    mines = difficulty.mines
    if width * height <= mines:
        raise ValueError(f"{width}x{height} board cannot hold {mines} mines")
    rng = rng or random.Random()

    grid = [[Cell() for _ in range(width)] for _ in range(height)]
    while mines > 0:
        x = rng.randrange(width)
        y = rng.randrange(height)
        if grid[y][x].is_mine:
            continue
        place_mine(grid, x, y)
        mines -= 1
    return grid


@dataclass(frozen=True)
class NotStarted:
    pass


@dataclass(frozen=True)
class InProgress:
    started_at: float


@dataclass(frozen=True)
class Won:
    started_at: float
    ended_at: float


@dataclass(frozen=True)
class Lost:
    started_at: float
    ended_at: float
    epicenter: Tuple[int, int]
    animation_progress: float = 1.0
    animation_done: bool = False


@dataclass(frozen=True)
class Score:
    difficulty: Difficulty
    time: timedelta

    @property
    def seconds(self) -> int:
        return int(self.time.total_seconds())

    def as_line(self) -> str:
        return f"{self.difficulty.label}: {self.seconds}"


@dataclass(frozen=True)
class CellView:
    """What the view layer needs to draw one cell."""
    kind: str
    number: int = 0
    highlighted: bool = False


def circle_points(center, x, y):
    cx, cy = center
    points = []
    if x == 0:
        points += [(cx, cy + y), (cx, cy - y), (cx + y, cy), (cx - y, cy)]
    if x == y:
        points += [(cx + x, cy + y), (cx - x, cy + y), (cx + x, cy - y), (cx - x, cy - y)]
    elif x < y:
        points += [(cx + x, cy + y), (cx - x, cy + y), (cx + x, cy - y), (cx - x, cy - y)]
        points += [(cx + y, cy + x), (cx - y, cy + x), (cx + y, cy - x), (cx - y, cy - x)]
    return points


def circle_perimeter(center, radius: float):
    """Midpoint circle algorithm; may contain duplicates and negative coordinates."""
    x = 0
    y = int(radius)
    p = (5 - 4 * radius) / 4
    points = circle_points(center, x, y)
    while x < y:
        x += 1
        if p < 0:
            p += 2 * x + 1
        else:
            y -= 1
            p += 2 * (x - y) + 1
        points += circle_points(center, x, y)
    return points


class Board:
    def __init__(self, difficulty=Difficulty.MEDIUM, render_size=None, rng=None,
                 clock: Callable[[], float] = time.time, on_win=None):
        self.difficulty = difficulty
        self.render_size = render_size
        self.rng = rng or random.Random()
        self.clock = clock
        self.on_win = on_win
        self.phase = NotStarted()
        self.score = None
        self.grid: Grid = self._new_grid()

    def _new_grid(self) -> Grid:
        return generate_grid(self.difficulty, choose_layout(self.difficulty, self.render_size), self.rng)

    @property
    def width(self) -> int:
        return len(self.grid[0])

    @property
    def height(self) -> int:
        return len(self.grid)

    @property
    def is_over(self) -> bool:
        return isinstance(self.phase, (Won, Lost))

    @property
    def first_move_time(self) -> Optional[float]:
        return getattr(self.phase, "started_at", None)

    @property
    def end_time(self) -> Optional[float]:
        return getattr(self.phase, "ended_at", None)

    def cell(self, x: int, y: int) -> Optional[Cell]:
        if not in_bounds(self.grid, x, y):
            return None
        return self.grid[y][x]

    def cells(self):
        for row in self.grid:
            yield from row

    def elapsed(self) -> float:
        if isinstance(self.phase, NotStarted):
            return 0.0
        end = self.end_time if self.end_time is not None else self.clock()
        return max(0.0, end - self.phase.started_at)

    def mines_left(self) -> int:
        mines = marked = 0
        for cell in self.cells():
            mines += cell.is_mine
            marked += cell.state is TileState.MARKED
        return mines - marked

    def _start(self):
        if isinstance(self.phase, NotStarted):
            self.phase = InProgress(self.clock())
            logger.info("%s game started on a %dx%d board", self.difficulty.label, self.width, self.height)

    def resize(self, render_size):
        self.render_size = render_size
        if isinstance(self.phase, NotStarted):
            self.grid = self._new_grid()

    def left_click(self, x: int, y: int):
        tile = self.cell(x, y)
        if self.is_over or tile is None or tile.state is TileState.MARKED:
            return

        if isinstance(self.phase, NotStarted):
            rerolls = 0
            while tile.is_mine or tile.neighbor_mines > 0:
                self.grid = generate_grid(self.difficulty, (self.width, self.height), self.rng)
                tile = self.grid[y][x]
                rerolls += 1
            logger.debug("Opening at (%d, %d) needed %d re-rolls", x, y, rerolls)
            self._start()

        if tile.is_mine:
            tile.state = TileState.VISIBLE
            self.phase = Lost(self.phase.started_at, self.clock(), (x, y))
            logger.info("Mine hit at (%d, %d) after %.1fs", x, y, self.elapsed())
        elif tile.state is not TileState.VISIBLE:
            tile.state = TileState.VISIBLE
            if tile.neighbor_mines == 0:
                self.flood_fill(x, y)

    def flood_fill(self, x: int, y: int):
        def open_tile(tile):
            if tile.state is TileState.VISIBLE:
                return False
            tile.state = TileState.VISIBLE
            return not tile.is_mine and tile.neighbor_mines == 0

        pending = [(x, y)]
        while pending:
            cx, cy = pending.pop()
            pending.extend(visit_neighbors(self.grid, cx, cy, open_tile))

    def chord_click(self, x: int, y: int):
        tile = self.cell(x, y)
        if self.is_over or tile is None or tile.state is not TileState.VISIBLE:
            return

        pending = [(x, y)]
        while pending and not self.is_over:
            cx, cy = pending.pop()
            tile = self.grid[cy][cx]
            marked = visit_neighbors(self.grid, cx, cy, lambda t: t.state is TileState.MARKED)
            if len(marked) != tile.neighbor_mines:
                continue
            closed = visit_neighbors(
                self.grid, cx, cy,
                lambda t: t.state not in (TileState.MARKED, TileState.VISIBLE),
            )
            for nx, ny in closed:
                self.left_click(nx, ny)
                if self.is_over:
                    break
                pending.append((nx, ny))

    def right_click(self, x: int, y: int):
        tile = self.cell(x, y)
        if self.is_over or tile is None:
            return
        self._start()
        if tile.state is TileState.MARKED:
            tile.state = TileState.HIDDEN
        elif tile.state is not TileState.VISIBLE:
            tile.state = TileState.MARKED
        self.check_win()

    def middle_click(self, x: int, y: int):
        tile = self.cell(x, y)
        if self.is_over or tile is None:
            return
        self._start()
        if tile.state is TileState.HIDDEN:
            tile.state = TileState.QUESTION
        elif tile.state is TileState.QUESTION:
            tile.state = TileState.HIDDEN

    def check_win(self) -> bool:
        for tile in self.cells():
            if tile.is_mine != (tile.state is TileState.MARKED):
                return False

        self.phase = Won(self.phase.started_at, self.clock())
        for tile in self.cells():
            if not tile.is_mine:
                tile.state = TileState.VISIBLE
        self.score = Score(self.difficulty, timedelta(seconds=self.elapsed()))
        logger.info("%s game won in %ds", self.difficulty.label, self.score.seconds)
        if self.on_win is not None:
            self.on_win(self.score)
        return True

    def clear_highlights(self):
        for tile in self.cells():
            tile.highlighted = False

    def tick(self) -> bool:
        phase = self.phase
        if not isinstance(phase, Lost) or phase.animation_done:
            return False
        self.clear_highlights()

        touched = False
        for x, y in circle_perimeter(phase.epicenter, phase.animation_progress):
            tile = self.cell(x, y)
            if tile is None:
                continue
            touched = True
            if tile.is_mine:
                tile.state = TileState.VISIBLE
            else:
                tile.highlighted = True

        if not touched:
            for tile in self.cells():
                if tile.is_mine:
                    tile.state = TileState.VISIBLE
        self.phase = replace(phase, animation_progress=phase.animation_progress + 0.25,
                             animation_done=not touched)
        return touched

    def view(self, x: int, y: int) -> Optional[CellView]:
        tile = self.cell(x, y)
        if tile is None:
            return None
        if tile.state is TileState.HIDDEN:
            kind = "hidden"
        elif tile.state is TileState.QUESTION:
            kind = "question"
        elif tile.state is TileState.MARKED:
            kind = "marked"
        elif tile.is_mine:
            kind = "mine"
        elif tile.neighbor_mines == 0:
            kind = "empty"
        else:
            return CellView("number", tile.neighbor_mines, tile.highlighted)
        return CellView(kind, 0, tile.highlighted)

    def rows(self) -> List[List[CellView]]:
        return [[self.view(x, y) for x in range(self.width)] for y in range(self.height)]

