"""
Cell grid shared by every stage of the cave pipeline.

A grid is a C-contiguous numpy array of shape (height, width). Helpers in this
module take (x, y) coordinates and index the array as grid[y, x].
"""

from enum import IntEnum
from typing import Iterator, List, Tuple

import numpy as np


class Cell(IntEnum):
    """State of a single grid cell."""

    FLOOR = 0
    WALL = 1


# Type Definition
Grid = np.ndarray

Coord = Tuple[int, int]

GRID_DTYPE = np.uint8

# 4-directional neighbours: (dx, dy)
NEIGHBORS_4: Tuple[Coord, ...] = ((0, -1), (-1, 0), (1, 0), (0, 1))


def new_grid(width: int, height: int, fill: Cell = Cell.WALL) -> Grid:
    """Allocate a writable grid filled with a single cell state."""
    return np.full((height, width), int(fill), dtype=GRID_DTYPE)


def freeze(grid: Grid) -> Grid:
    """Mark a grid read-only and return it.

    Stages hand frozen grids to each other so that no stage can modify an
    artifact it does not own.
    """
    grid.setflags(write=False)
    return grid


def thaw(grid: Grid) -> Grid:
    """Return a writable copy of a grid."""
    return np.array(grid, dtype=GRID_DTYPE, copy=True, order="C")


def in_bounds(grid: Grid, x: int, y: int) -> bool:
    height, width = grid.shape
    return 0 <= x < width and 0 <= y < height


def is_floor(grid: Grid, x: int, y: int) -> bool:
    """True if (x, y) is inside the grid and a floor cell."""
    return in_bounds(grid, x, y) and grid[y, x] == Cell.FLOOR


def enforce_border_walls(grid: Grid) -> None:
    """Set every cell on the outer border to WALL, in place."""
    grid[0, :] = Cell.WALL
    grid[-1, :] = Cell.WALL
    grid[:, 0] = Cell.WALL
    grid[:, -1] = Cell.WALL


def floor_count(grid: Grid) -> int:
    return int(np.count_nonzero(grid == Cell.FLOOR))


def iter_floor_cells(grid: Grid) -> Iterator[Coord]:
    """Yield (x, y) of every floor cell in row-major order."""
    ys, xs = np.nonzero(grid == Cell.FLOOR)
    for y, x in zip(ys.tolist(), xs.tolist()):
        yield (x, y)


def grid_from_rows(rows: List[str], wall: str = "#") -> Grid:
    """
    Build a grid from ASCII rows, top row first.

    Any character equal to ``wall`` becomes a wall, everything else a floor.
    Handy for hand-authored layouts and tests.
    """
    if not rows:
        raise ValueError("at least one row is required")
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise ValueError("all rows must have the same length")

    grid = new_grid(width, len(rows), Cell.FLOOR)
    for y, row in enumerate(rows):
        for x, char in enumerate(row):
            if char == wall:
                grid[y, x] = Cell.WALL
    return grid
