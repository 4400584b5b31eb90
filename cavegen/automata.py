"""
Cellular automata smoothing.

Each generation is computed entirely from a frozen snapshot of the previous
one, so every cell of a generation is independent of every other cell.
"""

import logging

import numpy as np

from .config import CaveConfig
from .grid import Cell, Grid, GRID_DTYPE, enforce_border_walls, freeze, thaw

logger = logging.getLogger(__name__)

# Moore neighbourhood offsets: (dx, dy), centre excluded
MOORE_OFFSETS = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)


def count_wall_neighbors(grid: Grid, edge_is_wall: bool) -> np.ndarray:
    """
    Count wall cells in the Moore neighbourhood of every cell.

    Out-of-bounds neighbours count as walls when ``edge_is_wall`` is set and are
    left out of the count otherwise.

    Returns:
        int array with the same shape as ``grid``
    """
    height, width = grid.shape
    walls = (grid == Cell.WALL).astype(np.int16)
    padded = np.pad(walls, 1, mode="constant", constant_values=1 if edge_is_wall else 0)

    counts = np.zeros((height, width), dtype=np.int16)
    for dx, dy in MOORE_OFFSETS:
        counts += padded[1 + dy : 1 + dy + height, 1 + dx : 1 + dx + width]
    return counts


def smooth_step(
    grid: Grid,
    birth_threshold: int,
    death_threshold: int,
    edge_is_wall: bool,
) -> Grid:
    """
    Apply one automaton generation and return it as a new read-only grid.

    Rule, evaluated for every cell regardless of its current state:
      - wall if wall neighbours >= birth_threshold
      - floor if wall neighbours <= death_threshold
      - otherwise unchanged
    The birth test wins when both thresholds match.
    """
    counts = count_wall_neighbors(grid, edge_is_wall)

    next_grid = np.array(grid, dtype=GRID_DTYPE, copy=True)
    becomes_wall = counts >= birth_threshold
    becomes_floor = (counts <= death_threshold) & ~becomes_wall
    next_grid[becomes_wall] = Cell.WALL
    next_grid[becomes_floor] = Cell.FLOOR

    if edge_is_wall:
        enforce_border_walls(next_grid)

    return freeze(next_grid)


def smooth_grid(grid: Grid, config: CaveConfig) -> Grid:
    """Run ``config.iterations`` generations. Zero iterations leaves the cells unchanged."""
    current = freeze(thaw(grid)) if grid.flags.writeable else grid
    for iteration in range(config.iterations):
        current = smooth_step(
            current,
            config.birth_threshold,
            config.death_threshold,
            config.edge_is_wall,
        )
        logger.debug(
            "Smoothing iteration %d/%d: %d wall cells",
            iteration + 1,
            config.iterations,
            int(np.count_nonzero(current == Cell.WALL)),
        )
    return current
