"""
Initial random wall/floor noise for the cave pipeline.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from .config import CaveConfig
from .grid import Cell, Grid, GRID_DTYPE, enforce_border_walls, freeze

logger = logging.getLogger(__name__)


def make_rng(seed: Optional[int]) -> Tuple[np.random.Generator, int]:
    """
    Create the random stream for one generation run.

    Returns the generator together with the entropy it was seeded from. When
    ``seed`` is None the entropy comes from the operating system, so the run
    is not reproducible unless the returned entropy is fed back in as the seed.
    """
    seed_sequence = np.random.SeedSequence(seed)
    if seed is None:
        logger.warning(
            "No seed configured; drew entropy %d, this run is not reproducible",
            seed_sequence.entropy,
        )
    return np.random.default_rng(seed_sequence), int(seed_sequence.entropy)


def initialize_grid(config: CaveConfig, rng: np.random.Generator) -> Grid:
    """
    Produce the initial noise grid.

    One value is drawn per cell in row-major order (row 0 left to right, then
    row 1, ...). A cell is a wall when its value is below
    ``initial_wall_probability``. With ``edge_is_wall`` the border is forced to
    wall after drawing, so border cells still consume their draw and the
    stream stays aligned for every other cell.

    Args:
        config: Generation parameters
        rng: Random stream owned by this run, never shared between runs

    Returns:
        A read-only grid of shape (height, width)
    """
    samples = rng.random((config.height, config.width))
    grid = np.where(
        samples < config.initial_wall_probability, int(Cell.WALL), int(Cell.FLOOR)
    ).astype(GRID_DTYPE)

    if config.edge_is_wall:
        enforce_border_walls(grid)

    return freeze(np.ascontiguousarray(grid))
