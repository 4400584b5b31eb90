"""
Removal of caves that are too small to be worth keeping.
"""

import logging
from typing import List, Tuple

from .grid import Cell, Grid, freeze, thaw
from .regions import Region

logger = logging.getLogger(__name__)


def prune_small_regions(
    grid: Grid, regions: List[Region], min_size: int
) -> Tuple[Grid, List[Region]]:
    """
    Fill every region smaller than ``min_size`` with walls.

    Regions of exactly ``min_size`` cells are kept. Pruning every region is a
    valid outcome and produces an all-wall grid.

    Returns:
        (new read-only grid, regions that were removed)
    """
    if min_size <= 0:
        return grid, []

    removed = [region for region in regions if region.size < min_size]
    if not removed:
        return grid, []

    pruned = thaw(grid)
    for region in removed:
        xs, ys = zip(*region.cells)
        pruned[list(ys), list(xs)] = Cell.WALL

    logger.debug(
        "Pruned %d of %d regions (%d cells) below %d tiles",
        len(removed),
        len(regions),
        sum(region.size for region in removed),
        min_size,
    )
    return freeze(pruned), removed
