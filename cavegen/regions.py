"""
Connected floor regions ("caves").
"""

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Tuple

import numpy as np

from .grid import Coord, Grid, NEIGHBORS_4, is_floor, iter_floor_cells

# (min_x, min_y, max_x, max_y), inclusive
Bounds = Tuple[int, int, int, int]


@dataclass(frozen=True)
class Region:
    """
    One maximal 4-connected component of floor cells.

    Regions are plain values: they never point back into the grid they were
    found in, and a new labelling pass produces new Region objects.
    """

    region_id: int
    cells: Tuple[Coord, ...]
    bounds: Bounds

    @property
    def size(self) -> int:
        return len(self.cells)

    def contains(self, x: int, y: int) -> bool:
        min_x, min_y, max_x, max_y = self.bounds
        if not (min_x <= x <= max_x and min_y <= y <= max_y):
            return False
        return (x, y) in self.cells

    def boundary_cells(self, grid: Grid) -> List[Coord]:
        """
        Cells with at least one 4-neighbour that is a wall or off the map.

        The closest pair of cells between two disjoint regions is always made of
        boundary cells: from an interior cell one step towards the other region
        stays inside this region and is strictly closer.
        """
        return [
            (x, y)
            for x, y in self.cells
            if not all(is_floor(grid, x + dx, y + dy) for dx, dy in NEIGHBORS_4)
        ]


def _flood_fill(grid: Grid, visited: np.ndarray, start: Coord) -> List[Coord]:
    """Collect all floor cells 4-connected to ``start``, marking them visited."""
    start_x, start_y = start

    queue: Deque[Coord] = deque([start])
    visited[start_y, start_x] = True
    cells: List[Coord] = []

    while queue:
        x, y = queue.popleft()
        cells.append((x, y))

        for dx, dy in NEIGHBORS_4:
            nx, ny = x + dx, y + dy
            if not is_floor(grid, nx, ny) or visited[ny, nx]:
                continue
            visited[ny, nx] = True
            queue.append((nx, ny))

    return cells


def label_regions(grid: Grid) -> List[Region]:
    """
    Find every 4-connected floor region with a single visited-mask pass.

    Regions are numbered from 0 in the row-major order of their first cell, so
    the labelling of a given grid is always the same.
    """
    visited = np.zeros(grid.shape, dtype=bool)
    regions: List[Region] = []

    for x, y in iter_floor_cells(grid):
        if visited[y, x]:
            continue
        cells = _flood_fill(grid, visited, (x, y))
        coords = np.asarray(cells)
        min_x, min_y = coords.min(axis=0).tolist()
        max_x, max_y = coords.max(axis=0).tolist()
        regions.append(
            Region(
                region_id=len(regions),
                cells=tuple(cells),
                bounds=(min_x, min_y, max_x, max_y),
            )
        )

    return regions
