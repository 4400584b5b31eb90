"""
Connectivity repair: join every cave to every other one with corridors.

Algorithm
=========

1. Treat every region as a node of a complete graph. The weight of the edge
   between two regions is the distance between their closest pair of cells.
   Ties between equally close pairs go to the lexicographically smallest
   ((x_a, y_a), (x_b, y_b)), so the result never depends on the seed.
2. Compute a minimum spanning tree over that graph (Kruskal).
3. For each tree edge, carve an L-shaped corridor between the two cells that
   produced the edge weight: horizontal first along the row of the first cell,
   then vertical along the column of the second cell.

The tree gives the cheapest set of corridors that makes the whole map a
single 4-connected floor area.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .config import CaveConfig
from .grid import Cell, Coord, Grid, freeze, thaw
from .regions import Region

logger = logging.getLogger(__name__)

# Rows of the first region processed per block when computing pair distances.
# Bounds the size of the temporary distance matrix.
_PAIR_BLOCK_ROWS = 512


@dataclass(frozen=True)
class RegionEdge:
    """Shortest link between two regions, with the cells it runs between."""

    region_a: int
    region_b: int
    distance_sq: int
    cell_a: Coord
    cell_b: Coord

    @property
    def distance(self) -> float:
        return math.sqrt(self.distance_sq)


class _DisjointSet:
    def __init__(self, size: int):
        self.parent = list(range(size))
        self.rank = [0] * size

    def find(self, x: int) -> int:
        while self.parent[x] != x:
            self.parent[x] = self.parent[self.parent[x]]
            x = self.parent[x]
        return x

    def union(self, x: int, y: int) -> bool:
        rx, ry = self.find(x), self.find(y)
        if rx == ry:
            return False
        if self.rank[rx] < self.rank[ry]:
            self.parent[rx] = ry
        elif self.rank[rx] > self.rank[ry]:
            self.parent[ry] = rx
        else:
            self.parent[ry] = rx
            self.rank[rx] += 1
        return True


def _sorted_coords(cells: Sequence[Coord]) -> np.ndarray:
    """(N, 2) int64 array of cells sorted by x, then y."""
    return np.asarray(sorted(cells), dtype=np.int64).reshape(-1, 2)


def nearest_cell_pair(
    cells_a: Sequence[Coord], cells_b: Sequence[Coord]
) -> Tuple[int, Coord, Coord]:
    """
    Find the closest pair of cells between two cell sets.

    Returns:
        (squared Euclidean distance, cell from a, cell from b). Among pairs at
        the minimum distance the lexicographically smallest one is returned.

    Raises:
        ValueError: If either set is empty
    """
    if not cells_a or not cells_b:
        raise ValueError("cannot measure distance to an empty region")

    coords_a = _sorted_coords(cells_a)
    coords_b = _sorted_coords(cells_b)

    best_sq = -1
    best_pair = (0, 0)

    # Blocks are visited in sorted order of a, and argmin returns the first
    # minimum in row-major order, so a later block only wins when strictly closer.
    for start in range(0, len(coords_a), _PAIR_BLOCK_ROWS):
        block = coords_a[start : start + _PAIR_BLOCK_ROWS]
        deltas = block[:, None, :] - coords_b[None, :, :]
        dist_sq = np.einsum("ijk,ijk->ij", deltas, deltas)
        flat_index = int(np.argmin(dist_sq))
        row, col = divmod(flat_index, dist_sq.shape[1])
        block_best = int(dist_sq[row, col])
        if best_sq < 0 or block_best < best_sq:
            best_sq = block_best
            best_pair = (start + row, col)

    ia, ib = best_pair
    cell_a = (int(coords_a[ia, 0]), int(coords_a[ia, 1]))
    cell_b = (int(coords_b[ib, 0]), int(coords_b[ib, 1]))
    return best_sq, cell_a, cell_b


def build_region_graph(grid: Grid, regions: Sequence[Region]) -> List[RegionEdge]:
    """Complete graph over the regions, one edge per unordered pair."""
    boundaries: Dict[int, List[Coord]] = {
        region.region_id: region.boundary_cells(grid) for region in regions
    }

    edges: List[RegionEdge] = []
    ordered = sorted(regions, key=lambda r: r.region_id)
    for i, first in enumerate(ordered):
        for second in ordered[i + 1 :]:
            distance_sq, cell_a, cell_b = nearest_cell_pair(
                boundaries[first.region_id], boundaries[second.region_id]
            )
            edges.append(
                RegionEdge(
                    region_a=first.region_id,
                    region_b=second.region_id,
                    distance_sq=distance_sq,
                    cell_a=cell_a,
                    cell_b=cell_b,
                )
            )
    return edges


def minimum_spanning_tree(
    region_ids: Sequence[int], edges: Sequence[RegionEdge]
) -> List[RegionEdge]:
    """
    Kruskal's algorithm over the region graph.

    Edges are considered by (distance, region_a, region_b) so equal-weight
    edges are always chosen in the same order.
    """
    index = {region_id: i for i, region_id in enumerate(region_ids)}
    components = _DisjointSet(len(index))

    tree: List[RegionEdge] = []
    for edge in sorted(edges, key=lambda e: (e.distance_sq, e.region_a, e.region_b)):
        if components.union(index[edge.region_a], index[edge.region_b]):
            tree.append(edge)
            if len(tree) == len(index) - 1:
                break
    return tree


def corridor_path(start: Coord, end: Coord) -> List[Coord]:
    """
    Centre line of an L-shaped corridor from ``start`` to ``end``.

    Runs horizontally along start's row to end's column, then vertically to end.
    Both end points are included and no cell is repeated.
    """
    (x0, y0), (x1, y1) = start, end
    step_x = 1 if x1 >= x0 else -1
    step_y = 1 if y1 >= y0 else -1

    path: List[Coord] = [(x, y0) for x in range(x0, x1 + step_x, step_x)]
    path.extend((x1, y) for y in range(y0 + step_y, y1 + step_y, step_y))
    return path


def carve_corridor(
    grid: Grid,
    start: Coord,
    end: Coord,
    width: int = 1,
    edge_is_wall: bool = True,
) -> int:
    """
    Carve a corridor into a writable grid, in place.

    Each centre-line cell is widened to ``width`` cells across, perpendicular
    to the map axes. With ``edge_is_wall`` the outer border is never carved.

    Returns:
        Number of cells turned from wall into floor
    """
    height, width_cells = grid.shape
    margin = 1 if edge_is_wall else 0
    low = -((width - 1) // 2)
    high = width // 2

    carved = 0
    for x, y in corridor_path(start, end):
        for oy in range(low, high + 1):
            for ox in range(low, high + 1):
                cx, cy = x + ox, y + oy
                if not (margin <= cx < width_cells - margin and margin <= cy < height - margin):
                    continue
                if grid[cy, cx] == Cell.WALL:
                    grid[cy, cx] = Cell.FLOOR
                    carved += 1
    return carved


def connect_regions(
    grid: Grid, regions: Sequence[Region], config: CaveConfig
) -> Tuple[Grid, List[RegionEdge], int]:
    """
    Join all regions into one floor area.

    Zero or one region is a no-op: the input grid is returned unchanged.

    Returns:
        (new read-only grid, carved tree edges, number of corridor cells carved)
    """
    if len(regions) < 2:
        logger.debug("%d region(s), nothing to connect", len(regions))
        return grid, [], 0

    edges = build_region_graph(grid, regions)
    tree = minimum_spanning_tree([region.region_id for region in regions], edges)

    connected = thaw(grid)
    corridor_cells = 0
    for edge in tree:
        corridor_cells += carve_corridor(
            connected,
            edge.cell_a,
            edge.cell_b,
            width=config.corridor_width,
            edge_is_wall=config.edge_is_wall,
        )

    logger.debug(
        "Connected %d regions with %d corridors (%d cells carved)",
        len(regions),
        len(tree),
        corridor_cells,
    )
    return freeze(connected), tree, corridor_cells
