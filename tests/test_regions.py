"""Unit tests for region labelling and pruning."""

import numpy as np

from cavegen.grid import Cell, floor_count, grid_from_rows
from cavegen.pruning import prune_small_regions
from cavegen.regions import Region, label_regions


TWO_CAVES = [
    "##########",
    "#..###...#",
    "#..###...#",
    "######...#",
    "##########",
]


class TestLabelRegions:
    """Tests for 4-connected floor labelling."""

    def test_finds_separate_regions(self):
        """Two disconnected floor areas become two regions."""
        regions = label_regions(grid_from_rows(TWO_CAVES))

        assert len(regions) == 2
        assert [region.size for region in regions] == [4, 9]

    def test_ids_follow_row_major_discovery(self):
        """Region 0 holds the first floor cell in row-major order."""
        regions = label_regions(grid_from_rows(TWO_CAVES))

        assert [region.region_id for region in regions] == [0, 1]
        assert regions[0].cells[0] == (1, 1)
        assert regions[1].cells[0] == (6, 1)

    def test_diagonal_cells_are_separate(self):
        """Diagonal contact does not join regions."""
        grid = grid_from_rows([
            ".#",
            "#.",
        ])
        regions = label_regions(grid)
        assert len(regions) == 2
        assert all(region.size == 1 for region in regions)

    def test_every_floor_cell_in_exactly_one_region(self):
        """Regions partition the floor cells."""
        grid = grid_from_rows([
            "..#..#",
            "#.#.##",
            "..#...",
            "##.#.#",
        ])
        regions = label_regions(grid)
        all_cells = [cell for region in regions for cell in region.cells]
        assert len(all_cells) == len(set(all_cells)) == floor_count(grid)

    def test_all_wall_grid_has_no_regions(self):
        """A grid without floor yields an empty region list."""
        assert label_regions(grid_from_rows(["###", "###"])) == []

    def test_bounds_and_contains(self):
        """Bounds are inclusive and contains() checks membership."""
        regions = label_regions(grid_from_rows(TWO_CAVES))
        big = regions[1]

        assert big.bounds == (6, 1, 8, 3)
        assert big.contains(7, 2)
        assert not big.contains(1, 1)
        assert not big.contains(5, 2)

    def test_boundary_cells(self):
        """Interior cells of a region are not boundary cells."""
        grid = grid_from_rows(TWO_CAVES)
        big = label_regions(grid)[1]

        boundary = big.boundary_cells(grid)
        assert (7, 2) not in boundary
        assert len(boundary) == 8

    def test_cells_on_map_edge_are_boundary(self):
        """Off-map neighbours count as walls for boundary detection."""
        grid = grid_from_rows(["...", "...", "..."])
        region = label_regions(grid)[0]
        assert sorted(region.boundary_cells(grid)) == sorted(set(region.cells) - {(1, 1)})


class TestPruneSmallRegions:
    """Tests for removing undersized caves."""

    def test_small_region_is_filled(self):
        """Regions below the minimum size become walls."""
        grid = grid_from_rows(TWO_CAVES)
        pruned, removed = prune_small_regions(grid, label_regions(grid), min_size=5)

        assert [region.size for region in removed] == [4]
        assert pruned[1, 1] == Cell.WALL
        assert floor_count(pruned) == 9
        assert not pruned.flags.writeable

    def test_region_of_exact_minimum_survives(self):
        """A region with exactly min_size cells is kept."""
        grid = grid_from_rows(TWO_CAVES)
        pruned, removed = prune_small_regions(grid, label_regions(grid), min_size=4)

        assert removed == []
        assert floor_count(pruned) == 13

    def test_zero_minimum_disables_pruning(self):
        """min_size 0 keeps everything and returns the same grid."""
        grid = grid_from_rows(TWO_CAVES)
        pruned, removed = prune_small_regions(grid, label_regions(grid), min_size=0)

        assert pruned is grid
        assert removed == []

    def test_pruning_everything_gives_all_wall(self):
        """A minimum above every region size leaves no floor."""
        grid = grid_from_rows(TWO_CAVES)
        pruned, removed = prune_small_regions(grid, label_regions(grid), min_size=100)

        assert len(removed) == 2
        assert floor_count(pruned) == 0

    def test_input_grid_untouched(self):
        """Pruning works on a copy of the input."""
        grid = grid_from_rows(TWO_CAVES)
        before = grid.copy()
        prune_small_regions(grid, label_regions(grid), min_size=5)
        assert np.array_equal(grid, before)

    def test_survivors_meet_minimum_after_relabel(self):
        """Relabelling after pruning finds only regions of at least min_size."""
        grid = grid_from_rows([
            "#########",
            "#.#..#..#",
            "#.#..#..#",
            "###.##..#",
            "#########",
        ])
        pruned, _ = prune_small_regions(grid, label_regions(grid), min_size=5)
        for region in label_regions(pruned):
            assert region.size >= 5, f"region {region.region_id} has only {region.size} cells"

    def test_regions_are_values(self):
        """Regions compare by value."""
        region = Region(region_id=0, cells=((1, 1),), bounds=(1, 1, 1, 1))
        assert region == Region(region_id=0, cells=((1, 1),), bounds=(1, 1, 1, 1))
        assert region.size == 1
