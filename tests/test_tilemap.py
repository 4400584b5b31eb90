"""Unit tests for tile maps, tile sets and tile map emission."""

import numpy as np
import pytest

from cavegen.config import CaveConfig
from cavegen.emitter import build_tile_set, emit_tile_map
from cavegen.grid import grid_from_rows
from cavegen.tilemap import (
    EMPTY_TILE,
    TileCollisionLayer,
    TileMap,
    TileMapFrozenError,
    TileProperties,
    TileSet,
)


class TestTileMap:
    """Tests for the layered tile map."""

    def test_new_map_is_empty(self):
        """Every tile starts as EMPTY_TILE."""
        tile_map = TileMap(4, 3, 16, 16, layer_count=2)
        assert tile_map.get_tile(0, 0, 0) == EMPTY_TILE
        assert tile_map.get_tile(1, 3, 2) == EMPTY_TILE

    @pytest.mark.parametrize("args", [(0, 3, 16, 16), (4, 0, 16, 16), (4, 3, 0, 16), (4, 3, 16, -1)])
    def test_invalid_dimensions_rejected(self, args):
        """Non-positive sizes raise ValueError."""
        with pytest.raises(ValueError):
            TileMap(*args)

    def test_set_and_get_tile(self):
        """Tiles are addressed as (layer, x, y)."""
        tile_map = TileMap(4, 3, 16, 16)
        tile_map.set_tile(0, 3, 1, 7)
        assert tile_map.get_tile(0, 3, 1) == 7
        assert tile_map.layer(0)[1, 3] == 7

    def test_out_of_bounds_read_is_empty(self):
        """Reads outside the map or layer range return EMPTY_TILE."""
        tile_map = TileMap(4, 3, 16, 16)
        assert tile_map.get_tile(0, -1, 0) == EMPTY_TILE
        assert tile_map.get_tile(0, 4, 0) == EMPTY_TILE
        assert tile_map.get_tile(1, 0, 0) == EMPTY_TILE

    def test_out_of_bounds_write_raises(self):
        """Writes outside the map raise IndexError."""
        tile_map = TileMap(4, 3, 16, 16)
        with pytest.raises(IndexError):
            tile_map.set_tile(0, 4, 0, 1)
        with pytest.raises(IndexError):
            tile_map.set_tile(2, 0, 0, 1)

    def test_fill_is_clipped(self):
        """Fill rectangles hanging off the map are clipped."""
        tile_map = TileMap(4, 3, 16, 16)
        tile_map.fill(0, 2, 1, 10, 10, 5)

        assert np.count_nonzero(tile_map.layer(0) == 5) == 2 * 2
        assert tile_map.get_tile(0, 1, 1) == EMPTY_TILE

    def test_clear(self):
        """Clearing resets every layer to empty."""
        tile_map = TileMap(2, 2, 8, 8, layer_count=2)
        tile_map.fill(0, 0, 0, 2, 2, 1)
        tile_map.fill(1, 0, 0, 2, 2, 2)
        tile_map.clear()
        assert np.all(tile_map.layer(0) == EMPTY_TILE)
        assert np.all(tile_map.layer(1) == EMPTY_TILE)

    def test_get_tiles_in_bounds_skips_empty(self):
        """Only non-empty tiles are returned, column by column."""
        tile_map = TileMap(4, 4, 16, 16)
        tile_map.set_tile(0, 1, 2, 3)
        tile_map.set_tile(0, 1, 1, 4)
        tile_map.set_tile(0, 3, 3, 9)

        assert tile_map.get_tiles_in_bounds(0, 0, 0, 3, 3) == [(1, 1, 4), (1, 2, 3)]

    def test_coordinate_conversion(self):
        """Tile and pixel coordinates convert both ways."""
        tile_map = TileMap(10, 10, 16, 8)
        assert tile_map.tile_to_world(2, 3) == (32.0, 24.0)
        assert tile_map.tile_to_world_center(2, 3) == (40.0, 28.0)
        assert tile_map.world_to_tile(40.0, 28.0) == (2, 3)
        assert tile_map.world_to_tile(-1.0, 0.0) == (-1, 0)
        assert tile_map.pixel_size() == (160, 80)

    def test_frozen_map_rejects_writes(self):
        """A frozen map raises on every mutation."""
        tile_map = TileMap(3, 3, 16, 16).freeze()
        assert tile_map.frozen
        with pytest.raises(TileMapFrozenError):
            tile_map.set_tile(0, 0, 0, 1)
        with pytest.raises(TileMapFrozenError):
            tile_map.fill(0, 0, 0, 1, 1, 1)
        with pytest.raises(TileMapFrozenError):
            tile_map.clear()

    def test_copy_is_editable(self):
        """Copying a frozen map gives an independent editable map."""
        tile_map = TileMap(3, 3, 16, 16)
        tile_map.fill(0, 0, 0, 3, 3, 1)
        tile_map.freeze()

        clone = tile_map.copy()
        clone.set_tile(0, 1, 1, 0)
        assert clone.get_tile(0, 1, 1) == 0
        assert tile_map.get_tile(0, 1, 1) == 1

    def test_layer_view_is_read_only(self):
        """Layer views cannot be used to bypass the map API."""
        tile_map = TileMap(3, 3, 16, 16)
        with pytest.raises(ValueError):
            tile_map.layer(0)[0, 0] = 4


class TestTileSet:
    """Tests for tile metadata."""

    def test_unknown_tile_has_default_properties(self):
        """Tiles without properties are not solid."""
        tile_set = TileSet(16, 16)
        assert not tile_set.is_solid(5)
        assert tile_set.get_collision_layer(EMPTY_TILE) == TileCollisionLayer.NONE

    def test_set_tile_properties_grows_tile_count(self):
        """Registering a tile id extends the tile count."""
        tile_set = TileSet(16, 16)
        tile_set.set_tile_properties(3, TileProperties.solid())
        assert tile_set.tile_count == 4
        assert tile_set.is_solid(3)
        assert tile_set.get_collision_layer(3) == TileCollisionLayer.SOLID

    def test_negative_tile_id_rejected(self):
        """Empty tile ids cannot carry properties."""
        with pytest.raises(ValueError):
            TileSet(16, 16).set_tile_properties(-1, TileProperties())

    def test_set_tile_range(self):
        """A range of ids shares one set of properties."""
        tile_set = TileSet(16, 16)
        tile_set.set_tile_range(2, 3, TileProperties.with_damage(5, "lava"))
        assert tile_set.get_tile_properties(4).damage == 5
        assert tile_set.get_tile_properties(4).tile_type == "lava"
        assert tile_set.get_tile_properties(5).damage == 0

    def test_platform_properties(self):
        """Platforms collide one way and are not solid."""
        props = TileProperties.platform()
        assert not props.is_solid
        assert props.collision_layer == TileCollisionLayer.PLATFORM

    def test_from_texture_counts_tiles(self):
        """Tile count follows the sprite sheet size, spacing and margin."""
        tile_set = TileSet.from_texture("tiles.png", 70, 36, 16, 16, spacing=2, margin=1)
        # (70 - 2 + 2) // 18 = 3 columns, (36 - 2 + 2) // 18 = 2 rows
        assert tile_set.tile_count == 6
        assert tile_set.texture_path == "tiles.png"

    def test_source_rect(self):
        """Source rectangles account for spacing and margin."""
        tile_set = TileSet(16, 16, spacing=2, margin=1)
        assert tile_set.get_tile_source_rect(4, tiles_per_row=3) == (19, 19, 16, 16)
        assert tile_set.get_tile_source_rect(-1, tiles_per_row=3) == (0, 0, 0, 0)


class TestEmitter:
    """Tests for converting a grid into tile output."""

    def test_emitted_layer_matches_grid(self):
        """Walls get the wall id and floors the floor id."""
        grid = grid_from_rows([
            "####",
            "#..#",
            "####",
        ])
        config = CaveConfig(width=4, height=3, wall_tile_id=7, floor_tile_id=2, tile_width=8)
        tile_map = emit_tile_map(grid, config)

        assert (tile_map.width, tile_map.height, tile_map.layer_count) == (4, 3, 1)
        assert tile_map.tile_width == 8
        assert tile_map.get_tile(0, 1, 1) == 2
        assert tile_map.get_tile(0, 0, 0) == 7
        assert np.count_nonzero(tile_map.layer(0) == 2) == 2

    def test_emitted_map_is_frozen(self):
        """Consumers cannot modify an emitted map."""
        grid = grid_from_rows(["#.#"])
        tile_map = emit_tile_map(grid, CaveConfig(width=3, height=1))
        with pytest.raises(TileMapFrozenError):
            tile_map.set_tile(0, 0, 0, 0)

    def test_tile_set_collision(self):
        """Walls are solid by default, floors never are."""
        config = CaveConfig()
        tile_set = build_tile_set(config)
        assert tile_set.is_solid(config.wall_tile_id)
        assert not tile_set.is_solid(config.floor_tile_id)
        assert (tile_set.wall_tile_id, tile_set.floor_tile_id) == (1, 0)

    def test_tile_set_non_solid_walls(self):
        """Walls can be made passable."""
        config = CaveConfig()
        tile_set = build_tile_set(config, wall_is_solid=False)
        assert not tile_set.is_solid(config.wall_tile_id)
        assert tile_set.get_collision_layer(config.wall_tile_id) == TileCollisionLayer.NONE
