"""
Conversion of the final cell grid into the tile map artifact.
"""

import numpy as np

from .config import CaveConfig
from .grid import Cell, Grid
from .tilemap import TileCollisionLayer, TileMap, TileProperties, TileSet


def emit_tile_map(grid: Grid, config: CaveConfig) -> TileMap:
    """
    Build a frozen single-layer tile map from a cell grid.

    Layer 0 holds ``wall_tile_id`` for wall cells and ``floor_tile_id`` for floor cells.
    """
    height, width = grid.shape
    tile_map = TileMap(width, height, config.tile_width, config.tile_height, layer_count=1)
    tile_ids = np.where(grid == Cell.WALL, config.wall_tile_id, config.floor_tile_id)
    tile_map.set_layer(0, tile_ids.astype(np.int32))
    return tile_map.freeze()


def build_tile_set(config: CaveConfig, wall_is_solid: bool = True) -> TileSet:
    """
    Tile set describing the two tile ids used by the generator.

    Floor tiles never collide. Wall tiles are SOLID when ``wall_is_solid``.
    """
    tile_set = TileSet(config.tile_width, config.tile_height)

    tile_set.set_tile_properties(
        config.floor_tile_id,
        TileProperties(is_solid=False, collision_layer=TileCollisionLayer.NONE),
    )
    tile_set.set_tile_properties(
        config.wall_tile_id,
        TileProperties(
            is_solid=wall_is_solid,
            collision_layer=TileCollisionLayer.SOLID if wall_is_solid else TileCollisionLayer.NONE,
        ),
    )

    tile_set.wall_tile_id = config.wall_tile_id
    tile_set.floor_tile_id = config.floor_tile_id
    return tile_set
