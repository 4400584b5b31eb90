"""
Spawn-position queries over an emitted tile map.

These are pure functions of the tile map, so entity spawners can call them
without re-running generation.
"""

import math
from typing import Optional, Tuple

from .tilemap import TileMap

WorldPosition = Tuple[float, float]

# Minimum separation between up and down stairs, in tile widths
STAIR_MIN_SEPARATION_TILES = 10


def find_nearest_floor_tile(
    tile_map: TileMap,
    start_x: int,
    start_y: int,
    floor_tile_id: int = 0,
    layer: int = 0,
) -> Optional[Tuple[int, int]]:
    """
    Find the floor tile closest to (start_x, start_y).

    Checks the start tile first, then searches the perimeter of square rings of
    growing radius around it. Within a ring, tiles are scanned column by column
    (x ascending, then y ascending) and the first floor tile wins.

    Returns:
        (x, y) of the floor tile, or None if the map has no floor tile
    """
    if tile_map.get_tile(layer, start_x, start_y) == floor_tile_id:
        return (start_x, start_y)

    # Radius at which the ring has covered the whole map, even from off-map starts
    max_radius = max(
        abs(start_x),
        abs(tile_map.width - 1 - start_x),
        abs(start_y),
        abs(tile_map.height - 1 - start_y),
    )

    for radius in range(1, max_radius + 1):
        for dx in range(-radius, radius + 1):
            x = start_x + dx
            if not 0 <= x < tile_map.width:
                continue
            for dy in range(-radius, radius + 1):
                if abs(dx) != radius and abs(dy) != radius:
                    continue  # Only check the perimeter of the current ring
                y = start_y + dy
                if tile_map.get_tile(layer, x, y) == floor_tile_id:
                    return (x, y)

    return None


def find_valid_spawn_position(
    tile_map: TileMap,
    start_x: int,
    start_y: int,
    floor_tile_id: int = 0,
) -> WorldPosition:
    """
    World-space centre of the floor tile nearest to a starting tile.

    Falls back to the centre of the requested start tile when the map has no
    floor tile at all (for example a fully pruned map).
    """
    found = find_nearest_floor_tile(tile_map, start_x, start_y, floor_tile_id)
    if found is None:
        return tile_map.tile_to_world_center(start_x, start_y)
    return tile_map.tile_to_world_center(*found)


def find_stair_positions(
    tile_map: TileMap, floor_tile_id: int = 0
) -> Tuple[WorldPosition, WorldPosition]:
    """
    Pick world positions for an up and a down stair that are far apart.

    The up stair is the floor tile nearest the first-quarter point of the map.
    The down stair is searched from the three-quarter point, then from the other
    quadrant anchors and the far corner, until one lies at least
    STAIR_MIN_SEPARATION_TILES tile widths away. The last candidate is used if
    none does.
    """
    width, height = tile_map.width, tile_map.height
    up = find_valid_spawn_position(tile_map, width // 4, height // 4, floor_tile_id)

    anchors = [
        ((3 * width) // 4, (3 * height) // 4),
        ((3 * width) // 4, height // 4),
        (width // 4, (3 * height) // 4),
        (width - 1, height - 1),
    ]
    min_distance = STAIR_MIN_SEPARATION_TILES * tile_map.tile_width

    down = up
    for anchor_x, anchor_y in anchors:
        down = find_valid_spawn_position(tile_map, anchor_x, anchor_y, floor_tile_id)
        if math.dist(up, down) >= min_distance:
            break

    return up, down
