"""Procedural cave generation: cellular automata, region repair and tile map output."""

from cavegen.config import CaveConfig, InvalidConfigError, PRESETS
from cavegen.grid import Cell, Grid, grid_from_rows
from cavegen.regions import Region, label_regions
from cavegen.connector import RegionEdge
from cavegen.tilemap import (
    EMPTY_TILE,
    TileCollisionLayer,
    TileMap,
    TileMapFrozenError,
    TileProperties,
    TileSet,
)
from cavegen.generator import CaveGenerator, CaveResult, generate_cave
from cavegen.spawn import (
    find_nearest_floor_tile,
    find_stair_positions,
    find_valid_spawn_position,
)
