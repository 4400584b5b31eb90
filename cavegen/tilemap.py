"""
Tile map and tile set structures handed to rendering and collision code.
"""

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

EMPTY_TILE: int = -1


class TileMapFrozenError(RuntimeError):
    """Raised when an emitted (frozen) tile map is modified."""


class TileMap:
    """
    Grid-based tile map with one or more layers.

    Tiles are stored in a single int32 array of shape (layer_count, height, width)
    and addressed as (layer, x, y). Empty tiles hold EMPTY_TILE.
    """

    def __init__(
        self,
        width: int,
        height: int,
        tile_width: int,
        tile_height: int,
        layer_count: int = 1,
    ) -> None:
        for name, value in (
            ("width", width),
            ("height", height),
            ("tile_width", tile_width),
            ("tile_height", tile_height),
            ("layer_count", layer_count),
        ):
            if value <= 0:
                raise ValueError(f"{name} must be greater than 0")

        self.width: int = width
        self.height: int = height
        self.tile_width: int = tile_width
        self.tile_height: int = tile_height
        self.layer_count: int = layer_count

        self._tiles: np.ndarray = np.full(
            (layer_count, height, width), EMPTY_TILE, dtype=np.int32
        )

    def __repr__(self) -> str:
        return (
            f"TileMap({self.width}x{self.height} tiles, "
            f"{self.tile_width}x{self.tile_height}px, layers={self.layer_count})"
        )

    @property
    def frozen(self) -> bool:
        return not self._tiles.flags.writeable

    def freeze(self) -> "TileMap":
        """Make the map read-only. Returns self for chaining."""
        self._tiles.setflags(write=False)
        return self

    def _check_writable(self) -> None:
        if self.frozen:
            raise TileMapFrozenError("tile map is frozen; use copy() to get an editable map")

    def is_valid_position(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_valid_layer(self, layer: int) -> bool:
        return 0 <= layer < self.layer_count

    def get_tile(self, layer: int, x: int, y: int) -> int:
        """Tile id at (x, y) on ``layer``, or EMPTY_TILE when out of bounds."""
        if not self.is_valid_position(x, y) or not self.is_valid_layer(layer):
            return EMPTY_TILE
        return int(self._tiles[layer, y, x])

    def set_tile(self, layer: int, x: int, y: int, tile_id: int) -> None:
        self._check_writable()
        if not self.is_valid_position(x, y):
            raise IndexError(f"Position ({x}, {y}) is out of bounds")
        if not self.is_valid_layer(layer):
            raise IndexError(f"Layer {layer} is out of bounds")
        self._tiles[layer, y, x] = tile_id

    def set_layer(self, layer: int, tile_ids: np.ndarray) -> None:
        """Replace a whole layer with a (height, width) array of tile ids."""
        self._check_writable()
        if not self.is_valid_layer(layer):
            raise IndexError(f"Layer {layer} is out of bounds")
        if tile_ids.shape != (self.height, self.width):
            raise ValueError(
                f"layer shape {tile_ids.shape} does not match map ({self.height}, {self.width})"
            )
        self._tiles[layer] = tile_ids

    def layer(self, layer: int) -> np.ndarray:
        """Read-only (height, width) view of one layer."""
        if not self.is_valid_layer(layer):
            raise IndexError(f"Layer {layer} is out of bounds")
        view = self._tiles[layer]
        view.setflags(write=False)
        return view

    def fill(self, layer: int, x: int, y: int, width: int, height: int, tile_id: int) -> None:
        """Fill a rectangle, silently clipped to the map."""
        self._check_writable()
        if not self.is_valid_layer(layer):
            raise IndexError(f"Layer {layer} is out of bounds")
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + width, self.width), min(y + height, self.height)
        if x0 < x1 and y0 < y1:
            self._tiles[layer, y0:y1, x0:x1] = tile_id

    def clear_layer(self, layer: int) -> None:
        self._check_writable()
        if not self.is_valid_layer(layer):
            raise IndexError(f"Layer {layer} is out of bounds")
        self._tiles[layer] = EMPTY_TILE

    def clear(self) -> None:
        for layer in range(self.layer_count):
            self.clear_layer(layer)

    def get_tiles_in_bounds(
        self, layer: int, x: int, y: int, width: int, height: int
    ) -> List[Tuple[int, int, int]]:
        """Non-empty tiles inside a rectangle as (x, y, tile_id), column by column."""
        tiles: List[Tuple[int, int, int]] = []
        for px in range(x, x + width):
            for py in range(y, y + height):
                tile_id = self.get_tile(layer, px, py)
                if tile_id >= 0:
                    tiles.append((px, py, tile_id))
        return tiles

    def world_to_tile(self, world_x: float, world_y: float) -> Tuple[int, int]:
        """Pixel position to tile coordinates (may be out of bounds)."""
        return (
            int(math.floor(world_x / self.tile_width)),
            int(math.floor(world_y / self.tile_height)),
        )

    def tile_to_world(self, tile_x: int, tile_y: int) -> Tuple[float, float]:
        """Top-left corner of a tile in pixels."""
        return (float(tile_x * self.tile_width), float(tile_y * self.tile_height))

    def tile_to_world_center(self, tile_x: int, tile_y: int) -> Tuple[float, float]:
        """Centre of a tile in pixels."""
        world_x, world_y = self.tile_to_world(tile_x, tile_y)
        return (world_x + self.tile_width / 2.0, world_y + self.tile_height / 2.0)

    def pixel_size(self) -> Tuple[int, int]:
        return (self.width * self.tile_width, self.height * self.tile_height)

    def copy(self) -> "TileMap":
        """Editable deep copy, also of a frozen map."""
        clone = TileMap(self.width, self.height, self.tile_width, self.tile_height, self.layer_count)
        clone._tiles[...] = self._tiles
        return clone


class TileCollisionLayer(IntEnum):
    """Collision behaviour of a tile."""

    NONE = 0
    SOLID = 1  # blocks from all directions
    PLATFORM = 2  # one-way collision from above
    TRIGGER = 3  # detects but doesn't block
    WATER = 4
    ICE = 5
    LADDER = 6


@dataclass(frozen=True)
class TileProperties:
    """Gameplay properties of a tile id."""

    is_solid: bool = False
    collision_layer: TileCollisionLayer = TileCollisionLayer.NONE
    friction: float = 1.0
    damage: int = 0
    # Type identifier for special behaviours, e.g. "water" or "lava"
    tile_type: Optional[str] = None
    custom: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def solid(cls) -> "TileProperties":
        return cls(is_solid=True, collision_layer=TileCollisionLayer.SOLID)

    @classmethod
    def platform(cls) -> "TileProperties":
        return cls(is_solid=False, collision_layer=TileCollisionLayer.PLATFORM)

    @classmethod
    def with_damage(cls, damage: int, tile_type: str = "damage") -> "TileProperties":
        return cls(damage=damage, tile_type=tile_type)


class TileSet:
    """
    Tile appearance and gameplay metadata, keyed by tile id.

    ``wall_tile_id`` and ``floor_tile_id`` record which ids the cave generator
    used, so collision and rendering code does not need the generation config.
    """

    def __init__(
        self,
        tile_width: int,
        tile_height: int,
        spacing: int = 0,
        margin: int = 0,
    ) -> None:
        if tile_width <= 0:
            raise ValueError("tile_width must be greater than 0")
        if tile_height <= 0:
            raise ValueError("tile_height must be greater than 0")
        if spacing < 0:
            raise ValueError("spacing cannot be negative")
        if margin < 0:
            raise ValueError("margin cannot be negative")

        self.tile_width: int = tile_width
        self.tile_height: int = tile_height
        self.spacing: int = spacing
        self.margin: int = margin
        self.tile_count: int = 0
        self.texture_path: Optional[str] = None

        self.wall_tile_id: Optional[int] = None
        self.floor_tile_id: Optional[int] = None

        self._properties: Dict[int, TileProperties] = {}

    @classmethod
    def from_texture(
        cls,
        texture_path: str,
        texture_width: int,
        texture_height: int,
        tile_width: int,
        tile_height: int,
        spacing: int = 0,
        margin: int = 0,
    ) -> "TileSet":
        """Tile set whose tile count is derived from a sprite sheet's pixel size."""
        tile_set = cls(tile_width, tile_height, spacing, margin)
        tile_set.texture_path = texture_path
        tiles_per_row = (texture_width - 2 * margin + spacing) // (tile_width + spacing)
        tiles_per_column = (texture_height - 2 * margin + spacing) // (tile_height + spacing)
        tile_set.tile_count = tiles_per_row * tiles_per_column
        return tile_set

    def set_tile_properties(self, tile_id: int, properties: TileProperties) -> None:
        if tile_id < 0:
            raise ValueError("tile id cannot be negative")
        self._properties[tile_id] = properties
        if tile_id >= self.tile_count:
            self.tile_count = tile_id + 1

    def set_tile_range(self, start_tile_id: int, count: int, properties: TileProperties) -> None:
        for tile_id in range(start_tile_id, start_tile_id + count):
            self.set_tile_properties(tile_id, properties)

    def get_tile_properties(self, tile_id: int) -> TileProperties:
        """Configured properties, or defaults for unknown and empty ids."""
        if tile_id < 0:
            return TileProperties()
        return self._properties.get(tile_id, TileProperties())

    def is_solid(self, tile_id: int) -> bool:
        return self.get_tile_properties(tile_id).is_solid

    def get_collision_layer(self, tile_id: int) -> TileCollisionLayer:
        return self.get_tile_properties(tile_id).collision_layer

    def get_tile_source_rect(self, tile_id: int, tiles_per_row: int) -> Tuple[int, int, int, int]:
        """
        Source rectangle (x, y, width, height) of a tile inside the sprite sheet.

        Returns an all-zero rectangle for empty ids or a non-positive row length.
        """
        if tile_id < 0 or tiles_per_row <= 0:
            return (0, 0, 0, 0)
        row, column = divmod(tile_id, tiles_per_row)
        x = self.margin + column * (self.tile_width + self.spacing)
        y = self.margin + row * (self.tile_height + self.spacing)
        return (x, y, self.tile_width, self.tile_height)
