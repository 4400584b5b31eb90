"""
Generation parameters for the cellular automata cave generator.
"""

import argparse
from dataclasses import dataclass, fields, replace
from typing import Any, Optional


class InvalidConfigError(ValueError):
    """Raised when a CaveConfig field is out of range.

    The offending field name is available as ``field`` so callers can
    report it without parsing the message.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field: str = field


@dataclass(frozen=True)
class CaveConfig:
    """Configuration options for cellular automata generation."""

    # Map size in tiles
    width: int = 100
    height: int = 100

    # Number of smoothing passes. Higher values give smoother, more organic shapes.
    iterations: int = 8

    # Chance (0.0 to 1.0) that a cell starts as a wall
    initial_wall_probability: float = 0.40

    # A cell becomes a wall when it has at least birth_threshold wall neighbours,
    # and a floor when it has at most death_threshold. In between it keeps its state.
    birth_threshold: int = 5
    death_threshold: int = 2

    # None means a fresh, non-reproducible seed is drawn for every run
    seed: Optional[int] = None

    # When True the outer border is always wall and out-of-bounds cells
    # count as walls for neighbour counting.
    edge_is_wall: bool = True

    # Carve corridors so that every cave is reachable from every other one
    connect_caves: bool = True

    # Caves with fewer tiles than this are filled in
    min_cave_size: int = 50

    # Corridor thickness in tiles
    corridor_width: int = 1

    # Tile ids written into the emitted tile map
    wall_tile_id: int = 1
    floor_tile_id: int = 0

    # Tile size in pixels
    tile_width: int = 16
    tile_height: int = 16

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check every field, raising InvalidConfigError on the first violation."""
        for name in ("width", "height", "tile_width", "tile_height"):
            if getattr(self, name) <= 0:
                raise InvalidConfigError(name, "must be greater than 0")

        for name in ("birth_threshold", "death_threshold"):
            value = getattr(self, name)
            if not 0 <= value <= 8:
                raise InvalidConfigError(name, f"must be between 0 and 8, got {value}")

        if self.iterations < 0:
            raise InvalidConfigError("iterations", "cannot be negative")

        if not 0.0 <= self.initial_wall_probability <= 1.0:
            raise InvalidConfigError(
                "initial_wall_probability",
                f"must be between 0.0 and 1.0, got {self.initial_wall_probability}",
            )

        if self.min_cave_size < 0:
            raise InvalidConfigError("min_cave_size", "cannot be negative")

        if self.corridor_width < 1:
            raise InvalidConfigError("corridor_width", "must be at least 1")

        if self.seed is not None and self.seed < 0:
            raise InvalidConfigError("seed", f"cannot be negative, got {self.seed}")

        # -1 is the empty tile of a TileMap
        for name in ("wall_tile_id", "floor_tile_id"):
            if getattr(self, name) < 0:
                raise InvalidConfigError(name, "cannot be negative")
        if self.wall_tile_id == self.floor_tile_id:
            raise InvalidConfigError(
                "floor_tile_id", f"must differ from wall_tile_id ({self.wall_tile_id})"
            )

    def with_overrides(self, **overrides: Any) -> "CaveConfig":
        """Return a copy with the given fields replaced (validated again)."""
        return replace(self, **overrides)

    @classmethod
    def cave(cls, **overrides: Any) -> "CaveConfig":
        """Default configuration for cave-like generation."""
        base = cls(
            width=64,
            height=64,
            iterations=5,
            initial_wall_probability=0.45,
            birth_threshold=4,
            death_threshold=3,
            edge_is_wall=True,
        )
        return base.with_overrides(**overrides)

    @classmethod
    def open_area(cls, **overrides: Any) -> "CaveConfig":
        """More open areas with scattered obstacles."""
        base = cls(
            width=64,
            height=64,
            iterations=3,
            initial_wall_probability=0.3,
            birth_threshold=5,
            death_threshold=2,
            edge_is_wall=False,
        )
        return base.with_overrides(**overrides)

    @classmethod
    def maze(cls, **overrides: Any) -> "CaveConfig":
        """Dense maze-like structures."""
        base = cls(
            width=64,
            height=64,
            iterations=2,
            initial_wall_probability=0.5,
            birth_threshold=4,
            death_threshold=4,
            edge_is_wall=True,
        )
        return base.with_overrides(**overrides)


PRESETS = {
    "cave": CaveConfig.cave,
    "open_area": CaveConfig.open_area,
    "maze": CaveConfig.maze,
}


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Register a command-line option for every CaveConfig field plus --preset."""
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=None,
        help="Start from a preset configuration (fields given below override it)",
    )
    for config_field in fields(CaveConfig):
        option = "--" + config_field.name.replace("_", "-")
        if config_field.type in (bool, "bool"):
            parser.add_argument(
                option,
                dest=config_field.name,
                action=argparse.BooleanOptionalAction,
                default=None,
            )
        elif config_field.name == "initial_wall_probability":
            parser.add_argument(option, dest=config_field.name, type=float, default=None)
        else:
            parser.add_argument(option, dest=config_field.name, type=int, default=None)


def config_from_args(args: argparse.Namespace) -> CaveConfig:
    """Build a CaveConfig from options registered by add_config_arguments."""
    overrides = {
        config_field.name: getattr(args, config_field.name)
        for config_field in fields(CaveConfig)
        if getattr(args, config_field.name, None) is not None
    }
    if getattr(args, "preset", None):
        return PRESETS[args.preset](**overrides)
    return CaveConfig(**overrides)
