#!/usr/bin/env python3
"""
Render a generated cave as ASCII art for debugging.

Usage:
    python tools/render_cave_ascii.py [--preset cave] [--width N] [--height N] [--seed S]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import cavegen
sys.path.insert(0, str(Path(__file__).parent.parent))

from cavegen.config import add_config_arguments, config_from_args
from cavegen.generator import generate_cave
from cavegen.preview import render_ascii
from cavegen.spawn import find_nearest_floor_tile, find_stair_positions


def main() -> None:
    parser = argparse.ArgumentParser(description="Render a cave as ASCII art")
    add_config_arguments(parser)
    parser.add_argument("--verbose", "-v", action="store_true", help="Log pipeline phases")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    config = config_from_args(args)
    result = generate_cave(config)

    # Mark the spawn tile and both stairs
    markers = {}
    tile_map = result.tile_map
    up, down = find_stair_positions(tile_map, config.floor_tile_id)
    if not result.is_degenerate:
        markers[tile_map.world_to_tile(*up)] = "<"
        markers[tile_map.world_to_tile(*down)] = ">"
        spawn = find_nearest_floor_tile(
            tile_map, config.width // 2, config.height // 2, config.floor_tile_id
        )
        if spawn is not None:
            markers[spawn] = "@"

    print(render_ascii(result.grid, markers))

    # Print some debug info
    metrics = result.metrics
    print("\n--- Debug Info ---")
    print(f"Map size: {config.width}x{config.height} tiles")
    print(f"Seed: {config.seed} (entropy {result.entropy})")
    print(
        f"Regions: {metrics['regions_initial']} found, {metrics['regions_pruned']} pruned, "
        f"{metrics['regions_final']} kept"
    )
    print(f"Corridors: {metrics['corridors_carved']} ({metrics['corridor_cells']} cells)")
    print(f"Floor: {metrics['floor_cells']} tiles ({metrics['floor_fraction']:.1%})")
    print(f"Runtime: {metrics['runtime_ms']:.1f} ms")


if __name__ == "__main__":
    main()
