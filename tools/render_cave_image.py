#!/usr/bin/env python3
"""
Render a generated cave to an image file for visual inspection.

Useful for:
- Tuning automata thresholds and presets
- Checking corridor placement
- Debugging spawn and stair placement

Usage:
    python tools/render_cave_image.py                         # Default config, random seed
    python tools/render_cave_image.py --preset cave --seed 42 # Reproducible cave
    python tools/render_cave_image.py --output my.png         # Custom output path
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cavegen.config import add_config_arguments, config_from_args
from cavegen.generator import generate_cave
from cavegen.preview import draw_grid_lines, render_image, save_image
from cavegen.spawn import find_stair_positions


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Render a cave to an image file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    add_config_arguments(parser)
    parser.add_argument(
        "--cell-size", "-c",
        type=int,
        default=8,
        help="Pixels per tile in the output image (default: 8)",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default="cave_render.png",
        help="Output image path (default: cave_render.png)",
    )
    parser.add_argument(
        "--show-grid",
        action="store_true",
        help="Overlay a tile grid on the image",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log pipeline phases")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    config = config_from_args(args)
    print(f"Generating {config.width}x{config.height} cave (seed: {config.seed})...", file=sys.stderr)
    result = generate_cave(config)
    print(f"Entropy used: {result.entropy}", file=sys.stderr)

    markers = []
    if result.is_degenerate:
        print("Warning: every cave was pruned, the map is solid wall", file=sys.stderr)
    else:
        tile_map = result.tile_map
        up, down = find_stair_positions(tile_map, config.floor_tile_id)
        markers = [tile_map.world_to_tile(*up), tile_map.world_to_tile(*down)]
        print(f"Stairs: up tile {markers[0]}, down tile {markers[1]}", file=sys.stderr)

    image = render_image(result.grid, cell_size=args.cell_size, markers=markers)
    if args.show_grid:
        print("Adding tile grid overlay...", file=sys.stderr)
        draw_grid_lines(image, args.cell_size, (64, 64, 64))

    output_path = Path(args.output)
    save_image(str(output_path), image)
    print(f"Saved to: {output_path.absolute()}", file=sys.stderr)


if __name__ == "__main__":
    main()
