"""
Debug previews of generated caves: ASCII art and raster images.
"""

from typing import Dict, Iterable, Optional, Tuple

import cv2
import numpy as np

from .grid import Cell, Coord, Grid

# Type Definition
Image = np.ndarray

CELL_TO_ASCII: Dict[int, str] = {
    Cell.WALL: "#",
    Cell.FLOOR: ".",
}

# BGR, as cv2 expects
WALL_COLOR: Tuple[int, int, int] = (48, 40, 36)
FLOOR_COLOR: Tuple[int, int, int] = (170, 190, 200)
MARKER_COLOR: Tuple[int, int, int] = (40, 40, 220)


def render_ascii(grid: Grid, markers: Optional[Dict[Coord, str]] = None) -> str:
    """
    Convert a grid to ASCII art, one line per row.

    ``markers`` maps (x, y) to a single character drawn over the cell.
    """
    markers = markers or {}
    lines = []
    height, width = grid.shape
    for y in range(height):
        line = "".join(
            markers.get((x, y), CELL_TO_ASCII.get(int(grid[y, x]), "?")) for x in range(width)
        )
        lines.append(line)
    return "\n".join(lines)


def render_image(
    grid: Grid,
    cell_size: int = 8,
    markers: Iterable[Coord] = (),
) -> Image:
    """
    Render a grid as a BGR image with ``cell_size`` pixels per cell.

    Marker cells get a filled circle, e.g. for spawn or stair positions.
    """
    if cell_size <= 0:
        raise ValueError("cell_size must be greater than 0")

    height, width = grid.shape
    small = np.empty((height, width, 3), dtype=np.uint8)
    small[grid == Cell.WALL] = WALL_COLOR
    small[grid == Cell.FLOOR] = FLOOR_COLOR

    image = cv2.resize(
        small, (width * cell_size, height * cell_size), interpolation=cv2.INTER_NEAREST
    )

    radius = max(1, cell_size // 2 - 1)
    for x, y in markers:
        center = (x * cell_size + cell_size // 2, y * cell_size + cell_size // 2)
        cv2.circle(image, center, radius, MARKER_COLOR, thickness=-1)

    return image


def draw_grid_lines(image: Image, cell_size: int, color: Tuple[int, int, int] = (0, 0, 0)) -> Image:
    """Overlay a tile grid on a rendered image, in place."""
    height, width = image.shape[:2]
    for x in range(0, width, cell_size):
        cv2.line(image, (x, 0), (x, height - 1), color, 1)
    for y in range(0, height, cell_size):
        cv2.line(image, (0, y), (width - 1, y), color, 1)
    return image


def save_image(path: str, image: Image) -> None:
    """Write an image to disk; the format follows the file extension."""
    if not cv2.imwrite(path, image):
        raise IOError(f"Could not write image to {path}")
