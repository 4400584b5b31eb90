"""
Cave Generation Pipeline
========================

A single synchronous pass, each stage consuming the previous stage's
read-only output:

1. initialize  - seeded random noise (initializer.initialize_grid)
2. smooth      - cellular automata generations (automata.smooth_grid)
3. label       - flood-fill floor regions (regions.label_regions)
4. prune       - fill regions below min_cave_size (pruning.prune_small_regions)
5. relabel     - authoritative region set after pruning
6. connect     - MST corridors between regions, if connect_caves (connector.connect_regions)
7. emit        - tile map + tile set (emitter)

An all-wall result is a valid output, not an error. Callers that need floor
space should retry with another seed.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

import numpy as np

from .automata import smooth_grid
from .config import CaveConfig
from .connector import RegionEdge, connect_regions
from .emitter import build_tile_set, emit_tile_map
from .grid import Grid, enforce_border_walls, floor_count, freeze, thaw
from .initializer import initialize_grid, make_rng
from .pruning import prune_small_regions
from .regions import Region, label_regions
from .tilemap import TileMap, TileSet

logger = logging.getLogger(__name__)

T = TypeVar("T")


def init_metrics() -> Dict[str, Any]:
    return {
        "regions_initial": 0,
        "regions_pruned": 0,
        "cells_pruned": 0,
        "regions_final": 0,
        "corridors_carved": 0,
        "corridor_cells": 0,
        "floor_cells": 0,
        "floor_fraction": 0.0,
        "runtime_ms": 0.0,
        "phase_ms": {},
    }


@dataclass(frozen=True)
class CaveResult:
    """Everything one generation run produced."""

    config: CaveConfig
    # Entropy the random stream was seeded from; pass it back as the seed to replay a run.
    # -1 when the caller supplied its own stream or grid.
    entropy: int
    grid: Grid
    # Regions after pruning, before corridors merged them
    regions: List[Region]
    edges: List[RegionEdge]
    tile_map: TileMap
    tile_set: TileSet
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_degenerate(self) -> bool:
        """True when no floor cell survived."""
        return self.metrics.get("floor_cells", 0) == 0


class CaveGenerator:
    """
    Generates cave tile maps using cellular automata.

    Each call to ``generate`` (or its variants) builds a fresh random stream from
    the config, so one generator can be reused and always yields the same map
    for a fixed seed.
    """

    def __init__(self, config: CaveConfig) -> None:
        if config is None:
            raise ValueError("config is required")
        self.config: CaveConfig = config
        self._last_grid: Optional[Grid] = None

    def run(self, rng: Optional[np.random.Generator] = None) -> CaveResult:
        """
        Run the full pipeline.

        Args:
            rng: Explicit random stream. When omitted one is seeded from
                 ``config.seed`` (or fresh entropy when the seed is None).
        """
        entropy = -1
        if rng is None:
            rng, entropy = make_rng(self.config.seed)

        metrics = init_metrics()
        phase = self._phase_timer(metrics)
        start = time.perf_counter()

        grid = phase("initialize", initialize_grid, self.config, rng)
        grid = phase("smooth", smooth_grid, grid, self.config)
        result = self._finish(grid, entropy, metrics, phase)

        metrics["runtime_ms"] = (time.perf_counter() - start) * 1000.0
        logger.info(
            "Generated %dx%d cave (seed=%s, entropy=%d): %d regions, %.1f%% floor in %.1f ms",
            self.config.width,
            self.config.height,
            self.config.seed,
            entropy,
            metrics["regions_final"],
            metrics["floor_fraction"] * 100.0,
            metrics["runtime_ms"],
        )
        return result

    def generate(self) -> TileMap:
        """Generate a new tile map."""
        return self.run().tile_map

    def generate_with_tile_set(self, wall_is_solid: bool = True) -> Tuple[TileMap, TileSet]:
        """
        Generate a tile map together with a tile set.

        The tile set marks floor tiles as non-solid and wall tiles as solid
        (or non-solid when ``wall_is_solid`` is False).
        """
        result = self.run()
        return result.tile_map, build_tile_set(self.config, wall_is_solid=wall_is_solid)

    def generate_from_grid(self, grid: Grid) -> CaveResult:
        """
        Run the stages after smoothing (label, prune, relabel, connect, emit)
        on a caller-supplied grid of shape (height, width). With ``edge_is_wall``
        the border of the supplied grid is walled in first.

        Raises:
            ValueError: If the grid shape does not match the config
        """
        expected = (self.config.height, self.config.width)
        if grid.shape != expected:
            raise ValueError(f"grid shape {grid.shape} does not match config {expected}")

        supplied = thaw(grid)
        if self.config.edge_is_wall:
            enforce_border_walls(supplied)

        metrics = init_metrics()
        start = time.perf_counter()
        result = self._finish(freeze(supplied), -1, metrics, self._phase_timer(metrics))
        metrics["runtime_ms"] = (time.perf_counter() - start) * 1000.0
        return result

    def get_grid(self) -> Optional[Grid]:
        """Editable copy of the last generated grid, or None before the first run."""
        if self._last_grid is None:
            return None
        return thaw(self._last_grid)

    def _finish(
        self,
        grid: Grid,
        entropy: int,
        metrics: Dict[str, Any],
        phase: Callable[..., Any],
    ) -> CaveResult:
        config = self.config

        initial_regions = phase("label", label_regions, grid)
        metrics["regions_initial"] = len(initial_regions)

        grid, removed = phase(
            "prune", prune_small_regions, grid, initial_regions, config.min_cave_size
        )
        metrics["regions_pruned"] = len(removed)
        metrics["cells_pruned"] = sum(region.size for region in removed)

        regions = phase("relabel", label_regions, grid)
        metrics["regions_final"] = len(regions)

        edges: List[RegionEdge] = []
        if config.connect_caves:
            grid, edges, corridor_cells = phase("connect", connect_regions, grid, regions, config)
            metrics["corridors_carved"] = len(edges)
            metrics["corridor_cells"] = corridor_cells

        tile_map = phase("emit", emit_tile_map, grid, config)
        tile_set = build_tile_set(config)

        floors = floor_count(grid)
        metrics["floor_cells"] = floors
        metrics["floor_fraction"] = floors / float(config.width * config.height)
        if floors == 0:
            logger.warning(
                "Generated map has no floor tiles (seed=%s); retry with another seed",
                config.seed,
            )

        self._last_grid = grid
        return CaveResult(
            config=config,
            entropy=entropy,
            grid=grid,
            regions=regions,
            edges=edges,
            tile_map=tile_map,
            tile_set=tile_set,
            metrics=metrics,
        )

    @staticmethod
    def _phase_timer(metrics: Dict[str, Any]) -> Callable[..., Any]:
        phase_ms: Dict[str, float] = metrics["phase_ms"]

        def _phase(label: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
            started = time.perf_counter()
            result = fn(*args, **kwargs)
            phase_ms[label] = (time.perf_counter() - started) * 1000.0
            return result

        return _phase


def generate_cave(config: CaveConfig, rng: Optional[np.random.Generator] = None) -> CaveResult:
    """Run the whole pipeline for ``config``."""
    return CaveGenerator(config).run(rng)
