"""Organic cave layers.

- DrunkardsWalkLayer: Random walkers dig tunnels until enough Floor exists
- VoronoiHiveLayer: Splits the map into Voronoi cells separated by thin walls
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Literal

import numpy as np

from delve import config
from delve.environment.generators.pipeline.context import GenerationContext
from delve.environment.generators.pipeline.layer import GenerationLayer
from delve.environment.tile_types import Cell

logger = logging.getLogger(__name__)


class DrunkSpawnMode(Enum):
    """Where each walker after the first one starts digging."""

    STARTING_POINT = auto()  # Always the map center
    RANDOM = auto()  # Anywhere in the interior


class Symmetry(Enum):
    """Mirror axes applied to every dug cell."""

    NONE = auto()
    HORIZONTAL = auto()
    VERTICAL = auto()
    BOTH = auto()


class DrunkardsWalkLayer(GenerationLayer):
    """Digs Floor by releasing random walkers one after another.

    The first walker starts at the map center. Each walker takes up to
    ``lifetime`` unit steps in random cardinal directions, digging every cell
    it visits, and never leaves the interior. Walkers are released until
    ``floor_percent`` of the map is Floor or ``max_walkers`` have run.
    """

    def __init__(
        self,
        spawn_mode: DrunkSpawnMode = DrunkSpawnMode.RANDOM,
        lifetime: int = config.DRUNKARD_LIFETIME,
        floor_percent: float = config.DRUNKARD_FLOOR_PERCENT,
        brush_size: int = 1,
        symmetry: Symmetry = Symmetry.NONE,
        max_walkers: int = config.DRUNKARD_MAX_WALKERS,
    ) -> None:
        self.spawn_mode = spawn_mode
        self.lifetime = max(0, lifetime)
        self.floor_percent = min(max(floor_percent, 0.0), 1.0)
        self.brush_size = max(1, brush_size)
        self.symmetry = symmetry
        self.max_walkers = max(1, max_walkers)

    @classmethod
    def open_area(cls) -> DrunkardsWalkLayer:
        return cls(DrunkSpawnMode.STARTING_POINT, config.DRUNKARD_LIFETIME, 0.5)

    @classmethod
    def open_halls(cls) -> DrunkardsWalkLayer:
        return cls(DrunkSpawnMode.RANDOM, config.DRUNKARD_LIFETIME, 0.5)

    @classmethod
    def winding_passages(cls) -> DrunkardsWalkLayer:
        return cls(DrunkSpawnMode.RANDOM, config.DRUNKARD_LIFETIME, 0.4)

    @classmethod
    def fat_passages(cls) -> DrunkardsWalkLayer:
        return cls(DrunkSpawnMode.RANDOM, config.DRUNKARD_LIFETIME, 0.4, brush_size=2)

    @classmethod
    def fearful_symmetry(cls) -> DrunkardsWalkLayer:
        return cls(
            DrunkSpawnMode.RANDOM,
            config.DRUNKARD_LIFETIME,
            0.4,
            symmetry=Symmetry.BOTH,
        )

    def apply(self, ctx: GenerationContext) -> None:
        area = ctx.interior()
        cells = ctx.grid.cells
        start_x = min(max(ctx.width // 2, area.x1), area.x2 - 1)
        start_y = min(max(ctx.height // 2, area.y1), area.y2 - 1)
        cells[start_y, start_x] = Cell.FLOOR

        # Walkers only dig the interior, so that is all they can ever fill.
        desired = min(
            int(self.floor_percent * ctx.width * ctx.height),
            area.width * area.height,
        )
        floor_count = ctx.grid.count(Cell.FLOOR)
        walkers = 0
        while floor_count < desired and walkers < self.max_walkers:
            if self.spawn_mode is DrunkSpawnMode.RANDOM and walkers > 0:
                x = ctx.rng.next_range(area.x1, area.x2)
                y = ctx.rng.next_range(area.y1, area.y2)
            else:
                x, y = start_x, start_y

            for _ in range(self.lifetime):
                self._paint(ctx, x, y)
                direction = ctx.rng.roll_dice(1, 4)
                if direction == 1:
                    x = max(x - 1, area.x1)
                elif direction == 2:
                    x = min(x + 1, area.x2 - 1)
                elif direction == 3:
                    y = max(y - 1, area.y1)
                else:
                    y = min(y + 1, area.y2 - 1)

            walkers += 1
            floor_count = ctx.grid.count(Cell.FLOOR)

        logger.debug(
            "Drunkard's walk: %d walkers dug %d/%d floor cells",
            walkers,
            floor_count,
            desired,
        )

    def _paint(self, ctx: GenerationContext, x: int, y: int) -> None:
        """Dig at (x, y) and at its mirror images."""
        points = {(x, y)}
        if self.symmetry in (Symmetry.HORIZONTAL, Symmetry.BOTH):
            points.add((ctx.width - 1 - x, y))
        if self.symmetry in (Symmetry.VERTICAL, Symmetry.BOTH):
            points.add((x, ctx.height - 1 - y))
        if self.symmetry is Symmetry.BOTH:
            points.add((ctx.width - 1 - x, ctx.height - 1 - y))
        for px, py in points:
            self._apply_brush(ctx, px, py)

    def _apply_brush(self, ctx: GenerationContext, x: int, y: int) -> None:
        area = ctx.interior()
        half = self.brush_size // 2
        x1 = max(x - half, area.x1)
        y1 = max(y - half, area.y1)
        x2 = min(x - half + self.brush_size, area.x2)
        y2 = min(y - half + self.brush_size, area.y2)
        if x1 < x2 and y1 < y2:
            ctx.grid.cells[y1:y2, x1:x2] = Cell.FLOOR


class VoronoiHiveLayer(GenerationLayer):
    """Carves a honeycomb of Voronoi regions.

    Random seed points are scattered over the interior and every cell joins
    the region of its nearest seed (ties go to the lower seed index). Interior
    cells become Floor unless at least ``boundary_neighbors`` of their four
    cardinal neighbors belong to another region; those cells stay Wall and
    form thin, gappy walls between the regions.
    """

    def __init__(
        self,
        n_seeds: int = config.VORONOI_SEEDS,
        distance: Literal["euclidean", "manhattan"] = config.VORONOI_DISTANCE,
        boundary_neighbors: int = config.VORONOI_BOUNDARY_NEIGHBORS,
    ) -> None:
        if distance not in ("euclidean", "manhattan"):
            raise ValueError(f"Unknown distance metric: {distance!r}")
        self.n_seeds = max(1, n_seeds)
        self.distance = distance
        self.boundary_neighbors = boundary_neighbors

    def scatter_seeds(self, ctx: GenerationContext) -> np.ndarray:
        """Pick distinct seed cells inside the interior.

        Returns:
            Array of shape (n, 2) with (row, col) pairs. ``n`` is smaller than
            ``n_seeds`` only when the interior has fewer cells than that.
        """
        area = ctx.interior()
        picks = ctx.rng.sample(range(area.width * area.height), self.n_seeds)
        return np.array(
            [(area.y1 + i // area.width, area.x1 + i % area.width) for i in picks],
            dtype=np.int64,
        ).reshape(-1, 2)

    def membership(self, ctx: GenerationContext, seeds: np.ndarray) -> np.ndarray:
        """Index of the nearest seed for every cell, shape (height, width)."""
        rows, cols = np.indices((ctx.height, ctx.width))
        d_row = rows[np.newaxis] - seeds[:, 0, np.newaxis, np.newaxis]
        d_col = cols[np.newaxis] - seeds[:, 1, np.newaxis, np.newaxis]
        if self.distance == "manhattan":
            dist = np.abs(d_row) + np.abs(d_col)
        else:
            # Squared distance keeps the comparison exact in integers.
            dist = d_row**2 + d_col**2
        # argmin returns the first minimum, i.e. the lowest seed index on ties
        return np.argmin(dist, axis=0)

    def apply(self, ctx: GenerationContext) -> None:
        seeds = self.scatter_seeds(ctx)
        region = self.membership(ctx, seeds)

        padded = np.pad(region, 1, mode="edge")
        height, width = region.shape
        differing = np.zeros(region.shape, dtype=np.int8)
        for dy, dx in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            neighbor = padded[1 + dy : 1 + dy + height, 1 + dx : 1 + dx + width]
            differing += neighbor != region

        area = ctx.interior()
        inside = np.zeros(region.shape, dtype=bool)
        inside[area.y1 : area.y2, area.x1 : area.x2] = True
        open_cells = inside & (differing < self.boundary_neighbors)
        ctx.grid.cells[open_cells] = Cell.FLOOR

        logger.debug("Voronoi hive with %d regions", len(seeds))
