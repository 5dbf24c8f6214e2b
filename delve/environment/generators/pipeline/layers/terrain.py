"""Noise and cellular automata layers.

- NoiseLayer: Sets every cell to Floor independently with a fixed probability
- CellularAutomataLayer: Smooths noise into caves with a neighbor-count rule

Used together they form the cellular automata cave generator. NoiseLayer on
its own is the unsmoothed uniform random baseline.

Tuning guide for the cave pair:
- floor_probability=0.45, iterations=5 -> balanced caves (default)
- floor_probability=0.55, iterations=4 -> more open areas
- floor_probability=0.40, iterations=3 -> tighter, more enclosed
"""

from __future__ import annotations

import numpy as np

from delve import config
from delve.environment.generators.pipeline.context import GenerationContext
from delve.environment.generators.pipeline.layer import GenerationLayer
from delve.environment.tile_types import Cell


class NoiseLayer(GenerationLayer):
    """Fills the map with independent Bernoulli Floor draws.

    Cells are visited in row-major order, one draw per cell, so the result
    depends only on the seed and the map size.
    """

    def __init__(
        self, floor_probability: float = config.UNIFORM_FLOOR_PROBABILITY
    ) -> None:
        """Initialize the noise layer.

        Args:
            floor_probability: Chance for each cell to become Floor, clamped
                to [0, 1].
        """
        self.floor_probability = min(max(floor_probability, 0.0), 1.0)

    def apply(self, ctx: GenerationContext) -> None:
        cells = ctx.grid.cells
        for row in range(ctx.height):
            for col in range(ctx.width):
                if ctx.rng.next_bool(self.floor_probability):
                    cells[row, col] = Cell.FLOOR
                else:
                    cells[row, col] = Cell.WALL

    def __repr__(self) -> str:
        return f"NoiseLayer(floor_probability={self.floor_probability})"


def count_wall_neighbors(cells: np.ndarray) -> np.ndarray:
    """Number of Wall cells among each cell's 8 neighbors.

    Neighbors beyond the map edge count as Wall.
    """
    height, width = cells.shape
    padded = np.ones((height + 2, width + 2), dtype=np.uint8)
    padded[1:-1, 1:-1] = cells == Cell.WALL
    counts = np.zeros((height, width), dtype=np.uint8)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dy == 0 and dx == 0:
                continue
            counts += padded[1 + dy : 1 + dy + height, 1 + dx : 1 + dx + width]
    return counts


class CellularAutomataLayer(GenerationLayer):
    """Smooths an existing map into organic caves.

    Each iteration updates every cell at once: a cell becomes Wall if at least
    ``wall_threshold`` of its 8 Moore neighbors are Wall, otherwise Floor.
    See the RogueBasin article "Cellular Automata Method for Generating Random
    Cave-Like Levels" for background.

    This layer expects a noisy map to work on; on a uniform map it does
    nothing useful.
    """

    def __init__(
        self,
        iterations: int = config.CA_ITERATIONS,
        wall_threshold: int = config.CA_WALL_THRESHOLD,
    ) -> None:
        self.iterations = max(0, iterations)
        self.wall_threshold = wall_threshold

    def apply(self, ctx: GenerationContext) -> None:
        cells = ctx.grid.cells
        for _ in range(self.iterations):
            walls = count_wall_neighbors(cells) >= self.wall_threshold
            cells[:, :] = np.where(walls, Cell.WALL, Cell.FLOOR)

    def __repr__(self) -> str:
        return (
            f"CellularAutomataLayer(iterations={self.iterations}, "
            f"wall_threshold={self.wall_threshold})"
        )
