"""Pipeline generator that orchestrates layer-based map generation.

The PipelineGenerator runs a sequence of GenerationLayers, each transforming
a shared GenerationContext. Every algorithm is one such sequence: a shape
layer, then placement of the player and exit, then validation or repair.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from delve.environment.generators.base import BaseMapGenerator, GeneratedMapData
from delve.environment.tile_types import Cell
from delve.types import TileCoord

from .context import GenerationContext

if TYPE_CHECKING:
    from .layer import GenerationLayer

logger = logging.getLogger(__name__)


class PipelineGenerator(BaseMapGenerator):
    """Map generator that runs layers sequentially on a shared context.

    Example:
        generator = PipelineGenerator(
            layers=[
                NoiseLayer(floor_probability=0.45),
                CellularAutomataLayer(iterations=5),
                StartingPointLayer(),
                DistantExitLayer(),
            ],
            map_width=80,
            map_height=50,
            seed=12345,
        )
        map_data = generator.generate()

    Attributes:
        layers: List of GenerationLayer instances to apply.
        seed: Seed for the random stream. Calling generate() twice with
            the same seed yields identical maps.
    """

    def __init__(
        self,
        layers: list[GenerationLayer],
        map_width: TileCoord,
        map_height: TileCoord,
        seed: int = 0,
    ) -> None:
        """Initialize the pipeline generator.

        Raises:
            InvalidDimensions: If map_width or map_height is not positive.
        """
        super().__init__(map_width, map_height)
        self.layers = layers
        self.seed = seed

    def generate(self) -> GeneratedMapData:
        """Generate a map by running all layers in sequence.

        Each call starts from a fresh context and a fresh random stream, so
        the generator holds no state between runs.
        """
        ctx = GenerationContext.create_empty(
            width=self.map_width,
            height=self.map_height,
            seed=self.seed,
            fill_cell=Cell.WALL,
        )

        for layer in self.layers:
            layer.apply(ctx)
            logger.debug(
                "%r applied: %d floor cells, %d draws",
                layer,
                ctx.grid.count(Cell.FLOOR),
                ctx.rng.draws,
            )

        return ctx.to_generated_map_data()
