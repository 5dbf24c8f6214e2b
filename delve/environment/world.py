"""The World facade: one generated map with its player start and exit.

A World is immutable once built. Its grid is frozen, so the raw buffer
handed to a renderer always matches what ``tile_at`` reports.
"""

from __future__ import annotations

import logging
import time

import numpy as np

from delve import config
from delve.environment import tile_types
from delve.environment.generators.pipeline.factory import Algorithm, create_pipeline
from delve.environment.grid import Grid
from delve.environment.tile_types import Cell, TileClass
from delve.types import Position, RandomSeed, TileCoord
from delve.util.rng import normalize_seed

logger = logging.getLogger(__name__)


def _clock_seed() -> int:
    return int(time.time() * 1000)


class World:
    """A generated map.

    Build one with ``World.generate`` or one of the ``new_<algorithm>``
    constructors. The same algorithm, size and seed always produce the same
    World.
    """

    def __init__(
        self,
        grid: Grid,
        player: Position,
        exit: Position,
        seed: int = 0,
        algorithm: Algorithm | None = None,
    ) -> None:
        grid.freeze()
        self._grid = grid
        self._player = Position(*player)
        self._exit = Position(*exit)
        self.seed = seed
        self.algorithm = algorithm

        # Populated on first use by classified().
        self._tile_class_cache: np.ndarray | None = None

    @classmethod
    def generate(
        cls,
        algorithm: Algorithm | str,
        width: TileCoord,
        height: TileCoord,
        seed: RandomSeed = None,
    ) -> World:
        """Generate a World with the named algorithm.

        Args:
            algorithm: An ``Algorithm`` member or its string value.
            width: Map width in tiles.
            height: Map height in tiles.
            seed: Generation seed. None uses config.RANDOM_SEED, and if that
                is None too, the current time in milliseconds.

        Raises:
            ValueError: If the algorithm name is not recognized.
            InvalidDimensions: If width or height is not positive.
        """
        if seed is None:
            seed = config.RANDOM_SEED
        if seed is None:
            seed = _clock_seed()
        seed = normalize_seed(seed)

        generator = create_pipeline(str(algorithm), width, height, seed)
        map_data = generator.generate()
        world = cls(
            map_data.grid,
            map_data.player,
            map_data.exit,
            seed=seed,
            algorithm=Algorithm(algorithm),
        )
        logger.debug("Generated %r", world)
        return world

    @classmethod
    def new_cellular_automata(
        cls, width: TileCoord, height: TileCoord, seed: RandomSeed = None
    ) -> World:
        return cls.generate(Algorithm.CELLULAR_AUTOMATA, width, height, seed)

    @classmethod
    def new_simple_rooms(
        cls, width: TileCoord, height: TileCoord, seed: RandomSeed = None
    ) -> World:
        return cls.generate(Algorithm.SIMPLE_ROOMS, width, height, seed)

    @classmethod
    def new_bsp_rooms(
        cls, width: TileCoord, height: TileCoord, seed: RandomSeed = None
    ) -> World:
        return cls.generate(Algorithm.BSP_ROOMS, width, height, seed)

    @classmethod
    def new_bsp_interior(
        cls, width: TileCoord, height: TileCoord, seed: RandomSeed = None
    ) -> World:
        return cls.generate(Algorithm.BSP_INTERIOR, width, height, seed)

    @classmethod
    def new_drunkard_walk(
        cls, width: TileCoord, height: TileCoord, seed: RandomSeed = None
    ) -> World:
        return cls.generate(Algorithm.DRUNKARD_WALK, width, height, seed)

    @classmethod
    def new_maze(
        cls, width: TileCoord, height: TileCoord, seed: RandomSeed = None
    ) -> World:
        return cls.generate(Algorithm.MAZE, width, height, seed)

    @classmethod
    def new_voronoi(
        cls, width: TileCoord, height: TileCoord, seed: RandomSeed = None
    ) -> World:
        return cls.generate(Algorithm.VORONOI, width, height, seed)

    @classmethod
    def new_uniform_random(
        cls, width: TileCoord, height: TileCoord, seed: RandomSeed = None
    ) -> World:
        return cls.generate(Algorithm.UNIFORM_RANDOM, width, height, seed)

    @property
    def width(self) -> TileCoord:
        return self._grid.width

    @property
    def height(self) -> TileCoord:
        return self._grid.height

    @property
    def grid(self) -> Grid:
        """The frozen grid. Writing to its cells raises ValueError."""
        return self._grid

    @property
    def player_position(self) -> Position:
        return self._player

    @property
    def exit_position(self) -> Position:
        return self._exit

    def tile_at(self, row: TileCoord, col: TileCoord) -> Cell:
        """Cell at (row, col).

        Raises:
            OutOfBounds: If the position is outside the map.
        """
        return self._grid.get(row, col)

    def tiles(self) -> bytes:
        """Raw row-major buffer, one byte per cell: 0 = Floor, 1 = Wall."""
        return self._grid.to_bytes()

    def classified(self) -> np.ndarray:
        """``TileClass`` values for every cell, shape (height, width)."""
        if self._tile_class_cache is None:
            self._tile_class_cache = tile_types.classify_tiles(self._grid)
            self._tile_class_cache.flags.writeable = False
        return self._tile_class_cache

    def classify_at(self, row: TileCoord, col: TileCoord) -> TileClass:
        """Render classification of the cell at (row, col).

        Raises:
            OutOfBounds: If the position is outside the map.
        """
        self._grid.get(row, col)
        return TileClass(int(self.classified()[row, col]))

    def __repr__(self) -> str:
        name = self.algorithm.value if self.algorithm is not None else "custom"
        return (
            f"World({name}, {self.width}x{self.height}, seed={self.seed}, "
            f"player={tuple(self._player)}, exit={tuple(self._exit)})"
        )
