"""Seeded, deterministic 2D tile map generation.

Example:
    from delve import World

    world = World.new_cellular_automata(80, 50, seed=42)
    world.tile_at(*world.player_position)  # Cell.FLOOR
    buffer = world.tiles()  # 4000 bytes, 0 = Floor, 1 = Wall
"""

from .environment.connectivity import NoFloorCells
from .environment.generators.pipeline.factory import Algorithm
from .environment.grid import Grid, InvalidDimensions, MapGenerationError, OutOfBounds
from .environment.tile_types import Cell, RenderKey, TileClass
from .environment.world import World
from .types import Position
from .util.rng import RandomStream

__all__ = [
    "Algorithm",
    "Cell",
    "Grid",
    "InvalidDimensions",
    "MapGenerationError",
    "NoFloorCells",
    "OutOfBounds",
    "Position",
    "RandomStream",
    "RenderKey",
    "TileClass",
    "World",
]
