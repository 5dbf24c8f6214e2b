"""Generation layers for the pipeline map generator.

Each layer transforms the GenerationContext in a specific way:
- Terrain layers: Random noise and cellular automata smoothing
- Room layers: Rooms placed by rejection sampling, and the corridors joining them
- BSP layers: Recursive partitioning into rooms or wall-separated interiors
- Cave layers: Drunkard's walk and Voronoi hives
- Maze layer: Perfect mazes on odd coordinates
- Placement layers: Player start, exit, culling and connectivity repair
"""

from .bsp import BspInteriorLayer, BspRoomsLayer
from .caves import DrunkardsWalkLayer, DrunkSpawnMode, Symmetry, VoronoiHiveLayer
from .maze import MazeLayer
from .placement import (
    ConnectivityRepairLayer,
    CullUnreachableLayer,
    DistantExitLayer,
    StartingPointLayer,
    XStart,
    YStart,
)
from .rooms import NearestCorridorsLayer, SequentialCorridorsLayer, SimpleRoomsLayer
from .terrain import CellularAutomataLayer, NoiseLayer

__all__ = [
    "BspInteriorLayer",
    "BspRoomsLayer",
    "CellularAutomataLayer",
    "ConnectivityRepairLayer",
    "CullUnreachableLayer",
    "DistantExitLayer",
    "DrunkSpawnMode",
    "DrunkardsWalkLayer",
    "MazeLayer",
    "NearestCorridorsLayer",
    "NoiseLayer",
    "SequentialCorridorsLayer",
    "SimpleRoomsLayer",
    "StartingPointLayer",
    "Symmetry",
    "VoronoiHiveLayer",
    "XStart",
    "YStart",
]
