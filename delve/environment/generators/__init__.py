"""Map generation algorithms.

Every algorithm is a PipelineGenerator: a fixed sequence of layers that
shape Floor and Wall, then place the player and the exit. ``create_pipeline``
builds the pipeline for an ``Algorithm`` by name:
- cellular_automata: Noise smoothed into caves
- simple_rooms: Random rooms joined by L-shaped corridors
- bsp_rooms / bsp_interior: Binary space partitioning
- drunkard_walk: Caves dug by random walkers
- maze: Perfect maze
- voronoi: Voronoi hive
- uniform_random: Independent coin flips
"""

from .base import BaseMapGenerator, GeneratedMapData
from .pipeline import (
    Algorithm,
    GenerationContext,
    GenerationLayer,
    PipelineGenerator,
    create_pipeline,
)

__all__ = [
    "Algorithm",
    "BaseMapGenerator",
    "GeneratedMapData",
    "GenerationContext",
    "GenerationLayer",
    "PipelineGenerator",
    "create_pipeline",
]
