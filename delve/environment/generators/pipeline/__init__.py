"""Pipeline-based map generation system.

This package provides a layered architecture for compositional map
generation. Each layer transforms a shared GenerationContext, and the
pipeline outputs GeneratedMapData.

Example usage:
    from delve.environment.generators.pipeline import create_pipeline

    generator = create_pipeline("cellular_automata", width=80, height=50, seed=42)
    map_data = generator.generate()

The pipeline can also be assembled manually for custom configurations:
    from delve.environment.generators.pipeline import (
        PipelineGenerator,
        DrunkardsWalkLayer,
        StartingPointLayer,
        DistantExitLayer,
        ConnectivityRepairLayer,
    )

    generator = PipelineGenerator(
        layers=[
            DrunkardsWalkLayer.fat_passages(),
            StartingPointLayer(),
            DistantExitLayer(),
            ConnectivityRepairLayer(),
        ],
        map_width=80,
        map_height=50,
        seed=7,
    )
"""

from .context import GenerationContext, IncompleteGenerationError
from .factory import Algorithm, create_pipeline
from .layer import GenerationLayer
from .layers import (
    BspInteriorLayer,
    BspRoomsLayer,
    CellularAutomataLayer,
    ConnectivityRepairLayer,
    CullUnreachableLayer,
    DistantExitLayer,
    DrunkardsWalkLayer,
    DrunkSpawnMode,
    MazeLayer,
    NearestCorridorsLayer,
    NoiseLayer,
    SequentialCorridorsLayer,
    SimpleRoomsLayer,
    StartingPointLayer,
    Symmetry,
    VoronoiHiveLayer,
    XStart,
    YStart,
)
from .pipeline import PipelineGenerator

__all__ = [
    "Algorithm",
    "BspInteriorLayer",
    "BspRoomsLayer",
    "CellularAutomataLayer",
    "ConnectivityRepairLayer",
    "CullUnreachableLayer",
    "DistantExitLayer",
    "DrunkSpawnMode",
    "DrunkardsWalkLayer",
    "GenerationContext",
    "GenerationLayer",
    "IncompleteGenerationError",
    "MazeLayer",
    "NearestCorridorsLayer",
    "NoiseLayer",
    "PipelineGenerator",
    "SequentialCorridorsLayer",
    "SimpleRoomsLayer",
    "StartingPointLayer",
    "Symmetry",
    "VoronoiHiveLayer",
    "XStart",
    "YStart",
    "create_pipeline",
]
