"""Factory functions for creating pre-configured pipelines.

Every algorithm is a fixed sequence of layers: a shape layer that carves the
Floor, a StartingPointLayer and DistantExitLayer for placement, and, for
algorithms whose shape may come out in several pieces, a
ConnectivityRepairLayer so that the exit is always reachable.

Available pipelines are listed in ``Algorithm``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from delve import config

from .layer import GenerationLayer
from .layers import (
    BspInteriorLayer,
    BspRoomsLayer,
    CellularAutomataLayer,
    ConnectivityRepairLayer,
    CullUnreachableLayer,
    DistantExitLayer,
    DrunkardsWalkLayer,
    MazeLayer,
    NearestCorridorsLayer,
    NoiseLayer,
    SequentialCorridorsLayer,
    SimpleRoomsLayer,
    StartingPointLayer,
    VoronoiHiveLayer,
    XStart,
    YStart,
)
from .pipeline import PipelineGenerator


class Algorithm(StrEnum):
    """Names of the available generation algorithms."""

    CELLULAR_AUTOMATA = "cellular_automata"
    SIMPLE_ROOMS = "simple_rooms"
    BSP_ROOMS = "bsp_rooms"
    BSP_INTERIOR = "bsp_interior"
    DRUNKARD_WALK = "drunkard_walk"
    MAZE = "maze"
    VORONOI = "voronoi"
    UNIFORM_RANDOM = "uniform_random"


def create_pipeline(
    name: str,
    width: int,
    height: int,
    seed: int = 0,
) -> PipelineGenerator:
    """Create a pre-configured pipeline by name.

    Args:
        name: An ``Algorithm`` value, e.g. ``"maze"``.
        width: Map width in tiles.
        height: Map height in tiles.
        seed: Seed for deterministic generation.

    Returns:
        A configured PipelineGenerator ready to generate maps.

    Raises:
        ValueError: If the algorithm name is not recognized.
        InvalidDimensions: If width or height is not positive.
    """
    try:
        algorithm = Algorithm(name)
    except ValueError:
        raise ValueError(f"Unknown algorithm: {name!r}") from None
    return _FACTORIES[algorithm](width, height, seed)


def create_cellular_automata_pipeline(
    width: int,
    height: int,
    seed: int = 0,
    cull_unreachable: bool | None = None,
) -> PipelineGenerator:
    """Organic caves: random noise smoothed by a cellular automaton.

    Args:
        cull_unreachable: Wall off cave pockets the player cannot reach.
            If None, uses config.CA_CULL_UNREACHABLE.
    """
    if cull_unreachable is None:
        cull_unreachable = config.CA_CULL_UNREACHABLE

    layers: list[GenerationLayer] = [
        NoiseLayer(floor_probability=config.CA_FLOOR_PROBABILITY),
        CellularAutomataLayer(),
        StartingPointLayer(),
    ]
    if cull_unreachable:
        layers.append(CullUnreachableLayer())
    layers += [DistantExitLayer(), ConnectivityRepairLayer()]
    return PipelineGenerator(layers, width, height, seed)


def create_simple_rooms_pipeline(
    width: int,
    height: int,
    seed: int = 0,
    corridor_style: Literal["sequential", "nearest"] | None = None,
) -> PipelineGenerator:
    """Non-overlapping rectangular rooms joined by L-shaped corridors.

    Args:
        corridor_style: "sequential" joins rooms in placement order,
            "nearest" joins each room to its closest unjoined neighbor.
            If None, uses config.ROOMS_CORRIDOR_STYLE.

    Raises:
        ValueError: If the corridor style is not recognized.
    """
    if corridor_style is None:
        corridor_style = config.ROOMS_CORRIDOR_STYLE

    corridors: GenerationLayer
    if corridor_style == "sequential":
        corridors = SequentialCorridorsLayer()
    elif corridor_style == "nearest":
        corridors = NearestCorridorsLayer()
    else:
        raise ValueError(f"Unknown corridor style: {corridor_style!r}")

    layers = [
        # 1. Rooms, then the corridors joining them
        SimpleRoomsLayer(),
        corridors,
        # 2. Player near the middle, exit at the far end of the walkable area
        StartingPointLayer(),
        DistantExitLayer(),
        # 3. Nearest-neighbor corridors can leave islands behind
        ConnectivityRepairLayer(),
    ]
    return PipelineGenerator(layers, width, height, seed)


def create_bsp_rooms_pipeline(
    width: int, height: int, seed: int = 0
) -> PipelineGenerator:
    """One room per BSP leaf, siblings joined bottom-up."""
    layers = [
        BspRoomsLayer(),
        StartingPointLayer(),
        DistantExitLayer(),
        ConnectivityRepairLayer(),
    ]
    return PipelineGenerator(layers, width, height, seed)


def create_bsp_interior_pipeline(
    width: int, height: int, seed: int = 0
) -> PipelineGenerator:
    """Building interior: the whole map subdivided into rooms with doorways."""
    layers = [
        BspInteriorLayer(),
        StartingPointLayer(),
        DistantExitLayer(),
        ConnectivityRepairLayer(),
    ]
    return PipelineGenerator(layers, width, height, seed)


def create_drunkard_walk_pipeline(
    width: int,
    height: int,
    seed: int = 0,
    walk: DrunkardsWalkLayer | None = None,
) -> PipelineGenerator:
    """Caves dug by random walkers.

    Args:
        walk: A configured walk layer, e.g. ``DrunkardsWalkLayer.fat_passages()``.
            If None, uses the open halls preset.
    """
    if walk is None:
        walk = DrunkardsWalkLayer.open_halls()

    layers = [
        walk,
        StartingPointLayer(),
        DistantExitLayer(),
        ConnectivityRepairLayer(),
    ]
    return PipelineGenerator(layers, width, height, seed)


def create_maze_pipeline(width: int, height: int, seed: int = 0) -> PipelineGenerator:
    """Perfect maze with the player in the top-left corner.

    A perfect maze is connected by construction, so no repair layer runs;
    carving a repair corridor would also open a loop.
    """
    layers = [
        MazeLayer(),
        StartingPointLayer(XStart.LEFT, YStart.TOP),
        DistantExitLayer(),
    ]
    return PipelineGenerator(layers, width, height, seed)


def create_voronoi_pipeline(
    width: int, height: int, seed: int = 0
) -> PipelineGenerator:
    """Voronoi hive with unreachable cells walled off."""
    layers = [
        VoronoiHiveLayer(),
        StartingPointLayer(),
        CullUnreachableLayer(),
        DistantExitLayer(),
        ConnectivityRepairLayer(),
    ]
    return PipelineGenerator(layers, width, height, seed)


def create_uniform_random_pipeline(
    width: int, height: int, seed: int = 0
) -> PipelineGenerator:
    """Independent coin flips per cell, with a repair corridor to the exit.

    The exit is placed by straight-line distance so that the coverage of
    the noise itself is left intact as far as possible.
    """
    layers = [
        NoiseLayer(),
        StartingPointLayer(),
        DistantExitLayer(metric="straight"),
        ConnectivityRepairLayer(),
    ]
    return PipelineGenerator(layers, width, height, seed)


_FACTORIES = {
    Algorithm.CELLULAR_AUTOMATA: create_cellular_automata_pipeline,
    Algorithm.SIMPLE_ROOMS: create_simple_rooms_pipeline,
    Algorithm.BSP_ROOMS: create_bsp_rooms_pipeline,
    Algorithm.BSP_INTERIOR: create_bsp_interior_pipeline,
    Algorithm.DRUNKARD_WALK: create_drunkard_walk_pipeline,
    Algorithm.MAZE: create_maze_pipeline,
    Algorithm.VORONOI: create_voronoi_pipeline,
    Algorithm.UNIFORM_RANDOM: create_uniform_random_pipeline,
}
