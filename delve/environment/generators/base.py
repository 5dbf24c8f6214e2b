from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from delve.environment.grid import Grid, validate_dimensions

if TYPE_CHECKING:
    from delve.types import Position, TileCoord
    from delve.util.coordinates import Rect


@dataclass
class GeneratedMapData:
    """A container for all raw data produced by a map generator."""

    grid: Grid
    player: Position
    exit: Position
    rooms: list[Rect] = field(default_factory=list)


class BaseMapGenerator(abc.ABC):
    """Abstract base class for map generation algorithms."""

    def __init__(self, map_width: TileCoord, map_height: TileCoord) -> None:
        validate_dimensions(map_width, map_height)
        self.map_width = map_width
        self.map_height = map_height

    @abc.abstractmethod
    def generate(self) -> GeneratedMapData:
        """Generate the map layout, player start and exit."""
        raise NotImplementedError
