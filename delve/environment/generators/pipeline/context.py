"""Generation context for the pipeline map generator.

The GenerationContext is a mutable container that holds all state during map
generation. Each layer in the pipeline receives the same context and modifies
it in place. This avoids copying the grid array between layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from delve.environment.generators.base import GeneratedMapData
from delve.environment.grid import Grid
from delve.environment.tile_types import Cell
from delve.types import Position
from delve.util.coordinates import Rect
from delve.util.rng import RandomStream


class IncompleteGenerationError(RuntimeError):
    """Raised when a pipeline finishes without placing a player and exit."""


@dataclass
class GenerationContext:
    """Mutable state container passed through the generation pipeline.

    Attributes:
        width: Map width in tiles.
        height: Map height in tiles.
        grid: The Grid being shaped. Starts filled with Wall.
        rng: Random stream for every decision made during this run.
        rooms: Rooms carved so far, in carve order. Room layers append here
            and corridor layers read it.
        player: Player start, set by a placement layer.
        exit: Exit position, set by a placement layer.
    """

    width: int
    height: int
    grid: Grid
    rng: RandomStream
    rooms: list[Rect] = field(default_factory=list)
    player: Position | None = None
    exit: Position | None = None

    @classmethod
    def create_empty(
        cls,
        width: int,
        height: int,
        seed: int = 0,
        fill_cell: Cell = Cell.WALL,
    ) -> GenerationContext:
        """Create an empty generation context.

        Args:
            width: Map width in tiles.
            height: Map height in tiles.
            seed: Seed for the context's random stream.
            fill_cell: Cell state to fill the initial grid with.

        Returns:
            A new GenerationContext ready for layer processing.

        Raises:
            InvalidDimensions: If width or height is not positive.
        """
        grid = Grid(width, height, fill=fill_cell)
        return cls(width=width, height=height, grid=grid, rng=RandomStream(seed))

    def interior(self) -> Rect:
        """The map minus a one-cell Wall border.

        Maps narrower than three cells along an axis have no room for a border
        on that axis, so the whole extent is used instead.
        """
        margin_x = 1 if self.width >= 3 else 0
        margin_y = 1 if self.height >= 3 else 0
        return Rect(
            margin_x,
            margin_y,
            self.width - 2 * margin_x,
            self.height - 2 * margin_y,
        )

    def add_room(self, room: Rect) -> None:
        """Carve ``room`` as Floor and record it."""
        self.grid.fill_rect(room, Cell.FLOOR)
        self.rooms.append(room)

    def to_generated_map_data(self) -> GeneratedMapData:
        """Convert this context to the generator output.

        Raises:
            IncompleteGenerationError: If no layer placed the player or exit.
        """
        if self.player is None or self.exit is None:
            raise IncompleteGenerationError(
                "Pipeline finished without placing a player and an exit"
            )
        return GeneratedMapData(
            grid=self.grid,
            player=self.player,
            exit=self.exit,
            rooms=list(self.rooms),
        )
