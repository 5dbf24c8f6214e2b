"""Room placement and corridor layers.

- SimpleRoomsLayer: Scatters non-overlapping rectangular rooms
- SequentialCorridorsLayer: Joins rooms in the order they were placed
- NearestCorridorsLayer: Joins each room to its nearest unconnected neighbor
"""

from __future__ import annotations

import logging

from delve import config
from delve.environment.connectivity import carve_corridor
from delve.environment.generators.pipeline.context import GenerationContext
from delve.environment.generators.pipeline.layer import GenerationLayer
from delve.util.coordinates import Rect, euclidean_distance

logger = logging.getLogger(__name__)


def clamp_room_size(
    min_size: int, max_size: int, available: int
) -> tuple[int, int]:
    """Fit a [min_size, max_size) room size range into ``available`` cells.

    The range never becomes empty: on a tiny map it collapses to a single
    size no larger than the space available (and at least one cell).
    """
    upper = max(1, min(max_size, available))
    lower = max(1, min(min_size, upper))
    return lower, upper


class SimpleRoomsLayer(GenerationLayer):
    """Places rectangular rooms at random positions without overlap.

    Each attempt rolls a room size and position inside the map interior and
    keeps the room only if it does not touch an earlier one. When attempts
    run out the layer settles for the rooms it has; the first attempt always
    succeeds, so at least one room is carved.
    """

    def __init__(
        self,
        max_rooms: int = config.ROOMS_MAX_ROOMS,
        min_room_size: int = config.ROOMS_MIN_SIZE,
        max_room_size: int = config.ROOMS_MAX_SIZE,
        max_attempts: int = config.ROOMS_PLACEMENT_ATTEMPTS,
    ) -> None:
        """Initialize the rooms layer.

        Args:
            max_rooms: Stop once this many rooms are placed.
            min_room_size: Smallest room side, inclusive.
            max_room_size: Largest room side, exclusive.
            max_attempts: Placement attempts before giving up on more rooms.
        """
        self.max_rooms = max(1, max_rooms)
        self.min_room_size = min_room_size
        self.max_room_size = max_room_size
        self.max_attempts = max(1, max_attempts)

    def apply(self, ctx: GenerationContext) -> None:
        area = ctx.interior()
        min_w, max_w = clamp_room_size(
            self.min_room_size, self.max_room_size, area.width
        )
        min_h, max_h = clamp_room_size(
            self.min_room_size, self.max_room_size, area.height
        )

        placed: list[Rect] = []
        for _ in range(self.max_attempts):
            if len(placed) >= self.max_rooms:
                break
            w = ctx.rng.next_range(min_w, max_w)
            h = ctx.rng.next_range(min_h, max_h)
            x = area.x1 + ctx.rng.next_range(0, area.width - w + 1)
            y = area.y1 + ctx.rng.next_range(0, area.height - h + 1)
            new_room = Rect(x, y, w, h)

            if any(new_room.intersects(other) for other in placed):
                continue

            ctx.add_room(new_room)
            placed.append(new_room)

        logger.debug("Placed %d rooms in %d attempts", len(placed), self.max_attempts)


class SequentialCorridorsLayer(GenerationLayer):
    """Joins every room to the one placed before it with an L-shaped corridor.

    The bend direction is chosen at random per corridor. Since every room is
    linked to its predecessor, all rooms end up connected.
    """

    def apply(self, ctx: GenerationContext) -> None:
        for prev_room, room in zip(ctx.rooms, ctx.rooms[1:], strict=False):
            carve_corridor(
                ctx.grid,
                prev_room.center_position(),
                room.center_position(),
                horizontal_first=ctx.rng.next_bool(),
            )


class NearestCorridorsLayer(GenerationLayer):
    """Joins each room to the closest room that has not been joined yet.

    Rooms are visited in placement order. Corridors run horizontally first,
    then vertically. This yields shorter corridors than sequential joining but
    does not by itself guarantee that every room is reachable.
    """

    def apply(self, ctx: GenerationContext) -> None:
        connected: set[int] = set()
        for i, room in enumerate(ctx.rooms):
            center = room.center_position()
            candidates = [
                (euclidean_distance(center, other.center_position()), j)
                for j, other in enumerate(ctx.rooms)
                if j != i and j not in connected
            ]
            if not candidates:
                continue
            _, nearest = min(candidates)
            carve_corridor(ctx.grid, center, ctx.rooms[nearest].center_position())
            connected.add(i)
