"""Binary space partitioning layers.

- BspRoomsLayer: One room per partition leaf, sibling rooms joined by corridors
- BspInteriorLayer: Every leaf is a room; partition walls stay up with a
  single doorway per split, so no corridors are needed

Both layers split the map with ``tcod.bsp``. Splits alternate between the
two axes and stop once a region cannot be divided into two children of at
least ``min_region_size`` cells along the split axis.
"""

from __future__ import annotations

import logging

import tcod.bsp

from delve import config
from delve.environment.connectivity import carve_corridor
from delve.environment.generators.pipeline.context import GenerationContext
from delve.environment.generators.pipeline.layer import GenerationLayer
from delve.environment.tile_types import Cell
from delve.types import Position
from delve.util.coordinates import Rect
from delve.util.rng import RandomStream

logger = logging.getLogger(__name__)


def partition(
    rng: RandomStream, area: Rect, min_region_size: int
) -> tcod.bsp.BSP:
    """Recursively split ``area`` into a BSP tree.

    A node prefers to split along the axis its parent did not use. If that
    axis is too short it tries the other one, and becomes a leaf when neither
    axis fits two children of ``min_region_size``.

    Args:
        rng: Stream used for the first axis and every split position.
        area: Region covered by the root node.
        min_region_size: Smallest child extent along the split axis.

    Returns:
        The root node of the tree.
    """
    min_region_size = max(1, min_region_size)
    root = tcod.bsp.BSP(x=area.x1, y=area.y1, width=area.width, height=area.height)

    def can_split(node: tcod.bsp.BSP, horizontal: bool) -> bool:
        extent = node.height if horizontal else node.width
        return extent >= 2 * min_region_size

    stack: list[tuple[tcod.bsp.BSP, bool]] = [(root, rng.next_bool())]
    while stack:
        node, horizontal = stack.pop()
        if not can_split(node, horizontal):
            horizontal = not horizontal
            if not can_split(node, horizontal):
                continue
        if horizontal:
            position = node.y + rng.roll_dice(
                min_region_size, node.height - min_region_size
            )
        else:
            position = node.x + rng.roll_dice(
                min_region_size, node.width - min_region_size
            )
        node.split_once(horizontal, position)
        for child in reversed(node.children):
            stack.append((child, not horizontal))

    return root


def _node_rect(node: tcod.bsp.BSP) -> Rect:
    return Rect(node.x, node.y, node.width, node.height)


class BspRoomsLayer(GenerationLayer):
    """Places one room inside every BSP leaf and joins siblings bottom-up.

    Rooms keep a one-cell margin inside their leaf where the leaf is large
    enough. Internal nodes are visited deepest first; each joins a room from
    its first subtree to a room from its second with an L-shaped corridor.
    Both subtrees are already connected at that point, so the finished map is
    one connected component.
    """

    def __init__(
        self,
        min_region_size: int = config.BSP_MIN_REGION_SIZE,
        min_room_size: int = config.BSP_MIN_ROOM_SIZE,
    ) -> None:
        self.min_region_size = min_region_size
        self.min_room_size = min_room_size

    def _room_in(self, rng: RandomStream, leaf: tcod.bsp.BSP) -> Rect:
        margin_x = 1 if leaf.width >= 3 else 0
        margin_y = 1 if leaf.height >= 3 else 0
        space_w = leaf.width - 2 * margin_x
        space_h = leaf.height - 2 * margin_y
        w = rng.roll_dice(min(self.min_room_size, space_w), space_w)
        h = rng.roll_dice(min(self.min_room_size, space_h), space_h)
        x = leaf.x + margin_x + rng.next_range(0, space_w - w + 1)
        y = leaf.y + margin_y + rng.next_range(0, space_h - h + 1)
        return Rect(x, y, w, h)

    def apply(self, ctx: GenerationContext) -> None:
        root = partition(ctx.rng, ctx.interior(), self.min_region_size)

        leaf_rooms: dict[int, Rect] = {}
        for node in root.pre_order():
            if not node.children:
                room = self._room_in(ctx.rng, node)
                ctx.add_room(room)
                leaf_rooms[id(node)] = room

        def subtree_rooms(node: tcod.bsp.BSP) -> list[Rect]:
            return [leaf_rooms[id(n)] for n in node.pre_order() if not n.children]

        for node in root.inverted_level_order():
            if not node.children:
                continue
            first, second = node.children
            start = ctx.rng.choice(subtree_rooms(first)).center_position()
            end = ctx.rng.choice(subtree_rooms(second)).center_position()
            carve_corridor(ctx.grid, start, end, horizontal_first=ctx.rng.next_bool())

        logger.debug("BSP produced %d rooms", len(leaf_rooms))


class BspInteriorLayer(GenerationLayer):
    """Subdivides the whole interior into wall-separated rooms.

    Every leaf becomes Floor except its last row and column, which stay Wall
    and form the partition walls shared with its neighbors. Each split then
    gets exactly one doorway through its partition wall.
    """

    def __init__(self, min_region_size: int = config.BSP_MIN_REGION_SIZE) -> None:
        # Leaves need at least two cells per side to hold Floor next to their
        # own partition wall.
        self.min_region_size = max(3, min_region_size)

    def apply(self, ctx: GenerationContext) -> None:
        # The root reaches the last row and column so that the trailing wall
        # of the bottom-right leaves coincides with the map border.
        margin_x = 1 if ctx.width >= 3 else 0
        margin_y = 1 if ctx.height >= 3 else 0
        area = Rect(margin_x, margin_y, ctx.width - margin_x, ctx.height - margin_y)
        root = partition(ctx.rng, area, self.min_region_size)

        for node in root.pre_order():
            if not node.children:
                room = Rect(node.x, node.y, node.width - 1, node.height - 1)
                if room.width > 0 and room.height > 0:
                    ctx.add_room(room)

        doors = 0
        for node in root.pre_order():
            if node.children and self._add_doorway(ctx, node):
                doors += 1
        logger.debug("BSP interior: %d rooms, %d doorways", len(ctx.rooms), doors)

    def _add_doorway(self, ctx: GenerationContext, node: tcod.bsp.BSP) -> bool:
        grid = ctx.grid
        first, second = node.children
        candidates: list[Position] = []
        if node.horizontal:
            # Partition wall is the last row of the first child.
            row = node.position - 1
            for col in range(node.x, node.x + node.width - 1):
                if grid.is_floor(row - 1, col) and grid.is_floor(row + 1, col):
                    candidates.append(Position(row, col))
        else:
            col = node.position - 1
            for row in range(node.y, node.y + node.height - 1):
                if grid.is_floor(row, col - 1) and grid.is_floor(row, col + 1):
                    candidates.append(Position(row, col))

        if candidates:
            door = ctx.rng.choice(candidates)
            grid.set(door.row, door.col, Cell.FLOOR)
            return True

        # No straight doorway lines up; fall back to a short corridor between
        # the two halves.
        first_floor = self._floor_cells(ctx, _node_rect(first))
        second_floor = self._floor_cells(ctx, _node_rect(second))
        if not first_floor or not second_floor:
            logger.debug("Split at %r has no Floor on one side", _node_rect(node))
            return False
        carve_corridor(
            grid, ctx.rng.choice(first_floor), ctx.rng.choice(second_floor)
        )
        return True

    @staticmethod
    def _floor_cells(ctx: GenerationContext, rect: Rect) -> list[Position]:
        return [
            Position(row, col)
            for row in range(rect.y1, rect.y2)
            for col in range(rect.x1, rect.x2)
            if ctx.grid.is_floor(row, col)
        ]
