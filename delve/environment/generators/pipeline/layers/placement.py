"""Player, exit and connectivity layers.

These run after a shape layer and turn a bare Floor/Wall layout into a
playable map:

- StartingPointLayer: Puts the player on the Floor cell nearest an anchor
- CullUnreachableLayer: Walls off Floor the player cannot reach
- DistantExitLayer: Puts the exit as far from the player as possible
- ConnectivityRepairLayer: Carves a corridor if the exit is still unreachable

Placement never fails. If a shape layer left no Floor at all, the anchor cell
is carved; if the player is the only Floor cell, a neighbor is carved for the
exit.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Literal

import numpy as np

from delve.environment import connectivity
from delve.environment.generators.pipeline.context import GenerationContext
from delve.environment.generators.pipeline.layer import GenerationLayer
from delve.environment.tile_types import Cell
from delve.types import Position

logger = logging.getLogger(__name__)

_UNREACHABLE = np.iinfo(np.int32).max


class XStart(Enum):
    """Horizontal anchor for the player start."""

    LEFT = auto()
    CENTER = auto()
    RIGHT = auto()


class YStart(Enum):
    """Vertical anchor for the player start."""

    TOP = auto()
    CENTER = auto()
    BOTTOM = auto()


def _anchor(extent: int, near: bool, center: bool) -> int:
    if center:
        return extent // 2
    value = 1 if near else extent - 2
    return min(max(value, 0), extent - 1)


class StartingPointLayer(GenerationLayer):
    """Places the player on the Floor cell closest to an anchor point."""

    def __init__(
        self, x_start: XStart = XStart.CENTER, y_start: YStart = YStart.CENTER
    ) -> None:
        self.x_start = x_start
        self.y_start = y_start

    def anchor(self, ctx: GenerationContext) -> Position:
        col = _anchor(
            ctx.width, self.x_start is XStart.LEFT, self.x_start is XStart.CENTER
        )
        row = _anchor(
            ctx.height, self.y_start is YStart.TOP, self.y_start is YStart.CENTER
        )
        return Position(row, col)

    def apply(self, ctx: GenerationContext) -> None:
        anchor = self.anchor(ctx)
        if ctx.grid.count(Cell.FLOOR) == 0:
            logger.warning("No Floor to start on; carving the anchor %s", tuple(anchor))
            ctx.grid.set(anchor.row, anchor.col, Cell.FLOOR)
        ctx.player = connectivity.nearest_floor(ctx.grid, anchor)

    def __repr__(self) -> str:
        return f"StartingPointLayer({self.x_start.name}, {self.y_start.name})"


class CullUnreachableLayer(GenerationLayer):
    """Turns every Floor cell the player cannot reach into Wall."""

    def apply(self, ctx: GenerationContext) -> None:
        if ctx.player is None:
            raise RuntimeError("CullUnreachableLayer needs a player position")
        culled = connectivity.cull_unreachable(ctx.grid, ctx.player)
        logger.debug("Culled %d unreachable floor cells", culled)


class DistantExitLayer(GenerationLayer):
    """Places the exit on the Floor cell farthest from the player.

    With ``metric="path"`` distance is the 4-connected walking distance, so
    the exit is reachable whenever the player has anywhere to go. With
    ``metric="straight"`` it is the Euclidean distance over all Floor cells,
    which ignores connectivity and leaves reachability to a later repair.
    Ties go to the lowest linear index.
    """

    def __init__(self, metric: Literal["path", "straight"] = "path") -> None:
        if metric not in ("path", "straight"):
            raise ValueError(f"Unknown exit metric: {metric!r}")
        self.metric = metric

    def apply(self, ctx: GenerationContext) -> None:
        player = ctx.player
        if player is None:
            raise RuntimeError("DistantExitLayer needs a player position")

        exit_position = None
        if self.metric == "path":
            exit_position = self._farthest_by_path(ctx, player)
        if exit_position is None:
            exit_position = self._farthest_by_straight_line(ctx, player)
        if exit_position is None:
            exit_position = self._carve_next_to(ctx, player)
        ctx.exit = exit_position

    @staticmethod
    def _farthest_by_path(ctx: GenerationContext, player: Position) -> Position | None:
        dist = connectivity.distance_map(ctx.grid, player)
        dist = np.where(dist == _UNREACHABLE, -1, dist)
        best = int(np.argmax(dist))
        if dist.flat[best] <= 0:
            return None
        return ctx.grid.position(best)

    @staticmethod
    def _farthest_by_straight_line(
        ctx: GenerationContext, player: Position
    ) -> Position | None:
        rows, cols = np.indices(ctx.grid.shape)
        dist2 = (rows - player.row) ** 2 + (cols - player.col) ** 2
        dist2 = np.where(ctx.grid.floor_mask(), dist2, -1)
        best = int(np.argmax(dist2))
        if dist2.flat[best] <= 0:
            return None
        return ctx.grid.position(best)

    @staticmethod
    def _carve_next_to(ctx: GenerationContext, player: Position) -> Position:
        for d_row, d_col in connectivity.CARDINAL_STEPS:
            row, col = player.row + d_row, player.col + d_col
            if ctx.grid.in_bounds(row, col):
                ctx.grid.set(row, col, Cell.FLOOR)
                logger.warning(
                    "Player is the only Floor; carved exit at %s", (row, col)
                )
                return Position(row, col)
        logger.warning("Single-cell map: exit shares the player's cell")
        return player

    def __repr__(self) -> str:
        return f"DistantExitLayer(metric={self.metric!r})"


class ConnectivityRepairLayer(GenerationLayer):
    """Guarantees the exit is reachable from the player.

    If no 4-connected Floor path exists, carves an L-shaped corridor between
    the two with a randomly chosen bend. Does nothing on connected maps and
    draws no random numbers in that case.
    """

    def apply(self, ctx: GenerationContext) -> None:
        if ctx.player is None or ctx.exit is None:
            raise RuntimeError("ConnectivityRepairLayer needs player and exit")
        if connectivity.is_reachable(ctx.grid, ctx.player, ctx.exit):
            return
        connectivity.ensure_reachable(
            ctx.grid, ctx.player, ctx.exit, horizontal_first=ctx.rng.next_bool()
        )
