"""Reachability checks and repairs over 4-connected Floor cells.

Generators whose raw output may be split into islands (room and corridor
layouts, random noise, independent drunkard walkers) use these helpers to
prove, or restore, that the exit can be reached from the player.
"""

from __future__ import annotations

import logging
from collections import deque

import numpy as np
import tcod.path

from delve.environment.grid import Grid, MapGenerationError
from delve.environment.tile_types import Cell
from delve.types import Position

logger = logging.getLogger(__name__)

# Cardinal steps as (d_row, d_col): up, right, down, left.
CARDINAL_STEPS: tuple[tuple[int, int], ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))


class NoFloorCells(MapGenerationError):
    """Raised when a lookup needs a Floor cell but the grid has none."""


def flood_fill(grid: Grid, origin: Position) -> np.ndarray:
    """Return a boolean map of every Floor cell reachable from ``origin``.

    Movement is 4-connected. An origin that is not Floor reaches nothing.
    """
    visited = np.zeros(grid.shape, dtype=bool)
    if not grid.is_floor(origin.row, origin.col):
        return visited

    floor = grid.floor_mask()
    queue = deque([origin])
    visited[origin.row, origin.col] = True
    while queue:
        row, col = queue.popleft()
        for d_row, d_col in CARDINAL_STEPS:
            n_row, n_col = row + d_row, col + d_col
            if (
                0 <= n_row < grid.height
                and 0 <= n_col < grid.width
                and not visited[n_row, n_col]
                and floor[n_row, n_col]
            ):
                visited[n_row, n_col] = True
                queue.append(Position(n_row, n_col))
    return visited


def is_reachable(grid: Grid, start: Position, end: Position) -> bool:
    """True if a 4-connected Floor path joins ``start`` and ``end``."""
    if not grid.in_bounds(end.row, end.col):
        return False
    return bool(flood_fill(grid, start)[end.row, end.col])


def distance_map(grid: Grid, origin: Position) -> np.ndarray:
    """Step distance from ``origin`` to every cell over 4-connected Floor.

    Unreachable cells (and all Wall cells) hold ``np.iinfo(np.int32).max``.
    """
    dist = tcod.path.maxarray(grid.shape, dtype=np.int32)
    if not grid.is_floor(origin.row, origin.col):
        return dist
    cost = grid.floor_mask().astype(np.int32)
    dist[origin.row, origin.col] = 0
    tcod.path.dijkstra2d(dist, cost, cardinal=1, diagonal=None, out=dist)
    return dist


def nearest_floor(grid: Grid, near: Position) -> Position:
    """Floor cell closest to ``near`` by straight-line distance.

    Ties go to the cell with the lowest linear index.

    Raises:
        NoFloorCells: If the grid has no Floor at all.
    """
    floor = grid.floor_mask()
    if not floor.any():
        raise NoFloorCells(f"No Floor cells on {grid!r}")
    rows, cols = np.indices(grid.shape)
    dist2 = (rows - near.row) ** 2 + (cols - near.col) ** 2
    dist2 = np.where(floor, dist2, np.iinfo(np.int64).max)
    # argmin on the flattened array returns the first (lowest index) minimum
    return grid.position(int(np.argmin(dist2)))


def carve_corridor(
    grid: Grid, start: Position, end: Position, horizontal_first: bool = True
) -> list[Position]:
    """Carve an L-shaped Floor corridor between two cells.

    Returns the cells that were Wall before and are Floor now.
    """
    carved: list[Position] = []

    def carve(row: int, col: int) -> None:
        if grid.cells[row, col] != Cell.FLOOR:
            grid.cells[row, col] = Cell.FLOOR
            carved.append(Position(row, col))

    def h_tunnel(col1: int, col2: int, row: int) -> None:
        for col in range(min(col1, col2), max(col1, col2) + 1):
            carve(row, col)

    def v_tunnel(row1: int, row2: int, col: int) -> None:
        for row in range(min(row1, row2), max(row1, row2) + 1):
            carve(row, col)

    if horizontal_first:
        h_tunnel(start.col, end.col, start.row)
        v_tunnel(start.row, end.row, end.col)
    else:
        v_tunnel(start.row, end.row, start.col)
        h_tunnel(start.col, end.col, end.row)
    return carved


def ensure_reachable(
    grid: Grid, start: Position, end: Position, horizontal_first: bool = True
) -> list[Position]:
    """Carve a corridor from ``start`` to ``end`` unless one already exists.

    Returns the carved cells, empty when the pair was already connected.
    """
    if is_reachable(grid, start, end):
        return []
    carved = carve_corridor(grid, start, end, horizontal_first)
    logger.info(
        "Repaired connectivity between %s and %s by carving %d cells",
        tuple(start),
        tuple(end),
        len(carved),
    )
    return carved


def cull_unreachable(grid: Grid, origin: Position) -> int:
    """Turn every Floor cell not reachable from ``origin`` into Wall.

    Returns the number of cells culled.
    """
    unreachable = grid.floor_mask() & ~flood_fill(grid, origin)
    culled = int(np.count_nonzero(unreachable))
    grid.cells[unreachable] = Cell.WALL
    return culled
