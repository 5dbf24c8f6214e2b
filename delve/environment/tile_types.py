"""
Cell states and the render-time tile classification.

A grid stores one ``Cell`` per tile, as a ``uint8`` discriminant:
0 = Floor, 1 = Wall. That byte layout is the raw buffer handed to renderers.

Renderers additionally split Wall into plain "wall" and "inner wall": a Wall
cell is an inner wall when none of its up to 8 neighbors (clipped at the map
edge) is Floor. ``classify_tiles`` computes that three-way ``TileClass`` for a
whole grid at once; it is derived from the cells and never stored.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from delve.environment.grid import Grid


class Cell(IntEnum):
    """The two cell states. Values are the raw buffer bytes."""

    FLOOR = 0
    WALL = 1

    @property
    def walkable(self) -> bool:
        return self is Cell.FLOOR


class TileClass(IntEnum):
    """Three-way render classification of a cell."""

    FLOOR = 0
    WALL = 1
    INNER_WALL = 2


class RenderKey(StrEnum):
    """Opaque keys a renderer maps to sprites, glyphs or colors."""

    FLOOR = "floor"
    WALL = "wall"
    INNER_WALL = "inner-wall"
    PLAYER = "player"
    EXIT = "exit"


TILE_CLASS_RENDER_KEYS: dict[TileClass, RenderKey] = {
    TileClass.FLOOR: RenderKey.FLOOR,
    TileClass.WALL: RenderKey.WALL,
    TileClass.INNER_WALL: RenderKey.INNER_WALL,
}


def floor_neighbor_mask(floor: np.ndarray) -> np.ndarray:
    """Boolean map of cells with at least one Floor cell among their 8 neighbors.

    Args:
        floor: Boolean array, True where the cell is Floor. Shape (height, width).
    """
    height, width = floor.shape
    padded = np.zeros((height + 2, width + 2), dtype=bool)
    padded[1:-1, 1:-1] = floor
    result = np.zeros_like(floor, dtype=bool)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dy == 0 and dx == 0:
                continue
            result |= padded[1 + dy : 1 + dy + height, 1 + dx : 1 + dx + width]
    return result


def classify_tiles(grid: Grid) -> np.ndarray:
    """Return a ``TileClass`` value for every cell, shape (height, width)."""
    floor = grid.cells == Cell.FLOOR
    classes = np.full(floor.shape, TileClass.WALL, dtype=np.uint8)
    classes[floor] = TileClass.FLOOR
    classes[~floor & ~floor_neighbor_mask(floor)] = TileClass.INNER_WALL
    return classes


def classify_cell(grid: Grid, row: int, col: int) -> TileClass:
    """Classify a single cell without building the whole map."""
    if grid.get(row, col) == Cell.FLOOR:
        return TileClass.FLOOR
    for r in range(max(row - 1, 0), min(row + 2, grid.height)):
        for c in range(max(col - 1, 0), min(col + 2, grid.width)):
            if (r, c) != (row, col) and grid.cells[r, c] == Cell.FLOOR:
                return TileClass.WALL
    return TileClass.INNER_WALL
