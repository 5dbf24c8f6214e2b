"""Rectangles and small geometry helpers in tile coordinates.

Geometry uses ``x`` for the column and ``y`` for the row, matching how rooms
and partitions are usually described. Convert to a ``Position`` (row, col)
only at the grid boundary.
"""

from __future__ import annotations

import math

from delve.types import Position, TileCoord


class Rect:
    """Rectangle/bounding box in tile coordinates.

    ``x2`` and ``y2`` are exclusive, so a Rect covers ``width * height`` cells.
    """

    def __init__(self, x: TileCoord, y: TileCoord, w: TileCoord, h: TileCoord) -> None:
        self.x1: TileCoord = x
        self.y1: TileCoord = y
        self.x2: TileCoord = x + w
        self.y2: TileCoord = y + h

    @property
    def width(self) -> TileCoord:
        return self.x2 - self.x1

    @property
    def height(self) -> TileCoord:
        return self.y2 - self.y1

    def center(self) -> tuple[int, int]:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def center_position(self) -> Position:
        """Center of the rectangle as a grid Position."""
        x, y = self.center()
        return Position(y, x)

    def intersects(self, other: Rect) -> bool:
        """True if the rectangles overlap or touch along an edge."""
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rect):
            return NotImplemented
        return (self.x1, self.y1, self.x2, self.y2) == (
            other.x1,
            other.y1,
            other.x2,
            other.y2,
        )

    def __hash__(self) -> int:
        return hash((self.x1, self.y1, self.x2, self.y2))

    def __repr__(self) -> str:
        return f"Rect(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"


def euclidean_distance(a: Position, b: Position) -> float:
    return math.hypot(a.row - b.row, a.col - b.col)
