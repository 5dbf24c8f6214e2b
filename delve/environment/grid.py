"""The rectangular cell container every generator writes into.

A Grid owns a numpy ``uint8`` array of shape (height, width) holding ``Cell``
values. Cell (row, col) lives at linear index ``row * width + col``, which is
also its offset in the raw byte buffer returned by ``to_bytes``.
"""

from __future__ import annotations

from numbers import Integral

import numpy as np

from delve.environment.tile_types import Cell
from delve.types import Position, TileCoord, TileIndex
from delve.util.coordinates import Rect


class MapGenerationError(Exception):
    """Base class for errors raised by the map engine."""


class InvalidDimensions(MapGenerationError, ValueError):
    """Raised when a width or height is not a positive integer."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(
            f"Map dimensions must be positive, got width={width}, height={height}"
        )
        self.width = int(width)
        self.height = int(height)


class OutOfBounds(MapGenerationError, IndexError):
    """Raised when a row/col pair falls outside the grid."""

    def __init__(self, row: int, col: int, width: int, height: int) -> None:
        super().__init__(
            f"Cell (row={row}, col={col}) is outside a {width}x{height} grid"
        )
        self.row = row
        self.col = col


def validate_dimensions(width: int, height: int) -> None:
    """Raise InvalidDimensions unless both sizes are positive integers."""
    for size in (width, height):
        if isinstance(size, bool) or not isinstance(size, Integral) or size <= 0:
            raise InvalidDimensions(width, height)


class Grid:
    """Fixed-size rectangular map of Floor/Wall cells."""

    def __init__(
        self, width: TileCoord, height: TileCoord, fill: Cell = Cell.WALL
    ) -> None:
        validate_dimensions(width, height)
        self.width = int(width)
        self.height = int(height)
        self.cells = np.full((height, width), fill_value=fill, dtype=np.uint8)

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @classmethod
    def from_string(cls, map_string: str) -> Grid:
        """Build a grid from a text picture.

        ``#`` is Wall, any other character is Floor. Blank lines and surrounding
        whitespace are ignored; short lines are padded with Wall.

        Example:
            Grid.from_string('''
                #####
                #...#
                #####
            ''')
        """
        lines = [line.strip() for line in map_string.splitlines()]
        lines = [line for line in lines if line]
        if not lines:
            raise InvalidDimensions(0, 0)
        width = max(len(line) for line in lines)
        grid = cls(width, len(lines))
        for row, line in enumerate(lines):
            for col, char in enumerate(line):
                if char != "#":
                    grid.cells[row, col] = Cell.FLOOR
        return grid

    def to_string(self) -> str:
        """Render as text, ``#`` for Wall and ``.`` for Floor."""
        return "\n".join(
            "".join("#" if cell == Cell.WALL else "." for cell in row)
            for row in self.cells
        )

    def copy(self) -> Grid:
        new_grid = Grid(self.width, self.height)
        new_grid.cells[:, :] = self.cells
        return new_grid

    def freeze(self) -> None:
        """Make the cell array read-only. Further writes raise ValueError."""
        self.cells.flags.writeable = False

    @property
    def frozen(self) -> bool:
        return not self.cells.flags.writeable

    # -------------------------------------------------------------------------
    # Coordinates
    # -------------------------------------------------------------------------

    @property
    def shape(self) -> tuple[int, int]:
        return (self.height, self.width)

    def in_bounds(self, row: TileCoord, col: TileCoord) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def _check_bounds(self, row: TileCoord, col: TileCoord) -> None:
        if not self.in_bounds(row, col):
            raise OutOfBounds(row, col, self.width, self.height)

    def index(self, row: TileCoord, col: TileCoord) -> TileIndex:
        """Linear buffer index of (row, col)."""
        self._check_bounds(row, col)
        return row * self.width + col

    def position(self, index: TileIndex) -> Position:
        """Inverse of ``index``."""
        if not 0 <= index < self.width * self.height:
            raise OutOfBounds(
                index // self.width, index % self.width, self.width, self.height
            )
        return Position(index // self.width, index % self.width)

    def center(self) -> Position:
        return Position(self.height // 2, self.width // 2)

    # -------------------------------------------------------------------------
    # Cell access
    # -------------------------------------------------------------------------

    def get(self, row: TileCoord, col: TileCoord) -> Cell:
        self._check_bounds(row, col)
        return Cell(int(self.cells[row, col]))

    def set(self, row: TileCoord, col: TileCoord, cell: Cell) -> None:
        self._check_bounds(row, col)
        self.cells[row, col] = cell

    def is_floor(self, row: TileCoord, col: TileCoord) -> bool:
        """Bounds-tolerant Floor check; anything off the map is not Floor."""
        return self.in_bounds(row, col) and self.cells[row, col] == Cell.FLOOR

    def count(self, cell: Cell) -> int:
        return int(np.count_nonzero(self.cells == cell))

    def floor_mask(self) -> np.ndarray:
        return self.cells == Cell.FLOOR

    def fill_rect(self, rect: Rect, cell: Cell) -> None:
        """Set every cell of ``rect`` (clipped to the grid) to ``cell``."""
        x1, x2 = max(rect.x1, 0), min(rect.x2, self.width)
        y1, y2 = max(rect.y1, 0), min(rect.y2, self.height)
        if x1 < x2 and y1 < y2:
            self.cells[y1:y2, x1:x2] = cell

    def to_bytes(self) -> bytes:
        """Row-major buffer, one discriminant byte per cell."""
        return self.cells.tobytes(order="C")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.shape == other.shape and bool(
            np.array_equal(self.cells, other.cells)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height})"
