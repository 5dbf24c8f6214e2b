"""Quality metrics for generated maps.

Generate many maps, measure each one, and average the results to score a
generator. Very low density (below ~10%) or a very short player-to-exit path
usually means the map is degenerate.
"""

from __future__ import annotations

import numpy as np

from delve.environment.connectivity import distance_map
from delve.environment.grid import Grid
from delve.types import Position

_UNREACHABLE = np.iinfo(np.int32).max


def density(grid: Grid) -> float:
    """Fraction of cells that are Floor, in [0, 1]."""
    return float(np.count_nonzero(grid.floor_mask())) / (grid.width * grid.height)


def path_length(grid: Grid, start: Position, end: Position) -> int | None:
    """Length in steps of the shortest 4-connected path, or None if unreachable."""
    if not grid.in_bounds(end.row, end.col):
        return None
    value = int(distance_map(grid, start)[end.row, end.col])
    return None if value == _UNREACHABLE else value
