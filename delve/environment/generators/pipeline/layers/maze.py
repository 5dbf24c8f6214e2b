"""Perfect maze layer.

The maze is carved on a half-resolution lattice: logical cell (r, c) sits on
map cell (2r + 1, 2c + 1), and the map cell between two logical neighbors is
the wall that can be knocked down. A randomized depth-first backtracker
visits every logical cell exactly once and removes one wall per visit, so the
passages form a spanning tree: exactly one path joins any two Floor cells.
"""

from __future__ import annotations

import logging

from delve.environment.generators.pipeline.context import GenerationContext
from delve.environment.generators.pipeline.layer import GenerationLayer
from delve.environment.tile_types import Cell

logger = logging.getLogger(__name__)

# Logical steps as (d_row, d_col): top, right, bottom, left.
_STEPS: tuple[tuple[int, int], ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))


class MazeLayer(GenerationLayer):
    """Carves a perfect maze with a randomized depth-first backtracker."""

    def apply(self, ctx: GenerationContext) -> None:
        rows = (ctx.height - 1) // 2
        cols = (ctx.width - 1) // 2
        if rows == 0 or cols == 0:
            logger.debug("Map %dx%d too small for a maze", ctx.width, ctx.height)
            return

        cells = ctx.grid.cells
        visited = [[False] * cols for _ in range(rows)]

        start = (ctx.rng.next_range(0, rows), ctx.rng.next_range(0, cols))
        visited[start[0]][start[1]] = True
        cells[2 * start[0] + 1, 2 * start[1] + 1] = Cell.FLOOR
        backtrace = [start]

        while backtrace:
            row, col = backtrace[-1]
            neighbors = [
                (row + d_row, col + d_col)
                for d_row, d_col in _STEPS
                if 0 <= row + d_row < rows
                and 0 <= col + d_col < cols
                and not visited[row + d_row][col + d_col]
            ]
            if not neighbors:
                backtrace.pop()
                continue

            next_row, next_col = ctx.rng.choice(neighbors)
            visited[next_row][next_col] = True
            # Knock down the wall between the two cells, then open the next one
            cells[row + next_row + 1, col + next_col + 1] = Cell.FLOOR
            cells[2 * next_row + 1, 2 * next_col + 1] = Cell.FLOOR
            backtrace.append((next_row, next_col))
