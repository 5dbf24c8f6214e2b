from __future__ import annotations

from typing import NamedTuple

# =============================================================================
# TILE-BASED COORDINATE SYSTEMS (Always integers)
# =============================================================================


TileCoord = int  # Always integer tile position

# Linear index into a grid buffer: row * width + col
TileIndex = int


class Position(NamedTuple):
    """A (row, col) reference to a single grid cell."""

    row: TileCoord
    col: TileCoord


# =============================================================================
# GENERATION-RELATED TYPES
# =============================================================================

# Seeds are plain integers. None means "derive one from the wall clock".
RandomSeed = int | None

# Seeds are reduced to this many bits before seeding a stream.
SEED_BITS = 64
SEED_MASK = (1 << SEED_BITS) - 1
