"""
Configuration constants.

Centralizes all magic numbers and configuration values used by the map
generators. Organized by algorithm for easy tuning. Every layer reads its
defaults from here, so changing a value below changes the default maps.
"""

from typing import Literal

# =============================================================================
# GENERAL
# =============================================================================

# Default map size used by the CLI and benchmarks.
DEFAULT_MAP_WIDTH = 80
DEFAULT_MAP_HEIGHT = 50

# None derives a seed from the wall clock (milliseconds) for each new map.
RANDOM_SEED: int | None = None

# =============================================================================
# NOISE / UNIFORM RANDOM
# =============================================================================

# Probability that any single cell starts as Floor.
UNIFORM_FLOOR_PROBABILITY = 0.5

# =============================================================================
# CELLULAR AUTOMATA
# =============================================================================

# Initial Floor probability for the noise pass. Ties in the smoothing rule go to
# Floor, so the caves open up as they settle; starting at 0.42 keeps them
# between 30% and 70% Floor from 40x30 upward.
CA_FLOOR_PROBABILITY = 0.42
CA_ITERATIONS = 5
# A cell becomes Wall with at least this many Wall cells among its 8 neighbors.
# Out-of-bounds neighbors count as Wall.
CA_WALL_THRESHOLD = 5
# Turn Floor that is not reachable from the player back into Wall.
CA_CULL_UNREACHABLE = False

# =============================================================================
# ROOMS
# =============================================================================

# SimpleRooms: rooms are placed by rejection sampling.
ROOMS_MAX_ROOMS = 30
ROOMS_PLACEMENT_ATTEMPTS = 30
ROOMS_MIN_SIZE = 6
ROOMS_MAX_SIZE = 10  # Exclusive

# How SimpleRooms joins its rooms: in placement order, or each to its nearest.
ROOMS_CORRIDOR_STYLE: Literal["sequential", "nearest"] = "sequential"

# =============================================================================
# BINARY SPACE PARTITIONING
# =============================================================================

# Regions are never split into children smaller than this along the split axis.
BSP_MIN_REGION_SIZE = 8
# Smallest room carved inside a BspRooms leaf.
BSP_MIN_ROOM_SIZE = 4

# =============================================================================
# DRUNKARD'S WALK
# =============================================================================

DRUNKARD_LIFETIME = 400  # Steps per walker
DRUNKARD_FLOOR_PERCENT = 0.5  # Stop once this fraction of the map is Floor
DRUNKARD_MAX_WALKERS = 500  # Hard cap so small maps always terminate

# =============================================================================
# VORONOI
# =============================================================================

VORONOI_SEEDS = 64
VORONOI_DISTANCE: Literal["euclidean", "manhattan"] = "euclidean"
# Cells with at least this many 4-neighbors in a different region become Wall.
VORONOI_BOUNDARY_NEIGHBORS = 2
