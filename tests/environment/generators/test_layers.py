"""Tests for individual pipeline layers.

Covers:
- Terrain layers: NoiseLayer, CellularAutomataLayer
- Room layers: SimpleRoomsLayer and both corridor layers
- BSP layers: BspRoomsLayer, BspInteriorLayer
- Cave layers: DrunkardsWalkLayer, VoronoiHiveLayer
- MazeLayer
- Placement layers
"""

from __future__ import annotations

import numpy as np
import pytest

from delve.environment import connectivity
from delve.environment.generators.pipeline import GenerationContext
from delve.environment.generators.pipeline.layers import (
    BspInteriorLayer,
    BspRoomsLayer,
    CellularAutomataLayer,
    ConnectivityRepairLayer,
    CullUnreachableLayer,
    DistantExitLayer,
    DrunkardsWalkLayer,
    MazeLayer,
    NearestCorridorsLayer,
    NoiseLayer,
    SequentialCorridorsLayer,
    SimpleRoomsLayer,
    StartingPointLayer,
    Symmetry,
    VoronoiHiveLayer,
    XStart,
    YStart,
)
from delve.environment.generators.pipeline.layers.bsp import partition
from delve.environment.generators.pipeline.layers.terrain import count_wall_neighbors
from delve.environment.grid import Grid
from delve.environment.tile_types import Cell
from delve.types import Position
from delve.util.coordinates import Rect
from delve.util.rng import RandomStream

SEEDS = range(10)


def _context_from_string(text: str, seed: int = 0) -> GenerationContext:
    grid = Grid.from_string(text)
    return GenerationContext(
        width=grid.width, height=grid.height, grid=grid, rng=RandomStream(seed)
    )


def _border_is_wall(grid: Grid) -> bool:
    cells = grid.cells
    return bool(
        np.all(cells[0, :] == Cell.WALL)
        and np.all(cells[-1, :] == Cell.WALL)
        and np.all(cells[:, 0] == Cell.WALL)
        and np.all(cells[:, -1] == Cell.WALL)
    )


def _is_single_component(grid: Grid) -> bool:
    floor = grid.floor_mask()
    if not floor.any():
        return False
    start = grid.position(int(np.argmax(floor)))
    return bool(np.array_equal(connectivity.flood_fill(grid, start), floor))


# =============================================================================
# Terrain
# =============================================================================


class TestNoiseLayer:
    def test_probability_extremes(self) -> None:
        ctx = GenerationContext.create_empty(20, 10, seed=1)
        NoiseLayer(floor_probability=1.0).apply(ctx)
        assert ctx.grid.count(Cell.FLOOR) == 200

        NoiseLayer(floor_probability=0.0).apply(ctx)
        assert ctx.grid.count(Cell.WALL) == 200

    def test_one_draw_per_cell(self) -> None:
        ctx = GenerationContext.create_empty(20, 10, seed=1)
        NoiseLayer().apply(ctx)
        assert ctx.rng.draws == 200

    def test_same_seed_same_noise(self) -> None:
        a = GenerationContext.create_empty(30, 20, seed=5)
        b = GenerationContext.create_empty(30, 20, seed=5)
        NoiseLayer().apply(a)
        NoiseLayer().apply(b)
        assert a.grid == b.grid


class TestCellularAutomataLayer:
    def test_out_of_bounds_counts_as_wall(self) -> None:
        counts = count_wall_neighbors(np.zeros((3, 3), dtype=np.uint8))

        assert counts[1, 1] == 0
        assert counts[0, 0] == 5
        assert counts[0, 1] == 3

    def test_all_wall_counts_eight(self) -> None:
        counts = count_wall_neighbors(np.ones((4, 5), dtype=np.uint8))
        assert np.all(counts == 8)

    def test_isolated_wall_becomes_floor(self) -> None:
        ctx = _context_from_string(
            """
            .......
            .......
            .......
            ...#...
            .......
            .......
            .......
            """
        )
        CellularAutomataLayer(iterations=1).apply(ctx)

        assert ctx.grid.get(3, 3) is Cell.FLOOR
        # Corners see five out-of-bounds walls
        assert ctx.grid.get(0, 0) is Cell.WALL

    def test_zero_iterations_is_a_no_op(self) -> None:
        ctx = GenerationContext.create_empty(20, 20, seed=3)
        NoiseLayer().apply(ctx)
        before = ctx.grid.copy()
        CellularAutomataLayer(iterations=0).apply(ctx)
        assert ctx.grid == before

    def test_uses_no_randomness(self) -> None:
        ctx = GenerationContext.create_empty(20, 20, seed=3)
        NoiseLayer().apply(ctx)
        draws = ctx.rng.draws
        CellularAutomataLayer().apply(ctx)
        assert ctx.rng.draws == draws


# =============================================================================
# Rooms
# =============================================================================


class TestSimpleRoomsLayer:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_rooms_do_not_overlap(self, seed: int) -> None:
        ctx = GenerationContext.create_empty(80, 50, seed=seed)
        SimpleRoomsLayer().apply(ctx)

        assert ctx.rooms
        for i, room in enumerate(ctx.rooms):
            for other in ctx.rooms[i + 1 :]:
                assert not room.intersects(other)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_rooms_stay_inside_border(self, seed: int) -> None:
        ctx = GenerationContext.create_empty(40, 30, seed=seed)
        SimpleRoomsLayer().apply(ctx)

        for room in ctx.rooms:
            assert room.x1 >= 1 and room.y1 >= 1
            assert room.x2 <= 39 and room.y2 <= 29
            assert 6 <= room.width < 10
            assert 6 <= room.height < 10
        assert _border_is_wall(ctx.grid)

    def test_rooms_are_floor(self) -> None:
        ctx = GenerationContext.create_empty(40, 30, seed=2)
        SimpleRoomsLayer().apply(ctx)

        for room in ctx.rooms:
            assert np.all(ctx.grid.cells[room.y1 : room.y2, room.x1 : room.x2] == 0)

    def test_respects_max_rooms(self) -> None:
        ctx = GenerationContext.create_empty(80, 50, seed=2)
        SimpleRoomsLayer(max_rooms=3).apply(ctx)
        assert 1 <= len(ctx.rooms) <= 3

    def test_tiny_map_gets_one_room(self) -> None:
        """Room sizes shrink to fit; the first attempt always succeeds."""
        ctx = GenerationContext.create_empty(5, 5, seed=0)
        SimpleRoomsLayer().apply(ctx)

        assert ctx.rooms == [Rect(1, 1, 3, 3)]
        assert ctx.grid.count(Cell.FLOOR) == 9


class TestCorridorLayers:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_sequential_corridors_connect_all_rooms(self, seed: int) -> None:
        ctx = GenerationContext.create_empty(80, 50, seed=seed)
        SimpleRoomsLayer().apply(ctx)
        SequentialCorridorsLayer().apply(ctx)

        first = ctx.rooms[0].center_position()
        for room in ctx.rooms[1:]:
            assert connectivity.is_reachable(ctx.grid, first, room.center_position())

    def test_nearest_corridors_join_close_rooms(self) -> None:
        ctx = GenerationContext.create_empty(30, 10, seed=0)
        ctx.add_room(Rect(1, 1, 3, 3))
        ctx.add_room(Rect(20, 1, 3, 3))
        ctx.add_room(Rect(8, 1, 3, 3))
        NearestCorridorsLayer().apply(ctx)

        # Room 0 joins room 2 (closest), which joins room 1
        assert connectivity.is_reachable(ctx.grid, Position(2, 2), Position(2, 21))
        assert ctx.grid.floor_mask()[2, 2:21].all()

    def test_nearest_corridors_measure_straight_line_distance(self) -> None:
        ctx = GenerationContext.create_empty(20, 12, seed=0)
        ctx.add_room(Rect(1, 1, 3, 3))  # center (2, 2)
        ctx.add_room(Rect(7, 7, 3, 3))  # center (8, 8): 8.49 away, 12 steps
        ctx.add_room(Rect(10, 1, 3, 3))  # center (2, 11): 9 away, 9 steps
        NearestCorridorsLayer().apply(ctx)

        # Room 0 turns down at column 8 instead of running on to room 2
        assert ctx.grid.get(5, 8) == Cell.FLOOR
        assert ctx.grid.get(2, 9) == Cell.WALL


# =============================================================================
# Binary space partitioning
# =============================================================================


class TestPartition:
    def test_leaves_tile_the_area(self) -> None:
        area = Rect(1, 1, 60, 40)
        root = partition(RandomStream(4), area, 8)
        leaves = [node for node in root.pre_order() if not node.children]

        assert len(leaves) > 1
        assert sum(leaf.width * leaf.height for leaf in leaves) == 60 * 40
        for leaf in leaves:
            assert area.x1 <= leaf.x and leaf.x + leaf.width <= area.x2
            assert area.y1 <= leaf.y and leaf.y + leaf.height <= area.y2

    def test_children_respect_min_size(self) -> None:
        root = partition(RandomStream(9), Rect(0, 0, 64, 48), 8)
        for node in root.pre_order():
            if node.children:
                for child in node.children:
                    extent = child.height if node.horizontal else child.width
                    assert extent >= 8

    def test_small_area_is_a_single_leaf(self) -> None:
        root = partition(RandomStream(1), Rect(0, 0, 10, 10), 8)
        assert not root.children


class TestBspRoomsLayer:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_all_rooms_connected(self, seed: int) -> None:
        ctx = GenerationContext.create_empty(80, 50, seed=seed)
        BspRoomsLayer().apply(ctx)

        assert len(ctx.rooms) > 1
        assert _is_single_component(ctx.grid)
        assert _border_is_wall(ctx.grid)

    def test_rooms_do_not_overlap(self) -> None:
        ctx = GenerationContext.create_empty(80, 50, seed=11)
        BspRoomsLayer().apply(ctx)
        for i, room in enumerate(ctx.rooms):
            for other in ctx.rooms[i + 1 :]:
                overlap_w = min(room.x2, other.x2) - max(room.x1, other.x1)
                overlap_h = min(room.y2, other.y2) - max(room.y1, other.y1)
                assert overlap_w <= 0 or overlap_h <= 0


class TestBspInteriorLayer:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_interior_is_connected(self, seed: int) -> None:
        ctx = GenerationContext.create_empty(60, 40, seed=seed)
        BspInteriorLayer().apply(ctx)

        assert len(ctx.rooms) > 1
        assert _is_single_component(ctx.grid)
        assert _border_is_wall(ctx.grid)

    def test_rooms_are_separated_by_walls(self) -> None:
        """Every room keeps Wall on its last row and column."""
        ctx = GenerationContext.create_empty(60, 40, seed=5)
        BspInteriorLayer().apply(ctx)

        for room in ctx.rooms:
            assert np.all(ctx.grid.cells[room.y1 : room.y2, room.x1 : room.x2] == 0)
        # Floor is never wider than a room, so walls split the map
        assert ctx.grid.count(Cell.FLOOR) < (60 - 2) * (40 - 2)


# =============================================================================
# Caves
# =============================================================================


class TestDrunkardsWalkLayer:
    @pytest.mark.parametrize(
        "layer",
        [
            DrunkardsWalkLayer.open_area(),
            DrunkardsWalkLayer.open_halls(),
            DrunkardsWalkLayer.winding_passages(),
            DrunkardsWalkLayer.fat_passages(),
            DrunkardsWalkLayer.fearful_symmetry(),
        ],
        ids=["open_area", "open_halls", "winding", "fat", "symmetry"],
    )
    def test_presets_reach_target(self, layer: DrunkardsWalkLayer) -> None:
        ctx = GenerationContext.create_empty(40, 30, seed=7)
        layer.apply(ctx)

        assert ctx.grid.count(Cell.FLOOR) >= int(layer.floor_percent * 40 * 30)
        assert _border_is_wall(ctx.grid)

    def test_symmetry_both_mirrors_the_map(self) -> None:
        ctx = GenerationContext.create_empty(41, 31, seed=3)
        DrunkardsWalkLayer(symmetry=Symmetry.BOTH, floor_percent=0.3).apply(ctx)

        floor = ctx.grid.floor_mask()
        assert np.array_equal(floor, np.fliplr(floor))
        assert np.array_equal(floor, np.flipud(floor))

    def test_max_walkers_bounds_the_work(self) -> None:
        ctx = GenerationContext.create_empty(40, 30, seed=3)
        DrunkardsWalkLayer(lifetime=1, floor_percent=1.0, max_walkers=5).apply(ctx)
        # Start cell plus at most one cell per walker
        assert ctx.grid.count(Cell.FLOOR) <= 6


class TestVoronoiHiveLayer:
    def test_scatter_seeds_are_distinct_and_inside(self) -> None:
        ctx = GenerationContext.create_empty(40, 30, seed=1)
        seeds = VoronoiHiveLayer(n_seeds=64).scatter_seeds(ctx)

        assert seeds.shape == (64, 2)
        assert len({tuple(s) for s in seeds.tolist()}) == 64
        assert np.all((seeds[:, 0] >= 1) & (seeds[:, 0] <= 28))
        assert np.all((seeds[:, 1] >= 1) & (seeds[:, 1] <= 38))

    def test_seed_count_clamps_to_interior(self) -> None:
        ctx = GenerationContext.create_empty(4, 4, seed=1)
        assert VoronoiHiveLayer(n_seeds=64).scatter_seeds(ctx).shape == (4, 2)

    def test_membership_nearest_seed(self) -> None:
        ctx = GenerationContext.create_empty(10, 1, seed=1)
        seeds = np.array([[0, 1], [0, 8]])
        region = VoronoiHiveLayer().membership(ctx, seeds)

        assert region.tolist() == [[0, 0, 0, 0, 0, 1, 1, 1, 1, 1]]

    def test_manhattan_membership(self) -> None:
        ctx = GenerationContext.create_empty(5, 5, seed=1)
        seeds = np.array([[0, 0], [4, 4]])
        region = VoronoiHiveLayer(distance="manhattan").membership(ctx, seeds)

        assert region[0, 0] == 0
        assert region[4, 4] == 1
        # (1, 3) is 4 steps from both; ties go to the lower index
        assert region[1, 3] == 0

    def test_unknown_distance_raises(self) -> None:
        with pytest.raises(ValueError):
            VoronoiHiveLayer(distance="chebyshev")  # type: ignore[arg-type]

    def test_single_region_opens_the_interior(self) -> None:
        ctx = GenerationContext.create_empty(12, 8, seed=1)
        VoronoiHiveLayer(n_seeds=1).apply(ctx)

        assert ctx.grid.count(Cell.FLOOR) == 10 * 6
        assert _border_is_wall(ctx.grid)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_hive_has_floor_and_walls(self, seed: int) -> None:
        ctx = GenerationContext.create_empty(80, 50, seed=seed)
        VoronoiHiveLayer().apply(ctx)

        floor = ctx.grid.count(Cell.FLOOR)
        assert 0 < floor < 78 * 48
        assert _border_is_wall(ctx.grid)


# =============================================================================
# Maze
# =============================================================================


class TestMazeLayer:
    @pytest.mark.parametrize(("width", "height"), [(11, 11), (21, 15), (20, 14)])
    def test_every_cell_is_visited(self, width: int, height: int) -> None:
        ctx = GenerationContext.create_empty(width, height, seed=2)
        MazeLayer().apply(ctx)

        cells = ctx.grid.cells
        for row in range(1, 2 * ((height - 1) // 2), 2):
            for col in range(1, 2 * ((width - 1) // 2), 2):
                assert cells[row, col] == Cell.FLOOR

    @pytest.mark.parametrize("seed", SEEDS)
    def test_maze_is_a_spanning_tree(self, seed: int) -> None:
        """Connected, and Floor adjacencies number one less than Floor cells."""
        ctx = GenerationContext.create_empty(21, 15, seed=seed)
        MazeLayer().apply(ctx)

        floor = ctx.grid.floor_mask()
        edges = int(np.count_nonzero(floor[:, 1:] & floor[:, :-1])) + int(
            np.count_nonzero(floor[1:, :] & floor[:-1, :])
        )
        assert _is_single_component(ctx.grid)
        assert edges == int(np.count_nonzero(floor)) - 1

    def test_even_cells_stay_wall(self) -> None:
        ctx = GenerationContext.create_empty(21, 15, seed=4)
        MazeLayer().apply(ctx)
        assert np.all(ctx.grid.cells[::2, ::2] == Cell.WALL)

    def test_too_small_for_a_maze(self) -> None:
        ctx = GenerationContext.create_empty(2, 9, seed=4)
        MazeLayer().apply(ctx)
        assert ctx.grid.count(Cell.FLOOR) == 0


# =============================================================================
# Placement
# =============================================================================


class TestStartingPointLayer:
    def test_starts_on_nearest_floor_to_center(self) -> None:
        ctx = _context_from_string(
            """
            #######
            #.#####
            ###.###
            #######
            #######
            """
        )
        StartingPointLayer().apply(ctx)
        # Center is (2, 3), which is Floor
        assert ctx.player == Position(2, 3)

    def test_anchor_positions(self) -> None:
        ctx = GenerationContext.create_empty(10, 8)

        assert StartingPointLayer(XStart.LEFT, YStart.TOP).anchor(ctx) == (1, 1)
        assert StartingPointLayer(XStart.RIGHT, YStart.BOTTOM).anchor(ctx) == (6, 8)
        assert StartingPointLayer().anchor(ctx) == (4, 5)

    def test_carves_anchor_on_solid_map(self) -> None:
        ctx = GenerationContext.create_empty(9, 9)
        StartingPointLayer().apply(ctx)

        assert ctx.player == Position(4, 4)
        assert ctx.grid.get(4, 4) is Cell.FLOOR


class TestDistantExitLayer:
    CORRIDOR = """
    #########
    #.......#
    #########
    """

    def test_path_metric_picks_far_end(self) -> None:
        ctx = _context_from_string(self.CORRIDOR)
        ctx.player = Position(1, 1)
        DistantExitLayer().apply(ctx)
        assert ctx.exit == Position(1, 7)

    def test_path_metric_follows_walls(self) -> None:
        """The exit is the farthest cell by walking, not by straight line."""
        ctx = _context_from_string(
            """
            #######
            #.....#
            #####.#
            #.....#
            #######
            """
        )
        ctx.player = Position(1, 5)
        DistantExitLayer().apply(ctx)
        assert ctx.exit == Position(3, 1)

    def test_path_metric_stays_in_players_component(self) -> None:
        ctx = _context_from_string(
            """
            ##########
            #...##...#
            ##########
            """
        )
        ctx.player = Position(1, 1)
        DistantExitLayer().apply(ctx)
        assert ctx.exit == Position(1, 3)

    def test_straight_metric_ignores_walls(self) -> None:
        ctx = _context_from_string(
            """
            ##########
            #...##...#
            ##########
            """
        )
        ctx.player = Position(1, 1)
        DistantExitLayer(metric="straight").apply(ctx)
        assert ctx.exit == Position(1, 8)

    def test_isolated_player_gets_a_carved_exit(self) -> None:
        ctx = GenerationContext.create_empty(5, 5)
        ctx.grid.set(2, 2, Cell.FLOOR)
        ctx.player = Position(2, 2)
        DistantExitLayer().apply(ctx)

        assert ctx.exit == Position(1, 2)
        assert ctx.grid.get(1, 2) is Cell.FLOOR

    def test_single_cell_map_shares_the_cell(self) -> None:
        ctx = GenerationContext.create_empty(1, 1)
        ctx.grid.set(0, 0, Cell.FLOOR)
        ctx.player = Position(0, 0)
        DistantExitLayer().apply(ctx)
        assert ctx.exit == Position(0, 0)

    def test_needs_a_player(self) -> None:
        ctx = _context_from_string(self.CORRIDOR)
        with pytest.raises(RuntimeError):
            DistantExitLayer().apply(ctx)

    def test_unknown_metric_raises(self) -> None:
        with pytest.raises(ValueError):
            DistantExitLayer(metric="teleport")  # type: ignore[arg-type]


class TestRepairAndCull:
    TWO_ROOMS = """
    #########
    #..###..#
    #..###..#
    #########
    """

    def test_repair_connects_exit(self) -> None:
        ctx = _context_from_string(self.TWO_ROOMS)
        ctx.player = Position(1, 1)
        ctx.exit = Position(2, 7)
        ConnectivityRepairLayer().apply(ctx)

        assert connectivity.is_reachable(ctx.grid, ctx.player, ctx.exit)

    def test_repair_draws_nothing_when_connected(self) -> None:
        ctx = _context_from_string(self.TWO_ROOMS)
        ctx.player = Position(1, 1)
        ctx.exit = Position(2, 2)
        before = ctx.grid.copy()
        ConnectivityRepairLayer().apply(ctx)

        assert ctx.grid == before
        assert ctx.rng.draws == 0

    def test_cull_removes_other_room(self) -> None:
        ctx = _context_from_string(self.TWO_ROOMS)
        ctx.player = Position(1, 1)
        CullUnreachableLayer().apply(ctx)

        assert ctx.grid.count(Cell.FLOOR) == 4
