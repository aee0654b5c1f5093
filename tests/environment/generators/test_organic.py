"""Tests for the organic starters: caves, mazes, DLA and Voronoi cells."""

from __future__ import annotations

import numpy as np
import pytest

from warrens import config
from warrens.environment.generators.pipeline import (
    CellularAutomataLayer,
    DistanceMetric,
    DLAAlgorithm,
    DLALayer,
    GenerationContext,
    InitialMapLayer,
    MazeLayer,
    Symmetry,
    VoronoiCellLayer,
)
from warrens.environment.generators.pipeline.layers.caves import (
    count_wall_neighbors,
)
from warrens.environment.generators.pipeline.layers.maze import MazeGrid
from warrens.environment.generators.pipeline.layers.voronoi import nearest_seed
from warrens.environment.tile_types import TileTypeID
from warrens.util.pathfinding import UNREACHABLE, compute_distance_map
from warrens.util.rng import RNG, RNGProvider


def border_is_wall(tiles: np.ndarray) -> bool:
    return bool(
        (tiles[0, :] == TileTypeID.WALL).all()
        and (tiles[-1, :] == TileTypeID.WALL).all()
        and (tiles[:, 0] == TileTypeID.WALL).all()
        and (tiles[:, -1] == TileTypeID.WALL).all()
    )


ORGANIC_PRESETS = [
    CellularAutomataLayer,
    MazeLayer,
    DLALayer.walk_inwards,
    DLALayer.walk_outwards,
    DLALayer.central_attractor,
    DLALayer.insectoid,
    DLALayer.heavy_erosion,
    VoronoiCellLayer.pythagoras,
    VoronoiCellLayer.manhattan,
    VoronoiCellLayer.chebyshev,
]


@pytest.mark.parametrize("factory", ORGANIC_PRESETS)
class TestOrganicPresets:
    def test_carves_inside_border(self, factory) -> None:
        rng = RNGProvider(3).get("map.builder")
        ctx = GenerationContext.create_empty(1, 60, 40)
        layer: InitialMapLayer = factory()

        layer.apply(rng, ctx)

        assert ctx.game_map.count_tiles(TileTypeID.FLOOR) > 0
        assert border_is_wall(ctx.game_map.tiles)

    def test_same_seed_same_layout(self, factory) -> None:
        layouts = []
        for _ in range(2):
            rng = RNGProvider("same").get("map.builder")
            ctx = GenerationContext.create_empty(1, 60, 40)
            factory().apply(rng, ctx)
            layouts.append(ctx.game_map.tiles.copy())

        assert np.array_equal(layouts[0], layouts[1])


# =============================================================================
# Cellular automata
# =============================================================================


class TestCountWallNeighbors:
    def test_counts_eight_neighbourhood(self) -> None:
        tiles = np.full((5, 5), TileTypeID.FLOOR, dtype=np.uint8)
        tiles[0, :] = TileTypeID.WALL

        counts = count_wall_neighbors(tiles)

        assert counts.shape == (3, 3)
        # Interior column x=1 touches the wall column on three cells.
        assert counts[0].tolist() == [3, 3, 3]
        assert counts[1].tolist() == [0, 0, 0]


class TestCellularAutomataLayer:
    def test_no_generations_keeps_noise(self, rng: RNG) -> None:
        ctx = GenerationContext.create_empty(1, 40, 30)

        CellularAutomataLayer(wall_chance=55, generations=0).apply(rng, ctx)

        floor_share = ctx.game_map.count_tiles(TileTypeID.FLOOR) / (38 * 28)
        assert 0.3 < floor_share < 0.6

    def test_open_floor_collapses_into_pillars(self, rng: RNG) -> None:
        """Cells with no wall neighbours become wall, as do crowded corners."""
        ctx = GenerationContext.create_empty(1, 20, 20)

        CellularAutomataLayer(wall_chance=0, generations=1).apply(rng, ctx)

        tiles = ctx.game_map.tiles
        assert (tiles[2:-2, 2:-2] == TileTypeID.WALL).all()
        assert tiles[1, 5] == TileTypeID.FLOOR
        assert tiles[1, 1] == TileTypeID.WALL

    def test_snapshot_per_generation(self, rng: RNG) -> None:
        config.SHOW_MAPGEN_VISUALIZER = True
        ctx = GenerationContext.create_empty(1, 20, 20)

        CellularAutomataLayer(generations=4).apply(rng, ctx)

        assert len(ctx.history) == 5


# =============================================================================
# Maze
# =============================================================================


class TestMazeGrid:
    def test_remove_walls_opens_both_sides(self) -> None:
        grid = MazeGrid(3, 3)

        grid.remove_walls((1, 1), (2, 1))

        assert not grid.walls[1, 1, 1]  # RIGHT
        assert not grid.walls[2, 1, 3]  # LEFT
        assert grid.walls[1, 1].sum() == 3

    def test_unvisited_neighbors_order_and_bounds(self) -> None:
        grid = MazeGrid(3, 3)
        grid.visited[1, 0] = True

        assert grid.unvisited_neighbors(0, 0) == [(0, 1)]
        assert grid.unvisited_neighbors(1, 1) == [(2, 1), (1, 2), (0, 1)]


class TestMazeLayer:
    def test_every_floor_cell_is_reachable(self, rng: RNG) -> None:
        ctx = GenerationContext.create_empty(1, 41, 31)

        MazeLayer().apply(rng, ctx)

        distance = compute_distance_map(ctx.game_map, (2, 2))
        floor = ctx.game_map.tiles == TileTypeID.FLOOR
        assert not (distance[floor] == UNREACHABLE).any()

    def test_visits_every_maze_cell(self, rng: RNG) -> None:
        ctx = GenerationContext.create_empty(1, 41, 31)

        MazeLayer().apply(rng, ctx)

        columns, rows = 41 // 2 - 2, 31 // 2 - 2
        for c in range(columns):
            for r in range(rows):
                assert ctx.game_map.tiles[(c + 1) * 2, (r + 1) * 2] == TileTypeID.FLOOR

    def test_perfect_maze_has_no_loops(self, rng: RNG) -> None:
        """A spanning tree over n cells carves exactly n - 1 passages."""
        ctx = GenerationContext.create_empty(1, 41, 31)

        MazeLayer().apply(rng, ctx)

        cells = (41 // 2 - 2) * (31 // 2 - 2)
        assert ctx.game_map.count_tiles(TileTypeID.FLOOR) == cells + cells - 1

    def test_too_small_map_raises(self, rng: RNG) -> None:
        ctx = GenerationContext.create_empty(1, 5, 5)

        with pytest.raises(ValueError, match="too small"):
            MazeLayer().apply(rng, ctx)


# =============================================================================
# DLA
# =============================================================================


class TestDLALayer:
    @pytest.mark.parametrize(
        "factory",
        [DLALayer.walk_inwards, DLALayer.walk_outwards, DLALayer.central_attractor],
    )
    def test_structure_grows_from_centre(self, rng: RNG, factory) -> None:
        ctx = GenerationContext.create_empty(1, 60, 40)

        factory().apply(rng, ctx)

        assert ctx.game_map.count_tiles(TileTypeID.FLOOR) >= 0.25 * 60 * 40
        distance = compute_distance_map(ctx.game_map, (30, 20))
        floor = ctx.game_map.tiles == TileTypeID.FLOOR
        assert not (distance[floor] == UNREACHABLE).any()

    def test_seeds_a_plus_at_centre(self, rng: RNG) -> None:
        ctx = GenerationContext.create_empty(1, 30, 20)

        DLALayer.walk_inwards().apply(rng, ctx)

        tiles = ctx.game_map.tiles
        for x, y in ((15, 10), (14, 10), (16, 10), (15, 9), (15, 11)):
            assert tiles[x, y] == TileTypeID.FLOOR

    @pytest.mark.parametrize("floor_percent", [0.0, 1.0, -0.5])
    def test_rejects_bad_floor_percent(self, floor_percent: float) -> None:
        with pytest.raises(ValueError):
            DLALayer(DLAAlgorithm.WALK_INWARDS, 0, Symmetry.NONE, floor_percent)


# =============================================================================
# Voronoi
# =============================================================================


class TestNearestSeed:
    @pytest.mark.parametrize("metric", list(DistanceMetric))
    def test_each_seed_owns_itself(self, metric: DistanceMetric) -> None:
        seeds = np.array([[1, 1], [8, 8], [1, 8]])

        owners = nearest_seed(seeds[:, 0], seeds[:, 1], seeds, metric)

        assert owners.tolist() == [0, 1, 2]

    def test_ties_go_to_lower_index(self) -> None:
        seeds = np.array([[0, 0], [4, 0]])

        xs, ys = np.array([2]), np.array([0])

        owner = nearest_seed(xs, ys, seeds, DistanceMetric.MANHATTAN)

        assert owner.tolist() == [0]

    def test_metrics_disagree_off_axis(self) -> None:
        """(3, 3) is nearer (0, 5) by Chebyshev, nearer (7, 3) by Manhattan."""
        seeds = np.array([[0, 5], [7, 3]])
        xs, ys = np.array([3]), np.array([3])

        manhattan = nearest_seed(xs, ys, seeds, DistanceMetric.MANHATTAN)
        chebyshev = nearest_seed(xs, ys, seeds, DistanceMetric.CHEBYSHEV)

        assert manhattan.tolist() == [1]
        assert chebyshev.tolist() == [0]


class TestVoronoiCellLayer:
    def test_single_seed_opens_whole_interior(self, rng: RNG) -> None:
        ctx = GenerationContext.create_empty(1, 20, 15)

        VoronoiCellLayer(n_seeds=1).apply(rng, ctx)

        assert (ctx.game_map.tiles[1:-1, 1:-1] == TileTypeID.FLOOR).all()

    def test_regions_are_separated_by_walls(self, rng: RNG) -> None:
        ctx = GenerationContext.create_empty(1, 60, 40)

        VoronoiCellLayer(n_seeds=16).apply(rng, ctx)

        interior = ctx.game_map.tiles[1:-1, 1:-1]
        assert (interior == TileTypeID.WALL).any()
        assert (interior == TileTypeID.FLOOR).any()

    def test_too_many_seeds_raises(self, rng: RNG) -> None:
        ctx = GenerationContext.create_empty(1, 5, 5)

        with pytest.raises(ValueError):
            VoronoiCellLayer(n_seeds=17).apply(rng, ctx)
