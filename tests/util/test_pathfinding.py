"""Tests for the distance sweep and line helpers."""

from __future__ import annotations

from warrens.environment.map import GameMap
from warrens.environment.tile_types import TileTypeID
from warrens.util.pathfinding import (
    CARDINAL_COST,
    DIAGONAL_COST,
    UNREACHABLE,
    compute_distance_map,
    line_between,
)


def _open_room(width: int = 7, height: int = 7) -> GameMap:
    game_map = GameMap(1, width, height)
    game_map.tiles[1:-1, 1:-1] = TileTypeID.FLOOR
    return game_map


class TestComputeDistanceMap:
    def test_start_is_zero(self) -> None:
        game_map = _open_room()
        distance = compute_distance_map(game_map, (3, 3))
        assert distance[3, 3] == 0

    def test_cardinal_and_diagonal_costs(self) -> None:
        game_map = _open_room()
        distance = compute_distance_map(game_map, (3, 3))

        assert distance[4, 3] == CARDINAL_COST
        assert distance[3, 5] == 2 * CARDINAL_COST
        assert distance[4, 4] == DIAGONAL_COST

    def test_walls_are_unreachable(self) -> None:
        game_map = _open_room()
        distance = compute_distance_map(game_map, (3, 3))

        assert distance[0, 0] == UNREACHABLE
        assert distance[6, 3] == UNREACHABLE

    def test_sealed_pocket_is_unreachable(self) -> None:
        """Floor cut off by a wall column never gets a distance."""
        game_map = _open_room(9, 5)
        game_map.tiles[4, :] = TileTypeID.WALL

        distance = compute_distance_map(game_map, (1, 1))

        assert distance[3, 3] != UNREACHABLE
        assert distance[5, 1] == UNREACHABLE
        assert distance[7, 3] == UNREACHABLE

    def test_stairs_are_walkable(self) -> None:
        game_map = _open_room()
        game_map.tiles[3, 3] = TileTypeID.DOWN_STAIRS

        distance = compute_distance_map(game_map, (1, 1))

        assert distance[3, 3] != UNREACHABLE

    def test_refreshes_blocked_map(self) -> None:
        game_map = _open_room()
        compute_distance_map(game_map, (3, 3))

        assert not game_map.blocked[3, 3]
        assert game_map.blocked[0, 0]


class TestLineBetween:
    def test_includes_both_endpoints(self) -> None:
        assert line_between((0, 0), (3, 0)) == [(0, 0), (1, 0), (2, 0), (3, 0)]

    def test_diagonal_line(self) -> None:
        assert line_between((1, 1), (4, 4)) == [(1, 1), (2, 2), (3, 3), (4, 4)]

    def test_single_point(self) -> None:
        assert line_between((5, 2), (5, 2)) == [(5, 2)]

    def test_returns_plain_ints(self) -> None:
        points = line_between((0, 0), (5, 3))
        assert all(type(x) is int and type(y) is int for x, y in points)
