"""Tests for the room layers."""

from __future__ import annotations

import itertools

import numpy as np
import pytest

from warrens.environment.generators.base import MissingPreconditionError
from warrens.environment.generators.pipeline import (
    BspDungeonLayer,
    BspInteriorLayer,
    GenerationContext,
    RoomCornerRounder,
    RoomDrawer,
    RoomExploder,
    RoomSort,
    RoomSorter,
    SimpleMapLayer,
)
from warrens.environment.generators.pipeline.layers.rooms import random_point_in
from warrens.environment.tile_types import TileTypeID
from warrens.util.coordinates import Rect
from warrens.util.pathfinding import UNREACHABLE, compute_distance_map
from warrens.util.rng import RNG, RNGProvider


@pytest.fixture
def ctx() -> GenerationContext:
    return GenerationContext.create_empty(1, 80, 43)


class TestRandomPointIn:
    def test_stays_inside_span(self, rng: RNG) -> None:
        room = Rect(4, 7, 5, 3)
        for _ in range(200):
            x, y = random_point_in(rng, room)
            assert room.x1 <= x < room.x2
            assert room.y1 <= y < room.y2


# =============================================================================
# Room starters
# =============================================================================


class TestSimpleMapLayer:
    def test_rooms_never_overlap(self, rng: RNG, ctx: GenerationContext) -> None:
        SimpleMapLayer().apply(rng, ctx)

        assert ctx.rooms
        for a, b in itertools.combinations(ctx.rooms, 2):
            assert not a.intersects(b)

    def test_rooms_fit_on_map(self, rng: RNG, ctx: GenerationContext) -> None:
        SimpleMapLayer().apply(rng, ctx)

        for room in ctx.rooms:
            assert room.x1 >= 0 and room.y1 >= 0
            assert room.x2 <= ctx.width - 2
            assert room.y2 <= ctx.height - 2

    def test_carves_nothing(self, rng: RNG, ctx: GenerationContext) -> None:
        SimpleMapLayer().apply(rng, ctx)

        assert ctx.game_map.count_tiles(TileTypeID.FLOOR) == 0


class TestBspDungeonLayer:
    def test_rooms_keep_their_distance(
        self, rng: RNG, ctx: GenerationContext
    ) -> None:
        """Rooms grown by two cells still do not touch each other."""
        BspDungeonLayer().apply(rng, ctx)

        assert ctx.rooms
        for a, b in itertools.combinations(ctx.rooms, 2):
            grown = Rect.from_bounds(a.x1 - 2, a.y1 - 2, a.x2 + 2, a.y2 + 2)
            assert not grown.intersects(b)

    def test_rooms_stay_off_the_edge(self, rng: RNG, ctx: GenerationContext) -> None:
        BspDungeonLayer().apply(rng, ctx)

        for room in ctx.rooms:
            assert room.x1 >= 3 and room.y1 >= 3
            assert room.x2 <= ctx.width - 4
            assert room.y2 <= ctx.height - 4
        assert ctx.game_map.count_tiles(TileTypeID.FLOOR) == 0


class TestBspInteriorLayer:
    def test_carves_connected_rooms(self, rng: RNG, ctx: GenerationContext) -> None:
        BspInteriorLayer().apply(rng, ctx)

        assert len(ctx.rooms) > 1
        distance = compute_distance_map(ctx.game_map, ctx.rooms[0].center())
        for room in ctx.rooms:
            area = ctx.game_map.tiles[room.x1 : room.x2, room.y1 : room.y2]
            assert (area == TileTypeID.FLOOR).all()
            assert distance[room.center()] != UNREACHABLE

    def test_border_stays_wall(self, rng: RNG, ctx: GenerationContext) -> None:
        BspInteriorLayer().apply(rng, ctx)

        tiles = ctx.game_map.tiles
        assert (tiles[0, :] == TileTypeID.WALL).all()
        assert (tiles[-1, :] == TileTypeID.WALL).all()
        assert (tiles[:, 0] == TileTypeID.WALL).all()
        assert (tiles[:, -1] == TileTypeID.WALL).all()


# =============================================================================
# Room meta layers
# =============================================================================


def three_rooms() -> list[Rect]:
    return [Rect(30, 5, 4, 4), Rect(2, 30, 6, 4), Rect(38, 18, 5, 5)]


class TestRoomSorter:
    @pytest.mark.parametrize(
        ("sort_by", "expected_x1"),
        [
            (RoomSort.LEFTMOST, [2, 30, 38]),
            (RoomSort.RIGHTMOST, [38, 30, 2]),
            (RoomSort.TOPMOST, [30, 38, 2]),
            (RoomSort.BOTTOMMOST, [2, 38, 30]),
            (RoomSort.CENTRAL, [38, 30, 2]),
        ],
    )
    def test_sort_orders(
        self,
        rng: RNG,
        ctx: GenerationContext,
        sort_by: RoomSort,
        expected_x1: list[int],
    ) -> None:
        ctx.rooms = three_rooms()

        RoomSorter(sort_by).apply(rng, ctx)

        assert [room.x1 for room in ctx.rooms] == expected_x1

    def test_requires_rooms(self, rng: RNG, ctx: GenerationContext) -> None:
        with pytest.raises(MissingPreconditionError):
            RoomSorter(RoomSort.LEFTMOST).apply(rng, ctx)


class TestRoomDrawer:
    def test_room_centres_become_floor(self, ctx: GenerationContext) -> None:
        rng = RNGProvider(99).get("test.rooms")
        rooms = [Rect(3 + 8 * i, 5, 6, 6) for i in range(8)]
        ctx.rooms = rooms

        RoomDrawer().apply(rng, ctx)

        for room in rooms:
            assert ctx.game_map.tiles[room.center()] == TileTypeID.FLOOR

    def test_carving_stays_inside_room_bounds(
        self, rng: RNG, ctx: GenerationContext
    ) -> None:
        rooms = [Rect(3 + 8 * i, 5, 6, 6) for i in range(8)]
        ctx.rooms = rooms

        RoomDrawer().apply(rng, ctx)

        inside = np.zeros_like(ctx.game_map.tiles, dtype=bool)
        for room in rooms:
            inside[room.x1 : room.x2 + 1, room.y1 : room.y2 + 1] = True
        floor = ctx.game_map.tiles == TileTypeID.FLOOR
        assert not (floor & ~inside).any()

    def test_room_at_map_edge_is_clipped(self, rng: RNG) -> None:
        ctx = GenerationContext.create_empty(1, 10, 10)
        ctx.rooms = [Rect(5, 5, 8, 8)]

        RoomDrawer().apply(rng, ctx)

        tiles = ctx.game_map.tiles
        assert (tiles[-1, :] == TileTypeID.WALL).all()
        assert (tiles[:, -1] == TileTypeID.WALL).all()


class TestRoomExploder:
    def test_only_adds_floor(self, rng: RNG, ctx: GenerationContext) -> None:
        rooms = [Rect(10, 10, 6, 6), Rect(40, 20, 6, 6)]
        ctx.rooms = rooms
        RoomDrawer().apply(rng, ctx)
        before = ctx.game_map.tiles == TileTypeID.FLOOR

        RoomExploder().apply(rng, ctx)

        after = ctx.game_map.tiles == TileTypeID.FLOOR
        assert after[before].all()
        assert ctx.game_map.count_tiles(TileTypeID.DOWN_STAIRS) == 0


class TestRoomCornerRounder:
    def test_fills_the_four_corners(self, rng: RNG, ctx: GenerationContext) -> None:
        room = Rect(2, 2, 5, 5)
        ctx.game_map.tiles[3:8, 3:8] = TileTypeID.FLOOR
        ctx.rooms = [room]

        RoomCornerRounder().apply(rng, ctx)

        tiles = ctx.game_map.tiles
        for corner in ((3, 3), (7, 3), (3, 7), (7, 7)):
            assert tiles[corner] == TileTypeID.WALL
        assert ctx.game_map.count_tiles(TileTypeID.FLOOR) == 21

    def test_leaves_corner_with_corridor_alone(
        self, rng: RNG, ctx: GenerationContext
    ) -> None:
        room = Rect(2, 2, 5, 5)
        ctx.game_map.tiles[3:8, 3:8] = TileTypeID.FLOOR
        ctx.game_map.tiles[3, 2] = TileTypeID.FLOOR
        ctx.rooms = [room]

        RoomCornerRounder().apply(rng, ctx)

        assert ctx.game_map.tiles[3, 3] == TileTypeID.FLOOR
