"""Room layers.

Room starters fill `ctx.rooms`; the meta layers here reorder, draw and
reshape those rooms:
- SimpleMapLayer: scattered non-overlapping rooms
- BspDungeonLayer: rooms picked from a binary space partition
- BspInteriorLayer: the whole interior split into rooms, like a building
- RoomSorter, RoomDrawer, RoomExploder, RoomCornerRounder

SimpleMapLayer and BspDungeonLayer only record rectangles; RoomDrawer carves
them. BspInteriorLayer carves its own rooms and the doorways between them.
"""

from __future__ import annotations

import itertools
import math
from enum import Enum, auto

import numpy as np

from warrens import config
from warrens.environment.generators.pipeline.context import GenerationContext
from warrens.environment.generators.pipeline.layer import (
    InitialMapLayer,
    MetaMapLayer,
)
from warrens.environment.map import GameMap
from warrens.environment.tile_types import TileTypeID
from warrens.types import TileCoord, WorldTilePos
from warrens.util.coordinates import Rect
from warrens.util.rng import RNG

from .common import carve_stepped_corridor
from .excavation import run_walker


def random_point_in(rng: RNG, room: Rect) -> WorldTilePos:
    """A uniformly random cell inside the rectangle's [x1, x2) x [y1, y2) span."""
    x = room.x1 + rng.roll_dice(1, max(1, room.width)) - 1
    y = room.y1 + rng.roll_dice(1, max(1, room.height)) - 1
    return x, y


class SimpleMapLayer(InitialMapLayer):
    """Scatters up to SIMPLE_MAP_MAX_ROOMS rooms that never overlap.

    Each attempt rolls a size and a position and keeps the room only if it
    misses every room kept so far. Nothing is carved.
    """

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        width, height = ctx.width, ctx.height
        min_size = config.SIMPLE_MAP_MIN_ROOM_SIZE
        size_span = config.SIMPLE_MAP_MAX_ROOM_SIZE - min_size
        rooms: list[Rect] = []

        for _ in range(config.SIMPLE_MAP_MAX_ROOMS):
            w = rng.roll_dice(1, size_span) + min_size - 1
            h = rng.roll_dice(1, size_span) + min_size - 1
            if width - w - 1 < 1 or height - h - 1 < 1:
                continue
            x = rng.roll_dice(1, width - w - 1) - 1
            y = rng.roll_dice(1, height - h - 1) - 1
            new_room = Rect(x, y, w, h)
            if not any(new_room.intersects(other) for other in rooms):
                rooms.append(new_room)

        ctx.rooms = rooms


class BspDungeonLayer(InitialMapLayer):
    """Picks rooms out of a binary space partition of the map.

    The partition starts as one rectangle inset two cells from the edges and
    is quartered every time a room is placed in one of its parts. A candidate
    room is kept when, grown by two cells, it neither touches an earlier room
    nor leaves the map interior. Nothing is carved.
    """

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        game_map = ctx.game_map
        rects: list[Rect] = [Rect(2, 2, ctx.width - 5, ctx.height - 5)]
        self._add_subrects(rects, rects[0])
        rooms: list[Rect] = []

        for _ in range(config.BSP_DUNGEON_ATTEMPTS):
            rect = self._random_rect(rng, rects)
            candidate = self._random_sub_rect(rng, rect)
            if self._is_possible(game_map, candidate, rooms):
                rooms.append(candidate)
                self._add_subrects(rects, rect)

        ctx.rooms = rooms

    @staticmethod
    def _add_subrects(rects: list[Rect], rect: Rect) -> None:
        half_width = max(rect.width // 2, 1)
        half_height = max(rect.height // 2, 1)
        rects.append(Rect(rect.x1, rect.y1, half_width, half_height))
        rects.append(Rect(rect.x1, rect.y1 + half_height, half_width, half_height))
        rects.append(Rect(rect.x1 + half_width, rect.y1, half_width, half_height))
        rects.append(
            Rect(rect.x1 + half_width, rect.y1 + half_height, half_width, half_height)
        )

    @staticmethod
    def _random_rect(rng: RNG, rects: list[Rect]) -> Rect:
        if len(rects) == 1:
            return rects[0]
        return rects[rng.roll_dice(1, len(rects)) - 1]

    @staticmethod
    def _random_sub_rect(rng: RNG, rect: Rect) -> Rect:
        w = max(3, rng.roll_dice(1, min(rect.width, 10)) - 1) + 1
        h = max(3, rng.roll_dice(1, min(rect.height, 10)) - 1) + 1
        x = rect.x1 + rng.roll_dice(1, 6) - 1
        y = rect.y1 + rng.roll_dice(1, 6) - 1
        return Rect(x, y, w, h)

    @staticmethod
    def _is_possible(game_map: GameMap, rect: Rect, rooms: list[Rect]) -> bool:
        expanded = Rect.from_bounds(
            rect.x1 - 2, rect.y1 - 2, rect.x2 + 2, rect.y2 + 2
        )
        if expanded.x1 < 1 or expanded.y1 < 1:
            return False
        if expanded.x2 > game_map.width - 2 or expanded.y2 > game_map.height - 2:
            return False
        if any(expanded.intersects(room) for room in rooms):
            return False
        area = game_map.tiles[
            expanded.x1 : expanded.x2 + 1, expanded.y1 : expanded.y2 + 1
        ]
        return bool(np.all(area == TileTypeID.WALL))


class BspInteriorLayer(InitialMapLayer):
    """Splits the whole interior into rooms, then joins neighbours in order.

    Each split halves a rectangle horizontally or vertically (even odds) and
    leaves a one-cell wall between the halves; halves wider or taller than
    BSP_INTERIOR_MIN_ROOM_SIZE are split again. Consecutive rooms are joined
    by a stepped corridor between random cells inside them.
    """

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        game_map = ctx.game_map
        rects: list[Rect] = [Rect(1, 1, ctx.width - 2, ctx.height - 2)]
        self._add_subrects(rng, rects, rects[0])

        rooms = [room.copy() for room in rects]
        for room in rooms:
            game_map.tiles[room.x1 : room.x2, room.y1 : room.y2] = TileTypeID.FLOOR
            ctx.take_snapshot()

        for room, next_room in itertools.pairwise(rooms):
            start = random_point_in(rng, room)
            end = random_point_in(rng, next_room)
            carve_stepped_corridor(game_map, start, end)
            ctx.take_snapshot()

        ctx.rooms = rooms

    def _add_subrects(self, rng: RNG, rects: list[Rect], rect: Rect) -> None:
        # The rectangle being split is always the most recently added one.
        if rects:
            rects.pop()

        width = rect.width
        height = rect.height
        half_width = width // 2
        half_height = height // 2
        min_size = config.BSP_INTERIOR_MIN_ROOM_SIZE

        if rng.roll_dice(1, 4) <= 2:
            # Horizontal split
            left = Rect(rect.x1, rect.y1, half_width - 1, height)
            rects.append(left)
            if half_width > min_size:
                self._add_subrects(rng, rects, left)
            right = Rect(rect.x1 + half_width, rect.y1, half_width, height)
            rects.append(right)
            if half_width > min_size:
                self._add_subrects(rng, rects, right)
        else:
            # Vertical split
            top = Rect(rect.x1, rect.y1, width, half_height - 1)
            rects.append(top)
            if half_height > min_size:
                self._add_subrects(rng, rects, top)
            bottom = Rect(rect.x1, rect.y1 + half_height, width, half_height)
            rects.append(bottom)
            if half_height > min_size:
                self._add_subrects(rng, rects, bottom)


# =============================================================================
# Room meta layers
# =============================================================================


class RoomSort(Enum):
    LEFTMOST = auto()
    RIGHTMOST = auto()
    TOPMOST = auto()
    BOTTOMMOST = auto()
    CENTRAL = auto()


class RoomSorter(MetaMapLayer):
    """Reorders the room list. The order decides corridor and exit placement."""

    def __init__(self, sort_by: RoomSort) -> None:
        self.sort_by = sort_by

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        rooms = ctx.require_rooms()
        match self.sort_by:
            case RoomSort.LEFTMOST:
                rooms.sort(key=lambda r: r.x1)
            case RoomSort.RIGHTMOST:
                rooms.sort(key=lambda r: r.x1, reverse=True)
            case RoomSort.TOPMOST:
                rooms.sort(key=lambda r: r.y1)
            case RoomSort.BOTTOMMOST:
                rooms.sort(key=lambda r: r.y2, reverse=True)
            case RoomSort.CENTRAL:
                map_center = (ctx.width // 2, ctx.height // 2)
                rooms.sort(key=lambda r: math.dist(r.center(), map_center))


class RoomDrawer(MetaMapLayer):
    """Carves every room: a rectangle three times in four, else a circle."""

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        rooms = ctx.require_rooms()
        for room in rooms:
            if rng.roll_dice(1, 4) == 1:
                self._circle(ctx.game_map, room)
            else:
                self._rectangle(ctx.game_map, room)
            ctx.take_snapshot()

    @staticmethod
    def _clip(
        game_map: GameMap, x1: TileCoord, y1: TileCoord, x2: TileCoord, y2: TileCoord
    ) -> tuple[TileCoord, TileCoord, TileCoord, TileCoord]:
        """Clamp an inclusive box to the map interior."""
        return (
            max(1, x1),
            max(1, y1),
            min(game_map.width - 2, x2),
            min(game_map.height - 2, y2),
        )

    def _rectangle(self, game_map: GameMap, room: Rect) -> None:
        x1, y1, x2, y2 = self._clip(
            game_map, room.x1 + 1, room.y1 + 1, room.x2, room.y2
        )
        if x1 <= x2 and y1 <= y2:
            game_map.tiles[x1 : x2 + 1, y1 : y2 + 1] = TileTypeID.FLOOR

    def _circle(self, game_map: GameMap, room: Rect) -> None:
        radius = min(room.width, room.height) / 2.0
        center_x, center_y = room.center()
        x1, y1, x2, y2 = self._clip(game_map, room.x1, room.y1, room.x2, room.y2)
        if x1 > x2 or y1 > y2:
            return
        xs = np.arange(x1, x2 + 1)[:, np.newaxis]
        ys = np.arange(y1, y2 + 1)[np.newaxis, :]
        inside = np.hypot(xs - center_x, ys - center_y) <= radius
        game_map.tiles[x1 : x2 + 1, y1 : y2 + 1][inside] = TileTypeID.FLOOR


class RoomExploder(MetaMapLayer):
    """Sends a few short random walkers out of every room's centre.

    Each room gets `roll_dice(1, 20) - 5` walkers (none when that is zero or
    less), each living 20 steps.
    """

    WALKER_LIFETIME = 20

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        rooms = ctx.require_rooms()
        for room in rooms:
            start = room.center()
            n_diggers = rng.roll_dice(1, 20) - 5
            for _ in range(max(0, n_diggers)):
                run_walker(rng, ctx, start, self.WALKER_LIFETIME)


class RoomCornerRounder(MetaMapLayer):
    """Fills in room corners that have exactly two wall neighbours."""

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        rooms = ctx.require_rooms()
        for room in rooms:
            self._fill_if_corner(ctx.game_map, room.x1 + 1, room.y1 + 1)
            self._fill_if_corner(ctx.game_map, room.x2, room.y1 + 1)
            self._fill_if_corner(ctx.game_map, room.x1 + 1, room.y2)
            self._fill_if_corner(ctx.game_map, room.x2, room.y2)
            ctx.take_snapshot()

    @staticmethod
    def _fill_if_corner(game_map: GameMap, x: TileCoord, y: TileCoord) -> None:
        if not (1 <= x <= game_map.width - 2 and 1 <= y <= game_map.height - 2):
            return
        tiles = game_map.tiles
        neighbor_walls = sum(
            1
            for nx, ny in ((x - 1, y), (x, y - 1), (x + 1, y), (x, y + 1))
            if tiles[nx, ny] == TileTypeID.WALL
        )
        if neighbor_walls == 2:
            tiles[x, y] = TileTypeID.WALL
