"""Corridor layers.

Each layer connects the rooms in `ctx.rooms` and stores, per corridor, the
indices of the cells it turned from wall into floor. Cells that were already
floor (room interiors, earlier corridors) are not recorded, so the first
entry of a corridor is where it leaves a room.
"""

from __future__ import annotations

import itertools
import math

from warrens.environment.generators.pipeline.context import GenerationContext
from warrens.environment.generators.pipeline.layer import MetaMapLayer
from warrens.types import TileIndex
from warrens.util.coordinates import Rect
from warrens.util.pathfinding import line_between
from warrens.util.rng import RNG

from .common import (
    carve_horizontal_tunnel,
    carve_line,
    carve_stepped_corridor,
    carve_vertical_tunnel,
)
from .rooms import random_point_in


def nearest_unconnected_pairs(rooms: list[Rect]) -> list[tuple[int, int]]:
    """Pair each room with the nearest room not yet used as a source.

    Rooms are visited in list order. A room is marked connected once it has
    dug its corridor, so later rooms never tunnel back into it. Distances are
    between room centres; ties go to the lower index.
    """
    pairs: list[tuple[int, int]] = []
    connected: set[int] = set()
    for i, room in enumerate(rooms):
        center = room.center()
        candidates = [
            (math.dist(center, other.center()), j)
            for j, other in enumerate(rooms)
            if j != i and j not in connected
        ]
        if candidates:
            _, nearest = min(candidates)
            pairs.append((i, nearest))
            connected.add(i)
    return pairs


class DoglegCorridors(MetaMapLayer):
    """L-shaped corridors between consecutive room centres.

    A coin flip per pair decides whether the horizontal leg comes first.
    Each leg is stored as its own corridor.
    """

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        rooms = ctx.require_rooms()
        game_map = ctx.game_map
        corridors: list[list[TileIndex]] = []

        for prev_room, room in itertools.pairwise(rooms):
            new_x, new_y = room.center()
            prev_x, prev_y = prev_room.center()
            if rng.roll_dice(1, 2) == 2:
                first = carve_horizontal_tunnel(game_map, prev_x, new_x, prev_y)
                second = carve_vertical_tunnel(game_map, prev_y, new_y, new_x)
            else:
                first = carve_vertical_tunnel(game_map, prev_y, new_y, prev_x)
                second = carve_horizontal_tunnel(game_map, prev_x, new_x, new_y)
            corridors.append(first)
            corridors.append(second)
            ctx.take_snapshot()

        ctx.corridors = corridors


class BspCorridors(MetaMapLayer):
    """Stepped corridors between random cells of consecutive rooms."""

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        rooms = ctx.require_rooms()
        corridors: list[list[TileIndex]] = []

        for room, next_room in itertools.pairwise(rooms):
            start = random_point_in(rng, room)
            end = random_point_in(rng, next_room)
            corridors.append(carve_stepped_corridor(ctx.game_map, start, end))
            ctx.take_snapshot()

        ctx.corridors = corridors


class NearestCorridors(MetaMapLayer):
    """Stepped corridors from each room to its nearest unconnected room."""

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        rooms = ctx.require_rooms()
        corridors: list[list[TileIndex]] = []

        for i, j in nearest_unconnected_pairs(rooms):
            start, end = rooms[i].center(), rooms[j].center()
            corridors.append(carve_stepped_corridor(ctx.game_map, start, end))
            ctx.take_snapshot()

        ctx.corridors = corridors


class StraightLineCorridors(MetaMapLayer):
    """Bresenham lines from each room to its nearest unconnected room."""

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        rooms = ctx.require_rooms()
        corridors: list[list[TileIndex]] = []

        for i, j in nearest_unconnected_pairs(rooms):
            line = line_between(rooms[i].center(), rooms[j].center())
            corridors.append(carve_line(ctx.game_map, line))
            ctx.take_snapshot()

        ctx.corridors = corridors
