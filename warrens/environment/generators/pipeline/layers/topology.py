"""Start, exit and reachability layers.

These layers turn a carved grid into a playable level:
- AreaStartingPosition / RoomBasedStartingPosition: where the player enters
- CullUnreachable: walls off everything the player could never walk to
- RoomBasedStairs / DistantExit: where the way down goes

Every exit layer leaves exactly one DOWN_STAIRS tile on the map.
"""

from __future__ import annotations

import logging
from enum import Enum, auto

import numpy as np

from warrens.environment.generators.base import MissingPreconditionError
from warrens.environment.generators.pipeline.context import GenerationContext
from warrens.environment.generators.pipeline.layer import MetaMapLayer
from warrens.environment.tile_types import TileTypeID
from warrens.types import WorldTilePos
from warrens.util.pathfinding import UNREACHABLE, compute_distance_map
from warrens.util.rng import RNG

logger = logging.getLogger(__name__)


class XStart(Enum):
    LEFT = auto()
    CENTER = auto()
    RIGHT = auto()


class YStart(Enum):
    TOP = auto()
    CENTER = auto()
    BOTTOM = auto()


def place_exit(ctx: GenerationContext, pos: WorldTilePos) -> None:
    """Make `pos` the level's only down-stairs tile.

    Spawns only ever sit on floor, so any entry queued on `pos` is dropped.
    """
    game_map = ctx.game_map
    tiles = game_map.tiles
    tiles[tiles == TileTypeID.DOWN_STAIRS] = TileTypeID.FLOOR
    tiles[pos] = TileTypeID.DOWN_STAIRS

    exit_idx = game_map.xy_idx(*pos)
    ctx.spawn_list[:] = [entry for entry in ctx.spawn_list if entry[0] != exit_idx]


class AreaStartingPosition(MetaMapLayer):
    """Starts the player on the floor cell nearest an anchor point.

    The anchor is one of nine points: left/centre/right crossed with
    top/centre/bottom, inset one cell from the map edge. Distance is squared
    Euclidean; ties go to the first floor cell in row-major scan order.
    Overwrites any starting position set earlier.
    """

    def __init__(self, x: XStart, y: YStart) -> None:
        self.x = x
        self.y = y

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        game_map = ctx.game_map

        match self.x:
            case XStart.LEFT:
                seed_x = 1
            case XStart.CENTER:
                seed_x = game_map.width // 2
            case XStart.RIGHT:
                seed_x = game_map.width - 2

        match self.y:
            case YStart.TOP:
                seed_y = 1
            case YStart.CENTER:
                seed_y = game_map.height // 2
            case YStart.BOTTOM:
                seed_y = game_map.height - 2

        floor_cells = game_map.indices_of(TileTypeID.FLOOR)
        if floor_cells.size == 0:
            raise MissingPreconditionError("a floor cell to start on")

        xs = floor_cells % game_map.width
        ys = floor_cells // game_map.width
        distances = (xs - seed_x) ** 2 + (ys - seed_y) ** 2
        # argmin returns the first minimum, i.e. the earliest cell in scan order.
        best = int(floor_cells[np.argmin(distances)])
        ctx.starting_position = game_map.idx_xy(best)


class RoomBasedStartingPosition(MetaMapLayer):
    """Starts the player at the centre of the first room."""

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        rooms = ctx.require_rooms()
        ctx.starting_position = rooms[0].center()


class CullUnreachable(MetaMapLayer):
    """Turns every walkable cell the start cannot reach into wall.

    Uses one Dijkstra sweep from the starting position over walkable cells
    with orthogonal and diagonal moves. Spawn entries left on cells that are
    no longer walkable are dropped.
    """

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        start = ctx.require_starting_position()
        game_map = ctx.game_map

        distance = compute_distance_map(game_map, start)
        unreachable = (distance == UNREACHABLE) & game_map.walkable
        culled = int(np.count_nonzero(unreachable))
        game_map.tiles[unreachable] = TileTypeID.WALL

        walkable = game_map.walkable.reshape(-1, order="F")
        kept = [entry for entry in ctx.spawn_list if walkable[entry[0]]]
        dropped = len(ctx.spawn_list) - len(kept)
        ctx.spawn_list[:] = kept

        logger.debug("Culled %d unreachable cells, %d spawns", culled, dropped)


class RoomBasedStairs(MetaMapLayer):
    """Puts the exit at the centre of the last room.

    If that centre is no longer floor (culled) or is the starting cell, the
    rooms before it are tried in reverse order.
    """

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        rooms = ctx.require_rooms()
        tiles = ctx.game_map.tiles

        for room in reversed(rooms):
            center = room.center()
            if center == ctx.starting_position:
                continue
            if tiles[center] == TileTypeID.FLOOR:
                place_exit(ctx, center)
                return

        raise MissingPreconditionError("a room whose centre can hold the exit")


class DistantExit(MetaMapLayer):
    """Puts the exit on the reachable floor cell farthest from the start.

    Ties go to the first such cell in row-major scan order.
    """

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        start = ctx.require_starting_position()
        game_map = ctx.game_map
        tiles = game_map.tiles

        # Any older exit becomes a candidate floor cell again.
        tiles[tiles == TileTypeID.DOWN_STAIRS] = TileTypeID.FLOOR

        distance = compute_distance_map(game_map, start)
        reachable_floor = (tiles == TileTypeID.FLOOR) & (distance != UNREACHABLE)
        scores = np.where(reachable_floor, distance, -1).reshape(-1, order="F")

        best = int(np.argmax(scores))
        if scores[best] <= 0:
            raise MissingPreconditionError("a reachable floor cell away from the start")

        place_exit(ctx, game_map.idx_xy(best))
