"""Door placement.

A door goes on a floor cell that sits in a one-tile gap: floor to the east
and west with wall to the north and south, or the other way round. Doors are
queued as spawns named "Door"; the tile itself stays floor.
"""

from __future__ import annotations

import numpy as np

from warrens.environment.generators.pipeline.context import GenerationContext
from warrens.environment.generators.pipeline.layer import MetaMapLayer
from warrens.environment.map import GameMap
from warrens.environment.tile_types import TileTypeID
from warrens.types import TileIndex
from warrens.util.rng import RNG

DOOR = "Door"


def door_candidates(game_map: GameMap) -> np.ndarray:
    """Boolean (width, height) map of cells shaped like a doorway.

    Only cells with 1 < x < width - 2 and 1 < y < height - 2 qualify.
    """
    tiles = game_map.tiles
    floor = tiles == TileTypeID.FLOOR
    wall = tiles == TileTypeID.WALL
    width, height = game_map.width, game_map.height
    result = np.zeros((width, height), dtype=bool, order="F")
    if width < 5 or height < 5:
        return result

    center = (slice(2, width - 2), slice(2, height - 2))
    west = (slice(1, width - 3), slice(2, height - 2))
    east = (slice(3, width - 1), slice(2, height - 2))
    north = (slice(2, width - 2), slice(1, height - 3))
    south = (slice(2, width - 2), slice(3, height - 1))

    east_west = floor[west] & floor[east] & wall[north] & wall[south]
    north_south = wall[west] & wall[east] & floor[north] & floor[south]
    result[center] = floor[center] & (east_west | north_south)
    return result


class DoorPlacement(MetaMapLayer):
    """Queues doors at corridor mouths, or scattered through doorways.

    With corridors, every corridor longer than two cells gets a door on its
    first carved cell if that cell is a doorway. Without corridors, each
    doorway cell gets a door one time in three. Cells that already have a
    spawn never get a door.
    """

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        game_map = ctx.game_map
        candidates = door_candidates(game_map).reshape(-1, order="F")
        occupied: set[TileIndex] = {idx for idx, _ in ctx.spawn_list}

        if ctx.corridors is not None:
            for hall in ctx.corridors:
                if len(hall) > 2 and self._possible(hall[0], candidates, occupied):
                    ctx.spawn_list.append((hall[0], DOOR))
                    occupied.add(hall[0])
        else:
            for idx in np.flatnonzero(candidates):
                idx = int(idx)
                if idx in occupied:
                    continue
                if rng.roll_dice(1, 3) == 1:
                    ctx.spawn_list.append((idx, DOOR))
                    occupied.add(idx)

    @staticmethod
    def _possible(
        idx: TileIndex, candidates: np.ndarray, occupied: set[TileIndex]
    ) -> bool:
        return bool(candidates[idx]) and idx not in occupied
