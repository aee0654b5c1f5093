"""Spawn layers.

These layers decide which parts of the level get spawns and hand each part
to a region spawner, `spawn_region` unless another one is injected. The
spawner picks the cells and entity names.
"""

from __future__ import annotations

import numpy as np

from warrens import config
from warrens.environment.generators.pipeline.context import GenerationContext
from warrens.environment.generators.pipeline.layer import MetaMapLayer
from warrens.environment.tile_types import TileTypeID
from warrens.game.spawn_tables import RegionSpawner, spawn_region, spawn_room
from warrens.util.rng import RNG

from .voronoi import DistanceMetric, nearest_seed


class RoomBasedSpawner(MetaMapLayer):
    """Spawns into every room except the first, where the player usually starts."""

    def __init__(self, spawner: RegionSpawner = spawn_region) -> None:
        self.spawner = spawner

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        rooms = ctx.require_rooms()
        for room in rooms[1:]:
            spawn_room(
                ctx.game_map, rng, room, ctx.depth, ctx.spawn_list, self.spawner
            )


class CorridorSpawner(MetaMapLayer):
    """Spawns along every corridor."""

    def __init__(self, spawner: RegionSpawner = spawn_region) -> None:
        self.spawner = spawner

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        corridors = ctx.require_corridors()
        for corridor in corridors:
            self.spawner(rng, list(corridor), ctx.depth, ctx.spawn_list)


class VoronoiSpawning(MetaMapLayer):
    """Splits the floor into Voronoi areas and spawns into each one.

    Seeds are distinct floor cells, about one per VORONOI_SPAWN_AREA_SIZE
    floor tiles and at least one. Areas use the Manhattan metric and are
    visited in seed order; each area's cells are in row-major order.
    """

    def __init__(
        self,
        spawner: RegionSpawner = spawn_region,
        area_size: int = config.VORONOI_SPAWN_AREA_SIZE,
    ) -> None:
        self.spawner = spawner
        self.area_size = area_size

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        game_map = ctx.game_map
        interior = np.zeros((ctx.width, ctx.height), dtype=bool, order="F")
        interior[1:-1, 1:-1] = True
        floor = (game_map.tiles == TileTypeID.FLOOR) & interior
        floor_cells = np.flatnonzero(floor.reshape(-1, order="F"))
        if floor_cells.size == 0:
            return

        n_seeds = max(1, floor_cells.size // self.area_size)
        remaining = floor_cells.tolist()
        seeds = []
        for _ in range(n_seeds):
            seeds.append(remaining.pop(rng.roll_dice(1, len(remaining)) - 1))
        seed_array = np.array(
            [game_map.idx_xy(idx) for idx in seeds], dtype=np.int64
        ).reshape(-1, 2)

        xs = floor_cells % ctx.width
        ys = floor_cells // ctx.width
        membership = nearest_seed(xs, ys, seed_array, DistanceMetric.MANHATTAN)

        for seed_index in range(n_seeds):
            area = floor_cells[membership == seed_index].tolist()
            if area:
                self.spawner(rng, area, ctx.depth, ctx.spawn_list)
