"""Diffusion-limited aggregation.

Particles wander until they touch the growing floor structure and then stick
to it. The structure starts as a small plus sign at the map centre and keeps
growing until the target share of the map is floor.

Three ways of moving particles:
- WALK_INWARDS: start anywhere, stagger until hitting floor, paint the last
  wall cell visited
- WALK_OUTWARDS: start at the centre, stagger until leaving the floor, paint
  where the particle ended up
- CENTRAL_ATTRACTOR: start anywhere and travel in a straight line towards the
  centre, painting the last wall cell before the structure
"""

from __future__ import annotations

from enum import Enum, auto

from warrens.environment.generators.pipeline.context import GenerationContext
from warrens.environment.generators.pipeline.layer import InitialMapLayer
from warrens.environment.map import GameMap
from warrens.environment.tile_types import TileTypeID
from warrens.types import WorldTilePos
from warrens.util.pathfinding import line_between
from warrens.util.rng import RNG

from .common import Symmetry, paint
from .excavation import stagger


class DLAAlgorithm(Enum):
    WALK_INWARDS = auto()
    WALK_OUTWARDS = auto()
    CENTRAL_ATTRACTOR = auto()


class DLALayer(InitialMapLayer):
    def __init__(
        self,
        algorithm: DLAAlgorithm,
        brush_radius: int,
        symmetry: Symmetry,
        floor_percent: float,
    ) -> None:
        if not 0.0 < floor_percent < 1.0:
            raise ValueError(f"floor_percent must be in (0, 1), got {floor_percent}")
        self.algorithm = algorithm
        self.brush_radius = brush_radius
        self.symmetry = symmetry
        self.floor_percent = floor_percent

    @classmethod
    def walk_inwards(cls) -> DLALayer:
        return cls(DLAAlgorithm.WALK_INWARDS, 0, Symmetry.NONE, 0.25)

    @classmethod
    def walk_outwards(cls) -> DLALayer:
        return cls(DLAAlgorithm.WALK_OUTWARDS, 1, Symmetry.NONE, 0.25)

    @classmethod
    def central_attractor(cls) -> DLALayer:
        return cls(DLAAlgorithm.CENTRAL_ATTRACTOR, 1, Symmetry.NONE, 0.25)

    @classmethod
    def insectoid(cls) -> DLALayer:
        return cls(DLAAlgorithm.CENTRAL_ATTRACTOR, 1, Symmetry.HORIZONTAL, 0.25)

    @classmethod
    def heavy_erosion(cls) -> DLALayer:
        return cls(DLAAlgorithm.WALK_INWARDS, 1, Symmetry.NONE, 0.35)

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        game_map = ctx.game_map
        tiles = game_map.tiles
        center = (game_map.width // 2, game_map.height // 2)
        cx, cy = center
        for x, y in ((cx, cy), (cx - 1, cy), (cx + 1, cy), (cx, cy - 1), (cx, cy + 1)):
            tiles[x, y] = TileTypeID.FLOOR

        desired_floor_tiles = int(self.floor_percent * game_map.width * game_map.height)
        floor_tile_count = game_map.count_tiles(TileTypeID.FLOOR)

        while floor_tile_count < desired_floor_tiles:
            match self.algorithm:
                case DLAAlgorithm.WALK_INWARDS:
                    target = self._walk_inwards(rng, game_map)
                case DLAAlgorithm.WALK_OUTWARDS:
                    target = self._walk_outwards(rng, game_map, center)
                case DLAAlgorithm.CENTRAL_ATTRACTOR:
                    target = self._central_attractor(rng, game_map, center)
            paint(game_map, self.symmetry, self.brush_radius, *target)
            ctx.take_snapshot()
            floor_tile_count = game_map.count_tiles(TileTypeID.FLOOR)

    @staticmethod
    def _random_cell(rng: RNG, game_map: GameMap) -> WorldTilePos:
        return (
            rng.roll_dice(1, game_map.width - 3) + 1,
            rng.roll_dice(1, game_map.height - 3) + 1,
        )

    def _walk_inwards(self, rng: RNG, game_map: GameMap) -> WorldTilePos:
        tiles = game_map.tiles
        x, y = self._random_cell(rng, game_map)
        prev = (x, y)
        while tiles[x, y] == TileTypeID.WALL:
            prev = (x, y)
            x, y = stagger(rng, x, y, game_map.width, game_map.height)
        return prev

    @staticmethod
    def _walk_outwards(
        rng: RNG, game_map: GameMap, center: WorldTilePos
    ) -> WorldTilePos:
        tiles = game_map.tiles
        x, y = center
        while tiles[x, y] == TileTypeID.FLOOR:
            x, y = stagger(rng, x, y, game_map.width, game_map.height)
        return x, y

    def _central_attractor(
        self, rng: RNG, game_map: GameMap, center: WorldTilePos
    ) -> WorldTilePos:
        tiles = game_map.tiles
        x, y = self._random_cell(rng, game_map)
        prev = (x, y)
        path = line_between((x, y), center)[1:]
        for next_x, next_y in path:
            if tiles[x, y] != TileTypeID.WALL:
                break
            prev = (x, y)
            x, y = next_x, next_y
        return prev
