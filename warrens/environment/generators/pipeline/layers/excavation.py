"""Random-walk excavation ("drunkard's walk").

Walkers start at the map centre or at random cells, stagger one cardinal step
at a time and paint floor wherever they go. New walkers keep being spawned
until the requested share of the map is floor.

The first walker always starts on the seed cell at the centre. Random-restart
walkers can leave islands behind, so pipelines follow this layer with
CullUnreachable.
"""

from __future__ import annotations

import logging
from enum import Enum, auto

from warrens.environment.generators.pipeline.context import GenerationContext
from warrens.environment.generators.pipeline.layer import (
    InitialMapLayer,
    MetaMapLayer,
)
from warrens.environment.tile_types import TileTypeID
from warrens.types import TileCoord, WorldTilePos
from warrens.util.rng import RNG

from .common import Symmetry, paint

logger = logging.getLogger(__name__)


class DrunkSpawnMode(Enum):
    """Where walkers after the first one start."""

    STARTING_POINT = auto()
    RANDOM = auto()


def stagger(
    rng: RNG, x: TileCoord, y: TileCoord, width: TileCoord, height: TileCoord
) -> WorldTilePos:
    """One random cardinal step, refused if it would leave 2 <= x <= width - 2.

    The same bound applies to y. A refused step leaves the walker in place.
    """
    match rng.roll_dice(1, 4):
        case 1:
            if x > 2:
                x -= 1
        case 2:
            if x < width - 2:
                x += 1
        case 3:
            if y > 2:
                y -= 1
        case _:
            if y < height - 2:
                y += 1
    return x, y


def run_walker(
    rng: RNG,
    ctx: GenerationContext,
    start: WorldTilePos,
    lifetime: int,
    brush_radius: int = 0,
    symmetry: Symmetry = Symmetry.NONE,
) -> bool:
    """Send one walker out from `start` for `lifetime` steps.

    The walker tags the cells it stood on with DOWN_STAIRS while it walks.
    If it carved anything a snapshot is taken with the trail still tagged,
    then the tags are turned back into floor.

    Returns:
        True if the walker ever stood on a wall, i.e. it carved something new.
    """
    game_map = ctx.game_map
    tiles = game_map.tiles
    x, y = start
    did_something = False
    trail: set[WorldTilePos] = set()

    for _ in range(lifetime):
        if tiles[x, y] == TileTypeID.WALL:
            did_something = True
        paint(game_map, symmetry, brush_radius, x, y)
        if tiles[x, y] == TileTypeID.FLOOR:
            tiles[x, y] = TileTypeID.DOWN_STAIRS
            trail.add((x, y))
        x, y = stagger(rng, x, y, game_map.width, game_map.height)

    if did_something:
        ctx.take_snapshot()
    for x, y in trail:
        tiles[x, y] = TileTypeID.FLOOR
    return did_something


class DrunkardsWalkLayer(InitialMapLayer, MetaMapLayer):
    """Carves floor with random walkers until a target floor fraction is hit.

    Works on a blank map as the initial layer or on top of an existing
    layout as a meta layer.

    Termination is probabilistic: nothing stops the loop if the target can
    never be reached. Pass `max_walkers` to cap the number of walkers; when
    the cap is hit a warning is logged and the layer stops early.
    """

    def __init__(
        self,
        spawn_mode: DrunkSpawnMode,
        drunken_lifetime: int,
        floor_percent: float,
        brush_radius: int = 0,
        symmetry: Symmetry = Symmetry.NONE,
        max_walkers: int | None = None,
    ) -> None:
        if not 0.0 < floor_percent < 1.0:
            raise ValueError(f"floor_percent must be in (0, 1), got {floor_percent}")
        if brush_radius < 0:
            raise ValueError(f"brush_radius must be >= 0, got {brush_radius}")
        if drunken_lifetime <= 0:
            raise ValueError(
                f"drunken_lifetime must be positive, got {drunken_lifetime}"
            )
        if max_walkers is not None and max_walkers <= 0:
            raise ValueError(f"max_walkers must be positive, got {max_walkers}")
        self.spawn_mode = spawn_mode
        self.drunken_lifetime = drunken_lifetime
        self.floor_percent = floor_percent
        self.brush_radius = brush_radius
        self.symmetry = symmetry
        self.max_walkers = max_walkers

    # -------------------------------------------------------------------------
    # Presets
    # -------------------------------------------------------------------------

    @classmethod
    def open_area(cls) -> DrunkardsWalkLayer:
        return cls(DrunkSpawnMode.STARTING_POINT, 400, 0.5)

    @classmethod
    def open_halls(cls) -> DrunkardsWalkLayer:
        return cls(DrunkSpawnMode.RANDOM, 400, 0.5)

    @classmethod
    def winding_passages(cls) -> DrunkardsWalkLayer:
        return cls(DrunkSpawnMode.RANDOM, 100, 0.4)

    @classmethod
    def fat_passages(cls) -> DrunkardsWalkLayer:
        return cls(DrunkSpawnMode.RANDOM, 100, 0.4, brush_radius=1)

    @classmethod
    def fearful_symmetry(cls) -> DrunkardsWalkLayer:
        return cls(DrunkSpawnMode.RANDOM, 100, 0.4, symmetry=Symmetry.BOTH)

    # -------------------------------------------------------------------------

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        game_map = ctx.game_map
        width, height = game_map.width, game_map.height
        center = (width // 2, height // 2)
        game_map.tiles[center] = TileTypeID.FLOOR

        desired_floor_tiles = int(self.floor_percent * width * height)
        floor_tile_count = game_map.count_tiles(TileTypeID.FLOOR)
        digger_count = 0

        while floor_tile_count < desired_floor_tiles:
            if self.max_walkers is not None and digger_count >= self.max_walkers:
                logger.warning(
                    "Excavation stopped after %d walkers at %d/%d floor tiles",
                    digger_count,
                    floor_tile_count,
                    desired_floor_tiles,
                )
                break

            if digger_count == 0 or self.spawn_mode == DrunkSpawnMode.STARTING_POINT:
                start = center
            else:
                start = (
                    rng.roll_dice(1, width - 3) + 1,
                    rng.roll_dice(1, height - 3) + 1,
                )

            run_walker(
                rng,
                ctx,
                start,
                self.drunken_lifetime,
                self.brush_radius,
                self.symmetry,
            )

            digger_count += 1
            floor_tile_count = game_map.count_tiles(TileTypeID.FLOOR)

        logger.debug(
            "Excavation used %d walkers for %d floor tiles",
            digger_count,
            floor_tile_count,
        )
