"""Factory functions for assembling randomized level pipelines.

`random_builder` is the one place that decides what a level looks like. Every
decision is a `(choice, weight)` table sampled with `weighted_choice`, so the
whole composition is reproducible from the RNG stream alone.

Composition:
1. Style: rooms and corridors, or an organic carving (even odds)
2. Optional WFC rebuild of whatever the style produced (1 in 3)
3. Optional fort section on the right edge (1 in 20)
4. Always: doors, then vaults

Each branch that can disturb the layout re-seeds the start, culls and picks a
new exit afterwards, so every finished level keeps a reachable exit.

`generate_level` wraps the builder with seeding and retries for callers that
just want a level.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from warrens import config
from warrens.environment.generators.base import GeneratedMapData, GenerationError
from warrens.types import MapDepth, RandomSeed, TileCoord
from warrens.util.rng import RNG, RNGProvider, weighted_choice

from .layer import InitialMapLayer, MetaMapLayer
from .layers import (
    AreaStartingPosition,
    BspCorridors,
    BspDungeonLayer,
    BspInteriorLayer,
    CellularAutomataLayer,
    CorridorSpawner,
    CullUnreachable,
    DistantExit,
    DLALayer,
    DoglegCorridors,
    DoorPlacement,
    DrunkardsWalkLayer,
    MazeLayer,
    NearestCorridors,
    PrefabLevelLayer,
    PrefabSectionLayer,
    PrefabVaultLayer,
    RoomBasedSpawner,
    RoomBasedStairs,
    RoomBasedStartingPosition,
    RoomCornerRounder,
    RoomDrawer,
    RoomExploder,
    RoomSort,
    RoomSorter,
    SimpleMapLayer,
    StraightLineCorridors,
    VoronoiCellLayer,
    VoronoiSpawning,
    WaveformCollapseLayer,
    XStart,
    YStart,
)
from .pipeline import PipelineGenerator

logger = logging.getLogger(__name__)

type LayerFactory[L] = Callable[[], L]

# =============================================================================
# DECISION TABLES
# =============================================================================

ROOM_STARTERS: list[tuple[LayerFactory[InitialMapLayer], int]] = [
    (SimpleMapLayer, 1),
    (BspDungeonLayer, 1),
    (BspInteriorLayer, 1),
]

# Starters whose rooms are bare rectangles that still need drawing and joining.
UNDRAWN_ROOM_STARTERS = (SimpleMapLayer, BspDungeonLayer)

ROOM_SORTS: list[tuple[RoomSort, int]] = [(sort, 1) for sort in RoomSort]

CORRIDORS: list[tuple[LayerFactory[MetaMapLayer], int]] = [
    (DoglegCorridors, 1),
    (NearestCorridors, 1),
    (StraightLineCorridors, 1),
    (BspCorridors, 1),
]

ROOM_MODIFIERS: list[tuple[LayerFactory[MetaMapLayer] | None, int]] = [
    (RoomExploder, 1),
    (RoomCornerRounder, 1),
    (None, 4),
]

ORGANIC_STARTERS: list[tuple[LayerFactory[InitialMapLayer], int]] = [
    (CellularAutomataLayer, 1),
    (DrunkardsWalkLayer.open_area, 1),
    (DrunkardsWalkLayer.open_halls, 1),
    (DrunkardsWalkLayer.winding_passages, 1),
    (DrunkardsWalkLayer.fat_passages, 1),
    (DrunkardsWalkLayer.fearful_symmetry, 1),
    (MazeLayer, 1),
    (DLALayer.walk_inwards, 1),
    (DLALayer.walk_outwards, 1),
    (DLALayer.central_attractor, 1),
    (DLALayer.insectoid, 1),
    (DLALayer.heavy_erosion, 1),
    (VoronoiCellLayer.pythagoras, 1),
    (VoronoiCellLayer.manhattan, 1),
    (VoronoiCellLayer.chebyshev, 1),
    (PrefabLevelLayer, 1),
]

COIN: list[tuple[bool, int]] = [(True, 1), (False, 1)]
WFC_CHANCE: list[tuple[bool, int]] = [(True, 1), (False, 2)]
FORT_CHANCE: list[tuple[bool, int]] = [(True, 1), (False, 19)]


# =============================================================================
# BUILDERS
# =============================================================================


def random_start_position(rng: RNG) -> tuple[XStart, YStart]:
    """Pick one of the nine anchor points, each axis uniformly."""
    x = weighted_choice(rng, [(anchor, 1) for anchor in XStart])
    y = weighted_choice(rng, [(anchor, 1) for anchor in YStart])
    return x, y


def random_room_builder(rng: RNG, builder: PipelineGenerator) -> None:
    """Room-and-corridor style: rooms, corridors, start, cull, exit, spawns."""
    starter = weighted_choice(rng, ROOM_STARTERS)
    builder.start_with(starter())

    if starter in UNDRAWN_ROOM_STARTERS:
        builder.with_layer(RoomSorter(weighted_choice(rng, ROOM_SORTS)))
        builder.with_layer(RoomDrawer())
        builder.with_layer(weighted_choice(rng, CORRIDORS)())
        if weighted_choice(rng, COIN):
            builder.with_layer(CorridorSpawner())
        modifier = weighted_choice(rng, ROOM_MODIFIERS)
        if modifier is not None:
            builder.with_layer(modifier())

    if weighted_choice(rng, COIN):
        builder.with_layer(RoomBasedStartingPosition())
    else:
        builder.with_layer(AreaStartingPosition(*random_start_position(rng)))

    builder.with_layer(CullUnreachable())

    if weighted_choice(rng, COIN):
        builder.with_layer(RoomBasedStairs())
    else:
        builder.with_layer(DistantExit())

    if weighted_choice(rng, COIN):
        builder.with_layer(RoomBasedSpawner())
    else:
        builder.with_layer(VoronoiSpawning())


def random_shape_builder(rng: RNG, builder: PipelineGenerator) -> None:
    """Organic style: one carving starter, then cull from the centre."""
    builder.start_with(weighted_choice(rng, ORGANIC_STARTERS)())
    builder.with_layer(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
    builder.with_layer(CullUnreachable())
    builder.with_layer(AreaStartingPosition(*random_start_position(rng)))
    builder.with_layer(VoronoiSpawning())
    builder.with_layer(DistantExit())


def random_builder(
    depth: MapDepth,
    rng: RNG,
    width: TileCoord = config.MAP_WIDTH,
    height: TileCoord = config.MAP_HEIGHT,
) -> PipelineGenerator:
    """Assemble a random, ready-to-run pipeline for one level.

    Args:
        depth: Depth of the level; scales spawns and gates vaults.
        rng: Stream for composition decisions. Passing the same stream to
            `generate()` afterwards keeps the whole level reproducible.
        width: Map width in tiles.
        height: Map height in tiles.

    Returns:
        A PipelineGenerator that has not run yet.
    """
    builder = PipelineGenerator(depth, width, height)

    if weighted_choice(rng, COIN):
        random_room_builder(rng, builder)
    else:
        random_shape_builder(rng, builder)

    if weighted_choice(rng, WFC_CHANCE):
        builder.with_layer(WaveformCollapseLayer())
        builder.with_layer(AreaStartingPosition(*random_start_position(rng)))
        builder.with_layer(CullUnreachable())
        builder.with_layer(VoronoiSpawning())
        builder.with_layer(DistantExit())

    if weighted_choice(rng, FORT_CHANCE):
        builder.with_layer(PrefabSectionLayer())
        builder.with_layer(AreaStartingPosition(*random_start_position(rng)))
        builder.with_layer(CullUnreachable())
        builder.with_layer(DistantExit())

    builder.with_layer(DoorPlacement())
    builder.with_layer(PrefabVaultLayer())
    return builder


def generate_level(
    depth: MapDepth,
    seed: RandomSeed = config.RANDOM_SEED,
    width: TileCoord = config.MAP_WIDTH,
    height: TileCoord = config.MAP_HEIGHT,
    max_attempts: int = config.LEVEL_GENERATION_ATTEMPTS,
) -> tuple[PipelineGenerator, GeneratedMapData]:
    """Build and run random pipelines until one produces a level.

    The first attempt uses `seed` as given; retries derive a fresh seed from
    it so a failing layout is never repeated. The same arguments always give
    the same level.

    Returns:
        The pipeline that succeeded (for `spawn_entities`) and its result.

    Raises:
        ValueError: If max_attempts is not positive.
        GenerationError: The last failure, once every attempt has failed.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be positive, got {max_attempts}")

    last_error: GenerationError | None = None
    for attempt in range(max_attempts):
        if attempt == 0 or seed is None:
            attempt_seed = seed
        else:
            attempt_seed = f"{seed}:{attempt}"
        rng = RNGProvider(attempt_seed).get("map.builder")
        builder = random_builder(depth, rng, width, height)
        try:
            map_data = builder.generate(rng)
        except GenerationError as exc:
            logger.warning(
                "Level attempt %d/%d failed (%s): %s",
                attempt + 1,
                max_attempts,
                " -> ".join(builder.layer_names),
                exc,
            )
            last_error = exc
            continue
        return builder, map_data

    assert last_error is not None
    raise last_error
