"""Pipeline-based level generation.

This package provides a layered architecture for compositional level
generation. One initial layer lays down a base layout, then meta layers
refine a shared GenerationContext in order, and the pipeline returns
GeneratedMapData.

Example usage:
    from warrens.environment.generators.pipeline import generate_level

    generator, map_data = generate_level(depth=1, seed="burrito1")

A random pipeline can also be built and run separately:
    from warrens.environment.generators.pipeline import random_builder
    from warrens.util.rng import RNGProvider

    stream = RNGProvider("burrito1").get("map.builder")
    generator = random_builder(depth=1, rng=stream, width=80, height=43)
    map_data = generator.generate(stream)

Or assembled by hand:
    from warrens.environment.generators.pipeline import (
        AreaStartingPosition,
        CullUnreachable,
        DistantExit,
        DrunkardsWalkLayer,
        PipelineGenerator,
        XStart,
        YStart,
    )

    generator = (
        PipelineGenerator(depth=1, map_width=80, map_height=43)
        .start_with(DrunkardsWalkLayer.open_area())
        .with_layer(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
        .with_layer(CullUnreachable())
        .with_layer(DistantExit())
    )
"""

from .context import GenerationContext
from .factory import generate_level, random_builder
from .layer import GenerationLayer, InitialMapLayer, MetaMapLayer
from .layers import (
    AreaStartingPosition,
    BspCorridors,
    BspDungeonLayer,
    BspInteriorLayer,
    CellularAutomataLayer,
    CorridorSpawner,
    CullUnreachable,
    DistanceMetric,
    DistantExit,
    DLAAlgorithm,
    DLALayer,
    DoglegCorridors,
    DoorPlacement,
    DrunkardsWalkLayer,
    DrunkSpawnMode,
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
    Symmetry,
    VoronoiCellLayer,
    VoronoiSpawning,
    WaveformCollapseLayer,
    XStart,
    YStart,
)
from .pipeline import PipelineGenerator, SpawnCallback

__all__ = [
    "AreaStartingPosition",
    "BspCorridors",
    "BspDungeonLayer",
    "BspInteriorLayer",
    "CellularAutomataLayer",
    "CorridorSpawner",
    "CullUnreachable",
    "DLAAlgorithm",
    "DLALayer",
    "DistanceMetric",
    "DistantExit",
    "DoglegCorridors",
    "DoorPlacement",
    "DrunkSpawnMode",
    "DrunkardsWalkLayer",
    "GenerationContext",
    "GenerationLayer",
    "InitialMapLayer",
    "MazeLayer",
    "MetaMapLayer",
    "NearestCorridors",
    "PipelineGenerator",
    "PrefabLevelLayer",
    "PrefabSectionLayer",
    "PrefabVaultLayer",
    "RoomBasedSpawner",
    "RoomBasedStairs",
    "RoomBasedStartingPosition",
    "RoomCornerRounder",
    "RoomDrawer",
    "RoomExploder",
    "RoomSort",
    "RoomSorter",
    "SimpleMapLayer",
    "SpawnCallback",
    "StraightLineCorridors",
    "Symmetry",
    "VoronoiCellLayer",
    "VoronoiSpawning",
    "WaveformCollapseLayer",
    "XStart",
    "YStart",
    "generate_level",
    "random_builder",
]
