"""Generation layers for the pipeline level generator.

Each layer transforms the GenerationContext in a specific way:
- Room layers: lay out, sort, draw and reshape rectangular rooms
- Corridor layers: connect rooms and record the cells they carve
- Organic layers: excavators, cellular automata, mazes, DLA, Voronoi cells
- Topology layers: starting position, reachability culling, exit placement
- Prefab layers: authored levels, sections and vaults
- Spawn layers: fill rooms, corridors or Voronoi areas with spawn requests
- Finishing layers: doors and the WFC rebuild
"""

from .caves import CellularAutomataLayer
from .common import Symmetry
from .corridors import (
    BspCorridors,
    DoglegCorridors,
    NearestCorridors,
    StraightLineCorridors,
)
from .dla import DLAAlgorithm, DLALayer
from .doors import DoorPlacement
from .excavation import DrunkardsWalkLayer, DrunkSpawnMode
from .maze import MazeLayer
from .prefabs import PrefabLevelLayer, PrefabSectionLayer, PrefabVaultLayer
from .rooms import (
    BspDungeonLayer,
    BspInteriorLayer,
    RoomCornerRounder,
    RoomDrawer,
    RoomExploder,
    RoomSort,
    RoomSorter,
    SimpleMapLayer,
)
from .spawning import CorridorSpawner, RoomBasedSpawner, VoronoiSpawning
from .topology import (
    AreaStartingPosition,
    CullUnreachable,
    DistantExit,
    RoomBasedStairs,
    RoomBasedStartingPosition,
    XStart,
    YStart,
)
from .voronoi import DistanceMetric, VoronoiCellLayer
from .wfc import WaveformCollapseLayer

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
    "MazeLayer",
    "NearestCorridors",
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
    "StraightLineCorridors",
    "Symmetry",
    "VoronoiCellLayer",
    "VoronoiSpawning",
    "WaveformCollapseLayer",
    "XStart",
    "YStart",
]
