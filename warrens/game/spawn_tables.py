"""Weighted spawn tables and region spawning.

The level generator never creates entities itself. It only queues
(cell index, entity name) pairs; the game turns those into actors and items
later. This module decides how many entries an area gets and which names fill
them, scaled by depth so deeper levels see more and nastier things.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from warrens import config
from warrens.environment.tile_types import TileTypeID
from warrens.util.rng import weighted_choice

if TYPE_CHECKING:
    from warrens.environment.map import GameMap
    from warrens.types import MapDepth, SpawnEntry, TileIndex
    from warrens.util.coordinates import Rect
    from warrens.util.rng import RNG

type SpawnTable = list[tuple[str, int]]


class RegionSpawner(Protocol):
    """Anything that can fill an area of cells with spawn entries."""

    def __call__(
        self,
        rng: RNG,
        area: list[TileIndex],
        depth: MapDepth,
        spawn_list: list[SpawnEntry],
    ) -> None: ...


def room_table(depth: MapDepth) -> SpawnTable:
    """The default (name, weight) table for a depth.

    Weights that scale with depth start at zero or below on shallow levels,
    which keeps those entries out of the draw entirely.
    """
    return [
        ("Goblin", 10),
        ("Orc", 1 + depth),
        ("Health Potion", 7),
        ("Fireball Scroll", 2 + depth),
        ("Confusion Scroll", 2 + depth),
        ("Magic Missile Scroll", 4),
        ("Dagger", 3),
        ("Shield", 3),
        ("Longsword", depth - 1),
        ("Tower Shield", depth - 1),
        ("Rations", 10),
        ("Magic Mapping Scroll", 2),
        ("Bear Trap", 5),
    ]


def spawn_region(
    rng: RNG,
    area: list[TileIndex],
    depth: MapDepth,
    spawn_list: list[SpawnEntry],
) -> None:
    """Pick distinct cells from `area` and append a spawn for each.

    The number of spawns is `roll_dice(1, MAX_MONSTERS + 3) + depth - 4`,
    capped by the size of the area. Zero or fewer means the area stays empty.
    Each chosen cell gets one name drawn from `room_table(depth)`.
    """
    table = room_table(depth)
    candidates = list(area)

    num_spawns = min(
        len(candidates), rng.roll_dice(1, config.MAX_MONSTERS + 3) + depth - 4
    )
    if num_spawns <= 0:
        return

    # Insertion-ordered so the output order is reproducible.
    spawn_points: dict[TileIndex, str] = {}
    for _ in range(num_spawns):
        if len(candidates) == 1:
            array_index = 0
        else:
            array_index = rng.roll_dice(1, len(candidates)) - 1
        map_idx = candidates.pop(array_index)
        spawn_points[map_idx] = weighted_choice(rng, table)

    spawn_list.extend(spawn_points.items())


def spawn_room(
    game_map: GameMap,
    rng: RNG,
    room: Rect,
    depth: MapDepth,
    spawn_list: list[SpawnEntry],
    spawner: RegionSpawner = spawn_region,
) -> None:
    """Spawn into the floor cells strictly inside a room's outline."""
    interior = game_map.tiles[room.x1 + 1 : room.x2, room.y1 + 1 : room.y2]
    xs, ys = (interior == TileTypeID.FLOOR).nonzero()
    # Row-major scan order: by y, then x.
    cells = sorted(
        game_map.xy_idx(int(x) + room.x1 + 1, int(y) + room.y1 + 1)
        for x, y in zip(xs, ys, strict=True)
    )
    spawner(rng, cells, depth, spawn_list)
