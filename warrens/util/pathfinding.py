from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import tcod.los
import tcod.path

from warrens.types import WorldTilePos

if TYPE_CHECKING:
    from warrens.environment.map import GameMap

# Distance value left in cells the sweep never reached.
UNREACHABLE = int(np.iinfo(np.int32).max)

# Step costs for the distance sweep. Diagonals cost a little more than
# orthogonal moves, like the classic 1.0 / 1.45 roguelike weighting.
CARDINAL_COST = 2
DIAGONAL_COST = 3


def compute_distance_map(game_map: GameMap, start_pos: WorldTilePos) -> np.ndarray:
    """
    Computes a single-source distance map over the walkable cells of a map.

    The map is treated as an undirected graph: every walkable cell is a node
    and edges join it to its eight neighbours when those are walkable too.
    Calls `populate_blocked()` first so the sweep sees the current tiles.

    Args:
        game_map: The map to sweep.
        start_pos: The (x, y) source cell. It gets distance 0 even if it is
            not walkable.

    Returns:
        An int32 array of shape (width, height). Unreachable cells hold
        `UNREACHABLE`.
    """
    game_map.populate_blocked()
    cost = np.array(~game_map.blocked, dtype=np.int8)

    distance = tcod.path.maxarray((game_map.width, game_map.height), dtype=np.int32)
    distance[start_pos] = 0

    tcod.path.dijkstra2d(
        distance,
        cost,
        cardinal=CARDINAL_COST,
        diagonal=DIAGONAL_COST,
        out=distance,
    )
    return distance


def line_between(
    start_pos: WorldTilePos, end_pos: WorldTilePos
) -> list[WorldTilePos]:
    """Bresenham line from start to end, both endpoints included."""
    points = tcod.los.bresenham(start_pos, end_pos)
    return [(int(x), int(y)) for x, y in points]
