"""Carving primitives shared by several layers.

Everything here turns WALL into FLOOR in a GameMap and keeps the outer ring of the
map solid: painting is clipped to 1 <= x <= width - 2 and 1 <= y <= height - 2.
The tunnel helpers return the indices they actually changed so corridor
layers can record only newly carved cells.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

import numpy as np

from warrens.environment.tile_types import TileTypeID

if TYPE_CHECKING:
    from warrens.environment.map import GameMap
    from warrens.types import TileCoord, TileIndex, WorldTilePos


class Symmetry(Enum):
    """Mirroring applied when painting a carved cell."""

    NONE = auto()
    HORIZONTAL = auto()
    VERTICAL = auto()
    BOTH = auto()


def apply_paint(
    game_map: GameMap, brush_radius: int, x: TileCoord, y: TileCoord
) -> None:
    """Paint a disc of floor centred on (x, y). Radius 0 is a single cell.

    Only wall is painted over, so an exit already on the map survives.
    """
    r = brush_radius
    x_lo = max(1, x - r)
    x_hi = min(game_map.width - 2, x + r)
    y_lo = max(1, y - r)
    y_hi = min(game_map.height - 2, y + r)
    if x_lo > x_hi or y_lo > y_hi:
        return

    xs = np.arange(x_lo, x_hi + 1)[:, np.newaxis]
    ys = np.arange(y_lo, y_hi + 1)[np.newaxis, :]
    disc = (xs - x) ** 2 + (ys - y) ** 2 <= r * r
    region = game_map.tiles[x_lo : x_hi + 1, y_lo : y_hi + 1]
    region[disc & (region == TileTypeID.WALL)] = TileTypeID.FLOOR


def paint(
    game_map: GameMap,
    symmetry: Symmetry,
    brush_radius: int,
    x: TileCoord,
    y: TileCoord,
) -> None:
    """Paint at (x, y) and at its mirror images for the given symmetry.

    Mirrors are taken about the map centre (width // 2, height // 2).
    """
    center_x = game_map.width // 2
    center_y = game_map.height // 2

    match symmetry:
        case Symmetry.NONE:
            apply_paint(game_map, brush_radius, x, y)
        case Symmetry.HORIZONTAL:
            if x == center_x:
                apply_paint(game_map, brush_radius, x, y)
            else:
                dist_x = abs(center_x - x)
                apply_paint(game_map, brush_radius, center_x + dist_x, y)
                apply_paint(game_map, brush_radius, center_x - dist_x, y)
        case Symmetry.VERTICAL:
            if y == center_y:
                apply_paint(game_map, brush_radius, x, y)
            else:
                dist_y = abs(center_y - y)
                apply_paint(game_map, brush_radius, x, center_y + dist_y)
                apply_paint(game_map, brush_radius, x, center_y - dist_y)
        case Symmetry.BOTH:
            if x == center_x and y == center_y:
                apply_paint(game_map, brush_radius, x, y)
            else:
                dist_x = abs(center_x - x)
                dist_y = abs(center_y - y)
                apply_paint(game_map, brush_radius, center_x + dist_x, y)
                apply_paint(game_map, brush_radius, center_x - dist_x, y)
                apply_paint(game_map, brush_radius, x, center_y + dist_y)
                apply_paint(game_map, brush_radius, x, center_y - dist_y)


# =============================================================================
# Tunnels
# =============================================================================


def _carve(
    game_map: GameMap, x: TileCoord, y: TileCoord, carved: list[TileIndex]
) -> None:
    """Floor one cell if it is inside the map and still wall."""
    if not game_map.in_bounds(x, y):
        return
    if game_map.tiles[x, y] == TileTypeID.WALL:
        game_map.tiles[x, y] = TileTypeID.FLOOR
        carved.append(game_map.xy_idx(x, y))


def carve_horizontal_tunnel(
    game_map: GameMap, x1: TileCoord, x2: TileCoord, y: TileCoord
) -> list[TileIndex]:
    """Carve a straight run along row y, walking from x1 towards x2."""
    carved: list[TileIndex] = []
    step = 1 if x2 >= x1 else -1
    for x in range(x1, x2 + step, step):
        _carve(game_map, x, y, carved)
    return carved


def carve_vertical_tunnel(
    game_map: GameMap, y1: TileCoord, y2: TileCoord, x: TileCoord
) -> list[TileIndex]:
    """Carve a straight run along column x, walking from y1 towards y2."""
    carved: list[TileIndex] = []
    step = 1 if y2 >= y1 else -1
    for y in range(y1, y2 + step, step):
        _carve(game_map, x, y, carved)
    return carved


def carve_stepped_corridor(
    game_map: GameMap, start: WorldTilePos, end: WorldTilePos
) -> list[TileIndex]:
    """Walk from start to end one cell at a time, closing x before y.

    The start cell itself is not carved; every cell stepped onto is.
    """
    carved: list[TileIndex] = []
    x, y = start
    end_x, end_y = end
    while (x, y) != (end_x, end_y):
        if x < end_x:
            x += 1
        elif x > end_x:
            x -= 1
        elif y < end_y:
            y += 1
        else:
            y -= 1
        _carve(game_map, x, y, carved)
    return carved


def carve_line(game_map: GameMap, points: list[WorldTilePos]) -> list[TileIndex]:
    """Floor every cell of a precomputed line."""
    carved: list[TileIndex] = []
    for x, y in points:
        _carve(game_map, x, y, carved)
    return carved
