"""Maze carving with a recursive backtracker.

The maze lives on a cell grid at half the map's resolution. Maze cell
(column, row) maps to tile ((column + 1) * 2, (row + 1) * 2), and the tile
between two joined cells is opened too, so corridors are one tile wide with
one tile of wall between them.
"""

from __future__ import annotations

import numpy as np

from warrens import config
from warrens.environment.generators.pipeline.context import GenerationContext
from warrens.environment.generators.pipeline.layer import InitialMapLayer
from warrens.environment.map import GameMap
from warrens.environment.tile_types import TileTypeID
from warrens.util.rng import RNG

# Wall slots per maze cell.
TOP, RIGHT, BOTTOM, LEFT = range(4)

# Record a snapshot every this many steps while carving.
SNAPSHOT_INTERVAL = 50


class MazeGrid:
    """Cell grid with per-side walls, carved by depth-first search."""

    def __init__(self, columns: int, rows: int) -> None:
        self.columns = columns
        self.rows = rows
        self.walls = np.ones((columns, rows, 4), dtype=bool)
        self.visited = np.zeros((columns, rows), dtype=bool)

    def unvisited_neighbors(self, column: int, row: int) -> list[tuple[int, int]]:
        """Unvisited neighbours, in top, right, bottom, left order."""
        result = []
        for c, r in (
            (column, row - 1),
            (column + 1, row),
            (column, row + 1),
            (column - 1, row),
        ):
            if 0 <= c < self.columns and 0 <= r < self.rows and not self.visited[c, r]:
                result.append((c, r))
        return result

    def remove_walls(self, current: tuple[int, int], nxt: tuple[int, int]) -> None:
        (c1, r1), (c2, r2) = current, nxt
        dx, dy = c1 - c2, r1 - r2
        if dx == 1:
            self.walls[c1, r1, LEFT] = False
            self.walls[c2, r2, RIGHT] = False
        elif dx == -1:
            self.walls[c1, r1, RIGHT] = False
            self.walls[c2, r2, LEFT] = False
        elif dy == 1:
            self.walls[c1, r1, TOP] = False
            self.walls[c2, r2, BOTTOM] = False
        elif dy == -1:
            self.walls[c1, r1, BOTTOM] = False
            self.walls[c2, r2, TOP] = False

    def copy_to_map(self, game_map: GameMap) -> None:
        """Redraw the whole map from the visited cells and their open sides."""
        tiles = game_map.tiles
        tiles[:, :] = TileTypeID.WALL
        for column, row in zip(*self.visited.nonzero(), strict=True):
            x = (int(column) + 1) * 2
            y = (int(row) + 1) * 2
            tiles[x, y] = TileTypeID.FLOOR
            walls = self.walls[column, row]
            if not walls[TOP]:
                tiles[x, y - 1] = TileTypeID.FLOOR
            if not walls[RIGHT]:
                tiles[x + 1, y] = TileTypeID.FLOOR
            if not walls[BOTTOM]:
                tiles[x, y + 1] = TileTypeID.FLOOR
            if not walls[LEFT]:
                tiles[x - 1, y] = TileTypeID.FLOOR


class MazeLayer(InitialMapLayer):
    """A perfect maze covering the map: every floor cell is reachable."""

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        game_map = ctx.game_map
        grid = MazeGrid(game_map.width // 2 - 2, game_map.height // 2 - 2)
        if grid.columns <= 0 or grid.rows <= 0:
            raise ValueError(
                f"Map {game_map.width}x{game_map.height} is too small for a maze"
            )

        current = (0, 0)
        backtrace: list[tuple[int, int]] = []
        step = 0
        while True:
            grid.visited[current] = True
            neighbors = grid.unvisited_neighbors(*current)
            if neighbors:
                if len(neighbors) == 1:
                    nxt = neighbors[0]
                else:
                    nxt = neighbors[rng.roll_dice(1, len(neighbors)) - 1]
                grid.visited[nxt] = True
                backtrace.append(current)
                grid.remove_walls(current, nxt)
                current = nxt
            elif backtrace:
                current = backtrace.pop()
            else:
                break

            # Redrawing the map mid-carve only matters to the visualizer.
            if config.SHOW_MAPGEN_VISUALIZER and step % SNAPSHOT_INTERVAL == 0:
                grid.copy_to_map(game_map)
                ctx.take_snapshot()
            step += 1

        grid.copy_to_map(game_map)
        ctx.take_snapshot()
