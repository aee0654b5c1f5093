"""Cellular automata caves.

Fills the interior with random noise, then smooths it: a cell becomes wall
when more than four of its eight neighbours are wall (it is surrounded) or
when none are (it is an isolated pillar in open floor), and floor otherwise.
The outer ring of the map stays wall throughout.
"""

from __future__ import annotations

import numpy as np

from warrens import config
from warrens.environment.generators.pipeline.context import GenerationContext
from warrens.environment.generators.pipeline.layer import InitialMapLayer
from warrens.environment.tile_types import TileTypeID
from warrens.util.rng import RNG


def count_wall_neighbors(tiles: np.ndarray) -> np.ndarray:
    """Wall count over the 8-neighbourhood of every interior cell.

    Returns an array of shape (width - 2, height - 2) lined up with
    `tiles[1:-1, 1:-1]`.
    """
    walls = (tiles == TileTypeID.WALL).astype(np.int8)
    width, height = walls.shape
    counts = np.zeros((width - 2, height - 2), dtype=np.int8)
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            counts += walls[1 + dx : width - 1 + dx, 1 + dy : height - 1 + dy]
    return counts


class CellularAutomataLayer(InitialMapLayer):
    """Cave-like layout from noise plus a few smoothing generations."""

    def __init__(
        self,
        wall_chance: int = config.CELLULAR_WALL_CHANCE,
        generations: int = config.CELLULAR_GENERATIONS,
    ) -> None:
        self.wall_chance = wall_chance
        self.generations = generations

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        game_map = ctx.game_map
        tiles = game_map.tiles

        # Noise in row-major order so a given stream yields the same cave.
        for y in range(1, game_map.height - 1):
            for x in range(1, game_map.width - 1):
                if rng.roll_dice(1, 100) > self.wall_chance:
                    tiles[x, y] = TileTypeID.FLOOR
                else:
                    tiles[x, y] = TileTypeID.WALL
        ctx.take_snapshot()

        for _ in range(self.generations):
            neighbors = count_wall_neighbors(tiles)
            tiles[1:-1, 1:-1] = np.where(
                (neighbors > 4) | (neighbors == 0),
                TileTypeID.WALL,
                TileTypeID.FLOOR,
            )
            ctx.take_snapshot()
