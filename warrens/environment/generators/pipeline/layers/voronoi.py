"""Voronoi cell layouts.

Scatters seed points, assigns every cell to its nearest seed and carves the
interior of each Voronoi region, leaving one-tile walls along region borders.
"""

from __future__ import annotations

from enum import Enum, auto

import numpy as np

from warrens import config
from warrens.environment.generators.pipeline.context import GenerationContext
from warrens.environment.generators.pipeline.layer import InitialMapLayer
from warrens.environment.tile_types import TileTypeID
from warrens.util.rng import RNG


class DistanceMetric(Enum):
    PYTHAGORAS = auto()
    MANHATTAN = auto()
    CHEBYSHEV = auto()


def nearest_seed(
    xs: np.ndarray, ys: np.ndarray, seeds: np.ndarray, metric: DistanceMetric
) -> np.ndarray:
    """Index of the nearest seed for every (x, y) pair.

    Args:
        xs, ys: Coordinate arrays of any matching shape.
        seeds: Array of shape (n, 2) holding seed (x, y) positions.
        metric: Distance function. Ties go to the lower seed index.

    Returns:
        An integer array shaped like `xs`.
    """
    dx = np.abs(xs[np.newaxis, ...] - seeds[:, 0].reshape((-1,) + (1,) * xs.ndim))
    dy = np.abs(ys[np.newaxis, ...] - seeds[:, 1].reshape((-1,) + (1,) * ys.ndim))
    match metric:
        case DistanceMetric.PYTHAGORAS:
            distance = dx * dx + dy * dy
        case DistanceMetric.MANHATTAN:
            distance = dx + dy
        case DistanceMetric.CHEBYSHEV:
            distance = np.maximum(dx, dy)
    return np.argmin(distance, axis=0)


class VoronoiCellLayer(InitialMapLayer):
    """Carves Voronoi regions as rooms separated by thin walls.

    An interior cell becomes floor when fewer than two of its four orthogonal
    neighbours belong to a different seed.
    """

    def __init__(
        self,
        metric: DistanceMetric = DistanceMetric.PYTHAGORAS,
        n_seeds: int = config.VORONOI_CELL_SEEDS,
    ) -> None:
        self.metric = metric
        self.n_seeds = n_seeds

    @classmethod
    def pythagoras(cls) -> VoronoiCellLayer:
        return cls(DistanceMetric.PYTHAGORAS)

    @classmethod
    def manhattan(cls) -> VoronoiCellLayer:
        return cls(DistanceMetric.MANHATTAN)

    @classmethod
    def chebyshev(cls) -> VoronoiCellLayer:
        return cls(DistanceMetric.CHEBYSHEV)

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        game_map = ctx.game_map
        width, height = game_map.width, game_map.height
        if self.n_seeds > (width - 1) * (height - 1):
            raise ValueError(
                f"{self.n_seeds} seeds do not fit on a {width}x{height} map"
            )

        # Distinct seeds, kept in the order they were rolled.
        seeds: dict[tuple[int, int], None] = {}
        while len(seeds) < self.n_seeds:
            seeds[(rng.roll_dice(1, width - 1), rng.roll_dice(1, height - 1))] = None
        seed_array = np.array(list(seeds), dtype=np.int32)

        xs, ys = np.indices((width, height))
        membership = nearest_seed(xs, ys, seed_array, self.metric)

        mine = membership[1:-1, 1:-1]
        neighbors = (
            (membership[:-2, 1:-1] != mine).astype(np.int8)
            + (membership[2:, 1:-1] != mine)
            + (membership[1:-1, :-2] != mine)
            + (membership[1:-1, 2:] != mine)
        )
        interior = game_map.tiles[1:-1, 1:-1]
        interior[neighbors < 2] = TileTypeID.FLOOR
        ctx.take_snapshot()
