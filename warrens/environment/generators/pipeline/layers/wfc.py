"""Wave Function Collapse layer.

Relearns the current level as 8x8 chunks and rebuilds it from them, so the
result keeps the local look of its source while rearranging it.
"""

from __future__ import annotations

import logging

import numpy as np

from warrens import config
from warrens.environment.generators.pipeline.context import GenerationContext
from warrens.environment.generators.pipeline.layer import MetaMapLayer
from warrens.environment.generators.wfc_solver import (
    ChunkConstraints,
    ChunkSolver,
    WFCContradiction,
    build_patterns,
    patterns_to_constraints,
)
from warrens.environment.tile_types import TileTypeID
from warrens.util.rng import RNG

logger = logging.getLogger(__name__)


class WaveformCollapseLayer(MetaMapLayer):
    """Rebuilds the level out of chunks cut from the level itself.

    The solver starts over on a blank map after each contradiction. If every
    attempt contradicts, the source level is kept unchanged.

    A successful rebuild invalidates everything placed on the old layout:
    rooms, corridors and queued spawns are cleared. Only the outer ring is
    forced back to wall; cells past the last whole chunk stay wall too.
    """

    def __init__(
        self,
        chunk_size: int | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self.chunk_size = (
            chunk_size if chunk_size is not None else config.WFC_CHUNK_SIZE
        )
        self.max_attempts = (
            max_attempts if max_attempts is not None else config.WFC_MAX_ATTEMPTS
        )
        if self.chunk_size < 2:
            raise ValueError(f"chunk_size must be at least 2, got {self.chunk_size}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be positive, got {self.max_attempts}")

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        game_map = ctx.game_map
        chunks_x = game_map.width // self.chunk_size
        chunks_y = game_map.height // self.chunk_size
        if chunks_x == 0 or chunks_y == 0:
            logger.warning(
                "Map %dx%d is smaller than one %d-cell chunk; skipping WFC",
                game_map.width,
                game_map.height,
                self.chunk_size,
            )
            return

        source = game_map.tiles.copy(order="F")
        constraints = patterns_to_constraints(
            build_patterns(source, self.chunk_size)
        )

        for attempt in range(1, self.max_attempts + 1):
            try:
                tiles = self._solve(rng, ctx, constraints, chunks_x, chunks_y)
            except WFCContradiction as exc:
                logger.debug("WFC attempt %d failed: %s", attempt, exc)
                continue

            game_map.tiles[:] = tiles
            ctx.spawn_list.clear()
            ctx.rooms = None
            ctx.corridors = None
            ctx.take_snapshot()
            logger.debug(
                "WFC rebuilt the level from %d chunks in %d attempt(s)",
                len(constraints),
                attempt,
            )
            return

        game_map.tiles[:] = source
        logger.warning(
            "WFC gave up after %d attempts; keeping the source level",
            self.max_attempts,
        )

    @staticmethod
    def _solve(
        rng: RNG,
        ctx: GenerationContext,
        constraints: ChunkConstraints,
        chunks_x: int,
        chunks_y: int,
    ) -> np.ndarray:
        """Run one solver pass and return the finished tile array.

        Raises:
            WFCContradiction: If the pass reaches an unsolvable chunk.
        """
        game_map = ctx.game_map
        tiles = np.full_like(game_map.tiles, TileTypeID.WALL)
        solver = ChunkSolver(constraints, chunks_x, chunks_y, rng)

        while not solver.done:
            cx, cy = solver.step()
            solver.paint(tiles, cx, cy)
            if config.SHOW_MAPGEN_VISUALIZER:
                game_map.tiles[:] = tiles
                ctx.take_snapshot()

        tiles[0, :] = TileTypeID.WALL
        tiles[-1, :] = TileTypeID.WALL
        tiles[:, 0] = TileTypeID.WALL
        tiles[:, -1] = TileTypeID.WALL
        return tiles
