"""Chunk-based Wave Function Collapse.

This module learns square chunks from an existing level and reassembles them
into a new level where every chunk agrees with its neighbours along shared
edges.

Usage:
    from warrens.environment.generators.wfc_solver import (
        ChunkSolver,
        build_patterns,
        patterns_to_constraints,
    )

    patterns = build_patterns(game_map.tiles, chunk_size=8)
    constraints = patterns_to_constraints(patterns)
    solver = ChunkSolver(constraints, chunks_x, chunks_y, rng)
    grid = solver.solve()  # (chunks_x, chunks_y) array of pattern indices

Edge model:
    Each chunk side has an exit wherever its edge cell is floor. Two chunks
    fit along a side when they share at least one exit slot there, or when
    neither has any exit on the touching sides. A chunk with no exits at all
    fits next to anything.

Solve order:
    The next chunk to fill is the one with the most filled neighbours (ties
    go to the earliest remaining chunk); while nothing has been filled near
    any remaining chunk, a random one is picked instead.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from warrens.environment.generators.base import GenerationError
from warrens.environment.tile_types import TileTypeID
from warrens.util.rng import RNG

# Side indices into MapChunk.exits and the compatibility table.
NORTH, SOUTH, WEST, EAST = range(4)
OPPOSITE = (SOUTH, NORTH, EAST, WEST)


class WFCContradiction(GenerationError):
    """Raised when WFC reaches an unsolvable state.

    This occurs when the filled neighbours of a chunk leave no pattern that
    fits all of them at once.
    """

    pass


@dataclass
class MapChunk:
    """One learned chunk.

    Attributes:
        pattern: Tile IDs of shape (chunk_size, chunk_size), indexed [x, y].
        exits: Bool array of shape (4, chunk_size): which edge cells on each
            side (NORTH, SOUTH, WEST, EAST) are floor.
    """

    pattern: np.ndarray
    exits: np.ndarray

    @property
    def has_exits(self) -> bool:
        return bool(self.exits.any())


@dataclass
class ChunkConstraints:
    """Learned chunks plus their pairwise compatibility.

    Attributes:
        chunks: The distinct chunks, in the order they were first seen.
        compatible: Bool array of shape (4, n, n). compatible[side, a, b] is
            True when chunk b may sit on `side` of chunk a.
    """

    chunks: list[MapChunk]
    compatible: np.ndarray

    @property
    def chunk_size(self) -> int:
        return self.chunks[0].pattern.shape[0]

    def __len__(self) -> int:
        return len(self.chunks)


def build_patterns(
    tiles: np.ndarray,
    chunk_size: int,
    include_flipping: bool = True,
    dedupe: bool = True,
) -> list[np.ndarray]:
    """Cut a tile grid into chunk_size x chunk_size patterns.

    Tiles are reduced to WALL and FLOOR first: every walkable tile counts as
    floor. Chunks are read row by row; each contributes itself and, when
    flipping is on, its horizontal, vertical and double mirror images.
    Deduplication keeps the first occurrence of each distinct pattern.
    """
    width, height = tiles.shape
    source = np.where(
        tiles == TileTypeID.WALL, TileTypeID.WALL, TileTypeID.FLOOR
    ).astype(np.uint8)

    patterns: list[np.ndarray] = []
    for cy in range(height // chunk_size):
        for cx in range(width // chunk_size):
            chunk = source[
                cx * chunk_size : (cx + 1) * chunk_size,
                cy * chunk_size : (cy + 1) * chunk_size,
            ]
            patterns.append(chunk.copy())
            if include_flipping:
                patterns.append(chunk[::-1, :].copy())
                patterns.append(chunk[:, ::-1].copy())
                patterns.append(chunk[::-1, ::-1].copy())

    if dedupe:
        unique: dict[bytes, np.ndarray] = {}
        for pattern in patterns:
            unique.setdefault(pattern.tobytes(), pattern)
        patterns = list(unique.values())

    return patterns


def patterns_to_constraints(patterns: list[np.ndarray]) -> ChunkConstraints:
    """Work out each pattern's exits and which patterns may touch which.

    Raises:
        ValueError: If there are no patterns to learn from.
    """
    if not patterns:
        raise ValueError("Cannot build chunk constraints from zero patterns")

    chunks = []
    for pattern in patterns:
        floor = pattern == TileTypeID.FLOOR
        exits = np.stack(
            [
                floor[:, 0],  # NORTH: top row
                floor[:, -1],  # SOUTH: bottom row
                floor[0, :],  # WEST: left column
                floor[-1, :],  # EAST: right column
            ]
        )
        chunks.append(MapChunk(pattern=pattern, exits=exits))

    all_exits = np.stack([chunk.exits for chunk in chunks])  # (n, 4, size)
    has_exits = all_exits.any(axis=(1, 2))
    side_open = all_exits.any(axis=2)  # (n, 4)
    exitless_pair = ~has_exits[:, np.newaxis] | ~has_exits[np.newaxis, :]

    n = len(chunks)
    compatible = np.zeros((4, n, n), dtype=bool)
    for side in range(4):
        opposite = OPPOSITE[side]
        mine = all_exits[:, side, :].astype(np.int32)
        theirs = all_exits[:, opposite, :].astype(np.int32)
        shares_exit = (mine @ theirs.T) > 0
        closed_mine = ~side_open[:, side, np.newaxis]
        closed_theirs = ~side_open[np.newaxis, :, opposite]
        both_closed = closed_mine & closed_theirs
        compatible[side] = exitless_pair | shares_exit | both_closed

    return ChunkConstraints(chunks=chunks, compatible=compatible)


class ChunkSolver:
    """Fills a chunks_x x chunks_y grid with mutually compatible chunks."""

    def __init__(
        self,
        constraints: ChunkConstraints,
        chunks_x: int,
        chunks_y: int,
        rng: RNG,
    ) -> None:
        self.constraints = constraints
        self.chunks_x = chunks_x
        self.chunks_y = chunks_y
        self.rng = rng
        # Pattern index per grid cell, -1 while unfilled.
        self.grid = np.full((chunks_x, chunks_y), -1, dtype=np.int32)
        self.remaining: list[int] = list(range(chunks_x * chunks_y))

    @property
    def done(self) -> bool:
        return not self.remaining

    def _filled_neighbors(self, cx: int, cy: int) -> list[tuple[int, int]]:
        """(pattern, side of that pattern facing us) for each filled neighbour."""
        result = []
        for nx, ny, facing in (
            (cx - 1, cy, EAST),
            (cx + 1, cy, WEST),
            (cx, cy - 1, SOUTH),
            (cx, cy + 1, NORTH),
        ):
            if 0 <= nx < self.chunks_x and 0 <= ny < self.chunks_y:
                pattern = int(self.grid[nx, ny])
                if pattern >= 0:
                    result.append((pattern, facing))
        return result

    def step(self) -> tuple[int, int]:
        """Fill one chunk and return its (cx, cy) grid position.

        Raises:
            WFCContradiction: If no pattern fits all filled neighbours.
        """
        counts = [
            len(self._filled_neighbors(idx % self.chunks_x, idx // self.chunks_x))
            for idx in self.remaining
        ]
        if max(counts) == 0:
            pick = self.rng.roll_dice(1, len(self.remaining)) - 1
        else:
            # First remaining chunk with the most filled neighbours.
            pick = counts.index(max(counts))
        chunk_index = self.remaining.pop(pick)
        cx, cy = chunk_index % self.chunks_x, chunk_index // self.chunks_x

        neighbors = self._filled_neighbors(cx, cy)
        if not neighbors:
            choice = self.rng.roll_dice(1, len(self.constraints)) - 1
        else:
            allowed = np.ones(len(self.constraints), dtype=bool)
            for pattern, facing in neighbors:
                allowed &= self.constraints.compatible[facing, pattern]
            options = np.flatnonzero(allowed)
            if options.size == 0:
                raise WFCContradiction(
                    f"No chunk fits at ({cx}, {cy}) next to {len(neighbors)} chunks"
                )
            if options.size == 1:
                choice = int(options[0])
            else:
                choice = int(options[self.rng.roll_dice(1, options.size) - 1])

        self.grid[cx, cy] = choice
        return cx, cy

    def solve(self) -> np.ndarray:
        """Fill every chunk. Returns the (chunks_x, chunks_y) pattern grid."""
        while not self.done:
            self.step()
        return self.grid

    def paint(self, tiles: np.ndarray, cx: int, cy: int) -> None:
        """Copy the chunk chosen at (cx, cy) into a tile array."""
        size = self.constraints.chunk_size
        pattern = self.constraints.chunks[int(self.grid[cx, cy])].pattern
        tiles[cx * size : (cx + 1) * size, cy * size : (cy + 1) * size] = pattern
