"""Prefab layers: stamp hand-authored ASCII templates into the level.

- PrefabLevelLayer: a whole authored level, centred on the map
- PrefabSectionLayer: a large set piece stamped over an existing level
- PrefabVaultLayer: a few small vaults dropped onto open floor

Stamping never touches the outer ring of the map. Entity glyphs in a
template queue spawns; spawns already queued under a section or vault are
removed first.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from warrens import config
from warrens.environment.generators.pipeline.context import GenerationContext
from warrens.environment.generators.pipeline.layer import (
    InitialMapLayer,
    MetaMapLayer,
)
from warrens.environment.generators.prefab_data import (
    GLYPH_SPAWNS,
    GLYPH_TILES,
    UNDERGROUND_FORT,
    VAULTS,
    WARREN_LEVEL,
    HorizontalPlacement,
    Prefab,
    PrefabRoom,
    PrefabSection,
    VerticalPlacement,
)
from warrens.environment.tile_types import TileTypeID
from warrens.types import TileCoord
from warrens.util.rng import RNG

logger = logging.getLogger(__name__)


def stamp_prefab(
    ctx: GenerationContext, prefab: Prefab, origin_x: TileCoord, origin_y: TileCoord
) -> None:
    """Write a template with its top-left corner at (origin_x, origin_y).

    Cells that would land on the map border or outside the map are skipped.
    """
    game_map = ctx.game_map
    for dx, dy, glyph in prefab.cells():
        x, y = origin_x + dx, origin_y + dy
        if not (1 <= x <= game_map.width - 2 and 1 <= y <= game_map.height - 2):
            continue
        game_map.tiles[x, y] = GLYPH_TILES[glyph]
        if glyph == "@":
            ctx.starting_position = (x, y)
        name = GLYPH_SPAWNS.get(glyph)
        if name is not None:
            ctx.spawn_list.append((game_map.xy_idx(x, y), name))


def remove_spawns_in(
    ctx: GenerationContext,
    x: TileCoord,
    y: TileCoord,
    width: TileCoord,
    height: TileCoord,
) -> None:
    """Drop queued spawns inside the box [x, x + width) x [y, y + height)."""
    game_map = ctx.game_map

    def outside(idx: int) -> bool:
        sx, sy = game_map.idx_xy(idx)
        return not (x <= sx < x + width and y <= sy < y + height)

    ctx.spawn_list[:] = [entry for entry in ctx.spawn_list if outside(entry[0])]


class PrefabLevelLayer(InitialMapLayer):
    """Uses an authored level as the whole layout, centred on the map."""

    def __init__(self, prefab: Prefab = WARREN_LEVEL) -> None:
        self.prefab = prefab

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        origin_x = (ctx.width - self.prefab.width) // 2
        origin_y = (ctx.height - self.prefab.height) // 2
        stamp_prefab(ctx, self.prefab, origin_x, origin_y)
        ctx.take_snapshot()


class PrefabSectionLayer(MetaMapLayer):
    """Stamps a large section at one of nine anchor placements."""

    def __init__(self, section: PrefabSection = UNDERGROUND_FORT) -> None:
        self.section = section

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        section = self.section
        match section.horizontal:
            case HorizontalPlacement.LEFT:
                chunk_x = 1
            case HorizontalPlacement.CENTER:
                chunk_x = ctx.width // 2 - section.width // 2
            case HorizontalPlacement.RIGHT:
                chunk_x = ctx.width - 1 - section.width
        match section.vertical:
            case VerticalPlacement.TOP:
                chunk_y = 1
            case VerticalPlacement.CENTER:
                chunk_y = ctx.height // 2 - section.height // 2
            case VerticalPlacement.BOTTOM:
                chunk_y = ctx.height - 1 - section.height

        remove_spawns_in(ctx, chunk_x, chunk_y, section.width, section.height)
        stamp_prefab(ctx, section, chunk_x, chunk_y)
        ctx.take_snapshot()


class PrefabVaultLayer(MetaMapLayer):
    """Drops up to MAX_VAULTS small vaults onto open floor.

    Vaults only appear when `roll_dice(1, 6) + depth` reaches VAULT_THRESHOLD.
    Each vault is drawn from those whose depth range covers the level and
    goes on a rectangle that is all floor, away from the map edge, clear of
    earlier vaults and not covering the starting position.
    """

    def __init__(self, vaults: tuple[PrefabRoom, ...] = VAULTS) -> None:
        self.vaults = vaults

    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        if rng.roll_dice(1, 6) + ctx.depth < config.VAULT_THRESHOLD:
            return

        possible = [
            vault
            for vault in self.vaults
            if vault.first_depth <= ctx.depth <= vault.last_depth
        ]
        if not possible:
            return

        used = np.zeros((ctx.width, ctx.height), dtype=bool, order="F")
        n_vaults = min(rng.roll_dice(1, config.MAX_VAULTS), len(possible))

        for _ in range(n_vaults):
            if len(possible) == 1:
                vault_index = 0
            else:
                vault_index = rng.roll_dice(1, len(possible)) - 1
            vault = possible[vault_index]

            positions = self._candidate_positions(ctx, vault, used)
            if not positions:
                continue

            if len(positions) == 1:
                chunk_x, chunk_y = positions[0]
            else:
                chunk_x, chunk_y = positions[rng.roll_dice(1, len(positions)) - 1]

            remove_spawns_in(ctx, chunk_x, chunk_y, vault.width, vault.height)
            stamp_prefab(ctx, vault, chunk_x, chunk_y)
            used[
                chunk_x : chunk_x + vault.width, chunk_y : chunk_y + vault.height
            ] = True
            logger.debug("Placed vault %s at (%d, %d)", vault.name, chunk_x, chunk_y)
            ctx.take_snapshot()
            possible.pop(vault_index)

    @staticmethod
    def _candidate_positions(
        ctx: GenerationContext, vault: PrefabRoom, used: np.ndarray
    ) -> list[tuple[int, int]]:
        """Top-left corners where the vault fits, in row-major order."""
        game_map = ctx.game_map
        width, height = game_map.width, game_map.height
        if vault.width > width or vault.height > height:
            return []

        open_floor = (game_map.tiles == TileTypeID.FLOOR) & ~used
        if ctx.starting_position is not None:
            open_floor[ctx.starting_position] = False

        windows = sliding_window_view(open_floor, (vault.width, vault.height))
        fits = windows.all(axis=(2, 3))

        # Keep x > 1 and x + vault width < width - 2, and the same for y.
        xs = np.arange(fits.shape[0])[:, np.newaxis]
        ys = np.arange(fits.shape[1])[np.newaxis, :]
        fits &= (xs > 1) & (xs + vault.width < width - 2)
        fits &= (ys > 1) & (ys + vault.height < height - 2)

        # Fortran ravel lists x fastest, matching the map's scan order.
        flat = np.flatnonzero(fits.ravel(order="F"))
        nx = fits.shape[0]
        return [(int(i % nx), int(i // nx)) for i in flat]
