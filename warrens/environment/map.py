from __future__ import annotations

import numpy as np

from warrens.environment import tile_types
from warrens.environment.tile_types import TileTypeID
from warrens.types import MapDepth, TileCoord, TileIndex, WorldTilePos
from warrens.util.coordinates import is_valid_world_tile_pos


class GameMap:
    """A level grid: a width x height array of tile IDs plus its depth.

    Tiles are stored as a numpy array of shape (width, height) in Fortran
    order and indexed ``tiles[x, y]``. Cells are also addressed by a
    row-major index ``idx = y * width + x``; spawn lists and corridors use
    those indices. Because of the Fortran layout, ``tiles.ravel(order="F")``
    lines up with that index exactly.
    """

    def __init__(
        self, depth: MapDepth, width: TileCoord, height: TileCoord
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Map dimensions must be positive, got {width}x{height}")

        self.width: TileCoord = width
        self.height: TileCoord = height
        self._depth: MapDepth = depth

        self.tiles = np.full(
            (width, height),
            fill_value=TileTypeID.WALL,
            dtype=np.uint8,
            order="F",
        )

        # Derived from tiles on demand by populate_blocked().
        self.blocked = np.full((width, height), fill_value=True, dtype=bool, order="F")

        # Which tiles a viewer may show. Snapshots mark everything revealed.
        self.revealed = np.full(
            (width, height), fill_value=False, dtype=bool, order="F"
        )

    @property
    def depth(self) -> MapDepth:
        """Level depth, fixed at creation."""
        return self._depth

    # -------------------------------------------------------------------------
    # Coordinate math
    # -------------------------------------------------------------------------

    def xy_idx(self, x: TileCoord, y: TileCoord) -> TileIndex:
        return y * self.width + x

    def idx_xy(self, idx: TileIndex) -> WorldTilePos:
        return (idx % self.width, idx // self.width)

    def in_bounds(self, x: TileCoord, y: TileCoord) -> bool:
        return is_valid_world_tile_pos((x, y), self.width, self.height)

    # -------------------------------------------------------------------------
    # Tile access
    # -------------------------------------------------------------------------

    @property
    def flat_tiles(self) -> np.ndarray:
        """Row-major 1-D view of the tiles, indexable by TileIndex.

        Writes through the view modify the map.
        """
        return self.tiles.reshape(-1, order="F")

    def tile_at(self, idx: TileIndex) -> TileTypeID:
        x, y = self.idx_xy(idx)
        return TileTypeID(int(self.tiles[x, y]))

    def set_tile(self, idx: TileIndex, tile: TileTypeID) -> None:
        x, y = self.idx_xy(idx)
        self.tiles[x, y] = tile

    @property
    def walkable(self) -> np.ndarray:
        """Boolean array of shape (width, height) where True means tile is walkable."""
        return tile_types.get_walkable_map(self.tiles)

    def populate_blocked(self) -> None:
        """Recompute the blocked bitmap from the current tiles."""
        self.blocked = ~self.walkable

    def count_tiles(self, tile: TileTypeID) -> int:
        return int(np.count_nonzero(self.tiles == tile))

    def indices_of(self, tile: TileTypeID) -> np.ndarray:
        """Row-major indices of every cell holding `tile`, in ascending order."""
        return np.flatnonzero(self.flat_tiles == tile)

    # -------------------------------------------------------------------------
    # Copies and dumps
    # -------------------------------------------------------------------------

    def copy(self) -> GameMap:
        clone = GameMap(self.depth, self.width, self.height)
        clone.tiles[:, :] = self.tiles
        clone.blocked[:, :] = self.blocked
        clone.revealed[:, :] = self.revealed
        return clone

    def snapshot(self) -> GameMap:
        """A copy with every tile revealed, for generation replays."""
        clone = self.copy()
        clone.revealed[:, :] = True
        return clone

    def to_ascii(self, overlays: dict[WorldTilePos, str] | None = None) -> str:
        """Render the map as text, one row per line.

        Args:
            overlays: Optional glyphs drawn on top of the tiles, keyed by
                position (e.g. the starting position as '@').
        """
        glyphs = tile_types.get_glyph_map(self.tiles)
        for (x, y), glyph in (overlays or {}).items():
            glyphs[x, y] = glyph
        return "\n".join("".join(glyphs[:, y]) for y in range(self.height))
