"""
Tile types for the level grid using the flyweight pattern.

This module defines:
- `TileTypeID`: the integer ID stored per cell. `GameMap` keeps a NumPy array of
  these IDs rather than full per-cell records.
- `TileTypeData`: the intrinsic properties of a *type* of tile (walkable, glyph,
  display name). One record per type, looked up by ID.
- Helper functions that turn a whole `TileTypeID` map into a property map
  (e.g. a boolean map of all walkable tiles) with a single indexing operation.
  These feed distance sweeps and the ASCII dump.
"""

from enum import IntEnum

import numpy as np

# Defines the intrinsic data for a *type* of tile (flyweight).
TileTypeData = np.dtype(
    [
        ("walkable", bool),
        ("glyph", "U1"),  # Character used by ASCII dumps (e.g., '#')
        ("display_name", "U32"),  # Human-readable name (Unicode string, max 32 chars)
    ]
)


class TileTypeID(IntEnum):
    """Terrain kind stored in each cell of a level grid.

    WALL must stay 0: new maps are zero-filled blank (all-wall) grids.
    """

    WALL = 0
    FLOOR = 1
    DOWN_STAIRS = 2


def make_tile_type_data(
    *,  # Forces keyword arguments - prevents bugs from wrong parameter order
    walkable: bool,
    glyph: str,
    display_name: str,
) -> np.ndarray:  # Returns an instance of TileTypeData
    """
    Helper function to create a TileTypeData instance.

    Args:
        walkable: Can actors walk through this type of tile?
        glyph: Single character used when printing a map.
        display_name: Human-readable name for UI display (e.g., "Wall")

    Returns:
        A numpy array structured with the TileTypeData dtype.
    """
    return np.array((walkable, glyph, display_name), dtype=TileTypeData)


# --- Core Tile Type Definitions ---
# Keyed by ID so the property arrays below can be built in ID order.
_tile_type_data: dict[TileTypeID, np.ndarray] = {
    TileTypeID.WALL: make_tile_type_data(
        walkable=False, glyph="#", display_name="Wall"
    ),
    TileTypeID.FLOOR: make_tile_type_data(
        walkable=True, glyph=".", display_name="Floor"
    ),
    TileTypeID.DOWN_STAIRS: make_tile_type_data(
        walkable=True, glyph=">", display_name="Down Stairs"
    ),
}


# --- Pre-calculated Property Arrays for Efficient Lookups ---
# They allow for fast, vectorized conversion from a map of TileTypeIDs
# to a map of a specific property (e.g., walkability).

_tile_type_properties_walkable = np.array(
    [_tile_type_data[t]["walkable"] for t in TileTypeID], dtype=bool
)
_tile_type_properties_glyph = np.array(
    [_tile_type_data[t]["glyph"] for t in TileTypeID], dtype="U1"
)
_tile_type_properties_display_name = np.array(
    [_tile_type_data[t]["display_name"] for t in TileTypeID], dtype="U32"
)

# --- Public Helper Functions for Accessing Tile Properties ---


def get_walkable_map(tile_type_ids_map: np.ndarray) -> np.ndarray:
    """
    Converts a map of TileTypeIDs into a boolean map of walkability.
    True means the tile at that position is walkable.
    """
    return _tile_type_properties_walkable[tile_type_ids_map]


def get_glyph_map(tile_type_ids_map: np.ndarray) -> np.ndarray:
    """Converts a map of TileTypeIDs into a map of single-character glyphs."""
    return _tile_type_properties_glyph[tile_type_ids_map]


def get_tile_type_data_by_id(tile_type_id: int) -> np.ndarray:  # Returns TileTypeData
    """
    Retrieves the full TileTypeData instance for a given TileTypeID.
    """
    try:
        return _tile_type_data[TileTypeID(tile_type_id)]
    except ValueError:
        raise ValueError(
            f"Invalid TileTypeID: {tile_type_id}. "
            f"Must be between 0 and {len(TileTypeID) - 1}."
        ) from None


def get_tile_type_name_by_id(tile_type_id: int) -> str:
    """Returns the display name for a TileTypeID."""
    return str(_tile_type_properties_display_name[tile_type_id])
