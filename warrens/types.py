from __future__ import annotations

# =============================================================================
# SPATIAL TYPES
# =============================================================================

type TileCoord = int  # Always integer tile position

# World coordinates - absolute positions on the level grid
type WorldTileCoord = TileCoord  # Example: x=5, y=3
type WorldTilePos = tuple[
    WorldTileCoord, WorldTileCoord
]  # Example: (5, 3) = tile 5,3 on map

# Row-major cell index into a level grid: idx = y * width + x.
# Spawn lists and corridors are expressed in these.
type TileIndex = int  # Example: 243 = (3, 3) on an 80-wide map

# =============================================================================
# GENERATION-RELATED TYPES
# =============================================================================

# A placement request produced by the generator: which cell, and the name of
# the entity the game should instantiate there (e.g. (243, "Goblin")).
type SpawnEntry = tuple[TileIndex, str]

# Level depth. Depth 1 is the first level below the surface.
type MapDepth = int

# Random seed for deterministic generation (map generation, etc.)
# Can be an int for numeric seeds or a descriptive string like "burrito1".
type RandomSeed = int | str | None
