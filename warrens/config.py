"""
Configuration constants.

Centralizes the magic numbers and tunables used by the level generator.
Organized by functional area for easy maintenance.
"""

# =============================================================================
# GENERAL
# =============================================================================

# RANDOM_SEED = None
RANDOM_SEED = "burrito1"

# =============================================================================
# MAP GENERATION
# =============================================================================

# Default map size
MAP_WIDTH = 80
MAP_HEIGHT = 43

# Record a full-map snapshot after interesting generation steps so a viewer
# can replay the build. Off by default; when off, snapshots cost one flag check.
SHOW_MAPGEN_VISUALIZER = False

# How many times generate_level() re-rolls a level whose pipeline failed.
LEVEL_GENERATION_ATTEMPTS = 5

# Rooms
SIMPLE_MAP_MAX_ROOMS = 30
SIMPLE_MAP_MIN_ROOM_SIZE = 6
SIMPLE_MAP_MAX_ROOM_SIZE = 10
BSP_DUNGEON_ATTEMPTS = 240
BSP_INTERIOR_MIN_ROOM_SIZE = 8

# Cellular automata
CELLULAR_WALL_CHANCE = 55  # Percent of interior cells seeded as wall
CELLULAR_GENERATIONS = 15

# Voronoi
VORONOI_CELL_SEEDS = 64  # Seeds used by the Voronoi carving layer
VORONOI_SPAWN_AREA_SIZE = 80  # Floor tiles per spawn region seed

# Wave function collapse
WFC_CHUNK_SIZE = 8
WFC_MAX_ATTEMPTS = 10

# =============================================================================
# SPAWNING
# =============================================================================

MAX_MONSTERS = 4

# Vaults appear when roll_dice(1, 6) + depth reaches this value.
VAULT_THRESHOLD = 4
MAX_VAULTS = 3
