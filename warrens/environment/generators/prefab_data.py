"""Hand-authored prefabs: a whole level, a large section and small vaults.

Templates are ASCII, one string per row:

    #  wall            .  floor
    @  starting point  >  down stairs
    g  Goblin          o  Orc
    ^  Bear Trap       %  Rations
    !  Health Potion

Entity glyphs stand on floor and queue a spawn for that cell.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto

from warrens.environment.tile_types import TileTypeID
from warrens.types import MapDepth

# Tile written for each glyph.
GLYPH_TILES: dict[str, TileTypeID] = {
    "#": TileTypeID.WALL,
    ".": TileTypeID.FLOOR,
    "@": TileTypeID.FLOOR,
    ">": TileTypeID.DOWN_STAIRS,
    "g": TileTypeID.FLOOR,
    "o": TileTypeID.FLOOR,
    "^": TileTypeID.FLOOR,
    "%": TileTypeID.FLOOR,
    "!": TileTypeID.FLOOR,
}

# Entity queued for each entity glyph.
GLYPH_SPAWNS: dict[str, str] = {
    "g": "Goblin",
    "o": "Orc",
    "^": "Bear Trap",
    "%": "Rations",
    "!": "Health Potion",
}


class HorizontalPlacement(Enum):
    LEFT = auto()
    CENTER = auto()
    RIGHT = auto()


class VerticalPlacement(Enum):
    TOP = auto()
    CENTER = auto()
    BOTTOM = auto()


def _validate_template(name: str, template: tuple[str, ...]) -> None:
    if not template:
        raise ValueError(f"Prefab {name!r} has an empty template")
    width = len(template[0])
    for row, line in enumerate(template):
        if len(line) != width:
            raise ValueError(
                f"Prefab {name!r} row {row} is {len(line)} wide, expected {width}"
            )
        unknown = set(line) - GLYPH_TILES.keys()
        if unknown:
            raise ValueError(f"Prefab {name!r} uses unknown glyphs {sorted(unknown)}")


@dataclass(frozen=True)
class Prefab:
    """An ASCII template. Width and height come from the rows."""

    name: str
    template: tuple[str, ...]

    def __post_init__(self) -> None:
        _validate_template(self.name, self.template)

    @property
    def width(self) -> int:
        return len(self.template[0])

    @property
    def height(self) -> int:
        return len(self.template)

    def cells(self) -> Iterator[tuple[int, int, str]]:
        """Yield (dx, dy, glyph) for every template cell in row-major order."""
        for dy, line in enumerate(self.template):
            for dx, glyph in enumerate(line):
                yield dx, dy, glyph


@dataclass(frozen=True)
class PrefabSection(Prefab):
    """A template stamped over part of an existing level."""

    horizontal: HorizontalPlacement = HorizontalPlacement.CENTER
    vertical: VerticalPlacement = VerticalPlacement.CENTER


@dataclass(frozen=True)
class PrefabRoom(Prefab):
    """A small vault, eligible on depths first_depth..last_depth inclusive.

    Vaults keep their outer ring floor so stamping one onto open floor never
    cuts a path in two.
    """

    first_depth: MapDepth = 0
    last_depth: MapDepth = 100


# =============================================================================
# Levels
# =============================================================================

WARREN_LEVEL = Prefab(
    name="warren",
    template=(
        "########################################",
        "#@.....#..............#.......^........#",
        "#......#..######......#..####....####..#",
        "#......#..#....#......#..#..#....#..#..#",
        "#...%.....#.g..#..........o.#....#..#..#",
        "#......#..#....#......#..#..#.......#..#",
        "###.####..##.###......#..####....####..#",
        "#.................................!....#",
        "#..####################....#########...#",
        "#..#..................#....#.......#...#",
        "#..#...g.......o......#....#...%...#...#",
        "#..#..................#..........g.....#",
        "#..#######.############....#.......#...#",
        "#..........#...............#########...#",
        "#..........#.........^.................#",
        "######.#####..####..####..####..####...#",
        "#..........#..#..#..#..#..#..#..#..#...#",
        "#...o......#..................!.....>..#",
        "#..........#..#..#..#..#..#..#..#..#...#",
        "########################################",
    ),
)

# =============================================================================
# Sections
# =============================================================================

UNDERGROUND_FORT = PrefabSection(
    name="underground_fort",
    template=(
        "###############",
        "#.............#",
        "#.###.###.###.#",
        "#.#g......g.#.#",
        "#.#.........#.#",
        "#.###.....###.#",
        "#.....#.#.....#",
        "..o...#.#...o.#",
        "#.....#.#.....#",
        "#.###.....###.#",
        "#.#....%....#.#",
        "#.#.........#.#",
        "#.###.###.###.#",
        "#.....^.^.....#",
        "#.###.....###.#",
        "#.#g.......g#.#",
        "#.#.........#.#",
        "#.###.###.###.#",
        "..............#",
        "#.....!.......#",
        "###############",
    ),
    horizontal=HorizontalPlacement.RIGHT,
    vertical=VerticalPlacement.CENTER,
)

# =============================================================================
# Vaults
# =============================================================================

TOTALLY_NOT_A_TRAP = PrefabRoom(
    name="totally_not_a_trap",
    template=(
        ".....",
        ".^#^.",
        ".#!#.",
        ".^#^.",
        ".....",
    ),
    first_depth=0,
    last_depth=100,
)

CHECKERBOARD = PrefabRoom(
    name="checkerboard",
    template=(
        "......",
        ".g#%#.",
        ".#!#g.",
        ".g#%#.",
        ".#!#g.",
        "......",
    ),
    first_depth=0,
    last_depth=100,
)

SILENT_MONASTERY = PrefabRoom(
    name="silent_monastery",
    template=(
        ".......",
        ".#.#.#.",
        "..o.o..",
        ".#.%.#.",
        "..o.o..",
        ".#.#.#.",
        ".......",
    ),
    first_depth=4,
    last_depth=100,
)

ORC_CAMP = PrefabRoom(
    name="orc_camp",
    template=(
        ".......",
        ".#...#.",
        "...o...",
        "..o%o..",
        "...o...",
        ".#...#.",
        ".......",
    ),
    first_depth=3,
    last_depth=100,
)

VAULTS: tuple[PrefabRoom, ...] = (
    TOTALLY_NOT_A_TRAP,
    CHECKERBOARD,
    SILENT_MONASTERY,
    ORC_CAMP,
)
