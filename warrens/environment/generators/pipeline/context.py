"""Generation context for the pipeline level generator.

The GenerationContext is a mutable container that holds all state during level
generation. Each layer in the pipeline receives the same context and modifies
it in place. This avoids copying large numpy arrays between layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from warrens import config
from warrens.environment.generators.base import (
    GeneratedMapData,
    MissingPreconditionError,
)
from warrens.environment.map import GameMap
from warrens.environment.tile_types import TileTypeID
from warrens.types import MapDepth, SpawnEntry, TileCoord, TileIndex, WorldTilePos
from warrens.util.coordinates import Rect


@dataclass
class GenerationContext:
    """Mutable state container passed through the generation pipeline.

    Attributes:
        game_map: The level grid being built. Layers that regenerate the whole
            level may replace it with a new GameMap of the same size and depth.
        starting_position: Player entry cell, set by start-placement layers.
        rooms: Rooms in the order the room layers established. None until a
            room layer runs.
        corridors: Cell indices carved per corridor. None until a corridor
            layer runs.
        spawn_list: Pending (cell index, entity name) placements.
        history: Map snapshots for step-by-step replay. Only grows while
            `config.SHOW_MAPGEN_VISUALIZER` is on.
    """

    game_map: GameMap
    starting_position: WorldTilePos | None = None
    rooms: list[Rect] | None = None
    corridors: list[list[TileIndex]] | None = None
    spawn_list: list[SpawnEntry] = field(default_factory=list)
    history: list[GameMap] = field(default_factory=list)

    @classmethod
    def create_empty(
        cls, depth: MapDepth, width: TileCoord, height: TileCoord
    ) -> GenerationContext:
        """Create a context around a blank (all-wall) map."""
        return cls(game_map=GameMap(depth, width, height))

    @property
    def width(self) -> TileCoord:
        return self.game_map.width

    @property
    def height(self) -> TileCoord:
        return self.game_map.height

    @property
    def depth(self) -> MapDepth:
        return self.game_map.depth

    @property
    def exit_position(self) -> WorldTilePos | None:
        """The first down-stairs cell in index order, if any."""
        stairs = self.game_map.indices_of(TileTypeID.DOWN_STAIRS)
        if stairs.size == 0:
            return None
        return self.game_map.idx_xy(int(stairs[0]))

    def take_snapshot(self) -> None:
        """Append a fully revealed copy of the map to the history.

        Does nothing unless the visualizer flag is on. The flag is read on
        every call so tests and tools can toggle it at runtime.
        """
        if config.SHOW_MAPGEN_VISUALIZER:
            self.history.append(self.game_map.snapshot())

    # -------------------------------------------------------------------------
    # Precondition helpers
    # -------------------------------------------------------------------------

    def require_rooms(self) -> list[Rect]:
        if not self.rooms:
            raise MissingPreconditionError("rooms")
        return self.rooms

    def require_corridors(self) -> list[list[TileIndex]]:
        if self.corridors is None:
            raise MissingPreconditionError("corridors")
        return self.corridors

    def require_starting_position(self) -> WorldTilePos:
        if self.starting_position is None:
            raise MissingPreconditionError("starting position")
        return self.starting_position

    def to_generated_map_data(self) -> GeneratedMapData:
        """Convert this context to the result bundle handed to callers."""
        return GeneratedMapData(
            game_map=self.game_map,
            starting_position=self.starting_position,
            exit_position=self.exit_position,
            spawn_list=list(self.spawn_list),
            history=self.history,
            rooms=self.rooms,
            corridors=self.corridors,
        )
