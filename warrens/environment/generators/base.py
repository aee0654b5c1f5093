"""Base classes and error types for level generation."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from warrens.environment.map import GameMap
    from warrens.types import SpawnEntry, TileCoord, TileIndex, WorldTilePos
    from warrens.util.coordinates import Rect
    from warrens.util.rng import RNG


class GenerationError(Exception):
    """Base class for every failure raised while building a level."""


class PipelineError(GenerationError):
    """The pipeline was assembled or driven incorrectly.

    Raised when a pipeline runs without an initial layer, receives a second
    initial layer, or is asked to run a second time.
    """


class MissingPreconditionError(GenerationError):
    """A layer needs something an earlier layer was supposed to provide.

    The pipeline fills in `layer_name` and `layer_index` before re-raising,
    so the message identifies both the failing layer and what it lacked.

    Attributes:
        requirement: Short description of the missing input, e.g. "rooms".
        layer_name: Class name of the layer that failed, if known.
        layer_index: Position of that layer in the pipeline (0 = initial).
    """

    def __init__(self, requirement: str) -> None:
        super().__init__(requirement)
        self.requirement = requirement
        self.layer_name: str | None = None
        self.layer_index: int | None = None

    def __str__(self) -> str:
        if self.layer_name is None:
            return f"missing precondition: {self.requirement}"
        return (
            f"{self.layer_name} (layer {self.layer_index}) "
            f"missing precondition: {self.requirement}"
        )


@dataclass
class GeneratedMapData:
    """A container for everything a finished pipeline run produced.

    Attributes:
        game_map: The final level grid.
        starting_position: Where the player enters the level.
        exit_position: The down-stairs cell, or None if no exit was placed.
        spawn_list: Pending (cell index, entity name) placements.
        history: Snapshots recorded while the visualizer flag was on.
        rooms: Rooms produced by room layers, if any.
        corridors: Cell indices carved by corridor layers, if any.
    """

    game_map: GameMap
    starting_position: WorldTilePos | None
    exit_position: WorldTilePos | None
    spawn_list: list[SpawnEntry] = field(default_factory=list)
    history: list[GameMap] = field(default_factory=list)
    rooms: list[Rect] | None = None
    corridors: list[list[TileIndex]] | None = None


class BaseMapGenerator(abc.ABC):
    """Abstract base class for map generation algorithms."""

    def __init__(self, map_width: TileCoord, map_height: TileCoord) -> None:
        self.map_width = map_width
        self.map_height = map_height

    @abc.abstractmethod
    def generate(self, rng: RNG) -> GeneratedMapData:
        """Generate the map layout and its structural data."""
        raise NotImplementedError
