"""Pipeline generator that orchestrates layer-based level generation.

The PipelineGenerator runs one initial layer and then a sequence of meta
layers, each transforming a shared GenerationContext. This enables
compositional level generation where each layer focuses on one aspect of the
level and knows nothing about the others.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from warrens.environment.generators.base import (
    BaseMapGenerator,
    GeneratedMapData,
    MissingPreconditionError,
    PipelineError,
)
from warrens.types import MapDepth, TileCoord, WorldTilePos

from .context import GenerationContext
from .layer import InitialMapLayer, MetaMapLayer

if TYPE_CHECKING:
    from warrens.util.rng import RNG

    from .layer import GenerationLayer

logger = logging.getLogger(__name__)

# Called once per spawn entry with (position, entity name, depth).
type SpawnCallback = Callable[[WorldTilePos, str, MapDepth], None]


class PipelineGenerator(BaseMapGenerator):
    """Level generator that runs layers sequentially on a shared context.

    Example:
        generator = (
            PipelineGenerator(depth=1, map_width=80, map_height=43)
            .start_with(DrunkardsWalkLayer.open_area())
            .with_layer(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
            .with_layer(CullUnreachable())
            .with_layer(VoronoiSpawning())
            .with_layer(DistantExit())
        )
        map_data = generator.generate(RNGProvider(seed).get("map.builder"))

    A generator runs once. Build a new one for every level.

    Attributes:
        depth: Depth of the level being built.
        starter: The initial layer, once set.
        layers: Meta layers in the order they will run.
        build_data: The context the layers mutate.
    """

    def __init__(
        self, depth: MapDepth, map_width: TileCoord, map_height: TileCoord
    ) -> None:
        super().__init__(map_width, map_height)
        self.depth = depth
        self.starter: InitialMapLayer | None = None
        self.layers: list[MetaMapLayer] = []
        self.build_data = GenerationContext.create_empty(depth, map_width, map_height)
        self._has_run = False

    def start_with(self, layer: InitialMapLayer) -> PipelineGenerator:
        """Set the initial layer. Only one is allowed."""
        if not isinstance(layer, InitialMapLayer):
            raise TypeError(f"{type(layer).__name__} cannot start a pipeline")
        if self.starter is not None:
            raise PipelineError(
                f"Pipeline already starts with {self.starter.name}; "
                f"cannot also start with {layer.name}"
            )
        self.starter = layer
        return self

    def with_layer(self, layer: MetaMapLayer) -> PipelineGenerator:
        """Append a meta layer to the end of the chain."""
        if not isinstance(layer, MetaMapLayer):
            raise TypeError(f"{type(layer).__name__} cannot refine a map")
        self.layers.append(layer)
        return self

    @property
    def layer_names(self) -> list[str]:
        """Names of every layer in run order, initial layer first."""
        chain: list[GenerationLayer] = []
        if self.starter is not None:
            chain.append(self.starter)
        chain.extend(self.layers)
        return [layer.name for layer in chain]

    def generate(self, rng: RNG) -> GeneratedMapData:
        """Run the initial layer, then every meta layer, in order.

        Returns:
            The final map, start, exit, spawn list and history.

        Raises:
            PipelineError: If no initial layer was set or this generator
                already ran.
            MissingPreconditionError: If a layer lacked its inputs. The
                exception names the failing layer and its position.
        """
        if self._has_run:
            raise PipelineError("Pipeline has already run; build a new one")
        if self.starter is None:
            raise PipelineError("Cannot run a pipeline without an initial layer")
        self._has_run = True

        logger.debug(
            "Generating depth %d (%dx%d): %s",
            self.depth,
            self.map_width,
            self.map_height,
            " -> ".join(self.layer_names),
        )

        ctx = self.build_data
        chain: list[GenerationLayer] = [self.starter, *self.layers]
        for index, layer in enumerate(chain):
            try:
                layer.apply(rng, ctx)
            except MissingPreconditionError as exc:
                exc.layer_name = layer.name
                exc.layer_index = index
                logger.error("Level generation aborted: %s", exc)
                raise

        return ctx.to_generated_map_data()

    def spawn_entities(self, spawn: SpawnCallback) -> None:
        """Hand every queued spawn to `spawn(position, name, depth)`."""
        game_map = self.build_data.game_map
        for idx, name in self.build_data.spawn_list:
            spawn(game_map.idx_xy(idx), name, self.depth)
