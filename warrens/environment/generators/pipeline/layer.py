"""Abstract base classes for generation layers.

Each layer in the pipeline implements the GenerationLayer interface and
transforms the GenerationContext in some way: carving floor, adding rooms and
corridors, pruning unreachable cells, placing the start and exit, or queueing
spawns.

Layers come in two roles. An InitialMapLayer assumes a blank (all-wall) map
and lays down the base layout; a pipeline has exactly one. A MetaMapLayer
refines whatever earlier layers built. A class may inherit both roles when its
algorithm works either way.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from warrens.util.rng import RNG

    from .context import GenerationContext


class GenerationLayer(ABC):
    """Abstract base class for level generation layers.

    Layers are applied sequentially by the PipelineGenerator. Each layer
    receives the pipeline's RNG stream and the GenerationContext and modifies
    the context in place. Layers keep no state between calls beyond their
    construction-time configuration.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def apply(self, rng: RNG, ctx: GenerationContext) -> None:
        """Apply this layer's generation logic to the context.

        Args:
            rng: The stream every random decision must come from.
            ctx: The generation context to modify.

        Raises:
            MissingPreconditionError: If the context lacks something this
                layer needs (rooms, corridors, a starting position, floor).
        """
        raise NotImplementedError


class InitialMapLayer(GenerationLayer):
    """A layer that builds the first layout on a blank map."""


class MetaMapLayer(GenerationLayer):
    """A layer that refines a partially built context."""
