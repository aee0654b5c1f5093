"""Level generation for warrens.

Levels are built by a PipelineGenerator: one initial layer carves a base
layout and meta layers refine it (culling, start and exit placement,
spawns, doors, vaults). `random_builder` composes a random pipeline per
level and `generate_level` runs one with retries.

Also here:
- GenerationError and its subclasses, raised by pipelines and layers
- A chunk-based WFC solver used by WaveformCollapseLayer
- Prefab templates (whole levels, sections, vaults)
"""

from .base import (
    BaseMapGenerator,
    GeneratedMapData,
    GenerationError,
    MissingPreconditionError,
    PipelineError,
)
from .pipeline import (
    GenerationContext,
    GenerationLayer,
    PipelineGenerator,
    generate_level,
    random_builder,
)
from .wfc_solver import ChunkSolver, WFCContradiction

__all__ = [
    "BaseMapGenerator",
    "ChunkSolver",
    "GeneratedMapData",
    "GenerationContext",
    "GenerationError",
    "GenerationLayer",
    "MissingPreconditionError",
    "PipelineError",
    "PipelineGenerator",
    "WFCContradiction",
    "generate_level",
    "random_builder",
]
