from __future__ import annotations

from collections.abc import Iterator

import pytest

from warrens import config
from warrens.util.rng import RNG, RNGProvider


@pytest.fixture(autouse=True)
def restore_visualizer_flag() -> Iterator[None]:
    """Put the snapshot flag back after tests that switch it on."""
    saved = config.SHOW_MAPGEN_VISUALIZER
    yield
    config.SHOW_MAPGEN_VISUALIZER = saved


@pytest.fixture
def rng() -> RNG:
    """A seeded stream, fresh for every test."""
    return RNGProvider(master_seed=1234).get("test.mapgen")
