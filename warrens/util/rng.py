"""Deterministic random number generation with isolated streams.

Each consumer (the level builder, a test, a benchmark) rolls on its own stream
derived from a master seed. This ensures that:

1. A level is fully determined by its seed
2. Rolls taken by one consumer never shift another consumer's sequence

Usage:
    stream = RNGProvider(config.RANDOM_SEED).get("map.builder")
    builder = random_builder(depth, stream, width, height)
    builder.generate(stream)

The generator only ever needs `roll_dice()`, the classic "roll N S-sided dice
and add them up" primitive. `weighted_choice()` builds table lookups on top of it.

Domain naming convention (hierarchical):
    - "map.builder"
    - "bench.pipeline"
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from warrens.types import RandomSeed

T = TypeVar("T")


class RNGStream:
    """Dice rolls drawn from one domain's own Random instance."""

    def __init__(self, domain: str, random: Random) -> None:
        self.domain = domain
        self._random = random

    def roll_dice(self, count: int, sides: int) -> int:
        """Roll `count` dice with `sides` faces each and return the total.

        Each die is uniform in [1, sides]. Rolling zero dice returns 0.

        Raises:
            ValueError: If sides is less than 1 while count is positive.
        """
        if count <= 0:
            return 0
        if sides < 1:
            raise ValueError(f"Cannot roll a die with {sides} sides")
        return sum(self._random.randint(1, sides) for _ in range(count))


# Type alias used by generation code: `def apply(self, rng: RNG, ...)`
type RNG = RNGStream


def weighted_choice(rng: RNG, table: Sequence[tuple[T, int]]) -> T:
    """Pick one entry from a (value, weight) table using a single dice roll.

    Entries with a weight of zero or less can never be picked. Given the same
    table and the same stream state the same value is returned, which keeps
    pipeline composition reproducible.

    Args:
        rng: The stream to roll on.
        table: Sequence of (value, weight) pairs.

    Returns:
        The selected value.

    Raises:
        ValueError: If no entry has a positive weight.
    """
    total = sum(weight for _, weight in table if weight > 0)
    if total <= 0:
        raise ValueError("Weighted table has no entry with a positive weight")

    roll = rng.roll_dice(1, total)
    for value, weight in table:
        if weight <= 0:
            continue
        if roll <= weight:
            return value
        roll -= weight

    # Unreachable: the roll never exceeds the total weight.
    raise AssertionError("weighted_choice roll exceeded table weight")


class RNGProvider:
    """Hands out one stream per domain, all derived from a master seed.

    A seed of None draws every stream from system entropy.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self.master_seed = master_seed
        self._streams: dict[str, RNGStream] = {}

    def get(self, domain: str) -> RNGStream:
        """Return the stream for `domain`, creating it on first use.

        Args:
            domain: Hierarchical name like "map.builder"
        """
        stream = self._streams.get(domain)
        if stream is None:
            if self.master_seed is None:
                random = Random()
            else:
                # crc32, not hash(): str hashes change per process
                # (PYTHONHASHSEED), which would break cross-session determinism.
                random = Random(zlib.crc32(f"{self.master_seed}:{domain}".encode()))
            stream = RNGStream(domain, random)
            self._streams[domain] = stream
        return stream
