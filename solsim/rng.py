"""
Injectable random sources.

The simulation never touches the global `random` module; every draw goes
through a source held by the simulation so runs can be seeded or scripted.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence


class RandomSource:
    """Seedable random source backed by random.Random."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def random_int(self, bound: int) -> int:
        """Uniform integer in [0, bound). A bound of zero or less yields 0."""
        bound = int(bound)
        if bound <= 0:
            return 0
        return self._rng.randrange(bound)

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._rng.random()


class SequenceRandom:
    """
    Deterministic source that replays fixed sequences, for tests.

    Integer draws cycle through `ints` (each reduced modulo the bound);
    float draws cycle through `floats`.
    """

    def __init__(self, ints: Sequence[int] = (0,), floats: Sequence[float] = (0.0,)):
        self.ints = list(ints) or [0]
        self.floats = list(floats) or [0.0]
        self._int_index = 0
        self._float_index = 0

    def random_int(self, bound: int) -> int:
        bound = int(bound)
        value = self.ints[self._int_index % len(self.ints)]
        self._int_index += 1
        if bound <= 0:
            return 0
        return int(value) % bound

    def random(self) -> float:
        value = self.floats[self._float_index % len(self.floats)]
        self._float_index += 1
        return float(value)
