"""
Random number streams for the path tracer.

Every render task owns its own RandomSource; nothing in the tracer touches
numpy's global random state. Streams are derived from a
numpy SeedSequence so that a seeded render gives the same image no matter
how tiles are scheduled across workers.
"""

from __future__ import annotations
from typing import Union

import numpy as np

from .vec3 import Vec3

SeedLike = Union[None, int, np.random.SeedSequence]


class RandomSource:
    """An independent stream of uniform samples."""

    __slots__ = ('_seed_seq', '_rng')

    def __init__(self, seed: SeedLike = None):
        """Create a stream.

        Args:
            seed: Integer seed, a SeedSequence, or None for fresh OS entropy
        """
        if not isinstance(seed, np.random.SeedSequence):
            seed = np.random.SeedSequence(seed)
        self._seed_seq = seed
        self._rng = np.random.default_rng(seed)

    @classmethod
    def for_task(cls, entropy: int, index: int) -> RandomSource:
        """Stream for task `index` of a job whose root entropy is `entropy`.

        The same (entropy, index) pair always yields the same stream.
        """
        return cls(np.random.SeedSequence(entropy, spawn_key=(index,)))

    @property
    def entropy(self) -> int:
        return self._seed_seq.entropy

    def spawn(self, n: int) -> list[RandomSource]:
        """Create `n` child streams independent of this one and of each other."""
        return [RandomSource(child) for child in self._seed_seq.spawn(n)]

    def uniform(self) -> float:
        """Uniform float in [0, 1)."""
        return float(self._rng.random())

    def unit_vector(self) -> Vec3:
        """Uniformly distributed direction, by rejection sampling the unit cube.

        Points outside the unit ball are rejected and the survivor is
        normalized.
        """
        while True:
            p = self._rng.uniform(-1.0, 1.0, 3)
            if float(np.dot(p, p)) <= 1.0:
                return Vec3.from_array(p).normalize()

    def __repr__(self) -> str:
        return f"RandomSource(entropy={self._seed_seq.entropy}, spawn_key={self._seed_seq.spawn_key})"
