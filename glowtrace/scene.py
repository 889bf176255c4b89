"""
Scene container with nearest-hit queries.
"""

from __future__ import annotations
from typing import Iterable, Iterator, Optional

from .ray import Ray
from .shapes import HitInfo, Primitive, Sphere, Triangle


class Scene:
    """An immutable, ordered collection of primitives."""

    __slots__ = ('_primitives',)

    def __init__(self, primitives: Iterable[Primitive] = ()):
        self._primitives: tuple[Primitive, ...] = tuple(primitives)

    @property
    def primitives(self) -> tuple[Primitive, ...]:
        return self._primitives

    def add(self, *primitives: Primitive) -> Scene:
        """Return a new scene with extra primitives appended."""
        return Scene(self._primitives + primitives)

    def intersect(self, ray: Ray) -> Optional[HitInfo]:
        """Find the closest intersection among all primitives.

        Every primitive is tested; on equal distances the earlier one wins.
        """
        closest_hit: Optional[HitInfo] = None

        for primitive in self._primitives:
            hit = primitive.intersect(ray)
            if hit is not None and (closest_hit is None or hit.distance < closest_hit.distance):
                closest_hit = hit

        return closest_hit

    def count(self, kind: type) -> int:
        """Number of primitives of the given class."""
        return sum(1 for p in self._primitives if isinstance(p, kind))

    def summary(self) -> str:
        return f"{self.count(Sphere)} spheres, {self.count(Triangle)} triangles"

    def __len__(self) -> int:
        return len(self._primitives)

    def __iter__(self) -> Iterator[Primitive]:
        return iter(self._primitives)

    def __repr__(self) -> str:
        return f"Scene({self.summary()})"
