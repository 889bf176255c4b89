"""
Geometric primitives for the path tracer.

The primitive set is closed: spheres and triangles. Both implement
`intersect(ray) -> Optional[HitInfo]`; the module-level `intersect`
dispatches over them.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union
import math

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray
from .materials import Material

# Triangles whose determinant falls below this are back-facing or grazing.
# Single-precision machine epsilon, the tolerance the renderer was tuned with.
TRIANGLE_EPSILON = float(np.finfo(np.float32).eps)


@dataclass(frozen=True)
class HitInfo:
    """Result of a successful ray-primitive intersection.

    Attributes:
        distance: Ray parameter at the hit (>= 0)
        position: The intersection point in world space
        normal: Unit surface normal (outward for spheres, interpolated for triangles)
        material: Material of the primitive that was hit
    """
    distance: float
    position: Point3
    normal: Vec3
    material: Material


class Hittable(ABC):
    """Base class of the two primitive kinds."""

    __slots__ = ()

    material: Material

    @abstractmethod
    def intersect(self, ray: Ray) -> Optional[HitInfo]:
        """Test if ray intersects this primitive.

        Args:
            ray: The ray to test; its direction must be unit length

        Returns:
            HitInfo if intersection found, None otherwise
        """


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    __slots__ = ('center', 'radius', 'material')

    def __init__(self, center: Point3, radius: float, material: Material):
        self.center = center
        self.radius = radius
        self.material = material

    def intersect(self, ray: Ray) -> Optional[HitInfo]:
        """Test ray-sphere intersection using the quadratic formula.

        With the origin moved into the sphere's frame, |O + tD|^2 = r^2
        gives t^2 + bt + c = 0 for a unit-length D. Only the near root is
        considered, so a ray starting inside the sphere never hits it.
        """
        oc = ray.origin - self.center
        a = 1.0
        b = 2.0 * oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius
        discriminant = b * b - 4.0 * a * c

        if discriminant < 0:
            return None

        distance = (-b - math.sqrt(discriminant)) / (2.0 * a)
        if distance < 0:
            return None

        position = ray.at(distance)
        return HitInfo(
            distance=distance,
            position=position,
            normal=(position - self.center).normalize(),
            material=self.material,
        )

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class Triangle(Hittable):
    """A single-sided triangle with per-vertex normals for smooth shading.

    The front face is the side the face normal (b - a) x (c - a) points to;
    rays arriving from behind are culled.
    """

    __slots__ = ('a', 'b', 'c', 'na', 'nb', 'nc', 'material', 'edge_ab', 'edge_ac', 'face_normal')

    def __init__(
        self,
        a: Point3, b: Point3, c: Point3,
        material: Material,
        na: Optional[Vec3] = None, nb: Optional[Vec3] = None, nc: Optional[Vec3] = None,
    ):
        """Create a triangle.

        Args:
            a, b, c: Vertex positions
            material: Material for shading
            na, nb, nc: Vertex normals (default: the normalized face normal)
        """
        self.a = a
        self.b = b
        self.c = c
        self.material = material

        # Pre-compute edges and the (unnormalized) face normal
        self.edge_ab = b - a
        self.edge_ac = c - a
        self.face_normal = self.edge_ab.cross(self.edge_ac)

        flat = self.face_normal.normalize()
        self.na = na if na is not None else flat
        self.nb = nb if nb is not None else flat
        self.nc = nc if nc is not None else flat

    def intersect(self, ray: Ray) -> Optional[HitInfo]:
        """Test ray-triangle intersection (Moller-Trumbore form).

        Barycentric weights u, v, w = 1 - u - v belong to vertices b, c
        and a respectively.
        """
        determinant = -ray.direction.dot(self.face_normal)
        if determinant < TRIANGLE_EPSILON:
            return None

        inverse_determinant = 1.0 / determinant
        ao = ray.origin - self.a
        dao = ao.cross(ray.direction)

        distance = ao.dot(self.face_normal) * inverse_determinant
        u = self.edge_ac.dot(dao) * inverse_determinant
        v = -self.edge_ab.dot(dao) * inverse_determinant
        w = 1.0 - u - v

        if distance < 0 or u < 0 or v < 0 or w < 0:
            return None

        return HitInfo(
            distance=distance,
            position=ray.at(distance),
            normal=(self.na * w + self.nb * u + self.nc * v).normalize(),
            material=self.material,
        )

    def barycentric(self, point: Point3) -> tuple[float, float, float]:
        """Barycentric weights (u, v, w) of a point in the triangle's plane."""
        ap = point - self.a
        d00 = self.edge_ab.dot(self.edge_ab)
        d01 = self.edge_ab.dot(self.edge_ac)
        d11 = self.edge_ac.dot(self.edge_ac)
        d20 = ap.dot(self.edge_ab)
        d21 = ap.dot(self.edge_ac)
        denom = d00 * d11 - d01 * d01
        u = (d11 * d20 - d01 * d21) / denom
        v = (d00 * d21 - d01 * d20) / denom
        return u, v, 1.0 - u - v

    def area(self) -> float:
        return 0.5 * self.face_normal.length()

    def __repr__(self) -> str:
        return f"Triangle(a={self.a}, b={self.b}, c={self.c})"


Primitive = Union[Sphere, Triangle]


def intersect(primitive: Primitive, ray: Ray) -> Optional[HitInfo]:
    """Intersect any primitive with a ray."""
    if isinstance(primitive, (Sphere, Triangle)):
        return primitive.intersect(ray)
    raise TypeError(f"Not a primitive: {type(primitive).__name__}")
