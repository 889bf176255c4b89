"""Tests for Scene nearest-hit queries."""

import pytest

from glowtrace.vec3 import Vec3, Point3, Color
from glowtrace.ray import Ray
from glowtrace.materials import diffuse
from glowtrace.scene import Scene
from glowtrace.shapes import Sphere, Triangle

RED = diffuse(Color(1, 0, 0))
BLUE = diffuse(Color(0, 0, 1))


def square_at(z: float, material) -> list:
    """Two triangles covering [-1, 1]^2 at depth z, facing -Z."""
    return [
        Triangle(Point3(-1, -1, z), Point3(-1, 1, z), Point3(1, -1, z), material),
        Triangle(Point3(1, 1, z), Point3(1, -1, z), Point3(-1, 1, z), material),
    ]


class TestSceneIntersect:
    """Test closest-hit selection."""

    def test_empty_scene_misses(self):
        assert Scene().intersect(Ray(Point3(0, 0, 0), Vec3(0, 0, 1))) is None

    @pytest.mark.parametrize("order", [(0, 1), (1, 0)])
    def test_nearest_of_two_spheres(self, order):
        near = Sphere(Point3(0, 0, 3), 1.0, RED)   # hit at distance 2
        far = Sphere(Point3(0, 0, 6), 1.0, BLUE)   # hit at distance 5
        primitives = [near, far]
        scene = Scene(primitives[i] for i in order)

        hit = scene.intersect(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))
        assert hit is not None
        assert abs(hit.distance - 2.0) < 1e-12
        assert hit.material is RED

    def test_nearest_across_primitive_kinds(self):
        scene = Scene(square_at(5.0, BLUE) + [Sphere(Point3(0, 0, 3), 1.0, RED)])
        hit = scene.intersect(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))
        assert abs(hit.distance - 2.0) < 1e-12

        scene = Scene(square_at(2.0, BLUE) + [Sphere(Point3(0, 0, 6), 1.0, RED)])
        hit = scene.intersect(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))
        assert abs(hit.distance - 2.0) < 1e-12
        assert hit.material is BLUE

    def test_first_wins_ties(self):
        a = Sphere(Point3(0, 0, 3), 1.0, RED)
        b = Sphere(Point3(0, 0, 3), 1.0, BLUE)
        hit = Scene([a, b]).intersect(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))
        assert hit.material is RED

    def test_skips_primitives_behind(self):
        scene = Scene([Sphere(Point3(0, 0, -3), 1.0, RED), Sphere(Point3(0, 0, 10), 1.0, BLUE)])
        hit = scene.intersect(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))
        assert hit.material is BLUE


class TestSceneContainer:
    """Test container behaviour."""

    def test_len_and_iter(self):
        prims = square_at(1.0, RED)
        scene = Scene(prims)
        assert len(scene) == 2
        assert list(scene) == prims

    def test_add_returns_new_scene(self):
        scene = Scene()
        bigger = scene.add(Sphere(Point3(0, 0, 0), 1.0, RED))
        assert len(scene) == 0
        assert len(bigger) == 1

    def test_summary(self):
        scene = Scene(square_at(1.0, RED) + [Sphere(Point3(0, 0, 0), 1.0, RED)])
        assert scene.summary() == "1 spheres, 2 triangles"
