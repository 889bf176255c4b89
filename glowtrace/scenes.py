"""
Built-in scenes.
"""

from __future__ import annotations

from .camera import Camera
from .materials import Material, diffuse, emissive
from .scene import Scene
from .shapes import Sphere, Triangle
from .vec3 import Vec3, Point3, Color, Quat

WHITE = Color(1, 1, 1)
RED = Color(1, 0, 0)
GREEN = Color(0, 1, 0)
BLUE = Color(0, 0, 1)


def _quad(p0: Point3, p1: Point3, p2: Point3, p3: Point3, normal: Vec3, material: Material) -> list[Triangle]:
    """Two triangles (p0, p1, p2) and (p3, p2, p1) sharing a flat normal."""
    return [
        Triangle(p0, p1, p2, material, normal, normal, normal),
        Triangle(p3, p2, p1, material, normal, normal, normal),
    ]


def cornell_box() -> Scene:
    """The 2x2x2 box centered on the origin, lit by a ceiling panel.

    Left wall red, right wall green, near wall (z = -1) blue, the rest white.
    The near wall faces into the box, so the default camera behind it looks
    straight through it. A diagonal row of six mirror-ish
    spheres goes from smoothness 0 to 1.
    """
    def p(x, y, z):
        return Point3(x, y, z)

    primitives = []
    # Far wall (z = +1), facing the camera
    primitives += _quad(p(-1, -1, 1), p(-1, 1, 1), p(1, -1, 1), p(1, 1, 1), Vec3(0, 0, -1), diffuse(WHITE))
    # Left wall (x = -1)
    primitives += _quad(p(-1, -1, -1), p(-1, 1, -1), p(-1, -1, 1), p(-1, 1, 1), Vec3(1, 0, 0), diffuse(RED))
    # Right wall (x = +1)
    primitives += _quad(p(1, -1, 1), p(1, 1, 1), p(1, -1, -1), p(1, 1, -1), Vec3(-1, 0, 0), diffuse(GREEN))
    # Near wall (z = -1)
    primitives += _quad(p(1, -1, -1), p(1, 1, -1), p(-1, -1, -1), p(-1, 1, -1), Vec3(0, 0, 1), diffuse(BLUE))
    # Floor (y = -1)
    primitives += _quad(p(-1, -1, -1), p(-1, -1, 1), p(1, -1, -1), p(1, -1, 1), Vec3(0, 1, 0), diffuse(WHITE))
    # Ceiling (y = +1)
    primitives += _quad(p(-1, 1, 1), p(-1, 1, -1), p(1, 1, 1), p(1, 1, -1), Vec3(0, -1, 0), diffuse(WHITE))
    # Ceiling light, just below the ceiling. The second half also bounces
    # light back down through its white specular lobe.
    down = Vec3(0, -1, 0)
    primitives.append(Triangle(
        p(-0.5, 0.99, 0.5), p(-0.5, 0.99, -0.5), p(0.5, 0.99, 0.5),
        emissive(WHITE, 1.0), down, down, down,
    ))
    primitives.append(Triangle(
        p(0.5, 0.99, -0.5), p(0.5, 0.99, 0.5), p(-0.5, 0.99, -0.5),
        Material(color=Color.zero(), emission_color=WHITE, emission_strength=1.0, specular_probability=1.0),
        down, down, down,
    ))

    for i in range(6):
        offset = -0.75 + 0.3 * i
        primitives.append(Sphere(
            p(offset, offset, 0.0), 0.15,
            Material(color=WHITE, smoothness=i / 5, specular_probability=1.0),
        ))

    return Scene(primitives)


def cornell_box_camera() -> Camera:
    """Camera one unit behind the near wall, looking at the far wall."""
    return Camera(field_of_view=90.0, position=Point3(0, 0, -2), rotation=Quat.identity())


def single_emitter() -> Scene:
    """One unit emissive triangle facing the origin at z = 1."""
    return Scene([
        Triangle(Point3(-1, -1, 1), Point3(-1, 1, 1), Point3(1, -1, 1), emissive(WHITE, 1.0)),
    ])


SCENES = {
    'cornell': (cornell_box, cornell_box_camera),
    'emitter': (single_emitter, Camera),
}
