"""
Camera module for generating primary rays.

A pinhole camera looking down its local +Z axis, with +Y up and +X right.
The view plane sits at distance 1 in camera space.
"""

from __future__ import annotations
import math
from .vec3 import Vec3, Point3, Quat
from .ray import Ray


class Camera:
    """A perspective camera placed by a position and an orientation."""

    __slots__ = ('field_of_view', 'position', 'rotation')

    def __init__(self, field_of_view: float = 90.0, position: Point3 = None, rotation: Quat = None):
        """Create a camera.

        Args:
            field_of_view: Vertical field of view in degrees
            position: Camera position in world space (default: origin)
            rotation: Orientation (default: identity, looking along +Z)
        """
        self.field_of_view = field_of_view
        self.position = position if position is not None else Point3(0, 0, 0)
        self.rotation = rotation if rotation is not None else Quat.identity()

    def local_to_world(self, point: Point3) -> Point3:
        """Transform a camera-space point into world space."""
        return self.rotation.rotate(point) + self.position

    def world_to_local(self, point: Point3) -> Point3:
        """Transform a world-space point into camera space."""
        return self.rotation.inverse().rotate(point - self.position)

    def view_plane_size(self, width: int, height: int) -> tuple[float, float]:
        """Width and height of the view plane at distance 1."""
        aspect = width / height
        plane_height = math.tan(math.radians(self.field_of_view) / 2.0) * 2.0
        return plane_height * aspect, plane_height

    def get_ray(self, x: float, y: float, width: int, height: int) -> Ray:
        """Generate the ray through a (possibly fractional) pixel coordinate.

        Args:
            x: Horizontal pixel coordinate, 0 at the left edge
            y: Vertical pixel coordinate, 0 at the bottom edge
            width: Image width in pixels
            height: Image height in pixels

        Returns:
            A ray from the camera position with a unit direction
        """
        u = x / width - 0.5
        v = y / height - 0.5
        plane_width, plane_height = self.view_plane_size(width, height)

        target = self.local_to_world(Vec3(u * plane_width, v * plane_height, 1.0))
        return Ray(self.position, (target - self.position).normalize())

    def __repr__(self) -> str:
        return f"Camera(fov={self.field_of_view}, position={self.position}, rotation={self.rotation})"
