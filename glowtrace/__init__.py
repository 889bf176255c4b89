"""
glowtrace - A Python Path Tracer

Renders static scenes of spheres and triangles with:
- Monte Carlo path tracing (diffuse/specular mixing, emissive surfaces)
- Sky and ground background lighting
- Jittered anti-aliasing
- Tile-parallel rendering on threads or processes
- Reproducible seeded renders
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color, Quat
from .ray import Ray
from .sampling import RandomSource
from .materials import Material, diffuse, emissive, glossy
from .shapes import HitInfo, Hittable, Sphere, Triangle, Primitive, intersect
from .scene import Scene
from .camera import Camera
from .integrator import Integrator, MAX_BOUNCE_COUNT, background, trace
from .renderer import Renderer, RenderSettings, get_platform_info
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
from .scenes import SCENES, cornell_box, cornell_box_camera, single_emitter
