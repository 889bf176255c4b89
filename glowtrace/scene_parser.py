"""
Scene description parser.

Reads YAML or JSON scene files with:
- Camera configuration
- Render settings
- Materials library
- Objects (spheres and triangles with materials)

Example scene file:
```yaml
camera:
  fov: 90
  position: [0, 0, -2]
  rotation:
    axis: [0, 1, 0]
    angle: 0

render:
  width: 400
  height: 400
  samples: 100
  bounces: 10
  seed: 7

materials:
  white:
    color: [1, 1, 1]
  lamp:
    color: [0, 0, 0]
    emission_color: [1, 1, 1]
    emission_strength: 1
  mirror:
    color: [1, 1, 1]
    smoothness: 1
    specular_probability: 1

objects:
  - type: sphere
    center: [0, 0, 0]
    radius: 0.5
    material: mirror

  - type: triangle
    vertices: [[-1, -1, 1], [-1, 1, 1], [1, -1, 1]]
    normals: [[0, 0, -1], [0, 0, -1], [0, 0, -1]]
    material: lamp
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, Optional, Tuple
import json
import logging

import yaml

from .vec3 import Vec3, Color, Quat
from .camera import Camera
from .materials import Material
from .scene import Scene
from .shapes import Primitive, Sphere, Triangle
from .renderer import RenderSettings

logger = logging.getLogger(__name__)


def _strict_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"expected true or false, got {value!r}")
    return value


# Scene file keys for the `render` section, mapped onto RenderSettings fields
_SETTINGS_KEYS = {
    'width': ('width', int),
    'height': ('height', int),
    'samples': ('rays_per_pixel', int),
    'bounces': ('max_bounce_count', int),
    'tile_size': ('tile_size', int),
    'threads': ('num_threads', int),
    'processes': ('use_processes', _strict_bool),
    'seed': ('seed', int),
    'gamma': ('gamma', float),
}


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.primitives: list[Primitive] = []
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: str) -> Tuple[Scene, Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (.yaml, .yml or .json)

        Returns:
            Tuple of (scene, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping: {filepath}")

        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        if 'objects' in data:
            self._parse_objects(data['objects'])

        if 'camera' in data:
            self._parse_camera(data['camera'])
        else:
            self.camera = Camera()

        if 'render' in data:
            self._parse_settings(data['render'])
        else:
            self.settings = RenderSettings()

        scene = Scene(self.primitives)
        logger.debug("Parsed scene: %s, %d materials", scene.summary(), len(self.materials))
        return scene, self.camera, self.settings

    def _parse_float(self, data: Dict[str, Any], key: str, default: float) -> float:
        """Read a numeric field, reporting bad values as SceneParseError."""
        value = data.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"{key} must be a number, got {value!r}") from e

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an {x, y, z} mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            try:
                return Vec3(float(data[0]), float(data[1]), float(data[2]))
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Cannot parse Vec3 from: {data}") from e
        elif isinstance(data, dict):
            return Vec3(
                self._parse_float(data, 'x', 0.0),
                self._parse_float(data, 'y', 0.0),
                self._parse_float(data, 'z', 0.0)
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, an {r, g, b} mapping or a hex string."""
        if isinstance(data, dict):
            return Color(
                self._parse_float(data, 'r', 0.0),
                self._parse_float(data, 'g', 0.0),
                self._parse_float(data, 'b', 0.0)
            )
        elif isinstance(data, str):
            hex_color = data[1:] if data.startswith('#') else ''
            if len(hex_color) == 6:
                try:
                    return Color(
                        int(hex_color[0:2], 16) / 255.0,
                        int(hex_color[2:4], 16) / 255.0,
                        int(hex_color[4:6], 16) / 255.0
                    )
                except ValueError:
                    pass
            raise SceneParseError(f"Cannot parse color from string: {data}")
        return self._parse_vec3(data)

    def _parse_unit_interval(self, data: Dict[str, Any], key: str) -> float:
        value = self._parse_float(data, key, 0.0)
        if not 0.0 <= value <= 1.0:
            raise SceneParseError(f"{key} must be in [0, 1], got {value}")
        return value

    def _parse_material(self, mat_data: Dict[str, Any]) -> Material:
        if not isinstance(mat_data, dict):
            raise SceneParseError(f"Material must be a mapping, got: {mat_data}")

        emission_strength = self._parse_float(mat_data, 'emission_strength', 0.0)
        if emission_strength < 0:
            raise SceneParseError(f"emission_strength must be >= 0, got {emission_strength}")

        return Material(
            color=self._parse_color(mat_data.get('color', [1, 1, 1])),
            emission_color=self._parse_color(mat_data.get('emission_color', [0, 0, 0])),
            emission_strength=emission_strength,
            smoothness=self._parse_unit_interval(mat_data, 'smoothness'),
            specular_probability=self._parse_unit_interval(mat_data, 'specular_probability'),
            specular_color=self._parse_color(mat_data.get('specular_color', [1, 1, 1])),
        )

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        if not isinstance(materials_data, dict):
            raise SceneParseError("materials must be a mapping of name to material")
        for name, mat_data in materials_data.items():
            self.materials[name] = self._parse_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Material:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            raise SceneParseError("Object has no material")
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_triangle(self, obj_data: Dict[str, Any], material: Material) -> Triangle:
        vertices = obj_data.get('vertices')
        if not isinstance(vertices, list) or len(vertices) != 3:
            raise SceneParseError("Triangle needs exactly 3 vertices")
        a, b, c = (self._parse_vec3(v) for v in vertices)

        vertex_normals = ()
        normals = obj_data.get('normals')
        if normals is not None:
            if not isinstance(normals, list) or len(normals) != 3:
                raise SceneParseError("Triangle normals must list exactly 3 vectors")
            parsed = [self._parse_vec3(n) for n in normals]
            if any(n.is_zero() for n in parsed):
                raise SceneParseError("Triangle vertex normal cannot be zero")
            vertex_normals = tuple(n.normalize() for n in parsed)

        triangle = Triangle(a, b, c, material, *vertex_normals)
        if triangle.area() == 0:
            raise SceneParseError(f"Degenerate triangle: {vertices}")
        return triangle

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        if not isinstance(objects_data, list):
            raise SceneParseError("objects must be a list")
        for obj_data in objects_data:
            if not isinstance(obj_data, dict):
                raise SceneParseError(f"Object must be a mapping, got: {obj_data}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            material = self._get_material(obj_data.get('material'))

            if obj_type == 'sphere':
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                radius = self._parse_float(obj_data, 'radius', 1.0)
                if radius <= 0:
                    raise SceneParseError(f"Sphere radius must be positive, got {radius}")
                self.primitives.append(Sphere(center, radius, material))

            elif obj_type == 'triangle':
                self.primitives.append(self._parse_triangle(obj_data, material))

            else:
                raise SceneParseError(f"Unknown object type: {obj_type}")

    def _parse_rotation(self, data: Any) -> Quat:
        """Parse a quaternion [x, y, z, w] or an {axis, angle} mapping (degrees)."""
        if isinstance(data, (list, tuple)) and len(data) == 4:
            try:
                q = Quat(*(float(c) for c in data))
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Cannot parse rotation from: {data}") from e
            if q.length() == 0:
                raise SceneParseError("Rotation quaternion cannot be zero")
            return q.normalize()
        if isinstance(data, dict):
            axis = self._parse_vec3(data.get('axis', [0, 1, 0]))
            if axis.is_zero():
                raise SceneParseError("Rotation axis cannot be zero")
            return Quat.from_axis_angle(axis, self._parse_float(data, 'angle', 0.0))
        raise SceneParseError(f"Cannot parse rotation from: {data}")

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        if not isinstance(camera_data, dict):
            raise SceneParseError(f"camera must be a mapping, got: {camera_data}")
        fov = self._parse_float(camera_data, 'fov', 90.0)
        if not 0.0 < fov < 180.0:
            raise SceneParseError(f"Camera fov must be in (0, 180), got {fov}")

        rotation = Quat.identity()
        if 'rotation' in camera_data:
            rotation = self._parse_rotation(camera_data['rotation'])

        self.camera = Camera(
            field_of_view=fov,
            position=self._parse_vec3(camera_data.get('position', [0, 0, 0])),
            rotation=rotation,
        )

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        kwargs = {}
        for key, value in settings_data.items():
            if key not in _SETTINGS_KEYS:
                raise SceneParseError(f"Unknown render setting: {key}")
            field_name, convert = _SETTINGS_KEYS[key]
            try:
                kwargs[field_name] = None if value is None else convert(value)
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Invalid value for {key}: {value!r}") from e

        try:
            self.settings = RenderSettings(**kwargs)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath: str) -> Tuple[Scene, Camera, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings]:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_dict(data)
