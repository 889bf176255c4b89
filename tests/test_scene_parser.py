"""Tests for the scene description parser."""

import json

import pytest
import yaml

from glowtrace.vec3 import Vec3, Point3, Color, Quat
from glowtrace.shapes import Sphere, Triangle
from glowtrace.scene_parser import SceneParser, SceneParseError, load_scene, parse_scene


def minimal_scene(**sections) -> dict:
    data = {
        'materials': {
            'white': {'color': [1, 1, 1]},
            'lamp': {'color': [0, 0, 0], 'emission_color': [1, 1, 1], 'emission_strength': 2},
        },
        'objects': [
            {'type': 'sphere', 'center': [0, 0, 3], 'radius': 0.5, 'material': 'white'},
            {'type': 'triangle', 'vertices': [[-1, -1, 1], [-1, 1, 1], [1, -1, 1]], 'material': 'lamp'},
        ],
    }
    data.update(sections)
    return data


class TestParseDict:
    """Test parsing from dictionaries."""

    def test_objects_and_materials(self):
        scene, camera, settings = parse_scene(minimal_scene())

        assert len(scene) == 2
        sphere, triangle = scene.primitives
        assert isinstance(sphere, Sphere)
        assert sphere.center == Point3(0, 0, 3)
        assert sphere.radius == 0.5
        assert isinstance(triangle, Triangle)
        assert triangle.material.emitted_light == Color(2, 2, 2)
        # Missing normals fall back to the face normal
        assert triangle.na == Vec3(0, 0, -1)

    def test_defaults_without_camera_or_render(self):
        _, camera, settings = parse_scene(minimal_scene())
        assert camera.field_of_view == 90.0
        assert camera.position == Point3(0, 0, 0)
        assert settings.rays_per_pixel == 100
        assert settings.max_bounce_count == 10

    def test_inline_material(self):
        data = {'objects': [{'type': 'sphere', 'radius': 1, 'material': {'color': '#ff0000', 'smoothness': 0.5}}]}
        scene, _, _ = parse_scene(data)
        material = scene.primitives[0].material
        assert material.color == Color(1, 0, 0)
        assert material.smoothness == 0.5

    def test_explicit_normals_are_normalized(self):
        data = minimal_scene(objects=[{
            'type': 'triangle',
            'vertices': [[-1, -1, 1], [-1, 1, 1], [1, -1, 1]],
            'normals': [[0, 0, -2], [0, 3, -3], [0, 0, -1]],
            'material': 'white',
        }])
        scene, _, _ = parse_scene(data)
        tri = scene.primitives[0]
        assert tri.na == Vec3(0, 0, -1)
        assert tri.nb == Vec3(0, 1, -1).normalize()

    def test_camera_section(self):
        data = minimal_scene(camera={
            'fov': 60,
            'position': [0, 0, -2],
            'rotation': {'axis': [0, 1, 0], 'angle': 90},
        })
        _, camera, _ = parse_scene(data)
        assert camera.field_of_view == 60.0
        assert camera.position == Point3(0, 0, -2)
        assert camera.rotation == Quat.from_axis_angle(Vec3(0, 1, 0), 90)

    def test_quaternion_rotation_is_normalized(self):
        _, camera, _ = parse_scene(minimal_scene(camera={'rotation': [0, 0, 0, 3]}))
        assert camera.rotation == Quat.identity()

    def test_render_section(self):
        data = minimal_scene(render={
            'width': 64, 'height': 32, 'samples': 8, 'bounces': 3,
            'threads': 2, 'seed': 5, 'gamma': 2.2,
        })
        _, _, settings = parse_scene(data)
        assert (settings.width, settings.height) == (64, 32)
        assert settings.rays_per_pixel == 8
        assert settings.max_bounce_count == 3
        assert settings.num_threads == 2
        assert settings.seed == 5
        assert settings.gamma == 2.2

    def test_processes_flag_takes_booleans(self):
        _, _, settings = parse_scene(minimal_scene(render={'processes': True}))
        assert settings.use_processes is True
        _, _, settings = parse_scene(minimal_scene(render={'processes': False}))
        assert settings.use_processes is False

    def test_mapping_vectors_and_colors(self):
        data = {'objects': [{
            'type': 'sphere',
            'center': {'x': 1, 'z': '2.5'},
            'material': {'color': {'r': 0.25, 'b': 1}},
        }]}
        scene, _, _ = parse_scene(data)
        sphere = scene.primitives[0]
        assert sphere.center == Point3(1, 0, 2.5)
        assert sphere.material.color == Color(0.25, 0, 1)

    def test_null_seed_means_random(self):
        _, _, settings = parse_scene(minimal_scene(render={'seed': None}))
        assert settings.seed is None


class TestParseErrors:
    """Invalid scene descriptions raise SceneParseError."""

    @pytest.mark.parametrize("objects", [
        [{'type': 'sphere', 'radius': 1, 'material': 'missing'}],
        [{'type': 'sphere', 'radius': 1}],
        [{'type': 'sphere', 'radius': 0, 'material': 'white'}],
        [{'type': 'cube', 'material': 'white'}],
        [{'type': 'triangle', 'vertices': [[0, 0, 0], [1, 0, 0]], 'material': 'white'}],
        [{'type': 'triangle', 'vertices': [[0, 0, 0], [1, 0, 0], [2, 0, 0]], 'material': 'white'}],
        [{'type': 'triangle', 'vertices': [[0, 0, 0], [1, 0, 0], [0, 1, 0]],
          'normals': [[0, 0, 1], [0, 0, 0], [0, 0, 1]], 'material': 'white'}],
        [{'type': 'sphere', 'center': [0, 0], 'material': 'white'}],
        ['sphere'],
        [{'type': 'triangle', 'vertices': [[0, 0, 0], [1, 1, 1], [2, 2, 2]],
          'normals': [[0, 0, 1], [0, 0, 1], [0, 0, 1]], 'material': 'white'}],
        [{'type': 'sphere', 'radius': [1], 'material': 'white'}],
        [{'type': 'sphere', 'radius': None, 'material': 'white'}],
        [{'type': 'sphere', 'radius': 'big', 'material': 'white'}],
        [{'type': 'sphere', 'center': {'x': 'a'}, 'material': 'white'}],
        [{'type': 'sphere', 'material': {'color': {'r': [1], 'g': 0, 'b': 0}}}],
    ])
    def test_bad_objects(self, objects):
        with pytest.raises(SceneParseError):
            parse_scene(minimal_scene(objects=objects))

    @pytest.mark.parametrize("material", [
        {'smoothness': 1.5},
        {'specular_probability': -0.1},
        {'emission_strength': -1},
        {'emission_strength': 'bright'},
        {'color': 'red'},
        'white',
    ])
    def test_bad_materials(self, material):
        with pytest.raises(SceneParseError):
            parse_scene({'materials': {'bad': material}})

    @pytest.mark.parametrize("camera", [
        {'fov': 0},
        {'fov': 180},
        {'rotation': [0, 0, 0, 0]},
        {'rotation': {'axis': [0, 0, 0], 'angle': 10}},
        {'rotation': 'sideways'},
        {'rotation': [0, 0, 'a', 1]},
        {'rotation': {'axis': [0, 1, 0], 'angle': None}},
        {'fov': [90]},
        {'fov': None},
        {'position': {'z': 'far'}},
    ])
    def test_bad_camera(self, camera):
        with pytest.raises(SceneParseError):
            parse_scene(minimal_scene(camera=camera))

    @pytest.mark.parametrize("render", [
        {'width': 0},
        {'samples': 'many'},
        {'bounces': -1},
        {'resolution': 10},
        {'processes': 'false'},
        {'processes': 1},
    ])
    def test_bad_render(self, render):
        with pytest.raises(SceneParseError):
            parse_scene(minimal_scene(render=render))


class TestParseFile:
    """Test loading scene files from disk."""

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "scene.yaml"
        path.write_text(yaml.safe_dump(minimal_scene(render={'width': 16, 'height': 16})))

        scene, _, settings = load_scene(str(path))
        assert scene.summary() == "1 spheres, 1 triangles"
        assert settings.width == 16

    def test_json_file(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(minimal_scene()))

        scene, _, _ = SceneParser().parse_file(str(path))
        assert len(scene) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(SceneParseError):
            load_scene(str(tmp_path / "nope.yaml"))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("objects: [unclosed\n")
        with pytest.raises(SceneParseError):
            load_scene(str(path))

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SceneParseError):
            load_scene(str(path))

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(SceneParseError):
            load_scene(str(path))
