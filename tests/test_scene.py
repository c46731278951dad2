import pytest

from prismtrace.model import Model
from prismtrace.scene import Scene, load_scene, parse_scene
from prismtrace.vectors import Light, Material, Sphere, Vector3, Vector3i, Vector4

SCRIPT = [
    "h 480",
    "w 640",
    "r 3",
    "aa 0",
    "bg 0.2 0.7 0.8",
    "mt ivory 0.4 0.4 0.3 0.6 0.3 0.1 0.0 50 1.0",
    "mt glass 0.6 0.7 0.8 0.0 0.5 0.1 0.8 125 1.5",
    "l -20 20 20 1.5",
    "l 30 50 -25 1.8",
    "sp -3 0 -16 2 ivory",
    "sp -1 -1.5 -12 2 glass",
]

IVORY = Material(Vector3(0.4, 0.4, 0.3), Vector4(0.6, 0.3, 0.1, 0.0), 50.0, 1.0)
GLASS = Material(Vector3(0.6, 0.7, 0.8), Vector4(0.0, 0.5, 0.1, 0.8), 125.0, 1.5)


def test_default_scene_settings():
    scene = Scene()
    assert scene.height == 1280
    assert scene.width == 720
    assert scene.path_depth == 5
    assert scene.anti_alias == 1
    assert scene.background_color == Vector3(1.0, 1.0, 1.0)
    assert scene.lights == [] and scene.spheres == [] and scene.meshes == []


def test_settings_are_read():
    scene = parse_scene(SCRIPT)
    assert scene.height == 480
    assert scene.width == 640
    assert scene.path_depth == 3
    assert scene.anti_alias == 0
    assert scene.background_color == Vector3(0.2, 0.7, 0.8)


def test_lights_are_read_in_order():
    scene = parse_scene(SCRIPT)
    assert scene.lights == [
        Light(Vector3(-20.0, 20.0, 20.0), 1.5),
        Light(Vector3(30.0, 50.0, -25.0), 1.8),
    ]


def test_spheres_use_named_materials():
    scene = parse_scene(SCRIPT)
    assert scene.spheres == [
        Sphere(Vector3(-3.0, 0.0, -16.0), 2.0, IVORY),
        Sphere(Vector3(-1.0, -1.5, -12.0), 2.0, GLASS),
    ]


def test_later_material_definition_replaces_earlier():
    scene = parse_scene(
        [
            "mt m 1 1 1 1 0 0 0 1 1",
            "mt m 0 0 0 0 1 0 0 2 1",
            "sp 0 0 -5 1 m",
        ]
    )
    assert scene.spheres[0].material.specular_exponent == 2.0


def test_unknown_material_raises():
    with pytest.raises(ValueError, match="unknown material"):
        parse_scene(["sp 0 0 -5 1 missing"])


@pytest.mark.parametrize(
    "line",
    ["h -5", "w abc", "r 1.5", "aa", "bg 1 2", "l 1 2 3", "mt m 1 2 3", "h 1_0"],
)
def test_malformed_lines_raise(line):
    with pytest.raises(ValueError):
        parse_scene([line])


def test_unrecognised_lines_are_ignored():
    scene = parse_scene(["# comment", "hx 10", "", "x 1 2 3", " h 10"])
    assert scene == Scene()


def test_windows_line_endings_are_accepted():
    scene = parse_scene(["h 48\r\n", "w 64\r\n"])
    assert (scene.height, scene.width) == (48, 64)


def test_mesh_is_loaded_with_offset_and_material(tmp_path):
    obj = tmp_path / "tri.obj"
    obj.write_text("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n", encoding="utf-8")
    scene = parse_scene(
        ["mt red 0.3 0.1 0.1 0.9 0.1 0.0 0.0 10 1.0", f"ms {obj} 1 2 -10 red"]
    )
    assert len(scene.meshes) == 1
    mesh = scene.meshes[0]
    assert mesh.transform == Vector3(1.0, 2.0, -10.0)
    assert mesh.material.diffuse_color == Vector3(0.3, 0.1, 0.1)
    assert mesh.faces == (Vector3i(0, 1, 2),)


def test_mesh_with_missing_file_is_empty(tmp_path):
    missing = tmp_path / "absent.obj"
    scene = parse_scene(["mt m 1 1 1 1 0 0 0 1 1", f"ms {missing} 0 0 0 m"])
    assert scene.meshes == [
        Model(Vector3(0.0, 0.0, 0.0), Material(Vector3(1.0, 1.0, 1.0), Vector4(1.0, 0.0, 0.0, 0.0), 1.0, 1.0))
    ]


def test_load_scene_round_trips_script(tmp_path):
    path = tmp_path / "scene.rt"
    path.write_text("\n".join(SCRIPT) + "\n", encoding="utf-8")
    assert load_scene(path) == parse_scene(SCRIPT)


def test_load_scene_missing_file_gives_defaults(tmp_path):
    assert load_scene(tmp_path / "nothing.rt") == Scene()


def test_load_scene_stops_at_undecodable_line(tmp_path):
    path = tmp_path / "scene.rt"
    path.write_bytes(b"h 10\n\xff\xfe\nw 20\n")
    scene = load_scene(str(path))
    assert scene.height == 10
    assert scene.width == Scene().width