import json
import math
import struct

import numpy as np
import pytest
from PIL import Image

from ibiscus.camera import Camera
from ibiscus.model import (
    ComponentType,
    Model,
    assemble_vertices,
    generate_instance_matrix,
    group_floats,
)
from ibiscus.transforms import quat_to_mat4, translate

POSITIONS = [0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0]
NORMALS = [0.0, 0.0, 1.0] * 3
UVS = [0.0, 0.0, 1.0, 0.0, 0.0, 1.0]

_INDEX_FORMATS = {5125: "<3I", 5123: "<3H", 5122: "<3h"}


def _write_scene(
    tmp_path,
    nodes=None,
    index_type=5123,
    index_values=(0, 1, 2),
    images=None,
    normal_accessor=None,
    position_type="VEC3",
):
    index_bytes = struct.pack(_INDEX_FORMATS[index_type], *index_values).ljust(12, b"\0")
    data = (
        index_bytes
        + struct.pack("<9f", *POSITIONS)
        + struct.pack("<9f", *NORMALS)
        + struct.pack("<6f", *UVS)
    )
    (tmp_path / "scene.bin").write_bytes(data)
    accessors = [
        {"bufferView": 0, "count": 3, "componentType": index_type, "type": "SCALAR"},
        {"bufferView": 1, "count": 3, "type": position_type},
        normal_accessor or {"bufferView": 2, "count": 3, "type": "VEC3"},
        {"bufferView": 3, "count": 3, "type": "VEC2"},
    ]
    document = {
        "buffers": [{"uri": "scene.bin"}],
        "bufferViews": [
            {"byteOffset": 0},
            {"byteOffset": 12},
            {"byteOffset": 48},
            {"byteOffset": 84},
        ],
        "accessors": accessors,
        "meshes": [
            {
                "primitives": [
                    {
                        "attributes": {"POSITION": 1, "NORMAL": 2, "TEXCOORD_0": 3},
                        "indices": 0,
                    }
                ]
            }
        ],
        "nodes": nodes if nodes is not None else [{"mesh": 0}],
    }
    if images is not None:
        document["images"] = [{"uri": uri} for uri in images]
        for uri in images:
            Image.new("RGB", (2, 2), (10, 20, 30)).save(tmp_path / uri)
    path = tmp_path / "scene.gltf"
    path.write_text(json.dumps(document))
    return str(path)


def _load(path, instances=1):
    return Model(path, (1.0, 0.0, 0.0, 0.0), (1.0, 1.0, 1.0), (0.0, 0.0, 0.0), instances)


def test_group_floats_splits_into_tuples():
    assert group_floats([1, 2, 3, 4, 5, 6], 3) == [(1.0, 2.0, 3.0), (4.0, 5.0, 6.0)]
    assert group_floats([1, 2, 3, 4], 2) == [(1.0, 2.0), (3.0, 4.0)]
    assert group_floats([], 4) == []


def test_group_floats_rejects_incomplete_group():
    with pytest.raises(ValueError):
        group_floats([1, 2, 3, 4], 3)


def test_generate_instance_matrix_identity_and_translation():
    matrices = generate_instance_matrix((1, 0, 0, 0), (1, 1, 1), (0, 0, 0))
    assert len(matrices) == 1
    assert np.allclose(matrices[0], np.identity(4))
    moved = generate_instance_matrix((1, 0, 0, 0), (2, 2, 2), (4, 5, 6))[0]
    assert np.allclose(moved[:3, 3], [4, 5, 6])
    assert np.allclose(np.diag(moved)[:3], [2, 2, 2])


def test_assemble_vertices_white_colour():
    vertices = assemble_vertices([(1, 2, 3)], [(0, 1, 0)], [(0.5, 0.25)])
    assert len(vertices) == 1
    assert vertices[0].position == (1.0, 2.0, 3.0)
    assert vertices[0].normal == (0.0, 1.0, 0.0)
    assert vertices[0].colour == (1.0, 1.0, 1.0)
    assert vertices[0].texture_uv == (0.5, 0.25)


def test_assemble_vertices_missing_normals():
    with pytest.raises(ValueError):
        assemble_vertices([(0, 0, 0), (1, 1, 1)], [(0, 1, 0)], [(0, 0), (1, 1)])


def test_model_loads_triangle(tmp_path):
    model = _load(_write_scene(tmp_path))
    assert len(model.meshes) == 1
    mesh = model.meshes[0]
    assert [v.position for v in mesh.vertices] == group_floats(POSITIONS, 3)
    assert [v.normal for v in mesh.vertices] == group_floats(NORMALS, 3)
    assert [v.texture_uv for v in mesh.vertices] == group_floats(UVS, 2)
    assert mesh.indices == [0, 1, 2]
    assert mesh.textures == []


@pytest.mark.parametrize("component", list(ComponentType))
def test_index_component_types(tmp_path, component):
    model = _load(_write_scene(tmp_path, index_type=int(component), index_values=(2, 0, 1)))
    assert model.meshes[0].indices == [2, 0, 1]


def test_signed_short_indices_wrap(tmp_path):
    model = _load(_write_scene(tmp_path, index_type=5122, index_values=(-1, 0, 1)))
    assert model.meshes[0].indices == [0xFFFFFFFF, 0, 1]


def test_float_accessor_defaults_to_buffer_view_one(tmp_path):
    path = _write_scene(tmp_path, normal_accessor={"count": 3, "type": "VEC3"})
    model = _load(path)
    normals = [v.normal for v in model.meshes[0].vertices]
    assert normals == group_floats(POSITIONS, 3)


def test_unknown_accessor_type_raises(tmp_path):
    with pytest.raises(ValueError):
        _load(_write_scene(tmp_path, position_type="MAT4"))


def test_missing_file_raises(tmp_path):
    with pytest.raises(ValueError):
        _load(str(tmp_path / "absent.gltf"))


def test_node_translation_becomes_mesh_matrix(tmp_path):
    model = _load(_write_scene(tmp_path, nodes=[{"mesh": 0, "translation": [1, 2, 3]}]))
    assert np.allclose(model.mesh_matrices[0], translate((1, 2, 3)))
    assert model.mesh_translations[0] == (1.0, 2.0, 3.0)


def test_node_rotation_reordered_to_wxyz(tmp_path):
    half = math.sqrt(0.5)
    model = _load(_write_scene(tmp_path, nodes=[{"mesh": 0, "rotation": [0, 0, half, half]}]))
    assert model.mesh_rotations[0] == (half, 0.0, 0.0, half)
    assert np.allclose(model.mesh_matrices[0], quat_to_mat4((half, 0, 0, half)))


def test_node_matrix_is_column_major(tmp_path):
    values = [1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 7, 8, 9, 1]
    model = _load(_write_scene(tmp_path, nodes=[{"mesh": 0, "matrix": values}]))
    assert np.allclose(model.mesh_matrices[0], translate((7, 8, 9)))


def test_children_inherit_parent_transform(tmp_path):
    nodes = [
        {"translation": [1, 0, 0], "children": [1]},
        {"mesh": 0, "translation": [0, 2, 0]},
    ]
    model = _load(_write_scene(tmp_path, nodes=nodes))
    assert len(model.meshes) == 1
    assert np.allclose(model.mesh_matrices[0][:3, 3], [1, 2, 0])


def test_draw_states_use_model_uniforms(tmp_path):
    model = _load(_write_scene(tmp_path, nodes=[{"mesh": 0, "translation": [1, 2, 3]}]))
    camera = Camera(1280, 720, (0.0, 0.0, 0.0))
    states = model.draw_states(camera)
    assert len(states) == 1
    assert np.allclose(states[0].uniforms["model"], translate((1, 2, 3)))
    assert states[0].index_count == 3
    assert states[0].instanced is False


def test_instanced_model(tmp_path):
    model = _load(_write_scene(tmp_path), instances=4)
    state = model.draw_states(Camera(1280, 720, (0.0, 0.0, 0.0)))[0]
    assert state.instanced is True
    assert "model" not in state.uniforms
    assert np.allclose(model.meshes[0].instance_matrices[0], model.instance_matrix[0])


def test_textures_are_typed_and_numbered(tmp_path):
    path = _write_scene(
        tmp_path, images=["wood_baseColor.png", "wood_metallicRoughness.png"]
    )
    mesh = _load(path).meshes[0]
    assert [t.texture_type for t in mesh.textures] == ["diffuse", "specular"]
    assert [t.unit for t in mesh.textures] == [0, 1]
    assert mesh.texture_uniforms() == [("diffuse0", 0), ("specular0", 1)]


def test_textures_are_shared_between_meshes(tmp_path):
    nodes = [{"children": [1, 2]}, {"mesh": 0}, {"mesh": 0}]
    path = _write_scene(tmp_path, nodes=nodes, images=["a_baseColor.png", "other.png"])
    model = _load(path)
    assert len(model.meshes) == 2
    first, second = model.meshes
    assert len(first.textures) == 1
    assert first.textures[0] is second.textures[0]