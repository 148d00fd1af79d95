import math

import numpy as np
from PIL import Image

from ibiscus.skybox import FACE_FILES, SKYBOX_INDICES, SKYBOX_VERTICES, Skybox
from ibiscus.transforms import look_at, perspective


def make_skybox():
    return Skybox(width=1280, height=720, near=0.1, far=100.0)


def test_vertex_and_index_counts(tmp_path):
    assert len(SKYBOX_VERTICES) == 23
    assert len(SKYBOX_INDICES) == 36
    faces = make_skybox().load_faces(tmp_path)
    assert len(faces) == len(FACE_FILES) == 6
    assert all(face.image is None for face in faces)


def test_view_matrix_drops_translation():
    view = make_skybox().view_matrix((3.0, -2.0, 5.0), (0.0, 0.0, -1.0), (0.0, 1.0, 0.0))
    assert np.allclose(view[:3, 3], 0.0)
    assert np.allclose(view[3], [0.0, 0.0, 0.0, 1.0])


def test_view_matrix_keeps_rotation():
    position = (3.0, -2.0, 5.0)
    orientation = (1.0, 0.0, 0.0)
    up = (0.0, 1.0, 0.0)
    view = make_skybox().view_matrix(position, orientation, up)
    full = look_at(position, np.add(position, orientation), up)
    assert np.allclose(view[:3, :3], full[:3, :3])


def test_view_matrix_independent_of_position():
    sky = make_skybox()
    a = sky.view_matrix((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 1.0, 0.0))
    b = sky.view_matrix((10.0, 4.0, -7.0), (0.0, 0.0, -1.0), (0.0, 1.0, 0.0))
    assert np.allclose(a, b)


def test_projection_ignores_near_far_fields():
    sky = Skybox(width=1280, height=720, near=5.0, far=6.0)
    expected = perspective(math.radians(45.0), 1280 / 720, 0.1, 100.0)
    assert np.allclose(sky.projection_matrix(), expected)


def test_load_faces(tmp_path):
    for name in FACE_FILES[:5]:
        Image.new("L", (4, 2), color=128).save(tmp_path / name.replace(".jpg", ".png"), "PNG")
        (tmp_path / name.replace(".jpg", ".png")).rename(tmp_path / name)
    faces = make_skybox().load_faces(tmp_path)
    assert [face.index for face in faces] == list(range(6))
    assert all(face.image is not None for face in faces[:5])
    assert faces[0].image.mode == "RGB"
    assert faces[0].image.size == (4, 2)
    assert faces[5].image is None
    assert faces[5].path.endswith("back.jpg")