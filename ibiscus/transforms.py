"""Vector, quaternion and 4x4 matrix helpers for the renderer.

Matrices are ordinary row-major numpy arrays meant to be applied as
``matrix @ column_vector``. Quaternions are ``(w, x, y, z)`` tuples.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

Vector = Sequence[float]


def _vec3(vector: Vector) -> np.ndarray:
    array = np.asarray(vector, dtype=float)
    if array.shape != (3,):
        raise ValueError(f"expected a 3-component vector, got shape {array.shape}")
    return array


def translate(vector: Vector) -> np.ndarray:
    """Return a translation matrix moving points by ``vector``."""
    matrix = np.identity(4)
    matrix[:3, 3] = _vec3(vector)
    return matrix


def scale(vector: Vector) -> np.ndarray:
    """Return a matrix scaling each axis by the matching component."""
    matrix = np.identity(4)
    matrix[0, 0], matrix[1, 1], matrix[2, 2] = _vec3(vector)
    return matrix


def quat_to_mat4(quat: Sequence[float]) -> np.ndarray:
    """Convert a ``(w, x, y, z)`` quaternion into a rotation matrix."""
    w, x, y, z = (float(c) for c in quat)
    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z
    return np.array(
        [
            [1 - 2 * (yy + zz), 2 * (xy - wz), 2 * (xz + wy), 0.0],
            [2 * (xy + wz), 1 - 2 * (xx + zz), 2 * (yz - wx), 0.0],
            [2 * (xz - wy), 2 * (yz + wx), 1 - 2 * (xx + yy), 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def normalize(vector: Vector) -> np.ndarray:
    """Return ``vector`` scaled to unit length."""
    array = np.asarray(vector, dtype=float)
    length = float(np.linalg.norm(array))
    if length == 0.0:
        raise ValueError("cannot normalize a zero-length vector")
    return array / length


def look_at(eye: Vector, center: Vector, up: Vector) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` towards ``center``."""
    eye_v = _vec3(eye)
    forward = normalize(_vec3(center) - eye_v)
    side = normalize(np.cross(forward, _vec3(up)))
    true_up = np.cross(side, forward)
    matrix = np.identity(4)
    matrix[0, :3] = side
    matrix[1, :3] = true_up
    matrix[2, :3] = -forward
    matrix[0, 3] = -float(side @ eye_v)
    matrix[1, 3] = -float(true_up @ eye_v)
    matrix[2, 3] = float(forward @ eye_v)
    return matrix


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed projection onto a -1..1 depth range; ``fovy`` in radians."""
    if aspect == 0:
        raise ValueError("aspect ratio must be non-zero")
    if far == near:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fovy / 2.0)
    matrix = np.zeros((4, 4))
    matrix[0, 0] = 1.0 / (aspect * tan_half)
    matrix[1, 1] = 1.0 / tan_half
    matrix[2, 2] = -(far + near) / (far - near)
    matrix[2, 3] = -(2.0 * far * near) / (far - near)
    matrix[3, 2] = -1.0
    return matrix


def rotate_vector(vector: Vector, angle: float, axis: Vector) -> np.ndarray:
    """Rotate ``vector`` by ``angle`` radians around ``axis``."""
    v = _vec3(vector)
    k = normalize(_vec3(axis))
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    return v * cos_a + np.cross(k, v) * sin_a + k * float(k @ v) * (1.0 - cos_a)


def angle_between(a: Vector, b: Vector) -> float:
    """Angle in radians between two unit vectors."""
    cosine = float(np.clip(_vec3(a) @ _vec3(b), -1.0, 1.0))
    return math.acos(cosine)