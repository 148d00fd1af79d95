"""First-person camera driven by keyboard and mouse input."""

from __future__ import annotations

import enum
import math
from typing import Iterable, Sequence

import numpy as np

from ibiscus.transforms import angle_between, look_at, normalize, perspective, rotate_vector

Vector = Sequence[float]


class Movement(enum.Enum):
    """Movement keys, in the order they are applied."""

    FORWARD = "w"
    LEFT = "a"
    BACKWARD = "s"
    RIGHT = "d"


class Camera:
    """Player view camera holding its position, orientation and matrices."""

    def __init__(self, width: int, height: int, position: Vector) -> None:
        self.width = int(width)
        self.height = int(height)
        self.position = np.asarray(position, dtype=float).copy()
        self.up = np.array([0.0, 1.0, 0.0])
        self.orientation = np.array([0.0, 0.0, -1.0])

        self.camera_matrix = np.identity(4)
        self.view_matrix = np.identity(4)
        self.projection_matrix = np.identity(4)

        self.last_x = 0.0
        self.last_y = 0.0
        self.rotate_x = 0.0
        self.rotate_y = 0.0
        self.x_offset = 0.0
        self.y_offset = 0.0
        self.first_mouse = True

        self.speed = 0.04
        self.sensitivity = 0.1
        self.jump_multiplier = 1.5
        self.mouse_cursor_locked = False

    def update_matrix(self, field_of_view: float, near_plane: float, far_plane: float) -> None:
        """Recompute view, projection and combined matrices; FOV in degrees."""
        self.view_matrix = look_at(self.position, self.position + self.orientation, self.up)
        # The aspect ratio is the whole-number quotient of width by height.
        aspect = float(self.width // self.height)
        self.projection_matrix = perspective(
            math.radians(field_of_view), aspect, near_plane, far_plane
        )
        self.camera_matrix = self.projection_matrix @ self.view_matrix

    def move_camera(self, mouse_x: float, mouse_y: float) -> None:
        """Turn the view by the mouse distance from the window centre."""
        rotation_x = self.sensitivity * (mouse_y - self.height // 2) / self.height
        rotation_y = self.sensitivity * (mouse_x - self.width // 2) / self.width

        pitch_axis = normalize(np.cross(self.orientation, self.up))
        candidate = rotate_vector(self.orientation, math.radians(-rotation_x), pitch_axis)
        limit = math.radians(5.0)
        if not (
            angle_between(candidate, self.up) <= limit
            or angle_between(candidate, -self.up) <= limit
        ):
            self.orientation = candidate
        self.orientation = rotate_vector(self.orientation, math.radians(-rotation_y), self.up)

    def update_cursor(self, x_position: float, y_position: float) -> None:
        """Update yaw and pitch from an absolute cursor position."""
        if self.first_mouse:
            self.last_x = x_position
            self.last_y = y_position
            self.first_mouse = False

        self.x_offset = (x_position - self.last_x) * self.sensitivity
        self.y_offset = (self.last_y - y_position) * self.sensitivity
        self.last_x = x_position
        self.last_y = y_position

        self.rotate_x += self.x_offset
        self.rotate_y = min(89.0, max(-89.0, self.rotate_y + self.y_offset))

        yaw = math.radians(self.rotate_x)
        pitch = math.radians(self.rotate_y)
        self.orientation = normalize(
            (math.cos(yaw) * math.cos(pitch), math.sin(pitch), math.sin(yaw))
        )

    def apply_inputs(self, keys: Iterable[Movement]) -> None:
        """Move the camera for every movement key currently held."""
        held = set(keys)
        right = normalize(np.cross(self.orientation, self.up))
        steps = {
            Movement.FORWARD: self.orientation,
            Movement.LEFT: -right,
            Movement.BACKWARD: -self.orientation,
            Movement.RIGHT: right,
        }
        for movement in Movement:
            if movement in held:
                self.position = self.position + self.speed * steps[movement]