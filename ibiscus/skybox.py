"""Cube-mapped sky drawn behind the scene."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np
from PIL import Image

from ibiscus.transforms import look_at, perspective

# The final vertex carries only two components, so the list holds 23 values.
SKYBOX_VERTICES: tuple[float, ...] = (
    -1.0, -1.0, 1.0,
    1.0, -1.0, 1.0,
    1.0, -1.0, -1.0,
    -1.0, -1.0, -1.0,
    -1.0, 1.0, 1.0,
    1.0, 1.0, 1.0,
    1.0, 1.0, -1.0,
    -1.0, 0.0,
)

SKYBOX_INDICES: tuple[int, ...] = (
    1, 2, 6,
    6, 5, 1,
    0, 4, 7,
    7, 3, 0,
    4, 5, 6,
    6, 7, 4,
    0, 3, 2,
    2, 1, 0,
    0, 1, 5,
    5, 4, 0,
    3, 7, 6,
    6, 2, 3,
)

FACE_FILES: tuple[str, ...] = (
    "right.jpg",
    "left.jpg",
    "top.jpg",
    "bottom.jpg",
    "front.jpg",
    "back.jpg",
)


@dataclass
class CubeFace:
    """One loaded face of the cube map; ``image`` is None if loading failed."""

    index: int
    path: str
    image: Optional[Image.Image]


@dataclass
class Skybox:
    """Window dimensions and face images of the sky cube."""

    width: int
    height: int
    near: float
    far: float
    faces: tuple[str, ...] = field(default=FACE_FILES)

    def view_matrix(
        self,
        position: Sequence[float],
        orientation: Sequence[float],
        up: Sequence[float],
    ) -> np.ndarray:
        """Camera view with its translation removed."""
        eye = np.asarray(position, dtype=float)
        full = look_at(eye, eye + np.asarray(orientation, dtype=float), up)
        view = np.identity(4)
        view[:3, :3] = full[:3, :3]
        return view

    def projection_matrix(self) -> np.ndarray:
        """Fixed 45 degree projection over the window's aspect ratio."""
        return perspective(math.radians(45.0), self.width / self.height, 0.1, 100.0)

    def load_faces(self, base_dir: str | os.PathLike[str]) -> list[CubeFace]:
        """Load each face from ``base_dir`` as RGB; unreadable faces have no image."""
        loaded = []
        for index, name in enumerate(self.faces):
            path = os.path.join(base_dir, name)
            try:
                with Image.open(path) as image:
                    rgb = image.convert("RGB")
            except OSError:
                rgb = None
            loaded.append(CubeFace(index=index, path=path, image=rgb))
        return loaded