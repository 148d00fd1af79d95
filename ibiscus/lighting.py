"""A small cube marking a light source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ibiscus.transforms import translate

LIGHT_VERTICES: tuple[float, ...] = (
    -0.1, -0.1, 0.1,
    -0.1, -0.1, -0.1,
    0.1, -0.1, -0.1,
    0.1, -0.1, 0.1,
    -0.1, 0.1, 0.1,
    -0.1, 0.1, -0.1,
    0.1, 0.1, -0.1,
    0.1, 0.1, 0.1,
)

LIGHT_INDICES: tuple[int, ...] = (
    0, 1, 2,
    0, 2, 3,
    0, 4, 7,
    0, 7, 3,
    3, 7, 6,
    3, 6, 2,
    2, 6, 5,
    2, 5, 1,
    1, 5, 4,
    1, 4, 0,
    4, 5, 6,
    4, 6, 7,
)


@dataclass
class LightBlock:
    """Scale, position and colour of a light cube."""

    scale: tuple[float, float, float]
    position: tuple[float, float, float]
    colour: tuple[float, float, float, float]

    def model_matrix(self) -> np.ndarray:
        """Model matrix of the cube; it is offset by the scale vector."""
        return translate(self.scale)

    def translation_matrix(self) -> np.ndarray:
        """Matrix moving the cube to the light position."""
        return translate(self.position)

    def index_count(self) -> int:
        """Number of indices drawn for the cube."""
        return len(LIGHT_INDICES)

    def uniforms(self, camera_position: Sequence[float]) -> dict[str, object]:
        """Uniform values the light sets for drawing itself and the world."""
        return {
            "matrix": self.model_matrix(),
            "translation": self.translation_matrix(),
            "lightColor": tuple(float(c) for c in self.colour),
            "lightPos": tuple(float(c) for c in self.position),
            "camPos": tuple(float(c) for c in camera_position),
        }