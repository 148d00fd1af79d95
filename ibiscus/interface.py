"""A flat coloured frame drawn over the scene."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Sequence

from ibiscus.shader import ShaderSource

INTERFACE_VERTICES: tuple[float, ...] = (
    -1.0, 0.0, 1.0, 0.0, 1.0, 0.0,
    1.0, 0.0, 1.0, 0.0, 1.0, 0.0,
    -1.0, 0.0, -1.0, 0.0, 1.0, 0.0,
    1.0, 0.0, -1.0, 0.0, 1.0, 0.0,
)

INTERFACE_INDICES: tuple[int, ...] = (0, 1, 2, 2, 1, 3)

VERTEX_FLOATS = 6
DRAW_COUNT = 36
SHADER_FILES = ("Instance2D.vert", "Instance2D.frag")


@dataclass
class InterfaceFrame:
    """Position and colour of an on-screen frame and its shader."""

    position: tuple[float, float, float]
    colour: tuple[float, float, float, float]
    shader: Optional[ShaderSource] = None
    draw_count: int = DRAW_COUNT

    def __post_init__(self) -> None:
        self.position = tuple(float(c) for c in self.position)
        self.colour = tuple(float(c) for c in self.colour)
        if len(self.position) != 3:
            raise ValueError("frame position needs three components")
        if len(self.colour) != 4:
            raise ValueError("frame colour needs four components")

    @classmethod
    def create(
        cls,
        position: Sequence[float],
        colour: Sequence[float],
        shader_dir: str | os.PathLike[str],
    ) -> "InterfaceFrame":
        """Build a frame whose shader is read from ``shader_dir``."""
        vertex, fragment = (os.path.join(shader_dir, name) for name in SHADER_FILES)
        return cls(position, colour, ShaderSource.load(vertex, fragment))

    def uniforms(self) -> dict[str, tuple[float, ...]]:
        """Uniform values set before drawing the frame."""
        return {"Position": self.position, "Colour": self.colour}