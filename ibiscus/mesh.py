"""Indexed triangle meshes with their vertex layout and draw state."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Optional, Sequence

import numpy as np

from ibiscus.transforms import quat_to_mat4, translate
from ibiscus.transforms import scale as scale_matrix

FLOAT_SIZE = 4
VEC4_SIZE = 4 * FLOAT_SIZE
MATRIX_STRIDE = 16 * FLOAT_SIZE


def _floats(values: Sequence[float], count: int, name: str) -> tuple[float, ...]:
    result = tuple(float(v) for v in values)
    if len(result) != count:
        raise ValueError(f"{name} needs {count} components, got {len(result)}")
    return result


@dataclass(frozen=True)
class Vertex:
    """Position, normal, colour and texture coordinate of one vertex."""

    position: tuple[float, float, float]
    normal: tuple[float, float, float]
    colour: tuple[float, float, float]
    texture_uv: tuple[float, float]

    COMPONENTS: ClassVar[tuple[int, ...]] = (3, 3, 3, 2)

    def __post_init__(self) -> None:
        names = ("position", "normal", "colour", "texture_uv")
        for name, count in zip(names, self.COMPONENTS):
            object.__setattr__(self, name, _floats(getattr(self, name), count, name))

    def packed(self) -> tuple[float, ...]:
        """All components in buffer order."""
        return (*self.position, *self.normal, *self.colour, *self.texture_uv)


VERTEX_STRIDE = sum(Vertex.COMPONENTS) * FLOAT_SIZE


@dataclass(frozen=True)
class AttributeLayout:
    """How one shader attribute reads from its buffer."""

    location: int
    components: int
    stride: int
    offset: int
    divisor: int = 0


@dataclass
class DrawState:
    """Everything needed to issue one mesh draw call."""

    uniforms: dict[str, Any]
    textures: list[tuple[str, int]]
    index_count: int
    instances: int
    instanced: bool


class Mesh:
    """Vertices, indices and textures drawn together, optionally instanced."""

    def __init__(
        self,
        vertices: Iterable[Vertex],
        indices: Iterable[int],
        textures: Iterable[Any],
        instances: int = 1,
        instance_matrices: Optional[Iterable[Sequence[Sequence[float]]]] = None,
    ) -> None:
        self.vertices = list(vertices)
        self.indices = [int(i) for i in indices]
        self.textures = list(textures)
        self.instances = int(instances)
        self.instance_matrices = [np.asarray(m, dtype=float) for m in instance_matrices or ()]
        for matrix in self.instance_matrices:
            if matrix.shape != (4, 4):
                raise ValueError(f"instance matrices must be 4x4, got {matrix.shape}")

    def vertex_data(self) -> np.ndarray:
        """Interleaved vertex buffer contents, one row per vertex."""
        columns = sum(Vertex.COMPONENTS)
        return np.array([v.packed() for v in self.vertices], dtype=np.float32).reshape(-1, columns)

    def index_data(self) -> np.ndarray:
        """Element buffer contents."""
        return np.asarray(self.indices, dtype=np.uint32)

    def instance_data(self) -> np.ndarray:
        """Instance matrices in column-major order, one row per instance."""
        return np.array(
            [m.T.reshape(16) for m in self.instance_matrices], dtype=np.float32
        ).reshape(-1, 16)

    def attribute_layouts(self) -> list[AttributeLayout]:
        """Attribute bindings: vertex data, then per-instance matrix columns."""
        layouts = []
        offset = 0
        for location, components in enumerate(Vertex.COMPONENTS):
            layouts.append(AttributeLayout(location, components, VERTEX_STRIDE, offset))
            offset += components * FLOAT_SIZE
        if self.instances != 1:
            layouts.extend(
                AttributeLayout(4 + column, 4, MATRIX_STRIDE, column * VEC4_SIZE, divisor=1)
                for column in range(4)
            )
        return layouts

    def texture_uniforms(self) -> list[tuple[str, int]]:
        """Sampler uniform name and texture unit for each texture, in order.

        Diffuse and specular textures are numbered separately from zero;
        other types keep their bare name.
        """
        counters = {"diffuse": itertools.count(), "specular": itertools.count()}
        result = []
        for unit, texture in enumerate(self.textures):
            kind = texture.texture_type
            counter = counters.get(kind)
            number = str(next(counter)) if counter is not None else ""
            result.append((kind + number, unit))
        return result

    def draw_state(
        self,
        camera: Any,
        matrix: Optional[Sequence[Sequence[float]]] = None,
        translation: Sequence[float] = (0.0, 0.0, 0.0),
        rotation: Sequence[float] = (1.0, 0.0, 0.0, 0.0),
        scale: Sequence[float] = (1.0, 1.0, 1.0),
    ) -> DrawState:
        """Uniforms and counts for drawing this mesh through ``camera``."""
        uniforms: dict[str, Any] = {
            "camPos": tuple(float(c) for c in camera.position),
            "camMatrix": np.array(camera.camera_matrix, dtype=float),
        }
        instanced = self.instances != 1
        if not instanced:
            model = np.identity(4) if matrix is None else np.asarray(matrix, dtype=float)
            uniforms["translation"] = translate(translation)
            uniforms["rotation"] = quat_to_mat4(rotation)
            uniforms["scale"] = scale_matrix(scale)
            uniforms["model"] = model
        return DrawState(
            uniforms=uniforms,
            textures=self.texture_uniforms(),
            index_count=len(self.indices),
            instances=self.instances,
            instanced=instanced,
        )