"""Loading of glTF scenes into meshes ready to draw."""

from __future__ import annotations

import enum
import json
import os
from typing import Any, Iterable, Optional, Sequence

import numpy as np

from ibiscus.mesh import DrawState, Mesh, Vertex
from ibiscus.shader import read_contents
from ibiscus.texture import Texture
from ibiscus.transforms import quat_to_mat4, translate
from ibiscus.transforms import scale as scale_matrix

_COMPONENTS_PER_TYPE = {"SCALAR": 1, "VEC2": 2, "VEC3": 3, "VEC4": 4}
_WHITE = (1.0, 1.0, 1.0)


class ComponentType(enum.IntEnum):
    """Index component types understood by the loader."""

    SHORT = 5122
    UNSIGNED_SHORT = 5123
    UNSIGNED_INT = 5125

    @property
    def dtype(self) -> str:
        """Little-endian numpy type code of one component."""
        return {
            ComponentType.SHORT: "<i2",
            ComponentType.UNSIGNED_SHORT: "<u2",
            ComponentType.UNSIGNED_INT: "<u4",
        }[self]


def group_floats(values: Iterable[float], size: int) -> list[tuple[float, ...]]:
    """Split a flat sequence into consecutive tuples of ``size`` values."""
    flat = [float(v) for v in values]
    if size <= 0:
        raise ValueError("group size must be positive")
    if len(flat) % size:
        raise ValueError(f"{len(flat)} values cannot be grouped by {size}")
    return [tuple(flat[start:start + size]) for start in range(0, len(flat), size)]


def generate_instance_matrix(
    rotation: Sequence[float], scale: Sequence[float], position: Sequence[float]
) -> list[np.ndarray]:
    """Single instance transform: translation, then rotation, then scale."""
    return [translate(position) @ quat_to_mat4(rotation) @ scale_matrix(scale)]


def assemble_vertices(
    positions: Sequence[Sequence[float]],
    normals: Sequence[Sequence[float]],
    uvs: Sequence[Sequence[float]],
) -> list[Vertex]:
    """Combine per-vertex attributes into white vertices, one per position."""
    if len(normals) < len(positions) or len(uvs) < len(positions):
        raise ValueError("every position needs a normal and a texture coordinate")
    return [
        Vertex(position=position, normal=normal, colour=_WHITE, texture_uv=uv)
        for position, normal, uv in zip(positions, normals, uvs)
    ]


def _node_values(node: dict, key: str, count: int) -> Optional[list[float]]:
    values = node.get(key)
    if values is None:
        return None
    if len(values) < count:
        raise ValueError(f"node {key} needs {count} values, got {len(values)}")
    return [float(v) for v in values[:count]]


class Model:
    """A glTF scene whose node tree has been flattened into meshes."""

    def __init__(
        self,
        path: str | os.PathLike[str],
        rotation: Sequence[float],
        scale: Sequence[float],
        position: Sequence[float],
        instances: int = 1,
    ) -> None:
        self.path = os.fspath(path)
        self.rotation = tuple(float(c) for c in rotation)
        self.scale = tuple(float(c) for c in scale)
        self.position = tuple(float(c) for c in position)
        self.instances = int(instances)

        self._document: dict[str, Any] = json.loads(read_contents(self.path) or b"null") or {}
        if not isinstance(self._document, dict) or not self._document:
            raise ValueError(f"{self.path!r} holds no glTF document")
        cut = max(self.path.rfind("/"), self.path.rfind(os.sep))
        self._directory = self.path[: cut + 1]

        self.instance_matrix = generate_instance_matrix(self.rotation, self.scale, self.position)
        self._data = self._read_buffer()

        self.meshes: list[Mesh] = []
        self.mesh_translations: list[tuple[float, float, float]] = []
        self.mesh_rotations: list[tuple[float, float, float, float]] = []
        self.mesh_scales: list[tuple[float, float, float]] = []
        self.mesh_matrices: list[np.ndarray] = []
        self._loaded_textures: dict[str, Optional[Texture]] = {}

        self._traverse(0, np.identity(4))

    def draw_states(self, camera: Any) -> list[DrawState]:
        """Draw state of every mesh, in load order."""
        return [
            mesh.draw_state(camera, matrix, self.position, self.rotation, self.scale)
            for mesh, matrix in zip(self.meshes, self.mesh_matrices)
        ]

    def _read_buffer(self) -> bytes:
        uri = self._document["buffers"][0]["uri"]
        return read_contents(self._directory + uri)

    def _traverse(self, index: int, parent: np.ndarray) -> None:
        node = self._document["nodes"][index]

        translation = _node_values(node, "translation", 3) or [0.0, 0.0, 0.0]
        rotation_xyzw = _node_values(node, "rotation", 4)
        rotation = (
            (rotation_xyzw[3], rotation_xyzw[0], rotation_xyzw[1], rotation_xyzw[2])
            if rotation_xyzw is not None
            else (1.0, 0.0, 0.0, 0.0)
        )
        node_scale = _node_values(node, "scale", 3) or [1.0, 1.0, 1.0]
        matrix_values = _node_values(node, "matrix", 16)
        node_matrix = (
            np.array(matrix_values).reshape(4, 4).T
            if matrix_values is not None
            else np.identity(4)
        )

        local = (
            parent
            @ node_matrix
            @ translate(translation)
            @ quat_to_mat4(rotation)
            @ scale_matrix(node_scale)
        )

        if "mesh" in node:
            self.mesh_translations.append(tuple(translation))
            self.mesh_rotations.append(tuple(rotation))
            self.mesh_scales.append(tuple(node_scale))
            self.mesh_matrices.append(local)
            self._load_mesh(int(node["mesh"]))

        for child in node.get("children", ()):
            self._traverse(int(child), local)

    def _load_mesh(self, index: int) -> None:
        primitive = self._document["meshes"][index]["primitives"][0]
        attributes = primitive["attributes"]
        accessors = self._document["accessors"]

        positions = group_floats(self._floats(accessors[attributes["POSITION"]]), 3)
        normals = group_floats(self._floats(accessors[attributes["NORMAL"]]), 3)
        uvs = group_floats(self._floats(accessors[attributes["TEXCOORD_0"]]), 2)

        vertices = assemble_vertices(positions, normals, uvs)
        indices = self._indices(accessors[primitive["indices"]])
        textures = self._textures()
        self.meshes.append(
            Mesh(vertices, indices, textures, self.instances, self.instance_matrix)
        )

    def _slice(self, start: int, length: int) -> bytes:
        chunk = self._data[start:start + length]
        if len(chunk) < length:
            raise ValueError("accessor reaches past the end of the buffer")
        return chunk

    def _floats(self, accessor: dict) -> list[float]:
        view = self._document["bufferViews"][accessor.get("bufferView", 1)]
        kind = accessor["type"]
        if kind not in _COMPONENTS_PER_TYPE:
            raise ValueError("VEC3,VEC2,VEC1 OR SCALAR doesnt exist in Type")
        start = int(view["byteOffset"]) + int(accessor.get("byteOffset", 0))
        length = int(accessor["count"]) * 4 * _COMPONENTS_PER_TYPE[kind]
        return np.frombuffer(self._slice(start, length), dtype="<f4").astype(float).tolist()

    def _indices(self, accessor: dict) -> list[int]:
        view = self._document["bufferViews"][accessor.get("bufferView", 0)]
        count = int(accessor["count"])
        try:
            component = ComponentType(int(accessor["componentType"]))
        except ValueError:
            return []
        start = int(view["byteOffset"]) + int(accessor.get("byteOffset", 0))
        width = np.dtype(component.dtype).itemsize
        values = np.frombuffer(self._slice(start, count * width), dtype=component.dtype)
        return [int(v) % 2**32 for v in values.astype(np.int64)]

    def _textures(self) -> list[Texture]:
        textures: list[Texture] = []
        for image in self._document.get("images", ()):
            uri = image["uri"]
            if uri in self._loaded_textures:
                cached = self._loaded_textures[uri]
                if cached is not None:
                    textures.append(cached)
                continue
            if "baseColor" in uri:
                kind: Optional[str] = "diffuse"
            elif "metallicRoughness" in uri:
                kind = "specular"
            else:
                kind = None
            texture = None
            if kind is not None:
                slot = sum(t is not None for t in self._loaded_textures.values())
                texture = Texture(self._directory + uri, kind, slot)
                textures.append(texture)
            self._loaded_textures[uri] = texture
        return textures