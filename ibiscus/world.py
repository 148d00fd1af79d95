"""Parsing of the line-based world description format."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field

import numpy as np

from ibiscus.shader import read_contents
from ibiscus.transforms import scale, translate

_FLOAT_PREFIX = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_INT_PREFIX = re.compile(r"\s*[+-]?\d+")

_ZERO_VEC4 = (0.0, 0.0, 0.0, 0.0)


def _leading_float(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no number at the start of {text!r}")
    return float(match.group())


def _leading_int(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no integer at the start of {text!r}")
    return int(match.group())


def _fields(line: str, tag: str) -> list[str]:
    for char in (tag, "<", ">"):
        line = line.replace(char, "")
    return line.split(",")


@dataclass
class WorldData:
    """Geometry and entities described by a world file."""

    vertices: list[float] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    size: list[float] = field(default_factory=list)
    position: list[float] = field(default_factory=list)
    entities: list[list[str]] = field(default_factory=list)
    lights: dict[str, dict[str, tuple[float, float, float, float]]] = field(
        default_factory=dict
    )

    def model_matrix(self) -> np.ndarray:
        """Scale matrix built from the first three size values."""
        if len(self.size) < 3:
            raise ValueError("world size needs three components")
        return scale(self.size[:3])

    def translation_matrix(self) -> np.ndarray:
        """Translation matrix built from the first three position values."""
        if len(self.position) < 3:
            raise ValueError("world position needs three components")
        return translate(self.position[:3])


def parse_world(text: str) -> WorldData:
    """Parse the contents of a world file.

    Spaces are ignored, lines starting with ``#`` are comments, and each
    data line starts with a tag: ``<v>`` vertices, ``<p>`` position,
    ``<s>`` size, ``<i>`` indices, ``<e>`` entities and ``<l>`` lights.
    A malformed number raises ValueError.
    """
    world = WorldData()
    for raw in text.split("\n"):
        line = raw.replace(" ", "")
        if line.startswith("#"):
            continue
        tag = line[:3]
        if tag == "<v>":
            world.vertices.extend(
                _leading_float(part) for part in _fields(line, "v") if part
            )
        elif tag == "<p>":
            world.position.extend(_leading_float(part) for part in _fields(line, "p"))
        elif tag == "<e>":
            world.entities.append(_fields(line, "e"))
        elif tag == "<l>":
            key = str(len(world.lights) + 1)
            world.lights[key] = {
                "LightColour": _ZERO_VEC4,
                "LightPosition": _ZERO_VEC4,
                "LightScale": _ZERO_VEC4,
            }
        elif tag == "<s>":
            world.size.extend(_leading_float(part) for part in _fields(line, "s"))
        elif tag == "<i>":
            world.indices.extend(
                _leading_int(part) % 2**32 for part in _fields(line, "i")
            )
    return world


def load_world(path: str | os.PathLike[str]) -> WorldData:
    """Read and parse a world file; an unreadable file gives an empty world."""
    return parse_world(read_contents(path).decode("utf-8", errors="replace"))