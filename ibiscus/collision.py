"""Axis-aligned box and triangle collision tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np

Vector = Sequence[float]


def dot(a: Vector, b: Vector) -> float:
    """Dot product of two 3-component vectors."""
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def point_in_triangle(point: Vector, v0: Vector, v1: Vector, v2: Vector) -> bool:
    """Whether ``point`` lies inside triangle ``v0 v1 v2`` (barycentric test)."""
    p, a, b, c = (np.asarray(x, dtype=float) for x in (point, v0, v1, v2))
    edge_a = b - a
    edge_b = c - a
    to_point = p - a

    dot_a = dot(edge_b, edge_b)
    dot_b = dot(edge_b, edge_a)
    dot_c = dot(edge_b, to_point)
    dot_d = dot(edge_a, edge_a)
    dot_e = dot(edge_a, to_point)

    denominator = dot_a * dot_d - dot_b * dot_b
    if denominator == 0:
        return False
    inverse = 1.0 / denominator
    u = (dot_d * dot_c - dot_b * dot_e) * inverse
    v = (dot_a * dot_e - dot_b * dot_c) * inverse
    return u >= 0 and v >= 0 and u + v <= 1


@dataclass
class Collision:
    """An axis-aligned bounding box with point and box overlap tests."""

    box_min: np.ndarray = field(default_factory=lambda: np.zeros(3))
    box_max: np.ndarray = field(default_factory=lambda: np.zeros(3))
    _pending: list[float] = field(default_factory=list, repr=False)

    def precalculate_box_bounds(self, position: Vector, scale: Vector) -> None:
        """Set the box to be centred on ``position`` with size ``scale``."""
        centre = np.asarray(position, dtype=float)
        half = np.asarray(scale, dtype=float) / 2
        self.box_min = centre - half
        self.box_max = centre + half

    def resort_vertices(self, vertices: Iterable[float]) -> list[tuple[float, float, float]]:
        """Group a flat stream of coordinates into triples.

        A triple is emitted once the value after it arrives; leftover values
        are kept and continue the grouping on the next call.
        """
        emitted: list[tuple[float, float, float]] = []
        for value in vertices:
            if len(self._pending) >= 3:
                emitted.append((self._pending[0], self._pending[1], self._pending[2]))
                self._pending = []
            self._pending.append(value)
        return emitted

    def is_level_colliding_with_player(self, vertices: Iterable[float]) -> bool:
        """Whether any point of a flat ``x, y, z, ...`` coordinate list lies in the box.

        Trailing values that do not make up a whole point are ignored.
        """
        values = np.asarray(list(vertices), dtype=float)
        usable = len(values) - len(values) % 3
        if usable == 0:
            return False
        points = values[:usable].reshape(-1, 3)
        inside = np.all(points >= self.box_min, axis=1) & np.all(points <= self.box_max, axis=1)
        return bool(np.any(inside))

    def contains_point(self, point: Vector) -> bool:
        """Whether ``point`` lies inside the box, edges included."""
        p = np.asarray(point, dtype=float)
        return bool(np.all(p >= self.box_min) and np.all(p <= self.box_max))

    def intersects_bounds(self, bound_min: Vector, bound_max: Vector) -> bool:
        """Whether the box overlaps the box spanning ``bound_min``..``bound_max``."""
        lo = np.asarray(bound_min, dtype=float)
        hi = np.asarray(bound_max, dtype=float)
        return bool(np.all(self.box_min <= hi) and np.all(self.box_max >= lo))


@dataclass
class Inertia:
    """Velocity carried by an entity between contacts."""

    velocity: float = 0.0