"""Reading shader sources from disk."""

from __future__ import annotations

import os
from dataclasses import dataclass


def read_contents(path: str | os.PathLike[str]) -> bytes:
    """Return the raw contents of ``path``, or empty bytes if it cannot be opened."""
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError:
        return b""


@dataclass(frozen=True)
class ShaderSource:
    """The vertex and fragment source text of one shader program."""

    vertex: str
    fragment: str

    @classmethod
    def load(
        cls,
        vertex_file: str | os.PathLike[str],
        fragment_file: str | os.PathLike[str],
    ) -> "ShaderSource":
        """Read both stages; a missing file yields an empty stage."""
        return cls(
            vertex=read_contents(vertex_file).decode("utf-8", errors="replace"),
            fragment=read_contents(fragment_file).decode("utf-8", errors="replace"),
        )