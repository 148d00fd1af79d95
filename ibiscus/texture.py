"""Decoding of image files into texture pixel data."""

from __future__ import annotations

import enum
import os

import numpy as np
from PIL import Image

# Modes that decode to a fixed channel layout before upload.
_MODE_CONVERSIONS = {
    "1": "L",
    "I": "L",
    "I;16": "L",
    "F": "L",
    "La": "LA",
    "PA": "RGBA",
    "RGBa": "RGBA",
    "RGBX": "RGB",
    "CMYK": "RGB",
    "YCbCr": "RGB",
    "LAB": "RGB",
    "HSV": "RGB",
}


class PixelFormat(enum.Enum):
    """Pixel layout of uploaded texture data, valued by channel count."""

    RED = 1
    RGB = 3
    RGBA = 4

    @property
    def channels(self) -> int:
        """Number of colour channels in this layout."""
        return self.value


def pixel_format_for_channels(channels: int) -> PixelFormat:
    """Return the pixel layout for an image with ``channels`` channels."""
    try:
        return PixelFormat(channels)
    except ValueError:
        raise ValueError("Cannot find texture type.") from None


def _decode(image: Image.Image) -> Image.Image:
    mode = image.mode
    if mode == "P":
        target = "RGBA" if "transparency" in image.info else "RGB"
    else:
        target = _MODE_CONVERSIONS.get(mode, mode)
    return image.convert(target) if target != mode else image.copy()


class Texture:
    """A decoded 2D texture bound to a texture unit.

    Pixel rows are stored bottom-up, the order the renderer uploads them in.
    The texture is always stored on the GPU side as RGBA.
    """

    internal_format = PixelFormat.RGBA

    def __init__(self, image: str | os.PathLike[str], texture_type: str, slot: int) -> None:
        self.texture_type = texture_type
        self.path = os.fspath(image)
        with Image.open(image) as source:
            decoded = _decode(source)
        pixels = np.asarray(decoded, dtype=np.uint8)
        if pixels.ndim == 2:
            pixels = pixels[:, :, np.newaxis]
        self.unit = int(slot)
        self.format = pixel_format_for_channels(pixels.shape[2])
        self.pixels = np.ascontiguousarray(np.flipud(pixels))
        self.height, self.width = int(pixels.shape[0]), int(pixels.shape[1])

    @property
    def channels(self) -> int:
        """Number of channels in the decoded pixel data."""
        return self.format.channels

    def __repr__(self) -> str:
        return (
            f"Texture(path={self.path!r}, type={self.texture_type!r}, unit={self.unit}, "
            f"size={self.width}x{self.height}, format={self.format.name})"
        )