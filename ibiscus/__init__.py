"""Camera, world-file, glTF model, collision and draw-state logic for a small 3D renderer."""

__version__ = "0.1.0"