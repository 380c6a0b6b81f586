#!/usr/bin/env python3
"""
Camera utilities for projecting render-space points onto the viewport.
"""
import math
from typing import Optional, Sequence, Tuple

from .constants import (
    DEFAULT_TILT,
    DEFAULT_UNITS_PER_PIXEL,
    MAX_UNITS_PER_PIXEL,
    MIN_UNITS_PER_PIXEL,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .vector_utils import clamp


class OrbitCamera:
    """
    Orthographic camera looking down at the XZ plane, tilted about the screen's
    horizontal axis so inclined orbits stay visible.

    ``center`` is the (x, z) point shown in the middle of the viewport and
    ``upp`` is render units per pixel.
    """

    def __init__(self, center=(0.0, 0.0), units_per_pixel=DEFAULT_UNITS_PER_PIXEL, tilt=DEFAULT_TILT):
        self.center = [center[0], center[1]]
        self.upp = units_per_pixel
        self.tilt = tilt
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def set_tilt(self, tilt: float) -> None:
        self.tilt = clamp(tilt, 0.0, math.pi / 2)

    def world_to_screen(self, pos: Sequence[float]) -> Tuple[int, int]:
        x, y, z = pos[0], pos[1], pos[2]
        cx, cz = self.center
        # Screen up is -z when looking straight down; tilting lifts +y into view.
        depth = (z - cz) * math.cos(self.tilt) - y * math.sin(self.tilt)
        px = (x - cx) / self.upp + self.viewport_size[0] / 2
        py = depth / self.upp + self.viewport_size[1] / 2
        return (int(px), int(py))

    def zoom(self, factor, pivot_screen: Optional[Tuple[int, int]] = None):
        factor = clamp(factor, 0.05, 20.0)
        before = None
        if pivot_screen is not None:
            before = self._screen_to_plane(pivot_screen)
        self.upp = clamp(self.upp * (1.0 / factor), MIN_UNITS_PER_PIXEL, MAX_UNITS_PER_PIXEL)
        if pivot_screen is not None and before is not None:
            after = self._screen_to_plane(pivot_screen)
            self.center[0] += (before[0] - after[0])
            self.center[1] += (before[1] - after[1])

    def pan_pixels(self, dx_pixels, dy_pixels):
        self.center[0] -= dx_pixels * self.upp
        self.center[1] -= dy_pixels * self.upp / max(math.cos(self.tilt), 1e-3)

    def _screen_to_plane(self, screen: Tuple[int, int]) -> Tuple[float, float]:
        """Inverse projection onto the y = 0 plane."""
        cx, cz = self.center
        x = (screen[0] - self.viewport_size[0] / 2) * self.upp + cx
        z = (screen[1] - self.viewport_size[1] / 2) * self.upp / max(math.cos(self.tilt), 1e-3) + cz
        return (x, z)
