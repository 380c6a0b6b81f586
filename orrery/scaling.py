#!/usr/bin/env python3
"""
Scaling from catalog values to render space.

Responsibilities
- Compress several orders of magnitude of astronomical size, distance and
  period into a visually legible render space.
- Derive the rotation axis of a body from its orbital inclination.

Units and conventions
- Diameters in kilometers [km], orbital radii in millions of kilometers
  [10^6 km], angular rates in radians per simulation second.
- Inclinations are given in degrees and measured from the vertical (+Y) axis,
  tilting about the X axis.

These are stylized mappings, not physical ones. The functions are pure; an
argument outside the valid domain raises ValueError instead of returning NaN.
"""
import math
from typing import Tuple

from .constants import (
    ANGULAR_RATE_FACTOR,
    DIAMETER_FACTOR,
    DIAMETER_LOG_OFFSET,
    INCLINATION_AXIS,
    ORBITAL_RADIUS_FACTOR,
    ORBITAL_RADIUS_LOG_OFFSET,
    VERTICAL_AXIS,
)
from .vector_utils import rotate_vector


def scale_diameter(diameter: float) -> float:
    """
    Map a diameter in km to a render-space scale.

        scale = (log10(d) - 3) * 0.5

    A 1000 km body maps to 0.

    Args:
        diameter: Body diameter in km (must be > 0)

    Returns:
        Render-space scale
    """
    if not diameter > 0:
        raise ValueError(f"diameter must be positive, got {diameter!r}")
    return (math.log10(diameter) - DIAMETER_LOG_OFFSET) * DIAMETER_FACTOR


def scale_orbital_radius(radius: float) -> float:
    """
    Map an orbital radius in 10^6 km to a render-space distance.

        distance = (log10(r) - 1.2) * 7

    Args:
        radius: Orbital radius in 10^6 km (must be > 0)

    Returns:
        Render-space distance from the parent
    """
    if not radius > 0:
        raise ValueError(f"orbital radius must be positive, got {radius!r}")
    return (math.log10(radius) - ORBITAL_RADIUS_LOG_OFFSET) * ORBITAL_RADIUS_FACTOR


def scale_angular_rate(v: float) -> float:
    """Map a raw rate (e.g. revolutions per day) to a render angular rate: sqrt(v) * 10."""
    if not v >= 0:
        raise ValueError(f"rate must be non-negative, got {v!r}")
    return math.sqrt(v) * ANGULAR_RATE_FACTOR


def compute_axis(inclination: float) -> Tuple[float, float, float]:
    """
    Get the rotational axis of a body from its inclination in degrees.

    An inclination of exactly 0 returns the vertical axis as-is, so untilted
    bodies get an exact (0, 1, 0) rather than a rotated approximation.
    """
    if inclination == 0:
        return VERTICAL_AXIS
    x, y, z = rotate_vector(VERTICAL_AXIS, INCLINATION_AXIS, math.radians(inclination))
    return (float(x), float(y), float(z))
