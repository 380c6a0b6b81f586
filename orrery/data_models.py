#!/usr/bin/env python3
"""
Data models for the Orrery.

This module defines the catalog record and the render payload shared between the
scene graph, the host renderer, and the UI.

Units and usage
- Catalog records carry physical values: diameter in km, rotational velocity in km/h,
  orbital radius in 10^6 km, orbital period in days, inclination in degrees.
- Render payloads are created by PlanetarySystem.build and owned by the caller; the
  scene graph only keeps weak references to them and writes their ``ctm`` every frame.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class CelestialBodyRecord:
    """
    One catalog entry.

    Fields:
    - name: Identifier for the body
    - texture: Texture identifier handed to the renderer
    - diameter: Diameter in km
    - rotational_velocity: Equatorial rotation speed in km/h
    - orbital_radius: Mean distance from the parent in 10^6 km (0 for the central body)
    - orbital_period: Orbital period in days (0 for the central body)
    - orbital_inclination: Inclination in degrees
    - color: RGB tuple used by the flat viewport in place of the texture
    """
    name: str
    texture: str
    diameter: float
    rotational_velocity: float
    orbital_radius: float
    orbital_period: float
    orbital_inclination: float
    color: Tuple[int, int, int] = (200, 200, 255)


class PrimitiveType(Enum):
    SPHERE = "sphere"


@dataclass
class SceneMaterial:
    texture: str
    diffuse: Tuple[float, float, float, float] = (1.0, 1.0, 1.0, 0.0)
    blend: float = 1.0
    repeat_u: float = 1.0
    repeat_v: float = 1.0


@dataclass(eq=False)
class RenderShapeData:
    """
    Render payload for one body.

    ``initial_transform`` is the identity the payload was created with; ``ctm`` is the
    current cumulative transform, rewritten by the scene graph on every update.
    """
    name: str
    primitive: PrimitiveType
    material: SceneMaterial
    color: Tuple[int, int, int] = (200, 200, 255)
    initial_transform: np.ndarray = field(default_factory=lambda: np.eye(4))
    ctm: np.ndarray = field(default_factory=lambda: np.eye(4))
