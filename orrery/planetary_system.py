#!/usr/bin/env python3
"""
Planetary system: builds the scene graph from a catalog, advances it, and extracts
orbit-path geometry for rendering.

Responsibilities
- Validate a catalog and turn its records into scaled Planet nodes.
- Assemble the tree: central body at the root, orbiting bodies as its children in
  catalog order, the satellite under its host body.
- Advance every node per frame and hand back body and orbit-ring transforms.
- Release the tree, children before parents, when closed or garbage collected.

Ownership
- The system owns the tree. Render payloads returned by build() are owned by the
  caller; nodes keep weak references to them.

Threading
- Not thread-safe. Hosts that advance and read from different threads must lock
  around those calls (see SimulationController).
"""
import logging
import weakref
from typing import List, Optional

import numpy as np

from .catalog import SOLAR_SYSTEM, Catalog, validate_catalog
from .constants import (
    CENTRAL_BLEND,
    DEFAULT_DIFFUSE,
    ORBITING_BLEND,
    SATELLITE_DIAMETER_DIVISOR,
    SATELLITE_RADIUS_MULTIPLIER,
    TEXTURE_REPEAT_U,
    TEXTURE_REPEAT_V,
    TWO_PI,
    VERTICAL_AXIS,
)
from .data_models import CelestialBodyRecord, PrimitiveType, RenderShapeData, SceneMaterial
from .planet import Planet
from .scaling import compute_axis, scale_angular_rate, scale_diameter, scale_orbital_radius

logger = logging.getLogger(__name__)


def _release_tree(tree: List[Planet]) -> None:
    if not tree:
        return
    root = tree.pop()
    count = 0
    for node in root.iter_postorder():
        node.release()
        count += 1
    logger.debug("Released %d nodes", count)


def _make_shape(record: CelestialBodyRecord, blend: float) -> RenderShapeData:
    material = SceneMaterial(
        texture=record.texture,
        diffuse=DEFAULT_DIFFUSE,
        blend=blend,
        repeat_u=TEXTURE_REPEAT_U,
        repeat_v=TEXTURE_REPEAT_V,
    )
    return RenderShapeData(record.name, PrimitiveType.SPHERE, material, color=record.color)


class PlanetarySystem:
    """
    Owner of the planetary scene graph.

    Usage:
        with PlanetarySystem() as system:
            shapes = system.build(rng=np.random.default_rng(0))
            system.advance(dt)
            rings = system.orbit_loci()
    """

    def __init__(self):
        self._tree: List[Planet] = []
        self._closed = False
        self._finalizer = weakref.finalize(self, _release_tree, self._tree)
        self._finalizer.atexit = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def root(self) -> Optional[Planet]:
        return self._tree[0] if self._tree else None

    @property
    def built(self) -> bool:
        return bool(self._tree)

    @property
    def closed(self) -> bool:
        return self._closed

    def _require_root(self) -> Planet:
        if not self._tree:
            raise RuntimeError("planetary system has not been built")
        return self._tree[0]

    def build(self, catalog: Catalog = SOLAR_SYSTEM, rng: Optional[np.random.Generator] = None) -> List[RenderShapeData]:
        """
        Build the scene graph from ``catalog``.

        Args:
            catalog: Bodies to model; validated before any node is created
            rng: Source of initial orbital phases, uniform over [0, 2*pi).
                 Defaults to a freshly seeded numpy Generator.

        Returns:
            Render payloads in order: central body, orbiting bodies in catalog
            order, satellite last. The caller owns them.
        """
        if self._closed:
            raise RuntimeError("planetary system is closed")
        if self._tree:
            raise RuntimeError("planetary system is already built")
        host_index = catalog.satellite_host_index
        if not 0 <= host_index < len(catalog.orbiting):
            raise IndexError(
                f"satellite host index {host_index} out of range for {len(catalog.orbiting)} orbiting bodies"
            )
        validate_catalog(catalog)
        if rng is None:
            rng = np.random.default_rng()

        shapes: List[RenderShapeData] = []

        # Central body
        central = catalog.central
        central_shape = _make_shape(central, CENTRAL_BLEND)
        root = Planet(central.name, scale_diameter(central.diameter), 0.0, 0.0, 0.0, 0.0,
                      VERTICAL_AXIS, central_shape)
        shapes.append(central_shape)

        # Orbiting bodies
        orbiting: List[Planet] = []
        for record in catalog.orbiting:
            shape = _make_shape(record, ORBITING_BLEND)
            planet = Planet(record.name,
                            scale_diameter(record.diameter),
                            scale_angular_rate(1 / record.orbital_period),
                            record.rotational_velocity / record.diameter,
                            float(rng.uniform(0.0, TWO_PI)),
                            scale_orbital_radius(record.orbital_radius),
                            compute_axis(record.orbital_inclination),
                            shape)
            root.add_child(planet)
            orbiting.append(planet)
            shapes.append(shape)

        # Satellite, scaled linearly since it orbits a planet
        sat = catalog.satellite
        sat_shape = _make_shape(sat, ORBITING_BLEND)
        satellite = Planet(sat.name,
                           sat.diameter / SATELLITE_DIAMETER_DIVISOR,
                           scale_angular_rate(1 / sat.orbital_period),
                           sat.rotational_velocity / sat.diameter,
                           float(rng.uniform(0.0, TWO_PI)),
                           sat.orbital_radius * SATELLITE_RADIUS_MULTIPLIER,
                           compute_axis(sat.orbital_inclination),
                           sat_shape)
        orbiting[host_index].add_child(satellite)
        shapes.append(sat_shape)

        root.update_ctm(0.0)
        self._tree.append(root)
        logger.info("Built %r: %d bodies, %s orbits %s",
                    catalog.name, len(shapes), sat.name, orbiting[host_index].name)
        return shapes

    def advance(self, delta_time: float) -> None:
        """Advance every body by ``delta_time`` simulation seconds."""
        if delta_time < 0:
            raise ValueError(f"delta_time must be non-negative, got {delta_time!r}")
        self._require_root().update_ctm(delta_time)

    def nodes(self) -> List[Planet]:
        """All nodes in pre-order."""
        return list(self._require_root().iter_preorder())

    def body_transforms(self) -> List[np.ndarray]:
        """Current render transform of every body, in pre-order."""
        return [node.ctm.copy() for node in self.nodes()]

    def orbit_loci(self) -> List[np.ndarray]:
        """
        Orbit-ring transforms, one per non-root node, in pre-order.

        Each maps a unit-diameter circle in the XZ plane onto the node's orbit
        around its parent's current position.
        """
        root = self._require_root()
        return [node.orbit_ctm() for node in root.iter_preorder() if node is not root]

    def close(self) -> None:
        """Release the tree. Safe to call more than once."""
        self._closed = True
        self._finalizer()
