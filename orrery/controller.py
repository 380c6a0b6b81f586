#!/usr/bin/env python3
"""
Simulation controller: shared state between the UI thread (Dear PyGui) and the
rendering thread (Pygame).

The planetary system itself is not thread-safe; every access from the host goes
through this controller, which guards it with a re-entrant lock and hands out
copies of the transforms so drawing never races an update.
"""
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .catalog import SOLAR_SYSTEM, Catalog
from .constants import DEFAULT_TIME_SCALE
from .data_models import RenderShapeData
from .planetary_system import PlanetarySystem

logger = logging.getLogger(__name__)


@dataclass
class FrameSnapshot:
    """Copy of everything the viewport needs to draw one frame."""
    shapes: List[RenderShapeData]
    body_ctms: List[np.ndarray]
    orbit_ctms: List[np.ndarray]
    sim_time: float
    playing: bool
    time_scale: float


class SimulationController:
    """
    Owns the current PlanetarySystem and its render payloads.
    Includes thread-safe operations guarded by a lock.
    """
    def __init__(self, catalog: Catalog = SOLAR_SYSTEM, seed: Optional[int] = None):
        self.lock = threading.RLock()
        self.running = True  # app running
        self.playing = True  # simulation running
        self.time_scale = DEFAULT_TIME_SCALE
        self.show_orbits = True
        self.selected_index: Optional[int] = None
        self.sim_time = 0.0

        self.catalog = catalog
        self.system: Optional[PlanetarySystem] = None
        self.shapes: List[RenderShapeData] = []
        self.rebuild(catalog, seed)

    def rebuild(self, catalog: Optional[Catalog] = None, seed: Optional[int] = None) -> None:
        """
        Replace the current system with a freshly built one.

        The new system is built before the old one is released, so a rejected
        catalog leaves the running system untouched.
        """
        if catalog is None:
            catalog = self.catalog
        system = PlanetarySystem()
        shapes = system.build(catalog, np.random.default_rng(seed))
        with self.lock:
            old = self.system
            self.system = system
            self.shapes = shapes
            self.catalog = catalog
            self.sim_time = 0.0
            self.selected_index = None
        if old is not None:
            old.close()
        logger.info("Loaded %r into the controller", catalog.name)

    def set_time_scale(self, s: float):
        with self.lock:
            self.time_scale = max(0.0, float(s))

    def set_playing(self, playing: bool):
        with self.lock:
            self.playing = bool(playing)

    def toggle_play(self) -> bool:
        with self.lock:
            self.playing = not self.playing
            return self.playing

    def step(self, dt_real_seconds: float):
        """Advance the system by real time scaled by the current time scale."""
        with self.lock:
            sim_dt = dt_real_seconds * self.time_scale
            if sim_dt <= 0:
                return
            self.system.advance(sim_dt)
            self.sim_time += sim_dt

    def tick(self, dt_real_seconds: float):
        """Per-frame hook for the render loop: steps only while playing."""
        with self.lock:
            if self.playing:
                self.step(dt_real_seconds)

    def body_names(self) -> List[str]:
        with self.lock:
            return [s.name for s in self.shapes]

    def body_labels(self) -> List[str]:
        """List-box labels, numbered so that bodies sharing a name stay distinct."""
        with self.lock:
            return [f"{i + 1}. {s.name}" for i, s in enumerate(self.shapes)]

    def select_label(self, label: str) -> Optional[int]:
        """Select the body shown as ``label`` by its position; returns the index or None."""
        with self.lock:
            labels = self.body_labels()
            index = labels.index(label) if label in labels else None
            self.select(index)
            return index

    def select(self, index: Optional[int]):
        with self.lock:
            if index is not None and not 0 <= index < len(self.shapes):
                index = None
            self.selected_index = index

    def selected_node_summary(self) -> Optional[str]:
        with self.lock:
            if self.selected_index is None:
                return None
            shape = self.shapes[self.selected_index]
            name = shape.name
            for node in self.system.nodes():
                if node.render_handle is shape:
                    x, y, z = node.translate_mat[:3, 3]
                    return (f"{name}: phase {node.phase:.3f} rad, spin {node.spin_angle:.3f} rad, "
                            f"pos ({x:.2f}, {y:.2f}, {z:.2f})")
            return None

    def snapshot(self) -> FrameSnapshot:
        with self.lock:
            return FrameSnapshot(
                shapes=list(self.shapes),
                body_ctms=[s.ctm.copy() for s in self.shapes],
                orbit_ctms=self.system.orbit_loci() if self.show_orbits else [],
                sim_time=self.sim_time,
                playing=self.playing,
                time_scale=self.time_scale,
            )

    def shutdown(self):
        with self.lock:
            self.running = False
            if self.system is not None:
                self.system.close()
