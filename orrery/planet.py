#!/usr/bin/env python3
"""
Scene-graph node for one celestial body.

A Planet owns its children exclusively and refers to its parent and to its render
payload through weak references only, so dropping the root releases the whole tree
and never releases a payload.

Transforms
- translate_mat: pure translation to the body's position; composed down the tree so
  children orbit their parent's position.
- orient_mat: rotation taking the vertical onto the body's axis; it fixes the
  orbit plane and the pole of the sphere.
- ctm: full render transform, translate_mat @ spin @ orient_mat @ scale.
"""
import logging
import weakref
from typing import Iterator, List, Optional, Sequence

import numpy as np

from .data_models import RenderShapeData
from .vector_utils import align_vertical, rotation, translation, uniform_scale

logger = logging.getLogger(__name__)


class Planet:
    """
    One body of the planetary system.

    Rates are in radians per simulation second; ``phase`` and ``spin_angle``
    accumulate without wrapping since only their trigonometric image is used.
    """

    def __init__(self,
                 name: str,
                 scale: float,
                 orbital_rate: float,
                 self_spin_rate: float,
                 phase: float,
                 orbit_radius: float,
                 axis: Sequence[float],
                 render_handle: Optional[RenderShapeData] = None):
        self.name = name
        self.scale = float(scale)
        self.orbital_rate = float(orbital_rate)
        self.self_spin_rate = float(self_spin_rate)
        self.phase = float(phase)
        self.spin_angle = 0.0
        self.orbit_radius = float(orbit_radius)
        self.axis = np.asarray(axis, dtype=float)
        self.children: List["Planet"] = []
        self.released = False

        self._parent: Optional[weakref.ref] = None
        self._render_handle = weakref.ref(render_handle) if render_handle is not None else None

        self.orient_mat = align_vertical(self.axis)
        self.translate_mat = np.eye(4)
        self.ctm = np.eye(4)

    def __repr__(self):
        return (f"Planet({self.name!r}, scale={self.scale:.3f}, orbit_radius={self.orbit_radius:.3f}, "
                f"phase={self.phase:.3f}, children={len(self.children)})")

    @property
    def parent(self) -> Optional["Planet"]:
        return self._parent() if self._parent is not None else None

    @property
    def render_handle(self) -> Optional[RenderShapeData]:
        return self._render_handle() if self._render_handle is not None else None

    def add_child(self, child: "Planet") -> None:
        """
        Append ``child`` to this node's children and point it back at this node.

        A node belongs to at most one parent and may not become its own ancestor.
        """
        if child.parent is not None:
            raise ValueError(f"{child.name} already belongs to {child.parent.name}")
        node: Optional[Planet] = self
        while node is not None:
            if node is child:
                raise ValueError(f"attaching {child.name} under {self.name} would create a cycle")
            node = node.parent
        child._parent = weakref.ref(self)
        self.children.append(child)

    def local_offset(self) -> np.ndarray:
        """Position relative to the parent: orbit radius along the tilted orbit plane at the current phase."""
        offset = np.array([self.orbit_radius, 0.0, 0.0, 0.0])
        return (rotation(self.axis, self.phase) @ self.orient_mat @ offset)[:3]

    def refresh(self, parent_translate: Optional[np.ndarray] = None) -> None:
        """Recompute this node's transforms from its current phase and spin angle."""
        base = np.eye(4) if parent_translate is None else parent_translate
        self.translate_mat = base @ translation(self.local_offset())
        self.ctm = (self.translate_mat
                    @ rotation(self.axis, self.spin_angle)
                    @ self.orient_mat
                    @ uniform_scale(self.scale))
        shape = self.render_handle
        if shape is not None:
            shape.ctm = self.ctm.copy()

    def update_ctm(self, delta_time: float, parent_translate: Optional[np.ndarray] = None) -> None:
        """
        Advance this node and its subtree by ``delta_time`` (pre-order).
        """
        self.phase += self.orbital_rate * delta_time
        self.spin_angle += self.self_spin_rate * delta_time
        self.refresh(parent_translate)
        for child in self.children:
            child.update_ctm(delta_time, self.translate_mat)

    def orbit_ctm(self) -> np.ndarray:
        """
        Transform of this node's orbit ring: a unit-diameter circle in the XZ plane
        scaled to the orbit, tilted by the axis and centered on the parent.
        """
        parent = self.parent
        if parent is None:
            raise ValueError(f"{self.name} has no parent and therefore no orbit")
        return parent.translate_mat @ uniform_scale(2 * self.orbit_radius) @ self.orient_mat

    def iter_preorder(self) -> Iterator["Planet"]:
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_postorder(self) -> Iterator["Planet"]:
        """Yield every node of the subtree, children before their parent."""
        stack = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded:
                yield node
                continue
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))

    def release(self) -> None:
        """Drop this node's links to its children, parent and render payload."""
        if self.released:
            raise RuntimeError(f"{self.name} was already released")
        self.children.clear()
        self._parent = None
        self._render_handle = None
        self.released = True
        logger.debug("Released %s", self.name)
