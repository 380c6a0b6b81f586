#!/usr/bin/env python3
"""
Homogeneous transform helpers for 3D scene-graph math.

All matrices are 4x4 float64 numpy arrays acting on column vectors, so
``a @ b`` applies ``b`` first. Rotations are built with scipy's Rotation.
"""
from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation as R


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def translation(offset: Sequence[float]) -> np.ndarray:
    m = np.eye(4)
    m[:3, 3] = offset
    return m


def uniform_scale(s: float) -> np.ndarray:
    m = np.eye(4)
    m[0, 0] = m[1, 1] = m[2, 2] = s
    return m


def rotation(axis: Sequence[float], angle: float) -> np.ndarray:
    """
    Rotation by ``angle`` radians about the unit vector ``axis``.
    """
    m = np.eye(4)
    m[:3, :3] = R.from_rotvec(np.asarray(axis, dtype=float) * angle).as_matrix()
    return m


def rotate_vector(vector: Sequence[float], axis: Sequence[float], angle: float) -> np.ndarray:
    rot = R.from_rotvec(np.asarray(axis, dtype=float) * angle)
    return rot.apply(np.asarray(vector, dtype=float))


def align_vertical(axis: Sequence[float]) -> np.ndarray:
    """
    Rotation taking the vertical (0, 1, 0) onto ``axis``.

    For an inclination-derived axis this is the rotation about X by the
    inclination angle.
    """
    up = np.array([0.0, 1.0, 0.0])
    target = np.asarray(axis, dtype=float)
    target = target / np.linalg.norm(target)
    cross = np.cross(up, target)
    sin_a = np.linalg.norm(cross)
    cos_a = float(np.dot(up, target))
    if sin_a < 1e-12:
        if cos_a > 0:
            return np.eye(4)
        return rotation((1.0, 0.0, 0.0), np.pi)
    return rotation(cross / sin_a, np.arctan2(sin_a, cos_a))
