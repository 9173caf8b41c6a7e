"""Quaternion and rotation helpers.

Quaternions are ``(x, y, z, w)`` sequences. Rotation matrices are 3x3 in
row-major form.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

__all__ = [
    "quat_to_rpy",
    "yaw_from_quat",
    "average_quaternion",
    "rotation_matrix_to_quaternion",
]

Quaternion = tuple[float, float, float, float]

_PITCH_SINE_LIMIT = 0.99999


def _asin(value: float) -> float:
    """Arc sine that yields NaN outside [-1, 1] instead of raising."""
    if value < -1.0 or value > 1.0:
        return math.nan
    return math.asin(value)


def quat_to_rpy(q: Sequence[float]) -> tuple[float, float, float]:
    """Return ``(roll, pitch, yaw)`` of the quaternion ``q = (x, y, z, w)``.

    The sine of the pitch is capped at 0.99999.
    """
    x, y, z, w = (float(v) for v in q)
    sin_pitch = min(-2.0 * (x * z - w * y), _PITCH_SINE_LIMIT)
    yaw = math.atan2(2 * (x * y + w * z), w * w + x * x - y * y - z * z)
    pitch = _asin(sin_pitch)
    roll = math.atan2(2 * (y * z + w * x), w * w - x * x - y * y + z * z)
    return roll, pitch, yaw


def yaw_from_quat(q: Sequence[float]) -> float:
    """Return the yaw angle of the quaternion ``q = (x, y, z, w)``."""
    return quat_to_rpy(q)[2]


def average_quaternion(
    quaternions: Sequence[Sequence[float]], weights: Sequence[float]
) -> Quaternion:
    """Weighted average orientation.

    The result is the normalised eigenvector belonging to the largest
    eigenvalue of ``Q Q^T``, where the columns of ``Q`` are the weighted
    quaternions. Its sign is arbitrary.
    """
    if len(quaternions) != len(weights):
        raise ValueError("quaternions and weights must have the same length")
    q = np.zeros((4, len(quaternions)))
    for column, (quat, weight) in enumerate(zip(quaternions, weights)):
        q[:, column] = np.asarray(quat, dtype=float) * float(weight)
    eigenvalues, eigenvectors = np.linalg.eig(q @ q.T)
    real_values = np.real(eigenvalues)
    max_idx = 0
    for idx in range(1, 4):
        if real_values[idx] > real_values[max_idx]:
            max_idx = idx
    vector = eigenvectors[:, max_idx]
    norm = np.linalg.norm(vector)
    if norm > 0.0:
        vector = vector / norm
    x, y, z, w = (float(np.real(v)) for v in vector)
    return x, y, z, w


def rotation_matrix_to_quaternion(rot: Sequence[Sequence[float]]) -> Quaternion:
    """Convert a row-major 3x3 rotation matrix to a quaternion ``(x, y, z, w)``."""
    r = np.asarray(rot, dtype=float)
    if r.shape != (3, 3):
        raise ValueError("rotation matrix must be 3x3")
    diagonal_sum = float(r[0, 0] + r[1, 1] + r[2, 2])
    if diagonal_sum > 0.0:
        s = math.sqrt(diagonal_sum + 1.0) * 2.0
        quat = (
            (r[2, 1] - r[1, 2]) / s,
            (r[0, 2] - r[2, 0]) / s,
            (r[1, 0] - r[0, 1]) / s,
            0.25 * s,
        )
    elif r[0, 0] > r[1, 1] and r[0, 0] > r[2, 2]:
        s = math.sqrt(1.0 + r[0, 0] - r[1, 1] - r[2, 2]) * 2.0
        quat = (
            0.25 * s,
            (r[0, 1] + r[1, 0]) / s,
            (r[0, 2] + r[2, 0]) / s,
            (r[2, 1] - r[1, 2]) / s,
        )
    elif r[1, 1] > r[2, 2]:
        s = math.sqrt(1.0 + r[1, 1] - r[0, 0] - r[2, 2]) * 2.0
        quat = (
            (r[0, 1] + r[1, 0]) / s,
            (r[0, 1] + r[1, 0]) / s,
            0.25 * s,
            (r[0, 2] - r[2, 0]) / s,
        )
    else:
        s = math.sqrt(1.0 + r[2, 2] - r[0, 0] - r[1, 1]) * 2.0
        quat = (
            (r[0, 2] + r[2, 0]) / s,
            (r[1, 2] + r[2, 1]) / s,
            0.25 * s,
            (r[1, 0] - r[0, 1]) / s,
        )
    x, y, z, w = (float(v) for v in quat)
    return x, y, z, w