"""Point clouds for drawing the feasible region of a program with up to three variables."""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np


def points_to_array(points: Sequence[Mapping[str, float]], axes: Sequence[str]) -> np.ndarray:
    """Stack ``points`` into an ``(n, len(axes))`` array; missing coordinates are zero."""
    array = np.zeros((len(points), len(axes)))
    for row, point in enumerate(points):
        for col, axis in enumerate(axes):
            array[row, col] = point.get(axis, 0.0)
    return array


def to_3d(points: np.ndarray) -> np.ndarray:
    points = np.atleast_2d(np.asarray(points, dtype=float))
    if points.shape[1] > 3:
        raise ValueError(f"Cannot draw {points.shape[1]} dimensions; pick at most three axes.")
    padding = np.zeros((points.shape[0], 3 - points.shape[1]))
    return np.hstack([points, padding])


def rotation_matrix(axis: str, angle: float) -> np.ndarray:
    cos, sin = np.cos(angle), np.sin(angle)
    if axis == "x":
        return np.array([[1.0, 0.0, 0.0], [0.0, cos, -sin], [0.0, sin, cos]])
    if axis == "y":
        return np.array([[cos, 0.0, sin], [0.0, 1.0, 0.0], [-sin, 0.0, cos]])
    if axis == "z":
        return np.array([[cos, -sin, 0.0], [sin, cos, 0.0], [0.0, 0.0, 1.0]])
    raise ValueError(f"Unknown rotation axis '{axis}'; expected 'x', 'y' or 'z'.")


def rotate(points: np.ndarray, axis: str, angle: float) -> np.ndarray:
    return to_3d(points) @ rotation_matrix(axis, angle).T


def project_on_xy(points: np.ndarray) -> np.ndarray:
    # the camera looks along -z
    projected = to_3d(points).copy()
    projected[:, 2] = 0.0
    return projected
