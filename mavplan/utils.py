"""Trajectory points and small numeric helpers shared by the planners."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Iterable, Optional

import numpy as np


def _vector(values=None) -> np.ndarray:
    if values is None:
        return np.zeros(3)
    return np.asarray(values, dtype=float).reshape(3).copy()


@dataclass(eq=False)
class TrajectoryPoint:
    """A sampled state along a trajectory, expressed in the world frame.

    The orientation is a unit quaternion stored as (w, x, y, z).
    """

    position: np.ndarray = field(default_factory=_vector)
    velocity: np.ndarray = field(default_factory=_vector)
    acceleration: np.ndarray = field(default_factory=_vector)
    orientation: np.ndarray = field(
        default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0])
    )
    time_from_start_ns: int = 0

    def __post_init__(self) -> None:
        self.position = _vector(self.position)
        self.velocity = _vector(self.velocity)
        self.acceleration = _vector(self.acceleration)
        self.orientation = np.asarray(self.orientation, dtype=float).reshape(4).copy()
        self.time_from_start_ns = int(self.time_from_start_ns)

    def set_from_yaw(self, yaw: float) -> None:
        """Set the orientation to a pure rotation about the z axis."""
        half = yaw / 2.0
        self.orientation = np.array([math.cos(half), 0.0, 0.0, math.sin(half)])

    def yaw(self) -> float:
        """Yaw angle of the current orientation, in radians."""
        w, x, y, z = self.orientation
        return math.atan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z))


def compute_path_length(path: Iterable[TrajectoryPoint]) -> float:
    """Total length of the polyline through the points' positions."""
    distance = 0.0
    last: Optional[np.ndarray] = None
    for point in path:
        if last is not None:
            distance += float(np.linalg.norm(point.position - last))
        last = point.position
    return distance


def rand_m_to_n(m: float, n: float, rng: Optional[random.Random] = None) -> float:
    """A uniformly drawn number between m and n.

    Seed the given generator (or the module-level one) to make draws repeatable.
    """
    source = rng if rng is not None else random
    return m + source.random() * (n - m)