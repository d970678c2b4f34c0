"""Physical limits shared by all planners."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass
class PhysicalConstraints:
    """Velocity, acceleration, yaw-rate, size and sampling limits of a vehicle."""

    v_max: float = 1.0  # m/s
    a_max: float = 2.0  # m/s^2
    yaw_rate_max: float = math.pi / 4.0  # rad/s
    robot_radius: float = 1.0  # m
    sampling_dt: float = 0.01  # s

    def update_from_params(self, params: Mapping[str, Any]) -> None:
        """Override the fields named in ``params``; others keep their values."""
        for name in ("v_max", "a_max", "yaw_rate_max", "robot_radius", "sampling_dt"):
            if name in params:
                setattr(self, name, float(params[name]))