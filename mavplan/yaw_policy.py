"""Assigning yaw angles along a sampled path under a yaw-rate limit."""

from __future__ import annotations

import copy
import enum
import math
from typing import List, Optional, Sequence

import numpy as np

from mavplan.constraints import PhysicalConstraints
from mavplan.utils import TrajectoryPoint

_MIN_VELOCITY_NORM = 0.1
_MIN_FACING_OFFSET = 1e-4


class PolicyType(enum.Enum):
    """How the yaw along a path is chosen."""

    FROM_PLAN = 0
    VELOCITY_VECTOR = 1
    ANTICIPATE_VELOCITY_VECTOR = 2
    POINT_FACING = 3
    CONSTANT = 4


def _horizontal(velocity: np.ndarray) -> np.ndarray:
    flat = np.array(velocity, dtype=float)
    flat[2] = 0.0
    return flat


class YawPolicy:
    """Sets the yaw of each point of a path according to a policy.

    A negative yaw-rate limit means the rate is not limited.
    """

    def __init__(
        self,
        policy: PolicyType = PolicyType.FROM_PLAN,
        constant_yaw: float = 0.0,
        facing_point: Optional[Sequence[float]] = None,
    ) -> None:
        self.policy = policy
        self.constant_yaw = constant_yaw
        self.facing_point = (
            np.zeros(3)
            if facing_point is None
            else np.asarray(facing_point, dtype=float).reshape(3).copy()
        )
        self._sampling_dt = -1.0
        self._yaw_rate_max = -1.0

    @property
    def sampling_dt(self) -> float:
        return self._sampling_dt

    @property
    def yaw_rate_max(self) -> float:
        return self._yaw_rate_max

    def set_physical_constraints(self, constraints: PhysicalConstraints) -> None:
        """Take the sampling step and yaw-rate limit from ``constraints``."""
        self._sampling_dt = constraints.sampling_dt
        self._yaw_rate_max = constraints.yaw_rate_max

    def set_sampling_dt(self, sampling_dt: float) -> None:
        if sampling_dt <= 0.0:
            raise ValueError("Sampling dt must be non-zero and positive")
        self._sampling_dt = sampling_dt

    def set_yaw_rate_max(self, yaw_rate_max: float) -> None:
        if yaw_rate_max <= 0.0:
            raise ValueError("Max yaw rate must be positive")
        self._yaw_rate_max = yaw_rate_max

    def deactivate_max_yaw_rate(self) -> None:
        self._yaw_rate_max = -1.0

    def apply_policy(self, path: Sequence[TrajectoryPoint]) -> List[TrajectoryPoint]:
        """Return a copy of ``path`` with the policy applied."""
        result = [copy.deepcopy(point) for point in path]
        self.apply_policy_in_place(result)
        return result

    def apply_policy_in_place(self, path: List[TrajectoryPoint]) -> None:
        """Overwrite the orientation of every point in ``path``."""
        if not path:
            return
        last_yaw = path[0].yaw()

        if self.policy is PolicyType.FROM_PLAN:
            return
        if self.policy is PolicyType.VELOCITY_VECTOR:
            self._track_velocity(path, forward=True, last_yaw=last_yaw, valid=True)
        elif self.policy is PolicyType.ANTICIPATE_VELOCITY_VECTOR:
            initial_yaw = last_yaw
            self._track_velocity(path, forward=False, last_yaw=last_yaw, valid=False)
            # Re-run forward so that the initial yaw is respected.
            path[0].set_from_yaw(initial_yaw)
            last_yaw = initial_yaw
            for point in path:
                yaw = self._feasible_yaw(last_yaw, point.yaw())
                point.set_from_yaw(yaw)
                last_yaw = yaw
        elif self.policy is PolicyType.POINT_FACING:
            for point in path:
                facing = self.facing_point - point.position
                desired_yaw = last_yaw
                if (
                    abs(facing[0]) > _MIN_FACING_OFFSET
                    or abs(facing[1]) > _MIN_FACING_OFFSET
                ):
                    desired_yaw = math.atan2(facing[1], facing[0])
                yaw = self._feasible_yaw(last_yaw, desired_yaw)
                point.set_from_yaw(yaw)
                last_yaw = yaw
        elif self.policy is PolicyType.CONSTANT:
            last_yaw = self.constant_yaw
            for point in path:
                yaw = self._feasible_yaw(last_yaw, self.constant_yaw)
                point.set_from_yaw(yaw)
                last_yaw = yaw

    def _track_velocity(
        self,
        path: List[TrajectoryPoint],
        forward: bool,
        last_yaw: float,
        valid: bool,
    ) -> None:
        """Face along the horizontal velocity, looking ahead over slow points.

        Walks the path forward or backward; "ahead" follows the walk direction.
        """
        count = len(path)
        order = range(count) if forward else range(count - 1, -1, -1)
        for idx in order:
            point = path[idx]
            velocity_xy = _horizontal(point.velocity)
            if np.linalg.norm(velocity_xy) > _MIN_VELOCITY_NORM:
                desired_yaw = math.atan2(velocity_xy[1], velocity_xy[0])
                if not valid:
                    last_yaw = desired_yaw
                yaw = self._feasible_yaw(last_yaw, desired_yaw)
                point.set_from_yaw(yaw)
                last_yaw = yaw
                valid = True
                continue

            ahead = range(idx + 1, count) if forward else range(idx, -1, -1)
            for j in ahead:
                if np.linalg.norm(velocity_xy) >= _MIN_VELOCITY_NORM:
                    break
                velocity_xy = _horizontal(path[j].velocity)
            if np.linalg.norm(velocity_xy) > _MIN_VELOCITY_NORM:
                desired_yaw = math.atan2(velocity_xy[1], velocity_xy[0])
            else:
                desired_yaw = last_yaw
            yaw = self._feasible_yaw(last_yaw, desired_yaw)
            point.set_from_yaw(yaw)
            last_yaw = yaw

    def _feasible_yaw(self, last_yaw: float, desired_yaw: float) -> float:
        if self._yaw_rate_max < 0:
            return desired_yaw
        if self._sampling_dt < 0:
            raise ValueError("sampling dt has to be set to limit the yaw rate")
        delta = math.fmod(desired_yaw - last_yaw, 2 * math.pi)
        if delta < -math.pi:
            delta += 2 * math.pi
        elif delta > math.pi:
            delta -= 2 * math.pi

        max_step = self._yaw_rate_max * self._sampling_dt
        if abs(delta) > max_step:
            direction = 1.0 if delta > 0.0 else -1.0
            return last_yaw + direction * max_step
        return desired_yaw