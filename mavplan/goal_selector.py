"""Choosing intermediate goals when the local planner cannot reach the goal."""

from __future__ import annotations

import copy
import enum
import math
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

import numpy as np

from mavplan.utils import TrajectoryPoint, rand_m_to_n

Index = Tuple[int, int, int]
GainFunction = Callable[[TrajectoryPoint, int], float]

_CLOSE_ENOUGH = 0.1  # meters
_MIN_WEIGHT = 1e-6
_COORDINATE_EPSILON = 1e-6


class Strategy(enum.Enum):
    """How a new intermediate goal is picked."""

    NO_INTERMEDIATE_GOAL = 0
    RANDOM = 1
    LOCAL_EXPLORATION = 2


_STRATEGY_NAMES: Dict[str, Strategy] = {
    "none": Strategy.NO_INTERMEDIATE_GOAL,
    "random": Strategy.RANDOM,
    "local": Strategy.LOCAL_EXPLORATION,
    "local_exploration": Strategy.LOCAL_EXPLORATION,
}


@dataclass
class GoalPointSelectorParameters:
    """Settings of the goal point selector."""

    strategy: Strategy = Strategy.NO_INTERMEDIATE_GOAL
    # For all random-based selectors.
    random_sample_range: float = 5.0
    # For random sampling in general.
    max_random_tries: int = 100
    # For the exploration strategy.
    num_exploration_samples: int = 15
    exp_modulus: int = 20
    w_exploration: float = 1.0
    w_goal: float = 0.5


@dataclass
class TsdfVoxel:
    """Truncated signed distance and the weight of the observations behind it."""

    distance: float = 0.0
    weight: float = 0.0

    @property
    def is_free(self) -> bool:
        return self.weight >= _MIN_WEIGHT and self.distance > 0.0


class TsdfGrid:
    """A sparse truncated signed distance field addressed by position."""

    def __init__(self, voxel_size: float) -> None:
        if voxel_size <= 0:
            raise ValueError("voxel size must be positive")
        self.voxel_size = float(voxel_size)
        self._voxels: Dict[Index, TsdfVoxel] = {}

    def _index_of(self, position: Sequence[float]) -> Index:
        inverse = 1.0 / self.voxel_size
        x, y, z = (
            math.floor(float(c) * inverse + _COORDINATE_EPSILON) for c in position
        )
        return (x, y, z)

    def set_voxel(
        self, position: Sequence[float], distance: float, weight: float = 1.0
    ) -> None:
        """Store the voxel containing ``position``."""
        self._voxels[self._index_of(position)] = TsdfVoxel(float(distance), float(weight))

    def voxel_at(self, position: Sequence[float]) -> Optional[TsdfVoxel]:
        """The voxel containing ``position``, or None if it was never set."""
        return self._voxels.get(self._index_of(position))


class GoalPointSelector:
    """Picks the next goal for a local planner that got stuck."""

    def __init__(
        self,
        params: Optional[GoalPointSelectorParameters] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.params = params if params is not None else GoalPointSelectorParameters()
        self._rng = rng if rng is not None else random.Random()
        self._tsdf_map: Optional[TsdfGrid] = None
        self._gain_function: Optional[GainFunction] = None

    def update_from_params(self, params: Mapping[str, Any]) -> None:
        """Read ``goal_selector_strategy`` and ``goal_selector_range``."""
        if "goal_selector_strategy" in params:
            name = str(params["goal_selector_strategy"])
            if name not in _STRATEGY_NAMES:
                raise ValueError(f"Invalid goal selector strategy: {name}")
            self.params.strategy = _STRATEGY_NAMES[name]
        if "goal_selector_range" in params:
            self.params.random_sample_range = float(params["goal_selector_range"])

    def set_tsdf_map(
        self,
        tsdf_map: Optional[TsdfGrid],
        gain_function: Optional[GainFunction] = None,
    ) -> None:
        """Attach the map and the exploration gain of a pose.

        ``gain_function(pose, exp_modulus)`` scores how much a pose would
        explore; without one, exploration gain counts as zero.
        """
        self._tsdf_map = tsdf_map
        self._gain_function = gain_function

    def select_next_goal(
        self,
        global_goal: TrajectoryPoint,
        current_goal: TrajectoryPoint,
        current_pose: TrajectoryPoint,
    ) -> Optional[TrajectoryPoint]:
        """The goal to track next, or None if there is no new goal to try."""
        strategy = self.params.strategy
        if strategy is Strategy.NO_INTERMEDIATE_GOAL:
            return None

        # Whatever the strategy, fall back to the global goal first.
        if np.linalg.norm(current_goal.position - global_goal.position) > _CLOSE_ENOUGH:
            return copy.deepcopy(global_goal)

        if strategy is Strategy.RANDOM:
            return self._random_pose(current_pose, self.params.random_sample_range)

        if self._tsdf_map is None:
            return None
        return self._local_exploration_goal(global_goal, current_pose)

    def _random_pose(
        self, input_pose: TrajectoryPoint, range_meters: float
    ) -> TrajectoryPoint:
        theta = rand_m_to_n(0.0, math.pi * 2.0, self._rng)
        phi = rand_m_to_n(-math.pi / 2.0, math.pi / 2.0, self._rng)
        r = rand_m_to_n(0.0, range_meters, self._rng)
        offset = np.array(
            [
                r * math.cos(theta) * math.cos(phi),
                r * math.sin(phi),
                r * math.sin(theta) * math.cos(phi),
            ]
        )
        yaw = rand_m_to_n(-math.pi, math.pi, self._rng)
        sampled = TrajectoryPoint(position=input_pose.position + offset)
        sampled.set_from_yaw(yaw)
        return sampled

    def _random_free_pose(
        self, input_pose: TrajectoryPoint, range_meters: float
    ) -> Tuple[TrajectoryPoint, bool]:
        """Sample until a free pose is found; returns the last sample and success."""
        sampled = copy.deepcopy(input_pose)
        if self._tsdf_map is None:
            return sampled, False
        for _ in range(self.params.max_random_tries):
            sampled = self._random_pose(input_pose, range_meters)
            voxel = self._tsdf_map.voxel_at(sampled.position)
            if voxel is not None and voxel.is_free:
                return sampled, True
        return sampled, False

    def _exploration_gain(self, pose: TrajectoryPoint) -> float:
        if self._gain_function is None:
            return 0.0
        return float(self._gain_function(pose, self.params.exp_modulus))

    def _local_exploration_goal(
        self, global_goal: TrajectoryPoint, current_pose: TrajectoryPoint
    ) -> TrajectoryPoint:
        params = self.params
        max_goal_dist = (
            float(np.linalg.norm(global_goal.position - current_pose.position))
            + params.random_sample_range
        )
        best_gain = 0.0
        best_point = TrajectoryPoint()

        for _ in range(params.num_exploration_samples):
            sampled, _found = self._random_free_pose(
                current_pose, params.random_sample_range
            )
            exploration_gain = self._exploration_gain(sampled)

            travel = sampled.position - current_pose.position
            sampled.set_from_yaw(math.atan2(travel[1], travel[0]))

            # Normalized so scores are comparable across sampling ranges.
            goal_gain = (
                max_goal_dist
                - float(np.linalg.norm(global_goal.position - sampled.position))
            ) / max_goal_dist

            total_gain = (
                params.w_exploration * exploration_gain + params.w_goal * goal_gain
            )
            if total_gain >= best_gain:
                best_gain = total_gain
                best_point = sampled
        return best_point