"""Particle-based search for an intermediate goal through an ESDF grid."""

from __future__ import annotations

import enum
import itertools
import math
import random
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from mavplan.constraints import PhysicalConstraints
from mavplan.utils import rand_m_to_n

Index = Tuple[int, int, int]

_COORDINATE_EPSILON = 1e-6
_PATH_STEP = 10


def _build_offsets() -> List[Index]:
    faces = [(-1, 0, 0), (1, 0, 0), (0, -1, 0), (0, 1, 0), (0, 0, -1), (0, 0, 1)]
    edges = []
    for free_axis in (2, 1, 0):
        for a, b in itertools.product((-1, 1), repeat=2):
            offset = [a, b]
            offset.insert(free_axis, 0)
            edges.append(tuple(offset))
    corners = list(itertools.product((-1, 1), repeat=3))
    return faces + edges + corners


_NEIGHBOR_OFFSETS: List[Index] = _build_offsets()


@dataclass
class ShotgunParameters:
    """Probabilities of each particle move; the remainder is a random move."""

    probability_follow_goal: float = 0.25
    probability_follow_gradient: float = 0.25
    robot_radius_inflation: float = 0.1


class Decision(enum.Enum):
    FOLLOW_GOAL = 0
    FOLLOW_GRADIENT = 1
    RANDOM = 2


@dataclass
class EsdfVoxel:
    """Distance to the nearest obstacle, and whether it has been observed."""

    distance: float = 0.0
    observed: bool = False


class EsdfGrid:
    """A sparse Euclidean signed distance field indexed by global voxel index."""

    def __init__(self, voxel_size: float) -> None:
        if voxel_size <= 0:
            raise ValueError("voxel size must be positive")
        self.voxel_size = float(voxel_size)
        self._voxels: Dict[Index, EsdfVoxel] = {}

    def set_voxel(self, index: Sequence[int], distance: float, observed: bool = True) -> None:
        self._voxels[tuple(int(i) for i in index)] = EsdfVoxel(float(distance), observed)

    def voxel(self, index: Sequence[int]) -> Optional[EsdfVoxel]:
        return self._voxels.get(tuple(int(i) for i in index))

    def index_of(self, point: Sequence[float]) -> Index:
        """Global index of the voxel containing ``point``."""
        inverse = 1.0 / self.voxel_size
        x, y, z = (math.floor(c * inverse + _COORDINATE_EPSILON) for c in point)
        return (x, y, z)

    def center_of(self, index: Sequence[int]) -> np.ndarray:
        return (np.asarray(index, dtype=float) + 0.5) * self.voxel_size


@dataclass
class ShotgunResult:
    """The best point reached and the coarse path that led there."""

    best_goal: np.ndarray
    path: List[np.ndarray] = field(default_factory=list)


def _distance(a: Index, b: Index) -> float:
    return math.sqrt(sum((p - q) ** 2 for p, q in zip(a, b)))


class ShotgunPlanner:
    """Shoots random-walk particles from the start toward the goal.

    The first particle always heads straight for the goal; the rest mix goal
    seeking, obstacle avoidance and random moves.
    """

    def __init__(
        self,
        params: Optional[ShotgunParameters] = None,
        constraints: Optional[PhysicalConstraints] = None,
    ) -> None:
        self.params = params if params is not None else ShotgunParameters()
        self.constraints = constraints if constraints is not None else PhysicalConstraints()
        self._esdf_map: Optional[EsdfGrid] = None
        self._rng = random.Random()

    def update_from_params(self, params: Mapping[str, Any]) -> None:
        for name in (
            "robot_radius_inflation",
            "probability_follow_goal",
            "probability_follow_gradient",
        ):
            if name in params:
                setattr(self.params, name, float(params[name]))

    def set_physical_constraints(self, constraints: PhysicalConstraints) -> None:
        """Use ``constraints`` with the robot radius inflated by the parameters."""
        self.constraints = replace(
            constraints,
            robot_radius=constraints.robot_radius + self.params.robot_radius_inflation,
        )

    def set_esdf_map(self, esdf_map: EsdfGrid) -> None:
        if esdf_map is None:
            raise ValueError("an ESDF map is required")
        self._esdf_map = esdf_map

    def set_seed(self, seed: int) -> None:
        self._rng.seed(seed)

    def shoot_particles(
        self,
        num_particles: int,
        max_steps: int,
        start: Sequence[float],
        goal: Sequence[float],
    ) -> ShotgunResult:
        """Return the reachable point closest to ``goal`` and the path to it."""
        if self._esdf_map is None:
            raise RuntimeError("no ESDF map set")
        if num_particles < 1:
            raise ValueError("at least one particle is needed")
        grid = self._esdf_map
        goal = np.asarray(goal, dtype=float).reshape(3)

        start_index = grid.index_of(start)
        goal_index = grid.index_of(goal)

        best_distance = math.inf
        best_index = start_index
        best_path: List[Index] = []
        last_index = start_index

        for n_particle in range(num_particles):
            reached_goal = False
            current = start_index
            current_path = [start_index]
            for step in range(max_steps):
                valid = self._valid_neighbors(current, step, last_index)
                if not valid:
                    break
                last_index = current

                decision = self._select_decision(n_particle)
                if decision is Decision.FOLLOW_GOAL:
                    best_goal_distance = math.inf
                    for neighbor in valid:
                        neighbor_distance = _distance(goal_index, neighbor)
                        if neighbor_distance < best_goal_distance:
                            best_goal_distance = neighbor_distance
                            current = neighbor
                    # Distances are in voxel units here.
                    if best_goal_distance < 1.0:
                        reached_goal = True
                        break
                elif decision is Decision.FOLLOW_GRADIENT:
                    highest = 0.0
                    for neighbor in valid:
                        obstacle_distance = grid.voxel(neighbor).distance
                        if obstacle_distance > highest:
                            highest = obstacle_distance
                            current = neighbor
                else:
                    choice = rand_m_to_n(0.0, len(valid) - 1.0, self._rng)
                    current = valid[math.floor(choice + 0.5)]

                if step % _PATH_STEP == 0:
                    current_path.append(current)

            current_distance = _distance(goal_index, current)
            if current_distance < best_distance:
                best_distance = current_distance
                best_index = current
                best_path = current_path + [current]
            if reached_goal:
                break

        best_goal = goal.copy() if best_index == goal_index else grid.center_of(best_index)
        return ShotgunResult(
            best_goal=best_goal, path=[grid.center_of(index) for index in best_path]
        )

    def _valid_neighbors(self, current: Index, step: int, last_index: Index) -> List[Index]:
        grid = self._esdf_map
        valid = []
        for offset in _NEIGHBOR_OFFSETS:
            neighbor = (
                current[0] + offset[0],
                current[1] + offset[1],
                current[2] + offset[2],
            )
            voxel = grid.voxel(neighbor)
            if (
                voxel is None
                or not voxel.observed
                or voxel.distance < self.constraints.robot_radius
            ):
                continue
            if step > 0 and neighbor == last_index:
                continue
            valid.append(neighbor)
        return valid

    def _select_decision(self, n_particle: int) -> Decision:
        if n_particle == 0:
            return Decision.FOLLOW_GOAL
        probability = rand_m_to_n(0.0, 1.0, self._rng)
        if probability < self.params.probability_follow_goal:
            return Decision.FOLLOW_GOAL
        if probability < (
            self.params.probability_follow_goal + self.params.probability_follow_gradient
        ):
            return Decision.FOLLOW_GRADIENT
        return Decision.RANDOM