"""Retiming helpers for sampled trajectories."""

from __future__ import annotations

from typing import List

from mavplan.utils import TrajectoryPoint


def retime_trajectory_monotonically_increasing(
    trajectory: List[TrajectoryPoint],
) -> None:
    """Make timestamps strictly dt apart, in place.

    The step dt is taken from the first positive gap between consecutive
    points; the trajectory is assumed to have been sampled at a constant dt.
    """
    if not trajectory:
        return
    current_time_ns = trajectory[0].time_from_start_ns
    dt_ns = 0
    for point in trajectory[1:]:
        if dt_ns <= 0:
            dt_ns = point.time_from_start_ns - current_time_ns
        current_time_ns += dt_ns
        point.time_from_start_ns = current_time_ns


def retime_trajectory_with_start_time_and_dt(
    start_time_ns: int, dt_ns: int, trajectory: List[TrajectoryPoint]
) -> None:
    """Assign timestamps start, start + dt, start + 2 dt, ... in place."""
    for k, point in enumerate(trajectory):
        point.time_from_start_ns = start_time_ns + k * dt_ns