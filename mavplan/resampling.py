"""Resampling a waypoint path into evenly timed segments."""

from __future__ import annotations

import copy
import logging
import math
from itertools import accumulate
from typing import List, Sequence

import numpy as np

from mavplan.constraints import PhysicalConstraints
from mavplan.utils import TrajectoryPoint

logger = logging.getLogger(__name__)


def compute_time_velocity_ramp(
    start: Sequence[float], goal: Sequence[float], v_max: float, a_max: float
) -> float:
    """Travel time between two points under a trapezoidal velocity profile."""
    distance = float(
        np.linalg.norm(np.asarray(goal, dtype=float) - np.asarray(start, dtype=float))
    )
    acc_time = v_max / a_max
    acc_distance = 0.5 * v_max * acc_time
    if distance < 2.0 * acc_distance:
        return 2.0 * math.sqrt(distance / a_max)
    return 2.0 * acc_time + (distance - 2.0 * acc_distance) / v_max


def resample_waypoints_from_visibility_graph(
    num_segments: int,
    constraints: PhysicalConstraints,
    waypoints: Sequence[TrajectoryPoint],
) -> List[TrajectoryPoint]:
    """Split the waypoint path into ``num_segments`` pieces of equal estimated time.

    Returns ``num_segments + 1`` points: the first waypoint, the split points
    placed on the original path, and the last waypoint.
    """
    if len(waypoints) < 2:
        raise ValueError("at least two waypoints are needed")
    if num_segments < 1:
        raise ValueError("num_segments must be at least 1")

    segment_times = [
        compute_time_velocity_ramp(
            previous.position, current.position, constraints.v_max, constraints.a_max
        )
        for previous, current in zip(waypoints, waypoints[1:])
    ]
    total_time = sum(segment_times)
    if total_time <= 0.0:
        raise ValueError("waypoints do not span any distance")

    time_per_segment = total_time / num_segments
    logger.info("Total time: %f Time per seg: %f", total_time, time_per_segment)

    # Time at which each original segment ends.
    segment_ends = list(accumulate(segment_times))

    result = [copy.deepcopy(waypoints[0])]
    input_index = 0
    time_so_far = 0.0
    for output_index in range(1, num_segments):
        target = time_per_segment * output_index
        while time_so_far < target:
            time_so_far = segment_ends[input_index]
            input_index += 1
        start = waypoints[input_index - 1].position
        direction = waypoints[input_index].position - start
        magnitude = 1.0 - (time_so_far - target) / segment_times[input_index - 1]
        result.append(TrajectoryPoint(position=start + magnitude * direction))
        logger.info(
            "Waypoint %d from waypoint %d at time: %f offset: %f",
            output_index,
            input_index,
            time_so_far,
            magnitude,
        )
    result.append(copy.deepcopy(waypoints[-1]))
    return result