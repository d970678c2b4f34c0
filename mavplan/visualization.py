"""Visualization markers for sampled paths and waypoints."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field, replace
from typing import List, Sequence, Tuple

from mavplan.color import ColorRGBA
from mavplan.utils import TrajectoryPoint

_MAX_SAMPLES = 1000
_MAX_MAGNITUDE = 1.0e4


class MarkerType(enum.IntEnum):
    ARROW = 0
    CUBE = 1
    SPHERE = 2
    CYLINDER = 3
    LINE_STRIP = 4
    LINE_LIST = 5
    CUBE_LIST = 6
    SPHERE_LIST = 7
    POINTS = 8
    TEXT_VIEW_FACING = 9


Point = Tuple[float, float, float]


@dataclass
class Marker:
    """A drawable marker: a shape, a colour and a list of points."""

    type: MarkerType = MarkerType.ARROW
    ns: str = ""
    id: int = 0
    frame_id: str = ""
    stamp: float = 0.0
    color: ColorRGBA = field(default_factory=ColorRGBA)
    scale: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    points: List[Point] = field(default_factory=list)
    text: str = ""


def _as_point(point: TrajectoryPoint) -> Point:
    x, y, z = point.position
    return (float(x), float(y), float(z))


def _base_marker(
    marker_type: MarkerType, frame_id: str, color: ColorRGBA, name: str, scale: float
) -> Marker:
    return Marker(
        type=marker_type,
        ns=name,
        frame_id=frame_id,
        stamp=time.time(),
        color=replace(color, a=0.75),
        scale=(scale, scale, scale),
    )


def create_marker_for_path(
    path: Sequence[TrajectoryPoint],
    frame_id: str,
    color: ColorRGBA,
    name: str,
    scale: float,
) -> Marker:
    """A line strip through the path, subsampled to at most about 1000 points.

    Points with any coordinate beyond +/-1e4 are left out.
    """
    marker = _base_marker(MarkerType.LINE_STRIP, frame_id, color, name, scale)
    subsample = 1
    while len(path) // subsample > _MAX_SAMPLES:
        subsample *= 10

    for point in path[subsample - 1 :: subsample]:
        if (
            point.position.max() > _MAX_MAGNITUDE
            or point.position.min() < -_MAX_MAGNITUDE
        ):
            continue
        marker.points.append(_as_point(point))
    return marker


def create_marker_for_waypoints(
    path: Sequence[TrajectoryPoint],
    frame_id: str,
    color: ColorRGBA,
    name: str,
    scale: float,
) -> Marker:
    """A list of spheres, one per waypoint."""
    marker = _base_marker(MarkerType.SPHERE_LIST, frame_id, color, name, scale)
    marker.points.extend(_as_point(point) for point in path)
    return marker