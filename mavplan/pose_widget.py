"""A one-row table holding a pose as x, y, z and yaw in degrees."""

from __future__ import annotations

import math
from typing import Callable, List

from mavplan.utils import TrajectoryPoint

PoseCallback = Callable[[str, TrajectoryPoint], None]

HEADERS = ("x [m]", "y [m]", "z [m]", "yaw [°]")
_COLUMNS = len(HEADERS)


def _parse_double(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise ValueError(f"not a number: {text!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"not a finite number: {text!r}")
    return value


class PoseWidget:
    """Editable pose cells; edits notify the ``pose_updated`` listeners."""

    def __init__(self, id: str) -> None:
        self.id = id
        self.headers = HEADERS
        self.cells: List[str] = ["0.00"] * _COLUMNS
        self.pose_updated: List[PoseCallback] = []

    def pose(self) -> TrajectoryPoint:
        """The pose the cells describe; yaw is converted to radians."""
        x, y, z, yaw_deg = (float(cell) for cell in self.cells)
        point = TrajectoryPoint(position=[x, y, z])
        point.set_from_yaw(math.radians(yaw_deg))
        return point

    def set_pose(self, point: TrajectoryPoint) -> None:
        """Show ``point`` with two decimals, without notifying listeners."""
        x, y, z = point.position
        values = (x, y, z, math.degrees(point.yaw()))
        self.cells = [f"{float(value):.2f}" for value in values]

    def set_cell(self, column: int, text: str) -> None:
        """Edit one cell as a user would and notify listeners of the new pose."""
        if not 0 <= column < _COLUMNS:
            raise IndexError(f"column {column} out of range")
        _parse_double(text)
        self.cells[column] = text
        point = self.pose()
        for callback in list(self.pose_updated):
            callback(self.id, point)