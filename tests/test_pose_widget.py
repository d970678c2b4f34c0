import math

import numpy as np
import pytest

from mavplan.edit_button import EditButton
from mavplan.pose_widget import PoseWidget
from mavplan.utils import TrajectoryPoint


def test_widget_and_button_share_id():
    pose_widget = PoseWidget("a")
    edit_button = EditButton("a")
    assert pose_widget.id == edit_button.id == "a"


def test_initial_cells_and_pose():
    widget = PoseWidget("a")
    assert widget.cells == ["0.00", "0.00", "0.00", "0.00"]
    assert widget.headers == ("x [m]", "y [m]", "z [m]", "yaw [°]")
    pose = widget.pose()
    assert np.allclose(pose.position, [0, 0, 0])
    assert pose.yaw() == pytest.approx(0.0)


def test_set_pose_formats_two_decimals_and_round_trips():
    widget = PoseWidget("start")
    events = []
    widget.pose_updated.append(lambda i, p: events.append(i))
    point = TrajectoryPoint(position=[1.234, -2.5, 3.0])
    point.set_from_yaw(math.pi / 2)
    widget.set_pose(point)
    assert widget.cells == ["1.23", "-2.50", "3.00", "90.00"]
    assert events == []
    pose = widget.pose()
    assert np.allclose(pose.position, [1.23, -2.5, 3.0])
    assert pose.yaw() == pytest.approx(math.pi / 2)


def test_set_cell_notifies_listeners():
    widget = PoseWidget("goal")
    events = []
    widget.pose_updated.append(lambda i, p: events.append((i, p)))
    widget.set_cell(0, "4.5")
    assert len(events) == 1
    ident, point = events[0]
    assert ident == "goal"
    assert np.allclose(point.position, [4.5, 0, 0])


def test_set_cell_rejects_invalid_input():
    widget = PoseWidget("goal")
    with pytest.raises(ValueError):
        widget.set_cell(1, "abc")
    with pytest.raises(IndexError):
        widget.set_cell(4, "1.0")
    assert widget.cells == ["0.00", "0.00", "0.00", "0.00"]