from types import SimpleNamespace

import numpy as np
import pytest

from mavplan.interactive_markers import (
    KEEP_ALIVE,
    POSE_UPDATE,
    InteractiveMarker,
    InteractiveMarkerServer,
    MarkerControl,
    PlanningInteractiveMarkers,
)
from mavplan.utils import TrajectoryPoint


def _point(x, y, z, yaw=0.0):
    point = TrajectoryPoint(position=[x, y, z])
    point.set_from_yaw(yaw)
    return point


@pytest.fixture
def markers():
    planning = PlanningInteractiveMarkers()
    planning.initialize()
    return planning


def test_server_changes_visible_only_after_apply():
    server = InteractiveMarkerServer()
    server.insert(InteractiveMarker(name="a"))
    assert "a" not in server.markers
    server.apply_changes()
    assert "a" in server.markers
    assert server.erase("a") is True
    server.apply_changes()
    assert "a" not in server.markers


def test_server_set_pose_and_callback_on_missing_marker():
    server = InteractiveMarkerServer()
    assert server.set_pose("missing", _point(1, 2, 3)) is False
    assert server.set_callback("missing", lambda feedback: None) is False
    assert server.erase("missing") is False


def test_server_set_pose_moves_marker():
    server = InteractiveMarkerServer()
    server.insert(InteractiveMarker(name="a"))
    server.apply_changes()
    assert server.set_pose("a", _point(1, 2, 3))
    server.apply_changes()
    np.testing.assert_allclose(server.markers["a"].pose.position, [1, 2, 3])


def test_set_pose_marker_controls(markers):
    names = [control.name for control in markers.set_pose_marker.controls]
    assert names == [
        "rotate_yaw", "move z", "move x", "move y", "move x_y", "move y_x", "heli"
    ]
    assert markers.set_pose_marker.controls[0].interaction_mode == (
        MarkerControl.ROTATE_AXIS
    )
    assert markers.set_pose_marker.frame_id == "odom"


def test_enable_and_disable_set_pose_marker(markers):
    markers.enable_set_pose_marker(_point(1, 2, 3, 0.5))
    shown = markers.server.markers["set_pose"]
    np.testing.assert_allclose(shown.pose.position, [1, 2, 3])
    assert shown.pose.yaw() == pytest.approx(0.5)
    assert "set_pose" in markers.server.callbacks
    markers.disable_set_pose_marker()
    assert "set_pose" not in markers.server.markers
    assert "set_pose" not in markers.server.callbacks


def test_set_pose_moves_set_pose_marker(markers):
    markers.enable_set_pose_marker(_point(0, 0, 0))
    markers.set_pose(_point(4, 5, 6, -1.0))
    shown = markers.server.markers["set_pose"]
    np.testing.assert_allclose(shown.pose.position, [4, 5, 6])
    assert shown.pose.yaw() == pytest.approx(-1.0)


def test_feedback_pose_update_calls_callback(markers):
    received = []
    markers.pose_updated_callback = received.append
    markers.enable_set_pose_marker(_point(0, 0, 0))
    feedback = SimpleNamespace(event_type=POSE_UPDATE, pose=_point(7, 8, 9, 0.25))
    markers.server.callbacks["set_pose"](feedback)
    assert len(received) == 1
    np.testing.assert_allclose(received[0].position, [7, 8, 9])
    assert received[0].yaw() == pytest.approx(0.25)


def test_feedback_other_event_is_ignored(markers):
    received = []
    markers.pose_updated_callback = received.append
    markers.process_set_pose_feedback(
        SimpleNamespace(event_type=KEEP_ALIVE, pose=_point(1, 1, 1))
    )
    assert received == []


def test_enable_marker_from_prototype(markers):
    markers.enable_marker("start", _point(1, 2, 3))
    shown = markers.server.markers["start"]
    assert shown.name == "start"
    assert shown.controls[0].markers[1].text == "start"
    assert markers.marker_prototype.controls[0].markers[1].text == "placeholder"
    np.testing.assert_allclose(shown.pose.position, [1, 2, 3])


def test_enable_marker_again_updates_pose(markers):
    markers.enable_marker("goal", _point(1, 2, 3))
    markers.disable_marker("goal")
    assert "goal" not in markers.server.markers
    markers.enable_marker("goal", _point(3, 2, 1))
    np.testing.assert_allclose(markers.server.markers["goal"].pose.position, [3, 2, 1])
    assert list(markers.marker_map) == ["goal"]


def test_update_marker_pose(markers):
    markers.enable_marker("goal", _point(0, 0, 0))
    markers.update_marker_pose("goal", _point(2, 2, 2))
    np.testing.assert_allclose(markers.server.markers["goal"].pose.position, [2, 2, 2])
    markers.update_marker_pose("unknown", _point(5, 5, 5))
    assert "unknown" not in markers.server.markers


def test_enable_marker_requires_initialize():
    planning = PlanningInteractiveMarkers()
    with pytest.raises(RuntimeError):
        planning.enable_marker("start", _point(0, 0, 0))


def test_set_frame_id(markers):
    markers.set_frame_id("map")
    assert markers.set_pose_marker.frame_id == "map"
    assert markers.marker_prototype.frame_id == "map"
    markers.enable_marker("start", _point(0, 0, 0))
    assert markers.server.markers["start"].frame_id == "map"