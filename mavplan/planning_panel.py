"""The planning panel: start/goal pose editing, planner calls and waypoint publishing."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from mavplan.edit_button import EditButton
from mavplan.interactive_markers import PlanningInteractiveMarkers
from mavplan.pose_widget import PoseWidget
from mavplan.utils import TrajectoryPoint

logger = logging.getLogger(__name__)

PublishFunction = Callable[[str, str, TrajectoryPoint], None]
ServiceFunction = Callable[[str, Optional[Dict[str, TrajectoryPoint]]], bool]


def validate_name(name: str) -> bool:
    """Whether ``name`` is a valid graph resource name.

    An empty name is valid. Otherwise it starts with a letter, '/' or '~',
    and continues with letters, digits, '/' or '_'.
    """
    if not name:
        return True
    first = name[0]
    if not (first.isascii() and first.isalpha()) and first not in "/~":
        return False
    return all(
        (c.isascii() and c.isalnum()) or c in "/_" for c in name[1:]
    )


class PlanningPanel:
    """Holds the start and goal poses and talks to a planner.

    ``publish(topic, frame_id, pose)`` sends a stamped pose and
    ``call_service(name, request)`` calls a service, returning success.
    """

    def __init__(
        self,
        fixed_frame: str = "odom",
        interactive_markers: Optional[PlanningInteractiveMarkers] = None,
        publish: Optional[PublishFunction] = None,
        call_service: Optional[ServiceFunction] = None,
    ) -> None:
        self.fixed_frame = fixed_frame
        self.interactive_markers = (
            interactive_markers
            if interactive_markers is not None
            else PlanningInteractiveMarkers()
        )
        self._publish = publish
        self._call_service = call_service

        self.namespace = ""
        self.planner_name = ""
        self.odometry_topic = ""
        self.track_odometry = False
        self.currently_editing = ""

        self.waypoint_topic: Optional[str] = None
        self.controller_topic: Optional[str] = None
        self.odometry_subscription: Optional[str] = None

        self.config_changed: List[Callable[[], None]] = []
        self.pose_widgets: Dict[str, PoseWidget] = {}
        self.edit_buttons: Dict[str, EditButton] = {}
        self._odometry_seen = False

        self.start_pose_widget = PoseWidget("start")
        self.goal_pose_widget = PoseWidget("goal")
        self.register_pose_widget(self.start_pose_widget)
        self.register_pose_widget(self.goal_pose_widget)
        self.register_edit_button(EditButton("start"))
        self.register_edit_button(EditButton("goal"))

    def _emit_config_changed(self) -> None:
        for callback in list(self.config_changed):
            callback()

    def _subscribe_odometry(self) -> None:
        self.odometry_subscription = f"{self.namespace}/{self.odometry_topic}"

    def on_initialize(self) -> None:
        """Create the interactive markers and show one per pose widget."""
        self.interactive_markers.initialize()
        self.interactive_markers.pose_updated_callback = (
            self.update_interactive_marker_pose
        )
        self.interactive_markers.set_frame_id(self.fixed_frame)
        for id, widget in self.pose_widgets.items():
            self.interactive_markers.enable_marker(id, widget.pose())

    def set_namespace(self, new_namespace: str) -> None:
        """Change the namespace and, if it is valid, the topics under it."""
        logger.debug("Setting namespace from: %s to %s", self.namespace, new_namespace)
        if new_namespace == self.namespace:
            return
        self.namespace = new_namespace
        self._emit_config_changed()
        if validate_name(self.namespace):
            self.waypoint_topic = f"{self.namespace}/waypoint"
            self.controller_topic = f"{self.namespace}/command/pose"
            self._subscribe_odometry()

    def set_planner_name(self, new_planner_name: str) -> None:
        if new_planner_name == self.planner_name:
            return
        self.planner_name = new_planner_name
        self._emit_config_changed()

    def set_odometry_topic(self, new_odometry_topic: str) -> None:
        if new_odometry_topic == self.odometry_topic:
            return
        self.odometry_topic = new_odometry_topic
        self._emit_config_changed()
        if validate_name(self.namespace):
            self._subscribe_odometry()

    def register_pose_widget(self, widget: PoseWidget) -> None:
        self.pose_widgets[widget.id] = widget
        widget.pose_updated.append(self.widget_pose_updated)

    def register_edit_button(self, button: EditButton) -> None:
        self.edit_buttons[button.id] = button
        button.started_editing.append(self.start_editing)
        button.finished_editing.append(self.finish_editing)

    def start_editing(self, id: str) -> None:
        """Put the pose ``id`` under the movable marker; stop any other edit."""
        if self.currently_editing:
            button = self.edit_buttons.get(self.currently_editing)
            if button is not None:
                button.finish_editing()
        self.currently_editing = id
        widget = self.pose_widgets.get(id)
        if widget is None:
            return
        # The fixed frame may have changed since last time.
        self.interactive_markers.set_frame_id(self.fixed_frame)
        self.interactive_markers.enable_set_pose_marker(widget.pose())
        self.interactive_markers.disable_marker(id)

    def finish_editing(self, id: str) -> None:
        """Stop editing ``id`` and show its static marker again."""
        if self.currently_editing == id:
            self.currently_editing = ""
            self.interactive_markers.disable_set_pose_marker()
        widget = self.pose_widgets.get(id)
        if widget is None:
            return
        self.interactive_markers.enable_marker(id, widget.pose())

    def save(self) -> Dict[str, str]:
        """The panel's configuration."""
        return {
            "namespace": self.namespace,
            "planner_name": self.planner_name,
            "odometry_topic": self.odometry_topic,
        }

    def load(self, config: Mapping[str, Any]) -> None:
        """Restore the configuration written by ``save``; missing keys are kept."""
        if "namespace" in config:
            self.set_namespace(str(config["namespace"]))
        if "planner_name" in config:
            self.planner_name = str(config["planner_name"])
        if "odometry_topic" in config:
            self.set_odometry_topic(str(config["odometry_topic"]))

    def update_interactive_marker_pose(self, pose: TrajectoryPoint) -> None:
        """Copy a pose from the movable marker into the widget being edited."""
        if not self.currently_editing:
            return
        widget = self.pose_widgets.get(self.currently_editing)
        if widget is None:
            return
        widget.set_pose(pose)

    def widget_pose_updated(self, id: str, pose: TrajectoryPoint) -> None:
        if self.currently_editing == id:
            self.interactive_markers.set_pose(pose)
        self.interactive_markers.update_marker_pose(id, pose)

    def _service_name(self, suffix: str) -> str:
        return f"{self.namespace}/{self.planner_name}/{suffix}"

    def _call(self, service_name: str, request: Optional[Dict[str, TrajectoryPoint]]) -> bool:
        if self._call_service is None:
            logger.warning("Couldn't call service: %s", service_name)
            return False
        try:
            if not self._call_service(service_name, request):
                logger.warning("Couldn't call service: %s", service_name)
                return False
        except Exception as error:  # a failing call must not take the panel down
            logger.error("Service Exception: %s", error)
            return False
        return True

    def call_planner_service(self) -> threading.Thread:
        """Ask the planner for a path from start to goal, in the background."""
        service_name = self._service_name("plan")
        request = {
            "start_pose": self.start_pose_widget.pose(),
            "goal_pose": self.goal_pose_widget.pose(),
        }
        logger.debug("Service name: %s", service_name)
        thread = threading.Thread(
            target=self._call, args=(service_name, request), daemon=True
        )
        thread.start()
        return thread

    def call_publish_path(self) -> bool:
        """Ask the planner to publish its path; returns whether the call worked."""
        return self._call(self._service_name("publish_path"), None)

    def _publish_goal(self, topic: Optional[str]) -> bool:
        if topic is None or self._publish is None:
            return False
        logger.debug("Publishing goal on %s", topic)
        self._publish(topic, self.fixed_frame, self.goal_pose_widget.pose())
        return True

    def publish_waypoint(self) -> bool:
        """Send the goal pose as a waypoint; False if nothing could be sent."""
        return self._publish_goal(self.waypoint_topic)

    def publish_to_controller(self) -> bool:
        """Send the goal pose straight to the controller."""
        return self._publish_goal(self.controller_topic)

    def track_odometry_state_changed(self, state: int) -> None:
        self.track_odometry = state != 0

    def odometry_callback(
        self, position: Sequence[float], orientation: Sequence[float]
    ) -> None:
        """Move the start pose to the robot's pose if odometry is tracked.

        ``orientation`` is a quaternion as (w, x, y, z).
        """
        if not self._odometry_seen:
            logger.info("Got odometry callback.")
            self._odometry_seen = True
        if not self.track_odometry:
            return
        point = TrajectoryPoint(position=position, orientation=orientation)
        self.pose_widgets["start"].set_pose(point)
        self.interactive_markers.update_marker_pose("start", point)