"""Interactive markers for setting and showing start and goal poses."""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, List, Optional, Tuple

from mavplan.color import ColorRGBA
from mavplan.utils import TrajectoryPoint
from mavplan.visualization import Marker, MarkerType

logger = logging.getLogger(__name__)

PoseCallback = Callable[[TrajectoryPoint], None]
FeedbackCallback = Callable[[Any], None]
Quaternion = Tuple[float, float, float, float]

# Feedback event types.
KEEP_ALIVE = 0
POSE_UPDATE = 1
MENU_SELECT = 2
BUTTON_CLICK = 3
MOUSE_DOWN = 4
MOUSE_UP = 5

SET_POSE_MARKER_NAME = "set_pose"

_SQRT2_OVER_2 = math.sqrt(2.0) / 2.0
_PURPLE = ColorRGBA(0.5, 0.0, 0.5, 1.0)
_PINK = ColorRGBA(1.0, 0.0, 0.5, 1.0)


def _pose_of(point: TrajectoryPoint) -> TrajectoryPoint:
    """Keep only the position and orientation of ``point``."""
    return TrajectoryPoint(position=point.position, orientation=point.orientation)


@dataclass
class MarkerControl:
    """One way of interacting with a marker, with the markers that draw it.

    The orientation is a quaternion stored as (w, x, y, z).
    """

    NONE: ClassVar[int] = 0
    MENU: ClassVar[int] = 1
    BUTTON: ClassVar[int] = 2
    MOVE_AXIS: ClassVar[int] = 3
    MOVE_PLANE: ClassVar[int] = 4
    ROTATE_AXIS: ClassVar[int] = 5
    MOVE_ROTATE: ClassVar[int] = 6

    name: str = ""
    orientation: Quaternion = (1.0, 0.0, 0.0, 0.0)
    interaction_mode: int = 0
    markers: List[Marker] = field(default_factory=list)
    always_visible: bool = False


@dataclass
class InteractiveMarker:
    """A named, posed marker made of controls."""

    name: str = ""
    frame_id: str = ""
    pose: TrajectoryPoint = field(default_factory=TrajectoryPoint)
    scale: float = 1.0
    controls: List[MarkerControl] = field(default_factory=list)


class InteractiveMarkerServer:
    """Holds interactive markers; changes become visible on ``apply_changes``."""

    def __init__(self, topic: str = "planning_markers") -> None:
        self.topic = topic
        self.markers: Dict[str, InteractiveMarker] = {}
        self.callbacks: Dict[str, FeedbackCallback] = {}
        self.updates_applied = 0
        self._pending: Dict[str, Optional[InteractiveMarker]] = {}

    def _current(self, name: str) -> Optional[InteractiveMarker]:
        if name in self._pending:
            return self._pending[name]
        return self.markers.get(name)

    def insert(self, marker: InteractiveMarker) -> None:
        """Add or replace a marker by name."""
        self._pending[marker.name] = copy.deepcopy(marker)

    def erase(self, name: str) -> bool:
        """Remove a marker and its callback; False if it did not exist."""
        existed = self._current(name) is not None
        self._pending[name] = None
        self.callbacks.pop(name, None)
        return existed

    def set_pose(self, name: str, pose: TrajectoryPoint) -> bool:
        """Move an existing marker; False if there is no such marker."""
        current = self._current(name)
        if current is None:
            return False
        updated = copy.deepcopy(current)
        updated.pose = _pose_of(pose)
        self._pending[name] = updated
        return True

    def set_callback(self, name: str, callback: FeedbackCallback) -> bool:
        """Bind a feedback callback to an existing marker."""
        if self._current(name) is None:
            return False
        self.callbacks[name] = callback
        return True

    def apply_changes(self) -> None:
        """Make all pending changes visible."""
        for name, marker in self._pending.items():
            if marker is None:
                self.markers.pop(name, None)
            else:
                self.markers[name] = marker
        self._pending.clear()
        self.updates_applied += 1


class PlanningInteractiveMarkers:
    """A movable set-pose marker plus static labelled markers per pose id."""

    def __init__(
        self,
        server: Optional[InteractiveMarkerServer] = None,
        frame_id: str = "odom",
    ) -> None:
        self.server = server if server is not None else InteractiveMarkerServer()
        self.frame_id = frame_id
        self.initialized = False
        self.pose_updated_callback: Optional[PoseCallback] = None
        self.set_pose_marker = InteractiveMarker(name=SET_POSE_MARKER_NAME)
        self.marker_prototype = InteractiveMarker()
        self.marker_map: Dict[str, InteractiveMarker] = {}

    def set_frame_id(self, frame_id: str) -> None:
        self.frame_id = frame_id
        self.set_pose_marker.frame_id = frame_id
        self.marker_prototype.frame_id = frame_id

    def initialize(self) -> None:
        self._create_markers()
        self.initialized = True

    def _create_markers(self) -> None:
        """Build the set-pose marker and the prototype of static markers."""
        self.set_pose_marker = InteractiveMarker(
            name=SET_POSE_MARKER_NAME, frame_id=self.frame_id, scale=1.0
        )
        controls = self.set_pose_marker.controls
        vertical = (_SQRT2_OVER_2, 0.0, _SQRT2_OVER_2, 0.0)
        controls.append(
            MarkerControl("rotate_yaw", vertical, MarkerControl.ROTATE_AXIS)
        )
        controls.append(MarkerControl("move z", vertical, MarkerControl.MOVE_AXIS))
        controls.append(
            MarkerControl(
                "move x", (_SQRT2_OVER_2, _SQRT2_OVER_2, 0.0, 0.0),
                MarkerControl.MOVE_AXIS,
            )
        )
        controls.append(
            MarkerControl(
                "move y", (_SQRT2_OVER_2, 0.0, 0.0, _SQRT2_OVER_2),
                MarkerControl.MOVE_AXIS,
            )
        )
        controls.append(
            MarkerControl(
                "move x_y", (0.9239, 0.0, 0.0, 0.3827), MarkerControl.MOVE_AXIS
            )
        )
        controls.append(
            MarkerControl(
                "move y_x", (0.3827, 0.0, 0.0, 0.9239), MarkerControl.MOVE_AXIS
            )
        )
        controls.append(
            MarkerControl(
                "heli", (1.0, 0.0, 0.0, 0.0), MarkerControl.NONE, always_visible=True
            )
        )

        arrow = Marker(
            type=MarkerType.ARROW,
            color=copy.copy(_PURPLE),
            scale=(0.75, 0.25, 0.25),
        )
        text = Marker(
            type=MarkerType.TEXT_VIEW_FACING,
            id=1,
            color=copy.copy(_PINK),
            scale=(0.0, 0.0, 0.5),
            points=[(0.0, 0.0, 0.5)],
            text="placeholder",
        )
        self.marker_prototype = InteractiveMarker(
            frame_id=self.frame_id,
            scale=1.0,
            controls=[
                MarkerControl(
                    "arrow",
                    (1.0, 0.0, 0.0, 0.0),
                    MarkerControl.NONE,
                    markers=[arrow, text],
                    always_visible=True,
                )
            ],
        )

    def enable_set_pose_marker(self, pose: TrajectoryPoint) -> None:
        """Show the movable marker at ``pose`` and listen to its feedback."""
        self.set_pose_marker.pose = _pose_of(pose)
        self.server.insert(self.set_pose_marker)
        self.server.set_callback(
            self.set_pose_marker.name, self.process_set_pose_feedback
        )
        self.server.apply_changes()

    def disable_set_pose_marker(self) -> None:
        self.server.erase(self.set_pose_marker.name)
        self.server.apply_changes()

    def set_pose(self, pose: TrajectoryPoint) -> None:
        """Move the set-pose marker without raising feedback."""
        self.set_pose_marker.pose = _pose_of(pose)
        self.server.set_pose(self.set_pose_marker.name, self.set_pose_marker.pose)
        self.server.apply_changes()

    def process_set_pose_feedback(self, feedback: Any) -> None:
        """Forward pose updates of the set-pose marker to the callback.

        ``feedback`` carries ``event_type`` and ``pose``.
        """
        if feedback.event_type == POSE_UPDATE and self.pose_updated_callback:
            self.pose_updated_callback(_pose_of(feedback.pose))
        self.server.apply_changes()

    def enable_marker(self, id: str, pose: TrajectoryPoint) -> None:
        """Show the static marker for ``id`` at ``pose``, creating it if needed."""
        marker = self.marker_map.get(id)
        if marker is None:
            if not self.initialized:
                raise RuntimeError("interactive markers are not initialized")
            marker = copy.deepcopy(self.marker_prototype)
            marker.name = id
            marker.controls[0].markers[1].text = id
            self.marker_map[id] = marker
        marker.pose = _pose_of(pose)
        self.server.insert(marker)
        self.server.apply_changes()

    def update_marker_pose(self, id: str, pose: TrajectoryPoint) -> None:
        """Move a known static marker; unknown ids are ignored."""
        marker = self.marker_map.get(id)
        if marker is None:
            return
        marker.pose = _pose_of(pose)
        self.server.set_pose(id, marker.pose)
        self.server.apply_changes()

    def disable_marker(self, id: str) -> None:
        self.server.erase(id)
        self.server.apply_changes()