"""
Interactive marker display backed by the interactive_markers server
"""

from typing import Callable, Dict, Optional

from rclpy.node import Node
from interactive_markers import InteractiveMarkerServer, MenuHandler
from visualization_msgs.msg import (
    InteractiveMarker, InteractiveMarkerControl, InteractiveMarkerFeedback, Marker
)

from jaco_interaction.backends.base import MarkerDisplay
from jaco_interaction.core.marker import ControlSpec, InteractionMode, MarkerSpec, insert_menu
from jaco_interaction.core.types import EndEffectorPose, FeedbackEvent, MarkerFeedback, MenuEntry
from jaco_interaction.utils.ros2_utils import end_effector_pose_to_msg, msg_to_end_effector_pose


INTERACTION_MODES = {
    InteractionMode.BUTTON: InteractiveMarkerControl.BUTTON,
    InteractionMode.MENU: InteractiveMarkerControl.MENU,
    InteractionMode.MOVE_AXIS: InteractiveMarkerControl.MOVE_AXIS,
    InteractionMode.ROTATE_AXIS: InteractiveMarkerControl.ROTATE_AXIS,
}

FEEDBACK_EVENTS = {
    InteractiveMarkerFeedback.BUTTON_CLICK: FeedbackEvent.BUTTON_CLICK,
    InteractiveMarkerFeedback.MENU_SELECT: FeedbackEvent.MENU_SELECT,
    InteractiveMarkerFeedback.POSE_UPDATE: FeedbackEvent.POSE_UPDATE,
    InteractiveMarkerFeedback.MOUSE_DOWN: FeedbackEvent.MOUSE_DOWN,
    InteractiveMarkerFeedback.MOUSE_UP: FeedbackEvent.MOUSE_UP,
}


def make_control_msg(spec: ControlSpec) -> InteractiveMarkerControl:
    control = InteractiveMarkerControl()
    control.name = spec.name
    control.interaction_mode = INTERACTION_MODES[spec.mode]
    control.orientation.x = float(spec.orientation[0])
    control.orientation.y = float(spec.orientation[1])
    control.orientation.z = float(spec.orientation[2])
    control.orientation.w = float(spec.orientation[3])

    if spec.sphere is not None:
        sphere = Marker()
        sphere.type = Marker.SPHERE
        sphere.scale.x = sphere.scale.y = sphere.scale.z = float(spec.sphere.diameter)
        r, g, b, a = spec.sphere.color
        sphere.color.r = float(r)
        sphere.color.g = float(g)
        sphere.color.b = float(b)
        sphere.color.a = float(a)
        control.markers.append(sphere)

    return control


def make_interactive_marker_msg(spec: MarkerSpec, pose: EndEffectorPose) -> InteractiveMarker:
    marker = InteractiveMarker()
    marker.header.frame_id = spec.frame_id
    marker.name = spec.name
    marker.description = spec.description
    marker.scale = float(spec.scale)
    marker.pose = end_effector_pose_to_msg(pose)
    marker.controls = [make_control_msg(control) for control in spec.controls]
    return marker


class HandMarkerServer(MarkerDisplay):
    """MarkerDisplay publishing through an InteractiveMarkerServer"""

    def __init__(self, node: Node, topic_namespace: str):
        self.node = node
        self.server = InteractiveMarkerServer(node, topic_namespace)
        self.menu_handler = MenuHandler()

        self._callback: Optional[Callable[[MarkerFeedback], None]] = None
        self._menu_entries: Dict[int, MenuEntry] = {}

    def insert(self, spec: MarkerSpec, pose: EndEffectorPose,
               callback: Callable[[MarkerFeedback], None]):
        self._callback = callback

        self.server.insert(
            make_interactive_marker_msg(spec, pose),
            feedback_callback=self._process_feedback
        )

        self._menu_entries = insert_menu(spec.menu, self._insert_menu_item)
        self.menu_handler.apply(self.server, spec.name)

    def _insert_menu_item(self, title: str, parent: Optional[int], is_leaf: bool) -> int:
        if is_leaf:
            return self.menu_handler.insert(title, parent=parent, callback=self._process_feedback)
        return self.menu_handler.insert(title, parent=parent)

    def _process_feedback(self, msg: InteractiveMarkerFeedback):
        event = FEEDBACK_EVENTS.get(msg.event_type)
        if event is None or self._callback is None:
            return

        feedback = MarkerFeedback(
            event=event,
            marker_name=msg.marker_name,
            control_name=msg.control_name,
            menu_entry=self._menu_entries.get(msg.menu_entry_id) if event == FeedbackEvent.MENU_SELECT else None,
            pose=msg_to_end_effector_pose(msg.pose)
        )
        self._callback(feedback)

    def set_pose(self, name: str, pose: EndEffectorPose):
        self.server.setPose(name, end_effector_pose_to_msg(pose))

    def apply_changes(self):
        self.server.applyChanges()

    def clear(self):
        self.server.clear()
        self.server.applyChanges()
