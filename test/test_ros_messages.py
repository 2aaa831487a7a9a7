"""
Tests for ROS message construction and the rclpy backends; skipped without a ROS 2 environment
"""

import logging
from types import SimpleNamespace

import numpy as np
import pytest

pytest.importorskip('rclpy')
pytest.importorskip('interactive_markers')
pytest.importorskip('wpi_jaco_msgs')

from visualization_msgs.msg import InteractiveMarkerControl, InteractiveMarkerFeedback, Marker  # noqa: E402

from jaco_interaction.backends.goal_channel import GoalChannel  # noqa: E402
from jaco_interaction.backends.jaco_backend import (  # noqa: E402
    JacoBackend, to_cartesian_command_msg, to_home_goal_msg
)
from jaco_interaction.core.config import get_default_config  # noqa: E402
from jaco_interaction.core.marker import make_hand_marker  # noqa: E402
from jaco_interaction.core.types import (  # noqa: E402
    CartesianCommand, EndEffectorPose, FeedbackEvent, HomeGoal, MenuEntry, RetractPosition
)
from jaco_interaction.marker_server import HandMarkerServer, make_interactive_marker_msg  # noqa: E402

LOGGER = logging.getLogger('jaco_interaction.test')


def test_interactive_marker_msg():
    spec = make_hand_marker(get_default_config()['marker'])
    msg = make_interactive_marker_msg(spec, EndEffectorPose.neutral())

    assert msg.name == 'jaco_hand_marker'
    assert msg.header.frame_id == 'jaco_link_base'
    assert msg.pose.orientation.w == 1.0
    assert [c.name for c in msg.controls] == [
        'jaco_hand_origin_marker', 'rotate_x', 'move_x', 'rotate_y', 'move_y',
        'rotate_z', 'move_z', 'jaco_hand_menu'
    ]

    origin = msg.controls[0]
    assert origin.interaction_mode == InteractiveMarkerControl.BUTTON
    assert origin.markers[0].type == Marker.SPHERE
    assert origin.markers[0].color.a == 0.0
    assert msg.controls[-1].interaction_mode == InteractiveMarkerControl.MENU


def test_stop_command_msg():
    msg = to_cartesian_command_msg(CartesianCommand.hold_still())
    assert msg.position is False
    assert msg.arm_command is True
    assert msg.repeat is True
    assert msg.arm.linear.x == 0.0
    assert msg.arm.angular.z == 0.0


def test_pose_command_msg():
    cmd = CartesianCommand(position=True, linear=np.array([0.1, 0.2, 0.3]),
                           angular=np.array([1.0, 2.0, 3.0]))
    msg = to_cartesian_command_msg(cmd)
    assert msg.position is True
    assert msg.repeat is False
    assert msg.arm.linear.y == pytest.approx(0.2)
    assert msg.arm.angular.z == pytest.approx(3.0)


def test_retract_goal_msg():
    joints = [-2.57, 1.39, 0.377, -0.084, 0.515, -1.745]
    msg = to_home_goal_msg(HomeGoal(retract=True, retract_position=RetractPosition(joints=joints)))
    assert msg.retract is True
    assert msg.retract_position.position is True
    assert msg.retract_position.finger_command is False
    assert list(msg.retract_position.joints) == pytest.approx(joints)


def make_backend(service_client=None):
    """JacoBackend wired to fakes instead of a live node"""
    backend = JacoBackend.__new__(JacoBackend)
    backend.node = SimpleNamespace(get_logger=lambda: LOGGER)
    backend.config = get_default_config()
    backend.call_timeout = 0.05
    backend.erase_trajectories_client = service_client
    return backend


def test_erase_trajectories_reports_unavailable_service(service_client):
    service_client.ready = False
    assert make_backend(service_client).erase_trajectories() is False


def test_erase_trajectories_reports_timeout(service_client):
    service_client.respond = False
    assert make_backend(service_client).erase_trajectories() is False


def test_erase_trajectories_succeeds(service_client):
    assert make_backend(service_client).erase_trajectories() is True


def test_wait_for_action_servers_stops_on_shutdown():
    backend = make_backend()
    ready = SimpleNamespace(wait_for_server=lambda timeout_sec: True)
    never_ready = SimpleNamespace(wait_for_server=lambda timeout_sec: False)
    backend.grasp_channel = GoalChannel(ready, 'grasp', LOGGER)
    backend.pickup_channel = GoalChannel(never_ready, 'pickup', LOGGER, is_ok=lambda: False)
    backend.home_channel = GoalChannel(ready, 'home', LOGGER)

    assert backend.wait_for_action_servers() is False


def make_marker_server(menu_entries):
    server = HandMarkerServer.__new__(HandMarkerServer)
    received = []
    server._callback = received.append
    server._menu_entries = menu_entries
    return server, received


def test_menu_select_maps_handle_to_entry():
    server, received = make_marker_server({2: MenuEntry.GRASP, 5: MenuEntry.HOME})

    msg = InteractiveMarkerFeedback()
    msg.event_type = InteractiveMarkerFeedback.MENU_SELECT
    msg.marker_name = 'jaco_hand_marker'
    msg.menu_entry_id = 5
    server._process_feedback(msg)

    assert len(received) == 1
    assert received[0].event == FeedbackEvent.MENU_SELECT
    assert received[0].marker_name == 'jaco_hand_marker'
    assert received[0].menu_entry == MenuEntry.HOME


def test_unknown_menu_handle_has_no_entry():
    server, received = make_marker_server({2: MenuEntry.GRASP})

    msg = InteractiveMarkerFeedback()
    msg.event_type = InteractiveMarkerFeedback.MENU_SELECT
    msg.menu_entry_id = 9
    server._process_feedback(msg)

    assert received[0].menu_entry is None


def test_menu_entry_ignored_outside_menu_select():
    server, received = make_marker_server({2: MenuEntry.GRASP})

    msg = InteractiveMarkerFeedback()
    msg.event_type = InteractiveMarkerFeedback.POSE_UPDATE
    msg.menu_entry_id = 2
    msg.pose.position.x = 0.25
    msg.pose.orientation.w = 1.0
    server._process_feedback(msg)

    assert received[0].event == FeedbackEvent.POSE_UPDATE
    assert received[0].menu_entry is None
    assert received[0].pose.position[0] == pytest.approx(0.25)


def test_keep_alive_is_dropped():
    server, received = make_marker_server({})

    msg = InteractiveMarkerFeedback()
    msg.event_type = InteractiveMarkerFeedback.KEEP_ALIVE
    server._process_feedback(msg)

    assert received == []
