"""
Fakes for exercising the interaction adapter and the ROS client helpers
without a ROS graph
"""

import logging
from types import SimpleNamespace

import numpy as np
import pytest

from jaco_interaction.backends.base import ArmBackend, MarkerDisplay
from jaco_interaction.backends.goal_channel import STATUS_SUCCEEDED, GoalChannel
from jaco_interaction.core.config import get_default_config
from jaco_interaction.core.types import EndEffectorPose, GoalOutcome
from jaco_interaction.interactive_manipulation import InteractiveManipulation


class FakeArmBackend(ArmBackend):
    """Records every outbound call in ``calls`` as (name, argument) pairs"""

    def __init__(self):
        self.calls = []
        self.fk_pose = EndEffectorPose(
            position=np.array([0.3, -0.2, 0.4]),
            orientation=np.array([0.0, 0.0, 0.0, 1.0])
        )
        self.fk_ok = True
        self.euler = (0.1, 0.2, 0.3)
        self.euler_ok = True
        self.erase_ok = True
        self.home_outcome = GoalOutcome.SUCCEEDED
        self.servers_ready = True
        self.fk_requests = []

    def wait_for_action_servers(self):
        self.calls.append(('wait_for_action_servers', None))
        return self.servers_ready

    def publish_cartesian_command(self, cmd):
        self.calls.append(('publish', cmd))

    def erase_trajectories(self):
        self.calls.append(('erase_trajectories', None))
        return self.erase_ok

    def compute_fk(self, joints):
        self.fk_requests.append(list(joints))
        return self.fk_pose.copy() if self.fk_ok else None

    def quaternion_to_euler(self, quat):
        self.calls.append(('quaternion_to_euler', list(quat)))
        return self.euler if self.euler_ok else None

    def send_grasp_goal(self, goal):
        self.calls.append(('grasp', goal))

    def send_pickup_goal(self, goal):
        self.calls.append(('pickup', goal))

    def cancel_manipulation_goals(self):
        self.calls.append(('cancel', None))

    def home_arm(self, goal, timeout):
        self.calls.append(('home', (goal, timeout)))
        return self.home_outcome

    def named(self, name):
        return [arg for call, arg in self.calls if call == name]

    def call_names(self):
        return [call for call, _ in self.calls]


class FakeMarkerDisplay(MarkerDisplay):

    def __init__(self):
        self.markers = {}
        self.poses = {}
        self.callback = None
        self.apply_count = 0

    def insert(self, spec, pose, callback):
        self.markers[spec.name] = spec
        self.poses[spec.name] = pose
        self.callback = callback

    def set_pose(self, name, pose):
        self.poses[name] = pose

    def apply_changes(self):
        self.apply_count += 1


class FakeFuture:
    """Stands in for rclpy.task.Future; completed explicitly by the test"""

    def __init__(self):
        self._done = False
        self._result = None
        self._exception = None
        self._callbacks = []
        self.cancelled = False

    def done(self):
        return self._done

    def result(self):
        if self._exception is not None:
            raise self._exception
        return self._result

    def add_done_callback(self, callback):
        if self._done:
            callback(self)
        else:
            self._callbacks.append(callback)

    def set_result(self, result):
        self._result = result
        self._finish()

    def set_exception(self, exception):
        self._exception = exception
        self._finish()

    def _finish(self):
        self._done = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)

    def cancel(self):
        self.cancelled = True


class FakeGoalHandle:
    """Stands in for rclpy.action.client.ClientGoalHandle"""

    def __init__(self, accepted=True):
        self.accepted = accepted
        self.cancel_count = 0
        self.result_future = FakeFuture()

    def cancel_goal_async(self):
        self.cancel_count += 1
        return FakeFuture()

    def get_result_async(self):
        return self.result_future

    def finish(self, status=STATUS_SUCCEEDED):
        self.result_future.set_result(SimpleNamespace(status=status, result=None))


class FakeActionClient:
    """Stands in for rclpy.action.ActionClient; goal futures stay pending until resolved"""

    def __init__(self):
        self.available = True
        self.goals = []
        self.goal_futures = []
        self.destroyed = False

    def wait_for_server(self, timeout_sec=None):
        return self.available

    def server_is_ready(self):
        return self.available

    def send_goal_async(self, goal):
        future = FakeFuture()
        self.goals.append(goal)
        self.goal_futures.append(future)
        return future

    def accept(self, index=0, accepted=True):
        """Resolve the goal request sent at ``index`` with a new goal handle"""
        handle = FakeGoalHandle(accepted=accepted)
        self.goal_futures[index].set_result(handle)
        return handle

    def destroy(self):
        self.destroyed = True


class FakeServiceClient:
    """Stands in for an rclpy service client"""

    def __init__(self):
        self.ready = True
        self.respond = True
        self.error = None
        self.response = SimpleNamespace(roll=0.1, pitch=0.2, yaw=0.3)
        self.requests = []
        self.futures = []

    def service_is_ready(self):
        return self.ready

    def call_async(self, request):
        self.requests.append(request)
        future = FakeFuture()
        if self.error is not None:
            future.set_exception(self.error)
        elif self.respond:
            future.set_result(self.response)
        self.futures.append(future)
        return future


@pytest.fixture
def config():
    config = get_default_config()
    config['marker']['settle_delay_sec'] = 0.0
    return config


@pytest.fixture
def backend():
    return FakeArmBackend()


@pytest.fixture
def display():
    return FakeMarkerDisplay()


@pytest.fixture
def manipulation(backend, display, config):
    """Adapter with the hand marker already created"""
    manipulation = InteractiveManipulation(backend, display, config)
    manipulation.start()
    backend.calls.clear()
    display.apply_count = 0
    return manipulation


@pytest.fixture
def action_client():
    return FakeActionClient()


@pytest.fixture
def channel(action_client):
    return GoalChannel(action_client, 'jaco_arm/manipulation/grasp',
                       logging.getLogger('jaco_interaction.test'))


@pytest.fixture
def service_client():
    return FakeServiceClient()


@pytest.fixture
def future():
    return FakeFuture()
