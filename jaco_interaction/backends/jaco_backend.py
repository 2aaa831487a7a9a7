"""
JACO arm backend over ROS 2

Publishes Cartesian commands, calls the kinematics, conversion and
trajectory services, and drives the grasp, pickup and home action servers
of the JACO arm driver.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import rclpy
from rclpy.action import ActionClient
from rclpy.callback_groups import ReentrantCallbackGroup
from rclpy.node import Node
from action_msgs.msg import GoalStatus
from geometry_msgs.msg import Quaternion
from std_srvs.srv import Empty
from wpi_jaco_msgs.action import ExecuteGrasp, ExecutePickup, HomeArm
from wpi_jaco_msgs.msg import CartesianCommand as CartesianCommandMsg
from wpi_jaco_msgs.srv import JacoFK, QuaternionToEuler

from jaco_interaction.backends.base import ArmBackend
from jaco_interaction.backends.goal_channel import GoalChannel
from jaco_interaction.core.transform import quaternion_to_rpy
from jaco_interaction.core.types import (
    CartesianCommand, EndEffectorPose, GoalOutcome, GraspGoal, HomeGoal,
    PickupGoal
)
from jaco_interaction.utils.futures import call_service
from jaco_interaction.utils.ros2_utils import create_reliable_qos, msg_to_end_effector_pose


def to_cartesian_command_msg(cmd: CartesianCommand) -> CartesianCommandMsg:
    msg = CartesianCommandMsg()
    msg.position = cmd.position
    msg.arm_command = cmd.arm_command
    msg.finger_command = cmd.finger_command
    msg.repeat = cmd.repeat
    msg.arm.linear.x = float(cmd.linear[0])
    msg.arm.linear.y = float(cmd.linear[1])
    msg.arm.linear.z = float(cmd.linear[2])
    msg.arm.angular.x = float(cmd.angular[0])
    msg.arm.angular.y = float(cmd.angular[1])
    msg.arm.angular.z = float(cmd.angular[2])
    return msg


def to_home_goal_msg(goal: HomeGoal):
    msg = HomeArm.Goal()
    msg.retract = goal.retract
    if goal.retract_position is not None:
        retract = goal.retract_position
        msg.retract_position.position = retract.position
        msg.retract_position.arm_command = retract.arm_command
        msg.retract_position.finger_command = retract.finger_command
        msg.retract_position.repeat = retract.repeat
        msg.retract_position.joints = [float(j) for j in retract.joints]
    return msg


class JacoBackend(ArmBackend):
    """ArmBackend talking to the JACO arm driver"""

    def __init__(self, node: Node, config: Dict):
        self.node = node
        self.config = config

        # Client responses must be processed while a marker callback waits
        self.client_callback_group = ReentrantCallbackGroup()

        topics = config['topics']
        services = config['services']
        actions = config['actions']

        self.cartesian_cmd_pub = node.create_publisher(
            CartesianCommandMsg,
            topics['cartesian_cmd'],
            create_reliable_qos(depth=1)
        )

        self.erase_trajectories_client = node.create_client(
            Empty, services['erase_trajectories'], callback_group=self.client_callback_group
        )
        self.fk_client = node.create_client(
            JacoFK, services['forward_kinematics'], callback_group=self.client_callback_group
        )
        self.qe_client = node.create_client(
            QuaternionToEuler, services['quaternion_to_euler'], callback_group=self.client_callback_group
        )

        self.grasp_channel = self._make_channel(ExecuteGrasp, actions['grasp'])
        self.pickup_channel = self._make_channel(ExecutePickup, actions['pickup'])
        self.home_channel = self._make_channel(HomeArm, actions['home'])

        self.use_local_euler = config['conversion']['use_local_euler']
        self.call_timeout = services['call_timeout_sec']

    def _make_channel(self, action_type, action_name: str) -> GoalChannel:
        client = ActionClient(
            self.node, action_type, action_name, callback_group=self.client_callback_group
        )
        return GoalChannel(
            client, action_name, self.node.get_logger(),
            is_ok=rclpy.ok, succeeded_status=GoalStatus.STATUS_SUCCEEDED
        )

    @property
    def channels(self) -> List[GoalChannel]:
        return [self.grasp_channel, self.pickup_channel, self.home_channel]

    def wait_for_action_servers(self) -> bool:
        period = self.config['actions']['server_wait_log_period_sec']
        for channel in self.channels:
            if not channel.wait_for_server(period):
                self.node.get_logger().warning(
                    f"Shutdown while waiting for action server {channel.action_name}"
                )
                return False
        return True

    def publish_cartesian_command(self, cmd: CartesianCommand):
        self.cartesian_cmd_pub.publish(to_cartesian_command_msg(cmd))

    def _call(self, client, request, service_name: str):
        return call_service(client, request, self.call_timeout, self.node.get_logger(), service_name)

    def erase_trajectories(self) -> bool:
        return self._call(self.erase_trajectories_client, Empty.Request(), 'Erase trajectories') is not None

    def compute_fk(self, joints: Sequence[float]) -> Optional[EndEffectorPose]:
        request = JacoFK.Request()
        request.joints = [float(j) for j in joints]
        response = self._call(self.fk_client, request, 'Forward kinematics')
        if response is None:
            return None
        return msg_to_end_effector_pose(response.hand_pose.pose)

    def quaternion_to_euler(self, quat: Sequence[float]) -> Optional[Tuple[float, float, float]]:
        if self.use_local_euler:
            try:
                return quaternion_to_rpy(quat)
            except ValueError as e:
                self.node.get_logger().debug(f"Local quaternion conversion failed: {e}")
                return None

        request = QuaternionToEuler.Request()
        request.orientation = Quaternion(
            x=float(quat[0]), y=float(quat[1]), z=float(quat[2]), w=float(quat[3])
        )
        response = self._call(self.qe_client, request, 'Quaternion to Euler')
        if response is None:
            return None
        return response.roll, response.pitch, response.yaw

    def send_grasp_goal(self, goal: GraspGoal):
        msg = ExecuteGrasp.Goal()
        msg.close_gripper = goal.close_gripper
        msg.limit_finger_velocity = goal.limit_finger_velocity
        self.grasp_channel.send(msg)

    def send_pickup_goal(self, goal: PickupGoal):
        msg = ExecutePickup.Goal()
        msg.limit_finger_velocity = goal.limit_finger_velocity
        msg.set_lift_velocity = goal.set_lift_velocity
        self.pickup_channel.send(msg)

    def cancel_manipulation_goals(self):
        self.grasp_channel.cancel_all()
        self.pickup_channel.cancel_all()

    def home_arm(self, goal: HomeGoal, timeout: float) -> GoalOutcome:
        future = self.home_channel.send(to_home_goal_msg(goal))
        return self.home_channel.wait_for_result(future, timeout)

    def destroy(self):
        for channel in self.channels:
            channel.destroy()
