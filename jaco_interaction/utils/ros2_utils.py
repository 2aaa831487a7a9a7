"""
ROS2 utility functions
"""

from rclpy.qos import QoSProfile, ReliabilityPolicy, HistoryPolicy, DurabilityPolicy
import numpy as np
from geometry_msgs.msg import Pose

from jaco_interaction.core.types import EndEffectorPose


def create_reliable_qos(depth=10):
    """Create a reliable QoS profile for important topics"""
    qos = QoSProfile(
        reliability=ReliabilityPolicy.RELIABLE,
        history=HistoryPolicy.KEEP_LAST,
        depth=depth,
        durability=DurabilityPolicy.VOLATILE
    )
    return qos


def create_best_effort_qos(depth=1):
    """Create a best-effort QoS profile for high-frequency topics"""
    qos = QoSProfile(
        reliability=ReliabilityPolicy.BEST_EFFORT,
        history=HistoryPolicy.KEEP_LAST,
        depth=depth,
        durability=DurabilityPolicy.VOLATILE
    )
    return qos


def numpy_to_pose(position: np.ndarray, quaternion: np.ndarray) -> Pose:
    """Convert numpy arrays to ROS Pose message"""
    pose = Pose()
    pose.position.x = float(position[0])
    pose.position.y = float(position[1])
    pose.position.z = float(position[2])
    pose.orientation.x = float(quaternion[0])
    pose.orientation.y = float(quaternion[1])
    pose.orientation.z = float(quaternion[2])
    pose.orientation.w = float(quaternion[3])
    return pose


def pose_to_numpy(pose: Pose) -> tuple:
    """Convert ROS Pose to numpy arrays (position, quaternion)"""
    position = np.array([
        pose.position.x,
        pose.position.y,
        pose.position.z
    ])
    quaternion = np.array([
        pose.orientation.x,
        pose.orientation.y,
        pose.orientation.z,
        pose.orientation.w
    ])
    return position, quaternion


def end_effector_pose_to_msg(pose: EndEffectorPose) -> Pose:
    return numpy_to_pose(pose.position, pose.orientation)


def msg_to_end_effector_pose(pose: Pose) -> EndEffectorPose:
    position, quaternion = pose_to_numpy(pose)
    return EndEffectorPose(position=position, orientation=quaternion)

