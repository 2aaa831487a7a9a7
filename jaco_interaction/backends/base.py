"""
Base classes for the arm backend and the marker display
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence, Tuple

from jaco_interaction.core.marker import MarkerSpec
from jaco_interaction.core.types import (
    CartesianCommand, EndEffectorPose, GoalOutcome, GraspGoal, HomeGoal,
    MarkerFeedback, PickupGoal
)


class ArmBackend(ABC):
    """Motion and gripper endpoints of the arm driver.

    Request/response methods report failure through their return value and
    never raise.
    """

    @abstractmethod
    def wait_for_action_servers(self) -> bool:
        """Block until the grasp, pickup and home action servers are up.

        Returns False if the wait was abandoned, e.g. on shutdown.
        """
        pass

    @abstractmethod
    def publish_cartesian_command(self, cmd: CartesianCommand):
        pass

    @abstractmethod
    def erase_trajectories(self) -> bool:
        """Clear queued trajectories; False if the call failed"""
        pass

    @abstractmethod
    def compute_fk(self, joints: Sequence[float]) -> Optional[EndEffectorPose]:
        """Forward kinematics for the given joint angles, None on failure"""
        pass

    @abstractmethod
    def quaternion_to_euler(self, quat: Sequence[float]) -> Optional[Tuple[float, float, float]]:
        """Roll, pitch, yaw for an [x, y, z, w] quaternion, None on failure"""
        pass

    @abstractmethod
    def send_grasp_goal(self, goal: GraspGoal):
        pass

    @abstractmethod
    def send_pickup_goal(self, goal: PickupGoal):
        pass

    @abstractmethod
    def cancel_manipulation_goals(self):
        """Cancel every outstanding grasp and pickup goal"""
        pass

    @abstractmethod
    def home_arm(self, goal: HomeGoal, timeout: float) -> GoalOutcome:
        """Send a home goal and wait at most ``timeout`` seconds for it"""
        pass


class MarkerDisplay(ABC):
    """Interactive marker widget"""

    @abstractmethod
    def insert(self, spec: MarkerSpec, pose: EndEffectorPose,
               callback: Callable[[MarkerFeedback], None]):
        """Register a marker and route its feedback to ``callback``"""
        pass

    @abstractmethod
    def set_pose(self, name: str, pose: EndEffectorPose):
        pass

    @abstractmethod
    def apply_changes(self):
        """Push pending marker changes to clients"""
        pass
