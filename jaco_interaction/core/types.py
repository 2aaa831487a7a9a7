"""
Data types for interactive JACO manipulation
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence
import numpy as np


NUM_ARM_JOINTS = 6


class MenuEntry(Enum):
    """Actions reachable from the hand marker context menu"""
    GRASP = 'grasp'
    RELEASE = 'release'
    PICKUP = 'pickup'
    HOME = 'home'
    RETRACT_HOME = 'retract_home'


class FeedbackEvent(Enum):
    """Interaction events emitted by the marker widget"""
    BUTTON_CLICK = 'button_click'
    MENU_SELECT = 'menu_select'
    POSE_UPDATE = 'pose_update'
    MOUSE_DOWN = 'mouse_down'
    MOUSE_UP = 'mouse_up'


class GoalOutcome(Enum):
    """Result of a bounded wait on an action goal"""
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'
    TIMED_OUT = 'timed_out'


@dataclass
class EndEffectorPose:
    """End-effector pose: position [x, y, z] and quaternion [x, y, z, w]"""
    position: np.ndarray
    orientation: np.ndarray

    @classmethod
    def neutral(cls):
        """Origin position with identity orientation"""
        return cls(
            position=np.zeros(3),
            orientation=np.array([0.0, 0.0, 0.0, 1.0])
        )

    def copy(self):
        return EndEffectorPose(
            position=self.position.copy(),
            orientation=self.orientation.copy()
        )


@dataclass
class MarkerFeedback:
    """One interaction event on an interactive marker"""
    event: FeedbackEvent
    marker_name: str
    control_name: str = ''
    menu_entry: Optional[MenuEntry] = None
    pose: Optional[EndEffectorPose] = None


@dataclass
class CartesianCommand:
    """Cartesian arm command.

    With ``position`` set, ``linear`` is a target position and ``angular`` a
    roll/pitch/yaw target. Otherwise both are velocities. ``repeat`` asks the
    driver to keep applying the command instead of sending it once.
    """
    position: bool
    arm_command: bool = True
    finger_command: bool = False
    repeat: bool = False
    linear: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angular: np.ndarray = field(default_factory=lambda: np.zeros(3))

    @classmethod
    def hold_still(cls):
        """Zero velocity command, repeated until superseded"""
        return cls(position=False, repeat=True)


@dataclass
class GraspGoal:
    close_gripper: bool
    limit_finger_velocity: bool = False


@dataclass
class PickupGoal:
    limit_finger_velocity: bool = False
    set_lift_velocity: bool = False


@dataclass
class RetractPosition:
    """Joint-space target used when homing with retract"""
    joints: List[float]
    position: bool = True
    arm_command: bool = True
    finger_command: bool = False
    repeat: bool = False


@dataclass
class HomeGoal:
    retract: bool = False
    retract_position: Optional[RetractPosition] = None


class JointAngleCache:
    """Latest measured arm joint positions (radians)"""

    def __init__(self, num_joints: int = NUM_ARM_JOINTS):
        self._positions = np.zeros(num_joints)

    def __len__(self):
        return len(self._positions)

    def update(self, positions: Sequence[float]) -> bool:
        """Overwrite the cache from a joint state reading.

        Only the leading entries are used. A reading with too few positions
        is rejected and the cache is left untouched.
        """
        if positions is None or len(positions) < len(self._positions):
            return False
        self._positions[:] = np.asarray(positions[:len(self._positions)], dtype=float)
        return True

    def positions(self) -> List[float]:
        return [float(p) for p in self._positions]
