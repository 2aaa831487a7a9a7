"""
Interactive Manipulation

Turns interactions on the JACO hand marker into arm commands and keeps the
marker at the arm's measured end-effector pose.

- Click or release on the marker stops the arm
- Dragging the marker streams Cartesian position commands
- The context menu grasps, releases, picks up or homes the arm
- A periodic poll moves the marker to the forward kinematics pose
"""

import logging
import threading
import time
from typing import Dict, Optional, Sequence

from jaco_interaction.backends.base import ArmBackend, MarkerDisplay
from jaco_interaction.core.config import get_default_config
from jaco_interaction.core.marker import MarkerSpec, make_hand_marker
from jaco_interaction.core.types import (
    CartesianCommand, EndEffectorPose, FeedbackEvent, GoalOutcome, GraspGoal,
    HomeGoal, JointAngleCache, MarkerFeedback, MenuEntry, PickupGoal,
    RetractPosition
)


class InteractiveManipulation:
    """Event dispatch between the hand marker and the arm backend"""

    def __init__(self, backend: ArmBackend, display: MarkerDisplay,
                 config: Optional[Dict] = None, logger=None):
        self.backend = backend
        self.display = display
        self.config = config if config is not None else get_default_config()
        self.logger = logger if logger else logging.getLogger('jaco_interactive_manipulation')

        self.joints = JointAngleCache()
        self.lock_pose = False
        self.marker: Optional[MarkerSpec] = None

        # Serializes feedback, joint updates and pose sync
        self._lock = threading.RLock()

        # Statistics
        self.fk_failure_count = 0
        self.conversion_failure_count = 0
        self.pose_command_count = 0
        self.stop_command_count = 0
        self.rejected_joint_state_count = 0

    @property
    def marker_name(self) -> str:
        return self.config['marker']['name']

    def start(self) -> bool:
        """Wait for the arm's action servers, then create the hand marker.

        Returns False, without creating the marker, if the servers never
        became available.
        """
        self.logger.info("Waiting for grasp, pickup, and home arm action servers...")
        if not self.backend.wait_for_action_servers():
            self.logger.error("Action servers unavailable, hand marker not created")
            return False
        self.logger.info("Finished waiting for action servers")

        with self._lock:
            self.lock_pose = False

        time.sleep(self.config['marker']['settle_delay_sec'])

        self.make_hand_marker()
        self.display.apply_changes()
        return True

    def make_hand_marker(self):
        """Insert the hand marker at the arm's current pose"""
        with self._lock:
            self.marker = make_hand_marker(self.config['marker'])

            pose = self.backend.compute_fk(self.joints.positions())
            if pose is None:
                self.logger.warning("Forward kinematics unavailable, placing hand marker at the origin")
                pose = EndEffectorPose.neutral()

            self.display.insert(self.marker, pose, self.process_hand_marker_feedback)
            self.logger.info(f"Hand marker '{self.marker.name}' created in frame {self.marker.frame_id}")

    def update_joints(self, positions: Sequence[float]):
        """Store a joint state reading; undersized readings are ignored"""
        with self._lock:
            if not self.joints.update(positions):
                self.rejected_joint_state_count += 1
                count = 0 if positions is None else len(positions)
                self.logger.warning(
                    f"Ignoring joint state with {count} positions, expected at least {len(self.joints)}"
                )

    def update_marker_position(self):
        """Move the marker to the forward kinematics pose of the cached joints"""
        with self._lock:
            if self.marker is None:
                return

            pose = self.backend.compute_fk(self.joints.positions())
            if pose is None:
                self.fk_failure_count += 1
                self.logger.warning("Failed to call forward kinematics service")
                return

            self.display.set_pose(self.marker_name, pose)
            self.display.apply_changes()

    def process_hand_marker_feedback(self, feedback: MarkerFeedback):
        """Dispatch one marker interaction event"""
        with self._lock:
            on_hand = feedback.marker_name == self.marker_name

            if feedback.event == FeedbackEvent.BUTTON_CLICK:
                # Stop so the arm halts when the marker is clicked
                if on_hand:
                    self.lock_pose = True
                    self.send_stop_command()

            elif feedback.event == FeedbackEvent.MENU_SELECT:
                if on_hand:
                    self.handle_menu_entry(feedback.menu_entry)

            elif feedback.event == FeedbackEvent.POSE_UPDATE:
                if on_hand and feedback.control_name != self.config['marker']['origin_control']:
                    if not self.lock_pose:
                        self.send_pose_command(feedback.pose)

            elif feedback.event == FeedbackEvent.MOUSE_DOWN:
                self.lock_pose = False

            elif feedback.event == FeedbackEvent.MOUSE_UP:
                if on_hand:
                    self.lock_pose = True
                    self.send_stop_command()

            self.display.apply_changes()

    def handle_menu_entry(self, entry: Optional[MenuEntry]):
        if entry == MenuEntry.GRASP:
            self.backend.send_grasp_goal(GraspGoal(close_gripper=True))
        elif entry == MenuEntry.RELEASE:
            self.backend.send_grasp_goal(GraspGoal(close_gripper=False))
        elif entry == MenuEntry.PICKUP:
            self.backend.send_pickup_goal(PickupGoal())
        elif entry == MenuEntry.HOME:
            self.home_arm(retract=False)
        elif entry == MenuEntry.RETRACT_HOME:
            self.home_arm(retract=True)
        else:
            self.logger.debug(f"Ignoring unknown menu entry {entry}")

    def home_arm(self, retract: bool) -> GoalOutcome:
        """Send the arm home and wait a bounded time for it to arrive"""
        self.backend.cancel_manipulation_goals()

        home_config = self.config['home']
        if retract:
            goal = HomeGoal(
                retract=True,
                retract_position=RetractPosition(joints=list(home_config['retract_joints']))
            )
            timeout = home_config['retract_timeout_sec']
        else:
            goal = HomeGoal(retract=False)
            timeout = home_config['home_timeout_sec']

        self.logger.info(f"{'Retracting' if retract else 'Homing'} arm (timeout {timeout:.1f}s)")
        outcome = self.backend.home_arm(goal, timeout)
        if outcome == GoalOutcome.TIMED_OUT:
            self.logger.info("Home arm goal did not finish before the timeout")
        return outcome

    def send_pose_command(self, pose: EndEffectorPose):
        """Stream the dragged marker pose to the arm as a position command"""
        self.backend.cancel_manipulation_goals()

        # The arm expects roll, pitch, yaw instead of a quaternion
        rpy = self.backend.quaternion_to_euler(pose.orientation)
        if rpy is None:
            self.conversion_failure_count += 1
            self.logger.info("Quaternion to Euler conversion service failed, could not send pose update")
            return

        cmd = CartesianCommand(
            position=True,
            arm_command=True,
            finger_command=False,
            repeat=False,
            linear=pose.position.copy(),
        )
        cmd.angular[:] = rpy
        self.backend.publish_cartesian_command(cmd)
        self.pose_command_count += 1

    def send_stop_command(self):
        """Hold zero velocity and drop any queued trajectory"""
        self.backend.publish_cartesian_command(CartesianCommand.hold_still())
        self.stop_command_count += 1

        if not self.backend.erase_trajectories():
            self.logger.info("Could not call erase trajectories service...")

    def print_stats(self):
        self.logger.info(
            f"📊 Interaction stats: {self.pose_command_count} pose commands, "
            f"{self.stop_command_count} stop commands, "
            f"{self.fk_failure_count} FK failures, "
            f"{self.conversion_failure_count} conversion failures, "
            f"{self.rejected_joint_state_count} rejected joint states"
        )
