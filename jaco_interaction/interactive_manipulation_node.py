#!/usr/bin/env python3
"""
JACO Interactive Manipulation Node

Serves an interactive marker for the JACO hand and forwards interactions to
the arm driver.

Responsibilities:
- Joint state tracking
- Hand marker pose synchronization from forward kinematics
- Stop, pose, grasp, pickup and home commands from marker interaction
- Diagnostics
"""

import threading

import rclpy
from rclpy.node import Node
from rclpy.executors import MultiThreadedExecutor
from rcl_interfaces.msg import ParameterDescriptor

from sensor_msgs.msg import JointState

# ROS 2 Diagnostics
from diagnostic_updater import Updater, DiagnosticTask, DiagnosticStatus

from jaco_interaction.backends.jaco_backend import JacoBackend
from jaco_interaction.core.config import apply_update_rate, load_config
from jaco_interaction.interactive_manipulation import InteractiveManipulation
from jaco_interaction.marker_server import HandMarkerServer
from jaco_interaction.utils.ros2_utils import create_best_effort_qos


class InteractionStatusTask(DiagnosticTask):
    """Diagnostic task for the marker interaction adapter"""

    def __init__(self, name, node):
        super().__init__(name)
        self.node = node

    def run(self, stat):
        backend = self.node.backend
        manipulation = self.node.manipulation
        servers_ready = all(channel.server_is_ready() for channel in backend.channels)

        if not servers_ready:
            stat.summary(DiagnosticStatus.ERROR, "Arm action servers unavailable")
        elif manipulation.marker is None:
            stat.summary(DiagnosticStatus.WARN, "Hand marker not created yet")
        elif manipulation.fk_failure_count > 0 and not backend.fk_client.service_is_ready():
            stat.summary(DiagnosticStatus.WARN, "Forward kinematics unavailable - marker frozen")
        else:
            stat.summary(DiagnosticStatus.OK, "Interactive manipulation running")

        for channel in backend.channels:
            stat.add(f"{channel.action_name} Action", "Available" if channel.server_is_ready() else "Unavailable")
        stat.add("FK Service", "Available" if backend.fk_client.service_is_ready() else "Unavailable")
        stat.add("Conversion", "Local" if backend.use_local_euler else
                 ("Available" if backend.qe_client.service_is_ready() else "Unavailable"))
        stat.add("Pose Locked", str(manipulation.lock_pose))
        stat.add("Pose Commands Sent", str(manipulation.pose_command_count))
        stat.add("Stop Commands Sent", str(manipulation.stop_command_count))
        stat.add("FK Failures", str(manipulation.fk_failure_count))
        stat.add("Conversion Failures", str(manipulation.conversion_failure_count))
        stat.add("Rejected Joint States", str(manipulation.rejected_joint_state_count))
        return stat


class InteractiveManipulationNode(Node):
    """Interactive marker teleoperation of the JACO arm"""

    def __init__(self):
        super().__init__('jaco_interactive_manipulation')

        # Parameters
        self.declare_parameter('config_file', '')
        # Launch arguments may arrive as int or double
        self.declare_parameter('update_rate', 0.0, ParameterDescriptor(dynamic_typing=True))

        self.config = load_config(self.get_parameter('config_file').value or None)
        apply_update_rate(self.config, self.get_parameter('update_rate').value)

        self.backend = JacoBackend(self, self.config)
        self.marker_server = HandMarkerServer(self, self.config['marker']['server_topic'])
        self.manipulation = InteractiveManipulation(
            self.backend, self.marker_server, self.config, logger=self.get_logger()
        )

        # Subscribers
        self.joint_state_sub = self.create_subscription(
            JointState,
            self.config['topics']['joint_states'],
            self.joint_state_callback,
            create_best_effort_qos(depth=1)
        )

        # Diagnostics
        self.diagnostic_updater = Updater(self, period=self.config['node']['diagnostics_period_sec'])
        self.diagnostic_updater.setHardwareID('jaco_arm')
        self.diagnostic_updater.add(InteractionStatusTask("Interactive Manipulation Status", self))

        self.update_timer = None

    def start(self) -> bool:
        """Create the hand marker and start following the arm.

        Blocks until the arm's action servers are available, so the node
        must already be spinning in an executor. Returns False if the node
        was shut down before they came up.
        """
        if not self.manipulation.start():
            return False

        period = 1.0 / self.config['node']['update_rate']
        self.update_timer = self.create_timer(period, self.manipulation.update_marker_position)
        self.get_logger().info(
            f"✅ Interactive manipulation ready, updating marker at {self.config['node']['update_rate']:.1f} Hz"
        )
        return True

    def joint_state_callback(self, msg: JointState):
        self.manipulation.update_joints(msg.position)

    def destroy_node(self):
        """Clean shutdown"""
        if self.update_timer is not None:
            self.update_timer.cancel()
        self.marker_server.clear()
        self.backend.destroy()
        super().destroy_node()


def main(args=None):
    rclpy.init(args=args)

    node = InteractiveManipulationNode()

    # Multi-threaded so service and action responses arrive while a marker callback waits
    executor = MultiThreadedExecutor(num_threads=4)
    executor.add_node(node)
    spin_thread = threading.Thread(target=executor.spin, daemon=True)
    spin_thread.start()

    try:
        if node.start():
            spin_thread.join()
    except KeyboardInterrupt:
        node.get_logger().info("Keyboard interrupt, shutting down...")
    finally:
        node.manipulation.print_stats()
        executor.shutdown()
        node.destroy_node()
        if rclpy.ok():
            rclpy.shutdown()


if __name__ == '__main__':
    main()
