"""
Action goal bookkeeping

rclpy action clients have no client-side "cancel all goals", so a
GoalChannel remembers the goals it sent. A goal that is still waiting for
acceptance when ``cancel_all`` runs is cancelled as soon as it is accepted.
"""

import threading
import time

from jaco_interaction.core.types import GoalOutcome
from jaco_interaction.utils.futures import wait_for_future

# action_msgs/msg/GoalStatus.STATUS_SUCCEEDED
STATUS_SUCCEEDED = 4


class GoalChannel:
    """Action client wrapper that can cancel every goal it sent"""

    def __init__(self, client, action_name: str, logger,
                 is_ok=None, succeeded_status: int = STATUS_SUCCEEDED):
        self.client = client
        self.action_name = action_name
        self.logger = logger
        self.is_ok = is_ok if is_ok else (lambda: True)
        self.succeeded_status = succeeded_status

        self._lock = threading.Lock()
        self._active_handles = []
        self._pending = set()
        self._cancel_on_accept = set()

    def wait_for_server(self, log_period_sec: float = 5.0) -> bool:
        """Block until the action server is available; False on shutdown"""
        while self.is_ok():
            if self.client.wait_for_server(timeout_sec=log_period_sec):
                return True
            self.logger.info(f"Still waiting for action server {self.action_name}...")
        return False

    def server_is_ready(self) -> bool:
        return self.client.server_is_ready()

    def send(self, goal):
        """Send a goal without waiting for it to be accepted"""
        future = self.client.send_goal_async(goal)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._goal_response)
        return future

    def _goal_response(self, future):
        try:
            goal_handle = future.result()
        except Exception as e:
            goal_handle = None
            self.logger.warning(f"{self.action_name} goal request failed: {e}")
        accepted = goal_handle is not None and goal_handle.accepted

        # Pending to active is atomic with respect to cancel_all
        with self._lock:
            self._pending.discard(future)
            cancel = future in self._cancel_on_accept
            self._cancel_on_accept.discard(future)
            if accepted and not cancel:
                self._active_handles.append(goal_handle)

        if goal_handle is not None and not accepted:
            self.logger.warning(f"{self.action_name} goal rejected")
        if not accepted:
            return

        if cancel:
            goal_handle.cancel_goal_async()
            return

        goal_handle.get_result_async().add_done_callback(
            lambda _: self._forget(goal_handle)
        )

    def _forget(self, goal_handle):
        with self._lock:
            if goal_handle in self._active_handles:
                self._active_handles.remove(goal_handle)

    def cancel_all(self):
        """Cancel active goals and any goal still waiting for acceptance"""
        with self._lock:
            handles = list(self._active_handles)
            self._active_handles.clear()
            self._cancel_on_accept.update(self._pending)

        for goal_handle in handles:
            goal_handle.cancel_goal_async()

    def wait_for_result(self, send_future, timeout_sec: float) -> GoalOutcome:
        """Wait for a goal sent with ``send`` to finish.

        Acceptance and execution share one deadline of ``timeout_sec``.
        """
        deadline = time.monotonic() + timeout_sec

        if not wait_for_future(send_future, timeout_sec):
            return GoalOutcome.TIMED_OUT

        try:
            goal_handle = send_future.result()
        except Exception:
            return GoalOutcome.FAILED
        if goal_handle is None or not goal_handle.accepted:
            return GoalOutcome.FAILED

        remaining = deadline - time.monotonic()
        result_future = goal_handle.get_result_async()
        if remaining <= 0.0 or not wait_for_future(result_future, remaining):
            return GoalOutcome.TIMED_OUT

        result = result_future.result()
        if result is not None and result.status == self.succeeded_status:
            return GoalOutcome.SUCCEEDED
        return GoalOutcome.FAILED

    def destroy(self):
        self.client.destroy()
