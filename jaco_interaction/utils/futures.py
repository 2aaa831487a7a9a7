"""
Bounded waits on rclpy futures

These helpers only rely on the future and client interfaces
(``done``/``add_done_callback``/``result``, ``service_is_ready``/``call_async``),
so they do not import rclpy themselves.
"""

import threading


def wait_for_future(future, timeout_sec: float) -> bool:
    """Block until ``future`` is done or the timeout expires.

    The future must be completed by another executor thread; returns True if
    it finished in time.
    """
    if future.done():
        return True

    event = threading.Event()
    future.add_done_callback(lambda _: event.set())
    return event.wait(timeout=timeout_sec)


def call_service(client, request, timeout_sec: float, logger, service_name: str):
    """Synchronous service call; None on unavailability, timeout or error"""
    if not client.service_is_ready():
        logger.debug(f"{service_name} service not available")
        return None

    future = client.call_async(request)
    if not wait_for_future(future, timeout_sec):
        future.cancel()
        logger.debug(f"{service_name} service timed out")
        return None

    try:
        return future.result()
    except Exception as e:
        logger.debug(f"{service_name} service call raised: {e}")
        return None
