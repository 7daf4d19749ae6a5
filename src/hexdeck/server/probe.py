"""Reachability probing for the companion server."""

from __future__ import annotations

import socket
import time
from collections.abc import Callable

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from hexdeck.models import ServerEndpoint, SupervisorLogComponent
from hexdeck.server.logging import get_logger

logger = get_logger(SupervisorLogComponent.PROBE)

ReachabilityProbe = Callable[[], bool]
SleepFn = Callable[[float], None]


def is_server_reachable(endpoint: ServerEndpoint, timeout: float = 2.0) -> bool:
    """Return True if a TCP connection to the endpoint succeeds within timeout."""
    try:
        with socket.create_connection(endpoint.address, timeout=timeout):
            return True
    except (socket.timeout, OSError):
        return False


def _log_poll_attempt(retry_state: RetryCallState) -> None:
    logger.debug(f"Server not reachable yet (attempt {retry_state.attempt_number})")


def wait_until_reachable(
    probe: ReachabilityProbe,
    *,
    attempts: int,
    interval: float,
    sleep: SleepFn = time.sleep,
) -> bool:
    """Poll `probe` until it reports reachable or the attempt budget runs out.

    Sleeps `interval` before every probe, so the probe runs at most `attempts`
    times and the total sleeping time never exceeds `attempts * interval`.
    """
    if attempts <= 0:
        return False

    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_fixed(interval),
        retry=retry_if_result(lambda reachable: not reachable),
        retry_error_callback=lambda _state: False,
        before_sleep=_log_poll_attempt,
        sleep=sleep,
    )
    sleep(interval)
    return bool(retrying(probe))
