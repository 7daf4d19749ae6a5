"""Keeps the companion server running without ever starting two of them.

`ensure_server()` is the only call the menubar shell makes. It returns
immediately; the check/spawn/wait sequence runs on a daemon thread and its
result is observable only through the server becoming reachable and the
diagnostic log.

A single process-wide spawn gate guards against duplicate servers. It is set
right before a spawn and cleared only when the server is later observed as
reachable, so a failed or unreachable spawn suppresses further spawns until
the server comes up some other way or the shell restarts.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from hexdeck.errors import (
    EnvironmentUnresolvedError,
    ServerBinaryNotFoundError,
    SpawnError,
)
from hexdeck.models import EnsureOutcome, SupervisorLogComponent, SupervisorSettings
from hexdeck.server.logging import get_logger
from hexdeck.server.pidfile import (
    clear_pid_record,
    is_process_running,
    load_pid_record,
)
from hexdeck.server.probe import SleepFn, is_server_reachable, wait_until_reachable
from hexdeck.server.process_control import spawn_server

logger = get_logger(SupervisorLogComponent.SUPERVISOR)

Spawner = Callable[[SupervisorSettings], int]


class SpawnGate:
    """Atomic test-and-set flag recording that a spawn has been attempted."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._attempted = False

    @property
    def attempted(self) -> bool:
        with self._lock:
            return self._attempted

    def try_acquire(self) -> bool:
        """Set the flag. Returns False if it was already set."""
        with self._lock:
            if self._attempted:
                return False
            self._attempted = True
            return True

    def reset(self) -> None:
        with self._lock:
            self._attempted = False


# Only one server may exist per machine, so the gate is shared by every
# supervisor in the process.
SPAWN_GATE = SpawnGate()


class ServerSupervisor:
    """Runs the ensure sequence against one server endpoint."""

    def __init__(
        self,
        settings: SupervisorSettings | None = None,
        *,
        gate: SpawnGate | None = None,
        spawner: Spawner = spawn_server,
        sleep: SleepFn = time.sleep,
    ):
        self.settings: SupervisorSettings = settings or SupervisorSettings()
        self.gate: SpawnGate = gate or SPAWN_GATE
        self._spawner: Spawner = spawner
        self._sleep: SleepFn = sleep

    def is_reachable(self) -> bool:
        return is_server_reachable(
            self.settings.endpoint, timeout=self.settings.probe_timeout
        )

    def _wait_until_reachable(self) -> bool:
        return wait_until_reachable(
            self.is_reachable,
            attempts=self.settings.poll_attempts,
            interval=self.settings.poll_interval,
            sleep=self._sleep,
        )

    def ensure_running(self) -> EnsureOutcome:
        """Run one check/reconcile/spawn/wait pass on the calling thread.

        Never raises for expected failures; they are logged and reported
        through the returned outcome.
        """
        try:
            return self._ensure_running()
        except EnvironmentUnresolvedError as e:
            logger.error(f"hexdeck: {e}")
            return EnsureOutcome.ENVIRONMENT_ERROR

    def _ensure_running(self) -> EnsureOutcome:
        if self.is_reachable():
            # Reset so a later kill and restart can trigger a fresh spawn
            self.gate.reset()
            return EnsureOutcome.ALREADY_RUNNING

        pid_file = self.settings.pid_file()
        record = load_pid_record(pid_file)
        if record is not None:
            if not is_process_running(record.pid):
                logger.debug(f"Removing stale PID file for dead pid {record.pid}")
                clear_pid_record(pid_file)
            else:
                logger.info(
                    f"Server pid {record.pid} is alive but port "
                    f"{self.settings.endpoint.port} is not reachable yet; waiting"
                )
                if self._wait_until_reachable():
                    return EnsureOutcome.BECAME_REACHABLE
                logger.warning(
                    f"Server pid {record.pid} still not reachable after "
                    f"{self.settings.wait_budget:g}s"
                )

        if not self.gate.try_acquire():
            logger.debug("Spawn already attempted; not spawning again")
            return EnsureOutcome.SPAWN_SUPPRESSED

        try:
            self._spawner(self.settings)
        except (ServerBinaryNotFoundError, SpawnError) as e:
            logger.error(f"hexdeck: {e}")
            return EnsureOutcome.SPAWN_FAILED

        if self._wait_until_reachable():
            self.gate.reset()
            return EnsureOutcome.SPAWNED

        logger.error(
            f"hexdeck: server spawned but not reachable after "
            f"{self.settings.wait_budget:g}s"
        )
        return EnsureOutcome.SPAWNED_UNREACHABLE

    def _run_guarded(self) -> None:
        try:
            outcome = self.ensure_running()
        except Exception:
            logger.exception("Unexpected error while ensuring the server is running")
            return
        logger.debug(f"Ensure pass finished: {outcome.value}")

    def ensure_in_background(self) -> None:
        """Start an ensure pass on its own daemon thread and return immediately."""
        thread = threading.Thread(
            target=self._run_guarded,
            name="hexdeck-ensure-server",
            daemon=True,
        )
        thread.start()


_default_supervisor: ServerSupervisor | None = None
_default_lock = threading.Lock()


def get_supervisor() -> ServerSupervisor:
    """Return the process-wide supervisor, building it from the environment once."""
    from hexdeck.config import load_settings

    global _default_supervisor
    with _default_lock:
        if _default_supervisor is None:
            _default_supervisor = ServerSupervisor(load_settings())
        return _default_supervisor


def ensure_server() -> None:
    """Fire-and-forget trigger used at shell startup and on demand."""
    try:
        get_supervisor().ensure_in_background()
    except RuntimeError as e:
        logger.error(f"hexdeck: could not start ensure worker: {e}")
    except Exception:
        logger.exception("Unexpected error while starting the ensure worker")
