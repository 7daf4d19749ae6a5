from __future__ import annotations

from collections import deque
from pathlib import Path

import pytest

from hexdeck.models import ServerEndpoint, SupervisorSettings
from hexdeck.server.logging import LogBuffer, configure_logging
from hexdeck.server.supervisor import SPAWN_GATE


@pytest.fixture(autouse=True)
def log_buffer() -> LogBuffer:
    """Route supervisor logs into a fresh buffer for every test."""
    return configure_logging(buffer=deque(maxlen=200), echo=False)


@pytest.fixture(autouse=True)
def reset_spawn_gate():
    SPAWN_GATE.reset()
    yield
    SPAWN_GATE.reset()


@pytest.fixture
def settings(tmp_path: Path) -> SupervisorSettings:
    data_dir = tmp_path / "home" / ".hexdeck"
    resource_dir = tmp_path / "resources"
    data_dir.mkdir(parents=True)
    resource_dir.mkdir()
    return SupervisorSettings(
        endpoint=ServerEndpoint(port=7433),
        data_dir=data_dir,
        resource_dir=resource_dir,
        probe_timeout=0.1,
        poll_interval=0.5,
        poll_attempts=10,
    )


class SleepRecorder:
    """Stand-in for time.sleep that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()
