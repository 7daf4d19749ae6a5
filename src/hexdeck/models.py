"""Centralized Pydantic models and enums for hexdeck."""

from __future__ import annotations

from enum import Enum
from importlib import resources
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from hexdeck.constants import (
    DASHBOARD_DIR_NAME,
    DATA_DIR_NAME,
    DEFAULT_POLL_ATTEMPTS,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_PROBE_TIMEOUT,
    PID_FILE_NAME,
    SERVER_BINARY_NAME,
    SERVER_HOST,
    SERVER_PORT,
)
from hexdeck.errors import EnvironmentUnresolvedError


# === Enums ===


class EnsureOutcome(str, Enum):
    """How a single ensure pass ended."""

    ALREADY_RUNNING = "already_running"
    BECAME_REACHABLE = "became_reachable"
    SPAWNED = "spawned"
    SPAWN_SUPPRESSED = "spawn_suppressed"
    SPAWN_FAILED = "spawn_failed"
    SPAWNED_UNREACHABLE = "spawned_unreachable"
    ENVIRONMENT_ERROR = "environment_error"

    @property
    def reachable(self) -> bool:
        return self in (
            EnsureOutcome.ALREADY_RUNNING,
            EnsureOutcome.BECAME_REACHABLE,
            EnsureOutcome.SPAWNED,
        )


class SupervisorLogComponent(str, Enum):
    """Where a log originated (used for filtering diagnostics)."""

    SUPERVISOR = "supervisor"
    PROBE = "probe"
    PIDFILE = "pidfile"
    SPAWN = "spawn"
    CLI = "cli"


# === Base Models ===


class ServerEndpoint(BaseModel):
    """The host/port pair the supervisor considers "the server"."""

    host: str = SERVER_HOST
    port: int = Field(default=SERVER_PORT, ge=1, le=65535)

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @property
    def address(self) -> tuple[str, int]:
        return (self.host, self.port)


class PidRecord(BaseModel):
    """PID file contents written by the server at its own startup.

    Only pid and port are required; the server also records when it started
    and which dashboard export it serves.
    """

    pid: PositiveInt
    port: int = Field(ge=0, le=65535)
    started_at: str | None = Field(default=None, alias="startedAt")
    dashboard_dir: str | None = Field(default=None, alias="dashboardDir")

    model_config: ClassVar[ConfigDict] = ConfigDict(
        frozen=True, populate_by_name=True, extra="ignore"
    )


class LogEntry(BaseModel):
    """A single buffered diagnostic line."""

    timestamp: str
    level: str
    component: SupervisorLogComponent
    content: str


# === Settings ===


def _packaged_resource_dir() -> Path:
    return Path(str(resources.files("hexdeck"))) / "resources"


class SupervisorSettings(BaseModel):
    """Complete configuration for the server supervisor.

    This is the single source of truth for supervisor defaults. Directories
    left as None are resolved lazily so that an unusable environment surfaces
    as an EnvironmentUnresolvedError inside an ensure pass rather than at
    import time.
    """

    endpoint: ServerEndpoint = Field(default_factory=ServerEndpoint)
    data_dir: Path | None = None
    resource_dir: Path | None = None
    probe_timeout: float = Field(default=DEFAULT_PROBE_TIMEOUT, gt=0)
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, ge=0)
    poll_attempts: int = Field(default=DEFAULT_POLL_ATTEMPTS, ge=1)

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @property
    def wait_budget(self) -> float:
        """Upper bound, in seconds of sleeping, of one polling window."""
        return self.poll_interval * self.poll_attempts

    def resolve_data_dir(self) -> Path:
        if self.data_dir is not None:
            return self.data_dir
        try:
            return Path.home() / DATA_DIR_NAME
        except (RuntimeError, KeyError) as e:
            raise EnvironmentUnresolvedError(
                f"Cannot resolve home directory: {e}"
            ) from e

    def resolve_resource_dir(self) -> Path:
        if self.resource_dir is not None:
            return self.resource_dir
        try:
            return _packaged_resource_dir()
        except (ModuleNotFoundError, TypeError, ValueError) as e:
            raise EnvironmentUnresolvedError(
                f"Cannot resolve resource dir: {e}"
            ) from e

    def pid_file(self) -> Path:
        return self.resolve_data_dir() / PID_FILE_NAME

    def binary_path(self) -> Path:
        return self.resolve_resource_dir() / SERVER_BINARY_NAME

    def dashboard_dir(self) -> Path:
        return self.resolve_resource_dir() / DASHBOARD_DIR_NAME
