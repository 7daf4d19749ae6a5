"""Launching the companion server as a detached process.

The spawned server is not owned by the supervisor: it runs in its own
session with discarded stdio, nothing waits on it, and it keeps running
after the menubar shell exits.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Any

from hexdeck.errors import ServerBinaryNotFoundError, SpawnError
from hexdeck.models import SupervisorLogComponent, SupervisorSettings
from hexdeck.server.logging import get_logger

logger = get_logger(SupervisorLogComponent.SPAWN)


def build_server_command(settings: SupervisorSettings) -> list[str]:
    """Build the server argv, adding --dashboard-dir only if the export exists."""
    cmd = [str(settings.binary_path()), "--port", str(settings.endpoint.port)]
    dashboard_dir = settings.dashboard_dir()
    if dashboard_dir.exists():
        cmd += ["--dashboard-dir", str(dashboard_dir)]
    return cmd


def ensure_executable(binary: Path) -> None:
    """Re-assert 0o755 on POSIX; bundlers sometimes drop the executable bit."""
    if os.name == "nt":
        return
    try:
        binary.chmod(0o755)
    except OSError as e:
        logger.warning(f"Could not set executable bit on {binary}: {e}")


def _detach_kwargs() -> dict[str, Any]:
    popen_kwargs: dict[str, Any] = {}
    if os.name == "nt":
        popen_kwargs["creationflags"] = (
            subprocess.CREATE_NEW_PROCESS_GROUP  # type: ignore[attr-defined]
            | subprocess.DETACHED_PROCESS  # type: ignore[attr-defined]
        )
    else:
        popen_kwargs["start_new_session"] = True
    return popen_kwargs


def spawn_server(settings: SupervisorSettings) -> int:
    """Start the server detached from this process and return its pid.

    Raises:
        EnvironmentUnresolvedError: the resource directory cannot be resolved.
        ServerBinaryNotFoundError: the bundled executable is missing.
        SpawnError: the executable exists but could not be launched.
    """
    binary = settings.binary_path()
    if not binary.is_file():
        raise ServerBinaryNotFoundError(f"Server binary not found at {binary}")

    ensure_executable(binary)
    cmd = build_server_command(settings)

    try:
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            close_fds=True,
            **_detach_kwargs(),
        )
    except (OSError, ValueError, subprocess.SubprocessError) as e:
        raise SpawnError(f"Failed to spawn server: {e}") from e

    logger.info(f"Spawned {binary.name} pid={proc.pid} on port {settings.endpoint.port}")
    return proc.pid
