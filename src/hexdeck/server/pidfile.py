"""PID record helpers.

The server writes `server.pid` itself at startup; the supervisor only reads
it and removes it once it is known to be stale.
"""

from __future__ import annotations

import json
from pathlib import Path

import psutil
from pydantic import ValidationError

from hexdeck.models import PidRecord, SupervisorLogComponent
from hexdeck.server.logging import get_logger

logger = get_logger(SupervisorLogComponent.PIDFILE)


def load_pid_record(path: Path) -> PidRecord | None:
    """Read the PID record, returning None if it is missing or unreadable."""
    try:
        data = path.read_text()
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read PID file {path}: {e}")
        return None

    try:
        return PidRecord.model_validate(json.loads(data))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.debug(f"Ignoring malformed PID file {path}: {e}")
        return None


def clear_pid_record(path: Path) -> bool:
    """Delete the PID file if present. Returns False only if deletion failed."""
    try:
        path.unlink(missing_ok=True)
        return True
    except OSError as e:
        logger.error(f"Cannot remove PID file {path}: {e}")
        return False


def is_process_running(pid: int) -> bool:
    """Non-destructive liveness check (signal 0 on POSIX)."""
    if pid <= 0:
        return False
    try:
        return psutil.pid_exists(pid)
    except (psutil.Error, OSError, OverflowError):
        return False
