"""Environment-driven configuration for the server supervisor.

Values come from the process environment (and a `.env` file, if present)
with defaults taken from `SupervisorSettings`.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from hexdeck.constants import (
    ENV_HOME,
    ENV_POLL_ATTEMPTS,
    ENV_POLL_INTERVAL,
    ENV_PROBE_TIMEOUT,
    ENV_RESOURCE_DIR,
    ENV_SERVER_PORT,
)
from hexdeck.models import ServerEndpoint, SupervisorLogComponent, SupervisorSettings
from hexdeck.server.logging import get_logger

logger = get_logger(SupervisorLogComponent.SUPERVISOR)

_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    ENV_HOME: ("data_dir", lambda v: Path(v).expanduser()),
    ENV_RESOURCE_DIR: ("resource_dir", lambda v: Path(v).expanduser()),
    ENV_PROBE_TIMEOUT: ("probe_timeout", float),
    ENV_POLL_INTERVAL: ("poll_interval", float),
    ENV_POLL_ATTEMPTS: ("poll_attempts", int),
}


def load_dotenv_file(directory: Path | None = None) -> bool:
    """Load `.env` from `directory` (default: the working directory) if present.

    Unreadable or undecodable files are logged and ignored.
    """
    try:
        dotenv_file = (directory or Path.cwd()) / ".env"
        if not dotenv_file.is_file():
            return False
        return load_dotenv(dotenv_file)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Ignoring unreadable .env file: {e}")
        return False


def _validated(field: str, value: Any) -> bool:
    try:
        SupervisorSettings(**{field: value})
        return True
    except ValidationError:
        return False


def load_settings(
    environ: Mapping[str, str] | None = None, *, dotenv: bool = True
) -> SupervisorSettings:
    """Build supervisor settings from environment variables.

    Malformed values are logged and replaced by their defaults so that a bad
    environment never prevents the shell from starting. Each variable is
    validated on its own; one bad value does not discard the others.
    """
    if environ is None:
        if dotenv:
            load_dotenv_file()
        environ = os.environ

    values: dict[str, Any] = {}
    for env_name, (field, convert) in _FIELDS.items():
        raw = environ.get(env_name)
        if not raw:
            continue
        try:
            value = convert(raw)
        except (ValueError, RuntimeError):
            value = None
        if value is None or not _validated(field, value):
            logger.warning(f"Ignoring invalid {env_name}={raw!r}")
            continue
        values[field] = value

    raw_port = environ.get(ENV_SERVER_PORT)
    if raw_port:
        try:
            values["endpoint"] = ServerEndpoint(port=int(raw_port))
        except (ValueError, ValidationError):
            logger.warning(f"Ignoring invalid {ENV_SERVER_PORT}={raw_port!r}")

    return SupervisorSettings(**values)
