"""Centralized logging for the server supervisor (buffering and CLI formatting).

The supervisor runs on background threads inside the menubar shell, so its
diagnostics go into a bounded in-memory buffer the UI can read, and are
optionally echoed to the terminal through rich.
"""

from __future__ import annotations

import contextlib
import io
import logging
import sys
import threading
import time
from collections import deque
from collections.abc import Generator
from typing import Any, ClassVar, TypeAlias

from pydantic import BaseModel, ConfigDict
from rich.text import Text
from typing_extensions import override

from hexdeck.constants import DEFAULT_LOG_BUFFER_SIZE
from hexdeck.models import LogEntry, SupervisorLogComponent
from hexdeck.utils import console

LogBuffer: TypeAlias = deque[LogEntry]

_LEVEL_STYLES: dict[str, str] = {
    "DEBUG": "dim",
    "INFO": "bright_blue",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold red",
}


class _SupervisorLogState(BaseModel):
    model_config: ClassVar[ConfigDict] = ConfigDict(arbitrary_types_allowed=True)

    buffer: LogBuffer | None = None
    echo: bool = False
    configured: bool = False


_STATE = _SupervisorLogState()
_BUFFER_LOCK = threading.Lock()


def _now_timestamp(created: float | None = None) -> str:
    t = time.localtime(created if created is not None else time.time())
    return time.strftime("%Y-%m-%d %H:%M:%S", t)


def _append_entry(
    *,
    component: SupervisorLogComponent,
    level: str,
    content: str,
    created: float | None = None,
) -> None:
    entry = LogEntry(
        timestamp=_now_timestamp(created),
        level=level,
        component=component,
        content=content,
    )
    if _STATE.buffer is not None:
        with _BUFFER_LOCK:
            _STATE.buffer.append(entry)
    if _STATE.echo:
        print_log_entry(entry)


class _BufferedLogHandler(logging.Handler):
    buffer_component: SupervisorLogComponent

    def __init__(self, *, component: SupervisorLogComponent):
        super().__init__()
        self.buffer_component = component

    @override
    def emit(self, record: logging.LogRecord) -> None:
        try:
            _append_entry(
                component=self.buffer_component,
                level=record.levelname,
                content=self.format(record),
                created=record.created,
            )
        except Exception:
            self.handleError(record)


def configure_logging(
    *,
    buffer: LogBuffer | None = None,
    echo: bool = False,
    level: int = logging.INFO,
) -> LogBuffer:
    """Configure all supervisor loggers to write into a shared in-memory buffer.

    Returns the buffer in use so callers that did not pass one can read it.
    """
    if buffer is None:
        buffer = deque(maxlen=DEFAULT_LOG_BUFFER_SIZE)
    _STATE.buffer = buffer
    _STATE.echo = echo

    for component in SupervisorLogComponent:
        logger = logging.getLogger(f"hexdeck.{component.value}")
        logger.setLevel(level)
        logger.handlers.clear()
        handler = _BufferedLogHandler(component=component)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    _STATE.configured = True
    return buffer


def get_logger(component: SupervisorLogComponent) -> logging.Logger:
    """Get a supervisor logger for a component (do not call stdlib logging directly)."""
    logger = logging.getLogger(f"hexdeck.{component.value}")
    if not _STATE.configured:
        if not logger.handlers:
            logger.addHandler(logging.NullHandler())
    return logger


def recent_entries(
    limit: int | None = None,
    *,
    component: SupervisorLogComponent | None = None,
) -> list[LogEntry]:
    """Return buffered entries, oldest first."""
    if _STATE.buffer is None:
        return []
    with _BUFFER_LOCK:
        entries = list(_STATE.buffer)
    if component is not None:
        entries = [e for e in entries if e.component == component]
    if limit is not None:
        entries = entries[-limit:] if limit > 0 else []
    return entries


@contextlib.contextmanager
def suppress_output_and_logs() -> Generator[None, None, None]:
    """Suppress stdout, stderr and logging output temporarily."""
    old_stdout = sys.stdout
    old_stderr = sys.stderr
    old_echo = _STATE.echo

    root_logger = logging.getLogger()
    original_root_level = root_logger.level

    try:
        sys.stdout = io.StringIO()
        sys.stderr = io.StringIO()
        root_logger.setLevel(logging.CRITICAL)
        _STATE.echo = False
        yield
    finally:
        sys.stdout = old_stdout
        sys.stderr = old_stderr
        root_logger.setLevel(original_root_level)
        _STATE.echo = old_echo


def print_log_entry(
    entry: LogEntry | dict[str, Any],
    *,
    raw_output: bool = False,
) -> None:
    """Print a single log entry with a `[component]` prefix."""
    if isinstance(entry, dict):
        entry = LogEntry.model_validate(entry)

    if raw_output:
        print(entry.content)
        return

    ts = Text(entry.timestamp, style="dim")
    sep = Text(" | ")
    prefix = Text(
        f"[{entry.component.value}]",
        style=_LEVEL_STYLES.get(entry.level, "bright_blue"),
    )
    content = Text(entry.content)
    console.print(ts + sep + prefix + sep + content)
