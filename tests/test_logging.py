"""Tests for supervisor diagnostic logging."""

from __future__ import annotations

import logging
import sys
from collections import deque

from hexdeck.models import LogEntry, SupervisorLogComponent
from hexdeck.server.logging import (
    LogBuffer,
    configure_logging,
    get_logger,
    print_log_entry,
    recent_entries,
    suppress_output_and_logs,
)


class TestBufferedLogging:
    def test_entries_carry_component_and_level(self, log_buffer: LogBuffer) -> None:
        get_logger(SupervisorLogComponent.SPAWN).error("Server binary not found")
        get_logger(SupervisorLogComponent.PROBE).info("probing")

        entries = recent_entries()

        assert [(e.component, e.level, e.content) for e in entries] == [
            (SupervisorLogComponent.SPAWN, "ERROR", "Server binary not found"),
            (SupervisorLogComponent.PROBE, "INFO", "probing"),
        ]
        assert list(log_buffer) == entries

    def test_debug_filtered_by_default(self, log_buffer: LogBuffer) -> None:
        get_logger(SupervisorLogComponent.PIDFILE).debug("stale")
        assert len(log_buffer) == 0

    def test_buffer_is_bounded(self) -> None:
        buffer = configure_logging(buffer=deque(maxlen=3))
        logger = get_logger(SupervisorLogComponent.SUPERVISOR)
        for i in range(5):
            logger.info(f"line {i}")

        assert [e.content for e in buffer] == ["line 2", "line 3", "line 4"]

    def test_recent_entries_filters(self, log_buffer: LogBuffer) -> None:
        get_logger(SupervisorLogComponent.SPAWN).info("a")
        get_logger(SupervisorLogComponent.PROBE).info("b")
        get_logger(SupervisorLogComponent.SPAWN).info("c")

        assert [e.content for e in recent_entries(1)] == ["c"]
        assert recent_entries(0) == []
        spawn_only = recent_entries(component=SupervisorLogComponent.SPAWN)
        assert [e.content for e in spawn_only] == ["a", "c"]

    def test_default_buffer_created(self) -> None:
        buffer = configure_logging()
        assert buffer.maxlen is not None


class TestOutput:
    def test_echo_prints_through_console(self, capsys) -> None:
        configure_logging(buffer=deque(), echo=True)
        get_logger(SupervisorLogComponent.SUPERVISOR).warning("still waiting")

        assert "[supervisor]" in capsys.readouterr().out

    def test_suppress_output_and_logs(self, capsys) -> None:
        configure_logging(buffer=deque(), echo=True)
        root_level = logging.getLogger().level

        with suppress_output_and_logs():
            print("hidden")
            sys.stderr.write("hidden too")
            get_logger(SupervisorLogComponent.SUPERVISOR).warning("quiet")

        captured = capsys.readouterr()
        assert "hidden" not in captured.out
        assert "quiet" not in captured.out
        assert logging.getLogger().level == root_level

    def test_print_raw_entry_from_dict(self, capsys) -> None:
        print_log_entry(
            {
                "timestamp": "2026-10-18 10:00:00",
                "level": "INFO",
                "component": "spawn",
                "content": "Spawned hexdeck-server",
            },
            raw_output=True,
        )

        assert capsys.readouterr().out == "Spawned hexdeck-server\n"

    def test_print_formatted_entry(self, capsys) -> None:
        print_log_entry(
            LogEntry(
                timestamp="2026-10-18 10:00:00",
                level="ERROR",
                component=SupervisorLogComponent.SPAWN,
                content="boom",
            )
        )

        out = capsys.readouterr().out
        assert "2026-10-18 10:00:00" in out
        assert "[spawn]" in out
        assert "boom" in out
