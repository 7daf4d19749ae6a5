"""Tests for reachability probing and bounded polling."""

from __future__ import annotations

import socket
from collections.abc import Iterator
from unittest.mock import Mock

import pytest

from hexdeck.models import ServerEndpoint
from hexdeck.server.probe import is_server_reachable, wait_until_reachable


@pytest.fixture
def listening_port() -> Iterator[int]:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        sock.listen(1)
        yield sock.getsockname()[1]


@pytest.fixture
def closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestIsServerReachable:
    def test_listening_port_is_reachable(self, listening_port: int) -> None:
        endpoint = ServerEndpoint(port=listening_port)
        assert is_server_reachable(endpoint, timeout=1.0) is True

    def test_closed_port_is_unreachable(self, closed_port: int) -> None:
        endpoint = ServerEndpoint(port=closed_port)
        assert is_server_reachable(endpoint, timeout=1.0) is False


class TestWaitUntilReachable:
    def test_stops_at_first_success(self, sleep) -> None:
        probe = Mock(side_effect=[False, True, False])

        assert wait_until_reachable(probe, attempts=10, interval=0.5, sleep=sleep)
        assert probe.call_count == 2
        assert sleep.calls == [0.5, 0.5]

    def test_budget_is_never_exceeded(self, sleep) -> None:
        probe = Mock(return_value=False)

        assert not wait_until_reachable(probe, attempts=4, interval=0.25, sleep=sleep)
        assert probe.call_count == 4
        assert len(sleep.calls) == 4
        assert sleep.total == pytest.approx(1.0)

    def test_sleeps_before_first_probe(self) -> None:
        order: list[str] = []
        probe = Mock(side_effect=lambda: order.append("probe") or True)

        wait_until_reachable(
            probe, attempts=3, interval=0.1, sleep=lambda _s: order.append("sleep")
        )

        assert order == ["sleep", "probe"]

    def test_zero_attempts_never_probes(self, sleep) -> None:
        probe = Mock(return_value=True)

        assert wait_until_reachable(probe, attempts=0, interval=0.5, sleep=sleep) is False
        probe.assert_not_called()
        assert sleep.calls == []
