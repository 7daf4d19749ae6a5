"""Companion server supervision for the hexdeck menubar shell."""

from hexdeck.server.supervisor import (
    SPAWN_GATE,
    ServerSupervisor,
    SpawnGate,
    ensure_server,
    get_supervisor,
)

__all__ = [
    "SPAWN_GATE",
    "ServerSupervisor",
    "SpawnGate",
    "ensure_server",
    "get_supervisor",
]
