"""Server commands for the hexdeck CLI."""

import time
from typing import Annotated

from rich.table import Table
from typer import Exit, Option, Typer

from hexdeck.config import load_settings
from hexdeck.errors import EnvironmentUnresolvedError
from hexdeck.server.logging import configure_logging, suppress_output_and_logs
from hexdeck.server.pidfile import is_process_running, load_pid_record
from hexdeck.server.probe import is_server_reachable
from hexdeck.server.supervisor import ServerSupervisor
from hexdeck.utils import console, format_elapsed_ms


server_app = Typer(name="server", help="Manage the local hexdeck server")


@server_app.command(name="ensure", help="Start the server if it is not running")
def server_ensure(
    quiet: Annotated[
        bool, Option("--quiet", "-q", help="Only report through the exit code")
    ] = False,
):
    """Run one ensure pass in the foreground and report the outcome."""
    configure_logging(echo=not quiet)
    supervisor = ServerSupervisor(load_settings())
    endpoint = supervisor.settings.endpoint

    start = time.perf_counter()
    if quiet:
        with suppress_output_and_logs():
            outcome = supervisor.ensure_running()
    else:
        outcome = supervisor.ensure_running()

    if outcome.reachable:
        if not quiet:
            console.print(
                f"[green]✓[/green] Server reachable at {endpoint.host}:{endpoint.port} "
                f"[dim]({outcome.value}, {format_elapsed_ms(start)})[/dim]"
            )
        return

    if not quiet:
        console.print(
            f"[red]❌ Server not reachable at {endpoint.host}:{endpoint.port} "
            f"({outcome.value})[/red]"
        )
    raise Exit(code=1)


@server_app.command(name="status", help="Show server reachability and PID record")
def server_status():
    """Check the status of the local server."""
    settings = load_settings()
    endpoint = settings.endpoint
    reachable = is_server_reachable(endpoint, timeout=settings.probe_timeout)

    try:
        pid_file = settings.pid_file()
    except EnvironmentUnresolvedError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise Exit(code=1)

    record = load_pid_record(pid_file)

    table = Table(
        title="Hexdeck Server Status",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Field", style="cyan", width=12)
    table.add_column("Value")

    table.add_row(
        "Endpoint",
        f"{endpoint.host}:{endpoint.port} "
        + ("[green]●[/green] Reachable" if reachable else "[red]●[/red] Unreachable"),
    )
    if record is None:
        table.add_row("PID", "[dim]no PID file[/dim]")
    else:
        running = is_process_running(record.pid)
        table.add_row(
            "PID",
            f"{record.pid} " + ("(running)" if running else "[red](dead)[/red]"),
        )
        table.add_row("Port", str(record.port))
        table.add_row("Started", record.started_at or "-")
        table.add_row("Dashboard", record.dashboard_dir or "none")

    console.print(table)
    console.print()
    console.print(f"[dim]PID file: {pid_file}[/dim]")
