"""Entry point for the hexdeck CLI."""

from typer import Typer

from hexdeck import __version__
from hexdeck.server.commands import server_app
from hexdeck.utils import console

app = Typer(
    name="hexdeck",
    help="hexdeck menubar companion tooling",
    no_args_is_help=True,
)
app.add_typer(server_app)


@app.command(name="version", help="Print the hexdeck version")
def version():
    console.print(f"hexdeck {__version__}")


def main():
    app()


if __name__ == "__main__":
    main()
