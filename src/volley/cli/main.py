"""Volley CLI entry point."""

import typer

from volley import __version__
from volley.cli.list_cmd import list_tests
from volley.cli.run_cmd import run
from volley.cli.validate_cmd import validate

app = typer.Typer(
    name="volley",
    help="Declarative API test runner",
    no_args_is_help=True,
)

app.command()(run)
app.command(name="list")(list_tests)
app.command()(validate)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"volley {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Declarative API test runner."""
