"""volley list -- print the tests a suite would run."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from volley.loader.suite import SuiteLoadError, load_suite


def list_tests(
    suite_path: str = typer.Argument(..., help="Path to the suite YAML file"),
    version: Optional[str] = typer.Option(
        None, "--version", help="Only list tests that apply to this version"
    ),
) -> None:
    """List test names, numbered, after version filtering."""
    try:
        config = load_suite(Path(suite_path), version=version)
    except SuiteLoadError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo("Available tests:")
    for index, name in enumerate(config.test_names(), 1):
        typer.echo(f"  {index}. {name}")
