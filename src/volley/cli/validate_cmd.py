"""volley validate -- check suite files without running them.

Every file is parsed and validated in full so that all of its
problems are reported in one pass.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from volley.loader.errors import ErrorFormatter
from volley.loader.validator import validate_suite_file


def _discover(directory: Path) -> list[Path]:
    return sorted(list(directory.glob("**/*.yaml")) + list(directory.glob("**/*.yml")))


def validate(
    suites: Optional[list[str]] = typer.Argument(
        None, help="Suite files to validate (default: all YAML under testdata/)"
    ),
    ci: Optional[bool] = typer.Option(
        None, "--ci/--no-ci", help="Concise file:line:col output (default: from $CI)"
    ),
) -> None:
    """Validate suite YAML files. Exits 1 if any file has errors."""
    formatter = ErrorFormatter(ci_mode=ci)

    files: list[Path] = []
    if suites:
        for name in suites:
            path = Path(name)
            if not path.is_file():
                typer.echo(f"Error: File not found: {name}", err=True)
                raise typer.Exit(code=1)
            files.append(path)
    else:
        default_dir = Path.cwd() / "testdata"
        if default_dir.is_dir():
            files = _discover(default_dir)
        if not files:
            typer.echo("No suite files found. Pass files or create a testdata/ directory.")
            raise typer.Exit(code=1)

    invalid = 0
    for filepath in files:
        source = filepath.read_text(encoding="utf-8")
        _, errors = validate_suite_file(filepath)
        if errors:
            invalid += 1
            typer.echo(formatter.format_all(errors, source, str(filepath)), err=not formatter.ci_mode)
        else:
            typer.echo(f"  {filepath} ... valid")

    typer.echo(f"\n{len(files) - invalid}/{len(files)} suites valid")
    if invalid:
        raise typer.Exit(code=1)
