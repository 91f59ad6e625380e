"""volley run -- execute a suite and report the results.

Loads the suite, applies command-line overrides, runs the tests
sequentially (or concurrently, or a single named test), renders the
report in the requested format, and exits 1 if anything failed.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from volley.client.base import ClientConfigError
from volley.client.http import HTTPClient
from volley.execution.orchestrator import Orchestrator, TestNotFoundError
from volley.loader.suite import SuiteLoadError, apply_overrides, load_suite
from volley.logs import configure_logging
from volley.models.result import RunReport
from volley.models.suite import SuiteConfig
from volley.reporting import render_results, render_summary, save_html, save_json

console = Console(stderr=True)


class OutputFormat(str, Enum):
    console = "console"
    json = "json"
    html = "html"


DEFAULT_OUTPUT: dict[OutputFormat, str] = {
    OutputFormat.json: "test-report.json",
    OutputFormat.html: "test-report.html",
}


def run(
    suite_path: str = typer.Argument(..., help="Path to the suite YAML file"),
    url: Optional[str] = typer.Option(
        None, "--url", envvar="VOLLEY_BASE_URL", help="Base URL (overrides the suite)"
    ),
    version: Optional[str] = typer.Option(
        None, "--version", help="API version to test (overrides the suite)"
    ),
    cert: Optional[str] = typer.Option(None, "--cert", help="Client certificate file"),
    key: Optional[str] = typer.Option(None, "--key", help="Client key file"),
    ca: Optional[str] = typer.Option(None, "--ca", help="CA bundle file"),
    output_format: OutputFormat = typer.Option(
        OutputFormat.console, "--format", "-f", help="Report format"
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Report file for json/html formats"
    ),
    concurrent: bool = typer.Option(
        False, "--concurrent", help="Run tests concurrently (dependencies are not enforced)"
    ),
    workers: int = typer.Option(5, "--workers", min=1, help="Max concurrent tests"),
    test: Optional[str] = typer.Option(None, "--test", "-t", help="Run only the named test"),
    log_level: str = typer.Option(
        "WARNING", "--log-level", envvar="VOLLEY_LOG_LEVEL", help="Log level for stderr logs"
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines"),
) -> None:
    """Run the tests of a suite against an API."""
    try:
        configure_logging(log_level, json_output=json_logs)
    except ValueError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    filepath = Path(suite_path)
    try:
        config = load_suite(filepath, version=version)
    except SuiteLoadError as exc:
        console.print(f"[bold red]Failed to load suite:[/bold red] {exc}")
        for err in exc.errors:
            loc = f" (line {err.line})" if err.line else ""
            console.print(f"  {err.field}: {err.message}{loc}")
        raise typer.Exit(code=1)

    config = apply_overrides(
        config, base_url=url, version=version, cert_file=cert, key_file=key, ca_file=ca
    )

    try:
        client = HTTPClient.from_suite(config)
    except ClientConfigError as exc:
        console.print(f"[bold red]Client configuration error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    try:
        report = asyncio.run(
            _run_async(
                client, config, filepath.stem, concurrent=concurrent, workers=workers, test=test
            )
        )
    except TestNotFoundError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    _emit_report(report, output_format, output)

    if report.failed > 0:
        raise typer.Exit(code=1)


async def _run_async(
    client: HTTPClient,
    config: SuiteConfig,
    config_name: str,
    *,
    concurrent: bool,
    workers: int,
    test: str | None,
) -> RunReport:
    async with client:
        orchestrator = Orchestrator(client, config, config_name=config_name)

        if test:
            result = await orchestrator.run_one(test)
            report = RunReport(
                start_time=result.executed_at,
                version=config.version,
                base_url=config.base_url,
                config_name=config_name,
            )
            report.record(result)
            report.finalize(result.executed_at + timedelta(seconds=result.duration))
            return report

        if concurrent:
            console.print(
                f"Running {len(config.apis)} tests concurrently (max workers: {workers})..."
            )
            return await orchestrator.run_concurrent(workers)

        console.print(f"Running {len(config.apis)} tests sequentially...")
        return await orchestrator.run_sequential()


def _emit_report(report: RunReport, output_format: OutputFormat, output: str | None) -> None:
    if output_format is OutputFormat.console:
        output_console = Console()
        render_summary(report, output_console)
        render_results(report, output_console)
        return

    target = Path(output or DEFAULT_OUTPUT[output_format])
    try:
        if output_format is OutputFormat.json:
            save_json(report, target)
        else:
            save_html(report, target)
    except OSError as exc:
        console.print(f"[bold red]Failed to save {output_format.value} report:[/bold red] {exc}")
        raise typer.Exit(code=1)
    typer.echo(f"{output_format.value.upper()} report saved to: {target}")
