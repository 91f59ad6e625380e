"""Rich terminal rendering of a RunReport."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from volley.templating.values import format_value

if TYPE_CHECKING:
    from volley.models.result import ExecutionResult, RunReport


_STATUS_STYLES: dict[str, tuple[str, str]] = {
    "PASS": ("✓ PASS", "bold green"),
    "FAIL": ("✗ FAIL", "bold red"),
    "SKIP": ("⊘ SKIP", "bold yellow"),
}


def status_label(result: ExecutionResult) -> str:
    if result.skipped:
        return "SKIP"
    return "PASS" if result.passed else "FAIL"


def _styled(label: str) -> str:
    text, style = _STATUS_STYLES[label]
    return f"[{style}]{text}[/{style}]"


def report_title(report: RunReport) -> str:
    return f"{report.config_name} API Test Report" if report.config_name else "API Test Report"


def render_summary(report: RunReport, console: Console) -> None:
    """Print the headline key/value table for a run."""
    table = Table(
        title=escape(report_title(report)),
        box=box.SIMPLE,
        show_header=False,
        padding=(0, 2),
    )
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Base URL", escape(report.base_url) or "-")
    table.add_row("Version", escape(report.version) or "-")
    table.add_row("Start Time", report.start_time.strftime("%Y-%m-%d %H:%M:%S"))
    table.add_row("Duration", f"{report.duration:.3f}s")
    table.add_row("Total", str(report.total))
    table.add_row("Passed", f"[green]{report.passed}[/green]")
    table.add_row("Failed", f"[red]{report.failed}[/red]")
    table.add_row("Skipped", f"[yellow]{report.skipped}[/yellow]")
    table.add_row("Success Rate", f"{report.success_rate:.2f}%")

    console.print()
    console.print(table)


def render_results(report: RunReport, console: Console) -> None:
    """Print one row per test, then the details of every non-passing test."""
    table = Table(box=box.SIMPLE_HEAD, padding=(0, 1))
    table.add_column("#", justify="right", style="dim")
    table.add_column("Status")
    table.add_column("Test")
    table.add_column("Request")
    table.add_column("Code", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Retries", justify="right")

    for index, result in enumerate(report.results, 1):
        table.add_row(
            str(index),
            _styled(status_label(result)),
            escape(result.name),
            escape(f"{result.request.method} {result.request.path}"),
            "-" if result.skipped else str(result.status_code),
            "-" if result.skipped else f"{result.duration:.3f}s",
            str(result.retry_count) if result.retry_count else "",
        )
    console.print(table)

    for result in report.results:
        if not result.passed or result.skipped:
            _render_problem(result, console)

    if report.total and report.passed == report.total:
        console.print("[bold green]All tests passed![/bold green]")
    elif report.total:
        console.print("[bold red]Some tests failed![/bold red]")


def _render_problem(result: ExecutionResult, console: Console) -> None:
    console.print(f"{_styled(status_label(result))} [bold]{escape(result.name)}[/bold]")
    if result.description:
        console.print(f"  [dim]{escape(result.description)}[/dim]")

    if result.skipped:
        console.print(f"  [yellow]Reason:[/yellow] {escape(result.skip_reason)}")
        console.print()
        return

    if result.error:
        console.print(f"  [red]Error:[/red] {escape(result.error)}")
    if result.validation is not None:
        for err in result.validation.errors:
            console.print(f"  - {escape(err.field)}: {escape(err.message)}")
            if err.expected is not None and err.actual is not None:
                console.print(f"      expected: {escape(format_value(err.expected))}")
                console.print(f"      actual:   {escape(format_value(err.actual))}")
    console.print()
