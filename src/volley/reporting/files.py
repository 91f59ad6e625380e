"""JSON and HTML report files.

Both writers go through a ``.tmp`` sibling and a rename, so a reader
never sees a half-written report.
"""

from __future__ import annotations

import json
from html import escape
from pathlib import Path
from typing import Any

from volley.models.result import ExecutionResult, RunReport
from volley.reporting.console import report_title, status_label


def _write_atomic(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_file = path.with_name(path.name + ".tmp")
    tmp_file.write_text(content, encoding="utf-8")
    tmp_file.replace(path)


def save_json(report: RunReport, path: Path) -> None:
    _write_atomic(path, report.model_dump_json(indent=2))


def save_html(report: RunReport, path: Path) -> None:
    """Write a self-contained HTML page for ``report``."""
    _write_atomic(path, render_html(report))


_STYLE = """
body { font-family: Arial, sans-serif; background: #f5f5f5; margin: 0; }
.layout { display: flex; }
nav { width: 280px; background: #2c3e50; color: #ecf0f1; position: fixed;
      height: 100vh; overflow-y: auto; }
nav h2 { font-size: 16px; padding: 16px; margin: 0; background: #34495e; }
nav a { display: block; padding: 10px 16px; color: #ecf0f1; text-decoration: none;
        font-size: 13px; border-bottom: 1px solid #34495e; }
nav a:hover { background: #34495e; }
main { margin-left: 280px; padding: 24px; flex: 1; }
.summary { display: grid; grid-template-columns: repeat(auto-fit, minmax(160px, 1fr));
           gap: 12px; margin-bottom: 24px; }
.card { background: #fff; padding: 12px; border-left: 4px solid #4caf50; border-radius: 4px; }
.card h3 { margin: 0 0 6px 0; font-size: 12px; color: #666; }
.card .value { font-size: 20px; font-weight: bold; }
.test { background: #fff; margin: 16px 0; padding: 16px; border-radius: 4px;
        border-left: 4px solid #4caf50; }
.test.fail { border-left-color: #f44336; }
.test.skip { border-left-color: #ff9800; }
.badge { display: inline-block; padding: 2px 10px; border-radius: 3px; color: #fff;
         font-size: 12px; font-weight: bold; }
.badge.pass { background: #4caf50; }
.badge.fail { background: #f44336; }
.badge.skip { background: #ff9800; }
.dot { display: inline-block; width: 8px; height: 8px; border-radius: 50%; margin-right: 8px; }
.dot.pass { background: #4caf50; }
.dot.fail { background: #f44336; }
.dot.skip { background: #ff9800; }
.error { background: #fff3cd; color: #856404; padding: 10px; border-radius: 3px; margin: 8px 0; }
pre { background: #282c34; color: #abb2bf; padding: 10px; border-radius: 4px; overflow-x: auto; }
details summary { cursor: pointer; color: #1976d2; margin-top: 8px; }
"""


def _pretty(value: Any) -> str:
    if value is None:
        return ""
    try:
        return json.dumps(value, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(value)


def _card(label: str, value: object) -> str:
    return (
        f'<div class="card"><h3>{escape(label)}</h3>'
        f'<div class="value">{escape(str(value))}</div></div>'
    )


def _render_test(index: int, result: ExecutionResult) -> str:
    css = status_label(result).lower()
    parts = [
        f'<section class="test {css}" id="test-{index}">',
        f'<h3>{index}. {escape(result.name)} '
        f'<span class="badge {css}">{status_label(result)}</span></h3>',
    ]
    if result.description:
        parts.append(f"<p>{escape(result.description)}</p>")
    parts.append(
        f"<p><strong>{escape(result.request.method)}</strong> "
        f"{escape(result.request.path)}</p>"
    )

    if result.skipped:
        parts.append(f'<div class="error">Reason: {escape(result.skip_reason)}</div>')
        parts.append("</section>")
        return "\n".join(parts)

    parts.append(
        f"<p>Status: {result.status_code} &middot; Duration: {result.duration:.3f}s"
        + (f" &middot; Retries: {result.retry_count}" if result.retry_count else "")
        + "</p>"
    )
    if result.error:
        parts.append(f'<div class="error">Error: {escape(result.error)}</div>')
    if result.validation is not None and result.validation.errors:
        items = "".join(
            f"<li><strong>{escape(err.field)}</strong>: {escape(err.message)}</li>"
            for err in result.validation.errors
        )
        parts.append(f'<div class="error"><ul>{items}</ul></div>')

    if result.request.body is not None or result.request.query or result.request.headers:
        parts.append("<details><summary>Request</summary>")
        if result.request.headers:
            parts.append(f"<pre>{escape(_pretty(result.request.headers))}</pre>")
        if result.request.query:
            parts.append(f"<pre>{escape(_pretty(result.request.query))}</pre>")
        if result.request.body is not None:
            parts.append(f"<pre>{escape(_pretty(result.request.body))}</pre>")
        parts.append("</details>")

    if result.response is not None:
        body = (
            _pretty(result.response.body_json)
            if result.response.body_json is not None
            else result.response.text
        )
        parts.append("<details><summary>Response</summary>")
        parts.append(f"<pre>{escape(body)}</pre>")
        parts.append("</details>")

    parts.append("</section>")
    return "\n".join(parts)


def render_html(report: RunReport) -> str:
    title = escape(report_title(report))
    nav = "\n".join(
        f'<a href="#test-{i}"><span class="dot {status_label(r).lower()}"></span>'
        f"{i}. {escape(r.name)}</a>"
        for i, r in enumerate(report.results, 1)
    )
    cards = "".join(
        [
            _card("Base URL", report.base_url or "-"),
            _card("Version", report.version or "-"),
            _card("Start Time", report.start_time.strftime("%Y-%m-%d %H:%M:%S")),
            _card("Duration", f"{report.duration:.3f}s"),
            _card("Total", report.total),
            _card("Passed", report.passed),
            _card("Failed", report.failed),
            _card("Skipped", report.skipped),
            _card("Success Rate", f"{report.success_rate:.2f}%"),
        ]
    )
    tests = "\n".join(_render_test(i, r) for i, r in enumerate(report.results, 1))

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title}</title>
<style>{_STYLE}</style>
</head>
<body>
<div class="layout">
<nav><h2>{title}</h2>
{nav}
</nav>
<main>
<h1>{title}</h1>
<div class="summary">{cards}</div>
{tests}
</main>
</div>
</body>
</html>
"""
