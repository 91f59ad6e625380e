"""Tests for the volley run and list CLI commands.

The HTTP client is built from the suite as usual but with an
httpx.MockTransport, so requests never leave the process.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import httpx
from typer.testing import CliRunner

from volley.cli.main import app
from volley.client.http import HTTPClient

runner = CliRunner()

SUITE = """\
base_url: http://api.test
version: v1
apis:
  - name: create_user
    weight: 10
    request:
      method: POST
      path: /users
      body:
        name: alice
    response:
      status_code: 201
  - name: get_user
    depends_on: create_user
    request:
      path: /users/{{create_user.response.id}}
    response:
      status_code: 200
      body:
        name: alice
  - name: v2_only
    version: v2
    request:
      path: /v2
"""

_real_from_suite = HTTPClient.from_suite


def _api(seen: list[httpx.Request] | None = None, fail: bool = False):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.method == "POST" and request.url.path == "/users":
            return httpx.Response(201, json={"id": 42})
        if request.url.path == "/users/42" and not fail:
            return httpx.Response(200, json={"id": 42, "name": "alice"})
        return httpx.Response(500, json={"error": "boom"})

    def from_suite(config, **kwargs):
        return _real_from_suite(config, transport=httpx.MockTransport(handler))

    return patch("volley.cli.run_cmd.HTTPClient.from_suite", side_effect=from_suite)


def _write_suite(tmp_path: Path, text: str = SUITE) -> Path:
    path = tmp_path / "users.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_version_flag():
    """volley --version prints the package version."""
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "volley 0.1.0" in result.output


def test_run_all_pass(tmp_path: Path):
    """A passing suite exits 0 and prints the console report."""
    seen: list[httpx.Request] = []
    with _api(seen):
        result = runner.invoke(app, ["run", str(_write_suite(tmp_path))])
    assert result.exit_code == 0, result.output
    assert "Running 2 tests sequentially..." in result.output
    assert "users API Test Report" in result.output
    assert "All tests passed!" in result.output
    assert [r.url.path for r in seen] == ["/users", "/users/42"]


def test_run_failure_exits_one(tmp_path: Path):
    """Any failed test makes the command exit 1."""
    with _api(fail=True):
        result = runner.invoke(app, ["run", str(_write_suite(tmp_path))])
    assert result.exit_code == 1
    assert "Some tests failed!" in result.output


def test_run_json_report(tmp_path: Path):
    """--format json writes the report to --output."""
    report_path = tmp_path / "out.json"
    with _api():
        result = runner.invoke(
            app, ["run", str(_write_suite(tmp_path)), "-f", "json", "-o", str(report_path)]
        )
    assert result.exit_code == 0, result.output
    assert f"JSON report saved to: {report_path}" in result.output

    data = json.loads(report_path.read_text(encoding="utf-8"))
    assert data["total"] == 2
    assert data["config_name"] == "users"
    assert data["results"][1]["request"]["path"] == "/users/42"


def test_run_html_default_path(tmp_path: Path, monkeypatch):
    """--format html without --output writes test-report.html."""
    suite = _write_suite(tmp_path)
    monkeypatch.chdir(tmp_path)
    with _api():
        result = runner.invoke(app, ["run", str(suite), "--format", "html"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "test-report.html").is_file()
    assert "HTML report saved to: test-report.html" in result.output


def test_run_version_override(tmp_path: Path):
    """--version selects the tests for another API version."""
    seen: list[httpx.Request] = []
    with _api(seen):
        result = runner.invoke(
            app, ["run", str(_write_suite(tmp_path)), "--version", "v2", "-f", "json",
                  "-o", str(tmp_path / "r.json")]
        )
    assert result.exit_code == 1
    assert "/v2" in [r.url.path for r in seen]
    data = json.loads((tmp_path / "r.json").read_text())
    assert data["version"] == "v2"
    assert data["total"] == 3


def test_run_url_override(tmp_path: Path):
    """--url replaces the suite's base URL."""
    seen: list[httpx.Request] = []
    with _api(seen):
        result = runner.invoke(
            app, ["run", str(_write_suite(tmp_path)), "--url", "http://other.test"]
        )
    assert result.exit_code == 0, result.output
    assert {r.url.host for r in seen} == {"other.test"}


def test_run_single_test(tmp_path: Path):
    """--test runs only the named test, without its dependency."""
    seen: list[httpx.Request] = []
    with _api(seen):
        result = runner.invoke(app, ["run", str(_write_suite(tmp_path)), "-t", "create_user"])
    assert result.exit_code == 0, result.output
    assert [r.url.path for r in seen] == ["/users"]


def test_run_unknown_single_test(tmp_path: Path):
    """--test with an unknown name exits 1."""
    with _api():
        result = runner.invoke(app, ["run", str(_write_suite(tmp_path)), "-t", "nope"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_run_concurrent(tmp_path: Path):
    """--concurrent announces the worker limit and still runs every test."""
    with _api():
        result = runner.invoke(
            app,
            ["run", str(_write_suite(tmp_path)), "--concurrent", "--workers", "2",
             "-f", "json", "-o", str(tmp_path / "r.json")],
        )
    assert "concurrently (max workers: 2)" in result.output
    data = json.loads((tmp_path / "r.json").read_text())
    assert data["total"] == 2
    assert data["skipped"] == 0


def test_run_invalid_suite(tmp_path: Path):
    """An invalid suite exits 1 and lists its errors."""
    path = _write_suite(tmp_path, "base_ulr: http://x\n")
    result = runner.invoke(app, ["run", str(path)])
    assert result.exit_code == 1
    assert "Failed to load suite" in result.output
    assert "base_ulr" in result.output


def test_run_missing_suite(tmp_path: Path):
    """A missing suite file exits 1."""
    result = runner.invoke(app, ["run", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 1
    assert "Failed to load suite" in result.output


def test_run_bad_log_level(tmp_path: Path):
    """An unknown --log-level exits 1."""
    result = runner.invoke(app, ["run", str(_write_suite(tmp_path)), "--log-level", "LOUD"])
    assert result.exit_code == 1
    assert "unknown log level" in result.output


def test_list_tests(tmp_path: Path):
    """volley list prints numbered names after version filtering."""
    result = runner.invoke(app, ["list", str(_write_suite(tmp_path))])
    assert result.exit_code == 0
    assert "Available tests:" in result.output
    assert "  1. create_user" in result.output
    assert "  2. get_user" in result.output
    assert "v2_only" not in result.output


def test_list_with_version(tmp_path: Path):
    """volley list --version v2 includes v2 tests."""
    result = runner.invoke(app, ["list", str(_write_suite(tmp_path)), "--version", "v2"])
    assert result.exit_code == 0
    assert "  3. v2_only" in result.output
