"""Volley reporting - rich console tables and JSON/HTML report files."""

from volley.reporting.console import render_results, render_summary, status_label
from volley.reporting.files import render_html, save_html, save_json

__all__ = [
    "render_html",
    "render_results",
    "render_summary",
    "save_html",
    "save_json",
    "status_label",
]
