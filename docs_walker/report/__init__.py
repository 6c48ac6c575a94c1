# File: docs_walker/report/__init__.py
"""docs_walker.report: JSON and HTML renderers for walk reports."""

from __future__ import annotations

from docs_walker.report.html_report import DEFAULT_TEMPLATE_DIR, render_html
from docs_walker.report.json_report import render_json

__all__ = ["DEFAULT_TEMPLATE_DIR", "render_json", "render_html"]
