# File: docs_walker/report/html_report.py
"""docs_walker.report.html_report: HTML report generation with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from docs_walker.aggregator import WalkReport

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


def render_html(
    report: WalkReport,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Render the HTML report from a template and save it at the given path.

    Args:
        report: WalkReport object.
        template_dir: directory with Jinja2 templates (None: the bundled one).
        output_path: path of the resulting HTML file.

    Returns:
        Path of the saved HTML file.

    Example:
    ```python
    from docs_walker.report.html_report import render_html
    html_path = render_html(
        report,
        template_dir=None,
        output_path='reports/report.html'
    )
    ```
    """
    template_dir = Path(template_dir) if template_dir is not None else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template("report.html.j2")

    context: dict[str, Any] = {
        "scopes": report.scopes,
        "pages": report.pages,
        "failures": report.failures,
        "code_links": report.code_links,
    }

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
