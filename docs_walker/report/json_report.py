# docs_walker/report/json_report.py

"""
JSON report generation for DocsWalker.

Serialises a WalkReport into a file.
"""
import json
from pathlib import Path

from docs_walker.aggregator import WalkReport


def render_json(report: WalkReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *report* as JSON at *output_path*.

    :param report: WalkReport with the walk data
    :param output_path: path of the JSON file
    :param pretty: indent the output by two spaces
    :return: Path of the saved file

    Example:
    ```python
    from docs_walker.report.json_report import render_json
    report_path = render_json(report, 'reports/report.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.as_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
