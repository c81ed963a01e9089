"""Suite run reporter.

This module provides the ScenarioReporter class, which collects one
ScenarioResult per scenario during a pytest session and writes the run as
JSON and/or HTML when the session ends.
"""

import html
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from src.models.result_models import ScenarioResult, SuiteReport

logger = logging.getLogger(__name__)


class ScenarioReporter:
    """Aggregate scenario outcomes and write the run report.

    PATTERN: Reports are append-only artifacts written once by the harness.
    """

    def __init__(self, output_dir: str, base_url: str):
        self.output_dir = Path(output_dir)
        self.base_url = base_url
        self.started_at = datetime.now()
        self.scenarios: List[ScenarioResult] = []

    def record(self, result: ScenarioResult) -> None:
        self.scenarios.append(result)
        logger.info(f"[{result.outcome.upper()}] {result.name} ({result.duration_s:.1f}s)")

    def build_report(self) -> SuiteReport:
        return SuiteReport(
            base_url=self.base_url,
            started_at=self.started_at,
            finished_at=datetime.now(),
            scenarios=list(self.scenarios),
        )

    def write(self, formats: Iterable[str] = ("json", "html"), report_name: Optional[str] = None) -> List[Path]:
        """Write the report in each format and return the paths written."""
        report = self.build_report()
        if not report_name:
            report_name = f"e2e_{self.started_at.strftime('%Y%m%d_%H%M%S')}"

        self.output_dir.mkdir(parents=True, exist_ok=True)
        paths = []
        for fmt in formats:
            if fmt == "json":
                paths.append(self.write_json(report, report_name))
            elif fmt == "html":
                paths.append(self.write_html(report, report_name))
            else:
                raise ValueError(f"Unknown report format: {fmt}")

        totals = report.totals
        logger.info(
            f"Suite finished: {totals['passed']} passed, {totals['failed']} failed, "
            f"{totals['skipped']} skipped, {totals['error']} errors"
        )
        return paths

    def write_json(self, report: SuiteReport, report_name: str) -> Path:
        data = report.model_dump(mode="json")
        data["totals"] = report.totals
        report_path = self.output_dir / f"{report_name}.json"
        with open(report_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        return report_path

    def write_html(self, report: SuiteReport, report_name: str) -> Path:
        report_path = self.output_dir / f"{report_name}.html"
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(self._build_html(report))
        return report_path

    def _build_html(self, report: SuiteReport) -> str:
        totals = report.totals
        rows = "\n".join(self._scenario_row(scenario) for scenario in report.scenarios)
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>E2E Report - {html.escape(report.base_url)}</title>
    {self._get_styles()}
</head>
<body>
    <div class="container">
        <header>
            <h1>End-to-End Suite Report</h1>
            <p class="url">{html.escape(report.base_url)}</p>
            <p class="meta">Started: {report.started_at.strftime("%Y-%m-%d %H:%M:%S")} |
               Finished: {report.finished_at.strftime("%Y-%m-%d %H:%M:%S")}</p>
            <p class="totals">
                <span class="passed">{totals['passed']} passed</span>
                <span class="failed">{totals['failed']} failed</span>
                <span class="skipped">{totals['skipped']} skipped</span>
                <span class="error">{totals['error']} errors</span>
            </p>
        </header>
        <table>
            <thead><tr><th>Scenario</th><th>Outcome</th><th>Duration</th><th>Details</th></tr></thead>
            <tbody>
{rows}
            </tbody>
        </table>
    </div>
</body>
</html>"""

    def _scenario_row(self, scenario: ScenarioResult) -> str:
        details = []
        if scenario.error:
            details.append(f"<pre>{html.escape(scenario.error)}</pre>")
        failed = [a for a in scenario.assertions if not a.passed]
        if failed:
            items = "".join(
                f"<li>{html.escape(a.description)}: expected {html.escape(str(a.expected))}, "
                f"got {html.escape(str(a.actual))}</li>"
                for a in failed
            )
            details.append(f"<ul>{items}</ul>")
        if scenario.screenshot:
            details.append(f'<a href="{html.escape(scenario.screenshot)}">screenshot</a>')
        details.append(f"<small>{len(scenario.assertions)} assertions</small>")
        return (
            f'                <tr class="{scenario.outcome}">'
            f"<td>{html.escape(scenario.name)}</td>"
            f"<td>{scenario.outcome}</td>"
            f"<td>{scenario.duration_s:.1f}s</td>"
            f"<td>{''.join(details)}</td></tr>"
        )

    def _get_styles(self) -> str:
        return """<style>
        body { font-family: -apple-system, 'Segoe UI', Roboto, Arial, sans-serif; background: #f5f5f5; color: #333; }
        .container { max-width: 1200px; margin: 0 auto; padding: 20px; }
        header { background: #fff; padding: 20px 30px; border-radius: 8px; margin-bottom: 20px; }
        .url { color: #3498db; }
        .meta { color: #7f8c8d; font-size: 0.9em; }
        .totals span { margin-right: 15px; font-weight: bold; }
        .totals .passed { color: #27ae60; }
        .totals .failed, .totals .error { color: #c0392b; }
        .totals .skipped { color: #7f8c8d; }
        table { width: 100%; border-collapse: collapse; background: #fff; }
        th, td { padding: 8px 12px; border-bottom: 1px solid #e0e0e0; text-align: left; vertical-align: top; }
        tr.failed td, tr.error td { background: #fdecea; }
        tr.skipped td { color: #95a5a6; }
        pre { white-space: pre-wrap; font-size: 0.85em; }
    </style>"""
