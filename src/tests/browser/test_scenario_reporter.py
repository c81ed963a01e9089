"""Tests for ScenarioReporter."""

import json

import pytest

from src.browser.reporters.scenario_reporter import ScenarioReporter
from src.models.result_models import AssertionResult, ScenarioResult


@pytest.fixture
def reporter(tmp_path):
    return ScenarioReporter(str(tmp_path / "reports"), "https://omaze.co.uk")


@pytest.fixture
def failed_scenario():
    return ScenarioResult(
        name="test_checkout_defaults",
        nodeid="src/tests/e2e/test_live_entry_purchase.py::test_checkout_defaults",
        outcome="failed",
        duration_s=12.5,
        error="AssertionError: <Country> value",
        assertions=[
            AssertionResult(description="email visible", outcome="passed"),
            AssertionResult(
                description="country value", outcome="failed", expected="GB", actual="<none>"
            ),
        ],
        screenshot="screenshots/test_checkout_defaults.png",
    )


class TestScenarioReporter:
    """Tests for recording and writing runs."""

    def test_totals(self, reporter, failed_scenario):
        reporter.record(failed_scenario)
        reporter.record(ScenarioResult(name="test_home", nodeid="n1", outcome="passed"))
        reporter.record(ScenarioResult(name="test_faqs", nodeid="n2", outcome="skipped"))

        report = reporter.build_report()

        assert report.totals == {"passed": 1, "failed": 1, "skipped": 1, "error": 0}
        assert report.succeeded is False

    def test_write_json(self, reporter, failed_scenario):
        reporter.record(failed_scenario)

        paths = reporter.write(formats=["json"], report_name="run")

        assert [path.name for path in paths] == ["run.json"]
        data = json.loads(paths[0].read_text(encoding="utf-8"))
        assert data["base_url"] == "https://omaze.co.uk"
        assert data["totals"]["failed"] == 1
        assert data["scenarios"][0]["assertions"][1]["expected"] == "GB"

    def test_write_html_escapes_content(self, reporter, failed_scenario):
        reporter.record(failed_scenario)

        path = reporter.write(formats=["html"], report_name="run")[0]
        content = path.read_text(encoding="utf-8")

        assert "&lt;Country&gt;" in content
        assert "<Country>" not in content
        assert "expected GB, got &lt;none&gt;" in content
        assert "2 assertions" in content
        assert 'class="failed"' in content

    def test_default_report_name(self, reporter):
        paths = reporter.write()

        assert len(paths) == 2
        assert all(path.name.startswith("e2e_") for path in paths)
        assert {path.suffix for path in paths} == {".json", ".html"}

    def test_unknown_format(self, reporter):
        with pytest.raises(ValueError, match="Unknown report format"):
            reporter.write(formats=["xml"])
