"""Outcome models for assertions, scenarios and suite runs."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Literal
from datetime import datetime


class AssertionResult(BaseModel):
    """Outcome of one verification."""

    description: str = Field(description="What was checked")
    outcome: Literal["passed", "failed", "timeout"] = Field(description="Result")
    expected: Optional[str] = Field(default=None, description="Expected value")
    actual: Optional[str] = Field(default=None, description="Observed value")
    elapsed_ms: float = Field(default=0.0, description="Time spent waiting")
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def passed(self) -> bool:
        return self.outcome == "passed"


class ScenarioResult(BaseModel):
    """Outcome of one scenario (one test case)."""

    name: str = Field(description="Scenario name")
    nodeid: str = Field(description="pytest node id")
    outcome: Literal["passed", "failed", "skipped", "error"] = Field(description="Result")
    duration_s: float = Field(default=0.0, description="Wall clock duration")
    error: Optional[str] = Field(default=None, description="Failure message")
    assertions: List[AssertionResult] = Field(default_factory=list)
    screenshot: Optional[str] = Field(default=None, description="Failure screenshot path")
    annotations: Dict[str, Any] = Field(default_factory=dict)
    finished_at: datetime = Field(default_factory=datetime.now)


class SuiteReport(BaseModel):
    """Aggregated results of a suite run."""

    base_url: str = Field(description="Site the suite ran against")
    started_at: datetime = Field(description="Run start")
    finished_at: datetime = Field(default_factory=datetime.now)
    scenarios: List[ScenarioResult] = Field(default_factory=list)

    @property
    def totals(self) -> Dict[str, int]:
        counts = {"passed": 0, "failed": 0, "skipped": 0, "error": 0}
        for scenario in self.scenarios:
            counts[scenario.outcome] += 1
        return counts

    @property
    def succeeded(self) -> bool:
        totals = self.totals
        return totals["failed"] == 0 and totals["error"] == 0
