"""Run reporters for the end-to-end suite."""

from .scenario_reporter import ScenarioReporter

__all__ = [
    "ScenarioReporter",
]
