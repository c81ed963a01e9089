"""Models package for the storefront end-to-end suite."""

from .browser_models import (
    BrowserType,
    Viewport,
    NetworkRecord,
    AccessibilityIssue,
    PerformanceMetrics,
    PerformanceBudget,
    FocusedElement,
    CustomerDetails,
    WinnerDetails,
)
from .locator_models import (
    StrategyKind,
    LocatorStrategy,
    ElementDef,
    by_role,
    by_label,
    by_test_id,
    by_text,
    by_css,
)
from .result_models import (
    AssertionResult,
    ScenarioResult,
    SuiteReport,
)

__all__ = [
    # Browser models
    "BrowserType",
    "Viewport",
    "NetworkRecord",
    "AccessibilityIssue",
    "PerformanceMetrics",
    "PerformanceBudget",
    "FocusedElement",
    "CustomerDetails",
    "WinnerDetails",
    # Locator models
    "StrategyKind",
    "LocatorStrategy",
    "ElementDef",
    "by_role",
    "by_label",
    "by_test_id",
    "by_text",
    "by_css",
    # Result models
    "AssertionResult",
    "ScenarioResult",
    "SuiteReport",
]
