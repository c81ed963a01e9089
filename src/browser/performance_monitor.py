"""Page load timing for scenarios.

This module provides the PerformanceMonitor class. It times awaited actions
on the wall clock, reads the browser's Navigation Timing entry, and combines
both with recorded network traffic into PerformanceMetrics that can be
checked against a PerformanceBudget.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, TypeVar
import logging

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from src.browser.network_interceptor import NetworkInterceptor
from src.browser.waiting import Stopwatch
from src.models.browser_models import BrowserType, PerformanceBudget, PerformanceMetrics

logger = logging.getLogger(__name__)

T = TypeVar("T")

NAVIGATION_TIMING_JS = """
() => {
    const nav = performance.getEntriesByType('navigation')[0];
    const paint = performance.getEntriesByType('paint')
        .find(entry => entry.name === 'first-contentful-paint');
    if (!nav) {
        return {ttfb: 0, fcp: paint ? paint.startTime : 0, dom_content_loaded: 0, load_complete: 0};
    }
    return {
        ttfb: nav.responseStart - nav.requestStart,
        fcp: paint ? paint.startTime : 0,
        dom_content_loaded: nav.domContentLoadedEventEnd - nav.fetchStart,
        load_complete: Math.max(0, nav.loadEventEnd - nav.fetchStart),
    };
}
"""


class PerformanceMonitor:
    """Measure how long pages take to become usable.

    PATTERN: Wall-clock timing around the triggering action is what the
    user feels; Navigation Timing explains where that time went.
    """

    def __init__(self, browser_type: BrowserType = BrowserType.CHROMIUM, slow_request_ms: int = 2000):
        self.browser_type = browser_type
        self.slow_request_ms = slow_request_ms

    async def measure(self, action: Callable[[], Awaitable[T]]) -> Tuple[T, float]:
        """Await action() and return its result with the elapsed milliseconds."""
        watch = Stopwatch()
        result = await action()
        elapsed = watch.elapsed_ms
        logger.info(f"Action completed in {elapsed:.0f}ms")
        return result, elapsed

    async def collect_navigation_timing(self, page: Page) -> Dict[str, float]:
        """Read the Navigation Timing entry; zeros when it is unavailable."""
        try:
            timing = await page.evaluate(NAVIGATION_TIMING_JS)
            logger.debug(f"Navigation timing collected: {timing}")
            return timing
        except PlaywrightError as e:
            logger.warning(f"Failed to collect navigation timing: {e}")
            return {"ttfb": 0.0, "fcp": 0.0, "dom_content_loaded": 0.0, "load_complete": 0.0}

    async def collect_metrics(
        self,
        page: Page,
        url: str,
        network: Optional[NetworkInterceptor] = None,
        measured_load_ms: float = 0.0,
    ) -> PerformanceMetrics:
        """Combine navigation timing, network records and wall-clock load time."""
        logger.info(f"Collecting performance metrics for: {url}")
        data: Dict[str, Any] = await self.collect_navigation_timing(page)

        if network is not None:
            data["total_requests"] = len(network.records)
            data["total_size_kb"] = network.total_bytes() / 1024
            data["slow_requests"] = len(network.slow_responses(self.slow_request_ms))
            data["failed_requests"] = len(network.failed())

        metrics = PerformanceMetrics(
            url=url,
            measured_load_ms=measured_load_ms,
            browser=self.browser_type,
            **data,
        )
        logger.info(
            f"Metrics collected - load: {metrics.measured_load_ms:.0f}ms, "
            f"DCL: {metrics.dom_content_loaded:.0f}ms, requests: {metrics.total_requests}, "
            f"size: {metrics.total_size_kb:.0f}KB"
        )
        return metrics

    def check_budget(self, metrics: PerformanceMetrics, budget: PerformanceBudget) -> List[str]:
        """Return a description of every budget the metrics exceed."""
        violations = []
        if budget.max_load_ms is not None and metrics.measured_load_ms >= budget.max_load_ms:
            violations.append(
                f"load time {metrics.measured_load_ms:.0f}ms >= {budget.max_load_ms:.0f}ms"
            )
        if budget.max_requests is not None and metrics.total_requests >= budget.max_requests:
            violations.append(f"{metrics.total_requests} requests >= {budget.max_requests}")
        if budget.max_size_kb is not None and metrics.total_size_kb >= budget.max_size_kb:
            violations.append(
                f"transfer size {metrics.total_size_kb:.0f}KB >= {budget.max_size_kb:.0f}KB"
            )
        if budget.max_slow_requests is not None and metrics.slow_requests >= budget.max_slow_requests:
            violations.append(
                f"{metrics.slow_requests} slow requests >= {budget.max_slow_requests}"
            )
        if violations:
            logger.warning(f"Budget exceeded for {metrics.url}: {'; '.join(violations)}")
        return violations
