"""Shared pytest configuration for the storefront suite.

Offline unit tests use the fake page and locator factories defined here.
Live scenarios (marked ``live``) are skipped unless ``--live`` is given or
``E2E_LIVE`` is set; when they run, each one is recorded into the run report
written at the end of the session.
"""

from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from src.browser.accessibility_tester import AccessibilityTester
from src.browser.browser_manager import BrowserContextManager, ScenarioSession
from src.browser.network_interceptor import NetworkInterceptor
from src.browser.performance_monitor import PerformanceMonitor
from src.browser.playwright_integration import PlaywrightManager
from src.browser.reporters.scenario_reporter import ScenarioReporter
from src.config.logging_config import configure_logging
from src.config.site_expectations import SiteExpectations, get_site_expectations
from src.config.suite_config import SuiteConfig, get_suite_config
from src.models.browser_models import Viewport
from src.models.result_models import AssertionResult, ScenarioResult
from src.pages import CartPage, CheckoutPage, EntryPage, FAQsPage, HomePage, WinnersPage

reporter_key = pytest.StashKey[ScenarioReporter]()
results_key = pytest.StashKey[list]()
screenshot_key = pytest.StashKey[str]()
reports_key = pytest.StashKey[dict]()
error_key = pytest.StashKey[str]()

LOCATOR_CHAIN = (
    "nth",
    "filter",
    "locator",
    "get_by_role",
    "get_by_text",
    "get_by_label",
    "get_by_test_id",
    "frame_locator",
)
LOCATOR_ACTIONS = (
    "click",
    "fill",
    "select_option",
    "check",
    "hover",
    "focus",
    "press",
    "scroll_into_view_if_needed",
)


def pytest_addoption(parser):
    parser.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run scenarios against the live site",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "live: drives a real browser against the live site"
    )
    suite = get_suite_config()
    configure_logging(suite.log_level)
    config.stash[reporter_key] = ScenarioReporter(str(suite.reports_dir), suite.base_url)


def _live_enabled(config) -> bool:
    return config.getoption("--live") or get_suite_config().live


def pytest_collection_modifyitems(config, items):
    if _live_enabled(config):
        return
    skip_live = pytest.mark.skip(reason="live scenario: pass --live or set E2E_LIVE=1")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()

    if "live" not in item.keywords or not _live_enabled(item.config):
        return

    item.stash.setdefault(reports_key, {})[report.when] = report
    if report.failed and call.excinfo is not None:
        item.stash[error_key] = call.excinfo.exconly()

    if report.when == "teardown":
        _record_scenario(item)


def _record_scenario(item) -> None:
    reports = item.stash.get(reports_key, {})
    setup, call = reports.get("setup"), reports.get("call")

    if setup is not None and setup.skipped:
        outcome = "skipped"
    elif setup is not None and setup.failed:
        outcome = "error"
    elif call is not None and call.failed:
        outcome = "failed"
    else:
        outcome = "passed"

    result = ScenarioResult(
        name=item.name,
        nodeid=item.nodeid,
        outcome=outcome,
        duration_s=sum(report.duration for report in reports.values()),
        error=item.stash.get(error_key, None),
        assertions=item.stash.get(results_key, []),
        screenshot=item.stash.get(screenshot_key, None),
    )
    item.config.stash[reporter_key].record(result)


def pytest_sessionfinish(session, exitstatus):
    reporter = session.config.stash.get(reporter_key, None)
    if reporter is not None and reporter.scenarios:
        reporter.write()


# Offline fakes


def _make_locator(
    visible=True,
    enabled=True,
    count=1,
    text="",
    attribute=None,
    value="",
    checked=False,
    box=None,
):
    """A MagicMock standing in for a Playwright Locator.

    Chaining methods (nth, filter, get_by_*) return the same fake, so any
    strategy built against it resolves to it.
    """
    locator = MagicMock(name="locator")
    locator.first = locator
    locator.last = locator
    for method in LOCATOR_CHAIN:
        getattr(locator, method).return_value = locator
    for method in LOCATOR_ACTIONS:
        setattr(locator, method, AsyncMock())

    locator.is_visible = AsyncMock(return_value=visible)
    locator.is_enabled = AsyncMock(return_value=enabled)
    locator.count = AsyncMock(return_value=count)
    locator.bounding_box = AsyncMock(
        return_value=box or {"x": 0, "y": 0, "width": 120, "height": 40}
    )
    locator.text_content = AsyncMock(return_value=text)
    locator.get_attribute = AsyncMock(return_value=attribute)
    locator.input_value = AsyncMock(return_value=value)
    locator.is_checked = AsyncMock(return_value=checked)
    locator.evaluate = AsyncMock(return_value=None)
    locator.evaluate_all = AsyncMock(return_value=[])
    return locator


def _make_page(locator=None, url="https://omaze.co.uk/", title="Omaze UK", status=200):
    """A MagicMock standing in for a Playwright Page whose queries all
    return ``locator``."""
    locator = locator if locator is not None else _make_locator()
    page = MagicMock(name="page")
    page.url = url
    page.title = AsyncMock(return_value=title)
    for method in LOCATOR_CHAIN:
        getattr(page, method).return_value = locator
    page.goto = AsyncMock(return_value=MagicMock(status=status))
    page.keyboard.press = AsyncMock()
    page.evaluate = AsyncMock(return_value=None)
    page.set_viewport_size = AsyncMock()
    page.reload = AsyncMock()
    page.go_back = AsyncMock()
    page.go_forward = AsyncMock()
    page.screenshot = AsyncMock()
    page.add_init_script = AsyncMock()
    page.route = AsyncMock()
    page.unroute = AsyncMock()
    return page


@pytest.fixture
def make_locator():
    """Factory for fake locators."""
    return _make_locator


@pytest.fixture
def make_page():
    """Factory for fake pages."""
    return _make_page


@pytest.fixture
def fast_config():
    """Suite configuration with short waits for offline tests."""
    return SuiteConfig(
        base_url="https://omaze.co.uk",
        default_timeout_ms=200,
        navigation_timeout_ms=300,
        poll_interval_ms=10,
        navigation_retries=1,
        artifacts_dir="test-results",
    )


@pytest.fixture
def expectations():
    return SiteExpectations()


# Live scenarios


class Scenario:
    """Everything one live scenario owns: its browser session, the page
    objects bound to it and the assertion results they record."""

    def __init__(self, session: ScenarioSession, browser_manager: BrowserContextManager):
        self.session = session
        self.browser_manager = browser_manager
        self.config = browser_manager.config
        self.expectations = get_site_expectations()
        self.results: List[AssertionResult] = []

        self.network = NetworkInterceptor()
        self.network.attach(session.page)

        args = (session.page, self.config, self.expectations, self.results)
        self.home = HomePage(*args)
        self.entry = EntryPage(*args)
        self.cart = CartPage(*args)
        self.checkout = CheckoutPage(*args)
        self.faqs = FAQsPage(*args)
        self.winners = WinnersPage(*args)

        # Page-independent helpers for checks on collected values
        self.act = self.home.act
        self.verify = self.home.verify

    @property
    def page(self):
        return self.session.page

    def accessibility(self) -> AccessibilityTester:
        return AccessibilityTester(self.page)

    def performance(self) -> PerformanceMonitor:
        return PerformanceMonitor(self.config.browser, self.expectations.slow_request_ms)


@pytest_asyncio.fixture
async def browser_manager():
    """A Playwright driver and context manager for one scenario."""
    config = get_suite_config()
    problems = config.validate_config()
    if problems:
        pytest.fail("Invalid suite configuration: " + "; ".join(problems))

    async with PlaywrightManager() as playwright_manager:
        manager = BrowserContextManager(playwright_manager, config)
        try:
            yield manager
        finally:
            await manager.cleanup_all()


async def _open_scenario(request, browser_manager, viewport: Optional[Viewport] = None):
    async with browser_manager.scenario_session(viewport=viewport) as session:
        scenario = Scenario(session, browser_manager)
        request.node.stash[results_key] = scenario.results
        yield scenario

        call = request.node.stash.get(reports_key, {}).get("call")
        if call is not None and call.failed and browser_manager.config.screenshot_on_failure:
            path = await browser_manager.capture_screenshot(session.page, request.node.name)
            if path is not None:
                request.node.stash[screenshot_key] = str(path)


@pytest_asyncio.fixture
async def scenario(request, browser_manager):
    """A fresh browser context and page objects at the configured viewport."""
    async for opened in _open_scenario(request, browser_manager):
        yield opened


@pytest_asyncio.fixture
async def mobile_scenario(request, browser_manager):
    """A fresh browser context emulating a small phone."""
    async for opened in _open_scenario(request, browser_manager, Viewport.mobile()):
        yield opened
