"""Browser automation layer for the storefront end-to-end suite.

This package provides:
- Playwright lifecycle and per-scenario browser contexts
- Locator declarations resolved lazily against the live DOM
- Interaction helpers that wait for actionability and navigation
- Verification helpers that poll, record and report assertions
- Accessibility, network and performance checks
"""

from src.browser.playwright_integration import PlaywrightManager
from src.browser.browser_manager import BrowserContextManager, ScenarioSession
from src.browser.locators import LocatorRegistry, LocatorResolver
from src.browser.interactions import Interactions, NavigationExpectation
from src.browser.verifications import Verifications
from src.browser.accessibility_tester import AccessibilityTester
from src.browser.performance_monitor import PerformanceMonitor
from src.browser.network_interceptor import NetworkInterceptor

__all__ = [
    "PlaywrightManager",
    "BrowserContextManager",
    "ScenarioSession",
    "LocatorRegistry",
    "LocatorResolver",
    "Interactions",
    "NavigationExpectation",
    "Verifications",
    "AccessibilityTester",
    "PerformanceMonitor",
    "NetworkInterceptor",
]
