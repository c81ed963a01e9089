"""Playwright lifecycle for suite runs.

This module provides the PlaywrightManager class which owns the Playwright
driver and the browsers it launches. Scenarios never share a context: each
one asks for a fresh context and page, and hands them back when done.

CRITICAL: Proper cleanup is essential to avoid leaking browser processes.
"""

from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)
import logging

from src.models.browser_models import BrowserType, Viewport

logger = logging.getLogger(__name__)


def viewport_options(viewport: Viewport) -> Dict[str, Any]:
    """Translate a Viewport into Playwright new_context() keyword arguments."""
    return {
        "viewport": {"width": viewport.width, "height": viewport.height},
        "device_scale_factor": viewport.device_scale_factor,
        "is_mobile": viewport.is_mobile,
        "has_touch": viewport.has_touch,
    }


class PlaywrightManager:
    """Manage the Playwright driver, browsers and per-scenario contexts.

    PATTERN: Reuse one browser per engine, but create an isolated context
    for every scenario so cookies and storage never leak between them.

    CRITICAL: Always call cleanup() or use as async context manager.
    """

    def __init__(self):
        self.playwright: Optional[Playwright] = None
        self.browsers: Dict[str, Browser] = {}
        self.contexts: Dict[str, BrowserContext] = {}
        self._initialized = False

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.cleanup()

    async def initialize(self) -> None:
        """Start the Playwright driver once per manager.

        Raises:
            RuntimeError: If the driver fails to start
        """
        if self._initialized:
            return

        try:
            self.playwright = await async_playwright().start()
        except Exception as e:
            logger.error(f"Failed to initialize Playwright: {e}")
            raise RuntimeError(f"Playwright initialization failed: {e}")
        self._initialized = True
        logger.info("Playwright driver started")

    async def launch_browser(
        self,
        browser_type: BrowserType = BrowserType.CHROMIUM,
        headless: bool = True,
        **options: Any,
    ) -> Browser:
        """Launch a browser, or return the one already running for this engine.

        Args:
            browser_type: Engine to launch
            headless: Whether to run headless
            **options: Extra launch options (slow_mo, args, ...)

        Raises:
            RuntimeError: If the browser fails to launch
        """
        await self.initialize()

        engine = browser_type.value
        running = self.browsers.get(engine)
        if running is not None:
            logger.debug(f"Reusing running {engine} browser")
            return running

        try:
            browser = await getattr(self.playwright, engine).launch(headless=headless, **options)
        except Exception as e:
            logger.error(f"Failed to launch {engine}: {e}")
            raise RuntimeError(f"Browser launch failed: {e}")
        self.browsers[engine] = browser
        logger.info(f"Launched {engine} (headless={headless})")
        return browser

    async def create_context(
        self,
        browser: Browser,
        viewport: Optional[Viewport] = None,
        base_url: Optional[str] = None,
        **options: Any,
    ) -> BrowserContext:
        """Create an isolated browser context for one scenario.

        Args:
            browser: Browser to create the context in
            viewport: Viewport and device emulation
            base_url: Base for relative page.goto() calls
            **options: Additional context options (locale, permissions, ...)

        Raises:
            RuntimeError: If context creation fails
        """
        context_options: Dict[str, Any] = viewport_options(viewport) if viewport else {}
        if base_url:
            context_options["base_url"] = base_url
        context_options.update(options)

        try:
            context = await browser.new_context(**context_options)
        except Exception as e:
            logger.error(f"Failed to create browser context: {e}")
            raise RuntimeError(f"Context creation failed: {e}")

        self.contexts[self._context_key(context)] = context
        logger.debug(f"Opened {self._context_key(context)}")
        return context

    async def create_page(
        self,
        context: BrowserContext,
        default_timeout_ms: Optional[int] = None,
        navigation_timeout_ms: Optional[int] = None,
    ) -> Page:
        """Open a page in the context and apply the suite's timeouts.

        Raises:
            RuntimeError: If page creation fails
        """
        try:
            page = await context.new_page()
        except Exception as e:
            logger.error(f"Failed to create page: {e}")
            raise RuntimeError(f"Page creation failed: {e}")

        if default_timeout_ms is not None:
            page.set_default_timeout(default_timeout_ms)
        if navigation_timeout_ms is not None:
            page.set_default_navigation_timeout(navigation_timeout_ms)
        return page

    async def close_context(self, context: BrowserContext) -> None:
        """Close a scenario's context and forget it."""
        key = self._context_key(context)
        try:
            await context.close()
            logger.debug(f"Closed {key}")
        finally:
            self.contexts.pop(key, None)

    async def screenshot(self, page: Page, path: Path, full_page: bool = True) -> Path:
        """Capture a page screenshot to ``path``.

        Raises:
            RuntimeError: If the screenshot fails
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            await page.screenshot(path=str(path), full_page=full_page)
        except Exception as e:
            logger.error(f"Screenshot capture failed: {e}")
            raise RuntimeError(f"Screenshot failed: {e}")
        logger.info(f"Saved screenshot {path}")
        return path

    async def cleanup(self) -> None:
        """Close contexts, then browsers, then the driver.

        Every close is attempted even if an earlier one fails.

        Raises:
            RuntimeError: Listing everything that failed to close
        """
        errors: List[str] = []

        for key, context in list(self.contexts.items()):
            await self._shutdown(key, context.close, errors)
        self.contexts.clear()

        for engine, browser in list(self.browsers.items()):
            await self._shutdown(f"{engine} browser", browser.close, errors)
        self.browsers.clear()

        if self.playwright is not None:
            await self._shutdown("Playwright driver", self.playwright.stop, errors)
            self.playwright = None
        self._initialized = False

        if errors:
            logger.warning(f"Cleanup finished with {len(errors)} error(s)")
            raise RuntimeError(f"Cleanup errors: {'; '.join(errors)}")
        logger.info("Playwright resources released")

    @staticmethod
    def _context_key(context: BrowserContext) -> str:
        return f"context_{id(context)}"

    @staticmethod
    async def _shutdown(label: str, close: Callable[[], Awaitable[Any]], errors: List[str]) -> None:
        try:
            await close()
            logger.debug(f"Closed {label}")
        except Exception as e:
            errors.append(f"{label}: {e}")
