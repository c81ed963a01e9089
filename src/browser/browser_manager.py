"""Per-scenario browser sessions.

This module provides the BrowserContextManager, which hands each scenario a
fresh context and page configured from SuiteConfig and guarantees they are
closed afterwards, whatever the scenario did.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict
import logging
from contextlib import asynccontextmanager

from playwright.async_api import BrowserContext, Page

from src.browser.playwright_integration import PlaywrightManager
from src.config.suite_config import SuiteConfig
from src.models.browser_models import Viewport

logger = logging.getLogger(__name__)


def sanitize_for_filename(value: str, max_length: int = 80) -> str:
    """Reduce a scenario name to something safe to use as a file name."""
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "_", value).strip("._")
    return cleaned[:max_length] or "scenario"


@dataclass
class ScenarioSession:
    """The context and page owned by one scenario."""

    context: BrowserContext
    page: Page
    viewport: Viewport


class BrowserContextManager:
    """Open and close isolated browser sessions.

    PATTERN: Use context managers for automatic resource cleanup.
    """

    def __init__(self, playwright_manager: PlaywrightManager, config: SuiteConfig):
        self.playwright_manager = playwright_manager
        self.config = config
        self._active_contexts: Dict[str, BrowserContext] = {}

    @asynccontextmanager
    async def scenario_session(self, viewport: Optional[Viewport] = None, **context_options):
        """Yield a fresh ScenarioSession for one scenario.

        Example:
            async with manager.scenario_session() as session:
                await session.page.goto("/")
            # Context closed here
        """
        viewport = viewport or self.config.viewport
        browser = await self.playwright_manager.launch_browser(
            browser_type=self.config.browser,
            headless=self.config.headless,
            slow_mo=self.config.slow_mo_ms,
        )
        context = await self.playwright_manager.create_context(
            browser,
            viewport=viewport,
            base_url=self.config.base_url,
            **context_options,
        )
        context_id = f"context_{id(context)}"
        self._active_contexts[context_id] = context
        try:
            page = await self.playwright_manager.create_page(
                context,
                default_timeout_ms=self.config.default_timeout_ms,
                navigation_timeout_ms=self.config.navigation_timeout_ms,
            )
            yield ScenarioSession(context=context, page=page, viewport=viewport)
        finally:
            self._active_contexts.pop(context_id, None)
            try:
                await self.playwright_manager.close_context(context)
            except Exception as e:
                logger.error(f"Error closing context {context_id}: {e}")

    async def capture_screenshot(self, page: Page, name: str) -> Optional[Path]:
        """Save a full-page screenshot named after the scenario.

        Returns None instead of raising, since this runs while a failure is
        already being reported.
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = self.config.screenshots_dir / f"{sanitize_for_filename(name)}_{timestamp}.png"
        try:
            return await self.playwright_manager.screenshot(page, path)
        except RuntimeError as e:
            logger.warning(f"Could not capture failure screenshot for {name}: {e}")
            return None

    async def cleanup_all(self) -> None:
        """Close any contexts still open."""
        for context_id, context in list(self._active_contexts.items()):
            try:
                await context.close()
                logger.debug(f"Cleaned up context: {context_id}")
            except Exception as e:
                logger.error(f"Error cleaning up context {context_id}: {e}")
        self._active_contexts.clear()
        logger.info("Browser context manager cleanup completed")
