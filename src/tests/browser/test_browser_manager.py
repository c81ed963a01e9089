"""Tests for per-scenario browser sessions."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.browser.browser_manager import BrowserContextManager, sanitize_for_filename
from src.models.browser_models import Viewport


@pytest.fixture
def playwright_manager():
    manager = MagicMock()
    manager.launch_browser = AsyncMock(return_value=MagicMock(name="browser"))
    manager.create_context = AsyncMock(return_value=MagicMock(name="context"))
    manager.create_page = AsyncMock(return_value=MagicMock(name="page"))
    manager.close_context = AsyncMock()
    manager.screenshot = AsyncMock(side_effect=lambda page, path: path)
    return manager


@pytest.fixture
def context_manager(playwright_manager, fast_config):
    return BrowserContextManager(playwright_manager, fast_config)


class TestScenarioSession:
    """Tests for scenario_session."""

    @pytest.mark.asyncio
    async def test_session_applies_config(self, context_manager, playwright_manager, fast_config):
        async with context_manager.scenario_session() as session:
            assert session.viewport.width == fast_config.viewport_width

        playwright_manager.launch_browser.assert_awaited_once_with(
            browser_type=fast_config.browser,
            headless=fast_config.headless,
            slow_mo=fast_config.slow_mo_ms,
        )
        context_kwargs = playwright_manager.create_context.await_args.kwargs
        assert context_kwargs["base_url"] == "https://omaze.co.uk"
        page_kwargs = playwright_manager.create_page.await_args.kwargs
        assert page_kwargs["default_timeout_ms"] == fast_config.default_timeout_ms
        assert page_kwargs["navigation_timeout_ms"] == fast_config.navigation_timeout_ms

    @pytest.mark.asyncio
    async def test_session_uses_requested_viewport(self, context_manager, playwright_manager):
        async with context_manager.scenario_session(viewport=Viewport.mobile()) as session:
            assert session.viewport.is_mobile

        assert playwright_manager.create_context.await_args.kwargs["viewport"].width == 375

    @pytest.mark.asyncio
    async def test_context_closed_when_scenario_fails(self, context_manager, playwright_manager):
        """Test that a failing scenario still releases its context."""
        with pytest.raises(AssertionError):
            async with context_manager.scenario_session():
                raise AssertionError("scenario failed")

        playwright_manager.close_context.assert_awaited_once()
        assert context_manager._active_contexts == {}

    @pytest.mark.asyncio
    async def test_each_session_gets_its_own_context(self, context_manager, playwright_manager):
        playwright_manager.create_context = AsyncMock(side_effect=[MagicMock(), MagicMock()])

        async with context_manager.scenario_session() as first:
            pass
        async with context_manager.scenario_session() as second:
            pass

        assert first.context is not second.context
        assert playwright_manager.close_context.await_count == 2


class TestCaptureScreenshot:
    """Tests for failure screenshots."""

    @pytest.mark.asyncio
    async def test_screenshot_path(self, context_manager, fast_config):
        path = await context_manager.capture_screenshot(MagicMock(), "test_checkout[chromium]")

        assert path.parent == fast_config.screenshots_dir
        assert path.name.startswith("test_checkout_chromium")
        assert path.suffix == ".png"

    @pytest.mark.asyncio
    async def test_screenshot_failure_returns_none(self, context_manager, playwright_manager):
        playwright_manager.screenshot = AsyncMock(side_effect=RuntimeError("page closed"))

        assert await context_manager.capture_screenshot(MagicMock(), "test_home") is None


class TestSanitizeForFilename:
    """Tests for sanitize_for_filename."""

    def test_replaces_unsafe_characters(self):
        assert sanitize_for_filename("test_faqs[mobile] / 1") == "test_faqs_mobile_1"

    def test_truncates(self):
        assert len(sanitize_for_filename("a" * 200, max_length=40)) == 40

    def test_empty_name(self):
        assert sanitize_for_filename("///") == "scenario"
