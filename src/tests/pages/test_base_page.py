"""Tests for BasePage plumbing: lazy locators, cookie banner, locator health."""

import pytest
from unittest.mock import AsyncMock

from src.browser.errors import AssertionMismatchError
from src.pages.base_page import BasePage


def _banner_locator(make_locator):
    """A cookie banner that disappears once its button is clicked."""
    locator = make_locator()
    state = {"shown": True}
    locator.is_visible = AsyncMock(side_effect=lambda: state["shown"])
    locator.click = AsyncMock(side_effect=lambda **kwargs: state.update(shown=False))
    return locator


@pytest.fixture
def build(fast_config, expectations):
    def _build(page, results=None):
        return BasePage(page, fast_config, expectations, results)

    return _build


class TestConstruction:
    """Tests for page object construction."""

    def test_construction_touches_nothing(self, make_page, build):
        """Test that declaring locators performs no browser I/O."""
        page = make_page()

        base = build(page)

        page.goto.assert_not_awaited()
        page.locator.assert_not_called()
        page.get_by_role.assert_not_called()
        assert "cookie_accept" in base.locators
        assert base.el("cookie_accept").optional is True

    def test_unknown_element(self, make_page, build):
        with pytest.raises(KeyError, match="no element named 'basket'"):
            build(make_page()).el("basket")

    def test_results_are_shared(self, make_page, build):
        results = []

        base = build(make_page(), results)

        assert base.verify.results is results


class TestCookieBanner:
    """Tests for goto and accept_cookies."""

    @pytest.mark.asyncio
    async def test_goto_dismisses_banner(self, make_page, make_locator, build):
        locator = _banner_locator(make_locator)
        page = make_page(locator)
        base = build(page)

        status = await base.goto()

        assert status == 200
        assert page.goto.await_args.args[0] == "https://omaze.co.uk/"
        locator.click.assert_awaited_once()
        assert base.verify.results[-1].description == "page.cookie_accept is hidden"

    @pytest.mark.asyncio
    async def test_banner_absent_is_fine(self, make_page, make_locator, build):
        base = build(make_page(make_locator(visible=False)))

        assert await base.accept_cookies() is False


class TestLocatorHealth:
    """Tests for verify_locators_resolve."""

    @pytest.mark.asyncio
    async def test_all_resolve(self, make_page, build):
        base = build(make_page())

        report = await base.verify_locators_resolve(["cookie_accept"])

        assert report == {"cookie_accept": "ok"}
        assert base.verify.results[-1].passed

    @pytest.mark.asyncio
    async def test_broken_locator_reported(self, make_page, make_locator, build):
        base = build(make_page(make_locator(count=0)))

        with pytest.raises(AssertionMismatchError) as exc_info:
            await base.verify_locators_resolve(["cookie_accept"])

        assert exc_info.value.actual == ["cookie_accept"]

    @pytest.mark.asyncio
    async def test_optional_elements_skipped_by_default(self, make_page, make_locator, build):
        base = build(make_page(make_locator(count=0)))

        assert await base.verify_locators_resolve() == {}
