"""Tests for the home page object."""

import pytest
from unittest.mock import AsyncMock

from src.browser.errors import AssertionMismatchError, NavigationTimeoutError, SoftAssertionError
from src.pages.home_page import HomePage

ENTRY_URL = "https://omaze.co.uk/pages/enter-cheshire-iii"


@pytest.fixture
def build(fast_config, expectations):
    def _build(page):
        home = HomePage(page, fast_config, expectations)
        home.accept_cookies = AsyncMock(return_value=False)
        return home

    return _build


class TestDeclarations:
    """Tests for the declared elements."""

    def test_navigation_links_declared(self, make_page, build, expectations):
        home = build(make_page())

        for link in expectations.navigation_links:
            assert f"nav:{link}" in home.locators
        assert home.el("footer_links").pick == "all"
        assert home.el("countdown").optional is True

    def test_enter_now_prefers_link_role(self, make_page, build):
        strategies = build(make_page()).el("enter_now").strategies

        assert [strategy.value for strategy in strategies] == ["link", "button"]


class TestNavigation:
    """Tests for navigating out of the home page."""

    @pytest.mark.asyncio
    async def test_click_enter_now(self, make_page, make_locator, build):
        locator = make_locator()
        page = make_page(locator, url=ENTRY_URL, title="Enter the Cheshire House Draw | Omaze UK")

        await build(page).click_enter_now()

        locator.click.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_click_enter_now_wrong_destination(self, make_page, build):
        """Test that staying on the home page fails with the URL reached."""
        page = make_page(url="https://omaze.co.uk/", title="Omaze UK")

        with pytest.raises(NavigationTimeoutError) as exc_info:
            await build(page).click_enter_now()

        assert exc_info.value.actual_url == "https://omaze.co.uk/"

    @pytest.mark.asyncio
    async def test_navigate_to_winners_clicks_first_link(self, make_page, build):
        page = make_page(url="https://omaze.co.uk/pages/winners")

        assert await build(page).navigate_to_winners() == "home.winners_link"

    @pytest.mark.asyncio
    async def test_navigate_to_faqs_falls_back_to_direct_url(self, make_page, build):
        page = make_page(url="https://omaze.co.uk/pages/faqs")
        home = build(page)
        home.resolver.is_present = AsyncMock(return_value=False)

        assert await home.navigate_to_faqs() == "direct:/pages/faqs"
        assert page.goto.await_args.args[0] == "https://omaze.co.uk/pages/faqs"

    @pytest.mark.asyncio
    async def test_select_property_tab(self, make_page, make_locator, build):
        locator = make_locator(attribute="true")
        home = build(make_page(locator))

        await home.select_property_tab("The Cheshire House")

        locator.click.assert_awaited_once()
        assert home.verify.results[-1].description == "home.tab:The Cheshire House [aria-selected]"


class TestContent:
    """Tests for content verifications."""

    @pytest.mark.asyncio
    async def test_verify_page_load(self, make_page, build):
        home = build(make_page(title="Omaze UK | Win a Dream House"))

        await home.verify_page_load()

        assert len(home.verify.results) == 4
        assert all(result.passed for result in home.verify.results)

    @pytest.mark.asyncio
    async def test_verify_page_load_wrong_title(self, make_page, build):
        """Test that a wrong title fails while the other checks still run."""
        home = build(make_page(title="Page not found"))

        with pytest.raises(SoftAssertionError) as exc_info:
            await home.verify_page_load()

        assert len(exc_info.value.failures) == 1
        assert len(home.verify.results) == 4

    @pytest.mark.asyncio
    async def test_hero_content(self, make_page, make_locator, build):
        home = build(make_page(make_locator(text="Win a £3 million house in Cheshire")))

        await home.verify_hero_content()

    @pytest.mark.asyncio
    async def test_footer_link_count(self, make_page, make_locator, build):
        home = build(make_page(make_locator(count=25)))

        assert await home.verify_footer_content() == 25

    @pytest.mark.asyncio
    async def test_footer_link_count_out_of_range(self, make_page, make_locator, build):
        home = build(make_page(make_locator(count=50)))

        with pytest.raises(AssertionMismatchError):
            await home.verify_footer_content()

    @pytest.mark.asyncio
    async def test_countdown_present(self, make_page, make_locator, build):
        home = build(make_page(make_locator(text="2 days 04:13:59")))

        assert await home.verify_countdown_timer() is True

    @pytest.mark.asyncio
    async def test_countdown_absent(self, make_page, build):
        home = build(make_page())
        home.resolver.is_present = AsyncMock(return_value=False)

        assert await home.verify_countdown_timer() is False
        assert home.verify.results == []

    @pytest.mark.asyncio
    async def test_social_link_hrefs(self, make_page, make_locator, build):
        locator = make_locator()
        locator.evaluate_all = AsyncMock(
            return_value=["https://www.facebook.com/OmazeUK", "https://www.instagram.com/omazeuk"]
        )
        home = build(make_page(locator))

        hrefs = await home.social_link_hrefs()

        assert len(hrefs) == 2
