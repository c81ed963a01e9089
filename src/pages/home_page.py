"""Home page object."""

import logging
import re
from typing import List

from src.browser.interactions import NavigationExpectation
from src.models.locator_models import by_css, by_role, by_text
from src.pages.base_page import BasePage

logger = logging.getLogger(__name__)

CAROUSEL_CSS = '.swiper-container, [class*="carousel"]'


class HomePage(BasePage):
    """Landing page: hero, navigation, draw tabs, footer."""

    name = "home"
    path = "/"

    def define_locators(self) -> None:
        define = self.locators.define
        define(
            "logo",
            by_css('header a[href="/"]'),
            by_role("link", name=re.compile(r"omaze", re.I)),
            by_role("link"),
        )
        define("navigation", by_role("navigation"))
        define("hero", by_css("#hero-video"), by_css("main section"))
        define(
            "enter_now",
            by_role("link", name=re.compile(r"enter now", re.I)),
            by_role("button", name=re.compile(r"enter now", re.I)),
        )
        define("countdown", by_css(".countdown"), by_css('[class*="countdown"]'), optional=True)
        define("property_tabs", by_role("tablist"))
        define("basket_link", by_role("link", name=re.compile(r"basket", re.I)))
        define("login_link", by_role("link", name=re.compile(r"log in", re.I)))
        define("signup_link", by_role("link", name=re.compile(r"sign up", re.I)))
        define("winners_carousel", by_css(CAROUSEL_CSS))
        define("footer", by_css("footer"), by_role("contentinfo"))
        define("footer_links", by_role("link", scope="footer"), pick="all")
        define(
            "social_links",
            by_role(
                "link",
                scope="footer",
                has_text=re.compile("|".join(self.expectations.social_networks), re.I),
            ),
            by_css(
                ", ".join(f'footer a[href*="{network}"]' for network in self.expectations.social_networks)
            ),
            pick="all",
            optional=True,
        )
        define("trustpilot", by_css('iframe[src*="trustpilot"]'), optional=True)

        for link in self.expectations.navigation_links:
            define(f"nav:{link}", by_role("link", name=link, scope="nav"))

        # Fallback chains used when the exact link text moves around
        define("entry_link_any", by_role("link", name=re.compile(r"enter", re.I)))
        define("entry_href", by_css('a[href*="enter"]'))
        define("entry_cta", by_text(re.compile(r"enter", re.I), scope=".cta, .button"))
        define("winners_link", by_role("link", name=re.compile(r"our winners", re.I)))
        define("winners_link_any", by_role("link", name=re.compile(r"winners", re.I)))
        define("winners_href", by_css('a[href*="winners"]'))
        define("faqs_link", by_role("link", name=re.compile(r"faqs?", re.I)))
        define("faqs_href", by_css('a[href*="faq"]'))
        define("faqs_footer_link", by_role("link", name=re.compile(r"faq", re.I), scope="footer"))

    async def click_enter_now(self) -> None:
        """Click the primary call to action and wait for the entry page."""
        await self.accept_cookies()
        await self.act.click(
            self.el("enter_now"),
            expect=NavigationExpectation(
                url_pattern=self.expectations.entry_url_pattern,
                title_pattern=self.expectations.entry_title_pattern,
            ),
        )

    async def navigate_to_entry(self) -> str:
        return await self.act.click_first_available(
            [self.el(name) for name in ("enter_now", "entry_link_any", "entry_href", "entry_cta")],
            expect=NavigationExpectation(url_pattern=r"enter"),
            fallback_path=self.expectations.entry_path,
        )

    async def navigate_to_winners(self) -> str:
        return await self.act.click_first_available(
            [self.el(name) for name in ("winners_link", "winners_link_any", "winners_href")],
            expect=NavigationExpectation(url_pattern=self.expectations.winners_url_pattern),
            fallback_path=self.expectations.winners_path,
        )

    async def navigate_to_faqs(self) -> str:
        return await self.act.click_first_available(
            [self.el(name) for name in ("faqs_link", "faqs_href", "faqs_footer_link")],
            expect=NavigationExpectation(url_pattern=r"faq"),
            fallback_path=self.expectations.faqs_path,
        )

    async def navigate_to_cart(self) -> None:
        await self.act.click(
            self.el("basket_link"),
            expect=NavigationExpectation(url_pattern=self.expectations.cart_url_pattern),
        )

    async def select_property_tab(self, tab_name: str) -> None:
        tab = self.locators.make(
            f"tab:{tab_name}",
            by_role("tab", name=re.compile(re.escape(tab_name), re.I), scope='[role="tablist"]'),
        )
        await self.act.click(tab)
        await self.verify.attribute(tab, "aria-selected", "true")

    async def verify_page_load(self) -> None:
        async with self.verify.soft():
            await self.verify.title_matches(self.expectations.home_title_pattern)
            await self.verify.visible(self.el("logo"))
            await self.verify.visible(self.el("navigation"))
            await self.verify.visible(self.el("hero"))

    async def verify_hero_content(self) -> None:
        async with self.verify.soft():
            for pattern in self.expectations.hero_text_patterns:
                await self.verify.text_contains(self.el("hero"), re.compile(pattern, re.I))

    async def verify_countdown_timer(self) -> bool:
        """Check the countdown shows digits. The timer is not always present."""
        countdown = self.el("countdown")
        if not await self.resolver.is_present(countdown, timeout_ms=2000):
            logger.info("Countdown timer not present on this page")
            return False
        await self.verify.text_matches(countdown, r"\d")
        return True

    async def verify_navigation_links(self) -> None:
        async with self.verify.soft():
            for link in self.expectations.navigation_links:
                await self.verify.visible(self.el(f"nav:{link}"))

    async def verify_account_links(self) -> None:
        async with self.verify.soft():
            await self.verify.visible(self.el("basket_link"))
            await self.verify.visible(self.el("login_link"))
            await self.verify.visible(self.el("signup_link"))

    async def verify_footer_content(self) -> int:
        low, high = self.expectations.footer_link_range
        await self.verify.visible(self.el("footer"))
        count = await self.verify.count_between(self.el("footer_links"), low, high)
        logger.info(f"Found {count} footer links")
        return count

    async def social_link_hrefs(self) -> List[str]:
        social = self.el("social_links")
        if not await self.resolver.is_present(social, timeout_ms=2000):
            return []
        resolved = await self.resolver.resolve_all(social)
        hrefs = await resolved.locator.evaluate_all("links => links.map(a => a.href)")
        logger.info(f"Found {len(hrefs)} social media links")
        return hrefs

    async def verify_trustpilot_widget(self) -> None:
        await self.verify.visible(self.el("trustpilot"))

    async def verify_winners_carousel(self) -> None:
        await self.act.scroll_into_view(self.el("winners_carousel"))
        await self.verify.visible(self.el("winners_carousel"))
