"""Entry page object: the draw's purchase options."""

import logging
import re

from src.browser.interactions import NavigationExpectation
from src.models.locator_models import by_css, by_role, by_text
from src.pages.base_page import BasePage

logger = logging.getLogger(__name__)


def _price_pattern(price: str) -> re.Pattern:
    # "£10" must not match "£100"
    return re.compile(rf"{re.escape(price)}(?![\d,])")


class EntryPage(BasePage):
    """Postal, single purchase and subscription entry options."""

    name = "entry"

    @property
    def path(self) -> str:
        return self.expectations.entry_path

    def define_locators(self) -> None:
        define = self.locators.define
        postal, single, subscription = self.expectations.entry_tabs

        define(
            "heading",
            by_role("heading", name=re.compile(r"your chance to win", re.I)),
            by_css("h1"),
        )
        define("tabs_navigation", by_role("navigation", name=re.compile(r"tabs", re.I)), optional=True)
        define(
            "postal_tab",
            by_role("button", name=postal),
            by_role("button", name=re.compile(r"postal", re.I)),
        )
        define(
            "single_purchase_tab",
            by_role("button", name=single),
            by_role("button", name=re.compile(r"single purchase", re.I)),
        )
        define(
            "subscription_tab",
            by_role("button", name=subscription, exact=True),
            by_role("button", name=re.compile(r"^subscription", re.I)),
        )
        define("buy_now_buttons", by_role("button", name="Buy Now"), pick="all")
        define("smallest_package", by_role("button", name="Buy Now"), pick="last")
        define(
            "enter_now_buttons",
            by_role("button", name=re.compile(r"enter now", re.I)),
            pick="all",
        )
        define("subscription_heading", by_text(self.expectations.subscription_heading))
        define("price_display", by_css('[class*="price"]'), pick="all")
        define("entries_display", by_text(re.compile(r"\d[\d,]*\s+entries", re.I)), pick="all")
        define("discount", by_text(self.expectations.discount_text))
        define("charity", by_text(self.expectations.charity_name))
        define("no_purchase_necessary", by_text(re.compile(r"no purchase necessary", re.I)))

        for price in self.expectations.single_purchase_prices:
            define(f"price:{price}", by_text(_price_pattern(price)))
        for index, line in enumerate(self.expectations.postal_lines):
            define(f"postal_line:{index}", by_text(line))

    async def verify_page_load(self) -> None:
        async with self.verify.soft():
            await self.verify.url_matches(self.expectations.entry_url_pattern)
            await self.verify.title_matches(self.expectations.entry_title_pattern)
            await self.verify.visible(self.el("heading"))

    async def verify_entry_options(self) -> None:
        async with self.verify.soft():
            await self.verify.visible(self.el("postal_tab"))
            await self.verify.visible(self.el("single_purchase_tab"))
            await self.verify.visible(self.el("subscription_tab"))

    async def select_postal(self) -> None:
        await self.act.click(self.el("postal_tab"))
        await self.verify.visible(self.el("postal_line:0"))

    async def select_single_purchase(self) -> None:
        await self.act.click(self.el("single_purchase_tab"))
        await self.verify.visible(self.el("buy_now_buttons"))

    async def select_subscription(self) -> None:
        await self.act.click(self.el("subscription_tab"))
        await self.verify.visible(self.el("subscription_heading"))

    async def verify_single_purchase_options(self) -> None:
        """Every single purchase package is on offer at its expected price."""
        prices = self.expectations.single_purchase_prices
        async with self.verify.soft():
            await self.verify.count(self.el("buy_now_buttons"), len(prices))
            for price in prices:
                await self.verify.visible(self.el(f"price:{price}"))

    async def verify_subscription_tiers(self) -> None:
        async with self.verify.soft():
            await self.verify.visible(self.el("subscription_heading"))
            await self.verify.count(
                self.el("enter_now_buttons"), self.expectations.subscription_tier_count
            )

    async def verify_postal_instructions(self) -> None:
        async with self.verify.soft():
            for index, _ in enumerate(self.expectations.postal_lines):
                await self.verify.visible(self.el(f"postal_line:{index}"))

    async def verify_discount_offer(self) -> None:
        await self.verify.visible(self.el("discount"))

    async def verify_charity_information(self) -> None:
        await self.verify.visible(self.el("charity"))

    async def verify_legal_compliance(self) -> None:
        await self.verify.visible(self.el("no_purchase_necessary"))

    async def select_smallest_package(self) -> None:
        """Buy the last (smallest) single purchase package and wait for the basket."""
        await self.act.click(
            self.el("smallest_package"),
            expect=NavigationExpectation(url_pattern=self.expectations.cart_url_pattern),
        )

    async def select_subscription_option(self, index: int = 0) -> None:
        option = self.locators.make(
            f"subscription_option:{index}",
            *self.el("enter_now_buttons").strategies,
            pick="nth",
            index=index,
        )
        await self.act.click(
            option,
            expect=NavigationExpectation(url_pattern=self.expectations.cart_url_pattern),
        )

    async def price_text(self, index: int = 0) -> str:
        resolved = await self.resolver.resolve_all(self.el("price_display"))
        return (await resolved.locator.nth(index).text_content() or "").strip()

    async def entries_text(self, index: int = 0) -> str:
        resolved = await self.resolver.resolve_all(self.el("entries_display"))
        return (await resolved.locator.nth(index).text_content() or "").strip()
