"""Basket page object."""

import logging
import re

from src.browser.interactions import NavigationExpectation
from src.models.locator_models import by_css, by_role, by_text
from src.pages.base_page import BasePage

logger = logging.getLogger(__name__)


class CartPage(BasePage):
    """Basket, upsell step and the hand-off to checkout."""

    name = "cart"
    path = "/cart"

    def define_locators(self) -> None:
        define = self.locators.define
        define("order_total", by_role("heading", name=re.compile(r"Order Total")))
        define(
            "progress",
            by_role("navigation", name="Progress"),
            by_css('nav[aria-label*="progress" i]'),
        )
        define(
            "progress_steps",
            by_css("li", scope='nav[aria-label="Progress"]'),
            by_role("listitem", scope='[aria-label*="progress" i]'),
            pick="all",
        )
        define("continue_button", by_role("button", name="Continue", exact=True))
        define("checkout_button", by_role("button", name="Checkout", exact=True))
        define("special_offer", by_text(self.expectations.special_offer_text))
        define("remove_button", by_role("button", name="Remove"))
        define(
            "quantity",
            by_css('input[type="text"][disabled]'),
            by_css('input[name*="quantity" i]'),
        )
        define("how_did_you_hear", by_role("combobox"), optional=True)
        define(
            "continue_shopping",
            by_role("link", name=re.compile(r"continue shopping", re.I)),
            optional=True,
        )
        define("discount", by_text(self.expectations.discount_text), optional=True)
        define("ticket_sales", by_text(self.expectations.ticket_sales_text))

    async def verify_cart_contents(self) -> None:
        async with self.verify.soft():
            await self.verify.url_matches(self.expectations.cart_url_pattern)
            await self.verify.visible(self.el("order_total"))
            await self.verify.visible(self.el("progress"))

    async def verify_order_total(self, amount: str) -> None:
        await self.verify.text_contains(self.el("order_total"), amount)

    async def verify_progress_steps(self) -> None:
        await self.verify.count(self.el("progress_steps"), self.expectations.progress_item_count)

    async def verify_quantity(self, expected: str = "1") -> None:
        async with self.verify.soft():
            await self.verify.value(self.el("quantity"), expected)
            await self.verify.visible(self.el("remove_button"))

    async def continue_to_offers(self) -> None:
        """Move from the basket to the special offer step."""
        await self.act.click(
            self.el("continue_button"),
            expect=NavigationExpectation(element=self.el("special_offer")),
        )

    async def proceed_to_checkout(self) -> None:
        await self.act.click(
            self.el("checkout_button"),
            expect=NavigationExpectation(
                url_pattern=self.expectations.checkout_url_pattern,
                title_pattern=self.expectations.checkout_title_pattern,
            ),
        )

    async def select_how_did_you_hear(self, label: str) -> None:
        await self.act.select_option(self.el("how_did_you_hear"), label)

    async def cart_total(self) -> str:
        resolved = await self.resolver.resolve(self.el("order_total"))
        return (await resolved.locator.text_content() or "").strip()

    async def continue_shopping(self) -> None:
        await self.act.click(self.el("continue_shopping"))

    async def verify_legal_information(self) -> None:
        await self.verify.visible(self.el("ticket_sales"))
