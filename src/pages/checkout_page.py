"""Checkout page object."""

import logging
import re

from src.browser.interactions import NavigationExpectation
from src.models.browser_models import CustomerDetails
from src.models.locator_models import by_css, by_label, by_role, by_text
from src.pages.base_page import BasePage

logger = logging.getLogger(__name__)

# Fields whose accessible labelling is checked, in form order
LABELLED_FIELDS = (
    "email",
    "first_name",
    "last_name",
    "address",
    "city",
    "postcode",
    "phone",
)


class CheckoutPage(BasePage):
    """Hosted checkout: contact details, delivery address, payment hand-off."""

    name = "checkout"

    def define_locators(self) -> None:
        define = self.locators.define
        define(
            "email",
            by_role("textbox", name="Email"),
            by_label("Email"),
            by_css('input[type="email"], input[name="email"]'),
        )
        define(
            "first_name",
            by_role("textbox", name="First name"),
            by_css('input[name="firstName"], input[autocomplete="given-name"]'),
        )
        define(
            "last_name",
            by_role("textbox", name="Last name"),
            by_css('input[name="lastName"], input[autocomplete="family-name"]'),
        )
        define(
            "address",
            by_role("combobox", name="Address"),
            by_role("textbox", name="Address"),
            by_css('input[name="address1"]'),
        )
        define(
            "city",
            by_role("textbox", name="City"),
            by_css('input[name="city"]'),
        )
        define(
            "postcode",
            by_role("textbox", name="Postcode"),
            by_css('input[name="postalCode"], input[autocomplete="postal-code"]'),
        )
        define(
            "phone",
            by_role("textbox", name="Phone (optional)"),
            by_css('input[name="phone"], input[type="tel"]'),
        )
        define(
            "country",
            by_role("combobox", name="Country/Region"),
            by_css('select[name="countryCode"]'),
        )
        define(
            "marketing_checkbox",
            by_role(
                "checkbox",
                name=re.compile(r"From time to time, Omaze would like to send you marketing"),
            ),
        )
        define("sms_checkbox", by_role("checkbox", name="Text me with news and offers"))
        define("continue_to_payment", by_role("button", name="Continue to payment"))
        define("return_to_basket", by_role("link", name="Return to basket"))
        define("express_checkout", by_text("Express checkout"))
        define("shop_pay", by_role("link", name="Shop Pay"))
        define(
            "paypal",
            by_role("button", name="PayPal", frame="iframe", frame_index=0),
            by_role("button", name=re.compile(r"paypal", re.I), frame='iframe[title*="PayPal" i]'),
            optional=True,
        )

        for link in self.expectations.legal_links:
            define(f"legal:{link}", by_role("link", name=link, exact=True))

    async def verify_page_load(self) -> None:
        async with self.verify.soft():
            await self.verify.url_matches(self.expectations.checkout_url_pattern)
            await self.verify.title_matches(self.expectations.checkout_title_pattern)

    async def verify_checkout_form(self) -> None:
        async with self.verify.soft():
            await self.verify.visible(self.el("email"))
            await self.verify.visible(self.el("first_name"))
            await self.verify.visible(self.el("last_name"))
            await self.verify.visible(self.el("continue_to_payment"))

    async def verify_required_fields(self) -> None:
        async with self.verify.soft():
            for field in ("email", "first_name", "last_name"):
                await self.verify.attribute(self.el(field), "required")

    async def verify_field_labels(self) -> None:
        """Each customer field exposes a non-empty accessible label."""
        async with self.verify.soft():
            for field in LABELLED_FIELDS:
                await self.verify.accessible_label(self.el(field))

    async def fill_customer_information(self, customer: CustomerDetails) -> None:
        await self.act.fill(self.el("email"), customer.email)
        await self.act.fill(self.el("first_name"), customer.first_name)
        await self.act.fill(self.el("last_name"), customer.last_name)
        await self.act.fill(self.el("address"), customer.address)
        # Address autocomplete opens a listbox over the next fields
        await self.act.press("Escape")
        await self.act.fill(self.el("city"), customer.city)
        await self.act.fill(self.el("postcode"), customer.postcode)
        if customer.phone:
            await self.act.fill(self.el("phone"), customer.phone)
        logger.info("Customer information entered")

    async def verify_customer_information(self, customer: CustomerDetails) -> None:
        async with self.verify.soft():
            await self.verify.value(self.el("email"), customer.email)
            await self.verify.value(self.el("first_name"), customer.first_name)
            await self.verify.value(self.el("last_name"), customer.last_name)

    async def verify_defaults(self) -> None:
        """Country preselected, marketing opt-in ticked, SMS opt-in offered."""
        async with self.verify.soft():
            await self.verify.value(self.el("country"), self.expectations.default_country)
            await self.verify.checked(self.el("marketing_checkbox"))
            await self.verify.visible(self.el("sms_checkbox"))

    async def submit_empty_form(self) -> None:
        """Submit without details; the browser moves focus to the email field."""
        await self.act.click(self.el("continue_to_payment"))
        await self.verify.focused(self.el("email"))

    async def verify_express_checkout(self) -> None:
        async with self.verify.soft():
            await self.verify.visible(self.el("express_checkout"))
            await self.verify.visible(self.el("shop_pay"))
            await self.verify.visible(self.el("paypal"))

    async def verify_legal_links(self) -> None:
        async with self.verify.soft():
            for link in self.expectations.legal_links:
                await self.verify.visible(self.el(f"legal:{link}"))

    async def return_to_basket(self) -> None:
        await self.act.click(
            self.el("return_to_basket"),
            expect=NavigationExpectation(url_pattern=self.expectations.cart_url_pattern),
        )
