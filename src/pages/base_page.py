"""Base class for storefront page objects."""

import logging
import re
from typing import Dict, Iterable, List, Optional

from playwright.async_api import Page

from src.browser.interactions import Interactions
from src.browser.locators import LocatorRegistry, LocatorResolver
from src.browser.verifications import Verifications
from src.config.site_expectations import SiteExpectations, get_site_expectations
from src.config.suite_config import SuiteConfig, get_suite_config
from src.models.locator_models import ElementDef, by_css, by_role, by_test_id
from src.models.result_models import AssertionResult

logger = logging.getLogger(__name__)


class BasePage:
    """Shared plumbing for page objects.

    Subclasses declare their elements in ``define_locators``; constructing a
    page object touches nothing in the browser. Interactions go through
    ``self.act`` and assertions through ``self.verify``, both of which
    resolve declarations lazily against the current DOM.
    """

    name = "page"
    path = "/"

    def __init__(
        self,
        page: Page,
        config: Optional[SuiteConfig] = None,
        expectations: Optional[SiteExpectations] = None,
        results: Optional[List[AssertionResult]] = None,
    ):
        self.page = page
        self.config = config or get_suite_config()
        self.expectations = expectations or get_site_expectations()
        self.locators = LocatorRegistry(self.name)
        self.resolver = LocatorResolver(
            page, self.config.default_timeout_ms, self.config.poll_interval_ms
        )
        self.act = Interactions(page, self.resolver, self.config)
        self.verify = Verifications(page, self.resolver, self.config, results)

        self.locators.define(
            "cookie_accept",
            by_css("#onetrust-accept-btn-handler"),
            by_role("button", name=re.compile(r"^(accept all|accept|agree)$", re.I)),
            by_test_id("accept-cookies"),
            optional=True,
        )
        self.define_locators()

    def define_locators(self) -> None:
        """Register this page's elements. Must not perform I/O."""

    def el(self, name: str) -> ElementDef:
        return self.locators.get(name)

    async def goto(self) -> Optional[int]:
        """Open this page directly and dismiss the cookie banner if shown."""
        status = await self.act.goto(self.path)
        await self.accept_cookies()
        return status

    async def accept_cookies(self) -> bool:
        """Dismiss the cookie consent banner; absence is fine."""
        accept = self.el("cookie_accept")
        if not await self.act.click_if_visible(accept, timeout_ms=2000):
            logger.info("Cookie banner not shown")
            return False
        await self.verify.hidden(accept)
        logger.info("Cookie banner dismissed")
        return True

    async def title(self) -> str:
        return await self.page.title()

    @property
    def url(self) -> str:
        return self.page.url

    async def verify_locators_resolve(self, names: Optional[Iterable[str]] = None) -> Dict[str, str]:
        """Check that the page's locators still find something on the live page."""
        report = await self.resolver.check_registry(self.locators, names)
        broken = {name: status for name, status in report.items() if status != "ok"}
        self.verify.expect_value(
            f"{self.name} locators resolve", sorted(broken), lambda names: not names, []
        )
        return report
