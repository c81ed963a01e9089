"""User-like interactions with actionability and navigation waits.

Every interaction resolves its target through the LocatorResolver, waits for
it to be visible, enabled and positionally stable, and only then acts. An
interaction that triggers a page transition can be given a
NavigationExpectation; the call then does not return until the new page's
URL, title or defining element is in place.
"""

import logging
import re
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from src.browser.errors import (
    ElementNotFoundError,
    ExternalUnavailableError,
    NavigationTimeoutError,
    NotActionableError,
    WaitTimeoutError,
)
from src.browser.locators import LocatorResolver, ResolvedElement, build_locator, pick_match
from src.browser.waiting import Stopwatch, poll_until
from src.config.suite_config import SuiteConfig
from src.models.browser_models import FocusedElement
from src.models.locator_models import ElementDef

logger = logging.getLogger(__name__)

# Reads document.activeElement without changing focus
FOCUSED_ELEMENT_JS = """
() => {
    const el = document.activeElement;
    if (!el || el === document.body) {
        return {tag: el ? 'body' : '', role: null, name: '', visible: false};
    }
    const rect = el.getBoundingClientRect();
    const name = el.getAttribute('aria-label') || (el.innerText || el.value || '').trim();
    return {
        tag: el.tagName.toLowerCase(),
        role: el.getAttribute('role'),
        name: name.slice(0, 120),
        visible: rect.width > 0 && rect.height > 0,
    };
}
"""


class NavigationExpectation(BaseModel):
    """What must hold before a navigating interaction returns."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    url_pattern: Optional[str] = Field(default=None, description="Regex searched in the URL")
    title_pattern: Optional[str] = Field(default=None, description="Regex searched in the title")
    element: Optional[ElementDef] = Field(default=None, description="Defining element")
    timeout_ms: Optional[int] = Field(default=None, description="Override navigation timeout")

    def describe(self) -> str:
        parts = []
        if self.url_pattern:
            parts.append(f"url~/{self.url_pattern}/")
        if self.title_pattern:
            parts.append(f"title~/{self.title_pattern}/")
        if self.element:
            parts.append(f"element {self.element.name}")
        return ", ".join(parts) or "any page"


class Interactions:
    """Perform clicks, fills and keyboard input on resolved elements."""

    def __init__(self, page: Page, resolver: LocatorResolver, config: SuiteConfig):
        self.page = page
        self.resolver = resolver
        self.config = config

    def scoped(self, root) -> "Interactions":
        """Interactions resolving inside a container locator."""
        return Interactions(self.page, self.resolver.scoped(root), self.config)

    async def goto(self, path: str = "/") -> Optional[int]:
        """Navigate to a site path, retrying persistent server errors.

        Returns:
            The response status, or None for same-document navigations

        Raises:
            ExternalUnavailableError: If the site is unreachable or keeps
                answering 5xx after the configured retries
        """
        url = self.config.url_for(path)
        last_status: Optional[int] = None
        last_reason = ""

        for attempt in range(1, self.config.navigation_retries + 2):
            try:
                response = await self.page.goto(
                    url,
                    wait_until="domcontentloaded",
                    timeout=self.config.navigation_timeout_ms,
                )
            except PlaywrightError as e:
                last_reason = str(e).splitlines()[0]
                logger.warning(f"Navigation to {url} failed (attempt {attempt}): {last_reason}")
                continue

            if response is None:
                return None
            if response.status >= 500:
                last_status = response.status
                logger.warning(f"{url} answered {response.status} (attempt {attempt})")
                continue

            logger.info(f"Navigated to {url} ({response.status})")
            return response.status

        logger.error(f"Giving up on {url}")
        raise ExternalUnavailableError(url, last_status, last_reason)

    async def wait_actionable(
        self, element: ElementDef, timeout_ms: Optional[float] = None
    ) -> ResolvedElement:
        """Wait until the element is visible, enabled and not moving.

        Raises:
            ElementNotFoundError: If the element never becomes visible
            NotActionableError: If it is visible but never enabled and stable
        """
        timeout = self.config.default_timeout_ms if timeout_ms is None else timeout_ms
        watch = Stopwatch()
        resolved = await self.resolver.resolve(element, timeout_ms=timeout)
        locator = resolved.locator
        previous_box = {}

        async def probe():
            enabled = await locator.is_enabled()
            box = await locator.bounding_box()
            stable = box is not None and box == previous_box.get("box")
            previous_box["box"] = box
            return {"enabled": enabled, "stable": stable}

        try:
            await poll_until(
                probe,
                predicate=lambda state: state["enabled"] and state["stable"],
                timeout_ms=watch.remaining_ms(timeout),
                interval_ms=self.config.poll_interval_ms,
                description=f"{element.name} to be actionable",
            )
        except WaitTimeoutError as e:
            state = e.last_value or {}
            if e.last_error is not None:
                reason = str(e.last_error).splitlines()[0]
            elif not state.get("enabled", False):
                reason = "disabled"
            else:
                reason = "not stable"
            raise NotActionableError(element.name, reason, watch.elapsed_ms) from e

        return resolved

    async def wait_for_navigation(self, expectation: NavigationExpectation) -> None:
        """Block until the page satisfies the expectation.

        Raises:
            NavigationTimeoutError: With the URL and title actually reached
        """
        timeout = expectation.timeout_ms or self.config.navigation_timeout_ms
        url_re = re.compile(expectation.url_pattern) if expectation.url_pattern else None
        title_re = re.compile(expectation.title_pattern) if expectation.title_pattern else None

        async def probe() -> bool:
            if url_re and not url_re.search(self.page.url):
                return False
            if title_re and not title_re.search(await self.page.title()):
                return False
            if expectation.element is not None:
                for strategy in expectation.element.strategies:
                    candidate = pick_match(
                        build_locator(self.page, strategy), expectation.element
                    )
                    if await candidate.first.is_visible():
                        return True
                return False
            return True

        watch = Stopwatch()
        try:
            await poll_until(
                probe,
                timeout_ms=timeout,
                interval_ms=self.config.poll_interval_ms,
                description=expectation.describe(),
            )
        except WaitTimeoutError as e:
            actual_title = await self._safe_title()
            logger.error(f"Navigation timeout: wanted {expectation.describe()}, at {self.page.url}")
            raise NavigationTimeoutError(
                expectation.describe(), self.page.url, actual_title, watch.elapsed_ms
            ) from e
        logger.debug(f"Reached {expectation.describe()} in {watch.elapsed_ms:.0f}ms")

    async def click(
        self,
        element: ElementDef,
        expect: Optional[NavigationExpectation] = None,
        force: bool = False,
    ) -> None:
        """Click once actionable; wait for the expectation if one is given."""
        watch = Stopwatch()
        resolved = await self.wait_actionable(element)
        try:
            await resolved.locator.click(force=force, timeout=self.config.default_timeout_ms)
        except PlaywrightError as e:
            raise NotActionableError(
                element.name, str(e).splitlines()[0], watch.elapsed_ms
            ) from e
        logger.debug(f"Clicked {element.name}")

        if expect is not None:
            await self.wait_for_navigation(expect)

    async def click_if_visible(self, element: ElementDef, timeout_ms: float = 2000) -> bool:
        """Click optional UI if it shows up; absence is not a failure."""
        if not await self.resolver.is_present(element, timeout_ms=timeout_ms):
            return False
        await self.click(element)
        return True

    async def click_first_available(
        self,
        elements: Sequence[ElementDef],
        expect: Optional[NavigationExpectation] = None,
        fallback_path: Optional[str] = None,
        probe_timeout_ms: float = 2000,
    ) -> str:
        """Click the first element that is present, in order.

        Falls back to navigating to fallback_path directly when none is
        present.

        Returns:
            Name of the element clicked, or "direct:<path>" for the fallback

        Raises:
            ElementNotFoundError: If nothing is present and there is no fallback
        """
        watch = Stopwatch()
        for element in elements:
            if await self.resolver.is_present(element, timeout_ms=probe_timeout_ms):
                await self.scroll_into_view(element)
                await self.click(element, expect=expect)
                return element.name

        if fallback_path is None:
            raise ElementNotFoundError(
                " | ".join(element.name for element in elements),
                [element.describe() for element in elements],
                watch.elapsed_ms,
            )

        logger.info(f"No link found, navigating directly to {fallback_path}")
        await self.goto(fallback_path)
        if expect is not None:
            await self.wait_for_navigation(expect)
        return f"direct:{fallback_path}"

    async def fill(self, element: ElementDef, value: str) -> None:
        resolved = await self.wait_actionable(element)
        await resolved.locator.fill(value, timeout=self.config.default_timeout_ms)
        logger.debug(f"Filled {element.name}")

    async def select_option(self, element: ElementDef, label: str) -> None:
        resolved = await self.wait_actionable(element)
        await resolved.locator.select_option(label=label, timeout=self.config.default_timeout_ms)
        logger.debug(f"Selected '{label}' in {element.name}")

    async def check(self, element: ElementDef) -> None:
        resolved = await self.wait_actionable(element)
        await resolved.locator.check(timeout=self.config.default_timeout_ms)

    async def hover(self, element: ElementDef) -> None:
        resolved = await self.wait_actionable(element)
        await resolved.locator.hover(timeout=self.config.default_timeout_ms)

    async def scroll_into_view(self, element: ElementDef) -> None:
        resolved = await self.resolver.resolve(element)
        await resolved.locator.scroll_into_view_if_needed(timeout=self.config.default_timeout_ms)

    async def focus(self, element: ElementDef) -> None:
        resolved = await self.resolver.resolve(element)
        await resolved.locator.focus(timeout=self.config.default_timeout_ms)

    async def press(self, key: str, element: Optional[ElementDef] = None) -> None:
        """Press a key on an element, or on whatever currently has focus."""
        if element is None:
            await self.page.keyboard.press(key)
        else:
            resolved = await self.wait_actionable(element)
            await resolved.locator.press(key, timeout=self.config.default_timeout_ms)
        logger.debug(f"Pressed {key}")

    async def focused_element(self) -> FocusedElement:
        data = await self.page.evaluate(FOCUSED_ELEMENT_JS)
        return FocusedElement(**data)

    async def tab_through(self, count: int) -> List[FocusedElement]:
        """Press Tab count times, describing the focused element after each."""
        focused = []
        for _ in range(count):
            await self.page.keyboard.press("Tab")
            focused.append(await self.focused_element())
        return focused

    async def arrow_between_tabs(
        self, element: ElementDef, key: str = "ArrowRight"
    ) -> FocusedElement:
        """Focus a tab control, press an arrow key and report the new focus."""
        await self.focus(element)
        await self.page.keyboard.press(key)
        return await self.focused_element()

    async def focus_within(self, container: ElementDef) -> bool:
        """Whether keyboard focus currently sits inside the container."""
        resolved = await self.resolver.resolve(container)
        return bool(
            await resolved.locator.evaluate("el => el.contains(document.activeElement)")
        )

    async def set_viewport(self, width: int, height: int) -> None:
        await self.page.set_viewport_size({"width": width, "height": height})
        logger.debug(f"Viewport set to {width}x{height}")

    async def reload(self) -> None:
        await self.page.reload(
            wait_until="domcontentloaded", timeout=self.config.navigation_timeout_ms
        )

    async def go_back(self) -> None:
        await self.page.go_back(
            wait_until="domcontentloaded", timeout=self.config.navigation_timeout_ms
        )

    async def go_forward(self) -> None:
        await self.page.go_forward(
            wait_until="domcontentloaded", timeout=self.config.navigation_timeout_ms
        )

    async def _safe_title(self) -> str:
        try:
            return await self.page.title()
        except PlaywrightError:
            return ""
