"""Read-only verification helpers.

Each verification polls its condition within the configured window, records
an AssertionResult for the scenario report and raises a descriptive failure
if the condition never holds. Nothing here clicks, types or navigates.

Inside ``async with verify.soft():`` failures are collected instead of
raised, so independent checks in one step all run; the group raises a single
SoftAssertionError on exit.
"""

import logging
import re
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, List, Optional, Pattern, Sequence, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from src.browser.errors import (
    AssertionMismatchError,
    E2EFailure,
    ElementNotFoundError,
    SoftAssertionError,
    WaitTimeoutError,
)
from src.browser.locators import LocatorResolver, ResolvedElement, build_locator, pick_match
from src.browser.waiting import Stopwatch, poll_until
from src.config.suite_config import SuiteConfig
from src.models.locator_models import ElementDef
from src.models.result_models import AssertionResult

logger = logging.getLogger(__name__)

TextMatch = Union[str, Pattern[str]]

# Accessible label as assistive technology would announce it for form controls
ACCESSIBLE_LABEL_JS = """
(el) => {
    const aria = el.getAttribute('aria-label');
    if (aria && aria.trim()) return aria.trim();
    const labelledBy = el.getAttribute('aria-labelledby');
    if (labelledBy) {
        const text = labelledBy.split(/\\s+/)
            .map(id => document.getElementById(id))
            .filter(Boolean)
            .map(node => node.textContent.trim())
            .join(' ');
        if (text) return text;
    }
    if (el.labels && el.labels.length) {
        const text = el.labels[0].textContent.trim();
        if (text) return text;
    }
    return (el.getAttribute('placeholder') || el.getAttribute('title') || '').trim();
}
"""


def _matches(actual: Optional[str], expected: TextMatch) -> bool:
    if actual is None:
        return False
    if isinstance(expected, re.Pattern):
        return expected.search(actual) is not None
    return expected in actual


def _show(expected: Any) -> str:
    if isinstance(expected, re.Pattern):
        return f"/{expected.pattern}/"
    return str(expected)


class _SoftGroup:
    """Failure collection shared by a Verifications and its scoped copies."""

    def __init__(self):
        self.failures: Optional[List[AssertionError]] = None


class Verifications:
    """Assert observable page state for one scenario."""

    def __init__(
        self,
        page: Page,
        resolver: LocatorResolver,
        config: SuiteConfig,
        results: Optional[List[AssertionResult]] = None,
        soft_group: Optional[_SoftGroup] = None,
    ):
        self.page = page
        self.resolver = resolver
        self.config = config
        self.results: List[AssertionResult] = results if results is not None else []
        self._soft = soft_group if soft_group is not None else _SoftGroup()

    def scoped(self, root) -> "Verifications":
        """Verifications resolving inside a container.

        The copy shares this result list and any open soft() group.
        """
        return Verifications(
            self.page, self.resolver.scoped(root), self.config, self.results, self._soft
        )

    @asynccontextmanager
    async def soft(self):
        """Collect failures of the enclosed verifications and raise once.

        If another exception leaves the group, the failures collected so far
        are logged before it propagates.
        """
        group = self._soft
        if group.failures is not None:
            # Nested groups share the outer collection
            yield self
            return

        group.failures = []
        try:
            yield self
        except Exception as e:
            if group.failures:
                logger.error(
                    f"Soft group aborted by {type(e).__name__} after "
                    f"{len(group.failures)} collected failure(s): "
                    + "; ".join(str(failure) for failure in group.failures)
                )
            raise
        finally:
            failures, group.failures = group.failures, None
        if failures:
            raise SoftAssertionError(failures)

    # Element state

    async def visible(self, element: ElementDef, timeout_ms: Optional[float] = None):
        """Element becomes visible within the window."""
        description = f"{element.name} is visible"
        try:
            resolved = await self.resolver.resolve(element, timeout_ms=timeout_ms)
        except ElementNotFoundError as e:
            self._record(description, "timeout", "visible", "not found", e.elapsed_ms)
            return self._fail(e)
        self._record(description, "passed", "visible", "visible", resolved.elapsed_ms)
        return resolved

    async def all_visible(self, elements: Sequence[ElementDef]) -> None:
        for element in elements:
            await self.visible(element)

    async def hidden(self, element: ElementDef, timeout_ms: Optional[float] = None) -> None:
        """No strategy of the element has a visible match within the window."""

        async def probe() -> bool:
            for strategy in element.strategies:
                candidate = pick_match(build_locator(self.resolver.root, strategy), element)
                if await candidate.first.is_visible():
                    return True
            return False

        await self._verify(
            f"{element.name} is hidden", probe, lambda shown: not shown, "hidden", timeout_ms
        )

    async def count(self, element: ElementDef, expected: int, timeout_ms: Optional[float] = None) -> int:
        """Exactly ``expected`` matches, within the poll window."""
        return await self._verify(
            f"{element.name} count",
            lambda: self._count(element),
            lambda n: n == expected,
            expected,
            timeout_ms,
        )

    async def count_at_least(self, element: ElementDef, minimum: int, timeout_ms: Optional[float] = None) -> int:
        return await self._verify(
            f"{element.name} count",
            lambda: self._count(element),
            lambda n: n >= minimum,
            f">= {minimum}",
            timeout_ms,
        )

    async def count_greater_than(self, element: ElementDef, minimum: int, timeout_ms: Optional[float] = None) -> int:
        return await self._verify(
            f"{element.name} count",
            lambda: self._count(element),
            lambda n: n > minimum,
            f"> {minimum}",
            timeout_ms,
        )

    async def count_between(self, element: ElementDef, low: int, high: int, timeout_ms: Optional[float] = None) -> int:
        """Count strictly between low and high."""
        return await self._verify(
            f"{element.name} count",
            lambda: self._count(element),
            lambda n: low < n < high,
            f"between {low} and {high}",
            timeout_ms,
        )

    async def text_contains(self, element: ElementDef, expected: TextMatch, timeout_ms: Optional[float] = None) -> Optional[str]:
        """Element text contains a substring or matches a regex."""
        resolved = await self._resolve_for(element, f"{element.name} text", _show(expected), timeout_ms)
        if resolved is None:
            return None
        return await self._verify(
            f"{element.name} text",
            resolved.locator.text_content,
            lambda text: _matches(text, expected),
            _show(expected),
            timeout_ms,
        )

    async def text_matches(self, element: ElementDef, pattern: str, timeout_ms: Optional[float] = None) -> Optional[str]:
        return await self.text_contains(element, re.compile(pattern), timeout_ms)

    async def attribute(
        self,
        element: ElementDef,
        name: str,
        expected: Optional[TextMatch] = None,
        timeout_ms: Optional[float] = None,
    ) -> Optional[str]:
        """Attribute is present, equal to a string or matching a regex."""
        description = f"{element.name} [{name}]"
        shown = "present" if expected is None else _show(expected)
        resolved = await self._resolve_for(element, description, shown, timeout_ms)
        if resolved is None:
            return None

        def predicate(value: Optional[str]) -> bool:
            if expected is None:
                return value is not None
            if isinstance(expected, re.Pattern):
                return value is not None and expected.search(value) is not None
            return value == expected

        return await self._verify(
            description,
            lambda: resolved.locator.get_attribute(name),
            predicate,
            shown,
            timeout_ms,
        )

    async def value(self, element: ElementDef, expected: str, timeout_ms: Optional[float] = None) -> Optional[str]:
        """Input value equals ``expected``."""
        resolved = await self._resolve_for(element, f"{element.name} value", expected, timeout_ms)
        if resolved is None:
            return None
        return await self._verify(
            f"{element.name} value",
            resolved.locator.input_value,
            lambda actual: actual == expected,
            expected,
            timeout_ms,
        )

    async def checked(self, element: ElementDef, expected: bool = True, timeout_ms: Optional[float] = None) -> Optional[bool]:
        resolved = await self._resolve_for(element, f"{element.name} checked", expected, timeout_ms)
        if resolved is None:
            return None
        return await self._verify(
            f"{element.name} checked",
            resolved.locator.is_checked,
            lambda actual: actual is expected,
            expected,
            timeout_ms,
        )

    async def focused(self, element: ElementDef, timeout_ms: Optional[float] = None) -> Optional[bool]:
        resolved = await self._resolve_for(element, f"{element.name} focused", True, timeout_ms)
        if resolved is None:
            return None
        return await self._verify(
            f"{element.name} focused",
            lambda: resolved.locator.evaluate("el => el === document.activeElement"),
            lambda actual: actual is True,
            True,
            timeout_ms,
        )

    async def accessible_label(self, element: ElementDef, timeout_ms: Optional[float] = None) -> Optional[str]:
        """Element exposes a non-empty accessible label."""
        description = f"{element.name} accessible label"
        resolved = await self._resolve_for(element, description, "non-empty label", timeout_ms)
        if resolved is None:
            return None
        return await self._verify(
            description,
            lambda: resolved.locator.evaluate(ACCESSIBLE_LABEL_JS),
            lambda label: bool(label and label.strip()),
            "non-empty label",
            timeout_ms,
        )

    # Page state

    async def url_matches(self, pattern: str, timeout_ms: Optional[float] = None) -> Optional[str]:
        regex = re.compile(pattern)

        async def probe() -> str:
            return self.page.url

        return await self._verify(
            "page url", probe, lambda url: regex.search(url) is not None, f"/{pattern}/", timeout_ms
        )

    async def title_matches(self, pattern: str, timeout_ms: Optional[float] = None) -> Optional[str]:
        regex = re.compile(pattern)
        return await self._verify(
            "page title",
            self.page.title,
            lambda title: regex.search(title) is not None,
            f"/{pattern}/",
            timeout_ms,
        )

    async def that(
        self,
        description: str,
        probe: Callable[[], Awaitable[Any]],
        predicate: Callable[[Any], bool],
        expected: Any,
        timeout_ms: Optional[float] = None,
    ) -> Any:
        """Verify an arbitrary read-only probe, with the same reporting."""
        return await self._verify(description, probe, predicate, expected, timeout_ms)

    def expect_value(self, description: str, actual: Any, predicate: Callable[[Any], bool], expected: Any) -> Any:
        """Check an already-collected value (network records, metrics)."""
        if predicate(actual):
            self._record(description, "passed", expected, actual, 0.0)
            return actual
        self._record(description, "failed", expected, actual, 0.0)
        return self._fail(AssertionMismatchError(description, expected, actual))

    # Internals

    async def _count(self, element: ElementDef) -> int:
        for strategy in element.strategies:
            try:
                found = await build_locator(self.resolver.root, strategy).count()
            except PlaywrightError:
                continue
            if found:
                return found
        return 0

    async def _resolve_for(
        self, element: ElementDef, description: str, expected: Any, timeout_ms: Optional[float]
    ) -> Optional[ResolvedElement]:
        try:
            return await self.resolver.resolve(element, timeout_ms=timeout_ms)
        except ElementNotFoundError as e:
            self._record(description, "timeout", expected, "not found", e.elapsed_ms)
            return self._fail(e)

    async def _verify(
        self,
        description: str,
        probe: Callable[[], Awaitable[Any]],
        predicate: Callable[[Any], bool],
        expected: Any,
        timeout_ms: Optional[float],
    ) -> Any:
        watch = Stopwatch()
        try:
            observed = await poll_until(
                probe,
                predicate=predicate,
                timeout_ms=self.config.default_timeout_ms if timeout_ms is None else timeout_ms,
                interval_ms=self.config.poll_interval_ms,
                description=description,
            )
        except WaitTimeoutError as e:
            actual = e.last_value if e.last_error is None else f"error: {e.last_error}"
            self._record(description, "failed", expected, actual, e.elapsed_ms)
            error = AssertionMismatchError(description, expected, actual, e.elapsed_ms)
            error.__cause__ = e
            return self._fail(error)

        self._record(description, "passed", expected, observed, watch.elapsed_ms)
        return observed

    def _record(self, description: str, outcome: str, expected: Any, actual: Any, elapsed_ms: float) -> None:
        self.results.append(
            AssertionResult(
                description=description,
                outcome=outcome,
                expected=None if expected is None else str(expected),
                actual=None if actual is None else str(actual),
                elapsed_ms=elapsed_ms,
            )
        )
        if outcome == "passed":
            logger.debug(f"PASS {description}")
        else:
            logger.warning(f"FAIL {description}: expected {expected!r}, got {actual!r}")

    def _fail(self, error: E2EFailure) -> None:
        if self._soft.failures is None:
            raise error
        self._soft.failures.append(error)
        return None
