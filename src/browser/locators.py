"""Locator registry and resolution.

Page objects register ElementDef declarations in a LocatorRegistry when they
are constructed; no browser I/O happens at that point. A LocatorResolver
turns a declaration into a live Playwright Locator only when an interaction
or verification asks for it, so every resolution runs against the current
DOM and nothing survives a navigation.

Resolution tries the declared strategies in order on every poll round and
stops at the first one whose match is visible.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import FrameLocator, Locator, Page

from src.browser.errors import ElementNotFoundError, WaitTimeoutError
from src.browser.waiting import Stopwatch, poll_until
from src.models.locator_models import ElementDef, LocatorStrategy, StrategyKind

logger = logging.getLogger(__name__)

Root = Union[Page, Locator, FrameLocator]


class LocatorRegistry:
    """Named element declarations for one page object."""

    def __init__(self, owner: str):
        self.owner = owner
        self._elements: Dict[str, ElementDef] = {}

    def define(
        self,
        name: str,
        *strategies: LocatorStrategy,
        pick: str = "first",
        index: int = 0,
        optional: bool = False,
    ) -> ElementDef:
        """Declare an element. Strategies are tried in the order given.

        Raises:
            ValueError: If the name is already taken or no strategy is given
        """
        if name in self._elements:
            raise ValueError(f"{self.owner}: element '{name}' already defined")
        if not strategies:
            raise ValueError(f"{self.owner}: element '{name}' needs at least one strategy")

        element = ElementDef(
            name=f"{self.owner}.{name}",
            strategies=list(strategies),
            pick=pick,
            index=index,
            optional=optional,
        )
        self._elements[name] = element
        return element

    def make(
        self,
        name: str,
        *strategies: LocatorStrategy,
        pick: str = "first",
        index: int = 0,
        optional: bool = False,
    ) -> ElementDef:
        """Build a parameterised declaration (e.g. a tab chosen at call time)
        without registering it."""
        return ElementDef(
            name=f"{self.owner}.{name}",
            strategies=list(strategies),
            pick=pick,
            index=index,
            optional=optional,
        )

    def get(self, name: str) -> ElementDef:
        try:
            return self._elements[name]
        except KeyError:
            raise KeyError(f"{self.owner}: no element named '{name}'") from None

    def names(self) -> List[str]:
        return list(self._elements)

    def __contains__(self, name: str) -> bool:
        return name in self._elements

    def __iter__(self) -> Iterator[ElementDef]:
        return iter(self._elements.values())

    def __len__(self) -> int:
        return len(self._elements)


def build_locator(root: Root, strategy: LocatorStrategy) -> Locator:
    """Build the Playwright locator for one strategy. Performs no I/O."""
    base: Root = root
    if strategy.frame:
        base = base.frame_locator(strategy.frame).nth(strategy.frame_index)
    if strategy.scope:
        base = base.locator(strategy.scope)

    if strategy.kind == StrategyKind.ROLE:
        options = {}
        if strategy.name is not None:
            options["name"] = strategy.name
        if strategy.exact is not None:
            options["exact"] = strategy.exact
        if strategy.level is not None:
            options["level"] = strategy.level
        locator = base.get_by_role(strategy.value, **options)
    elif strategy.kind == StrategyKind.LABEL:
        locator = base.get_by_label(strategy.value, exact=bool(strategy.exact))
    elif strategy.kind == StrategyKind.TEST_ID:
        locator = base.get_by_test_id(strategy.value)
    elif strategy.kind == StrategyKind.TEXT:
        text = strategy.has_text if strategy.has_text is not None else strategy.value
        return base.get_by_text(text, exact=bool(strategy.exact))
    else:
        locator = base.locator(strategy.value)

    if strategy.has_text is not None:
        locator = locator.filter(has_text=strategy.has_text)
    return locator


def pick_match(locator: Locator, element: ElementDef) -> Locator:
    """Narrow a multi-match locator to the match the element declares."""
    if element.pick == "first":
        return locator.first
    if element.pick == "last":
        return locator.last
    if element.pick == "nth":
        return locator.nth(element.index)
    return locator


@dataclass
class ResolvedElement:
    """A declaration bound to a live locator."""

    element: ElementDef
    locator: Locator
    strategy: LocatorStrategy
    elapsed_ms: float


class LocatorResolver:
    """Resolve element declarations against a page within a bounded wait.

    A resolver may be scoped to a container locator, in which case every
    strategy is evaluated inside that container.
    """

    def __init__(
        self,
        page: Page,
        timeout_ms: int = 5000,
        interval_ms: int = 100,
        root: Optional[Root] = None,
    ):
        self.page = page
        self.timeout_ms = timeout_ms
        self.interval_ms = interval_ms
        self.root: Root = page if root is None else root

    def scoped(self, root: Root) -> "LocatorResolver":
        return LocatorResolver(self.page, self.timeout_ms, self.interval_ms, root)

    async def resolve(
        self, element: ElementDef, timeout_ms: Optional[float] = None
    ) -> ResolvedElement:
        """Resolve to the first strategy whose picked match is visible.

        Raises:
            ElementNotFoundError: If no strategy yields a visible match in time
        """
        watch = Stopwatch()

        async def probe() -> Optional[Tuple[LocatorStrategy, Locator]]:
            for strategy in element.strategies:
                candidate = pick_match(build_locator(self.root, strategy), element)
                target = candidate.first if element.pick == "all" else candidate
                try:
                    if await target.is_visible():
                        return strategy, candidate
                except PlaywrightError as e:
                    logger.debug(f"{element.name}: {strategy.describe()} errored: {e}")
            return None

        found = await self._poll(element, probe, timeout_ms, "visible")
        strategy, locator = found
        logger.debug(
            f"Resolved {element.name} via {strategy.describe()} "
            f"in {watch.elapsed_ms:.0f}ms"
        )
        return ResolvedElement(element, locator, strategy, watch.elapsed_ms)

    async def resolve_all(
        self, element: ElementDef, timeout_ms: Optional[float] = None
    ) -> ResolvedElement:
        """Resolve to every match of the first strategy with any attached match.

        Used for counts, where hidden matches still count.

        Raises:
            ElementNotFoundError: If no strategy matches anything in time
        """
        watch = Stopwatch()

        async def probe() -> Optional[Tuple[LocatorStrategy, Locator]]:
            for strategy in element.strategies:
                candidate = build_locator(self.root, strategy)
                try:
                    if await candidate.count() > 0:
                        return strategy, candidate
                except PlaywrightError as e:
                    logger.debug(f"{element.name}: {strategy.describe()} errored: {e}")
            return None

        strategy, locator = await self._poll(element, probe, timeout_ms, "attached")
        return ResolvedElement(element, locator, strategy, watch.elapsed_ms)

    async def is_present(self, element: ElementDef, timeout_ms: Optional[float] = None) -> bool:
        """Guard for optional UI: True if the element becomes visible in time."""
        try:
            await self.resolve(element, timeout_ms=timeout_ms)
            return True
        except ElementNotFoundError:
            logger.info(f"Optional element {element.name} not present")
            return False

    async def check_registry(
        self, registry: LocatorRegistry, names: Optional[Iterable[str]] = None
    ) -> Dict[str, str]:
        """Resolve each named declaration and report 'ok' or the failure.

        Optional elements are skipped unless named explicitly.
        """
        if names is None:
            names = [name for name in registry.names() if not registry.get(name).optional]

        report: Dict[str, str] = {}
        for name in names:
            try:
                await self.resolve_all(registry.get(name))
                report[name] = "ok"
            except ElementNotFoundError as e:
                report[name] = str(e)
        broken = [name for name, status in report.items() if status != "ok"]
        if broken:
            logger.warning(f"{registry.owner}: unresolved locators: {', '.join(broken)}")
        return report

    async def _poll(self, element: ElementDef, probe, timeout_ms: Optional[float], state: str):
        try:
            return await poll_until(
                probe,
                predicate=lambda found: found is not None,
                timeout_ms=self.timeout_ms if timeout_ms is None else timeout_ms,
                interval_ms=self.interval_ms,
                description=f"{element.name} to be {state}",
            )
        except WaitTimeoutError as e:
            raise ElementNotFoundError(
                element.name, [s.describe() for s in element.strategies], e.elapsed_ms
            ) from e
