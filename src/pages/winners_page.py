"""Winners page object: past winner stories in swipeable carousels."""

import logging
import re
from typing import Optional, Tuple

from src.browser.interactions import Interactions
from src.browser.verifications import Verifications
from src.models.browser_models import WinnerDetails
from src.models.locator_models import ElementDef, by_css, by_role, by_text
from src.pages.base_page import BasePage
from src.pages.home_page import CAROUSEL_CSS

logger = logging.getLogger(__name__)

ACTIVE_SLIDE_CSS = '[class*="active"], [aria-current="true"]'

_LOCATION_RE = re.compile(r"\bfrom\s+([A-Z][\w'-]*(?:[ -][A-Z][\w'-]*)*)")
_PRIZE_RE = re.compile(r"£\s?\d[\d,]*(?:\.\d+)?(?:\s?(?:million|m|k)\b)?", re.I)
_ENTRY_CODE_RE = re.compile(r"#\s?([A-Z0-9-]+)", re.I)


def parse_winner_text(text: str) -> WinnerDetails:
    """Pull location, prize and entry code out of a winner story's text."""
    location = _LOCATION_RE.search(text)
    prize = _PRIZE_RE.search(text)
    entry_code = _ENTRY_CODE_RE.search(text)
    return WinnerDetails(
        location=location.group(1) if location else "",
        prize=prize.group(0).strip() if prize else "",
        entry_code=entry_code.group(1) if entry_code else "",
    )


class WinnersPage(BasePage):
    name = "winners"

    @property
    def path(self) -> str:
        return self.expectations.winners_path

    def define_locators(self) -> None:
        define = self.locators.define
        define(
            "heading",
            by_role("heading", name=re.compile(r"grand prize winner", re.I)),
            by_role("heading", name=re.compile(r"winners", re.I)),
        )
        define("carousels", by_css(CAROUSEL_CSS), pick="all")
        define("slides", by_css('.swiper-slide, [class*="slide"]'), pick="all")
        define("next_buttons", by_role("button", name=re.compile(r"next slide", re.I)), pick="all")
        define("slide_dots", by_role("button", name=re.compile(r"go to slide", re.I)), pick="all")
        define(
            "video_buttons",
            by_role("button", name=re.compile(r"watch the magic", re.I)),
            pick="all",
            optional=True,
        )
        define(
            "winner_stories",
            by_text(re.compile(r"\bwon\b|\bwinner\b", re.I), scope="main"),
            pick="all",
        )
        define("entry_codes", by_text(re.compile(r"#\s?[A-Z0-9]|winning entry code", re.I)))
        define("prize_amounts", by_text(re.compile(r"£|cash|house", re.I), scope="main"))
        define("winner_locations", by_text(_LOCATION_RE, scope="main"))

        # Carousel-relative declarations, resolved inside one carousel at a time
        self.carousel_next = self.locators.make(
            "carousel.next",
            by_role("button", name=re.compile(r"next slide", re.I)),
            by_css("button", has_text=re.compile(r"next", re.I)),
        )
        self.carousel_previous = self.locators.make(
            "carousel.previous",
            by_role("button", name=re.compile(r"previous slide", re.I)),
            by_css("button", has_text=re.compile(r"prev", re.I)),
        )
        self.carousel_first_dot = self.locators.make(
            "carousel.dot1", by_role("button", name=re.compile(r"go to slide 1\b", re.I))
        )
        self.active_slide = self.locators.make("carousel.active_slide", by_css(ACTIVE_SLIDE_CSS))

    def carousel(self, index: int) -> Tuple[Interactions, Verifications]:
        """Interaction and verification helpers scoped to one carousel."""
        root = self.page.locator(CAROUSEL_CSS).nth(index)
        return self.act.scoped(root), self.verify.scoped(root)

    def _nth(self, name: str, index: int) -> ElementDef:
        return self.locators.make(
            f"{name}#{index}", *self.el(name).strategies, pick="nth", index=index
        )

    async def verify_page_load(self) -> None:
        async with self.verify.soft():
            await self.verify.url_matches(self.expectations.winners_url_pattern)
            await self.verify.visible(self.el("winner_stories"))
            await self.verify.visible(self.el("carousels"))

    async def verify_carousel_count(self) -> None:
        await self.verify.count(
            self.el("carousels"),
            self.expectations.carousel_count,
            timeout_ms=self.config.navigation_timeout_ms,
        )

    async def verify_carousel_labels(self, index: int = 0) -> None:
        """Carousel controls announce what they do."""
        _, verify = self.carousel(index)
        async with verify.soft():
            await verify.visible(self.carousel_next)
            await verify.visible(self.carousel_first_dot)

    async def navigate_carousel(self, index: int = 0, direction: str = "next") -> None:
        if direction not in ("next", "previous"):
            raise ValueError(f"direction must be 'next' or 'previous', not {direction!r}")
        act, _ = self.carousel(index)
        control = self.carousel_next if direction == "next" else self.carousel_previous
        await act.click(control)

    async def click_slide_dot(self, carousel_index: int, slide_number: int) -> None:
        act, _ = self.carousel(carousel_index)
        dot = self.locators.make(
            f"carousel.dot{slide_number}",
            by_role("button", name=f"Go to slide {slide_number}", exact=True),
        )
        await act.click(dot)

    async def _active_slide_text(self, index: int) -> Optional[str]:
        root = self.page.locator(CAROUSEL_CSS).nth(index)
        resolved = await self.resolver.scoped(root).resolve_all(self.active_slide)
        return await resolved.locator.first.text_content()

    async def verify_carousel_navigation(self, index: int = 0) -> None:
        """Moving to the next slide changes the active slide."""
        initial = await self._active_slide_text(index)
        await self.navigate_carousel(index, "next")
        await self.verify.that(
            f"carousel {index} active slide changes",
            lambda: self._active_slide_text(index),
            lambda text: text != initial,
            f"not {initial!r}",
        )

    async def play_winner_video(self, index: int = 0) -> None:
        await self.act.click(self._nth("video_buttons", index))

    async def winner_count(self) -> int:
        resolved = await self.resolver.resolve_all(self.el("winner_stories"))
        return await resolved.locator.count()

    async def winner_details(self, index: int) -> WinnerDetails:
        resolved = await self.resolver.resolve_all(self.el("winner_stories"))
        text = await resolved.locator.nth(index).text_content() or ""
        details = parse_winner_text(text)
        logger.debug(f"Winner {index}: {details}")
        return details

    async def verify_winner_information(self) -> None:
        async with self.verify.soft():
            await self.verify.visible(self.el("entry_codes"))
            await self.verify.visible(self.el("prize_amounts"))
            await self.verify.visible(self.el("winner_locations"))
