"""FAQs page object."""

import logging
import re

from src.models.locator_models import ElementDef, by_css, by_role
from src.pages.base_page import BasePage

logger = logging.getLogger(__name__)


class FAQsPage(BasePage):
    """Frequently asked questions, grouped into category sections."""

    name = "faqs"

    @property
    def path(self) -> str:
        return self.expectations.faqs_path

    def define_locators(self) -> None:
        define = self.locators.define
        define(
            "heading",
            by_role("heading", name=self.expectations.faqs_heading, level=1),
            by_role("heading", name=re.compile(r"frequently asked questions", re.I)),
        )
        define("category_headings", by_role("heading", level=2), pick="all")
        define("question_headings", by_role("heading", level=4), pick="all")
        define("sections", by_css("main > div > div"), pick="all")
        define(
            "search",
            by_role("textbox", name=re.compile(r"search", re.I)),
            by_css('input[type="search"]'),
            optional=True,
        )

        for section in self.expectations.faq_sections:
            define(f"section:{section}", by_role("heading", name=section, exact=True))
        for question in self.expectations.faq_questions:
            define(
                f"question:{question}",
                by_role("heading", level=4, has_text=re.compile(re.escape(question), re.I)),
            )

    def _question(self, text: str) -> ElementDef:
        return self.locators.make(
            f"question:{text}",
            by_role("heading", level=4, has_text=text),
        )

    async def verify_page_load(self) -> None:
        async with self.verify.soft():
            await self.verify.url_matches(r"faq")
            await self.verify.visible(self.el("heading"))

    async def verify_heading_structure(self) -> None:
        """One h1, then more category and question headings than the minimums."""
        async with self.verify.soft():
            await self.verify.visible(self.el("heading"))
            await self.verify.count_greater_than(
                self.el("category_headings"), self.expectations.faq_min_category_headings
            )
            await self.verify.count_greater_than(
                self.el("question_headings"), self.expectations.faq_min_question_headings
            )

    async def verify_sections(self) -> None:
        async with self.verify.soft():
            for section in self.expectations.faq_sections:
                await self.verify.visible(self.el(f"section:{section}"))

    async def verify_section_count(self) -> None:
        await self.verify.count(self.el("sections"), len(self.expectations.faq_sections))

    async def verify_specific_questions(self) -> None:
        async with self.verify.soft():
            for question in self.expectations.faq_questions:
                await self.verify.visible(self.el(f"question:{question}"))

    async def expand_question(self, text: str) -> None:
        await self.act.click(self._question(text))

    async def expand_question_by_index(self, index: int) -> None:
        question = self.locators.make(
            f"question#{index}",
            *self.el("question_headings").strategies,
            pick="nth",
            index=index,
        )
        await self.act.click(question)

    async def question_count(self) -> int:
        resolved = await self.resolver.resolve_all(self.el("question_headings"))
        return await resolved.locator.count()

    async def verify_question_interactivity(self) -> None:
        """Questions render an expand marker and accept clicks."""
        first = self.locators.make(
            "first_question", *self.el("question_headings").strategies
        )
        await self.verify.text_contains(first, "+")
        await self.act.click(first)

    async def search(self, term: str) -> bool:
        """Search the FAQs if the page offers a search box."""
        search = self.el("search")
        if not await self.resolver.is_present(search, timeout_ms=3000):
            logger.info("FAQ search not available")
            return False
        await self.act.fill(search, term)
        await self.act.press("Enter", search)
        return True
