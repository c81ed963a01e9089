"""Accessibility checks for storefront pages.

This module provides the AccessibilityTester class. It runs a set of quick
structural checks directly in the page (landmarks, heading outline, image
alternatives, link names, touch target size, visible keyboard focus) and can
additionally inject axe-core for a full WCAG audit.

Checks return AccessibilityIssue lists rather than raising; scenarios decide
which findings fail them.
"""

import logging
from typing import List, Dict, Any, Literal

from playwright.async_api import Page

from src.browser.interactions import FOCUSED_ELEMENT_JS
from src.models.browser_models import AccessibilityIssue

logger = logging.getLogger(__name__)

Impact = Literal["minor", "moderate", "serious", "critical"]

LANDMARKS_JS = """
() => ({
    navigation: !!document.querySelector('nav, [role="navigation"]'),
    main: !!document.querySelector('main, [role="main"]'),
    contentinfo: !!document.querySelector('footer, [role="contentinfo"]'),
})
"""

HEADINGS_JS = """
() => Array.from(document.querySelectorAll('h1, h2, h3, h4, h5, h6'))
    .map(h => ({level: Number(h.tagName[1]), text: h.textContent.trim().slice(0, 80)}))
"""

IMAGES_JS = """
(limit) => Array.from(document.querySelectorAll('img')).slice(0, limit).map((img, i) => ({
    index: i,
    src: img.getAttribute('src') || '',
    has_alt: img.hasAttribute('alt'),
    has_label: !!(img.getAttribute('aria-label') || '').trim(),
    html: img.outerHTML.slice(0, 200),
}))
"""

LINKS_JS = """
(limit) => Array.from(document.querySelectorAll('a[href]'))
    .filter(a => a.getClientRects().length > 0)
    .slice(0, limit)
    .map((a, i) => {
        const imgAlt = Array.from(a.querySelectorAll('img[alt]'))
            .map(img => img.getAttribute('alt').trim()).join('');
        return {
            index: i,
            href: a.getAttribute('href'),
            name: (a.textContent.trim() || a.getAttribute('aria-label') || a.getAttribute('title') || imgAlt || '').trim(),
            html: a.outerHTML.slice(0, 200),
        };
    })
"""

TOUCH_TARGETS_JS = """
(limit) => Array.from(document.querySelectorAll('button, [role="button"]'))
    .filter(b => b.getClientRects().length > 0)
    .slice(0, limit)
    .map((b, i) => {
        const rect = b.getBoundingClientRect();
        return {
            index: i,
            width: rect.width,
            height: rect.height,
            name: (b.getAttribute('aria-label') || b.textContent || '').trim().slice(0, 60),
        };
    })
"""

AXE_LOADED_JS = "() => typeof axe !== 'undefined'"


class AccessibilityTester:
    """Run accessibility checks against the current page.

    PATTERN: Use evaluate() to inspect the DOM in one round trip per check.
    """

    # Axe-core CDN URL
    AXE_CORE_CDN = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.7.2/axe.min.js"

    # WCAG level to axe-core tag mapping
    WCAG_TAG_MAPPING = {
        "A": ["wcag2a"],
        "AA": ["wcag2a", "wcag2aa"],
        "AAA": ["wcag2a", "wcag2aa", "wcag2aaa"],
    }

    IMPACT_ORDER = {"minor": 0, "moderate": 1, "serious": 2, "critical": 3}

    def __init__(self, page: Page):
        self.page = page

    async def check_landmarks(self) -> List[AccessibilityIssue]:
        """Navigation, main and contentinfo landmarks must all be present."""
        present = await self.page.evaluate(LANDMARKS_JS)
        issues = [
            self._issue(
                f"landmark-{landmark}",
                "moderate",
                f"Page has no {landmark} landmark",
                fix=f"Wrap the {landmark} region in the matching element or role.",
                wcag=["wcag131"],
            )
            for landmark, found in present.items()
            if not found
        ]
        logger.info(f"Landmark check: {len(issues)} issues")
        return issues

    async def check_heading_hierarchy(self, expected_h1: int = 1) -> List[AccessibilityIssue]:
        """Exactly ``expected_h1`` level-1 headings and no skipped levels."""
        headings = await self.page.evaluate(HEADINGS_JS)
        issues = []

        h1_count = sum(1 for heading in headings if heading["level"] == 1)
        if h1_count != expected_h1:
            issues.append(
                self._issue(
                    "page-has-heading-one",
                    "serious",
                    f"Expected {expected_h1} h1 heading(s), found {h1_count}",
                    fix="Describe the page's main content with a single <h1>.",
                    wcag=["wcag131"],
                )
            )

        previous = 0
        for index, heading in enumerate(headings):
            level = heading["level"]
            if previous and level > previous + 1:
                issues.append(
                    self._issue(
                        "heading-order",
                        "minor",
                        f"Heading '{heading['text']}' jumps from h{previous} to h{level}",
                        selector=f"h{level}",
                        issue_index=index,
                    )
                )
            previous = level

        logger.info(f"Heading check: {len(headings)} headings, {len(issues)} issues")
        return issues

    async def check_image_alternatives(self, limit: int = 10) -> List[AccessibilityIssue]:
        """First ``limit`` images carry an alt attribute or aria-label."""
        images = await self.page.evaluate(IMAGES_JS, limit)
        issues = [
            self._issue(
                "image-alt",
                "serious",
                f"Image {image['src'] or image['index']} has no text alternative",
                selector=f"img >> nth={image['index']}",
                html=image["html"],
                fix="Add descriptive alt text, or alt=\"\" for decorative images.",
                wcag=["wcag111"],
                issue_index=image["index"],
            )
            for image in images
            if not image["has_alt"] and not image["has_label"]
        ]
        logger.info(f"Image check: {len(images)} images, {len(issues)} issues")
        return issues

    async def check_link_names(self, limit: int = 10) -> List[AccessibilityIssue]:
        """First ``limit`` visible links have text or an aria-label."""
        links = await self.page.evaluate(LINKS_JS, limit)
        issues = [
            self._issue(
                "link-name",
                "serious",
                f"Link to {link['href']} has no accessible name",
                selector=f"a[href] >> nth={link['index']}",
                html=link["html"],
                fix="Give the link visible text or an aria-label.",
                wcag=["wcag244", "wcag412"],
                issue_index=link["index"],
            )
            for link in links
            if not link["name"]
        ]
        logger.info(f"Link check: {len(links)} links, {len(issues)} issues")
        return issues

    async def check_touch_targets(self, min_size: int = 30, limit: int = 5) -> List[AccessibilityIssue]:
        """First ``limit`` visible buttons are at least ``min_size`` px square."""
        targets = await self.page.evaluate(TOUCH_TARGETS_JS, limit)
        issues = [
            self._issue(
                "target-size",
                "moderate",
                f"Button '{target['name']}' is {target['width']:.0f}x{target['height']:.0f}px",
                selector=f"button >> nth={target['index']}",
                fix=f"Make touch targets at least {min_size}x{min_size}px.",
                wcag=["wcag258"],
                level="AA",
                issue_index=target["index"],
            )
            for target in targets
            if target["width"] < min_size or target["height"] < min_size
        ]
        logger.info(f"Touch target check: {len(targets)} buttons, {len(issues)} issues")
        return issues

    async def check_keyboard_focus(self, presses: int = 10) -> List[AccessibilityIssue]:
        """After each Tab press, the focused element is visible on screen."""
        issues = []
        for press in range(presses):
            await self.page.keyboard.press("Tab")
            focused = await self.page.evaluate(FOCUSED_ELEMENT_JS)
            if focused["tag"] in ("", "body") or not focused["visible"]:
                issues.append(
                    self._issue(
                        "focus-visible",
                        "serious",
                        f"Tab press {press + 1} focused an invisible element "
                        f"<{focused['tag'] or 'none'}>",
                        fix="Keep focusable elements visible or remove them from the tab order.",
                        wcag=["wcag247"],
                        level="AA",
                        issue_index=press,
                    )
                )
        logger.info(f"Keyboard focus check: {presses} presses, {len(issues)} issues")
        return issues

    async def audit(self) -> List[AccessibilityIssue]:
        """Run the structural checks that need no interaction."""
        issues: List[AccessibilityIssue] = []
        issues.extend(await self.check_landmarks())
        issues.extend(await self.check_heading_hierarchy())
        issues.extend(await self.check_image_alternatives())
        issues.extend(await self.check_link_names())
        logger.info(f"Accessibility audit: {self.summarize(issues)}")
        return issues

    async def inject_axe(self) -> None:
        """Inject axe-core unless the current document already has it.

        The check runs on every call, since navigating replaces the document
        and drops anything injected earlier.

        Raises:
            RuntimeError: If axe-core cannot be loaded
        """
        if await self.page.evaluate(AXE_LOADED_JS):
            logger.debug("axe-core already present on this page")
            return

        try:
            logger.info(f"Injecting axe-core library from {self.AXE_CORE_CDN}")
            await self.page.add_script_tag(url=self.AXE_CORE_CDN)
            is_loaded = await self.page.evaluate(AXE_LOADED_JS)
        except Exception as e:
            logger.error(f"Failed to inject axe-core: {e}")
            raise RuntimeError(f"Failed to inject axe-core: {e}")
        if not is_loaded:
            raise RuntimeError("Failed to inject axe-core: library did not load")

    async def run_axe_audit(
        self, wcag_level: Literal["A", "AA", "AAA"] = "AA"
    ) -> List[AccessibilityIssue]:
        """Run axe-core against the page for the given WCAG level."""
        await self.inject_axe()
        tags = self.WCAG_TAG_MAPPING.get(wcag_level, ["wcag2a", "wcag2aa"])
        logger.info(f"Running axe-core audit with WCAG level {wcag_level} (tags: {tags})")
        results = await self.page.evaluate(
            """
            (tags) => axe.run(document, {runOnly: {type: 'tag', values: tags}})
            """,
            tags,
        )
        issues = self._parse_violations(results.get("violations", []))
        logger.info(f"axe-core audit completed: {self.summarize(issues)}")
        return issues

    def filter_by_impact(self, issues: List[AccessibilityIssue], min_impact: Impact = "moderate") -> List[AccessibilityIssue]:
        min_level = self.IMPACT_ORDER[min_impact]
        return [issue for issue in issues if self.IMPACT_ORDER[issue.impact] >= min_level]

    def summarize(self, issues: List[AccessibilityIssue]) -> str:
        """Count issues by impact for logging."""
        counts = {"critical": 0, "serious": 0, "moderate": 0, "minor": 0}
        for issue in issues:
            counts[issue.impact] += 1
        parts = [f"{count} {level}" for level, count in counts.items() if count > 0]
        return ", ".join(parts) if parts else "no issues"

    def _parse_violations(self, violations: List[Dict[str, Any]]) -> List[AccessibilityIssue]:
        """Turn axe-core violations into one issue per offending node."""
        issues = []
        for violation in violations:
            rule_id = violation.get("id", "unknown")
            tags = violation.get("tags", [])
            if any(tag.endswith("aaa") for tag in tags):
                level = "AAA"
            elif any(tag.endswith("aa") for tag in tags):
                level = "AA"
            else:
                level = "A"

            for idx, node in enumerate(violation.get("nodes", [])):
                target = node.get("target", [])
                issues.append(
                    AccessibilityIssue(
                        id=f"{rule_id}_{idx}",
                        impact=violation.get("impact") or "moderate",
                        rule_id=rule_id,
                        description=violation.get("description", ""),
                        help_text=f"{violation.get('help', '')}. More info: {violation.get('helpUrl', '')}",
                        selector=target[0] if target else "unknown",
                        html=node.get("html", ""),
                        wcag_criteria=[tag for tag in tags if tag.startswith("wcag")],
                        wcag_level=level,
                        fix_suggestion=node.get("failureSummary") or None,
                    )
                )
        return issues

    def _issue(
        self,
        rule_id: str,
        impact: Impact,
        description: str,
        selector: str = "",
        html: str = "",
        fix: str = "",
        wcag: List[str] = None,
        level: str = "A",
        issue_index: int = 0,
    ) -> AccessibilityIssue:
        return AccessibilityIssue(
            id=f"{rule_id}_{issue_index}",
            impact=impact,
            rule_id=rule_id,
            description=description,
            help_text=fix,
            selector=selector,
            html=html,
            wcag_criteria=wcag or [],
            wcag_level=level,
            fix_suggestion=fix or None,
        )
