"""Tests for AccessibilityTester.

Structural checks evaluate a script in the page and turn its result into
AccessibilityIssue lists; the axe-core audit parses violations per node.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from playwright.async_api import Page

from src.browser.accessibility_tester import AccessibilityTester


@pytest.fixture
def mock_page():
    """Create a mock Page instance."""
    page = MagicMock(spec=Page)
    page.add_script_tag = AsyncMock()
    page.evaluate = AsyncMock()
    page.keyboard = MagicMock()
    page.keyboard.press = AsyncMock()
    return page


@pytest.fixture
def tester(mock_page):
    return AccessibilityTester(mock_page)


@pytest.fixture
def sample_axe_violation():
    """Create a sample axe-core violation."""
    return {
        "id": "color-contrast",
        "impact": "serious",
        "description": "Elements must have sufficient color contrast",
        "help": "Ensure text has sufficient contrast",
        "helpUrl": "https://dequeuniversity.com/rules/axe/4.7/color-contrast",
        "tags": ["wcag2aa", "wcag143"],
        "nodes": [
            {
                "target": [".countdown span"],
                "html": '<span class="countdown">3 days</span>',
                "failureSummary": "Fix the following: Element has insufficient color contrast",
            },
            {
                "target": [".hero p"],
                "html": "<p>Win a house</p>",
                "failureSummary": "",
            },
        ],
    }


class TestStructuralChecks:
    """Tests for the in-page structural checks."""

    @pytest.mark.asyncio
    async def test_landmarks_all_present(self, tester, mock_page):
        mock_page.evaluate.return_value = {"navigation": True, "main": True, "contentinfo": True}

        assert await tester.check_landmarks() == []

    @pytest.mark.asyncio
    async def test_missing_main_landmark(self, tester, mock_page):
        mock_page.evaluate.return_value = {"navigation": True, "main": False, "contentinfo": True}

        issues = await tester.check_landmarks()

        assert [issue.rule_id for issue in issues] == ["landmark-main"]

    @pytest.mark.asyncio
    async def test_heading_hierarchy(self, tester, mock_page):
        """Test that two h1s and a skipped level are both reported."""
        mock_page.evaluate.return_value = [
            {"level": 1, "text": "Win a house"},
            {"level": 1, "text": "Cheshire"},
            {"level": 2, "text": "How it works"},
            {"level": 4, "text": "Postal entry"},
        ]

        issues = await tester.check_heading_hierarchy()

        rules = [issue.rule_id for issue in issues]
        assert rules == ["page-has-heading-one", "heading-order"]
        assert issues[0].impact == "serious"
        assert "h2 to h4" in issues[1].description

    @pytest.mark.asyncio
    async def test_heading_hierarchy_clean(self, tester, mock_page):
        mock_page.evaluate.return_value = [
            {"level": 1, "text": "Frequently Asked Questions"},
            {"level": 2, "text": "Winning a Prize"},
            {"level": 3, "text": "Contact"},
            {"level": 2, "text": "Payment"},
        ]

        assert await tester.check_heading_hierarchy() == []

    @pytest.mark.asyncio
    async def test_image_alternatives(self, tester, mock_page):
        mock_page.evaluate.return_value = [
            {"index": 0, "src": "/logo.svg", "has_alt": True, "has_label": False, "html": "<img>"},
            {"index": 1, "src": "/hero.jpg", "has_alt": False, "has_label": False, "html": "<img>"},
            {"index": 2, "src": "/icon.svg", "has_alt": False, "has_label": True, "html": "<img>"},
        ]

        issues = await tester.check_image_alternatives(limit=10)

        assert len(issues) == 1
        assert "/hero.jpg" in issues[0].description
        mock_page.evaluate.assert_awaited_once()
        assert mock_page.evaluate.await_args.args[1] == 10

    @pytest.mark.asyncio
    async def test_link_names(self, tester, mock_page):
        mock_page.evaluate.return_value = [
            {"index": 0, "href": "/cart", "name": "Basket", "html": "<a>"},
            {"index": 1, "href": "https://facebook.com/omaze", "name": "", "html": "<a>"},
        ]

        issues = await tester.check_link_names()

        assert [issue.rule_id for issue in issues] == ["link-name"]
        assert "facebook.com" in issues[0].description

    @pytest.mark.asyncio
    async def test_touch_targets(self, tester, mock_page):
        mock_page.evaluate.return_value = [
            {"index": 0, "width": 44, "height": 44, "name": "Menu"},
            {"index": 1, "width": 24, "height": 44, "name": "Close"},
        ]

        issues = await tester.check_touch_targets(min_size=30)

        assert len(issues) == 1
        assert issues[0].rule_id == "target-size"
        assert "Close" in issues[0].description

    @pytest.mark.asyncio
    async def test_keyboard_focus(self, tester, mock_page):
        """Test that a Tab landing on nothing visible is reported."""
        mock_page.evaluate.side_effect = [
            {"tag": "a", "role": None, "name": "Skip", "visible": True},
            {"tag": "body", "role": None, "name": "", "visible": False},
            {"tag": "button", "role": None, "name": "Enter Now", "visible": True},
        ]

        issues = await tester.check_keyboard_focus(presses=3)

        assert mock_page.keyboard.press.await_count == 3
        assert len(issues) == 1
        assert issues[0].id == "focus-visible_1"

    @pytest.mark.asyncio
    async def test_audit_combines_checks(self, tester, mock_page):
        mock_page.evaluate.side_effect = [
            {"navigation": False, "main": True, "contentinfo": True},
            [{"level": 1, "text": "Omaze"}],
            [],
            [],
        ]

        issues = await tester.audit()

        assert [issue.rule_id for issue in issues] == ["landmark-navigation"]


class TestAxeAudit:
    """Tests for the optional axe-core audit."""

    @pytest.mark.asyncio
    async def test_skips_injection_when_axe_present(self, tester, mock_page):
        mock_page.evaluate.return_value = True

        await tester.inject_axe()

        mock_page.add_script_tag.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reinjects_after_navigation(self, tester, mock_page):
        """Test that a new document gets axe-core again from the same tester."""
        # absent, loaded, then absent again on the next document, loaded
        mock_page.evaluate.side_effect = [False, True, False, True]

        await tester.inject_axe()
        await tester.inject_axe()

        assert mock_page.add_script_tag.await_count == 2
        mock_page.add_script_tag.assert_awaited_with(url=AccessibilityTester.AXE_CORE_CDN)

    @pytest.mark.asyncio
    async def test_inject_failure(self, tester, mock_page):
        mock_page.evaluate.return_value = False

        with pytest.raises(RuntimeError, match="Failed to inject axe-core"):
            await tester.inject_axe()

    @pytest.mark.asyncio
    async def test_run_axe_audit(self, tester, mock_page, sample_axe_violation):
        mock_page.evaluate.side_effect = [True, {"violations": [sample_axe_violation]}]

        issues = await tester.run_axe_audit("AA")

        assert len(issues) == 2
        assert issues[0].id == "color-contrast_0"
        assert issues[0].selector == ".countdown span"
        assert issues[0].wcag_level == "AA"
        assert issues[0].wcag_criteria == ["wcag2aa", "wcag143"]
        assert issues[1].fix_suggestion is None
        assert mock_page.evaluate.await_args.args[1] == ["wcag2a", "wcag2aa"]


class TestIssueHelpers:
    """Tests for filtering and summaries."""

    @pytest.mark.asyncio
    async def test_filter_and_summarize(self, tester, mock_page):
        mock_page.evaluate.return_value = [
            {"level": 2, "text": "No h1"},
            {"level": 4, "text": "Skipped"},
        ]
        issues = await tester.check_heading_hierarchy()

        serious = tester.filter_by_impact(issues, "serious")

        assert [issue.rule_id for issue in serious] == ["page-has-heading-one"]
        assert tester.summarize(issues) == "1 serious, 1 minor"
        assert tester.summarize([]) == "no issues"
