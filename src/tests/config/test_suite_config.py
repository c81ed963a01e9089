"""Tests for suite configuration loading and validation."""

import logging

import pytest

from src.config.logging_config import configure_logging
from src.config.site_expectations import SiteExpectations, get_site_expectations
from src.config.suite_config import SuiteConfig, get_suite_config
from src.models.browser_models import BrowserType

ENV_VARS = (
    "E2E_BASE_URL",
    "E2E_LIVE",
    "E2E_BROWSER",
    "E2E_HEADLESS",
    "E2E_DEFAULT_TIMEOUT_MS",
    "E2E_POLL_INTERVAL_MS",
    "E2E_ARTIFACTS_DIR",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSuiteConfig:
    """Tests for SuiteConfig."""

    def test_defaults(self, clean_env):
        config = SuiteConfig()

        assert config.base_url == "https://omaze.co.uk"
        assert config.live is False
        assert config.browser == BrowserType.CHROMIUM
        assert config.headless is True
        assert config.default_timeout_ms == 5000
        assert config.validate_config() == []

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("E2E_BASE_URL", "https://staging.omaze.co.uk/")
        clean_env.setenv("E2E_LIVE", "yes")
        clean_env.setenv("E2E_BROWSER", "firefox")
        clean_env.setenv("E2E_HEADLESS", "0")
        clean_env.setenv("E2E_DEFAULT_TIMEOUT_MS", "8000")

        config = SuiteConfig()

        assert config.live is True
        assert config.browser == BrowserType.FIREFOX
        assert config.headless is False
        assert config.default_timeout_ms == 8000
        assert config.url_for("/pages/faqs") == "https://staging.omaze.co.uk/pages/faqs"

    def test_unknown_browser(self, clean_env):
        clean_env.setenv("E2E_BROWSER", "netscape")

        with pytest.raises(ValueError):
            SuiteConfig()

    def test_url_for_keeps_absolute_urls(self, clean_env):
        config = SuiteConfig()

        assert config.url_for("https://shop.app/pay") == "https://shop.app/pay"
        assert config.url_for("cart") == "https://omaze.co.uk/cart"

    def test_artifact_directories(self, clean_env):
        clean_env.setenv("E2E_ARTIFACTS_DIR", "out")

        config = SuiteConfig()

        assert str(config.screenshots_dir) == "out/screenshots"
        assert str(config.reports_dir) == "out/reports"

    def test_validate_config_problems(self, clean_env):
        config = SuiteConfig(base_url="omaze.co.uk", poll_interval_ms=10_000, navigation_retries=-1)

        problems = config.validate_config()

        assert len(problems) == 3
        assert problems[0].startswith("E2E_BASE_URL")

    def test_get_suite_config_is_cached(self):
        get_suite_config.cache_clear()

        assert get_suite_config() is get_suite_config()

        get_suite_config.cache_clear()


class TestSiteExpectations:
    """Tests for the content expectations."""

    def test_counts_agree_with_lists(self):
        expectations = SiteExpectations()

        assert len(expectations.single_purchase_prices) == 4
        assert len(expectations.faq_sections) == 10
        assert expectations.smallest_package_price == expectations.single_purchase_prices[0]
        assert expectations.progress_item_count == 8
        assert expectations.carousel_count == 5
        assert expectations.subscription_tier_count == 3

    def test_footer_range_is_open(self):
        low, high = SiteExpectations().footer_link_range

        assert (low, high) == (10, 50)

    def test_direct_paths_cover_page_objects(self):
        expectations = SiteExpectations()

        for path in (expectations.entry_path, expectations.faqs_path, expectations.winners_path):
            assert path in expectations.direct_paths

    def test_override(self):
        expectations = SiteExpectations(carousel_count=6)

        assert expectations.carousel_count == 6

    def test_get_site_expectations_is_cached(self):
        assert get_site_expectations() is get_site_expectations()


class TestLogging:
    """Tests for configure_logging."""

    def test_level_applied(self):
        configure_logging("DEBUG")

        assert logging.getLogger().level == logging.DEBUG

        configure_logging("INFO")
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("asyncio").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        configure_logging("CHATTY")

        assert logging.getLogger().level == logging.INFO
