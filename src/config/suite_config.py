"""Suite configuration with environment variable loading."""

import os
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field
from dotenv import load_dotenv

from src.models.browser_models import BrowserType, Viewport

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class SuiteConfig(BaseModel):
    """Configuration for the storefront end-to-end suite."""

    # Target site
    base_url: str = Field(
        default_factory=lambda: os.getenv("E2E_BASE_URL", "https://omaze.co.uk"),
        description="Base URL of the site under test",
    )
    live: bool = Field(
        default_factory=lambda: _env_flag("E2E_LIVE"),
        description="Run scenarios against the live site",
    )

    # Browser
    browser: BrowserType = Field(
        default_factory=lambda: BrowserType(os.getenv("E2E_BROWSER", "chromium")),
        description="Browser engine to launch",
    )
    headless: bool = Field(
        default_factory=lambda: _env_flag("E2E_HEADLESS", "true"),
        description="Run the browser headless",
    )
    slow_mo_ms: int = Field(
        default_factory=lambda: int(os.getenv("E2E_SLOW_MO_MS", "0")),
        description="Delay inserted between browser operations",
    )
    viewport_width: int = Field(
        default_factory=lambda: int(os.getenv("E2E_VIEWPORT_WIDTH", "1280")),
        description="Default viewport width",
    )
    viewport_height: int = Field(
        default_factory=lambda: int(os.getenv("E2E_VIEWPORT_HEIGHT", "720")),
        description="Default viewport height",
    )

    # Waiting
    default_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("E2E_DEFAULT_TIMEOUT_MS", "5000")),
        description="Bounded wait for element conditions",
    )
    navigation_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("E2E_NAVIGATION_TIMEOUT_MS", "15000")),
        description="Bounded wait for page transitions",
    )
    poll_interval_ms: int = Field(
        default_factory=lambda: int(os.getenv("E2E_POLL_INTERVAL_MS", "100")),
        description="Interval between condition probes",
    )
    navigation_retries: int = Field(
        default_factory=lambda: int(os.getenv("E2E_NAVIGATION_RETRIES", "1")),
        description="Extra attempts when the site answers with a 5xx",
    )

    # Artifacts
    artifacts_dir: str = Field(
        default_factory=lambda: os.getenv("E2E_ARTIFACTS_DIR", "test-results"),
        description="Directory for screenshots and reports",
    )
    screenshot_on_failure: bool = Field(
        default_factory=lambda: _env_flag("E2E_SCREENSHOT_ON_FAILURE", "true"),
        description="Capture a screenshot when a scenario fails",
    )

    # Logging
    log_level: str = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"),
        description="Root log level",
    )

    @property
    def viewport(self) -> Viewport:
        return Viewport(width=self.viewport_width, height=self.viewport_height)

    @property
    def screenshots_dir(self) -> Path:
        return Path(self.artifacts_dir) / "screenshots"

    @property
    def reports_dir(self) -> Path:
        return Path(self.artifacts_dir) / "reports"

    def url_for(self, path: str) -> str:
        """Join a site-relative path onto the base URL."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def validate_config(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        problems = []
        if not self.base_url.startswith(("http://", "https://")):
            problems.append(f"E2E_BASE_URL must be an http(s) URL, got {self.base_url!r}")
        if self.default_timeout_ms <= 0:
            problems.append("E2E_DEFAULT_TIMEOUT_MS must be positive")
        if self.navigation_timeout_ms <= 0:
            problems.append("E2E_NAVIGATION_TIMEOUT_MS must be positive")
        if not 0 < self.poll_interval_ms <= self.default_timeout_ms:
            problems.append(
                "E2E_POLL_INTERVAL_MS must be positive and not exceed the default timeout"
            )
        if self.navigation_retries < 0:
            problems.append("E2E_NAVIGATION_RETRIES cannot be negative")
        return problems


@lru_cache(maxsize=1)
def get_suite_config() -> SuiteConfig:
    """Get the process-wide suite configuration."""
    return SuiteConfig()
