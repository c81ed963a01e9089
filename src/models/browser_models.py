"""Browser data models for the storefront end-to-end suite.

This module defines the Pydantic models shared by the browser layer:
browser and viewport settings, recorded network traffic, accessibility
findings, performance metrics and the small value objects page objects
hand back to scenarios.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Literal
from enum import Enum
from datetime import datetime


class BrowserType(str, Enum):
    """Supported browser engines."""

    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


class Viewport(BaseModel):
    """Browser viewport configuration."""

    width: int = Field(default=1280, description="Viewport width")
    height: int = Field(default=720, description="Viewport height")
    device_scale_factor: float = Field(default=1.0, description="Device pixel ratio")
    is_mobile: bool = Field(default=False, description="Mobile viewport")
    has_touch: bool = Field(default=False, description="Touch support")

    @classmethod
    def mobile(cls) -> "Viewport":
        """Small-phone viewport used by the mobile scenarios."""
        return cls(width=375, height=667, device_scale_factor=2.0, is_mobile=True, has_touch=True)

    @classmethod
    def tablet(cls) -> "Viewport":
        return cls(width=768, height=1024, is_mobile=True, has_touch=True)


class NetworkRecord(BaseModel):
    """One request/response pair observed while a scenario ran."""

    url: str = Field(description="Request URL")
    method: str = Field(default="GET", description="HTTP method")
    resource_type: str = Field(default="other", description="Playwright resource type")
    status: Optional[int] = Field(default=None, description="Response status, None if pending")
    content_type: Optional[str] = Field(default=None, description="Response content type")
    content_length: int = Field(default=0, description="Declared response size in bytes")
    elapsed_ms: float = Field(default=0.0, description="Time since monitoring started")
    has_post_data: bool = Field(default=False, description="Request carried a body")
    headers: Dict[str, str] = Field(default_factory=dict, description="Request headers")
    failure: Optional[str] = Field(default=None, description="Network failure text")
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def failed(self) -> bool:
        return self.failure is not None or (self.status is not None and self.status >= 400)


class AccessibilityIssue(BaseModel):
    """Accessibility issue found by a structural check or an axe-core audit."""

    id: str = Field(description="Issue identifier")
    impact: Literal["minor", "moderate", "serious", "critical"] = Field(
        description="Issue severity"
    )
    rule_id: str = Field(description="Rule that produced the issue")
    description: str = Field(description="Issue description")
    help_text: str = Field(default="", description="How to fix")

    # Element details
    selector: str = Field(default="", description="Element selector")
    html: str = Field(default="", description="Element HTML")

    # WCAG details
    wcag_criteria: List[str] = Field(default_factory=list, description="WCAG criteria")
    wcag_level: Literal["A", "AA", "AAA"] = Field(default="A", description="WCAG level")

    fix_suggestion: Optional[str] = Field(default=None, description="Suggested fix")


class PerformanceMetrics(BaseModel):
    """Page load metrics for one navigation."""

    url: str = Field(description="Page URL")

    # Navigation timing
    ttfb: float = Field(default=0.0, description="Time to First Byte (ms)")
    fcp: float = Field(default=0.0, description="First Contentful Paint (ms)")
    dom_content_loaded: float = Field(default=0.0, description="DOM Content Loaded (ms)")
    load_complete: float = Field(default=0.0, description="Load Complete (ms)")

    # Wall clock, measured around the triggering action
    measured_load_ms: float = Field(default=0.0, description="Observed load time (ms)")

    # Network
    total_requests: int = Field(default=0, description="Total network requests")
    total_size_kb: float = Field(default=0.0, description="Total transfer size (KB)")
    slow_requests: int = Field(default=0, description="Responses slower than the threshold")
    failed_requests: int = Field(default=0, description="Responses with status >= 400")

    browser: BrowserType = Field(default=BrowserType.CHROMIUM, description="Browser used")
    timestamp: datetime = Field(default_factory=datetime.now)


class PerformanceBudget(BaseModel):
    """Upper bounds a page load must stay within."""

    max_load_ms: Optional[float] = Field(default=None, description="Observed load time")
    max_requests: Optional[int] = Field(default=None, description="Request count")
    max_size_kb: Optional[float] = Field(default=None, description="Transfer size")
    max_slow_requests: Optional[int] = Field(default=None, description="Slow responses")


class FocusedElement(BaseModel):
    """Snapshot of document.activeElement after a keyboard step."""

    tag: str = Field(default="", description="Lower-case tag name")
    role: Optional[str] = Field(default=None, description="Explicit ARIA role")
    name: str = Field(default="", description="Accessible name or text")
    visible: bool = Field(default=False, description="Has a non-empty bounding box")


class CustomerDetails(BaseModel):
    """Customer information entered at checkout."""

    email: str
    first_name: str
    last_name: str
    address: str
    city: str
    postcode: str
    phone: Optional[str] = None


class WinnerDetails(BaseModel):
    """Facts shown on a winner story card."""

    location: str = Field(default="", description="Where the winner is from")
    prize: str = Field(default="", description="Prize description or amount")
    entry_code: str = Field(default="", description="Winning entry code")
