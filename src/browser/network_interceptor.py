"""Network traffic recording and shaping for scenarios.

This module provides the NetworkInterceptor class. It listens to a page's
request/response events and keeps a NetworkRecord per request, which
scenarios query for failed resources, third-party domains, page weight and
slow responses. It can also shape traffic through Playwright's route API
to simulate a slow connection or broken images.

The suite never mocks the site's responses: routes either delay, continue
or abort real requests.
"""

import asyncio
import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union
from urllib.parse import urlparse

from playwright.async_api import BrowserContext, Page, Request, Response, Route

from src.browser.waiting import Stopwatch
from src.models.browser_models import NetworkRecord

logger = logging.getLogger(__name__)

# Wraps dataLayer.push so tracking events survive page transitions within a context
DATA_LAYER_CAPTURE_JS = """
(() => {
    window.dataLayer = window.dataLayer || [];
    window.__dataLayerEvents = window.__dataLayerEvents || [];
    for (const entry of window.dataLayer) {
        window.__dataLayerEvents.push(entry);
    }
    const originalPush = window.dataLayer.push.bind(window.dataLayer);
    window.dataLayer.push = function(...args) {
        window.__dataLayerEvents.push(...args);
        return originalPush(...args);
    };
})();
"""


class NetworkInterceptor:
    """Record and shape the network traffic of one page.

    Example:
        interceptor = NetworkInterceptor()
        interceptor.attach(page)
        await page.goto("/")
        assert not interceptor.critical_failures()
    """

    THIRD_PARTY_CATEGORIES: Dict[str, Tuple[str, ...]] = {
        "analytics": ("google-analytics", "googletagmanager", "gtm"),
        "payment": ("paypal", "stripe", "googlepay"),
        "cdn": ("cdn", "cloudfront", "cloudflare"),
    }
    API_MARKERS = ("/api/", "cart", "checkout")
    CRITICAL_RESOURCE_TYPES = ("document", "stylesheet")
    PAGE_VIEW_EVENTS = ("page_view", "gtm.dom", "gtm.load")

    def __init__(self):
        self.records: List[NetworkRecord] = []
        self._pending: Dict[int, NetworkRecord] = {}
        self._route_handlers: List[Tuple[Union[BrowserContext, Page], str, Callable]] = []
        self._watch = Stopwatch()

    def attach(self, page: Page) -> None:
        """Start recording the page's traffic."""
        self._watch = Stopwatch()
        page.on("request", self._on_request)
        page.on("response", self._on_response)
        page.on("requestfailed", self._on_request_failed)
        logger.debug("Network recording attached")

    def clear(self) -> None:
        self.records.clear()
        self._pending.clear()
        self._watch = Stopwatch()

    def _on_request(self, request: Request) -> None:
        record = NetworkRecord(
            url=request.url,
            method=request.method,
            resource_type=request.resource_type,
            elapsed_ms=self._watch.elapsed_ms,
            has_post_data=request.post_data_buffer is not None,
            headers=dict(request.headers),
        )
        self._pending[id(request)] = record
        self.records.append(record)

    def _on_response(self, response: Response) -> None:
        record = self._pending.pop(id(response.request), None)
        if record is None:
            record = NetworkRecord(url=response.url, resource_type=response.request.resource_type)
            self.records.append(record)

        headers = response.headers
        record.status = response.status
        record.content_type = headers.get("content-type")
        try:
            record.content_length = int(headers.get("content-length", 0))
        except ValueError:
            record.content_length = 0
        record.elapsed_ms = self._watch.elapsed_ms

    def _on_request_failed(self, request: Request) -> None:
        record = self._pending.pop(id(request), None)
        if record is None:
            return
        record.failure = request.failure or "failed"
        logger.debug(f"Request failed: {request.url} ({record.failure})")

    # Queries

    def responses(self) -> List[NetworkRecord]:
        return [record for record in self.records if record.status is not None]

    def failed(self) -> List[NetworkRecord]:
        return [record for record in self.records if record.failed]

    def critical_failures(self) -> List[NetworkRecord]:
        """Failed documents and stylesheets, or anything named main/critical."""
        return [
            record
            for record in self.failed()
            if record.resource_type in self.CRITICAL_RESOURCE_TYPES
            or "main" in record.url
            or "critical" in record.url
        ]

    def by_content_type(self, fragment: str) -> List[NetworkRecord]:
        return [
            record
            for record in self.responses()
            if record.content_type and fragment in record.content_type
        ]

    def matching(self, *fragments: str) -> List[NetworkRecord]:
        return [
            record for record in self.records if any(fragment in record.url for fragment in fragments)
        ]

    def api_calls(self) -> List[NetworkRecord]:
        """Requests to API, cart or checkout endpoints."""
        return self.matching(*self.API_MARKERS)

    def main_document(self, url_fragment: Optional[str] = None) -> Optional[NetworkRecord]:
        for record in self.responses():
            if record.resource_type != "document":
                continue
            if url_fragment is None or url_fragment in record.url:
                return record
        return None

    def external_domains(self, site_host: str) -> List[str]:
        """Hostnames contacted that belong neither to the site nor localhost."""
        site_host = site_host.lower().removeprefix("www.")
        domains = set()
        for record in self.records:
            host = (urlparse(record.url).hostname or "").lower()
            if not host or host == "localhost":
                continue
            if host == site_host or host.endswith("." + site_host):
                continue
            domains.add(host)
        return sorted(domains)

    def third_party_summary(self, site_host: str) -> Dict[str, List[str]]:
        """Bucket external domains into analytics, payment, cdn and other."""
        summary: Dict[str, List[str]] = {name: [] for name in self.THIRD_PARTY_CATEGORIES}
        summary["other"] = []
        for domain in self.external_domains(site_host):
            for category, markers in self.THIRD_PARTY_CATEGORIES.items():
                if any(marker in domain for marker in markers):
                    summary[category].append(domain)
                    break
            else:
                summary["other"].append(domain)
        logger.info(
            "Third-party domains: "
            + ", ".join(f"{category}={len(domains)}" for category, domains in summary.items())
        )
        return summary

    def total_bytes(self) -> int:
        return sum(record.content_length for record in self.responses())

    def slow_responses(self, threshold_ms: float = 2000) -> List[NetworkRecord]:
        """Responses that arrived more than threshold_ms after recording began."""
        return [record for record in self.responses() if record.elapsed_ms > threshold_ms]

    def summary(self, slow_threshold_ms: float = 2000) -> Dict[str, float]:
        responses = self.responses()
        return {
            "total_requests": len(self.records),
            "total_responses": len(responses),
            "failed": len(self.failed()),
            "total_mb": self.total_bytes() / (1024 * 1024),
            "images": sum(1 for r in responses if r.resource_type == "image"),
            "stylesheets": sum(1 for r in responses if r.resource_type == "stylesheet"),
            "scripts": sum(1 for r in responses if r.resource_type == "script"),
            "slow": len(self.slow_responses(slow_threshold_ms)),
        }

    # Analytics

    async def install_data_layer_capture(self, target: Union[BrowserContext, Page]) -> None:
        """Record every dataLayer.push in window.__dataLayerEvents."""
        await target.add_init_script(DATA_LAYER_CAPTURE_JS)

    async def data_layer_events(self, page: Page) -> List[dict]:
        events = await page.evaluate("() => window.__dataLayerEvents || []")
        return [event for event in events if isinstance(event, dict)]

    def page_view_events(self, events: Iterable[dict]) -> List[dict]:
        return [event for event in events if event.get("event") in self.PAGE_VIEW_EVENTS]

    # Traffic shaping

    async def throttle(
        self, target: Union[BrowserContext, Page], delay_ms: int, url_pattern: str = "**/*"
    ) -> None:
        """Delay every matching request by delay_ms before letting it through."""

        async def handler(route: Route) -> None:
            await asyncio.sleep(delay_ms / 1000.0)
            await route.continue_()

        await target.route(url_pattern, handler)
        self._route_handlers.append((target, url_pattern, handler))
        logger.info(f"Throttling {url_pattern} by {delay_ms}ms")

    async def block_resource_types(
        self,
        target: Union[BrowserContext, Page],
        resource_types: Iterable[str],
        url_pattern: str = "**/*",
    ) -> None:
        """Abort requests of the given resource types (e.g. "image")."""
        blocked = set(resource_types)

        async def handler(route: Route) -> None:
            if route.request.resource_type in blocked:
                await route.abort()
            else:
                await route.continue_()

        await target.route(url_pattern, handler)
        self._route_handlers.append((target, url_pattern, handler))
        logger.info(f"Blocking resource types: {', '.join(sorted(blocked))}")

    async def clear_routes(self) -> None:
        for target, url_pattern, handler in self._route_handlers:
            await target.unroute(url_pattern, handler)
        self._route_handlers.clear()
