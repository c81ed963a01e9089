"""Failure types raised by the browser layer.

Every scenario-level failure derives from E2EFailure, which is an
AssertionError so pytest reports it as a failed test rather than an error.
Each carries the element or condition involved and how long we waited.
"""

from typing import Any, List, Optional, Sequence


class E2EFailure(AssertionError):
    """Base class for scenario failures."""


class WaitTimeoutError(E2EFailure):
    """A polled condition did not hold within its timeout."""

    def __init__(self, description: str, elapsed_ms: float, last_value: Any = None,
                 last_error: Optional[BaseException] = None):
        self.description = description
        self.elapsed_ms = elapsed_ms
        self.last_value = last_value
        self.last_error = last_error
        message = f"Timed out after {elapsed_ms:.0f}ms waiting for {description}"
        if last_error is not None:
            message += f" (last error: {last_error})"
        else:
            message += f" (last value: {last_value!r})"
        super().__init__(message)


class ElementNotFoundError(E2EFailure):
    """No locator strategy matched within the timeout."""

    def __init__(self, element: str, strategies: Sequence[str], elapsed_ms: float):
        self.element = element
        self.strategies = list(strategies)
        self.elapsed_ms = elapsed_ms
        tried = "; ".join(self.strategies) or "no strategies"
        super().__init__(
            f"Element '{element}' not found after {elapsed_ms:.0f}ms. Tried: {tried}"
        )


class NotActionableError(E2EFailure):
    """Element was found but never became visible and enabled."""

    def __init__(self, element: str, state: str, elapsed_ms: float):
        self.element = element
        self.state = state
        self.elapsed_ms = elapsed_ms
        super().__init__(
            f"Element '{element}' not actionable after {elapsed_ms:.0f}ms: {state}"
        )


class AssertionMismatchError(E2EFailure):
    """Observed value differed from the expectation."""

    def __init__(self, description: str, expected: Any, actual: Any, elapsed_ms: float = 0.0):
        self.description = description
        self.expected = expected
        self.actual = actual
        self.elapsed_ms = elapsed_ms
        super().__init__(
            f"{description}: expected {expected!r}, got {actual!r} "
            f"(waited {elapsed_ms:.0f}ms)"
        )


class NavigationTimeoutError(E2EFailure):
    """The page did not reach the expected state after a navigating action."""

    def __init__(self, expectation: str, actual_url: str, actual_title: str, elapsed_ms: float):
        self.expectation = expectation
        self.actual_url = actual_url
        self.actual_title = actual_title
        self.elapsed_ms = elapsed_ms
        super().__init__(
            f"Navigation did not reach {expectation} within {elapsed_ms:.0f}ms "
            f"(url={actual_url!r}, title={actual_title!r})"
        )


class ExternalUnavailableError(E2EFailure):
    """The site could not be reached or kept answering with a server error."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"status {status}" if status is not None else reason or "no response"
        super().__init__(f"Site unavailable at {url}: {detail}")


class SoftAssertionError(E2EFailure):
    """One or more independent verifications in a group failed."""

    def __init__(self, failures: List[AssertionError]):
        self.failures = failures
        lines = "\n".join(f"  - {failure}" for failure in failures)
        super().__init__(f"{len(failures)} verification(s) failed:\n{lines}")
