"""Typed locator declarations.

A page object describes each element it cares about as an ElementDef: a
semantic name plus an ordered list of LocatorStrategy values. Declarations
are plain data; turning them into live Playwright locators happens in
src.browser.locators at the moment of use.
"""

import re
from enum import Enum
from typing import List, Literal, Optional, Pattern, Union

from pydantic import BaseModel, ConfigDict, Field

TextMatch = Union[str, Pattern[str]]


class StrategyKind(str, Enum):
    """How a strategy queries the DOM, in preferred order."""

    ROLE = "role"
    LABEL = "label"
    TEST_ID = "test_id"
    TEXT = "text"
    CSS = "css"


class LocatorStrategy(BaseModel):
    """One way of finding an element."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: StrategyKind = Field(description="Query type")
    value: str = Field(description="Role, label, test id, text or CSS selector")
    name: Optional[TextMatch] = Field(default=None, description="Accessible name for role queries")
    exact: Optional[bool] = Field(default=None, description="Exact text/name matching")
    level: Optional[int] = Field(default=None, description="Heading level for role queries")
    has_text: Optional[TextMatch] = Field(default=None, description="Filter on contained text")
    scope: Optional[str] = Field(default=None, description="CSS selector of a containing element")
    frame: Optional[str] = Field(default=None, description="CSS selector of a containing iframe")
    frame_index: int = Field(default=0, description="Which matching iframe to enter")

    def describe(self) -> str:
        """Human-readable form used in failure messages."""
        parts = [f"{self.kind.value}={self.value!r}"]
        if self.name is not None:
            parts.append(f"name={_show(self.name)}")
        if self.level is not None:
            parts.append(f"level={self.level}")
        if self.has_text is not None:
            parts.append(f"has_text={_show(self.has_text)}")
        if self.scope:
            parts.append(f"in {self.scope!r}")
        if self.frame:
            parts.append(f"frame {self.frame!r}[{self.frame_index}]")
        return " ".join(parts)


def _show(match: TextMatch) -> str:
    if isinstance(match, re.Pattern):
        return f"/{match.pattern}/"
    return repr(match)


def by_role(role: str, name: Optional[TextMatch] = None, **kwargs) -> LocatorStrategy:
    return LocatorStrategy(kind=StrategyKind.ROLE, value=role, name=name, **kwargs)


def by_label(label: str, **kwargs) -> LocatorStrategy:
    return LocatorStrategy(kind=StrategyKind.LABEL, value=label, **kwargs)


def by_test_id(test_id: str, **kwargs) -> LocatorStrategy:
    return LocatorStrategy(kind=StrategyKind.TEST_ID, value=test_id, **kwargs)


def by_text(text: TextMatch, **kwargs) -> LocatorStrategy:
    # Text strategies keep the raw match in has_text so regexes survive
    shown = text.pattern if isinstance(text, re.Pattern) else text
    return LocatorStrategy(kind=StrategyKind.TEXT, value=shown, has_text=text, **kwargs)


def by_css(selector: str, **kwargs) -> LocatorStrategy:
    return LocatorStrategy(kind=StrategyKind.CSS, value=selector, **kwargs)


class ElementDef(BaseModel):
    """A named element and the strategies that may find it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(description="Semantic element name")
    strategies: List[LocatorStrategy] = Field(description="Strategies, tried in order")
    pick: Literal["first", "last", "nth", "all"] = Field(
        default="first", description="Which match a strategy resolves to"
    )
    index: int = Field(default=0, description="Match index when pick is 'nth'")
    optional: bool = Field(
        default=False, description="May legitimately be absent (cookie banner, countdown)"
    )

    def describe(self) -> str:
        return "; ".join(strategy.describe() for strategy in self.strategies)
