"""Data models for the action crawler."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from actionscout.crawler.description import describe_element, is_interactive

if TYPE_CHECKING:
    from actionscout.actions.models import Action


@dataclass(frozen=True)
class Position:
    """Document coordinates of an element (viewport rect plus scroll offset)."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Element:
    """A single DOM node observed during one page visit.

    Elements are never mutated after extraction. ``description`` and
    ``is_interactive`` are derived once, by :meth:`create`.
    """

    selector: str
    tag_type: str
    attributes: dict[str, str] = field(default_factory=dict)
    text: str = ""
    is_interactive: bool = False
    position: Position = field(default_factory=Position)
    description: str = ""

    @classmethod
    def create(
        cls,
        selector: str,
        tag_type: str,
        attributes: dict[str, str] | None = None,
        text: str = "",
        position: Position | None = None,
        cursor: str | None = None,
    ) -> Element:
        """Build an element, deriving its interactivity flag and description."""
        tag = tag_type.lower()
        attrs = dict(attributes or {})
        text = text.strip()
        return cls(
            selector=selector,
            tag_type=tag,
            attributes=attrs,
            text=text,
            is_interactive=is_interactive(tag, attrs, cursor),
            position=position or Position(),
            description=describe_element(tag, attrs, text),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "selector": self.selector,
            "type": self.tag_type,
            "attributes": dict(self.attributes),
            "text": self.text,
            "is_interactive": self.is_interactive,
            "position": {"x": self.position.x, "y": self.position.y},
            "description": self.description,
        }


@dataclass
class CrawlResult:
    """Elements extracted from a single page visit, in DOM order."""

    url: str
    elements: list[Element] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "elements": [element.to_dict() for element in self.elements],
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class CrawlConfig:
    """Browser configuration for a crawl."""

    headless: bool = True
    viewport_width: int = 1280
    viewport_height: int = 720
    navigation_timeout_ms: int = 30000
    wait_until: str = "networkidle"


@dataclass
class PageAnalysis:
    """Outcome of crawling and classifying a single page."""

    crawl_result: CrawlResult
    rule_actions: list[Action] = field(default_factory=list)
    llm_actions: list[Action] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def actions(self) -> list[Action]:
        """Rule-based and LLM actions, in that order, without merging."""
        return [*self.rule_actions, *self.llm_actions]


@dataclass
class CrawlReport:
    """Summary of a complete crawl run."""

    start_url: str
    pages: list[CrawlResult] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)
    visited_urls: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def total_pages(self) -> int:
        return len(self.pages)
