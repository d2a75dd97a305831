"""Data models for classified user actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from actionscout.crawler.models import Element


class ActionType(StrEnum):
    """Action kinds emitted by the heuristic classifier."""

    LOGIN = "login"
    SEARCH = "search"
    NAVIGATION = "navigation"
    REGISTRATION = "registration"
    CONTACT = "contact"
    FORM = "form"


@dataclass
class Action:
    """A user-facing capability inferred from a group of page elements.

    ``elements`` references elements of the CrawlResult that produced the
    action; they are not copied. ``type`` is a plain string because the LLM
    classifier may report kinds outside :class:`ActionType`.
    """

    type: str
    name: str
    description: str
    url: str
    confidence: float
    elements: list[Element] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": str(self.type),
            "name": self.name,
            "description": self.description,
            "elements": [element.to_dict() for element in self.elements],
            "url": self.url,
            "confidence": self.confidence,
        }
