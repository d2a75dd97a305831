"""Case-insensitive matching over element attributes, text and description.

A missing attribute and an empty one are both treated as "not present".
"""

from __future__ import annotations

from collections.abc import Iterable

from actionscout.crawler.models import Element

# Attributes that usually identify what a form field is for
FIELD_ATTRIBUTES = ("name", "id", "placeholder")


def attribute(element: Element, name: str) -> str:
    """Lowercased attribute value, or an empty string when absent."""
    return (element.attributes.get(name) or "").lower()


def _contains_any(value: str, keywords: Iterable[str]) -> bool:
    return bool(value) and any(keyword in value for keyword in keywords)


def attribute_contains(element: Element, names: Iterable[str], keywords: Iterable[str]) -> bool:
    """Whether any of the named attributes contains any keyword."""
    keywords = tuple(keywords)
    return any(_contains_any(attribute(element, name), keywords) for name in names)


def text_contains(element: Element, keywords: Iterable[str]) -> bool:
    return _contains_any(element.text.lower(), keywords)


def description_contains(element: Element, keywords: Iterable[str]) -> bool:
    return _contains_any(element.description.lower(), keywords)


def has_tag(element: Element, *tags: str) -> bool:
    return element.tag_type in tags


def has_type(element: Element, *types: str) -> bool:
    """Whether the ``type`` attribute equals one of ``types``."""
    return attribute(element, "type") in types
