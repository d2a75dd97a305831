"""Human-readable element descriptions and interactivity detection."""

from __future__ import annotations

from collections.abc import Mapping

INTERACTIVE_TAGS = frozenset({"button", "a", "input", "select", "textarea"})

# (attribute, phrase) pairs, in the order they appear in a description
DESCRIBED_ATTRIBUTES = (
    ("id", "with id"),
    ("name", "named"),
    ("placeholder", "with placeholder"),
    ("aria-label", "labeled"),
    ("role", "with role"),
)

MAX_DESCRIPTION_TEXT = 50


def is_interactive(tag_type: str, attributes: Mapping[str, str], cursor: str | None = None) -> bool:
    """Whether a node is something a user can interact with."""
    return (
        tag_type.lower() in INTERACTIVE_TAGS
        or "onclick" in attributes
        or "role" in attributes
        or cursor == "pointer"
    )


def describe_element(tag_type: str, attributes: Mapping[str, str], text: str) -> str:
    """Build a short description from tag, notable attributes and text.

    Examples:
        input, {"name": "email"}, "" → 'input named "email"'
        button, {}, "Sign in" → 'button containing "Sign in"'
    """
    parts = [tag_type]

    for attribute, phrase in DESCRIBED_ATTRIBUTES:
        value = attributes.get(attribute)
        if value:
            parts.append(f'{phrase} "{value}"')

    if text:
        snippet = text[:MAX_DESCRIPTION_TEXT]
        if len(text) > MAX_DESCRIPTION_TEXT:
            snippet += "..."
        parts.append(f'containing "{snippet}"')

    return " ".join(parts)
