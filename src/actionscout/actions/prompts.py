"""Prompts for LLM-based action classification."""

from __future__ import annotations

from actionscout.crawler.models import Element

SYSTEM_PROMPT = """You are an expert web analyst who identifies user actions on a web page \
from a list of its HTML elements.

Potential user actions include:
1. Login forms
2. Registration forms
3. Search interfaces
4. Navigation menus
5. Contact forms
6. Checkout processes
7. Product filtering/sorting
8. Any other interactive user actions

For each action, determine:
- The type of action (e.g. login, search, navigation, registration, contact, form)
- A short, descriptive name
- A detailed description of what the action does
- Which elements are part of the action, by their indices
- A confidence score between 0 and 1

Group related elements that work together to form a single user action.
Focus on complete, functional actions that users can perform.

Output format:
Return only a JSON object of the form
{"actions": [{"type": "...", "name": "...", "description": "...", \
"element_indices": [0, 1], "confidence": 0.9}]}"""


def format_element(index: int, element: Element) -> str:
    """Format one element as a single indexed prompt line."""
    attributes = " ".join(f'{key}="{value}"' for key, value in element.attributes.items())
    return f'[{index}] {element.tag_type} {attributes} - "{element.text}" - {element.description}'


def format_elements(elements: list[Element]) -> str:
    return "\n".join(format_element(i, element) for i, element in enumerate(elements))


def build_classification_prompt(url: str, elements: list[Element]) -> str:
    """Build the user prompt listing a page's elements.

    Args:
        url: Page the elements were extracted from
        elements: Elements in extraction order; their list index is the id the
            model refers back to

    Returns:
        Formatted prompt string
    """
    parts = [
        f"Analyze the following web page elements from {url} "
        "and identify all possible user actions.",
        "",
        "<elements>",
        format_elements(elements),
        "</elements>",
        "",
        "For each action:",
        "1. Determine what type of action it is (login, search, navigation, etc.)",
        "2. Give it a descriptive name",
        "3. Describe what the action does",
        "4. List the indices of the elements that make up the action",
        "5. Assign a confidence score (0-1)",
    ]
    return "\n".join(parts)
