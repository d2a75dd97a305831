"""Element extractor — turns a Playwright page's DOM into Element records."""

from __future__ import annotations

from typing import Any

import logfire
from playwright.async_api import Page

from actionscout.crawler.models import Element, Position

# Nodes worth classifying: interactive controls plus the containers the
# navigation and form heuristics anchor on
CANDIDATE_SELECTORS = [
    "a",
    "button",
    "input",
    "select",
    "textarea",
    "form",
    "nav",
    "label",
    "[role]",
    "[onclick]",
    "[class*='nav']",
    "[class*='menu']",
    "[id*='nav']",
    "[id*='menu']",
]

_EXTRACT_SCRIPT = """
(selector) => {
    const xpathFor = (el) => {
        const steps = [];
        for (let node = el; node && node.nodeType === Node.ELEMENT_NODE; node = node.parentNode) {
            let index = 1;
            for (let sib = node.previousElementSibling; sib; sib = sib.previousElementSibling) {
                if (sib.tagName === node.tagName) index++;
            }
            steps.unshift(node.tagName.toLowerCase() + '[' + index + ']');
        }
        return '/' + steps.join('/');
    };
    const records = [];
    for (const el of document.querySelectorAll(selector)) {
        const rect = el.getBoundingClientRect();
        const style = window.getComputedStyle(el);
        const hidden = el.type === 'hidden' || style.display === 'none'
            || style.visibility === 'hidden' || (rect.width === 0 && rect.height === 0);
        if (hidden) continue;
        records.push({
            xpath: xpathFor(el),
            tag: el.tagName.toLowerCase(),
            attributes: Object.fromEntries(Array.from(el.attributes).map(a => [a.name, a.value])),
            text: (el.textContent || '').trim(),
            cursor: style.cursor,
            x: rect.x + window.scrollX,
            y: rect.y + window.scrollY,
        });
    }
    return records;
}
"""


class ElementExtractor:
    """Extracts visible candidate elements from a page, in document order."""

    def __init__(
        self,
        selectors: list[str] | None = None,
        log: logfire.Logfire | None = None,
    ) -> None:
        self._selector = ", ".join(selectors or CANDIDATE_SELECTORS)
        self._log = log or logfire.with_tags("element-extractor")

    async def extract(self, page: Page) -> list[Element]:
        """Extract Elements from the page's current DOM."""
        records = await page.evaluate(_EXTRACT_SCRIPT, self._selector)
        elements = self.build_elements(records)
        self._log.info("Extracted elements", url=page.url, elements=len(elements))
        return elements

    def build_elements(self, records: list[dict[str, Any]]) -> list[Element]:
        """Convert raw DOM records into Elements, skipping malformed ones."""
        elements: list[Element] = []
        for record in records:
            try:
                elements.append(
                    Element.create(
                        selector=f"xpath={record['xpath']}",
                        tag_type=str(record["tag"]),
                        attributes={
                            str(k): str(v) for k, v in (record.get("attributes") or {}).items()
                        },
                        text=str(record.get("text") or ""),
                        position=Position(x=float(record["x"]), y=float(record["y"])),
                        cursor=record.get("cursor"),
                    )
                )
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                self._log.warn("Skipping malformed element record", error=str(e))
        return elements
