"""Page crawler — navigate to a page, extract its elements, collect its links."""

from __future__ import annotations

from typing import Protocol

import logfire
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeout

from actionscout.crawler.element_extractor import ElementExtractor
from actionscout.crawler.models import CrawlResult


class PageFetchError(Exception):
    """Raised when a page cannot be loaded or its elements cannot be extracted."""


class PageFetcher(Protocol):
    """What the crawl orchestrator needs from a page source."""

    async def fetch_and_extract(self, url: str) -> CrawlResult: ...

    async def extract_outbound_links(self) -> list[str]: ...


class PageCrawler:
    """Loads pages in a single Playwright tab and extracts their elements.

    ``extract_outbound_links`` reads from the page most recently loaded by
    ``fetch_and_extract``.
    """

    def __init__(
        self,
        page: Page,
        element_extractor: ElementExtractor | None = None,
        wait_until: str = "networkidle",
        log: logfire.Logfire | None = None,
    ) -> None:
        self._page = page
        self._extractor = element_extractor or ElementExtractor()
        self._wait_until = wait_until
        self._log = log or logfire.with_tags("page-crawler")

    async def fetch_and_extract(self, url: str) -> CrawlResult:
        """Navigate to ``url`` and extract its elements.

        Raises:
            PageFetchError: On navigation failure, an HTTP error status, or
                extraction failure
        """
        self._log.info("Crawling page", url=url)

        try:
            response = await self._page.goto(url, wait_until=self._wait_until)
        except PlaywrightTimeout as e:
            raise PageFetchError(f"Timed out loading {url}") from e
        except PlaywrightError as e:
            raise PageFetchError(f"Navigation to {url} failed: {e.message}") from e

        if response is not None and response.status >= 400:
            raise PageFetchError(f"HTTP {response.status} from {url}")

        try:
            elements = await self._extractor.extract(self._page)
        except PlaywrightError as e:
            raise PageFetchError(f"Element extraction failed for {url}: {e.message}") from e

        # Final URL, after redirects
        result = CrawlResult(url=self._page.url, elements=elements)
        self._log.info("Page crawled", url=result.url, elements=len(elements))
        return result

    async def extract_outbound_links(self) -> list[str]:
        """Raw ``href`` attribute values of every anchor on the current page."""
        hrefs = await self._page.evaluate("""
            () => Array.from(document.querySelectorAll('a[href]'))
                .map(a => a.getAttribute('href'))
                .filter(Boolean)
        """)
        return [str(href) for href in hrefs]
