"""Unit tests for the Playwright-backed page crawler."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

from actionscout.crawler.models import Element
from actionscout.crawler.page_crawler import PageCrawler, PageFetchError


def mock_page(status: int = 200, url: str = "https://example.com/") -> MagicMock:
    page = MagicMock()
    page.url = url
    page.goto = AsyncMock(return_value=MagicMock(status=status))
    page.evaluate = AsyncMock()
    return page


def mock_extractor(elements: list[Element] | None = None) -> MagicMock:
    extractor = MagicMock()
    extractor.extract = AsyncMock(return_value=elements or [])
    return extractor


class TestPageCrawler:
    """Tests for PageCrawler."""

    @pytest.mark.asyncio
    async def test_fetch_and_extract(self) -> None:
        button = Element.create(selector="xpath=/html/body/button", tag_type="button")
        page = mock_page(url="https://example.com/home")
        crawler = PageCrawler(page, element_extractor=mock_extractor([button]), wait_until="load")

        result = await crawler.fetch_and_extract("https://example.com/")

        page.goto.assert_awaited_once_with("https://example.com/", wait_until="load")
        # Redirect target, not the requested URL
        assert result.url == "https://example.com/home"
        assert result.elements == [button]

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        page = mock_page()
        page.goto.side_effect = PlaywrightTimeout("Timeout 30000ms exceeded")
        crawler = PageCrawler(page, element_extractor=mock_extractor())

        with pytest.raises(PageFetchError, match="Timed out"):
            await crawler.fetch_and_extract("https://example.com/")

    @pytest.mark.asyncio
    async def test_navigation_error(self) -> None:
        page = mock_page()
        page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
        crawler = PageCrawler(page, element_extractor=mock_extractor())

        with pytest.raises(PageFetchError, match="ERR_NAME_NOT_RESOLVED"):
            await crawler.fetch_and_extract("https://example.invalid/")

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        extractor = mock_extractor()
        crawler = PageCrawler(mock_page(status=404), element_extractor=extractor)

        with pytest.raises(PageFetchError, match="HTTP 404"):
            await crawler.fetch_and_extract("https://example.com/missing")
        extractor.extract.assert_not_called()

    @pytest.mark.asyncio
    async def test_extraction_error(self) -> None:
        extractor = mock_extractor()
        extractor.extract.side_effect = PlaywrightError("Execution context was destroyed")
        crawler = PageCrawler(mock_page(), element_extractor=extractor)

        with pytest.raises(PageFetchError, match="extraction failed"):
            await crawler.fetch_and_extract("https://example.com/")

    @pytest.mark.asyncio
    async def test_extract_outbound_links(self) -> None:
        page = mock_page()
        page.evaluate.return_value = ["/about", "https://other.com/", "#top"]
        crawler = PageCrawler(page, element_extractor=mock_extractor())

        links = await crawler.extract_outbound_links()

        assert links == ["/about", "https://other.com/", "#top"]
