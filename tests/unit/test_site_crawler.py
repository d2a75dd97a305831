"""Unit tests for the action crawl orchestrator."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from actionscout.actions.llm_classifier import ActionSchemaError
from actionscout.actions.models import Action
from actionscout.crawler.models import CrawlResult, Element, Position
from actionscout.crawler.page_crawler import PageFetchError
from actionscout.crawler.site_crawler import ActionCrawler

START = "https://example.com/"


def search_page(url: str) -> CrawlResult:
    """A page whose only action is a bare search field."""
    return CrawlResult(
        url=url,
        elements=[
            Element.create(
                selector="xpath=/html/body/input",
                tag_type="input",
                attributes={"type": "search"},
                position=Position(0, 0),
            )
        ],
    )


class FakeFetcher:
    """Serves canned pages and links; URLs in ``failing`` raise PageFetchError."""

    def __init__(self, links: dict[str, list[str]], failing: tuple[str, ...] = ()) -> None:
        self.links = links
        self.failing = failing
        self.fetched: list[str] = []
        self._current: str | None = None

    async def fetch_and_extract(self, url: str) -> CrawlResult:
        self.fetched.append(url)
        if url in self.failing:
            raise PageFetchError(f"HTTP 500 from {url}")
        self._current = url
        return search_page(url)

    async def extract_outbound_links(self) -> list[str]:
        return self.links.get(self._current, [])


@pytest.fixture
def site() -> dict[str, list[str]]:
    return {
        "https://example.com/": ["/a", "/b", "https://other.com/", "/login"],
        "https://example.com/a": ["/", "/c"],
        "https://example.com/b": ["/a?ref=b"],
        "https://example.com/c": [],
    }


class TestActionCrawlerRun:
    """Tests for the BFS crawl loop."""

    @pytest.mark.asyncio
    async def test_crawls_site_breadth_first(self, site: dict[str, list[str]]) -> None:
        fetcher = FakeFetcher(site)
        crawler = ActionCrawler(fetcher, page_delay_seconds=0)

        report = await crawler.run(START, max_pages=10)

        assert fetcher.fetched == [
            "https://example.com/",
            "https://example.com/a",
            "https://example.com/b",
            "https://example.com/c",
        ]
        assert report.visited_urls == fetcher.fetched
        assert report.total_pages == 4
        assert len(report.actions) == 4
        assert report.errors == []

    @pytest.mark.asyncio
    async def test_respects_page_budget(self, site: dict[str, list[str]]) -> None:
        fetcher = FakeFetcher(site)
        crawler = ActionCrawler(fetcher, page_delay_seconds=0)

        report = await crawler.run(START, max_pages=2)

        assert fetcher.fetched == ["https://example.com/", "https://example.com/a"]
        assert report.total_pages == 2

    @pytest.mark.asyncio
    async def test_fetch_failure_skips_url(self, site: dict[str, list[str]]) -> None:
        fetcher = FakeFetcher(site, failing=("https://example.com/a",))
        crawler = ActionCrawler(fetcher, page_delay_seconds=0)

        report = await crawler.run(START, max_pages=10)

        # /c is only linked from the failed page
        assert fetcher.fetched == [
            "https://example.com/",
            "https://example.com/a",
            "https://example.com/b",
        ]
        assert report.total_pages == 2
        assert len(report.errors) == 1
        assert "https://example.com/a" in report.errors[0]

    @pytest.mark.asyncio
    async def test_link_extraction_failure_is_recorded(self) -> None:
        fetcher = FakeFetcher({})
        fetcher.extract_outbound_links = AsyncMock(side_effect=RuntimeError("page closed"))
        crawler = ActionCrawler(fetcher, page_delay_seconds=0)

        report = await crawler.run(START, max_pages=5)

        assert report.total_pages == 1
        assert report.errors == ["Failed to extract links from https://example.com/: page closed"]

    @pytest.mark.asyncio
    async def test_waits_between_pages(self, site: dict[str, list[str]]) -> None:
        crawler = ActionCrawler(FakeFetcher(site), page_delay_seconds=1.5)

        with patch("actionscout.crawler.site_crawler.asyncio.sleep", new=AsyncMock()) as sleep:
            await crawler.run(START, max_pages=3)

        # No wait after the last page
        assert sleep.await_count == 2
        sleep.assert_awaited_with(1.5)

    @pytest.mark.asyncio
    async def test_unusable_start_url(self) -> None:
        fetcher = FakeFetcher({})
        crawler = ActionCrawler(fetcher, page_delay_seconds=0)

        report = await crawler.run("mailto:someone@example.com", max_pages=5)

        assert fetcher.fetched == []
        assert report.total_pages == 0


class TestActionCrawlerCollaborators:
    """Tests for LLM, storage and export handling."""

    @pytest.mark.asyncio
    async def test_llm_actions_are_kept_separate(self) -> None:
        llm_action = Action(
            type="search",
            name="Site search",
            description="Search the site",
            url=START,
            confidence=0.85,
        )
        llm_classifier = AsyncMock()
        llm_classifier.classify.return_value = [llm_action]
        storage = AsyncMock()
        crawler = ActionCrawler(
            FakeFetcher({}), llm_classifier=llm_classifier, storage=storage, page_delay_seconds=0
        )

        analysis = await crawler.crawl_page(START)

        assert len(analysis.rule_actions) == 1
        assert analysis.llm_actions == [llm_action]
        assert analysis.actions == [*analysis.rule_actions, llm_action]
        assert storage.store_actions.await_count == 2
        stored = [call.args[0] for call in storage.store_actions.await_args_list]
        assert stored == [analysis.rule_actions, [llm_action]]

    @pytest.mark.asyncio
    async def test_llm_failure_yields_no_llm_actions(self) -> None:
        llm_classifier = AsyncMock()
        llm_classifier.classify.side_effect = ActionSchemaError("No JSON found in response")
        crawler = ActionCrawler(FakeFetcher({}), llm_classifier=llm_classifier)

        analysis = await crawler.crawl_page(START)

        assert len(analysis.rule_actions) == 1
        assert analysis.llm_actions == []
        assert analysis.errors == []

    @pytest.mark.asyncio
    async def test_storage_failure_does_not_stop_crawl(self, site: dict[str, list[str]]) -> None:
        storage = AsyncMock()
        storage.store_actions.side_effect = RuntimeError("connection refused")
        crawler = ActionCrawler(FakeFetcher(site), storage=storage, page_delay_seconds=0)

        report = await crawler.run(START, max_pages=2)

        assert report.total_pages == 2
        assert len(report.actions) == 2
        assert len(report.errors) == 2
        assert "connection refused" in report.errors[0]

    @pytest.mark.asyncio
    async def test_empty_action_sets_are_not_stored(self) -> None:
        fetcher = MagicMock()
        fetcher.fetch_and_extract = AsyncMock(return_value=CrawlResult(url=START))
        storage = AsyncMock()
        crawler = ActionCrawler(fetcher, storage=storage)

        analysis = await crawler.crawl_page(START)

        assert analysis.actions == []
        storage.store_actions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_results_are_exported(self) -> None:
        exporter = MagicMock()
        crawler = ActionCrawler(FakeFetcher({}), exporter=exporter)

        analysis = await crawler.crawl_page(START)

        exporter.save.assert_called_once_with(analysis.crawl_result, analysis.actions)

    @pytest.mark.asyncio
    async def test_export_failure_is_recorded(self) -> None:
        exporter = MagicMock()
        exporter.save.side_effect = OSError("disk full")
        crawler = ActionCrawler(FakeFetcher({}), exporter=exporter)

        analysis = await crawler.crawl_page(START)

        assert len(analysis.rule_actions) == 1
        assert analysis.errors == [f"Failed to export results for {START}: disk full"]

    @pytest.mark.asyncio
    async def test_fetch_error_propagates_from_crawl_page(self) -> None:
        crawler = ActionCrawler(FakeFetcher({}, failing=(START,)))

        with pytest.raises(PageFetchError):
            await crawler.crawl_page(START)

    @pytest.mark.asyncio
    async def test_crawl_pages_skips_failures(self) -> None:
        fetcher = FakeFetcher({}, failing=("https://example.com/broken",))
        crawler = ActionCrawler(fetcher)

        analyses = await crawler.crawl_pages(
            ["https://example.com/", "https://example.com/broken", "https://example.com/ok"]
        )

        assert [a.crawl_result.url for a in analyses] == [
            "https://example.com/",
            "https://example.com/ok",
        ]
