"""Action crawler — BFS crawl that classifies each page's elements into user actions."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable, Sequence
from typing import Any, Protocol

import logfire

from actionscout.actions.classifier import HeuristicActionClassifier
from actionscout.actions.models import Action
from actionscout.crawler.export import ResultExporter
from actionscout.crawler.frontier import DEFAULT_EXCLUDED_PATH_KEYWORDS, CrawlFrontier
from actionscout.crawler.models import CrawlReport, CrawlResult, PageAnalysis
from actionscout.crawler.page_crawler import PageFetcher


class ActionClassifier(Protocol):
    async def classify(self, crawl_result: CrawlResult) -> list[Action]: ...


class ActionSink(Protocol):
    async def store_actions(self, actions: Sequence[Action]) -> Any: ...


class ActionCrawler:
    """Crawls a site breadth-first and collects the user actions on each page.

    Pages are processed strictly one at a time. Rule-based and LLM actions
    are stored as separate batches and never merged. Any failure while
    handling one URL is logged and the crawl moves on to the next URL.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        classifier: HeuristicActionClassifier | None = None,
        llm_classifier: ActionClassifier | None = None,
        storage: ActionSink | None = None,
        exporter: ResultExporter | None = None,
        page_delay_seconds: float = 1.0,
        excluded_path_keywords: Iterable[str] = DEFAULT_EXCLUDED_PATH_KEYWORDS,
        log: logfire.Logfire | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._classifier = classifier or HeuristicActionClassifier()
        self._llm_classifier = llm_classifier
        self._storage = storage
        self._exporter = exporter
        self._page_delay = page_delay_seconds
        self._excluded_path_keywords = tuple(excluded_path_keywords)
        self._log = log or logfire.with_tags("crawler")

    async def run(self, start_url: str, max_pages: int) -> CrawlReport:
        """Crawl from ``start_url`` until the queue empties or ``max_pages`` are visited."""
        start_time = time.monotonic()
        report = CrawlReport(start_url=start_url)

        frontier = CrawlFrontier(
            start_url,
            max_pages,
            excluded_path_keywords=self._excluded_path_keywords,
            log=self._log,
        )
        frontier.seed(start_url)

        while not frontier.is_exhausted():
            url = frontier.next()
            if url is None:
                break
            report.visited_urls.append(url)

            self._log.info(
                "Starting page crawl",
                url=url,
                page=len(report.visited_urls),
                max_pages=max_pages,
            )

            try:
                analysis = await self.crawl_page(url)
            except Exception as e:
                self._log.error("Failed to crawl page", url=url, error=str(e))
                report.errors.append(f"Failed to crawl {url}: {e}")
            else:
                report.pages.append(analysis.crawl_result)
                report.actions.extend(analysis.actions)
                report.errors.extend(analysis.errors)
                await self._follow_links(frontier, analysis.crawl_result.url, report)

            if not frontier.is_exhausted() and self._page_delay > 0:
                await asyncio.sleep(self._page_delay)

        report.duration_seconds = round(time.monotonic() - start_time, 1)

        self._log.info(
            "Crawl complete",
            start_url=start_url,
            pages=report.total_pages,
            visited=len(report.visited_urls),
            actions=len(report.actions),
            errors=len(report.errors),
            duration_seconds=report.duration_seconds,
        )
        return report

    async def crawl_page(self, url: str) -> PageAnalysis:
        """Fetch one page, classify it both ways, then store and export the results.

        Fetch and rule-based classification errors propagate. LLM, storage and
        export failures are logged and recorded on the returned analysis.
        """
        crawl_result = await self._fetcher.fetch_and_extract(url)
        analysis = PageAnalysis(
            crawl_result=crawl_result,
            rule_actions=self._classifier.classify(crawl_result),
        )
        self._log.info(
            "Rule-based analysis complete",
            url=crawl_result.url,
            actions=len(analysis.rule_actions),
        )

        analysis.llm_actions = await self._classify_with_llm(crawl_result)

        await self._store(analysis, analysis.rule_actions, source="rule-based")
        await self._store(analysis, analysis.llm_actions, source="llm")

        if self._exporter is not None:
            try:
                self._exporter.save(crawl_result, analysis.actions)
            except OSError as e:
                self._log.error("Failed to export results", url=crawl_result.url, error=str(e))
                analysis.errors.append(f"Failed to export results for {crawl_result.url}: {e}")

        return analysis

    async def crawl_pages(self, urls: Iterable[str]) -> list[PageAnalysis]:
        """Analyze each URL in turn, without following links. Failed URLs are skipped."""
        analyses = []
        for url in urls:
            try:
                analyses.append(await self.crawl_page(url))
            except Exception as e:
                self._log.error("Failed to crawl page", url=url, error=str(e))
        return analyses

    async def _classify_with_llm(self, crawl_result: CrawlResult) -> list[Action]:
        if self._llm_classifier is None:
            return []
        try:
            actions = await self._llm_classifier.classify(crawl_result)
        except Exception as e:
            self._log.warn(
                "LLM analysis failed, continuing with rule-based actions only",
                url=crawl_result.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return []
        self._log.info("LLM-based analysis complete", url=crawl_result.url, actions=len(actions))
        return actions

    async def _store(self, analysis: PageAnalysis, actions: list[Action], source: str) -> None:
        if self._storage is None or not actions:
            return
        try:
            await self._storage.store_actions(actions)
        except Exception as e:
            url = analysis.crawl_result.url
            self._log.error("Failed to store actions", url=url, source=source, error=str(e))
            analysis.errors.append(f"Failed to store {source} actions for {url}: {e}")

    async def _follow_links(
        self, frontier: CrawlFrontier, page_url: str, report: CrawlReport
    ) -> None:
        try:
            links = await self._fetcher.extract_outbound_links()
        except Exception as e:
            self._log.error("Failed to extract links", url=page_url, error=str(e))
            report.errors.append(f"Failed to extract links from {page_url}: {e}")
            return

        queued = sum(frontier.enqueue(link, page_url) for link in links)
        self._log.info("Discovered links", url=page_url, links=len(links), queued=queued)
