"""Browser manager — Playwright lifecycle and context creation."""

from __future__ import annotations

import logfire
from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from actionscout.crawler.models import CrawlConfig


class BrowserManager:
    """Manages Playwright browser lifecycle and context creation."""

    def __init__(self, config: CrawlConfig | None = None) -> None:
        self._config = config or CrawlConfig()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    async def start(self) -> BrowserContext:
        """Launch browser and create a context."""
        logfire.info("Starting Playwright browser", headless=self._config.headless)

        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self._config.headless)
        self._context = await self._browser.new_context(
            viewport={
                "width": self._config.viewport_width,
                "height": self._config.viewport_height,
            },
        )
        self._context.set_default_navigation_timeout(self._config.navigation_timeout_ms)

        logfire.info("Browser context created")
        return self._context

    async def new_page(self) -> Page:
        """Create a new page in the current context."""
        if not self._context:
            raise RuntimeError("Browser context not initialized. Call start() first.")
        return await self._context.new_page()

    @property
    def context(self) -> BrowserContext | None:
        return self._context

    async def close(self) -> None:
        """Close browser and cleanup."""
        if self._context:
            await self._context.close()
            self._context = None
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        logfire.info("Browser closed")

    async def __aenter__(self) -> BrowserManager:
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
