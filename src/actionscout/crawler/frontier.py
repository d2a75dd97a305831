"""Crawl frontier — FIFO work queue with URL normalization, scoping and a page budget."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from urllib.parse import urljoin, urlsplit

import logfire

DEFAULT_EXCLUDED_PATH_KEYWORDS = ("login", "logout", "signin", "signout")

DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str, origin_url: str | None = None) -> str | None:
    """Resolve ``url`` against ``origin_url`` and reduce it to scheme, host and path.

    Query strings, fragments and userinfo are dropped, as is the port when it
    is the scheme's default. A non-default port stays so that a site served
    on e.g. ``localhost:8080`` is crawled on that port. Returns None for URLs
    that cannot be parsed or are not http(s).

        normalize_url("/docs?page=2#top", "https://example.com/") → "https://example.com/docs"
    """
    try:
        resolved = urljoin(origin_url, url.strip()) if origin_url else url.strip()
        parts = urlsplit(resolved)
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        return None

    if parts.scheme not in ("http", "https") or not hostname:
        return None

    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is not None and port != DEFAULT_PORTS[parts.scheme]:
        host = f"{host}:{port}"

    path = parts.path or "/"
    return f"{parts.scheme}://{host}{path}"


class CrawlFrontier:
    """Breadth-first frontier for a single-origin crawl.

    Keeps a FIFO queue of normalized URLs, the set of URLs already handed
    out, and a budget on how many pages may be visited. A URL is never
    queued twice and never handed out twice.
    """

    def __init__(
        self,
        origin_url: str,
        max_pages: int,
        excluded_path_keywords: Iterable[str] = DEFAULT_EXCLUDED_PATH_KEYWORDS,
        log: logfire.Logfire | None = None,
    ) -> None:
        if max_pages < 1:
            raise ValueError(f"max_pages must be at least 1, got {max_pages}")

        self._origin_url = origin_url
        self._origin_host = (urlsplit(origin_url).hostname or "").lower()
        self._max_pages = max_pages
        self._excluded = tuple(keyword.lower() for keyword in excluded_path_keywords)
        self._queue: deque[str] = deque()
        self._queued: set[str] = set()
        self._visited: set[str] = set()
        self._log = log or logfire.with_tags("frontier")

    @property
    def origin_host(self) -> str:
        return self._origin_host

    @property
    def max_pages(self) -> int:
        return self._max_pages

    @property
    def visited(self) -> frozenset[str]:
        return frozenset(self._visited)

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    def seed(self, url: str) -> bool:
        """Queue the crawl's start URL. The excluded-path filter does not apply."""
        normalized = normalize_url(url, self._origin_url)
        if normalized is None or not self._is_same_host(normalized):
            self._log.warn("Ignoring unusable start URL", url=url)
            return False
        return self._push(normalized)

    def enqueue(self, url: str, origin_url: str) -> bool:
        """Queue a discovered link. Returns True if it was accepted.

        Malformed, off-origin, excluded, visited and already-queued URLs are
        dropped silently.
        """
        normalized = normalize_url(url, origin_url)
        if normalized is None:
            return False
        if not self._is_same_host(normalized):
            return False
        if self._is_excluded(normalized):
            self._log.debug("Skipping excluded path", url=normalized)
            return False
        return self._push(normalized)

    def next(self) -> str | None:
        """Hand out the next URL to visit, marking it visited.

        Returns None once the queue is empty or the page budget is spent.
        """
        while self._queue and len(self._visited) < self._max_pages:
            url = self._queue.popleft()
            self._queued.discard(url)
            if url in self._visited:
                continue
            self._visited.add(url)
            return url
        return None

    def mark_visited(self, url: str) -> None:
        """Record ``url`` as visited. Idempotent."""
        normalized = normalize_url(url, self._origin_url)
        if normalized is not None:
            self._visited.add(normalized)

    def is_exhausted(self) -> bool:
        """True when nothing is left to visit or the page budget is reached."""
        return not self._queue or len(self._visited) >= self._max_pages

    def _push(self, normalized: str) -> bool:
        if normalized in self._visited or normalized in self._queued:
            return False
        self._queue.append(normalized)
        self._queued.add(normalized)
        self._log.debug("Queued URL", url=normalized, pending=len(self._queue))
        return True

    def _is_same_host(self, normalized: str) -> bool:
        return (urlsplit(normalized).hostname or "") == self._origin_host

    def _is_excluded(self, normalized: str) -> bool:
        path = urlsplit(normalized).path.lower()
        return any(keyword in path for keyword in self._excluded)
