"""Result exporter — write crawl results and actions to JSON files."""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from pathlib import Path
from urllib.parse import urlparse

import logfire

from actionscout.actions.models import Action
from actionscout.crawler.models import CrawlResult


class ResultExporter:
    """Saves each page's crawl result, and its actions when there are any."""

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = output_dir
        output_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def url_to_stem(url: str) -> str:
        """Generate a filename stem from a URL's host and path.

        Examples:
            https://app.example.com/ → app_example_com_
            https://app.example.com/settings/general → app_example_com_settings_general
        """
        parsed = urlparse(url)
        host = re.sub(r"[^a-zA-Z0-9]", "_", parsed.hostname or "")
        path = re.sub(r"[^a-zA-Z0-9]", "_", parsed.path or "/")
        return f"{host}{path}"

    def save(
        self,
        crawl_result: CrawlResult,
        actions: Sequence[Action] = (),
    ) -> list[Path]:
        """Write ``<stem>_crawl_<ts>.json`` and, if any, ``<stem>_actions_<ts>.json``.

        Returns the paths written.
        """
        stem = self.url_to_stem(crawl_result.url)
        timestamp = re.sub(r"[:.+]", "-", crawl_result.timestamp.isoformat())

        crawl_path = self._output_dir / f"{stem}_crawl_{timestamp}.json"
        crawl_path.write_text(json.dumps(crawl_result.to_dict(), indent=2))
        written = [crawl_path]

        if actions:
            actions_path = self._output_dir / f"{stem}_actions_{timestamp}.json"
            actions_path.write_text(json.dumps([a.to_dict() for a in actions], indent=2))
            written.append(actions_path)

        logfire.info("Saved crawl results", url=crawl_result.url, files=[str(p) for p in written])
        return written
