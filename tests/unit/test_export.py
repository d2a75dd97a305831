"""Unit tests for JSON result export."""

import json
from datetime import UTC, datetime
from pathlib import Path

from actionscout.actions.models import Action, ActionType
from actionscout.crawler.export import ResultExporter
from actionscout.crawler.models import CrawlResult, Element


def make_result(url: str = "https://app.example.com/settings/general") -> CrawlResult:
    return CrawlResult(
        url=url,
        elements=[Element.create(selector="xpath=/html/body/input", tag_type="input")],
        timestamp=datetime(2024, 5, 6, 7, 8, 9, 123000, tzinfo=UTC),
    )


class TestUrlToStem:
    def test_root(self) -> None:
        assert ResultExporter.url_to_stem("https://app.example.com/") == "app_example_com_"

    def test_nested_path(self) -> None:
        assert (
            ResultExporter.url_to_stem("https://app.example.com/settings/general")
            == "app_example_com_settings_general"
        )


class TestResultExporter:
    def test_creates_output_dir(self, tmp_path: Path) -> None:
        output_dir = tmp_path / "results" / "run-1"
        ResultExporter(output_dir)
        assert output_dir.is_dir()

    def test_save_crawl_only(self, tmp_path: Path) -> None:
        exporter = ResultExporter(tmp_path)

        paths = exporter.save(make_result())

        assert len(paths) == 1
        assert paths[0].name == (
            "app_example_com_settings_general_crawl_2024-05-06T07-08-09-123000-00-00.json"
        )
        data = json.loads(paths[0].read_text())
        assert data["url"] == "https://app.example.com/settings/general"
        assert data["elements"][0]["type"] == "input"

    def test_save_with_actions(self, tmp_path: Path) -> None:
        exporter = ResultExporter(tmp_path)
        result = make_result()
        action = Action(
            type=ActionType.SEARCH,
            name="Search",
            description="Search input field",
            url=result.url,
            confidence=0.7,
            elements=list(result.elements),
        )

        paths = exporter.save(result, [action])

        assert len(paths) == 2
        assert "_actions_" in paths[1].name
        actions = json.loads(paths[1].read_text())
        assert actions[0]["type"] == "search"
        assert actions[0]["elements"][0]["selector"] == "xpath=/html/body/input"
