"""
Tests for enhancement reporting.
"""

import pytest
from rich.console import Console

from conftest import make_item
from guide_linker.models import BlendingResult, InsertedLink
from guide_linker.report import EnhancementOutcome, build_report, render_report


def result_with(*names):
    links = [
        InsertedLink(item=make_item(name, item_id=i), link_text=name, context="", position=i)
        for i, name in enumerate(names)
    ]
    return BlendingResult(original_content="x", enhanced_content="y", inserted_links=links)


@pytest.fixture
def outcomes():
    return [
        EnhancementOutcome(source="desert.md", result=result_with("Tent", "Headlamp")),
        EnhancementOutcome(source="alpine.md", result=result_with("Tent")),
        EnhancementOutcome(source="lake.md", result=result_with()),
        EnhancementOutcome(source="broken.md", success=False, error="Frontmatter missing"),
    ]


class TestBuildReport:

    def test_totals(self, outcomes):
        report = build_report(outcomes)

        assert report.total == 4
        assert report.successful == 3
        assert report.failed == 1
        assert report.total_links == 3
        assert report.average_links == pytest.approx(1.0)

    def test_distribution_and_top_items(self, outcomes):
        report = build_report(outcomes)

        assert report.links_per_guide == {0: 1, 1: 1, 2: 1}
        assert report.top_items == [("Tent", 2), ("Headlamp", 1)]
        assert report.failures == [("broken.md", "Frontmatter missing")]

    def test_empty_report(self):
        report = build_report([])
        assert report.total == 0
        assert report.average_links == 0.0


class TestRenderReport:

    def test_renders_tables(self, outcomes):
        console = Console(record=True, width=120)

        render_report(build_report(outcomes), console)

        text = console.export_text()
        assert "Catalog Link Enhancement Report" in text
        assert "Total links inserted" in text
        assert "Most frequently linked items" in text
        assert "broken.md" in text
