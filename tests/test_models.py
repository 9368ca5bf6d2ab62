"""
Tests for data models.
"""

from guide_linker.models import (
    AnalysisOutcome,
    BlendingResult,
    CatalogItem,
    GuideMetadata,
    InsertionPoint,
    LinkMatch,
    SemanticAnalysis,
)


class TestCatalogItem:

    def test_from_camel_case_payload(self):
        item = CatalogItem.from_dict({
            "id": 7,
            "name": "PocketRocket 2",
            "brand": "MSR",
            "categories": "Stoves",
            "productUrl": "https://x/pr2",
            "similarity": "0.81",
            "weight": 73,
        })

        assert item.categories == ("Stoves",)
        assert item.similarity == 0.81
        assert item.model is None
        assert item.extra == {"weight": 73}

    def test_identity_prefers_id(self):
        a = CatalogItem(id=1, name="Tent", similarity=0.7)
        b = CatalogItem(id=1, name="Tent (2024)", similarity=0.9)
        assert a.identity == b.identity

    def test_identity_without_id_uses_name_and_brand(self):
        a = CatalogItem(id=None, name="Tent", brand="Nemo")
        b = CatalogItem(id=None, name="TENT", brand="nemo")
        c = CatalogItem(id=None, name="Tent", brand="MSR")
        assert a.identity == b.identity
        assert a.identity != c.identity


class TestGuideMetadata:

    def test_from_frontmatter(self):
        metadata = GuideMetadata.from_frontmatter({
            "title": "Winter Camping",
            "categories": "camping",
            "difficulty": "Advanced",
        })
        assert metadata.title == "Winter Camping"
        assert metadata.categories == ["camping"]
        assert metadata.difficulty == "Advanced"

    def test_from_empty_frontmatter(self):
        assert GuideMetadata.from_frontmatter(None) == GuideMetadata()


class TestResults:

    def test_analysis_outcome_tags(self):
        assert AnalysisOutcome.degraded("no json").is_degraded
        assert not AnalysisOutcome.ok(SemanticAnalysis()).is_degraded

    def test_top_point(self):
        item = CatalogItem(id=1, name="Tent")
        point = InsertionPoint(position=3, context="a tent", confidence=0.9, link_text="tent")
        assert LinkMatch(item=item, insertion_points=[point]).top_point is point
        assert LinkMatch(item=item).top_point is None

    def test_unchanged_result(self):
        result = BlendingResult.unchanged("guide")
        assert result.enhanced_content == result.original_content == "guide"
        assert result.link_count == 0
        assert not result.was_enhanced
