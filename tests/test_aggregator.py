"""
Tests for catalog candidate aggregation.
"""

import pytest

from conftest import FakeCatalog, make_item
from guide_linker.aggregator import CandidateAggregator, build_search_queries, merge_candidates
from guide_linker.config import BlendingConfig
from guide_linker.deadline import Deadline, DeadlineExceeded
from guide_linker.models import SemanticAnalysis


class TestBuildSearchQueries:
    """Tests for query list construction."""

    def test_top_keywords_then_top_mentions(self):
        analysis = SemanticAnalysis(
            primary_keywords=[f"k{i}" for i in range(8)],
            gear_mentions=[f"m{i}" for i in range(5)],
        )
        queries = build_search_queries(analysis)

        assert queries == ["k0", "k1", "k2", "k3", "k4", "m0", "m1", "m2"]

    def test_duplicates_across_lists_are_kept(self):
        analysis = SemanticAnalysis(primary_keywords=["tent"], gear_mentions=["tent"])
        assert build_search_queries(analysis) == ["tent", "tent"]

    def test_empty_analysis_gives_no_queries(self):
        assert build_search_queries(SemanticAnalysis()) == []


class TestMergeCandidates:
    """Tests for de-duplication and ranking of hits."""

    def test_keeps_highest_similarity_per_item(self):
        low = make_item("Tent", item_id=1, similarity=0.75)
        high = make_item("Tent", item_id=1, similarity=0.95)
        other = make_item("Stove", item_id=2, similarity=0.85)

        merged = merge_candidates([[low, other], [high]])

        assert [item.id for item in merged] == [1, 2]
        assert merged[0].similarity == 0.95

    def test_limit_applied_after_sorting(self):
        items = [make_item(f"Item {i}", item_id=i, similarity=0.7 + i * 0.02) for i in range(6)]
        merged = merge_candidates([items], limit=3)

        assert [item.id for item in merged] == [5, 4, 3]

    def test_result_independent_of_query_order(self):
        a = [make_item("Tent", item_id=1, similarity=0.8), make_item("Pad", item_id=3, similarity=0.9)]
        b = [make_item("Tent", item_id=1, similarity=0.9), make_item("Stove", item_id=2, similarity=0.7)]

        forward = merge_candidates([a, b])
        backward = merge_candidates([b, a])

        assert [(i.id, i.similarity) for i in forward] == [(i.id, i.similarity) for i in backward]


class TestCandidateAggregator:
    """Tests for the aggregator against a fake catalog."""

    def test_filters_below_threshold(self):
        catalog = FakeCatalog(default=[
            make_item("Good", item_id=1, similarity=0.8),
            make_item("Weak", item_id=2, similarity=0.5),
        ])
        aggregator = CandidateAggregator(catalog)

        candidates = aggregator.find_candidates(SemanticAnalysis(primary_keywords=["tent"]))

        assert [item.name for item in candidates] == ["Good"]
        assert catalog.calls == [("tent", 10)]

    def test_failing_query_does_not_abort_batch(self, caplog):
        catalog = FakeCatalog(
            results={"stove": [make_item("Pocket Rocket", item_id=7, similarity=0.9)]},
            failing=["tent"],
        )
        aggregator = CandidateAggregator(catalog)

        with caplog.at_level("ERROR"):
            candidates = aggregator.find_candidates(
                SemanticAnalysis(primary_keywords=["tent", "stove"])
            )

        assert [item.id for item in candidates] == [7]
        assert "Error searching catalog for 'tent'" in caplog.text

    def test_caps_to_twice_max_links(self):
        items = [make_item(f"Item {i}", item_id=i, similarity=0.8) for i in range(10)]
        config = BlendingConfig(max_links_per_article=2)
        aggregator = CandidateAggregator(FakeCatalog(default=items), config)

        candidates = aggregator.find_candidates(SemanticAnalysis(primary_keywords=["tent"]))

        assert len(candidates) == 4

    def test_empty_analysis_makes_no_calls(self):
        catalog = FakeCatalog()
        assert CandidateAggregator(catalog).find_candidates(SemanticAnalysis()) == []
        assert catalog.calls == []

    def test_concurrent_dispatch_matches_sequential(self):
        results = {
            "tent": [make_item("Tent", item_id=1, similarity=0.8)],
            "stove": [make_item("Stove", item_id=2, similarity=0.9)],
            "tents": [make_item("Tent", item_id=1, similarity=0.95)],
        }
        analysis = SemanticAnalysis(primary_keywords=["tent", "stove", "tents"])

        sequential = CandidateAggregator(FakeCatalog(results=results)).find_candidates(analysis)
        concurrent = CandidateAggregator(
            FakeCatalog(results=results),
            BlendingConfig(max_concurrent_searches=3),
        ).find_candidates(analysis)

        assert [(i.id, i.similarity) for i in sequential] == [(i.id, i.similarity) for i in concurrent]
        assert [i.id for i in concurrent] == [1, 2]

    def test_cancelled_deadline_stops_search(self):
        catalog = FakeCatalog()
        deadline = Deadline.unbounded()
        deadline.cancel()

        with pytest.raises(DeadlineExceeded):
            CandidateAggregator(catalog).find_candidates(
                SemanticAnalysis(primary_keywords=["tent"]), deadline
            )
        assert catalog.calls == []
