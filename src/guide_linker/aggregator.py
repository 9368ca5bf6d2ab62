"""
Catalog candidate aggregation.

Fans the extracted keywords out to the catalog search, merges the hits,
keeps the best similarity per product and trims the result to a working
set for insertion planning.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from .config import BlendingConfig
from .deadline import Deadline, DeadlineExceeded
from .models import CatalogItem, SemanticAnalysis

logger = logging.getLogger(__name__)


def build_search_queries(
    analysis: SemanticAnalysis,
    max_keywords: int = 5,
    max_gear_mentions: int = 3,
) -> list[str]:
    """
    Build the catalog query list from an analysis.

    Top keywords first, then top gear mentions. A term present in both
    lists is queried twice; duplicates are resolved on the results.
    """
    return list(analysis.primary_keywords[:max_keywords]) + list(
        analysis.gear_mentions[:max_gear_mentions]
    )


def merge_candidates(
    result_sets: Iterable[list[CatalogItem]],
    limit: Optional[int] = None,
) -> list[CatalogItem]:
    """
    Merge search hits into one ranked candidate list.

    Args:
        result_sets: Hits per query, in query order.
        limit: Maximum number of candidates to keep.

    Returns:
        Candidates unique by item identity, each with its highest
        similarity, sorted by similarity descending.
    """
    best: dict = {}
    for items in result_sets:
        for item in items:
            existing = best.get(item.identity)
            if existing is None or item.similarity > existing.similarity:
                best[item.identity] = item

    ranked = sorted(best.values(), key=lambda item: item.similarity, reverse=True)
    return ranked if limit is None else ranked[:limit]


class CandidateAggregator:
    """
    Collects catalog candidates for an analysis.

    Each query is an independent read. A failing query is logged and
    contributes nothing; the rest of the batch still runs.
    """

    def __init__(self, catalog, config: Optional[BlendingConfig] = None):
        """
        Initialize the aggregator.

        Args:
            catalog: Object with ``vector_search(query, limit) -> SearchResponse``.
            config: Blending configuration.
        """
        self.catalog = catalog
        self.config = config or BlendingConfig()

    def _search(self, query: str, deadline: Deadline) -> list[CatalogItem]:
        deadline.check(f"catalog search '{query}'")
        try:
            response = self.catalog.vector_search(query, self.config.per_query_limit)
            items = list(response.items)
        except DeadlineExceeded:
            raise
        except Exception as e:
            logger.error(f"Error searching catalog for '{query}': {e}")
            return []

        threshold = self.config.min_similarity_threshold
        return [item for item in items if item.similarity >= threshold]

    def search_all(self, queries: list[str], deadline: Optional[Deadline] = None) -> list[list[CatalogItem]]:
        """
        Run every query and return the filtered hits per query, in query order.

        With max_concurrent_searches > 1 the queries run on a bounded
        thread pool; the joined result is identical to the sequential run.
        """
        deadline = deadline or Deadline.unbounded()
        workers = min(self.config.max_concurrent_searches, len(queries))
        if workers <= 1:
            return [self._search(query, deadline) for query in queries]

        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda query: self._search(query, deadline), queries))

    def find_candidates(
        self,
        analysis: SemanticAnalysis,
        deadline: Optional[Deadline] = None,
    ) -> list[CatalogItem]:
        """
        Find catalog candidates relevant to an analysis.

        Args:
            analysis: Extracted keywords and gear mentions.
            deadline: Optional call deadline.

        Returns:
            At most ``2 x max_links_per_article`` candidates at or above the
            similarity threshold, best first.
        """
        queries = build_search_queries(
            analysis,
            max_keywords=self.config.max_keyword_queries,
            max_gear_mentions=self.config.max_gear_queries,
        )
        if not queries:
            return []

        result_sets = self.search_all(queries, deadline)
        candidates = merge_candidates(result_sets, limit=self.config.candidate_pool_size)
        logger.info(f"Catalog search: {len(queries)} queries, {len(candidates)} candidates")
        return candidates
