# -*- coding: utf-8 -*-
"""
Centralized configuration for Guide Linker.

This module provides the configuration dataclass that controls how many
links are inserted, which catalog hits are trusted, and how the catalog
is queried.
"""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class BlendingConfig:
    """
    Configuration for catalog link blending.

    Attributes:
        max_links_per_article: Hard cap on links inserted into one guide.
        min_similarity_threshold: Catalog hits scoring below this are ignored.
        context_window_size: Characters of text examined around a mention
            when scoring an insertion point.
        prioritize_new_content: Accepted for compatibility with existing
            callers. No stage reads it yet.

        per_query_limit: Results requested from the catalog per query.
        max_keyword_queries: How many primary keywords become queries.
        max_gear_queries: How many gear mentions become queries.
        min_insertion_confidence: Insertion points at or below this
            confidence are discarded.
        max_concurrent_searches: Catalog queries allowed in flight at once.
            1 means queries run one after another.
        timeout_seconds: Optional wall-clock budget for one enhancement call.
            When it runs out the call returns the content unchanged.
    """

    max_links_per_article: int = 5
    min_similarity_threshold: float = 0.7
    context_window_size: int = 200
    prioritize_new_content: bool = True

    # Catalog querying
    per_query_limit: int = 10
    max_keyword_queries: int = 5
    max_gear_queries: int = 3
    max_concurrent_searches: int = 1

    # Insertion scoring
    min_insertion_confidence: float = 0.3

    # Call budget
    timeout_seconds: Optional[float] = None

    @property
    def candidate_pool_size(self) -> int:
        """Number of catalog candidates kept for planning.

        Twice the link cap, so candidates without a good insertion point
        can be dropped without running out.
        """
        return self.max_links_per_article * 2

    def __post_init__(self):
        """Validate configuration values."""
        if self.max_links_per_article < 0:
            raise ValueError(
                f"max_links_per_article must be >= 0, got {self.max_links_per_article}"
            )
        if not 0.0 <= self.min_similarity_threshold <= 1.0:
            raise ValueError(
                f"min_similarity_threshold must be between 0 and 1, "
                f"got {self.min_similarity_threshold}"
            )
        if self.context_window_size < 2:
            raise ValueError(
                f"context_window_size must be >= 2, got {self.context_window_size}"
            )
        if self.per_query_limit < 1:
            raise ValueError(f"per_query_limit must be >= 1, got {self.per_query_limit}")
        if self.max_keyword_queries < 0 or self.max_gear_queries < 0:
            raise ValueError("query counts must be >= 0")
        if self.max_concurrent_searches < 1:
            raise ValueError(
                f"max_concurrent_searches must be >= 1, got {self.max_concurrent_searches}"
            )
        if not 0.0 <= self.min_insertion_confidence < 1.0:
            raise ValueError(
                f"min_insertion_confidence must be in [0, 1), "
                f"got {self.min_insertion_confidence}"
            )
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    def with_overrides(self, **overrides) -> "BlendingConfig":
        """Return a copy with the given fields replaced (validated again)."""
        return replace(self, **overrides)
