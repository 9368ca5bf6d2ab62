"""
Catalog link blending for guide content.

CatalogLinkBlender runs the full pipeline for one guide:

1. Keyword extraction (AI-assisted, vocabulary fallback)
2. Catalog candidate search and merging
3. Insertion point planning per candidate
4. Ranking and selection up to the link cap
5. Rewriting the content with markdown links

The whole call sits behind one error boundary. Whatever goes wrong, the
caller gets either improved content or the original content unchanged,
never an exception and never a partially applied rewrite.
"""

import logging
from typing import Optional, Union

from .aggregator import CandidateAggregator
from .catalog_client import CatalogSearchClient
from .config import BlendingConfig
from .deadline import Deadline
from .insertion_planner import InsertionPlanner
from .keyword_extractor import KeywordExtractor
from .link_selector import rank_link_matches, select_links
from .models import BlendingResult, GuideMetadata
from .rewriter import is_additive_rewrite, rewrite_with_links

logger = logging.getLogger(__name__)


class CatalogLinkBlender:
    """
    Blends catalog product links into guide content.

    Holds only configuration and collaborator references, so one instance
    can serve concurrent calls on different content.
    """

    def __init__(
        self,
        catalog,
        text_generator=None,
        config: Optional[BlendingConfig] = None,
    ):
        """
        Initialize the blender.

        Args:
            catalog: Object with ``vector_search(query, limit) -> SearchResponse``.
            text_generator: Optional object with ``generate(prompt, temperature) -> str``
                used for keyword extraction.
            config: Blending configuration. Defaults to BlendingConfig().
        """
        self.config = config or BlendingConfig()
        self.catalog = catalog
        self.extractor = KeywordExtractor(text_generator)
        self.aggregator = CandidateAggregator(catalog, self.config)
        self.planner = InsertionPlanner(self.config)

    def enhance_guide_content(
        self,
        content: str,
        metadata: Optional[Union[GuideMetadata, dict]] = None,
        deadline: Optional[Deadline] = None,
    ) -> BlendingResult:
        """
        Enhance guide content with links to relevant catalog items.

        Args:
            content: Guide text (markdown or plain).
            metadata: Optional guide metadata, as GuideMetadata or a
                frontmatter dictionary.
            deadline: Optional deadline / cancellation token. Defaults to
                the configured timeout.

        Returns:
            BlendingResult. On any failure, including deadline expiry, the
            enhanced content is the original content and no links are reported.
        """
        try:
            if isinstance(metadata, dict):
                metadata = GuideMetadata.from_frontmatter(metadata)
            if deadline is None:
                deadline = Deadline(self.config.timeout_seconds)

            # Step 1: Keywords and gear mentions
            analysis = self.extractor.analyze(content, metadata, deadline)

            # Step 2: Catalog candidates
            candidates = self.aggregator.find_candidates(analysis, deadline)
            deadline.check("insertion planning")

            # Step 3: Insertion points per candidate
            matches = self.planner.plan(content, candidates)

            # Step 4: Global ranking and selection
            ranked = rank_link_matches(matches)
            selected = select_links(ranked, self.config.max_links_per_article)

            # Step 5: Rewrite
            rewrite = rewrite_with_links(content, selected)
            deadline.check("returning enhanced content")

            if not is_additive_rewrite(content, rewrite.content):
                logger.error("Rewrite changed text outside link wrappers; returning original content")
                return BlendingResult.unchanged(content)

            logger.info(
                f"Inserted {len(rewrite.applied)} catalog links "
                f"({len(candidates)} candidates, {len(ranked)} suggestions)"
            )
            return BlendingResult(
                original_content=content,
                enhanced_content=rewrite.content,
                inserted_links=rewrite.applied,
                suggestions=ranked,
            )
        except Exception as e:
            logger.error(f"Error enhancing guide content: {e}")
            return BlendingResult.unchanged(content)


def create_catalog_link_blender(
    api_base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    config: Optional[BlendingConfig] = None,
    text_generator=None,
) -> CatalogLinkBlender:
    """
    Factory function to create a blender backed by the catalog HTTP API.

    Args:
        api_base_url: Catalog service base URL (CATALOG_API_URL if None).
        api_key: Optional catalog bearer token (CATALOG_API_KEY if None).
        config: Blending configuration.
        text_generator: Optional text generator, e.g. an LLMClient. Without
            one, keywords come from vocabulary matching.

    Returns:
        Configured CatalogLinkBlender.
    """
    catalog = CatalogSearchClient(api_base_url=api_base_url, api_key=api_key)
    return CatalogLinkBlender(catalog, text_generator=text_generator, config=config)
