"""
Guide Linker

Blends links to catalog products into outdoor guide content:
- Extracts gear keywords from guide text (AI-assisted with a vocabulary fallback)
- Finds matching catalog items through similarity search
- Inserts non-overlapping markdown links without altering the guide's text
"""

__version__ = "1.0.0"
__author__ = "Guide Linker Team"

from .config import BlendingConfig

from .models import (
    AnalysisOutcome,
    BlendingResult,
    CatalogItem,
    GuideMetadata,
    InsertedLink,
    InsertionPoint,
    LinkMatch,
    MentionContext,
    SearchResponse,
    SemanticAnalysis,
)

from .deadline import Deadline, DeadlineExceeded

# Collaborators
from .llm_client import LLMClient, LLMClientError, create_llm_client
from .catalog_client import CatalogSearchClient, CatalogSearchError

# Pipeline stages
from .keyword_extractor import (
    KeywordExtractor,
    extract_basic_keywords,
    extract_json_object,
    parse_analysis_response,
)
from .aggregator import CandidateAggregator, build_search_queries, merge_candidates
from .insertion_planner import (
    InsertionPlanner,
    calculate_insertion_confidence,
    generate_contextual_phrases,
    generate_link_text,
)
from .link_selector import link_score, rank_link_matches, select_links
from .rewriter import RewriteResult, is_additive_rewrite, rewrite_with_links

# Orchestrator
from .blender import CatalogLinkBlender, create_catalog_link_blender

# Markdown helpers and reporting
from .markdown_links import (
    escape_link_target,
    format_catalog_link,
    format_recommendations_list,
    strip_markdown_links,
)
from .report import EnhancementOutcome, EnhancementReport, build_report, render_report

__all__ = [
    # Configuration
    "BlendingConfig",
    # Models
    "AnalysisOutcome",
    "BlendingResult",
    "CatalogItem",
    "GuideMetadata",
    "InsertedLink",
    "InsertionPoint",
    "LinkMatch",
    "MentionContext",
    "SearchResponse",
    "SemanticAnalysis",
    # Deadline
    "Deadline",
    "DeadlineExceeded",
    # Collaborators
    "LLMClient",
    "LLMClientError",
    "create_llm_client",
    "CatalogSearchClient",
    "CatalogSearchError",
    # Keyword extraction
    "KeywordExtractor",
    "extract_basic_keywords",
    "extract_json_object",
    "parse_analysis_response",
    # Candidate aggregation
    "CandidateAggregator",
    "build_search_queries",
    "merge_candidates",
    # Insertion planning
    "InsertionPlanner",
    "calculate_insertion_confidence",
    "generate_contextual_phrases",
    "generate_link_text",
    # Selection
    "link_score",
    "rank_link_matches",
    "select_links",
    # Rewriting
    "RewriteResult",
    "is_additive_rewrite",
    "rewrite_with_links",
    # Orchestrator
    "CatalogLinkBlender",
    "create_catalog_link_blender",
    # Markdown helpers
    "escape_link_target",
    "format_catalog_link",
    "format_recommendations_list",
    "strip_markdown_links",
    # Reporting
    "EnhancementOutcome",
    "EnhancementReport",
    "build_report",
    "render_report",
]
