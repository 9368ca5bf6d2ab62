"""
Data models for Guide Linker.

This module defines the data structures passed between the linking
stages. Everything here is created fresh for one enhancement call and
discarded afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class GuideMetadata:
    """Optional guide metadata used to steer keyword extraction."""
    title: Optional[str] = None
    categories: list[str] = field(default_factory=list)
    difficulty: Optional[str] = None

    @classmethod
    def from_frontmatter(cls, frontmatter: Optional[dict]) -> "GuideMetadata":
        """Build metadata from a parsed frontmatter dictionary."""
        if not frontmatter:
            return cls()
        categories = frontmatter.get("categories") or []
        if isinstance(categories, str):
            categories = [categories]
        return cls(
            title=frontmatter.get("title"),
            categories=[str(c) for c in categories],
            difficulty=frontmatter.get("difficulty"),
        )


@dataclass(frozen=True)
class MentionContext:
    """A gear phrase found in the content with its surrounding text."""
    phrase: str
    context: str
    position: int


@dataclass
class SemanticAnalysis:
    """Keywords, gear mentions and contexts extracted from guide content."""
    primary_keywords: list[str] = field(default_factory=list)
    gear_mentions: list[str] = field(default_factory=list)
    contexts: list[MentionContext] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to search the catalog for."""
        return not self.primary_keywords and not self.gear_mentions


@dataclass(frozen=True)
class AnalysisOutcome:
    """
    Result of AI-assisted analysis: either an analysis or a degraded marker.

    A degraded outcome carries the reason the AI path could not be used;
    callers switch to deterministic extraction instead of handling an error.
    """
    analysis: Optional[SemanticAnalysis] = None
    reason: str = ""

    @classmethod
    def ok(cls, analysis: SemanticAnalysis) -> "AnalysisOutcome":
        return cls(analysis=analysis)

    @classmethod
    def degraded(cls, reason: str) -> "AnalysisOutcome":
        return cls(analysis=None, reason=reason)

    @property
    def is_degraded(self) -> bool:
        return self.analysis is None


@dataclass(frozen=True)
class CatalogItem:
    """
    A catalog product returned by similarity search.

    Only the fields the linker reads are typed; everything else the
    catalog service sends is kept untouched in ``extra``.
    """
    id: Optional[int]
    name: str
    brand: Optional[str] = None
    model: Optional[str] = None
    categories: tuple[str, ...] = ()
    product_url: Optional[str] = None
    similarity: float = 0.0
    extra: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_dict(cls, data: dict) -> "CatalogItem":
        """Build an item from a catalog service payload (camelCase keys)."""
        known = {"id", "name", "brand", "model", "categories", "productUrl", "product_url", "similarity"}
        categories = data.get("categories") or ()
        if isinstance(categories, str):
            categories = (categories,)
        return cls(
            id=data.get("id"),
            name=str(data.get("name") or ""),
            brand=data.get("brand") or None,
            model=data.get("model") or None,
            categories=tuple(str(c) for c in categories if c),
            product_url=data.get("productUrl") or data.get("product_url") or None,
            similarity=float(data.get("similarity") or 0.0),
            extra={k: v for k, v in data.items() if k not in known},
        )

    @property
    def identity(self) -> Any:
        """Key used to decide whether two search hits are the same product."""
        if self.id is not None:
            return self.id
        return (self.name.lower(), (self.brand or "").lower())


@dataclass
class SearchResponse:
    """Response of a catalog similarity search."""
    items: list[CatalogItem] = field(default_factory=list)
    total: int = 0


@dataclass(frozen=True)
class InsertionPoint:
    """A place in the original content where a link could be inserted."""
    position: int  # Absolute offset in the original content
    context: str  # Window of text around the position
    confidence: float  # 0.0 - 1.0
    link_text: str  # Text to turn into the link


@dataclass
class LinkMatch:
    """A catalog item together with its scored insertion points."""
    item: CatalogItem
    contextual_phrases: list[str] = field(default_factory=list)
    insertion_points: list[InsertionPoint] = field(default_factory=list)  # Sorted by confidence, descending

    @property
    def top_point(self) -> Optional[InsertionPoint]:
        """Highest-confidence insertion point, if any."""
        return self.insertion_points[0] if self.insertion_points else None


@dataclass(frozen=True)
class InsertedLink:
    """A link that was actually written into the enhanced content."""
    item: CatalogItem
    link_text: str
    context: str
    position: int


@dataclass
class BlendingResult:
    """Result of one enhancement call."""
    original_content: str
    enhanced_content: str
    inserted_links: list[InsertedLink] = field(default_factory=list)
    suggestions: list[LinkMatch] = field(default_factory=list)

    @classmethod
    def unchanged(cls, content: str) -> "BlendingResult":
        """The no-op result: content returned exactly as given."""
        return cls(original_content=content, enhanced_content=content)

    @property
    def link_count(self) -> int:
        return len(self.inserted_links)

    @property
    def was_enhanced(self) -> bool:
        return self.enhanced_content != self.original_content
