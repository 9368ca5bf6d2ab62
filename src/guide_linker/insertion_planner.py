"""
Insertion point planning for catalog links.

For each catalog candidate this module scans the original content for
literal or near-literal mentions (item name, brand, categories, and
inflected forms such as "backpacking" for "backpack") and scores every
mention as a possible link position.

Confidence for a mention:
- starts at the candidate's catalog similarity
- +0.2 when the matched text is exactly the item name
- +0.1 when the brand appears in the surrounding window
- +0.1 when one of the item's categories appears in the window
- -0.2 when the window already holds more than two markdown links
- clamped to [0, 1]; points at or below the minimum are dropped

Mentions that sit inside an existing markdown link are never offered,
so re-running the linker over enhanced content does not nest links.
"""

import logging
import re
from typing import Optional

from .config import BlendingConfig
from .markdown_links import count_links, find_link_spans, is_inside_span
from .models import CatalogItem, InsertionPoint, LinkMatch

logger = logging.getLogger(__name__)


EXACT_NAME_BONUS = 0.2
BRAND_CONTEXT_BONUS = 0.1
CATEGORY_CONTEXT_BONUS = 0.1
LINK_DENSITY_PENALTY = 0.2
LINK_DENSITY_LIMIT = 2  # More links than this in the window triggers the penalty
LINK_TEXT_PREFIX_CHARS = 5


def item_keywords(item: CatalogItem) -> list[str]:
    """Lowercased name, brand and categories of an item, de-duplicated."""
    candidates = [item.name, item.brand or "", *item.categories]
    keywords = []
    for value in candidates:
        value = (value or "").strip().lower()
        if value and value not in keywords:
            keywords.append(value)
    return keywords


def build_match_patterns(keywords: list[str]) -> list[re.Pattern]:
    """
    Build the mention patterns for an item's keywords.

    The first pattern matches any keyword as a whole word. The rest match
    each keyword followed by trailing word characters, which catches
    inflected and compound mentions.
    """
    if not keywords:
        return []
    escaped = [re.escape(keyword) for keyword in keywords]
    patterns = [re.compile(r"\b(?:" + "|".join(escaped) + r")\b", re.IGNORECASE)]
    patterns.extend(re.compile(r"\b" + keyword + r"\w*\b", re.IGNORECASE) for keyword in escaped)
    return patterns


def calculate_insertion_confidence(context: str, item: CatalogItem, matched_text: str) -> float:
    """
    Score how appropriate a link is for one mention.

    Args:
        context: Window of content around the mention.
        item: Catalog candidate.
        matched_text: The text that matched.

    Returns:
        Confidence in [0, 1].
    """
    confidence = item.similarity
    context_lower = context.lower()

    if matched_text.lower() == item.name.lower():
        confidence += EXACT_NAME_BONUS

    if item.brand and item.brand.lower() in context_lower:
        confidence += BRAND_CONTEXT_BONUS

    if any(category.lower() in context_lower for category in item.categories if category):
        confidence += CATEGORY_CONTEXT_BONUS

    if count_links(context) > LINK_DENSITY_LIMIT:
        confidence -= LINK_DENSITY_PENALTY

    return max(0.0, min(1.0, confidence))


def generate_link_text(item: CatalogItem, matched_text: str) -> str:
    """
    Choose the visible text for a link.

    The author's wording is kept when it starts like the item name;
    otherwise "brand model" is used when both exist, else the item name.
    """
    name_prefix = item.name.lower()[:LINK_TEXT_PREFIX_CHARS]
    if name_prefix and matched_text.lower().startswith(name_prefix):
        return matched_text

    if item.brand and item.model:
        return f"{item.brand} {item.model}"

    return item.name


def generate_contextual_phrases(item: CatalogItem) -> list[str]:
    """Alternate names an item may be referred to by."""
    phrases = [item.name]
    if item.brand:
        phrases.append(item.brand)
        if item.model:
            phrases.append(f"{item.brand} {item.model}")
    phrases.extend(item.categories)

    unique = []
    for phrase in phrases:
        if phrase and phrase not in unique:
            unique.append(phrase)
    return unique


class InsertionPlanner:
    """Finds and scores link positions for catalog candidates."""

    def __init__(self, config: Optional[BlendingConfig] = None):
        self.config = config or BlendingConfig()

    def _context_window(self, content: str, position: int) -> str:
        half = self.config.context_window_size // 2
        return content[max(0, position - half):min(len(content), position + half)]

    def find_insertion_points(
        self,
        content: str,
        item: CatalogItem,
        link_spans: Optional[list[tuple[int, int]]] = None,
    ) -> list[InsertionPoint]:
        """
        Find scored insertion points for one item.

        Args:
            content: Original content.
            item: Catalog candidate.
            link_spans: Spans of existing links in content (computed if None).

        Returns:
            Insertion points above the minimum confidence, one per position,
            sorted by confidence descending (earlier position first on ties).
        """
        if link_spans is None:
            link_spans = find_link_spans(content)

        best_by_position: dict[int, InsertionPoint] = {}
        for pattern in build_match_patterns(item_keywords(item)):
            for match in pattern.finditer(content):
                matched_text = match.group(0)
                position = match.start()
                if is_inside_span(position, link_spans, len(matched_text)):
                    continue

                context = self._context_window(content, position)
                confidence = calculate_insertion_confidence(context, item, matched_text)
                if confidence <= self.config.min_insertion_confidence:
                    continue

                existing = best_by_position.get(position)
                if existing is None or confidence > existing.confidence:
                    best_by_position[position] = InsertionPoint(
                        position=position,
                        context=context,
                        confidence=confidence,
                        link_text=generate_link_text(item, matched_text),
                    )

        return sorted(best_by_position.values(), key=lambda p: (-p.confidence, p.position))

    def plan(self, content: str, candidates: list[CatalogItem]) -> list[LinkMatch]:
        """
        Build link matches for all candidates.

        Args:
            content: Original content.
            candidates: Catalog candidates, best first.

        Returns:
            One LinkMatch per candidate that has at least one insertion point.
        """
        link_spans = find_link_spans(content)
        matches = []
        for item in candidates:
            points = self.find_insertion_points(content, item, link_spans)
            if not points:
                logger.debug(f"No insertion point for catalog item '{item.name}'")
                continue
            matches.append(LinkMatch(
                item=item,
                contextual_phrases=generate_contextual_phrases(item),
                insertion_points=points,
            ))
        return matches
