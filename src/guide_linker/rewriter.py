"""
Content rewriting with markdown links.

Applies the selected insertions to the content. Each insertion wraps
text that already exists in the content in ``[text](url)``, so the
rewrite only ever adds link syntax.

Insertions are applied from the highest position to the lowest. An
edit changes the string only at and after its own position, so working
backwards keeps every lower position valid for the edits still to come.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from .markdown_links import escape_link_target, find_link_spans, is_inside_span, strip_markdown_links
from .models import InsertedLink, LinkMatch

logger = logging.getLogger(__name__)


@dataclass
class RewriteResult:
    """Rewritten content and the links that were applied, in rank order."""
    content: str
    applied: list[InsertedLink] = field(default_factory=list)


def locate_link_text(text: str, link_text: str, position: int) -> Optional[tuple[int, int]]:
    """
    Find link_text at or after position, case-insensitively.

    Occurrences inside an existing markdown link are skipped.

    Args:
        text: Current content.
        link_text: Text to find.
        position: Offset to start searching from.

    Returns:
        (start, end) of the occurrence, or None if there is none.
    """
    if not link_text:
        return None

    pattern = re.compile(re.escape(link_text), re.IGNORECASE)
    spans = find_link_spans(text)
    search_from = max(0, position)
    while True:
        match = pattern.search(text, search_from)
        if match is None:
            return None
        if not is_inside_span(match.start(), spans, match.end() - match.start()):
            return match.start(), match.end()
        search_from = match.start() + 1


def rewrite_with_links(content: str, selected: list[LinkMatch]) -> RewriteResult:
    """
    Insert links for the selected matches.

    Args:
        content: Original content.
        selected: Matches to link, in rank order.

    Returns:
        RewriteResult. When no insertion succeeds the content is the
        original string, untouched.
    """
    planned = []
    for rank, match in enumerate(selected):
        point = match.top_point
        if point is None:
            continue
        planned.append((point.position, rank, match, point))

    # Descending position; on equal positions the better-ranked match goes first
    planned.sort(key=lambda entry: (-entry[0], entry[1]))

    enhanced = content
    applied = []
    wrappers = []  # (offset in current text, characters added)
    for position, rank, match, point in planned:
        found = locate_link_text(enhanced, point.link_text, position)
        if found is None:
            logger.debug(
                f"Link text '{point.link_text}' not found after position {position}, skipping"
            )
            continue

        start, end = found
        visible_text = enhanced[start:end]
        link = f"[{visible_text}]({escape_link_target(match.item.product_url)})"
        enhanced = enhanced[:start] + link + enhanced[end:]

        original_start = start - sum(added for offset, added in wrappers if offset < start)
        added = len(link) - len(visible_text)
        wrappers = [(offset + added if offset > start else offset, size) for offset, size in wrappers]
        wrappers.append((start, added))
        applied.append((rank, InsertedLink(
            item=match.item,
            link_text=visible_text,
            context=point.context,
            position=original_start,
        )))

    if not applied:
        return RewriteResult(content=content)

    applied.sort(key=lambda entry: entry[0])
    return RewriteResult(content=enhanced, applied=[link for _, link in applied])


def is_additive_rewrite(original: str, enhanced: str) -> bool:
    """
    Check that enhanced differs from original only by link wrappers.

    Stripping every markdown link from both texts must give the same
    text; anything else means characters were lost, duplicated or moved.
    """
    if enhanced == original:
        return True
    return strip_markdown_links(enhanced) == strip_markdown_links(original)
