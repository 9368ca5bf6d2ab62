"""
Ranking and selection of link matches.

A match is scored as catalog similarity times the confidence of its best
insertion point. The full ranking is reported as suggestions; the top
matches up to the configured cap are written into the content.
"""

from .models import LinkMatch


def link_score(match: LinkMatch) -> float:
    """Combined relevance of a match (0 when it has no insertion point)."""
    top = match.top_point
    if top is None:
        return 0.0
    return match.item.similarity * top.confidence


def rank_link_matches(matches: list[LinkMatch]) -> list[LinkMatch]:
    """Sort matches by score, best first. Equal scores keep their input order."""
    return sorted(matches, key=link_score, reverse=True)


def select_links(ranked: list[LinkMatch], max_links: int) -> list[LinkMatch]:
    """
    Take the best matches up to max_links, one per catalog item.

    Args:
        ranked: Matches sorted by rank_link_matches.
        max_links: Maximum number of links to insert.

    Returns:
        Selected matches in rank order.
    """
    selected = []
    seen = set()
    for match in ranked:
        if len(selected) >= max_links:
            break
        if match.top_point is None or match.item.identity in seen:
            continue
        seen.add(match.item.identity)
        selected.append(match)
    return selected
