"""
Markdown link helpers.

Finding, stripping and formatting ``[text](url)`` links. The planner uses
the spans to measure link density and to avoid linking inside existing
links; the rewriter uses them to verify a rewrite only added wrappers.
"""

import math
import re
from typing import Optional

from .models import CatalogItem

# [visible text](target) - the target may carry an optional "title"
MARKDOWN_LINK_PATTERN = re.compile(r"\[([^\[\]]*)\]\(([^()]*)\)")


def find_link_spans(text: str) -> list[tuple[int, int]]:
    """
    Return (start, end) offsets of every markdown link in text.

    Args:
        text: Markdown text.

    Returns:
        List of half-open spans in document order.
    """
    return [(m.start(), m.end()) for m in MARKDOWN_LINK_PATTERN.finditer(text)]


def count_links(text: str) -> int:
    """Count markdown links in text."""
    return len(MARKDOWN_LINK_PATTERN.findall(text))


def is_inside_span(position: int, spans: list[tuple[int, int]], length: int = 1) -> bool:
    """Check whether [position, position + length) overlaps any span."""
    end = position + max(length, 1)
    return any(start < end and position < stop for start, stop in spans)


def escape_link_target(url: Optional[str]) -> str:
    """
    Make a URL safe to use as a markdown link target.

    Parentheses are percent-encoded so the target cannot close the link
    early. A missing URL becomes "#".
    """
    if not url:
        return "#"
    return url.replace("(", "%28").replace(")", "%29").replace(" ", "%20")


def strip_markdown_links(text: str) -> str:
    """
    Replace every ``[text](url)`` with its visible text.

    Args:
        text: Markdown text.

    Returns:
        Text with link wrappers removed.
    """
    if not text or "](" not in text:
        return text
    return MARKDOWN_LINK_PATTERN.sub(r"\1", text)


def format_catalog_link(item: CatalogItem, link_text: Optional[str] = None) -> str:
    """
    Format a catalog item as a markdown link with a descriptive title.

    Args:
        item: Catalog item to link.
        link_text: Visible text. Defaults to the item name.

    Returns:
        Markdown link such as ``[Atmos 65](https://... "Atmos 65 by Osprey")``.
    """
    display_text = link_text or item.name
    brand_info = f" by {item.brand}" if item.brand else ""
    title = f"{item.name}{brand_info}".replace('"', "'")
    return f'[{display_text}]({escape_link_target(item.product_url)} "{title}")'


def _as_number(value) -> Optional[float]:
    """Passthrough catalog value as a finite float, or None."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def format_recommendations_list(
    items: list[CatalogItem],
    title: str = "Recommended Gear",
) -> str:
    """
    Build a markdown "recommended gear" section for a guide.

    Price and rating are read from the item's passthrough fields
    (``price`` and ``ratingValue``) when the catalog supplied them.

    Args:
        items: Catalog items to list.
        title: Section heading.

    Returns:
        Markdown section, or an empty string when there are no items.
    """
    if not items:
        return ""

    lines = [f"\n## {title}\n"]
    for item in items:
        brand_info = f" ({item.brand})" if item.brand else ""
        price = _as_number(item.extra.get("price"))
        rating = _as_number(item.extra.get("ratingValue"))
        price_info = f" - ${price:.2f}" if price else ""
        rating_info = f" - rated {rating:.1f}" if rating else ""
        lines.append(
            f"- [{item.name}]({escape_link_target(item.product_url)}){brand_info}{price_info}{rating_info}"
        )
    return "\n".join(lines) + "\n"
