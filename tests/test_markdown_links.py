"""
Tests for markdown link helpers.
"""

from conftest import make_item
from guide_linker.markdown_links import (
    count_links,
    escape_link_target,
    find_link_spans,
    format_catalog_link,
    format_recommendations_list,
    is_inside_span,
    strip_markdown_links,
)
from guide_linker.models import CatalogItem


class TestLinkSpans:

    def test_finds_spans_in_order(self):
        text = "See [a](u1) and [b c](https://x/y)."
        assert find_link_spans(text) == [(4, 11), (16, 34)]
        assert count_links(text) == 2

    def test_image_alt_and_plain_brackets(self):
        assert count_links("[not a link] (nope)") == 0

    def test_is_inside_span(self):
        spans = [(4, 11)]
        assert is_inside_span(5, spans)
        assert is_inside_span(2, spans, length=3)
        assert not is_inside_span(2, spans, length=2)
        assert not is_inside_span(11, spans)


class TestEscapeLinkTarget:

    def test_parentheses_and_spaces_encoded(self):
        assert escape_link_target("https://x/a (b)") == "https://x/a%20%28b%29"

    def test_missing_url_is_hash(self):
        assert escape_link_target(None) == "#"
        assert escape_link_target("") == "#"

    def test_encoded_link_strips_cleanly(self):
        link = f"[tent]({escape_link_target('https://x/tent_(2p)')})"
        assert strip_markdown_links(f"a {link} here") == "a tent here"


class TestStripMarkdownLinks:

    def test_strips_wrappers_keeping_text(self):
        assert strip_markdown_links("Pack a [tent](u) and [stove](#).") == "Pack a tent and stove."

    def test_text_without_links_unchanged(self):
        text = "Nothing [here] (really)"
        assert strip_markdown_links(text) is text


class TestFormatting:
    """Tests for guide-facing link formatting."""

    def test_catalog_link_with_brand_title(self):
        item = make_item("Atmos 65", brand="Osprey", url="https://x/atmos65")
        assert format_catalog_link(item) == '[Atmos 65](https://x/atmos65 "Atmos 65 by Osprey")'

    def test_catalog_link_custom_text_and_missing_url(self):
        item = make_item("Tent")
        assert format_catalog_link(item, "my tent") == '[my tent](# "Tent")'

    def test_recommendations_list(self):
        items = [
            CatalogItem(id=1, name="Atmos 65", brand="Osprey", product_url="https://x/a",
                        extra={"price": 340, "ratingValue": 4.7}),
            CatalogItem(id=2, name="Headlamp"),
        ]

        section = format_recommendations_list(items, title="Pack List")

        assert "## Pack List" in section
        assert "- [Atmos 65](https://x/a) (Osprey) - $340.00 - rated 4.7" in section
        assert "- [Headlamp](#)" in section

    def test_recommendations_list_skips_non_numeric_values(self):
        items = [
            CatalogItem(id=1, name="Atmos 65", product_url="https://x/a",
                        extra={"price": "call for price", "ratingValue": None}),
        ]

        section = format_recommendations_list(items)

        assert "- [Atmos 65](https://x/a)\n" in section
        assert "$" not in section
        assert "rated" not in section

    def test_recommendations_list_empty(self):
        assert format_recommendations_list([]) == ""
