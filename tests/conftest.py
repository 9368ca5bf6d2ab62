"""
Pytest fixtures and configuration for Guide Linker tests.
"""

import pytest

from guide_linker.models import CatalogItem, SearchResponse


class FakeCatalog:
    """In-memory catalog search returning canned items per query."""

    def __init__(self, results=None, failing=None, default=None):
        self.results = results or {}
        self.failing = set(failing or [])
        self.default = default or []
        self.calls = []

    def vector_search(self, query, limit=10):
        self.calls.append((query, limit))
        if query in self.failing:
            raise RuntimeError(f"search backend unavailable for {query}")
        items = self.results.get(query, self.default)
        return SearchResponse(items=list(items)[:limit], total=len(items))


class FakeTextGenerator:
    """Text generator returning a fixed response, or raising."""

    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.prompts = []

    def generate(self, prompt, temperature=0.3):
        self.prompts.append((prompt, temperature))
        if self.error is not None:
            raise self.error
        return self.response


def make_item(name, item_id=1, brand=None, model=None, categories=(), similarity=0.9, url=None):
    """Build a catalog item for tests."""
    return CatalogItem(
        id=item_id,
        name=name,
        brand=brand,
        model=model,
        categories=tuple(categories),
        product_url=url,
        similarity=similarity,
    )


@pytest.fixture
def atmos_item() -> CatalogItem:
    """Osprey Atmos 65 backpack."""
    return make_item(
        "Atmos 65",
        item_id=65,
        brand="Osprey",
        similarity=0.92,
        url="https://x/atmos65",
    )


@pytest.fixture
def atmos_content() -> str:
    return "I love my new Osprey Atmos 65 backpack."


@pytest.fixture
def sample_guide() -> str:
    """Sample guide text mentioning several pieces of gear."""
    return (
        "# Weekend on the Ridge\n\n"
        "Before you leave, check your tent and pack a warm sleeping bag. "
        "Nights drop below freezing, so a down jacket is worth the weight.\n\n"
        "## On the trail\n\n"
        "Trekking poles save your knees on the descent, and a headlamp is "
        "essential if you start before dawn. Refill your water bottle at the creek."
    )

