"""
Catalog search API client.

Thin HTTP client for the catalog service's similarity search. The
linking engine only needs ``vector_search(query, limit)``; any object
providing it can replace this client.
"""

import logging
import os
from typing import Optional
from urllib.parse import urljoin

import requests

from .models import CatalogItem, SearchResponse

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8787"
VECTOR_SEARCH_PATH = "/api/catalog/vector-search"
GUIDE_SEARCH_PATH = "/api/catalog/guides/search"


class CatalogSearchError(Exception):
    """Raised when a catalog search request fails."""
    pass


class CatalogSearchClient:
    """
    Client for the catalog similarity search endpoints.

    Credentials and endpoint fall back to the CATALOG_API_KEY and
    CATALOG_API_URL environment variables.
    """

    def __init__(
        self,
        api_base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the catalog client.

        Args:
            api_base_url: Base URL of the catalog service.
            api_key: Optional bearer token for authenticated deployments.
            timeout: Request timeout in seconds.
            session: Optional requests session to reuse connections.
        """
        self.api_base_url = api_base_url or os.environ.get("CATALOG_API_URL") or DEFAULT_API_URL
        self.api_key = api_key or os.environ.get("CATALOG_API_KEY")
        self.timeout = timeout
        self._http = session or requests

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _url(self, path: str) -> str:
        return urljoin(self.api_base_url.rstrip("/") + "/", path.lstrip("/"))

    def vector_search(self, query: str, limit: int = 10) -> SearchResponse:
        """
        Search the catalog for items similar to a query.

        Args:
            query: Free-text query.
            limit: Maximum number of items to return.

        Returns:
            SearchResponse with items carrying a similarity score.

        Raises:
            CatalogSearchError: On transport errors, non-2xx responses or
                an unreadable payload.
        """
        try:
            response = self._http.get(
                self._url(VECTOR_SEARCH_PATH),
                params={"q": query, "limit": str(limit)},
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise CatalogSearchError(f"Catalog search failed for '{query}': {e}")

        try:
            payload = response.json()
        except ValueError as e:
            raise CatalogSearchError(f"Catalog search returned invalid JSON for '{query}': {e}")

        return parse_search_payload(payload)

    def search_for_guides(
        self,
        query: str,
        limit: Optional[int] = None,
        category: Optional[str] = None,
        min_rating: Optional[float] = None,
    ) -> SearchResponse:
        """
        Search the guide-oriented catalog endpoint.

        Unlike vector_search this never raises: an unavailable service
        yields an empty response so guide tooling keeps working offline.

        Args:
            query: Free-text query.
            limit: Optional result limit.
            category: Optional category filter.
            min_rating: Optional minimum rating filter.

        Returns:
            SearchResponse, empty when the service is unavailable.
        """
        params = {"q": query}
        if limit:
            params["limit"] = str(limit)
        if category:
            params["category"] = category
        if min_rating:
            params["minRating"] = str(min_rating)

        try:
            response = self._http.get(
                self._url(GUIDE_SEARCH_PATH),
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
            if response.status_code == 404 or response.status_code >= 500:
                logger.warning("Catalog API not available, returning empty results")
                return SearchResponse()
            response.raise_for_status()
            return parse_search_payload(response.json())
        except (requests.RequestException, ValueError, CatalogSearchError) as e:
            logger.warning(f"Error calling catalog guide search for '{query}': {e}")
            return SearchResponse()


    def batch_search_for_guides(
        self,
        queries: list[str],
        limit: Optional[int] = None,
        category: Optional[str] = None,
        min_rating: Optional[float] = None,
    ) -> dict[str, SearchResponse]:
        """
        Run several guide searches.

        Each query degrades on its own, as in search_for_guides, so one
        unavailable query never empties the others.

        Args:
            queries: Free-text queries.
            limit: Optional result limit per query.
            category: Optional category filter.
            min_rating: Optional minimum rating filter.

        Returns:
            Mapping of query to its SearchResponse.
        """
        return {
            query: self.search_for_guides(query, limit=limit, category=category, min_rating=min_rating)
            for query in queries
        }

    def validate(self) -> bool:
        """
        Check that the catalog search endpoint answers.

        Returns:
            True when a one-item test search succeeds, False otherwise.
        """
        try:
            self.vector_search("test", 1)
        except CatalogSearchError as e:
            logger.error(f"Catalog API validation failed: {e}")
            return False
        logger.info("Catalog API connection validated")
        return True


def parse_search_payload(payload) -> SearchResponse:
    """
    Convert a catalog search JSON payload into a SearchResponse.

    Args:
        payload: Decoded JSON with ``items`` and ``total``.

    Returns:
        SearchResponse.

    Raises:
        CatalogSearchError: If the payload is not shaped like a search result.
    """
    if not isinstance(payload, dict):
        raise CatalogSearchError("Catalog search payload is not an object")

    raw_items = payload.get("items") or []
    if not isinstance(raw_items, list):
        raise CatalogSearchError("Catalog search payload 'items' is not a list")

    try:
        items = [CatalogItem.from_dict(raw) for raw in raw_items if isinstance(raw, dict)]
        total = payload.get("total")
        total = int(total) if total is not None else len(items)
    except (TypeError, ValueError, OverflowError) as e:
        raise CatalogSearchError(f"Catalog search payload is malformed: {e}")

    return SearchResponse(items=items, total=total)
