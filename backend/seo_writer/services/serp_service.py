"""
SERP Service - Fetch and normalize organic search results from SerpAPI
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from seo_writer.config import (
    MAX_SEARCH_RESULTS,
    SERP_LANGUAGE,
    SERP_RESULTS_COUNT,
    SERP_TIMEOUT,
    SERPAPI_KEY,
    SERPAPI_URL,
)
from seo_writer.errors import NetworkError, PreconditionError, UpstreamError
from seo_writer.models.search import SearchResultItem

logger = logging.getLogger(__name__)

# Upstream payloads carry the result list under one of these keys
RESULT_LIST_FIELDS = ("results", "organic_results")


def normalize_results(payload: Any, limit: int = MAX_SEARCH_RESULTS) -> List[SearchResultItem]:
    """
    Normalize either {"results": [...]} or {"organic_results": [...]} into
    ranked items. Keeps upstream order, truncates to `limit`, and ranks 1..n
    by position.
    """
    items: List[Any] = []
    if isinstance(payload, dict):
        for field in RESULT_LIST_FIELDS:
            if isinstance(payload.get(field), list):
                items = payload[field]
                break

    normalized = []
    for i, raw in enumerate(items[:limit]):
        entry = raw if isinstance(raw, dict) else {}
        normalized.append(SearchResultItem(
            rank=i + 1,
            title=str(entry.get("title") or ""),
            url=str(entry.get("link") or ""),
        ))
    return normalized


class SERPService:
    """Service for fetching SERP data"""

    def __init__(self, serpapi_key: Optional[str] = None):
        self.serpapi_key = SERPAPI_KEY if serpapi_key is None else serpapi_key

    def fetch_serp_data(self, query: str) -> Dict:
        """
        Fetch raw SERP data from SerpAPI

        Args:
            query: Free-text search query

        Returns:
            Upstream JSON payload

        Raises:
            NetworkError: the request could not be completed
            UpstreamError: SerpAPI answered with a non-success status
        """
        if not self.serpapi_key:
            raise PreconditionError("SERPAPI_KEY not configured")

        params = {
            "engine": "google",
            "q": query,
            "hl": SERP_LANGUAGE,
            "num": SERP_RESULTS_COUNT,
            "api_key": self.serpapi_key,
        }

        try:
            response = requests.get(SERPAPI_URL, params=params, timeout=SERP_TIMEOUT)
        except requests.exceptions.RequestException as e:
            logger.warning("SERP request failed for %r: %s", query, e)
            raise NetworkError(f"Error fetching SERP data: {e}") from e

        if not response.ok:
            logger.warning("SerpAPI returned HTTP %s for %r", response.status_code, query)
            raise UpstreamError(
                f"SERP fetch failed: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError("SERP response was not valid JSON", status_code=502, body=response.text) from e

    def extract_results(self, serp_data: Dict) -> List[Dict[str, str]]:
        """Extract the {title, link} pairs the search endpoint returns"""
        organic_results = serp_data.get("organic_results") or []
        return [
            {"title": result.get("title") or "", "link": result.get("link") or ""}
            for result in organic_results
            if isinstance(result, dict)
        ]

    def search(self, query: str) -> List[SearchResultItem]:
        """
        Search and return at most 10 ranked results.
        An empty query returns [] without calling SerpAPI.
        """
        if not query or not query.strip():
            return []

        serp_data = self.fetch_serp_data(query)
        results = normalize_results(serp_data)
        logger.info("SERP search %r returned %d results", query, len(results))
        return results


def get_serp_service() -> SERPService:
    """Get SERP service instance"""
    return SERPService()
