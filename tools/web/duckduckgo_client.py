"""Async client for the DuckDuckGo instant-answer API."""

import asyncio
from typing import Any

import httpx

from models.errors import SearchServiceError
from utils.logger import get_logger

logger = get_logger(__name__)

DUCKDUCKGO_API_URL = "https://api.duckduckgo.com/"
DEFAULT_TIMEOUT_S = 15.0
DEFAULT_USER_AGENT = "Lookout-ResearchAgent/1.0"


class DuckDuckGoClient:
    """
    Thin wrapper over one GET to the instant-answer endpoint.

    Exactly one request per ``fetch``; no retries. Every failure (transport,
    non-2xx status, unparseable body) surfaces as SearchServiceError so the
    engine can switch to fallback links.
    """

    def __init__(
        self,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        base_url: str = DUCKDUCKGO_API_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout_s = timeout_s
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            timeout=timeout_s,
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            transport=transport,
        )

    async def fetch(self, query: str) -> dict[str, Any]:
        """
        Fetch the instant-answer payload for ``query``.

        Raises:
            SearchServiceError: On timeout, network failure, HTTP error or bad JSON
        """
        params = {"q": query, "format": "json", "no_html": "1", "skip_disambig": "1"}

        try:
            response = await asyncio.wait_for(
                self._client.get(self.base_url, params=params), timeout=self.timeout_s
            )
        except asyncio.TimeoutError as e:
            raise SearchServiceError(f"Search request timed out after {self.timeout_s}s") from e
        except httpx.TimeoutException as e:
            raise SearchServiceError(f"Search request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise SearchServiceError(f"Network error: {e}") from e

        if response.status_code < 200 or response.status_code >= 300:
            raise SearchServiceError(
                f"Search API error: {response.status_code}", status_code=response.status_code
            )

        try:
            payload = response.json() if response.content else {}
        except ValueError as e:
            raise SearchServiceError("Search API returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise SearchServiceError("Search API returned an unexpected payload")

        topics = payload.get("RelatedTopics")
        results = payload.get("Results")
        logger.debug(
            "Instant-answer payload received",
            extra={
                "extra_fields": {
                    "query": query[:120],
                    "status_code": response.status_code,
                    "related_topics": len(topics) if isinstance(topics, list) else 0,
                    "results": len(results) if isinstance(results, list) else 0,
                }
            },
        )
        return payload

    async def aclose(self):
        await self._client.aclose()
