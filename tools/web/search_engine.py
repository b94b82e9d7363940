"""
Result classification engine.

Turns a search query into a ranked, classified list of SearchResult built
from the DuckDuckGo instant-answer payload. Any failure of the remote service
(or a payload that yields nothing) is replaced by a fixed set of manual search
links so the caller always has something to show.
"""

import hashlib
import time
from collections.abc import Iterator
from typing import Any
from urllib.parse import quote

from models.errors import LookoutValidationError, SearchServiceError
from models.lookout import ResultType, SearchOutcome, SearchResult
from orchestrator.error_handling import Operation, recovery_for
from utils.logger import get_logger

from .cache import SessionResultCache
from .classifier import (
    MAX_TITLE_CHARS,
    classify,
    clean_text,
    get_host,
    is_absolute_url,
    split_title,
    youtube_thumbnail,
)
from .duckduckgo_client import DuckDuckGoClient

logger = get_logger(__name__)

MAX_RESULTS = 10

FALLBACK_ERROR = "Search service temporarily unavailable. Here are some manual search options."

# (type, title template, description, url prefix, thumbnail); YouTube first
FALLBACK_LINKS: tuple[tuple[ResultType, str, str, str, str | None], ...] = (
    (
        ResultType.VIDEO,
        'Search "{query}" on YouTube',
        "Find explainer videos and tutorials on YouTube",
        "https://www.youtube.com/results?search_query=",
        "https://www.youtube.com/favicon.ico",
    ),
    (
        ResultType.ARTICLE,
        'Search "{query}" on Wikipedia',
        "Find comprehensive articles and explanations",
        "https://en.wikipedia.org/wiki/Special:Search?search=",
        None,
    ),
    (
        ResultType.LINK,
        'Search "{query}" on DuckDuckGo',
        "General web search results",
        "https://duckduckgo.com/?q=",
        None,
    ),
    (
        ResultType.ARTICLE,
        'Search "{query}" on Stack Overflow',
        "Find technical discussions and solutions",
        "https://stackoverflow.com/search?q=",
        None,
    ),
)


def result_id(url: str) -> str:
    """Deterministic id for a result url."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]


def build_fallback_results(query: str) -> tuple[SearchResult, ...]:
    encoded = quote(query.strip(), safe="")
    results = []
    for result_type, title, description, prefix, thumbnail in FALLBACK_LINKS:
        url = prefix + encoded
        results.append(
            SearchResult(
                id=result_id(url),
                type=result_type,
                title=title.format(query=query.strip()),
                description=description,
                url=url,
                source=get_host(url),
                thumbnail=thumbnail,
            )
        )
    return tuple(results)


def build_fallback_outcome(query: str) -> SearchOutcome:
    return SearchOutcome(
        success=False,
        results=build_fallback_results(query),
        search_query=query,
        error=FALLBACK_ERROR,
        fallback_used=True,
    )


def _iter_topics(topics: Any) -> Iterator[dict]:
    """Yield topic entries, flattening grouped ``Topics`` lists."""
    if not isinstance(topics, list):
        return
    for topic in topics:
        if not isinstance(topic, dict):
            continue
        if isinstance(topic.get("Topics"), list):
            yield from _iter_topics(topic["Topics"])
        else:
            yield topic


def harvest_candidates(payload: dict[str, Any], limit: int = MAX_RESULTS) -> list[dict[str, Any]]:
    """
    Collect raw candidates in priority order: abstract, definition,
    related topics, results. Invalid and duplicate urls are skipped.

    Each candidate is ``{url, text, title, image}``; ``title`` is only set
    for the abstract and definition entries.
    """
    candidates: list[dict[str, Any]] = []
    seen_urls: set[str] = set()

    def add(url: Any, text: Any, title: str | None = None, image: Any = None) -> bool:
        if not isinstance(url, str) or not isinstance(text, str):
            return False
        url = url.strip()
        if not url or not text.strip() or not is_absolute_url(url) or url in seen_urls:
            return False
        seen_urls.add(url)
        candidates.append(
            {
                "url": url,
                "text": text,
                "title": title,
                "image": image if isinstance(image, str) and image.strip() else None,
            }
        )
        return len(candidates) >= limit

    heading = payload.get("Heading")
    abstract_title = heading.strip() if isinstance(heading, str) and heading.strip() else "Information"
    if add(payload.get("AbstractURL"), payload.get("AbstractText"), abstract_title, payload.get("Image")):
        return candidates
    if add(payload.get("DefinitionURL"), payload.get("Definition"), "Definition"):
        return candidates

    for topic in _iter_topics(payload.get("RelatedTopics")):
        if add(topic.get("FirstURL"), topic.get("Text")):
            return candidates

    results = payload.get("Results")
    for item in results if isinstance(results, list) else []:
        if isinstance(item, dict) and add(item.get("FirstURL"), item.get("Text")):
            return candidates

    return candidates


def build_result(candidate: dict[str, Any]) -> SearchResult | None:
    url = candidate["url"]
    text = candidate["text"]

    if candidate["title"]:
        title = clean_text(candidate["title"], limit=None)
        description = clean_text(text)
        if len(title) > MAX_TITLE_CHARS:
            title = title[: MAX_TITLE_CHARS - 3].rstrip() + "..."
    else:
        title, description = split_title(text)

    if not title:
        return None

    result_type = classify(url, text)
    thumbnail = candidate["image"]
    if thumbnail is None and result_type == ResultType.VIDEO:
        thumbnail = youtube_thumbnail(url)

    return SearchResult(
        id=result_id(url),
        type=result_type,
        title=title,
        description=description,
        url=url,
        source=get_host(url),
        thumbnail=thumbnail,
    )


def rank_results(results: list[SearchResult], prioritize_videos: bool) -> tuple[SearchResult, ...]:
    """Stable partition (videos first when requested), truncated to MAX_RESULTS."""
    if prioritize_videos:
        results = [r for r in results if r.is_video] + [r for r in results if not r.is_video]
    return tuple(results[:MAX_RESULTS])


class ResultClassificationEngine:
    """
    Search entry point used by the pipeline and the HTTP route.

    Reads and writes ``cache`` (when given) so that a repeated
    (query, prioritize_videos) pair hits the remote service once per session.
    """

    def __init__(self, client: DuckDuckGoClient, cache: SessionResultCache | None = None):
        self.client = client
        self.cache = cache

    async def search(
        self, query: str, prioritize_videos: bool = False, refresh: bool = False
    ) -> SearchOutcome:
        """
        Search and classify results for ``query``.

        ``refresh`` ignores a cached outcome for this query (used by retry).

        Never raises for service failures; those yield the fallback outcome.
        Cancellation propagates.

        Raises:
            LookoutValidationError: If ``query`` is blank
        """
        if not isinstance(query, str) or not query.strip():
            raise LookoutValidationError("Query parameter is required and must be a non-empty string")

        query = query.strip()
        if self.cache is None:
            return await self._search_remote(query, prioritize_videos)
        return await self.cache.get_or_compute(
            query,
            prioritize_videos,
            lambda: self._search_remote(query, prioritize_videos),
            refresh=refresh,
        )

    async def _search_remote(self, query: str, prioritize_videos: bool) -> SearchOutcome:
        start_time = time.time()

        try:
            payload = await self.client.fetch(query)
        except SearchServiceError as e:
            return self._fallback(query, e)

        results = [r for r in map(build_result, harvest_candidates(payload)) if r is not None]
        if not results:
            return self._fallback(query, SearchServiceError("No results in search response"))

        ranked = rank_results(results, prioritize_videos)
        logger.info(
            "Search completed",
            extra={
                "extra_fields": {
                    "query": query[:120],
                    "prioritize_videos": prioritize_videos,
                    "result_count": len(ranked),
                    "video_count": sum(1 for r in ranked if r.is_video),
                    "latency_ms": int((time.time() - start_time) * 1000),
                }
            },
        )
        return SearchOutcome(success=True, results=ranked, search_query=query)

    @staticmethod
    def _fallback(query: str, error: SearchServiceError) -> SearchOutcome:
        recovery = recovery_for(Operation.SEARCH, error)
        logger.log(
            recovery.log_level,
            "Search failed, using manual search links",
            extra={
                "extra_fields": {
                    "query": query[:120],
                    "category": recovery.category,
                    "status_code": error.status_code,
                    "error": str(error)[:200],
                }
            },
        )
        return build_fallback_outcome(query)

    async def aclose(self):
        await self.client.aclose()
