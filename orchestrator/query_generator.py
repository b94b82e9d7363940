"""
Search query generation.

Rewrites a user's question (plus optional highlighted context) into a concise
web search query using the configured AI provider. The provider call is raced
against a timeout; every failure degrades to the original question so the
pipeline always has something to search for.
"""

import asyncio
import time
from dataclasses import dataclass

from api.base_client import BaseAIClient
from models.errors import LookoutValidationError, ProviderError
from models.lookout import GeneratedQuery
from orchestrator.error_handling import Operation, recovery_for
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_MS = 10000

PROMPT_TEMPLATE = """Given this highlighted text and user question, suggest the best search query to find relevant information. Focus on finding explainer videos from YouTube and informative articles.

Highlighted text: '{context}'
User question: '{question}'

Provide only the search query, nothing else."""


@dataclass(frozen=True)
class QueryGenerated:
    search_query: str


@dataclass(frozen=True)
class QueryFallback:
    search_query: str
    reason: str  # "timeout" | "provider-error" | "empty-response"


QueryGenerationResult = QueryGenerated | QueryFallback


def build_prompt(question: str, context: str | None = None) -> str:
    return PROMPT_TEMPLATE.format(context=context or "None", question=question)


class QueryGenerator:
    """Turns (question, context) into a search query with timeout and fallback."""

    def __init__(self, client: BaseAIClient, default_timeout_ms: int = DEFAULT_TIMEOUT_MS):
        self.client = client
        self.default_timeout_ms = default_timeout_ms

    async def generate(
        self, question: str, context: str | None = None, timeout_ms: int | None = None
    ) -> GeneratedQuery:
        """
        Generate a search query for ``question``.

        Never raises for provider failures: a timeout, provider error or empty
        answer yields ``used_fallback=True`` with the trimmed question as the
        query. Cancelling the awaiting task cancels the provider request.

        Raises:
            LookoutValidationError: If ``question`` is blank
        """
        if not question or not question.strip():
            raise LookoutValidationError("Question must be a non-empty string")

        timeout_ms = self.default_timeout_ms if timeout_ms is None else timeout_ms
        result = await self.attempt(question, context, timeout_ms)

        if isinstance(result, QueryFallback):
            return GeneratedQuery(
                original_question=question,
                search_query=result.search_query,
                used_fallback=True,
                error=result.reason,
            )
        return GeneratedQuery(
            original_question=question, search_query=result.search_query, used_fallback=False
        )

    async def attempt(
        self, question: str, context: str | None, timeout_ms: int
    ) -> QueryGenerationResult:
        """Issue exactly one provider request and classify its outcome."""
        prompt = build_prompt(question, context)
        fallback_query = question.strip()
        start_time = time.time()

        try:
            response = await asyncio.wait_for(
                self.client.get_completion(prompt), timeout=max(timeout_ms, 0) / 1000
            )
        except asyncio.TimeoutError:
            return self._fallback(fallback_query, ProviderError("AI query generation timeout", "timeout"))
        except Exception as e:
            return self._fallback(fallback_query, ProviderError(str(e) or type(e).__name__))

        if response.is_error:
            reason = "timeout" if response.error.code == "timeout" else "provider-error"
            return self._fallback(fallback_query, ProviderError(response.error.message, reason))

        search_query = (response.text or "").strip()
        if not search_query:
            return self._fallback(
                fallback_query, ProviderError("Empty response from AI provider", "empty-response")
            )

        logger.info(
            "Search query generated",
            extra={
                "extra_fields": {
                    "provider": response.provider,
                    "latency_ms": int((time.time() - start_time) * 1000),
                    "question_preview": question[:80],
                    "search_query": search_query[:120],
                }
            },
        )
        return QueryGenerated(search_query=search_query)

    @staticmethod
    def _fallback(search_query: str, error: ProviderError) -> QueryFallback:
        recovery = recovery_for(Operation.QUERY_GENERATION, error)
        logger.log(
            recovery.log_level,
            recovery.user_message,
            extra={
                "extra_fields": {
                    "reason": error.reason,
                    "category": recovery.category,
                    "detail": str(error)[:200],
                }
            },
        )
        return QueryFallback(search_query=search_query, reason=error.reason)
