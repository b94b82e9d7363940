"""FastAPI dependencies for search engine and pipeline access."""

from fastapi import HTTPException, status

from orchestrator.pipeline import create_pipeline_from_env
from tools.web import ResultClassificationEngine, create_search_engine_from_env
from utils.logger import get_logger

logger = get_logger(__name__)


def get_search_engine() -> ResultClassificationEngine:
    """Dependency to get the search engine instance (singleton pattern)."""
    if not hasattr(get_search_engine, "_instance"):
        get_search_engine._instance = create_search_engine_from_env()
    return get_search_engine._instance


async def get_pipeline():
    """
    Dependency yielding a fresh pipeline per request.

    Each HTTP request is its own lookout session surface; the search cache
    behind the pipelines is still process-wide. Network clients are closed
    once the response is sent.
    """
    try:
        pipeline = create_pipeline_from_env()
    except ValueError as e:
        logger.error("AI provider not configured", extra={"extra_fields": {"error": str(e)}})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"AI provider not configured: {e}",
        ) from e

    try:
        yield pipeline
    finally:
        await pipeline.search_engine.aclose()
        await pipeline.query_generator.client.aclose()
