"""Factory for creating the search engine from environment configuration."""

from config.config import Config
from utils.logger import get_logger

from .cache import SessionResultCache
from .duckduckgo_client import DuckDuckGoClient
from .search_engine import ResultClassificationEngine

logger = get_logger(__name__)

# Singleton cache instance (process-shared, one per session)
_cache_instance: SessionResultCache | None = None


def get_session_cache(config: Config | None = None) -> SessionResultCache:
    """Return the process-wide session cache, creating it on first use."""
    global _cache_instance

    if _cache_instance is None:
        config = config or Config()
        _cache_instance = SessionResultCache(max_entries=config.CACHE_MAX_ENTRIES)
        logger.info(
            "Session result cache created",
            extra={"extra_fields": {"max_entries": config.CACHE_MAX_ENTRIES}},
        )
    return _cache_instance


def reset_session_cache():
    """Empty and drop the process-wide cache (session end)."""
    global _cache_instance
    if _cache_instance is not None:
        _cache_instance.clear()
    _cache_instance = None


def create_search_engine_from_env(
    config: Config | None = None, cache: SessionResultCache | None = None
) -> ResultClassificationEngine:
    """
    Create a ResultClassificationEngine from environment variables.

    Environment variables:
        LOOKOUT_SEARCH_TIMEOUT_S: Remote search timeout in seconds (default: 15)
        LOOKOUT_CACHE_MAX_ENTRIES: Optional session cache size bound

    Args:
        config: Loaded configuration (defaults to a fresh Config())
        cache: Cache to use instead of the process-wide one

    Returns:
        Configured ResultClassificationEngine instance
    """
    config = config or Config()
    client = DuckDuckGoClient(timeout_s=config.SEARCH_TIMEOUT_S)
    return ResultClassificationEngine(client=client, cache=cache or get_session_cache(config))
