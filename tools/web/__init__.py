"""Web search tools for Lookout."""

from .cache import SessionResultCache, normalize_query
from .classifier import classify
from .duckduckgo_client import DuckDuckGoClient
from .factory import create_search_engine_from_env, get_session_cache, reset_session_cache
from .search_engine import FALLBACK_ERROR, ResultClassificationEngine, build_fallback_outcome

__all__ = [
    "DuckDuckGoClient",
    "FALLBACK_ERROR",
    "ResultClassificationEngine",
    "SessionResultCache",
    "build_fallback_outcome",
    "classify",
    "create_search_engine_from_env",
    "get_session_cache",
    "normalize_query",
    "reset_session_cache",
]
