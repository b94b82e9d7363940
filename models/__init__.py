"""
Models package for pipeline data contracts and unified provider responses.
"""

from .errors import LookoutError, LookoutValidationError, ProviderError, SearchServiceError
from .lookout import (
    CacheEntry,
    GeneratedQuery,
    LookoutCommand,
    PipelineStage,
    PipelineState,
    ResultType,
    SearchOutcome,
    SearchResult,
)
from .unified_response import NormalizedError, TokenUsage, UnifiedResponse

__all__ = [
    "CacheEntry",
    "GeneratedQuery",
    "LookoutCommand",
    "LookoutError",
    "LookoutValidationError",
    "NormalizedError",
    "PipelineStage",
    "PipelineState",
    "ProviderError",
    "ResultType",
    "SearchOutcome",
    "SearchResult",
    "SearchServiceError",
    "TokenUsage",
    "UnifiedResponse",
]
