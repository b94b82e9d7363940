"""Error categorization and user-facing recovery guidance.

Every failure in the pipeline degrades to something usable; this module only
decides how it is described (message, log level, suggested actions).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from models.errors import LookoutValidationError


class Operation(str, Enum):
    QUERY_GENERATION = "ai-query-generation"
    SEARCH = "search"
    PIPELINE = "pipeline"


class FallbackAction(str, Enum):
    USE_ORIGINAL_QUERY = "use-original-query"
    MANUAL_SEARCH = "manual-search"
    FIX_INPUT = "fix-input"


@dataclass(frozen=True)
class ErrorRecovery:
    category: str
    fallback_action: FallbackAction
    user_message: str
    log_level: int = logging.WARNING
    suggested_actions: tuple[str, ...] = field(default_factory=tuple)


def categorize_error(message: str) -> str:
    """Bucket a raw error message into a coarse category."""
    text = (message or "").lower()

    if "timeout" in text or "timed out" in text:
        return "timeout"
    if "api key" in text or "unauthorized" in text or "authentication" in text:
        return "api-key"
    if "model" in text and ("not found" in text or "unavailable" in text):
        return "model-unavailable"
    if "rate limit" in text or "too many requests" in text or "429" in text:
        return "rate-limit"
    if "service unavailable" in text or any(code in text for code in ("502", "503", "504")):
        return "service-unavailable"
    if "network" in text or "connect" in text or "connection" in text:
        return "network"
    return "generic"


def _query_generation_recovery(category: str) -> ErrorRecovery:
    if category == "timeout":
        return ErrorRecovery(
            category=category,
            fallback_action=FallbackAction.USE_ORIGINAL_QUERY,
            user_message="AI query generation timed out. Using your original question instead.",
            suggested_actions=("Try rephrasing your question", "Check your internet connection"),
        )
    if category == "api-key":
        return ErrorRecovery(
            category=category,
            fallback_action=FallbackAction.USE_ORIGINAL_QUERY,
            user_message="AI service authentication failed. Using your original question for search.",
            suggested_actions=(
                "Check your AI provider settings",
                "Verify your API key is correct",
            ),
        )
    if category == "model-unavailable":
        return ErrorRecovery(
            category=category,
            fallback_action=FallbackAction.USE_ORIGINAL_QUERY,
            user_message="AI model is currently unavailable. Using your original question for search.",
            suggested_actions=(
                "Try a different AI model",
                "Check if the model is running (for local models)",
            ),
        )
    return ErrorRecovery(
        category=category,
        fallback_action=FallbackAction.USE_ORIGINAL_QUERY,
        user_message="AI query generation failed. Using your original question for search.",
        suggested_actions=("Check your AI provider settings", "Try again with a simpler question"),
    )


def _search_recovery(category: str) -> ErrorRecovery:
    if category == "timeout":
        return ErrorRecovery(
            category=category,
            fallback_action=FallbackAction.MANUAL_SEARCH,
            user_message="Search service is taking too long. Here are some manual search options.",
            suggested_actions=(
                "Try the manual search links below",
                "Check your internet connection",
            ),
        )
    if category == "rate-limit":
        return ErrorRecovery(
            category=category,
            fallback_action=FallbackAction.MANUAL_SEARCH,
            user_message="Search service rate limit reached. Here are some manual search options.",
            suggested_actions=("Use the manual search links below", "Try again in a few minutes"),
        )
    if category in ("service-unavailable", "network"):
        return ErrorRecovery(
            category=category,
            fallback_action=FallbackAction.MANUAL_SEARCH,
            user_message="Search service is currently unavailable. Here are some manual search options.",
            suggested_actions=("Use the manual search links below", "Try again later"),
        )
    return ErrorRecovery(
        category=category,
        fallback_action=FallbackAction.MANUAL_SEARCH,
        user_message="Search service temporarily unavailable. Here are some manual search options.",
        log_level=logging.ERROR,
        suggested_actions=(
            "Use the manual search links below",
            "Check your internet connection",
        ),
    )


def recovery_for(operation: Operation, error: BaseException | str) -> ErrorRecovery:
    """
    Describe how a failure in ``operation`` is recovered.

    Args:
        operation: Pipeline step that failed
        error: The exception or raw error text

    Returns:
        ErrorRecovery with message, log level and suggested actions
    """
    if isinstance(error, LookoutValidationError):
        return ErrorRecovery(
            category="validation",
            fallback_action=FallbackAction.FIX_INPUT,
            user_message=str(error),
            log_level=logging.INFO,
            suggested_actions=("Type @lookout followed by your question",),
        )

    message = error if isinstance(error, str) else (str(error) or type(error).__name__)
    category = categorize_error(message)

    if operation == Operation.QUERY_GENERATION:
        return _query_generation_recovery(category)
    return _search_recovery(category)
