import logging

import pytest

from models.errors import LookoutValidationError, SearchServiceError
from orchestrator.error_handling import (
    FallbackAction,
    Operation,
    categorize_error,
    recovery_for,
)
from tools.web.search_engine import FALLBACK_ERROR


@pytest.mark.parametrize(
    "message, category",
    [
        ("AI query generation timeout", "timeout"),
        ("Request timed out after 15s", "timeout"),
        ("Invalid API key provided", "api-key"),
        ('Ollama model "llama3" not found', "model-unavailable"),
        ("429 Too Many Requests", "rate-limit"),
        ("Search API error: 503", "service-unavailable"),
        ("Network error: connection refused", "network"),
        ("something odd", "generic"),
        ("", "generic"),
    ],
)
def test_categorize_error(message, category):
    assert categorize_error(message) == category


def test_query_generation_always_uses_original_question():
    for message in ("timeout", "api key", "model not found", "weird"):
        recovery = recovery_for(Operation.QUERY_GENERATION, message)
        assert recovery.fallback_action == FallbackAction.USE_ORIGINAL_QUERY
        assert recovery.suggested_actions


def test_generic_search_failure_message():
    recovery = recovery_for(Operation.SEARCH, SearchServiceError("No results in search response"))
    assert recovery.user_message == FALLBACK_ERROR
    assert recovery.fallback_action == FallbackAction.MANUAL_SEARCH
    assert recovery.log_level == logging.ERROR


def test_search_rate_limit():
    recovery = recovery_for(Operation.SEARCH, SearchServiceError("Search API error: 429", status_code=429))
    assert recovery.category == "rate-limit"
    assert "Try again in a few minutes" in recovery.suggested_actions


def test_validation_error_asks_for_input():
    recovery = recovery_for(Operation.PIPELINE, LookoutValidationError("bad input"))
    assert recovery.category == "validation"
    assert recovery.fallback_action == FallbackAction.FIX_INPUT
    assert recovery.user_message == "bad input"
