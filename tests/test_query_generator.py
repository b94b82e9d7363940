import asyncio

import pytest

from models.errors import LookoutValidationError
from orchestrator.query_generator import (
    QueryFallback,
    QueryGenerated,
    QueryGenerator,
    build_prompt,
)
from fakes import FakeAIClient


def generate(client, question, context=None, timeout_ms=None):
    return asyncio.run(QueryGenerator(client).generate(question, context, timeout_ms=timeout_ms))


def test_success_uses_trimmed_provider_text():
    client = FakeAIClient(text="  photosynthesis explained video  \n")
    result = generate(client, "how do plants eat?")

    assert result.search_query == "photosynthesis explained video"
    assert result.used_fallback is False
    assert result.error is None
    assert result.original_question == "how do plants eat?"


def test_prompt_embeds_question_and_context():
    client = FakeAIClient(text="query")
    generate(client, "what is this?", context="Mitochondria is the powerhouse")

    assert len(client.prompts) == 1
    assert "Highlighted text: 'Mitochondria is the powerhouse'" in client.prompts[0]
    assert "User question: 'what is this?'" in client.prompts[0]


def test_prompt_without_context_says_none():
    assert "Highlighted text: 'None'" in build_prompt("q")


def test_one_millisecond_timeout_falls_back():
    client = FakeAIClient(text="never used", delay_s=1.0)
    result = generate(client, "  why is the sky blue  ", timeout_ms=1)

    assert result.used_fallback is True
    assert result.search_query == "why is the sky blue"
    assert result.error == "timeout"
    assert client.cancelled


def test_provider_exception_falls_back():
    result = generate(FakeAIClient(exc=RuntimeError("boom")), "question")
    assert result.used_fallback is True
    assert result.search_query == "question"
    assert result.error == "provider-error"


@pytest.mark.parametrize("text", ["", "   \n\t "])
def test_empty_response_falls_back(text):
    result = generate(FakeAIClient(text=text), "question")
    assert result.used_fallback is True
    assert result.error == "empty-response"


@pytest.mark.parametrize(
    "error_code, reason", [("timeout", "timeout"), ("auth", "provider-error"), ("rate_limit", "provider-error")]
)
def test_error_response_falls_back(error_code, reason):
    result = generate(FakeAIClient(error_code=error_code), "question")
    assert result.used_fallback is True
    assert result.error == reason


def test_blank_question_is_rejected():
    with pytest.raises(LookoutValidationError):
        generate(FakeAIClient(text="x"), "   ")


def test_attempt_returns_sum_type():
    generator = QueryGenerator(FakeAIClient(text="ok"))
    assert asyncio.run(generator.attempt("q", None, 1000)) == QueryGenerated(search_query="ok")

    generator = QueryGenerator(FakeAIClient(text=""))
    assert asyncio.run(generator.attempt(" q ", None, 1000)) == QueryFallback(
        search_query="q", reason="empty-response"
    )


def test_cancellation_propagates_and_aborts_provider_call():
    client = FakeAIClient(text="late", delay_s=5.0)

    async def scenario():
        task = asyncio.ensure_future(QueryGenerator(client).generate("question"))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())
    assert client.cancelled
