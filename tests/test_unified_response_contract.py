"""
Tests for UnifiedResponse Contract

These tests validate that every provider client returns a UnifiedResponse,
reports failures through ``error`` instead of raising, and only lets
cancellation through.
"""

import asyncio
import json
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from api.base_client import BaseAIClient
from api.factory import create_ai_client
from api.google_gemini_client import GeminiClient
from api.ollama_client import OllamaClient
from api.openai_client import OpenAIClient
from config.config import Config
from models.unified_response import NormalizedError, TokenUsage, UnifiedResponse

VALID_CODES = {"timeout", "auth", "rate_limit", "bad_request", "provider_error", "unknown"}


class TestUnifiedResponseContract:
    """Test that UnifiedResponse keeps its shape."""

    def test_unified_response_creation(self):
        response = UnifiedResponse(
            request_id="test-123",
            text="Test response",
            provider="test",
            model="test-model",
            latency_ms=100,
            token_usage=TokenUsage(prompt_tokens=10, completion_tokens=20, total_tokens=30),
            finish_reason="stop",
        )

        assert response.token_usage.total_tokens == 30
        assert response.is_success
        assert not response.is_error

    def test_token_usage_auto_total(self):
        assert TokenUsage(prompt_tokens=3, completion_tokens=4).total_tokens == 7

    def test_normalized_error_validates_code(self):
        error = NormalizedError(code="nonsense", message="x", provider="test")
        assert error.code == "unknown"

    def test_unknown_finish_reason_kept_in_metadata(self):
        response = UnifiedResponse(
            request_id="r", text="", provider="p", model="m", latency_ms=0, finish_reason="weird"
        )
        assert response.finish_reason is None
        assert response.metadata["provider_finish_reason"] == "weird"


class TestProviderContractCompliance:
    """Test that provider clients return UnifiedResponse."""

    @patch("openai.AsyncOpenAI")
    def test_openai_returns_unified_response(self, mock_openai):
        mock_response = Mock()
        mock_response.choices = [Mock(message=Mock(content="black hole explainer"), finish_reason="stop")]
        mock_response.usage = Mock(prompt_tokens=10, completion_tokens=5, total_tokens=15)
        mock_openai.return_value.chat.completions.create = AsyncMock(return_value=mock_response)

        client = OpenAIClient(api_key="test-key", model_name="gpt-4o-mini")
        response = asyncio.run(client.get_completion("Test prompt"))

        assert isinstance(response, UnifiedResponse)
        assert response.provider == "openai"
        assert response.text == "black hole explainer"
        assert response.token_usage.total_tokens == 15
        assert response.finish_reason == "stop"
        assert response.is_success

    @patch("openai.AsyncOpenAI")
    def test_openai_handles_errors_gracefully(self, mock_openai):
        mock_openai.return_value.chat.completions.create = AsyncMock(side_effect=Exception("API Error"))

        client = OpenAIClient(api_key="test-key")
        response = asyncio.run(client.get_completion("Test prompt"))

        assert response.is_error
        assert response.error.code in VALID_CODES
        assert response.finish_reason == "error"
        assert response.text == ""

    @patch("google.genai.Client")
    def test_gemini_returns_unified_response(self, mock_genai):
        mock_response = Mock(text="query text", usage_metadata=None, candidates=[])
        mock_genai.return_value.aio.models.generate_content = AsyncMock(return_value=mock_response)

        client = GeminiClient(api_key="test-key")
        response = asyncio.run(client.get_completion("Test prompt"))

        assert response.provider == "gemini"
        assert response.text == "query text"
        assert response.is_success

    @patch("google.genai.Client")
    def test_gemini_handles_errors_gracefully(self, mock_genai):
        mock_genai.return_value.aio.models.generate_content = AsyncMock(
            side_effect=Exception("429 rate limit exceeded")
        )

        response = asyncio.run(GeminiClient(api_key="test-key").get_completion("Test prompt"))
        assert response.error.code == "rate_limit"


class TestOllamaClient:
    def make_client(self, handler):
        return OllamaClient(
            model_name="llama3.2",
            endpoint="http://ollama.test:11434/",
            transport=httpx.MockTransport(handler),
        )

    def test_success(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(
                200,
                json={"response": "  cell biology video ", "done": True, "prompt_eval_count": 12, "eval_count": 4},
            )

        response = asyncio.run(self.make_client(handler).get_completion("prompt"))

        assert response.text == "  cell biology video "
        assert response.token_usage.total_tokens == 16
        assert response.finish_reason == "stop"
        assert str(seen[0].url) == "http://ollama.test:11434/api/generate"
        assert json.loads(seen[0].content) == {"model": "llama3.2", "prompt": "prompt", "stream": False}

    def test_missing_model(self):
        response = asyncio.run(self.make_client(lambda r: httpx.Response(404)).get_completion("p"))
        assert response.error.code == "bad_request"
        assert "not found" in response.error.message

    def test_error_field(self):
        handler = lambda r: httpx.Response(200, json={"error": "out of memory"})
        response = asyncio.run(self.make_client(handler).get_completion("p"))
        assert response.error.code == "provider_error"

    def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        response = asyncio.run(self.make_client(handler).get_completion("p"))
        assert response.is_error
        assert response.text == ""

    def test_requires_model(self):
        with pytest.raises(ValueError):
            OllamaClient(model_name="")


class TestErrorHandlingContract:
    """Test that exceptions are mapped to normalized codes."""

    class _Client(BaseAIClient):
        provider_name = "test"

        async def get_completion(self, prompt, **kwargs):
            raise NotImplementedError

    class _StatusError(Exception):
        def __init__(self, message, status_code):
            super().__init__(message)
            self.status_code = status_code

    @pytest.mark.parametrize(
        "exc, code, retryable",
        [
            (TimeoutError("Request timed out"), "timeout", True),
            (_StatusError("Unauthorized", 401), "auth", False),
            (_StatusError("slow down", 429), "rate_limit", True),
            (_StatusError("bad", 422), "bad_request", False),
            (_StatusError("upstream", 502), "provider_error", True),
            (ValueError("odd"), "unknown", False),
        ],
    )
    def test_normalize_error(self, exc, code, retryable):
        error = self._Client()._normalize_error(exc)
        assert error.code == code
        assert error.retryable is retryable
        assert error.provider == "test"


class TestClientFactory:
    def test_ollama_from_env(self, mock_env):
        client = create_ai_client(Config())
        assert isinstance(client, OllamaClient)
        assert client.endpoint == "http://ollama.test:11434"

    def test_missing_openai_key(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "openai")
        monkeypatch.setenv("OPENAI_API_KEY", "")
        with pytest.raises(ValueError):
            create_ai_client(Config())

    def test_unsupported_provider(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "carrier-pigeon")
        with pytest.raises(ValueError):
            create_ai_client(Config())
