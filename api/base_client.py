import time
import uuid
from abc import ABC, abstractmethod

from models.unified_response import NormalizedError, TokenUsage, UnifiedResponse


class BaseAIClient(ABC):
    """
    Abstract base class for AI completion providers.

    Subclasses implement an async ``get_completion`` that returns a
    UnifiedResponse and never raises for provider failures; the failure is
    described by ``response.error`` instead. ``asyncio.CancelledError`` is the
    one exception allowed through, so a cancelled caller aborts the request.
    """

    provider_name: str = "unknown"

    def __init__(self, api_key: str | None = None, **kwargs):
        """
        Initialize the AI client.

        Args:
            api_key: API key for the AI service (not every provider needs one)
            **kwargs: Additional model-specific parameters
        """
        self.api_key = api_key
        self.model_name = kwargs.get("model_name")

    @abstractmethod
    async def get_completion(self, prompt: str, **kwargs) -> UnifiedResponse:
        """
        Get a completion from the AI model.

        Args:
            prompt: The input prompt to send to the model
            **kwargs: Additional parameters for the API call

        Returns:
            UnifiedResponse with the generated text or a NormalizedError
        """

    async def aclose(self) -> None:
        """Release network resources held by the client."""

    @staticmethod
    def _generate_request_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _measure_latency(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    @staticmethod
    def _normalize_finish_reason(reason: str | None) -> str | None:
        if reason is None:
            return None
        reason = str(reason).lower()
        mapping = {
            "stop": "stop",
            "end_turn": "stop",
            "length": "length",
            "max_tokens": "length",
            "content_filter": "content_filter",
            "safety": "content_filter",
        }
        return mapping.get(reason, reason)

    def _normalize_error(self, exc: Exception) -> NormalizedError:
        """Map a provider/transport exception to a NormalizedError."""
        message = str(exc) or type(exc).__name__
        lowered = message.lower()
        status = getattr(exc, "status_code", None)
        if status is None:
            status = getattr(getattr(exc, "response", None), "status_code", None)

        if "timeout" in lowered or "timed out" in lowered or "Timeout" in type(exc).__name__:
            code, retryable = "timeout", True
        elif status in (401, 403) or "api key" in lowered or "unauthorized" in lowered:
            code, retryable = "auth", False
        elif status == 429 or "rate limit" in lowered:
            code, retryable = "rate_limit", True
        elif status in (400, 404, 422):
            code, retryable = "bad_request", False
        elif status is not None and status >= 500:
            code, retryable = "provider_error", True
        else:
            code, retryable = "unknown", False

        return NormalizedError(
            code=code,
            message=message,
            provider=self.provider_name,
            retryable=retryable,
            details={"exception_type": type(exc).__name__},
        )

    def _create_error_response(
        self, request_id: str, error: NormalizedError, latency_ms: int, model: str | None
    ) -> UnifiedResponse:
        return UnifiedResponse(
            request_id=request_id,
            text="",
            provider=self.provider_name,
            model=model or self.model_name or "unknown",
            latency_ms=latency_ms,
            token_usage=TokenUsage(),
            finish_reason="error",
            error=error,
        )
