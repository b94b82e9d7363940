import time

from google import genai

from models.unified_response import TokenUsage, UnifiedResponse
from utils.logger import get_logger

from .base_client import BaseAIClient

logger = get_logger(__name__)


class GeminiClient(BaseAIClient):
    """
    Async client for the Google Gemini API using the google.genai package.
    """

    provider_name = "gemini"

    def __init__(self, api_key: str, model_name: str = "gemini-2.0-flash", **kwargs):
        """
        Initialize the Gemini client.

        Args:
            api_key: The Google Gemini API key
            model_name: The name of the model to use (default: gemini-2.0-flash)
            **kwargs: Additional keyword arguments
        """
        super().__init__(api_key, model_name=model_name, **kwargs)

        if not api_key:
            raise ValueError("API key is required for Gemini")

        self.client = genai.Client(api_key=api_key)
        self.model_name = model_name

    async def get_completion(self, prompt: str, **kwargs) -> UnifiedResponse:
        """
        Get a completion from the Gemini API.

        Args:
            prompt: The input prompt to send to the model
            **kwargs: Additional parameters for the API call
                - model: Override the default model for this call
                - temperature: Controls randomness (0.0 to 1.0)
                - max_output_tokens: Maximum number of tokens to generate

        Returns:
            UnifiedResponse: Normalized response object (never raises on API errors)
        """
        request_id = self._generate_request_id()
        start_time = time.time()

        model_name = kwargs.get("model", self.model_name)
        temperature = kwargs.get("temperature", 0.3)
        max_output_tokens = kwargs.get("max_output_tokens", 100)

        try:
            response = await self.client.aio.models.generate_content(
                model=model_name,
                contents=prompt,
                config={
                    "temperature": temperature,
                    "max_output_tokens": max_output_tokens,
                },
            )

            latency_ms = self._measure_latency(start_time)
            text = getattr(response, "text", None) or ""

            token_usage = TokenUsage()
            usage_metadata = getattr(response, "usage_metadata", None)
            if usage_metadata is not None:
                token_usage = TokenUsage(
                    prompt_tokens=getattr(usage_metadata, "prompt_token_count", 0) or 0,
                    completion_tokens=getattr(usage_metadata, "candidates_token_count", 0) or 0,
                    total_tokens=getattr(usage_metadata, "total_token_count", 0) or 0,
                )

            finish_reason = None
            candidates = getattr(response, "candidates", None) or []
            if candidates and getattr(candidates[0], "finish_reason", None) is not None:
                finish_reason = self._normalize_finish_reason(
                    getattr(candidates[0].finish_reason, "name", candidates[0].finish_reason)
                )

            logger.info(
                "Gemini completion successful",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "model": model_name,
                        "latency_ms": latency_ms,
                        "tokens": token_usage.total_tokens,
                    }
                },
            )

            return UnifiedResponse(
                request_id=request_id,
                text=text,
                provider=self.provider_name,
                model=model_name,
                latency_ms=latency_ms,
                token_usage=token_usage,
                finish_reason=finish_reason,
            )

        except Exception as e:
            latency_ms = self._measure_latency(start_time)
            error = self._normalize_error(e)

            logger.error(
                f"Gemini completion failed: {error.code}",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "model": model_name,
                        "error_code": error.code,
                        "error_message": error.message,
                    }
                },
            )

            return self._create_error_response(
                request_id=request_id, error=error, latency_ms=latency_ms, model=model_name
            )
