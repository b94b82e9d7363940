import time

import httpx

from models.unified_response import NormalizedError, TokenUsage, UnifiedResponse
from utils.logger import get_logger

from .base_client import BaseAIClient

logger = get_logger(__name__)


class OllamaClient(BaseAIClient):
    """
    Async client for a local (or self-hosted) Ollama server.

    Talks to ``POST {endpoint}/api/generate`` with streaming disabled.
    """

    provider_name = "ollama"

    def __init__(
        self,
        model_name: str,
        endpoint: str = "http://127.0.0.1:11434",
        api_key: str | None = None,
        timeout_s: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs,
    ):
        super().__init__(api_key, model_name=model_name, **kwargs)
        if not model_name:
            raise ValueError("No Ollama model selected")

        self.model_name = model_name
        self.endpoint = endpoint.rstrip("/")
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = httpx.AsyncClient(timeout=timeout_s, headers=headers, transport=transport)

    async def get_completion(self, prompt: str, **kwargs) -> UnifiedResponse:
        request_id = self._generate_request_id()
        start_time = time.time()
        model = kwargs.get("model", self.model_name)

        try:
            response = await self._client.post(
                f"{self.endpoint}/api/generate",
                json={"model": model, "prompt": prompt, "stream": False},
            )
            if response.status_code == 404:
                raise httpx.HTTPStatusError(
                    f'Ollama model "{model}" not found - check if the model is installed',
                    request=response.request,
                    response=response,
                )
            response.raise_for_status()
            data = response.json()

            latency_ms = self._measure_latency(start_time)

            if isinstance(data, dict) and data.get("error"):
                error = NormalizedError(
                    code="provider_error",
                    message=f"Ollama error: {data['error']}",
                    provider=self.provider_name,
                )
                return self._create_error_response(request_id, error, latency_ms, model)

            text = (data.get("response") if isinstance(data, dict) else "") or ""
            token_usage = TokenUsage(
                prompt_tokens=data.get("prompt_eval_count", 0) or 0,
                completion_tokens=data.get("eval_count", 0) or 0,
            )

            logger.info(
                "Ollama completion successful",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "model": model,
                        "latency_ms": latency_ms,
                    }
                },
            )

            return UnifiedResponse(
                request_id=request_id,
                text=text,
                provider=self.provider_name,
                model=model,
                latency_ms=latency_ms,
                token_usage=token_usage,
                finish_reason="stop" if data.get("done") else None,
            )

        except Exception as e:
            latency_ms = self._measure_latency(start_time)
            error = self._normalize_error(e)

            logger.error(
                f"Ollama completion failed: {error.code}",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "model": model,
                        "endpoint": self.endpoint,
                        "error_message": error.message,
                    }
                },
            )

            return self._create_error_response(
                request_id=request_id, error=error, latency_ms=latency_ms, model=model
            )

    async def aclose(self) -> None:
        await self._client.aclose()
