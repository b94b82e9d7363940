"""Factory for creating the configured AI completion client."""

from config.config import Config, ProviderType
from utils.logger import get_logger

from .base_client import BaseAIClient

logger = get_logger(__name__)


def create_ai_client(config: Config | None = None) -> BaseAIClient:
    """
    Initialize the AI client selected by ``AI_PROVIDER``.

    Args:
        config: Loaded configuration (defaults to a fresh Config())

    Returns:
        An instance of the appropriate AI client

    Raises:
        ValueError: If the provider is unsupported or its settings are missing
    """
    config = config or Config()
    provider = config.AI_PROVIDER

    if provider == ProviderType.OPENAI.value:
        from .openai_client import OpenAIClient

        if not config.OPENAI_API_KEY:
            raise ValueError("OPENAI_API_KEY not found in environment variables")
        client = OpenAIClient(
            api_key=config.OPENAI_API_KEY,
            model_name=config.DEFAULT_OPENAI_MODEL,
            base_url=config.OPENAI_BASE_URL,
        )

    elif provider == ProviderType.GEMINI.value:
        from .google_gemini_client import GeminiClient

        if not config.GOOGLE_GEMINI_API_KEY:
            raise ValueError("GOOGLE_GEMINI_API_KEY not found in environment variables")
        client = GeminiClient(
            api_key=config.GOOGLE_GEMINI_API_KEY, model_name=config.DEFAULT_GEMINI_MODEL
        )

    elif provider == ProviderType.OLLAMA.value:
        from .ollama_client import OllamaClient

        client = OllamaClient(model_name=config.OLLAMA_MODEL, endpoint=config.OLLAMA_ENDPOINT)

    else:
        raise ValueError(
            f"Unsupported AI_PROVIDER: {provider}. "
            f"Must be one of: {', '.join(p.value for p in ProviderType)}"
        )

    logger.info(
        "AI client initialized",
        extra={"extra_fields": {"provider": provider, "model": client.model_name}},
    )
    return client
