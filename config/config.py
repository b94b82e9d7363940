import os
from dotenv import load_dotenv
from pathlib import Path
from enum import Enum


class ProviderType(Enum):
    """Supported AI completion providers."""
    OPENAI = "openai"
    GEMINI = "gemini"
    OLLAMA = "ollama"


class Config:
    """Configuration management for the application."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        # Load environment variables from .env file if it exists
        env_path = Path(__file__).parent.parent / '.env'
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # AI provider used for search query generation
        self.AI_PROVIDER = os.getenv('AI_PROVIDER', ProviderType.OPENAI.value).lower()

        self.OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
        self.OPENAI_BASE_URL = os.getenv('OPENAI_BASE_URL') or None
        self.DEFAULT_OPENAI_MODEL = os.getenv('DEFAULT_OPENAI_MODEL', 'gpt-4o-mini')

        self.GOOGLE_GEMINI_API_KEY = os.getenv('GOOGLE_GEMINI_API_KEY')
        self.DEFAULT_GEMINI_MODEL = os.getenv('DEFAULT_GEMINI_MODEL', 'gemini-2.0-flash')

        self.OLLAMA_ENDPOINT = os.getenv('OLLAMA_ENDPOINT', 'http://127.0.0.1:11434')
        self.OLLAMA_MODEL = os.getenv('OLLAMA_MODEL', '')

        # Pipeline tuning
        self.QUERY_TIMEOUT_MS = int(os.getenv('LOOKOUT_QUERY_TIMEOUT_MS', '10000'))
        self.SEARCH_TIMEOUT_S = float(os.getenv('LOOKOUT_SEARCH_TIMEOUT_S', '15'))
        max_entries = os.getenv('LOOKOUT_CACHE_MAX_ENTRIES', '').strip()
        self.CACHE_MAX_ENTRIES = int(max_entries) if max_entries else None

    def validate(self) -> bool:
        """
        Validate that all required configuration is present for the selected provider.

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        if self.AI_PROVIDER == ProviderType.OPENAI.value:
            if not self.OPENAI_API_KEY:
                print("Error: OPENAI_API_KEY is not set. Please set it in the .env file.")
                return False
        elif self.AI_PROVIDER == ProviderType.GEMINI.value:
            if not self.GOOGLE_GEMINI_API_KEY:
                print("Error: GOOGLE_GEMINI_API_KEY is not set. Please set it in the .env file.")
                return False
        elif self.AI_PROVIDER == ProviderType.OLLAMA.value:
            if not self.OLLAMA_MODEL:
                print("Error: OLLAMA_MODEL is not set. Please set it in the .env file.")
                return False
        else:
            print(f"Error: Unknown AI_PROVIDER '{self.AI_PROVIDER}'. Must be one of: {', '.join([e.value for e in ProviderType])}")
            return False

        if self.QUERY_TIMEOUT_MS <= 0 or self.SEARCH_TIMEOUT_S <= 0:
            print("Error: LOOKOUT_QUERY_TIMEOUT_MS and LOOKOUT_SEARCH_TIMEOUT_S must be positive.")
            return False

        return True

    def get_model_info(self) -> str:
        """
        Get information about the currently selected provider and model.

        Returns:
            str: Formatted string with model information
        """
        if self.AI_PROVIDER == ProviderType.OPENAI.value:
            return f"OpenAI ({self.DEFAULT_OPENAI_MODEL})"
        elif self.AI_PROVIDER == ProviderType.GEMINI.value:
            return f"Google Gemini ({self.DEFAULT_GEMINI_MODEL})"
        elif self.AI_PROVIDER == ProviderType.OLLAMA.value:
            return f"Ollama ({self.OLLAMA_MODEL or 'no model selected'})"
        return "Unknown"
