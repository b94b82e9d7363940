import os

# Keep test runs from writing log files; must happen before utils.logger is imported
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("LOG_TO_CONSOLE", "false")

import pytest
from dotenv import load_dotenv

from tools.web import reset_session_cache

# Load environment variables from .env file for tests
load_dotenv()


@pytest.fixture(autouse=True)
def fresh_session_cache():
    """Every test starts with an empty process-wide search cache."""
    reset_session_cache()
    yield
    reset_session_cache()


@pytest.fixture
def mock_env(monkeypatch):
    """Fixture to mock environment variables for testing."""
    env_vars = {
        "AI_PROVIDER": "ollama",
        "OLLAMA_ENDPOINT": "http://ollama.test:11434",
        "OLLAMA_MODEL": "llama3.2",
        "LOOKOUT_QUERY_TIMEOUT_MS": "2000",
        "LOOKOUT_SEARCH_TIMEOUT_S": "5",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars
