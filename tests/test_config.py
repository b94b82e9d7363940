from config.config import Config


def test_defaults(monkeypatch):
    for key in (
        "AI_PROVIDER",
        "LOOKOUT_QUERY_TIMEOUT_MS",
        "LOOKOUT_SEARCH_TIMEOUT_S",
        "LOOKOUT_CACHE_MAX_ENTRIES",
    ):
        monkeypatch.delenv(key, raising=False)

    config = Config()
    assert config.QUERY_TIMEOUT_MS == 10000
    assert config.SEARCH_TIMEOUT_S == 15.0
    assert config.CACHE_MAX_ENTRIES is None


def test_ollama_config_validates(mock_env):
    config = Config()
    assert config.AI_PROVIDER == "ollama"
    assert config.QUERY_TIMEOUT_MS == 2000
    assert config.validate()
    assert config.get_model_info() == "Ollama (llama3.2)"


def test_missing_key_fails_validation(monkeypatch, capsys):
    monkeypatch.setenv("AI_PROVIDER", "gemini")
    monkeypatch.setenv("GOOGLE_GEMINI_API_KEY", "")
    assert not Config().validate()
    assert "GOOGLE_GEMINI_API_KEY" in capsys.readouterr().out
