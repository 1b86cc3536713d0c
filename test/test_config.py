import pytest
from legalese.config import Settings, get_settings


def test_defaults(monkeypatch):
    for name in ("LEGALESE_CHUNK_SIZE", "LEGALESE_OVERLAP_SIZE", "LEGALESE_CORS_ORIGINS", "LEGALESE_KNOWLEDGE_BASE"):
        monkeypatch.delenv(name, raising=False)
    settings = get_settings()
    assert settings.chunk_size == 1000
    assert settings.overlap_size == 200
    assert settings.max_upload_bytes == 10 * 1024 * 1024
    assert settings.max_prompt_chars == 25000
    assert settings.cors_origins == ("*",)
    assert settings.knowledge_base_path is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("LEGALESE_CHUNK_SIZE", "500")
    monkeypatch.setenv("LEGALESE_CORS_ORIGINS", "http://localhost:3000, http://localhost:8501")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.chunk_size == 500
    assert settings.cors_origins == ("http://localhost:3000", "http://localhost:8501")
    assert settings.log_level == "DEBUG"


def test_bad_integer(monkeypatch):
    monkeypatch.setenv("LEGALESE_OVERLAP_SIZE", "lots")
    with pytest.raises(ValueError, match="LEGALESE_OVERLAP_SIZE"):
        get_settings()


def test_settings_are_frozen():
    with pytest.raises(AttributeError):
        Settings().chunk_size = 10
