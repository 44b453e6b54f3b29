import importlib

import dotenv
import pytest

import config


def test_missing_jwt_secret_refuses_to_start(monkeypatch):
    monkeypatch.setattr(dotenv, "load_dotenv", lambda *args, **kwargs: False)
    monkeypatch.delenv("SUPABASE_JWT_SECRET")
    try:
        with pytest.raises(ValueError, match="SUPABASE_JWT_SECRET"):
            importlib.reload(config)
    finally:
        monkeypatch.setenv("SUPABASE_JWT_SECRET", "test-jwt-secret")
        importlib.reload(config)
    assert config.JWT_SECRET == "test-jwt-secret"


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co/")
    monkeypatch.setenv("CORS_ORIGINS", "https://app.example.com, https://admin.example.com")
    try:
        importlib.reload(config)
        assert config.SUPABASE_URL == "https://example.supabase.co"
        assert config.CORS_ORIGINS == ["https://app.example.com", "https://admin.example.com"]
        assert config.JWT_AUDIENCE == "authenticated"
    finally:
        monkeypatch.undo()
        importlib.reload(config)
