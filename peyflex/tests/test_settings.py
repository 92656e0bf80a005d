"""Tests for settings module."""

from __future__ import annotations

from pathlib import Path

from peyflex.settings import DEFAULT_BASE_URL, Settings, get_settings, settings


def test_get_settings():
    """Test that get_settings returns the singleton settings instance."""
    result = get_settings()
    assert isinstance(result, Settings)
    assert result is settings


def test_settings_defaults(monkeypatch, tmp_path):
    # Keep ~/.peyflex/.env out of the picture
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    for var in ("PEYFLEX_API_TOKEN", "PEYFLEX_BASE_URL", "PEYFLEX_TIMEOUT", "PEYFLEX_RETRIES"):
        monkeypatch.delenv(var, raising=False)

    s = Settings(_env_file=None)

    assert s.base_url == DEFAULT_BASE_URL == "https://client.peyflex.com.ng/api/"
    assert s.timeout == 30.0
    assert s.retries == 3


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("PEYFLEX_API_TOKEN", "env-token")
    monkeypatch.setenv("PEYFLEX_BASE_URL", "https://sandbox.peyflex.test/api")
    monkeypatch.setenv("PEYFLEX_TIMEOUT", "12.5")
    monkeypatch.setenv("PEYFLEX_RETRIES", "5")

    s = Settings()

    assert s.api_token == "env-token"
    assert s.base_url == "https://sandbox.peyflex.test/api"
    assert s.timeout == 12.5
    assert s.retries == 5
