"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from src.config.settings import Settings


def _settings(**overrides) -> Settings:
    return Settings(supabase_url="http://localhost:54321", supabase_key="key", **overrides)


def test_defaults():
    settings = _settings()
    assert settings.supported_country == "United States"
    assert settings.default_result_count == 20
    assert settings.share_token_ttl_days == 30
    assert settings.sign_in_path == "/auth"
    assert settings.is_development


def test_production_rejects_insecure_values():
    with pytest.raises(ValidationError) as exc_info:
        _settings(app_env="production", debug=True, public_origin="http://example.com")
    message = str(exc_info.value)
    assert "debug must be False" in message
    assert "public_origin must use https" in message


def test_production_accepts_secure_values():
    settings = _settings(
        app_env="production",
        debug=False,
        public_origin="https://cityguide.example",
        cors_allowed_origins=["https://cityguide.example"],
    )
    assert settings.is_production


def test_negative_delay_rejected():
    with pytest.raises(ValidationError):
        _settings(search_delay_seconds=-1)
