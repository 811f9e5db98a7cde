"""
Tests for the validating settings loader.

Invalid configuration must fail loudly outside production and fall back
to documented defaults (with a warning) in production.
"""

import logging

import pytest
from pydantic import ValidationError

from devflow_api.core.config import Settings, load_settings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # Run from an empty dir so a developer's .env can't leak in
    monkeypatch.chdir(tmp_path)
    for var in (
        "ENVIRONMENT", "RATE_LIMIT_RPM", "RATE_LIMIT_DAILY_TOKENS", "AI_REQUEST_TIMEOUT_S",
        "GEMINI_API_KEY", "GROQ_API_KEY", "OPENROUTER_API_KEY",
    ):
        monkeypatch.delenv(var, raising=False)


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings.rate_limit_rpm == 10
        assert settings.rate_limit_daily_tokens == 500_000
        assert settings.ai_request_timeout_s == 30.0
        assert settings.ai_require_premium is False
        assert settings.gemini_api_key == ""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_RPM", "25")
        monkeypatch.setenv("GROQ_API_KEY", "gq")
        settings = load_settings()
        assert settings.rate_limit_rpm == 25
        assert settings.groq_api_key == "gq"

    def test_reads_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("RATE_LIMIT_DAILY_TOKENS=1234\n")
        assert load_settings().rate_limit_daily_tokens == 1234

    def test_invalid_value_raises_in_development(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.setenv("RATE_LIMIT_RPM", "abc")
        with pytest.raises(ValidationError):
            load_settings()

    def test_non_positive_quota_raises_outside_production(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "test")
        monkeypatch.setenv("RATE_LIMIT_DAILY_TOKENS", "0")
        with pytest.raises(ValidationError):
            load_settings()

    def test_invalid_values_fall_back_in_production(self, monkeypatch, caplog):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("RATE_LIMIT_RPM", "abc")
        monkeypatch.setenv("RATE_LIMIT_DAILY_TOKENS", "-5")
        monkeypatch.setenv("GROQ_API_KEY", "still-used")

        with caplog.at_level(logging.WARNING, logger="devflow_api.core.config"):
            settings = load_settings()

        assert settings.rate_limit_rpm == 10
        assert settings.rate_limit_daily_tokens == 500_000
        assert settings.groq_api_key == "still-used"
        assert "rate_limit_daily_tokens" in caplog.text
        assert "rate_limit_rpm" in caplog.text

    def test_cors_origins_split(self):
        settings = Settings(_env_file=None, cors_origins_str="http://a.test, http://b.test,")
        assert settings.cors_origins == ["http://a.test", "http://b.test"]
