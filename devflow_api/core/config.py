"""
Application configuration loaded from environment variables.

Uses pydantic-settings for type-safe env var parsing with automatic
.env file loading. All provider keys are injected via environment, never
hard-coded, and never leave the server.

Loading goes through load_settings(): outside production an invalid value
(e.g. RATE_LIMIT_RPM=abc) raises immediately so the mistake is caught on
the developer's machine. In production the offending fields fall back to
their documented defaults and a warning names them.

To extend: add new fields here and document them in .env.example.
See https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

import logging

from pydantic import PositiveFloat, PositiveInt, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_SETTINGS_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",  # Don't fail on unknown env vars
)


class Settings(BaseSettings):
    # ─── Core ──────────────────────────────────────────────────────
    environment: str = "development"
    debug: bool = False

    # ─── CORS ──────────────────────────────────────────────────────
    # Comma-separated allowed origins for the toolkit front end.
    cors_origins_str: str = "http://localhost:3000"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_str.split(",") if o.strip()]

    # ─── AI providers ──────────────────────────────────────────────
    # Checked in this order; the first non-empty key wins.
    # With none set, the keyless Pollinations fallback is used.
    gemini_api_key: str = ""  # https://aistudio.google.com/
    groq_api_key: str = ""  # https://console.groq.com/
    openrouter_api_key: str = ""  # https://openrouter.ai/

    gemini_model: str = "gemini-2.0-flash"
    groq_model: str = "llama-3.3-70b-versatile"
    openrouter_model: str = "meta-llama/llama-3.3-70b-instruct:free"
    pollinations_model: str = "openai"

    # Outbound provider calls never hang longer than this.
    ai_request_timeout_s: PositiveFloat = 30.0

    # When True, AI routes refuse to serve from the keyless fallback
    # unless the caller brings their own key.
    ai_require_premium: bool = False

    # ─── Rate limiting ─────────────────────────────────────────────
    # Per client IP. BYOK callers get 5x both quotas.
    rate_limit_rpm: PositiveInt = 10
    rate_limit_daily_tokens: PositiveInt = 500_000

    model_config = _SETTINGS_CONFIG


class _EnvironmentProbe(BaseSettings):
    """Reads ENVIRONMENT alone, so it is known even when Settings is invalid."""

    environment: str = "development"

    model_config = _SETTINGS_CONFIG


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    Raises:
        ValidationError: on invalid input, unless ENVIRONMENT=production.
    """
    try:
        return Settings()
    except ValidationError as exc:
        environment = _EnvironmentProbe().environment
        if environment != "production":
            raise

        invalid = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        logger.warning(
            "Invalid configuration for %s, substituting documented defaults",
            ", ".join(invalid),
        )
        defaults = {name: Settings.model_fields[name].default for name in invalid}
        return Settings(**defaults)
