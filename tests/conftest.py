"""
pytest configuration and shared fixtures for the DevFlow AI API tests.

Key concern: tests must never reach a real AI provider or depend on
whatever keys happen to be in the developer's shell. We achieve this by:
  1. Building Settings explicitly (no .env file, all provider keys empty)
     so the keyless Pollinations fallback is always the selected provider.
  2. Creating a fresh app + RateLimiter per test, so quotas never bleed
     between tests.
  3. Patching provider generate_text() with AsyncMock in the tests that
     exercise AI routes.
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Set env vars BEFORE importing the app so the module-level app builds cleanly
os.environ.setdefault("ENVIRONMENT", "test")

from devflow_api.ai.base import AITextResponse, ProviderName, TokenUsage  # noqa: E402
from devflow_api.core.config import Settings  # noqa: E402
from devflow_api.core.rate_limit import RateLimiter  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_settings(**overrides) -> Settings:
    values = {
        "environment": "test",
        "gemini_api_key": "",
        "groq_api_key": "",
        "openrouter_api_key": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def ai_response(text: str, total_tokens: int = 42, provider=ProviderName.POLLINATIONS) -> AITextResponse:
    return AITextResponse(
        text=text,
        provider=provider,
        model="test-model",
        usage=TokenUsage(prompt_tokens=total_tokens // 2, completion_tokens=total_tokens - total_tokens // 2,
                         total_tokens=total_tokens),
        duration_ms=5,
    )


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def settings():
    return make_settings()


@pytest.fixture()
def limiter(settings, clock):
    return RateLimiter(
        requests_per_minute=settings.rate_limit_rpm,
        tokens_per_day=settings.rate_limit_daily_tokens,
        clock=clock,
    )


@pytest.fixture()
def app(settings, limiter):
    from devflow_api.main import create_app

    return create_app(settings=settings, rate_limiter=limiter)


@pytest.fixture()
async def client(app):
    """
    HTTPX async test client wired to a fresh FastAPI app.

    Usage:
        async def test_something(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
