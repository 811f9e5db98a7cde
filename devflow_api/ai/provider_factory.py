"""
provider_factory.py: Picks exactly one AI backend per request.

Priority (first match wins):
  1. BYOK: the caller's key for the provider they named
  2. GEMINI_API_KEY → Gemini
  3. GROQ_API_KEY → Groq
  4. OPENROUTER_API_KEY → OpenRouter
  5. Pollinations (no key needed), so selection always succeeds

Whether the keyless fallback is good enough for a route is decided by
the caller (see services/completion.py), never here.

Server-configured providers are cached per (provider, key, model,
timeout): server credentials don't change between requests. BYOK
providers are built fresh every time since they carry a caller's key.
"""

import logging
from functools import lru_cache
from typing import Optional

from devflow_api.ai.base import AIProvider, ProviderName
from devflow_api.ai.chat_completions import GroqClient, OpenRouterClient, PollinationsClient
from devflow_api.ai.gemini_client import GeminiClient
from devflow_api.core.admission import BYOKConfig
from devflow_api.core.config import Settings

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: dict[ProviderName, type[AIProvider]] = {
    ProviderName.GEMINI: GeminiClient,
    ProviderName.GROQ: GroqClient,
    ProviderName.OPENROUTER: OpenRouterClient,
    ProviderName.POLLINATIONS: PollinationsClient,
}

# (provider, Settings field holding its key), in priority order
ENV_PRIORITY: tuple[tuple[ProviderName, str], ...] = (
    (ProviderName.GEMINI, "gemini_api_key"),
    (ProviderName.GROQ, "groq_api_key"),
    (ProviderName.OPENROUTER, "openrouter_api_key"),
)

FALLBACK_PROVIDER = ProviderName.POLLINATIONS


def _model_for(settings: Settings, name: ProviderName) -> str:
    return getattr(settings, f"{name.value}_model")


def _build(name: ProviderName, api_key: str, model: str, timeout_s: float) -> AIProvider:
    return PROVIDER_CLASSES[name](api_key, model=model, timeout_s=timeout_s)


@lru_cache(maxsize=16)
def _configured_provider(name: ProviderName, api_key: str, model: str, timeout_s: float) -> AIProvider:
    return _build(name, api_key, model, timeout_s)


def configured_provider_name(settings: Settings) -> ProviderName:
    """Which provider a request without BYOK would get."""
    for name, key_field in ENV_PRIORITY:
        if getattr(settings, key_field):
            return name
    return FALLBACK_PROVIDER


def premium_configured(settings: Settings) -> bool:
    return any(getattr(settings, key_field) for _, key_field in ENV_PRIORITY)


def create_ai_provider(settings: Settings, byok: Optional[BYOKConfig] = None) -> AIProvider:
    """Return the provider for this request. Never returns None."""
    if byok is not None:
        name = ProviderName(byok.provider)
        logger.debug("Using BYOK provider %s", name.value)
        return _build(name, byok.key, _model_for(settings, name), settings.ai_request_timeout_s)

    name = configured_provider_name(settings)
    key_field = dict(ENV_PRIORITY).get(name)
    key = getattr(settings, key_field) if key_field else ""
    logger.debug("Using server-configured provider %s", name.value)
    return _configured_provider(name, key, _model_for(settings, name), settings.ai_request_timeout_s)
