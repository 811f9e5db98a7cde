"""
completion.py: One admitted AI call, from provider choice to usage accounting.

Shared by every route that talks to a model:

    provider = select_provider(settings, admission)
    response = await generate_and_record(provider, limiter, admission, prompt, system_prompt)

Usage is recorded only after the provider returned a complete response;
a failed or timed-out call leaves the client's counters untouched.
"""

import logging
from typing import Optional

from devflow_api.ai.base import AIProvider, AITextResponse, GenerateOptions
from devflow_api.ai.provider_factory import create_ai_provider
from devflow_api.core.admission import Admission
from devflow_api.core.config import Settings
from devflow_api.core.errors import ProviderNotConfiguredError
from devflow_api.core.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


def select_provider(settings: Settings, admission: Admission) -> AIProvider:
    """
    Apply the route-level policy on top of create_ai_provider().

    Raises:
        ProviderNotConfiguredError: AI_REQUIRE_PREMIUM is on and the request
            would be served by the keyless fallback.
    """
    provider = create_ai_provider(settings, admission.byok)
    if settings.ai_require_premium and not admission.is_byok and not provider.premium:
        logger.warning("Premium provider required but none configured; refusing request")
        raise ProviderNotConfiguredError("AI is not configured on this server")
    return provider


async def generate_and_record(
    provider: AIProvider,
    limiter: RateLimiter,
    admission: Admission,
    prompt: str,
    system_prompt: str,
    options: Optional[GenerateOptions] = None,
) -> AITextResponse:
    response = await provider.generate_text(prompt, system_prompt, options)

    limiter.record_request(admission.client_id)
    limiter.record_tokens(admission.client_id, response.usage.total_tokens)

    logger.info(
        "AI call via %s/%s for %s: %d tokens in %d ms",
        response.provider.value, response.model, admission.client_id,
        response.usage.total_tokens, response.duration_ms,
    )
    return response
