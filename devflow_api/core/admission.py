"""
admission.py: Who is calling, with whose key, and may they proceed.

Every AI route depends on admit_request(), which runs before the body is
validated:

  1. extract_byok()   x-devflow-api-key + x-devflow-provider headers
  2. get_client_ip()  x-real-ip, else last x-forwarded-for hop, else peer
  3. check_limit()    raises RateLimitExceededError (429) when throttled

The dependencies here are `async def` on purpose: sync dependencies run
in FastAPI's threadpool, and the limiter relies on single-loop access.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from fastapi import Depends, Request
from slowapi.util import get_remote_address

from devflow_api.core.config import Settings
from devflow_api.core.errors import RateLimitExceededError
from devflow_api.core.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

BYOK_KEY_HEADER = "x-devflow-api-key"
BYOK_PROVIDER_HEADER = "x-devflow-provider"

# Providers that take a caller-supplied key. The keyless fallback is
# deliberately absent: any junk key would otherwise buy 5x quotas.
BYOK_PROVIDERS = frozenset({"gemini", "groq", "openrouter"})


@dataclass(frozen=True)
class BYOKConfig:
    key: str
    provider: str

    def __repr__(self) -> str:
        return f"BYOKConfig(provider={self.provider!r}, key='***')"


@dataclass(frozen=True)
class Admission:
    """Result of a successful admission check, handed to the route."""

    client_id: str
    byok: Optional[BYOKConfig] = None

    @property
    def is_byok(self) -> bool:
        return self.byok is not None


def extract_byok(headers: Mapping[str, str]) -> Optional[BYOKConfig]:
    """
    Return the caller's credential only when both headers are present and
    the provider is one we accept keys for; otherwise None, never partial.
    """
    key = (headers.get(BYOK_KEY_HEADER) or "").strip()
    provider = (headers.get(BYOK_PROVIDER_HEADER) or "").strip()
    if not key or not provider:
        return None
    if provider not in BYOK_PROVIDERS:
        return None
    return BYOKConfig(key=key, provider=provider)


def get_client_ip(request: Request) -> str:
    # x-real-ip is set by the edge proxy and cannot be forged by the client
    real_ip = (request.headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip

    # The first x-forwarded-for entry is client-controlled; the last one was
    # appended by our proxy.
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
        if hops:
            return hops[-1]

    return get_remote_address(request)


# ── FastAPI dependencies ──────────────────────────────────────────────────────

async def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


async def admit_request(
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> Admission:
    byok = extract_byok(request.headers)
    client_id = get_client_ip(request)

    decision = limiter.check_limit(client_id, is_privileged=byok is not None)
    if not decision.allowed:
        logger.info(
            "Throttled %s on %s (byok=%s, retry in %d ms)",
            client_id, request.url.path, byok is not None, decision.retry_after_ms,
        )
        raise RateLimitExceededError(
            retry_after_s=decision.retry_after_s,
            remaining_requests=decision.remaining_requests,
        )

    return Admission(client_id=client_id, byok=byok)
