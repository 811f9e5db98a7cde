"""
base.py: Provider interface shared by every AI backend.

A provider turns (prompt, system prompt, options) into one normalised
AITextResponse. Concrete variants only describe their wire format:

    _endpoint()        where to POST
    _headers()         auth + content headers
    _build_payload()   request JSON
    _parse_response()  (text, TokenUsage) from response JSON

The HTTP call itself, the timeout, error wrapping and timing live here,
so every backend fails the same way: a ProviderError whose message
carries the HTTP status and a bounded slice of the upstream body.

To add a backend: subclass AIProvider, add a ProviderName member, and
register it in provider_factory.py.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional

import httpx

from devflow_api.core.errors import ProviderError

logger = logging.getLogger(__name__)

# Upstream error bodies are cut to this many characters in messages.
_MAX_ERROR_BODY = 500


class ProviderName(str, Enum):
    GEMINI = "gemini"
    GROQ = "groq"
    OPENROUTER = "openrouter"
    POLLINATIONS = "pollinations"


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class AITextResponse:
    text: str
    provider: ProviderName
    model: str
    usage: TokenUsage
    duration_ms: int


@dataclass(frozen=True)
class GenerateOptions:
    max_tokens: int = 4096
    temperature: float = 0.3
    top_p: float = 0.95


class AIProvider(ABC):
    """One AI text-generation backend."""

    name: ClassVar[ProviderName]
    label: ClassVar[str]
    default_model: ClassVar[str]
    # False only for the keyless fallback.
    premium: ClassVar[bool] = True

    def __init__(
        self,
        api_key: str = "",
        *,
        model: Optional[str] = None,
        timeout_s: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model or self.default_model
        self.timeout_s = timeout_s
        self._transport = transport

    def is_available(self) -> bool:
        return True

    async def generate_text(
        self,
        prompt: str,
        system_prompt: str,
        options: Optional[GenerateOptions] = None,
    ) -> AITextResponse:
        """
        Make one chat-completion call.

        Raises:
            ProviderError: non-2xx status, timeout, transport failure, or a
                response body that isn't the expected JSON.
        """
        options = options or GenerateOptions()
        payload = self._build_payload(prompt, system_prompt, options)

        start = time.perf_counter()
        data = await self._post(payload)
        duration_ms = int((time.perf_counter() - start) * 1000)

        try:
            text, usage = self._parse_response(data)
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
            raise ProviderError(f"{self.label} API returned an unexpected response shape: {exc!r}") from exc

        logger.debug(
            "%s call ok (model=%s, tokens=%d, %d ms)",
            self.label, self.model, usage.total_tokens, duration_ms,
        )
        return AITextResponse(
            text=text,
            provider=self.name,
            model=self.model,
            usage=usage,
            duration_ms=duration_ms,
        )

    async def _post(self, payload: dict[str, Any]) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
            try:
                response = await client.post(self._endpoint(), headers=self._headers(), json=payload)
            except httpx.TimeoutException as exc:
                logger.warning("%s request timed out after %.1fs", self.label, self.timeout_s)
                raise ProviderError(f"{self.label} API request timed out after {self.timeout_s:g}s") from exc
            except httpx.HTTPError as exc:
                logger.error("%s request failed: %s", self.label, exc)
                raise ProviderError(f"{self.label} API request failed: {exc}") from exc

        if response.is_error:
            body = response.text[:_MAX_ERROR_BODY]
            logger.error("%s API error: %s: %s", self.label, response.status_code, body[:200])
            raise ProviderError(f"{self.label} API error ({response.status_code}): {body}")

        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(
                f"{self.label} API returned non-JSON body: {response.text[:200]}"
            ) from exc

    @abstractmethod
    def _endpoint(self) -> str: ...

    @abstractmethod
    def _headers(self) -> dict[str, str]: ...

    @abstractmethod
    def _build_payload(self, prompt: str, system_prompt: str, options: GenerateOptions) -> dict[str, Any]: ...

    @abstractmethod
    def _parse_response(self, data: Any) -> tuple[str, TokenUsage]: ...
