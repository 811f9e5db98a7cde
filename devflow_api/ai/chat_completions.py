"""
OpenAI-compatible chat-completion backends: Groq, OpenRouter, Pollinations.

All three accept the same request body and return the same
choices[0].message.content / usage shape, so they differ only in URL,
auth headers, and whether usage is guaranteed.
"""

from typing import Any

from devflow_api.ai.base import AIProvider, GenerateOptions, ProviderName, TokenUsage

GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"
OPENROUTER_API_URL = "https://openrouter.ai/api/v1/chat/completions"
POLLINATIONS_API_URL = "https://text.pollinations.ai/openai"


class ChatCompletionsProvider(AIProvider):
    api_url: str

    def _endpoint(self) -> str:
        return self.api_url

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _build_payload(self, prompt: str, system_prompt: str, options: GenerateOptions) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": options.max_tokens,
            "temperature": options.temperature,
            "top_p": options.top_p,
        }

    def _parse_response(self, data: Any) -> tuple[str, TokenUsage]:
        choices = data["choices"]
        text = ""
        if choices:
            text = (choices[0].get("message") or {}).get("content") or ""

        usage = data.get("usage") or {}
        return text, TokenUsage(
            prompt_tokens=int(usage.get("prompt_tokens", 0)),
            completion_tokens=int(usage.get("completion_tokens", 0)),
            total_tokens=int(usage.get("total_tokens", 0)),
        )


class GroqClient(ChatCompletionsProvider):
    name = ProviderName.GROQ
    label = "Groq"
    default_model = "llama-3.3-70b-versatile"
    api_url = GROQ_API_URL


class OpenRouterClient(ChatCompletionsProvider):
    """OpenRouter free tier: 20 req/min, 50 req/day per key."""

    name = ProviderName.OPENROUTER
    label = "OpenRouter"
    default_model = "meta-llama/llama-3.3-70b-instruct:free"
    api_url = OPENROUTER_API_URL

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        # Attribution headers OpenRouter asks free-tier apps to send
        headers["HTTP-Referer"] = "https://devflowai.vercel.app"
        headers["X-Title"] = "DevFlow AI"
        return headers


class PollinationsClient(ChatCompletionsProvider):
    """
    Keyless fallback. Always available, so provider selection can never
    come up empty. Anonymous quota is roughly 1 request per 15 s.
    """

    name = ProviderName.POLLINATIONS
    label = "Pollinations"
    default_model = "openai"
    api_url = POLLINATIONS_API_URL
    premium = False
