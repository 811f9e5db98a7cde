"""
GeminiClient: Google Gemini via the Generative Language REST API.

Talks to :generateContent over httpx with the key in the x-goog-api-key
header, so each client instance (server key or BYOK) carries its own key.
"""

from typing import Any

from devflow_api.ai.base import AIProvider, GenerateOptions, ProviderName, TokenUsage

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiClient(AIProvider):
    name = ProviderName.GEMINI
    label = "Gemini"
    default_model = "gemini-2.0-flash"

    def _endpoint(self) -> str:
        return f"{GEMINI_API_BASE}/{self.model}:generateContent"

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "x-goog-api-key": self.api_key}

    def _build_payload(self, prompt: str, system_prompt: str, options: GenerateOptions) -> dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": options.max_tokens,
                "temperature": options.temperature,
                "topP": options.top_p,
            },
        }

    def _parse_response(self, data: Any) -> tuple[str, TokenUsage]:
        candidates = data["candidates"]
        text = ""
        if candidates:
            parts = (candidates[0].get("content") or {}).get("parts") or []
            text = "".join(part.get("text", "") for part in parts)

        usage = data.get("usageMetadata") or {}
        return text, TokenUsage(
            prompt_tokens=int(usage.get("promptTokenCount", 0)),
            completion_tokens=int(usage.get("candidatesTokenCount", 0)),
            total_tokens=int(usage.get("totalTokenCount", 0)),
        )
