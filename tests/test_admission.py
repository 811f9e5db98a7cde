"""
Tests for request admission: BYOK extraction and client identification.

extract_byok must return either a complete credential or None, never a
partial one, and must reject providers that don't take caller keys.
"""

from typing import Optional

from starlette.requests import Request

from devflow_api.core.admission import BYOKConfig, extract_byok, get_client_ip


def make_request(headers: Optional[dict[str, str]] = None, client=("203.0.113.9", 5555)) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/ai/review",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


class TestExtractBYOK:
    def test_extracts_key_and_provider(self):
        byok = extract_byok({"x-devflow-api-key": "my-key", "x-devflow-provider": "gemini"})
        assert byok == BYOKConfig(key="my-key", provider="gemini")

    def test_none_when_headers_missing(self):
        assert extract_byok({}) is None

    def test_none_when_key_missing(self):
        assert extract_byok({"x-devflow-provider": "groq"}) is None

    def test_none_when_provider_missing(self):
        assert extract_byok({"x-devflow-api-key": "my-key"}) is None

    def test_none_for_empty_key(self):
        assert extract_byok({"x-devflow-api-key": "  ", "x-devflow-provider": "groq"}) is None

    def test_unknown_provider_rejected_even_with_valid_key(self):
        assert extract_byok({"x-devflow-api-key": "sk-valid", "x-devflow-provider": "openai"}) is None

    def test_keyless_fallback_not_accepted_as_byok(self):
        assert extract_byok({"x-devflow-api-key": "junk", "x-devflow-provider": "pollinations"}) is None

    def test_all_key_accepting_providers_recognised(self):
        for provider in ("gemini", "groq", "openrouter"):
            byok = extract_byok({"x-devflow-api-key": "k", "x-devflow-provider": provider})
            assert byok is not None
            assert byok.provider == provider

    def test_reads_starlette_headers_case_insensitively(self):
        request = make_request({"X-DevFlow-Api-Key": "k", "X-DevFlow-Provider": "groq"})
        assert extract_byok(request.headers) == BYOKConfig(key="k", provider="groq")

    def test_repr_hides_key(self):
        assert "secret" not in repr(BYOKConfig(key="secret", provider="groq"))


class TestGetClientIP:
    def test_prefers_x_real_ip(self):
        request = make_request({"x-real-ip": "10.0.0.1", "x-forwarded-for": "1.2.3.4, 5.6.7.8"})
        assert get_client_ip(request) == "10.0.0.1"

    def test_uses_last_forwarded_hop(self):
        request = make_request({"x-forwarded-for": "1.2.3.4, 5.6.7.8"})
        assert get_client_ip(request) == "5.6.7.8"

    def test_ignores_empty_forwarded_entries(self):
        request = make_request({"x-forwarded-for": "1.2.3.4, , "})
        assert get_client_ip(request) == "1.2.3.4"

    def test_falls_back_to_peer_address(self):
        assert get_client_ip(make_request()) == "203.0.113.9"

    def test_defaults_to_loopback_without_peer(self):
        assert get_client_ip(make_request(client=None)) == "127.0.0.1"
