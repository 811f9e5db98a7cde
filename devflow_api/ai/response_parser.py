"""
response_parser.py: Turns model text into typed results.

Models are asked for bare JSON but often wrap it in ```json fences. We
strip every fence, then parse strictly. Anything that still isn't a JSON
object raises MalformedAIResponseError carrying the first 200 chars of
what we got, so the 502 is diagnosable.

Field-level fallbacks are limited to display values: a missing score
becomes 50, a missing list becomes []. Items that are present but the
wrong shape are an error, not silently dropped.
"""

import json
import re
from typing import Any

from pydantic import ValidationError

from devflow_api.core.errors import MalformedAIResponseError
from devflow_api.models.ai import RefineResult, ReviewResult, SuggestResult

_FENCE_RE = re.compile(r"```json\n?|```\n?")
_PREVIEW_CHARS = 200
NEUTRAL_SCORE = 50


def clean_ai_response(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def parse_ai_json(text: str) -> dict[str, Any]:
    cleaned = clean_ai_response(text)
    try:
        parsed = json.loads(cleaned)
    except (json.JSONDecodeError, ValueError) as exc:
        raise MalformedAIResponseError(
            f"AI returned malformed JSON: {cleaned[:_PREVIEW_CHARS]}"
        ) from exc

    if not isinstance(parsed, dict):
        raise MalformedAIResponseError(
            f"AI returned malformed JSON: expected an object, got {cleaned[:_PREVIEW_CHARS]}"
        )
    return parsed


def _score(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return NEUTRAL_SCORE


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _validated(model, data: dict[str, Any], what: str):
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise MalformedAIResponseError(f"AI returned an invalid {what}: {problems}") from exc


def parse_review_response(text: str) -> ReviewResult:
    parsed = parse_ai_json(text)
    return _validated(
        ReviewResult,
        {
            "issues": _list(parsed.get("issues")),
            "score": _score(parsed.get("score")),
            "suggestions": _list(parsed.get("suggestions")),
            "refactored_code": _str(parsed.get("refactoredCode", parsed.get("refactored_code"))),
        },
        "code review",
    )


def parse_suggest_response(text: str) -> SuggestResult:
    parsed = parse_ai_json(text)
    return _validated(SuggestResult, {"suggestions": _list(parsed.get("suggestions"))}, "suggestion list")


def parse_refine_response(text: str) -> RefineResult:
    parsed = parse_ai_json(text)
    return _validated(
        RefineResult,
        {
            "refined_prompt": _str(parsed.get("refinedPrompt", parsed.get("refined_prompt"))),
            "changelog": _list(parsed.get("changelog")),
            "score": _score(parsed.get("score")),
        },
        "prompt refinement",
    )
