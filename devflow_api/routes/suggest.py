"""
suggest.py: AI suggestions for the smaller tools.

Route:
  POST /api/ai/suggest  { context, mode, type?, language? } → ranked suggestions

One endpoint serves every tool that wants "give me a few ranked options":
variable names, regexes, commit messages, cron expressions, and the
explain/optimise helpers. The mode picks the system prompt and frames
the user prompt; the response shape is always { suggestions: [...] }.
"""

import logging

from fastapi import APIRouter, Depends

from devflow_api.ai import prompts
from devflow_api.ai.response_parser import parse_suggest_response
from devflow_api.core.admission import Admission, admit_request, get_rate_limiter, get_settings
from devflow_api.core.config import Settings
from devflow_api.core.rate_limit import RateLimiter
from devflow_api.models.ai import ApiResult, SuggestRequest, SuggestResult
from devflow_api.services.completion import generate_and_record, select_provider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])

# mode → (system prompt, user prompt template)
_MODES: dict[str, tuple[str, str]] = {
    "regex-generate": (prompts.SUGGEST_REGEX_SYSTEM_PROMPT, "Generate a regex for: {context}"),
    "commit-message": (
        prompts.SUGGEST_COMMIT_MESSAGE_SYSTEM_PROMPT,
        "Generate commit messages for these changes: {context}",
    ),
    "cron-generate": (prompts.SUGGEST_CRON_SYSTEM_PROMPT, "Generate a cron expression for: {context}"),
    "json-explain": (prompts.SUGGEST_JSON_EXPLAIN_SYSTEM_PROMPT, "Analyze this JSON structure:\n{context}"),
    "base64-explain": (prompts.SUGGEST_BASE64_EXPLAIN_SYSTEM_PROMPT, "Explain this Base64 payload:\n{context}"),
    "dto-optimize": (prompts.SUGGEST_DTO_OPTIMIZE_SYSTEM_PROMPT, "Optimize this DTO ({language}):\n{context}"),
    "http-explain": (prompts.SUGGEST_HTTP_EXPLAIN_SYSTEM_PROMPT, "Explain the HTTP status for: {context}"),
    "tailwind-optimize": (prompts.SUGGEST_TAILWIND_OPTIMIZE_SYSTEM_PROMPT, "Optimize these classes: {context}"),
    "cost-advise": (prompts.SUGGEST_COST_ADVISE_SYSTEM_PROMPT, "Advise on the cost of this workload: {context}"),
    "variable-name": (
        prompts.SUGGEST_VARIABLE_NAME_SYSTEM_PROMPT,
        "Suggest names for a {type} in {language}: {context}",
    ),
}


def build_prompts(payload: SuggestRequest) -> tuple[str, str]:
    system_prompt, template = _MODES.get(payload.mode, _MODES["variable-name"])
    user_prompt = template.format(
        context=payload.context,
        type=payload.type or "variable",
        language=payload.language or "typescript",
    )
    return system_prompt, user_prompt


@router.post("/suggest", response_model=ApiResult[SuggestResult])
async def suggest(
    payload: SuggestRequest,
    admission: Admission = Depends(admit_request),
    settings: Settings = Depends(get_settings),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    provider = select_provider(settings, admission)
    system_prompt, user_prompt = build_prompts(payload)
    logger.debug("Suggest mode=%s for %s", payload.mode, admission.client_id)

    response = await generate_and_record(provider, limiter, admission, user_prompt, system_prompt)
    return ApiResult[SuggestResult](data=parse_suggest_response(response.text))
