"""
review.py: AI code review.

Route:
  POST /api/ai/review  { code, language } → issues, score, suggestions, refactored code

Pipeline (shared by all AI routes):
  BYOK extraction → rate-limit check → body validation → provider
  selection → provider call → usage recorded → { data, error: null }
"""

from fastapi import APIRouter, Depends

from devflow_api.ai.prompts import CODE_REVIEW_SYSTEM_PROMPT
from devflow_api.ai.response_parser import parse_review_response
from devflow_api.core.admission import Admission, admit_request, get_rate_limiter, get_settings
from devflow_api.core.config import Settings
from devflow_api.core.rate_limit import RateLimiter
from devflow_api.models.ai import ApiResult, ReviewRequest, ReviewResult
from devflow_api.services.completion import generate_and_record, select_provider

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/review", response_model=ApiResult[ReviewResult])
async def review_code(
    payload: ReviewRequest,
    admission: Admission = Depends(admit_request),
    settings: Settings = Depends(get_settings),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    provider = select_provider(settings, admission)
    user_prompt = (
        f"Language: {payload.language}\n\n"
        f"Code:\n```{payload.language}\n{payload.code}\n```"
    )

    response = await generate_and_record(provider, limiter, admission, user_prompt, CODE_REVIEW_SYSTEM_PROMPT)
    return ApiResult[ReviewResult](data=parse_review_response(response.text))
