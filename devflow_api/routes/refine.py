"""
refine.py: AI prompt refinement.

Route:
  POST /api/ai/refine  { prompt, goal } → refined prompt, changelog, score
"""

from fastapi import APIRouter, Depends

from devflow_api.ai.prompts import REFINE_SYSTEM_PROMPT
from devflow_api.ai.response_parser import parse_refine_response
from devflow_api.core.admission import Admission, admit_request, get_rate_limiter, get_settings
from devflow_api.core.config import Settings
from devflow_api.core.rate_limit import RateLimiter
from devflow_api.models.ai import ApiResult, RefineRequest, RefineResult
from devflow_api.services.completion import generate_and_record, select_provider

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/refine", response_model=ApiResult[RefineResult])
async def refine_prompt(
    payload: RefineRequest,
    admission: Admission = Depends(admit_request),
    settings: Settings = Depends(get_settings),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    provider = select_provider(settings, admission)
    user_prompt = f"Goal: {payload.goal}\n\nPrompt to refine:\n{payload.prompt}"

    response = await generate_and_record(provider, limiter, admission, user_prompt, REFINE_SYSTEM_PROMPT)
    return ApiResult[RefineResult](data=parse_refine_response(response.text))
