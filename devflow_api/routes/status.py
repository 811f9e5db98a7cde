"""
status.py: AI availability and quota report for the front end.

Route:
  GET /api/ai/status  not rate limited, read-only

configured is always true because the keyless fallback exists; the UI
uses premium_configured to nudge users toward bringing their own key.
"""

from fastapi import APIRouter, Depends

from devflow_api.ai.provider_factory import configured_provider_name, premium_configured
from devflow_api.core.admission import get_settings
from devflow_api.core.config import Settings
from devflow_api.models.ai import AIStatusResult, ApiResult, QuotaLimits

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.get("/status", response_model=ApiResult[AIStatusResult])
async def ai_status(settings: Settings = Depends(get_settings)):
    result = AIStatusResult(
        configured=True,
        provider=configured_provider_name(settings).value,
        premium_configured=premium_configured(settings),
        limits=QuotaLimits(
            rpm=settings.rate_limit_rpm,
            daily_tokens=settings.rate_limit_daily_tokens,
        ),
    )
    return ApiResult[AIStatusResult](data=result)
