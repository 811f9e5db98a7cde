"""
tokenize.py: Real BPE tokenization for the token visualizer.

Route:
  POST /api/ai/tokenize  { text, model } → token segments

No model call is made, but the route is still rate limited: tokenizing
100k characters is not free. Only the request is recorded; no tokens
are charged against the daily quota.

Encoding runs in a worker thread so other requests keep being served;
the limiter is only touched back on the event loop.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends

from devflow_api.core.admission import Admission, admit_request, get_rate_limiter
from devflow_api.core.errors import TokenizationError
from devflow_api.core.rate_limit import RateLimiter
from devflow_api.models.ai import ApiResult, TokenizeRequest, TokenizeResult
from devflow_api.services import tokenizer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/tokenize", response_model=ApiResult[TokenizeResult])
async def tokenize_text(
    payload: TokenizeRequest,
    admission: Admission = Depends(admit_request),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    try:
        result = await asyncio.to_thread(tokenizer.tokenize, payload.text, payload.model)
    except Exception as exc:
        logger.exception("Tokenization failed (model=%s)", payload.model)
        raise TokenizationError(f"Tokenization failed: {exc}") from exc

    limiter.record_request(admission.client_id)
    return ApiResult[TokenizeResult](data=result)
