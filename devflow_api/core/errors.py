"""
errors.py: Error taxonomy and the FastAPI handlers that render it.

Every handled failure leaves the API as the same envelope the success
path uses:

    {"data": null, "error": "<message>"}

  ToolkitError                  base, carries status_code + headers
  ├── RateLimitExceededError    429  caller should wait retry_after
  ├── ProviderNotConfiguredError 503 server policy, not retried
  ├── ProviderError             502  upstream HTTP failure / timeout
  │   └── MalformedAIResponseError  502  model text is not the JSON we asked for
  └── TokenizationError         500  local tokenizer blew up

Request validation errors become 400 with every violated field listed.
Anything else is logged with its traceback and returned as a 500 so a
single bad request never takes the process down.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ToolkitError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, headers: Optional[dict[str, str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.headers = headers or {}


class RateLimitExceededError(ToolkitError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, retry_after_s: int, remaining_requests: int) -> None:
        super().__init__(
            "Rate limit exceeded. Please try again later.",
            headers={
                "Retry-After": str(retry_after_s),
                "X-RateLimit-Remaining": str(remaining_requests),
            },
        )
        self.retry_after_s = retry_after_s
        self.remaining_requests = remaining_requests


class ProviderNotConfiguredError(ToolkitError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class ProviderError(ToolkitError):
    status_code = status.HTTP_502_BAD_GATEWAY


class MalformedAIResponseError(ProviderError):
    pass


class TokenizationError(ToolkitError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(message: str) -> dict:
    return {"data": None, "error": message}


def format_validation_errors(exc: RequestValidationError) -> str:
    """Collapse pydantic errors into 'field: message; field: message'."""
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return "Invalid JSON body"

    issues = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        issues.append(f"{field}: {err.get('msg', 'invalid value')}")
    return "Validation failed: " + "; ".join(issues)


async def _toolkit_error_handler(request: Request, exc: ToolkitError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message),
        headers=exc.headers or None,
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(format_validation_errors(exc)),
    )


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ToolkitError, _toolkit_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)
