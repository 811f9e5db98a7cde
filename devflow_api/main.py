"""
DevFlow AI API: Application entry point.

Bootstraps FastAPI, wires up middleware and exception handlers, registers
route groups, and owns the process-wide rate limiter.

The limiter and settings are built once in create_app() and stored on
app.state; routes reach them through the dependencies in
core/admission.py. Tests call create_app() with their own Settings and
RateLimiter to get fully isolated instances.

Extension points:
  - Add new route groups with app.include_router() below
  - Add new middleware in the middleware block
  - Change startup behaviour in the lifespan context manager

Run locally:
  uvicorn devflow_api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from devflow_api import __version__
from devflow_api.ai.provider_factory import configured_provider_name
from devflow_api.core.config import Settings, load_settings
from devflow_api.core.errors import register_exception_handlers
from devflow_api.core.rate_limit import RateLimiter
from devflow_api.routes.health import router as health_router
from devflow_api.routes.refine import router as refine_router
from devflow_api.routes.review import router as review_router
from devflow_api.routes.status import router as status_router
from devflow_api.routes.suggest import router as suggest_router
from devflow_api.routes.tokenize import router as tokenize_router

logger = logging.getLogger(__name__)


# ─── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(
        "Starting DevFlow AI API (env: %s, provider: %s, limits: %d rpm / %d tokens/day)",
        settings.environment,
        configured_provider_name(settings).value,
        settings.rate_limit_rpm,
        settings.rate_limit_daily_tokens,
    )
    yield
    logger.info("Shutting down DevFlow AI API")


def create_app(
    settings: Optional[Settings] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    settings = settings or load_settings()

    # ─── Logging ───────────────────────────────────────────────────────────────
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    # ─── App ───────────────────────────────────────────────────────────────────
    is_production = settings.environment == "production"
    app = FastAPI(
        title="DevFlow AI API",
        description=(
            "Server routes for the DevFlow AI developer toolkit: code review, "
            "suggestions, prompt refinement and tokenization."
        ),
        version=__version__,
        lifespan=lifespan,
        # Disable docs in production to reduce attack surface
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )

    # ─── Shared state ──────────────────────────────────────────────────────────
    app.state.settings = settings
    app.state.rate_limiter = rate_limiter or RateLimiter(
        requests_per_minute=settings.rate_limit_rpm,
        tokens_per_day=settings.rate_limit_daily_tokens,
    )

    register_exception_handlers(app)

    # ─── Middleware ────────────────────────────────────────────────────────────
    # BYOK headers must be allowed through CORS for the browser to send them.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Routes ────────────────────────────────────────────────────────────────
    app.include_router(health_router, prefix="/health", tags=["health"])
    app.include_router(status_router)
    app.include_router(review_router)
    app.include_router(suggest_router)
    app.include_router(refine_router)
    app.include_router(tokenize_router)

    @app.get("/", tags=["root"])
    async def root():
        """API root with basic metadata."""
        return {
            "name": "DevFlow AI API",
            "version": __version__,
            "status": "running",
            "environment": settings.environment,
            "docs": None if is_production else "/docs",
        }

    return app


app = create_app()
