from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from sqlalchemy import text

from fundlink.core.config import settings
from fundlink.core.database import async_session_factory, engine
from fundlink.core.errors import (
    DomainError,
    domain_exception_handler,
    global_exception_handler,
    http_exception_handler,
)
from fundlink.core.sentry import init_sentry

import fundlink.models  # noqa: F401  register all models at startup

from fundlink.modules.matching.router import router as matching_router
from fundlink.modules.notifications.router import router as notifications_router

# ── Sentry: must be initialised BEFORE FastAPI app is created ────────────────
init_sentry(settings.SENTRY_DSN, settings.SENTRY_ENVIRONMENT, settings.APP_VERSION)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    logger.info(
        "Starting FundLink API",
        env=settings.APP_ENV,
        min_investors=settings.MIN_INVESTORS_FOR_ALLOTMENT,
        max_refresh_count=settings.MAX_REFRESH_COUNT,
    )
    yield
    logger.info("Shutting down FundLink API")
    await engine.dispose()


_is_prod = settings.APP_ENV == "production"

app = FastAPI(
    title="FundLink API",
    description="Fundraising marketplace connecting founders with matched investors.",
    version="0.1.0",
    docs_url=None if _is_prod else "/docs",
    redoc_url=None if _is_prod else "/redoc",
    openapi_url=None if _is_prod else "/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
)

app.add_exception_handler(DomainError, domain_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, global_exception_handler)


# ── X-API-Version response header ────────────────────────────────────────────


@app.middleware("http")
async def add_version_header(request: Request, call_next) -> Response:
    response = await call_next(request)
    response.headers["X-API-Version"] = "v1"
    return response


# ── Health check (root-level, not under /v1) ─────────────────────────────────


@app.get("/health")
async def health_check() -> dict:
    """Probe PostgreSQL; report degraded rather than failing the request."""
    checks: dict[str, dict] = {}

    try:
        async with async_session_factory() as db:
            await db.execute(text("SELECT 1"))
        checks["postgresql"] = {"status": "healthy"}
    except Exception as exc:
        checks["postgresql"] = {"status": "unhealthy", "error": str(exc)}

    overall = (
        "healthy"
        if all(c["status"] == "healthy" for c in checks.values())
        else "degraded"
    )
    return {"status": overall, "service": "fundlink-api", "checks": checks}


# ── /v1 versioned router ──────────────────────────────────────────────────────

api_v1 = APIRouter(prefix="/v1")

api_v1.include_router(matching_router)
api_v1.include_router(notifications_router)

app.include_router(api_v1)
