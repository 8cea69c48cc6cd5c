"""
backend/kupon/main.py

Purpose:
    FastAPI application bootstrap: builds the game container on startup,
    wires middleware and routers, and maps domain errors to HTTP responses.

Dependencies:
    - kupon.container
    - kupon.middleware.logging
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kupon.config import settings
from kupon.container import build_container
from kupon.errors import KuponError
from kupon.middleware.logging import StructuredLoggingMiddleware, setup_logging

logger = logging.getLogger("kupon")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    app.state.container = build_container(settings)
    logger.info("Kupon started: source=%s", settings.CATALOG_SOURCE)

    yield

    await app.state.container.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Daily odds coupon game",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Auth-Token"],
)

# Structured logging
app.add_middleware(StructuredLoggingMiddleware)

# Routers
from kupon.routers.auth import router as auth_router
from kupon.routers.matches import router as matches_router
from kupon.routers.coupons import router as coupons_router
from kupon.routers.results import router as results_router
from kupon.routers.leaderboard import router as leaderboard_router

app.include_router(auth_router)
app.include_router(matches_router)
app.include_router(coupons_router)
app.include_router(results_router)
app.include_router(leaderboard_router)


@app.exception_handler(KuponError)
async def kupon_error_handler(request: Request, exc: KuponError):
    if exc.status_code >= 500:
        logger.error("%s on %s %s", exc.code, request.method, request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Return clean validation errors without leaking internal field paths."""
    errors = []
    for err in exc.errors():
        loc = err.get("loc", ())
        # Strip the "body" / "query" prefix for cleaner messages
        field = ".".join(str(l) for l in loc[1:]) if len(loc) > 1 else str(loc[-1]) if loc else "unknown"
        errors.append({"field": field, "message": err.get("msg", "Invalid value.")})
    return JSONResponse(status_code=422, content={"detail": "Validation error.", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all: log the real error, return a safe generic message."""
    request_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception on %s %s (request %s)", request.method, request.url.path, request_id)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal error occurred.", "requestId": request_id},
    )


@app.get("/health")
async def health(request: Request):
    container = request.app.state.container
    return {
        "status": "healthy",
        "catalog_source": settings.CATALOG_SOURCE,
        "today": container.today(),
        "catalog_published": container.catalog.is_published(container.today()),
    }
