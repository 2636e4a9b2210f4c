from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from logging.config import dictConfig
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tracker_backend.app.config import settings_public_summary
from tracker_backend.app.deps import ServiceContainer, build_container
from tracker_backend.app.middleware.request_id import RequestIdMiddleware
from tracker_backend.app.observability.logging import LOGGING_CONFIG
from tracker_backend.app.ratelimit.memory import InMemoryRateLimiter
from tracker_backend.app.routers.trackers import router as trackers_router

dictConfig(LOGGING_CONFIG)
logger = logging.getLogger(__name__)

APP_VERSION = "2026.10.0"
_start_time = time.monotonic()

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
CORS_ALLOW_METHODS = ["POST", "OPTIONS"]
CORS_MAX_AGE = 86400


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    container = container or build_container()
    settings = container.settings
    level = getattr(logging, settings.log_level.upper(), None)
    if isinstance(level, int):
        logging.getLogger().setLevel(level)

    summary = settings_public_summary(settings)
    logger.info(
        "[CFG] loaded",
        extra={
            "env": summary.get("env"),
            "provider": summary.get("llm_provider"),
            "rate_limit_backend": container.rate_limiter.backend_name,
            "missing": summary.get("missing"),
        },
    )

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        cleanup: Optional[asyncio.Task] = None
        if isinstance(container.rate_limiter, InMemoryRateLimiter):
            cleanup = asyncio.create_task(
                container.rate_limiter.run_cleanup(settings.rate_limit_cleanup_seconds)
            )
        try:
            yield
        finally:
            if cleanup is not None:
                cleanup.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await cleanup
            await container.rate_limiter.aclose()

    app = FastAPI(title="Tracker Name Resolution", version=APP_VERSION, lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list(),
        allow_credentials=True,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
        max_age=CORS_MAX_AGE,
    )
    app.add_middleware(RequestIdMiddleware, header_name=settings.request_id_header)

    app.include_router(trackers_router)

    @app.get("/health")
    async def health() -> dict:
        return {
            "status": "ok",
            "version": APP_VERSION,
            "uptime_seconds": int(time.monotonic() - _start_time),
            "configured": not container.missing_config(),
        }

    @app.exception_handler(Exception)
    async def handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:  # noqa: BLE001
        logger.exception("Unhandled error in request")
        return JSONResponse(status_code=500, content={"error": "An unexpected error occurred."})

    return app


app = create_app()


__all__ = ["app", "create_app", "APP_VERSION"]
