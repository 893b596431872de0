from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..infrastructure.config import get_settings
from ..infrastructure.logging import configure_logging
from ..presentation.api.deps.containers import get_notification_dispatcher
from ..presentation.api.routers import direct_message_logs as logs_router
from ..presentation.api.routers import direct_message_rooms as rooms_router
from ..presentation.docs import get_openapi_tags
from ..presentation.errors import setup_error_handlers

logger = logging.getLogger("dmroom.request")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # let in-flight "new message" notifications finish before the loop goes away
    dispatcher = app.dependency_overrides.get(get_notification_dispatcher, get_notification_dispatcher)()
    await dispatcher.drain()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL.upper())

    is_docs_enabled = settings.APP_ENV in {"dev", "test"}
    app = FastAPI(
        title=settings.APP_NAME,
        description="Two-party direct message rooms",
        version="0.1.0",
        docs_url="/docs" if is_docs_enabled else None,
        redoc_url="/redoc" if is_docs_enabled else None,
        openapi_url="/openapi.json" if is_docs_enabled else None,
        openapi_tags=get_openapi_tags(),
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_error_handlers(app)

    @app.middleware("http")
    async def request_id_timing_middleware(request, call_next):  # type: ignore[override]
        req_id = str(uuid.uuid4())
        start = time.perf_counter()
        request.state.request_id = req_id  # type: ignore[attr-defined]
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000.0
        logger.info(
            "request",
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        response.headers.setdefault("X-Request-ID", req_id)
        response.headers.setdefault("Server-Timing", f"app;dur={duration_ms:.2f}")
        return response

    # Routers
    app.include_router(rooms_router.router)
    app.include_router(logs_router.router)

    @app.get("/healthz", tags=["health"])
    async def healthz():
        return {"status": "ok"}

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("dmroom.bootstrap.asgi:app", host=settings.HOST, port=settings.PORT)
