"""In-memory reference implementation of the tournament record service."""

from __future__ import annotations

import os

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from tourney.config import env_bool

from .metrics import BUILD_VERSION, MetricsMiddleware, metrics_app
from .routes import router as tournament_router


def create_app() -> FastAPI:
    app = FastAPI(title="tourney", version=BUILD_VERSION)
    allow = os.getenv(
        "CORS_ALLOW_ORIGINS", "http://localhost,http://127.0.0.1"
    ).split(",")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in allow if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    metrics_enabled = env_bool("TOURNEY_METRICS_ENABLED", True)
    if metrics_enabled:
        app.add_middleware(MetricsMiddleware)

    app.include_router(tournament_router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "version": BUILD_VERSION}

    if metrics_enabled:
        metrics_router = APIRouter()

        @metrics_router.get("/metrics", include_in_schema=False)
        async def _metrics_endpoint(request: Request):
            return await metrics_app(request)

        app.include_router(metrics_router)
    return app


app = create_app()
