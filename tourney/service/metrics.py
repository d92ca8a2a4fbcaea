from __future__ import annotations

import os
import time
from typing import Any, Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()
REQUESTS = Counter(
    "tourney_http_requests_total",
    "Requests handled by the tournament service",
    ["path", "method", "status"],
    registry=REGISTRY,
)
LATENCY = Histogram(
    "tourney_http_request_seconds",
    "Tournament service request latency (seconds)",
    ["path", "method"],
    registry=REGISTRY,
)
SCORE_WRITES = Counter(
    "tourney_score_writes_total",
    "Hole scores written",
    ["capped"],
    registry=REGISTRY,
)
ROSTER_CHANGES = Counter(
    "tourney_roster_changes_total",
    "Flight membership changes",
    ["action"],
    registry=REGISTRY,
)

BUILD_VERSION = os.getenv("BUILD_VERSION", "dev")


def observe_score_write(capped: bool) -> None:
    SCORE_WRITES.labels(capped="true" if capped else "false").inc()


def observe_roster_change(action: str, count: int = 1) -> None:
    if count > 0:
        ROSTER_CHANGES.labels(action=action).inc(count)


async def metrics_app(_req: Request | None = None) -> Response:
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


class MetricsMiddleware:
    def __init__(self, app: Callable[..., Awaitable[Any]]):
        self.app = app

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Awaitable[Any]],
        send: Callable[..., Awaitable[Any]],
    ) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        path = scope.get("path", "")
        start = time.perf_counter()
        status_code = 500

        async def _send(message: dict[str, Any]) -> None:
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = message.get("status", 200)
            await send(message)

        try:
            await self.app(scope, receive, _send)
        finally:
            duration = time.perf_counter() - start
            LATENCY.labels(path=path, method=method).observe(duration)
            REQUESTS.labels(path=path, method=method, status=str(status_code)).inc()


__all__ = [
    "REGISTRY",
    "REQUESTS",
    "LATENCY",
    "SCORE_WRITES",
    "ROSTER_CHANGES",
    "BUILD_VERSION",
    "observe_roster_change",
    "observe_score_write",
    "metrics_app",
    "MetricsMiddleware",
]
