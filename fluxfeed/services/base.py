"""FastAPI app factory — the common shape of every fluxfeed service.

Usage:
    from fluxfeed.services.base import create_app

    app = create_app("signal-api", version="1.0.0", dependencies=["cache"])
"""

import logging
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fluxfeed.domain.errors import FluxfeedError
from fluxfeed.domain.health import DependencyHealth, HealthStatus

logger = logging.getLogger(__name__)

# service start time (uptime)
_start_time: float = 0.0


def error_response(exc: Exception, default: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc) or default})


def create_app(
    service_name: str,
    *,
    version: str = "1.0.0",
    lifespan: Callable | None = None,
    dependencies: list[str] | None = None,
) -> FastAPI:
    """FastAPI app factory — shared health check + error handlers.

    Args:
        service_name: service identifier (e.g. "signal-api")
        version: service version
        lifespan: custom lifespan context manager (startup/shutdown)
        dependencies: dependencies probed by /health ("cache")
    """
    deps = dependencies or []

    @asynccontextmanager
    async def wrapped_lifespan(app: FastAPI) -> AsyncIterator[None]:
        global _start_time
        _start_time = time.monotonic()
        logger.info("[%s] Starting v%s", service_name, version)
        if lifespan:
            async with lifespan(app):
                yield
        else:
            yield
        logger.info("[%s] Shutting down", service_name)

    app = FastAPI(
        title=f"fluxfeed {service_name}",
        version=version,
        lifespan=wrapped_lifespan,
    )

    # --- Error Handlers ---

    @app.exception_handler(FluxfeedError)
    async def fluxfeed_error_handler(request: Request, exc: FluxfeedError) -> JSONResponse:
        logger.error("[%s] %s %s failed: %s", service_name, request.method, request.url.path, exc)
        return error_response(exc, "upstream_error")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "[%s] %s %s unhandled error", service_name, request.method, request.url.path, exc_info=exc
        )
        return error_response(exc, "internal_error")

    # --- Health Check ---

    @app.get("/health")
    @app.get("/api/health", include_in_schema=False)  # dashboard front-end path
    async def health() -> HealthStatus:
        dep_health: dict[str, DependencyHealth] = {}
        overall = "healthy"

        for dep in deps:
            dep_health[dep] = _check_dependency(dep)
            if dep_health[dep].status == "down":
                # all dependencies are optional
                overall = "degraded"
            elif dep_health[dep].status == "degraded" and overall == "healthy":
                overall = "degraded"

        return HealthStatus(
            service=service_name,
            status=overall,
            uptime_seconds=time.monotonic() - _start_time,
            version=version,
            dependencies=dep_health,
            timestamp=datetime.now(UTC),
        )

    return app


def _check_dependency(name: str) -> DependencyHealth:
    """Dependency probe."""
    start = time.monotonic()
    try:
        if name == "cache":
            from fluxfeed.domain.config import get_config

            if not get_config().cache.enabled:
                return DependencyHealth(status="healthy", message="cache disabled")

            from fluxfeed.infra.redis.client import get_redis

            get_redis().ping()
        else:
            return DependencyHealth(status="healthy", message=f"Unknown dep: {name}")

        latency = (time.monotonic() - start) * 1000
        status = "healthy" if latency < 1000 else "degraded"
        return DependencyHealth(status=status, latency_ms=round(latency, 1))

    except Exception as e:
        latency = (time.monotonic() - start) * 1000
        return DependencyHealth(
            status="down",
            latency_ms=round(latency, 1),
            message=str(e)[:200],
        )
