"""Health check models."""

from datetime import datetime

from pydantic import BaseModel


class DependencyHealth(BaseModel):
    """Dependency status."""

    status: str  # "healthy" | "degraded" | "down"
    latency_ms: float | None = None
    message: str | None = None


class HealthStatus(BaseModel):
    """Service health."""

    service: str
    status: str  # "healthy" | "degraded" | "unhealthy"
    uptime_seconds: float
    version: str = "1.0.0"
    dependencies: dict[str, DependencyHealth] = {}
    timestamp: datetime
