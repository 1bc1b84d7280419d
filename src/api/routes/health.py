# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

- /health: Liveness, the process is up.
- /health/live: Alias of /health for orchestrators.
- /health/ready: Readiness, the database and Redis answer.
"""

import logging
import time
from typing import Literal

import redis.asyncio as redis
from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from src.core.config import get_settings
from src.infrastructure.database.connection import check_database_connection
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


class ComponentHealth(BaseModel):
    """Health status of a single component."""

    status: Literal["healthy", "unhealthy"]
    latency_ms: float | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    """Overall health response."""

    status: Literal["healthy", "degraded", "unhealthy"]
    timestamp: str
    version: str = "1.0.0"
    environment: str
    components: dict[str, ComponentHealth] = {}


async def check_database() -> ComponentHealth:
    """Check database connectivity."""
    start = time.perf_counter()
    healthy = await check_database_connection()
    latency = (time.perf_counter() - start) * 1000

    if healthy:
        return ComponentHealth(status="healthy", latency_ms=round(latency, 2))
    return ComponentHealth(status="unhealthy", message="Database unreachable")


async def check_redis() -> ComponentHealth:
    """Check Redis connectivity (broker and rate-limit storage)."""
    settings = get_settings()
    start = time.perf_counter()
    client = redis.from_url(settings.redis.url)
    try:
        await client.ping()
        latency = (time.perf_counter() - start) * 1000
        return ComponentHealth(status="healthy", latency_ms=round(latency, 2))
    except redis.RedisError as e:
        logger.warning("Redis health check failed: %s", str(e))
        return ComponentHealth(status="unhealthy", message=str(e))
    finally:
        await client.aclose()


@router.get("/health", response_model=HealthResponse)
@router.get("/health/live", response_model=HealthResponse, include_in_schema=False)
async def health() -> HealthResponse:
    """Liveness probe."""
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        timestamp=utc_now().isoformat(),
        environment=settings.environment,
    )


@router.get("/health/ready", response_model=HealthResponse)
async def ready(response: Response) -> HealthResponse:
    """Readiness probe.

    The database is required. Redis only degrades the status, since
    notifications are best-effort.
    """
    settings = get_settings()
    components = {
        "database": await check_database(),
        "redis": await check_redis(),
    }

    if components["database"].status == "unhealthy":
        overall = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif components["redis"].status == "unhealthy":
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(
        status=overall,
        timestamp=utc_now().isoformat(),
        environment=settings.environment,
        components=components,
    )
