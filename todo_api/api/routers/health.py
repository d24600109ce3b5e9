"""Health check endpoints."""

from fastapi import APIRouter

from todo_api.api.schemas import CacheStats, HealthStatus
from todo_api.config import settings
from todo_api.core.cache import get_task_cache
from todo_api.core.task_store import get_task_store

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    """Health check endpoint for load balancers and monitoring."""
    cache = get_task_cache()
    cache_ok = await cache.ping()
    dependencies = {"cache": "healthy" if cache_ok else "unavailable"}

    task_count = await get_task_store().count()

    # The store is authoritative, so a missing cache only degrades the service.
    overall_status = "healthy" if cache_ok else "degraded"

    return HealthStatus(
        status=overall_status,
        service="task-list-api",
        version=settings.api_version,
        tasks_in_memory=task_count,
        dependencies=dependencies,
        cache=CacheStats(**cache.stats()),
    )
