"""Pydantic schemas for the API - Simple DTOs only."""

from datetime import datetime

from pydantic import BaseModel, Field

# Import from domain layer
from todo_api.core.task_store import Task

__all__ = ["CacheStats", "HealthStatus", "Task"]


class CacheStats(BaseModel):
    """Cache counters since startup."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    errors: int = 0
    hit_rate: float = 0.0


class HealthStatus(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    timestamp: datetime = Field(default_factory=datetime.now)
    tasks_in_memory: int
    dependencies: dict[str, str] = {}
    cache: CacheStats = Field(default_factory=CacheStats)
