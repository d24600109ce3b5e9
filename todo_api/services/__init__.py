"""Service layer for the Task List API."""

from todo_api.config import settings
from todo_api.core.cache import get_task_cache
from todo_api.core.task_store import get_task_store

from .task_service import (
    ListResult,
    TaskService,
    decode_task,
    encode_task,
    encode_tasks,
)

__all__ = [
    "ListResult",
    "TaskService",
    "decode_task",
    "encode_task",
    "encode_tasks",
    "get_task_service",
]


def get_task_service() -> TaskService:
    """Build a TaskService over the global store and cache."""
    return TaskService(
        store=get_task_store(),
        cache=get_task_cache(),
        cache_key=settings.cache_key,
        ttl_seconds=settings.cache_ttl_seconds,
    )
