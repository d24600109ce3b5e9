"""Core modules - task store, cache facade and error types."""

from .cache import (
    CacheResult,
    TaskCache,
    close_cache,
    get_task_cache,
    initialize_cache,
    reset_cache,
)
from .errors import AuthError, CacheError, DecodeError, EncodeError, TodoServiceError
from .task_store import (
    Task,
    TaskStore,
    get_task_store,
    initialize_store,
    reset_store,
    seed_tasks,
)

__all__ = [
    "AuthError",
    "CacheError",
    "CacheResult",
    "DecodeError",
    "EncodeError",
    "Task",
    "TaskCache",
    "TaskStore",
    "TodoServiceError",
    "close_cache",
    "get_task_cache",
    "get_task_store",
    "initialize_cache",
    "initialize_store",
    "reset_cache",
    "reset_store",
    "seed_tasks",
]
