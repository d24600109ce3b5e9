"""
In-memory task store, the single source of truth for the task list.

All reads and writes go through one asyncio lock so concurrent requests see a
consistent ordered list. Mutations return a snapshot taken under the same lock,
which callers use to refresh the cache without racing other writers.
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
import structlog

logger = structlog.get_logger(__name__)


class Task(BaseModel):
    """
    A unit of to-do work.

    Field names are matched case-insensitively and a null description reads
    as empty. Types stay strict, so ``"id": "4"`` is rejected.

    Attributes:
        id: Task identifier (uniqueness is not enforced)
        description: Free-text description, empty when omitted
    """

    model_config = ConfigDict(strict=True)

    id: int
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def normalize_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        normalized = {key.lower() if isinstance(key, str) else key: value for key, value in data.items()}
        if "description" in normalized and normalized["description"] is None:
            normalized["description"] = ""
        return normalized


SEED_TASKS: tuple[tuple[int, str], ...] = (
    (1, "Open computer"),
    (2, "Do homework"),
    (3, "Close computer"),
)


def seed_tasks() -> list[Task]:
    """Fresh copies of the tasks every process starts with."""
    return [Task(id=task_id, description=description) for task_id, description in SEED_TASKS]


class TaskStore:
    """
    Lock-guarded ordered list of tasks.

    Example:
        >>> store = TaskStore(seed_tasks())
        >>> snapshot = await store.append(Task(id=4, description="Water plants"))
        >>> [t.id for t in snapshot]
        [1, 2, 3, 4]
    """

    def __init__(self, tasks: list[Task] | None = None):
        self._tasks: list[Task] = list(tasks or [])
        self._lock = asyncio.Lock()

    def _snapshot(self) -> list[Task]:
        return [task.model_copy() for task in self._tasks]

    async def list(self) -> list[Task]:
        """Return a copy of the current list in insertion order."""
        async with self._lock:
            return self._snapshot()

    async def append(self, task: Task) -> list[Task]:
        """
        Append a task to the end of the list.

        Args:
            task: Task to add (duplicate ids are accepted)

        Returns:
            Snapshot of the list after the append
        """
        async with self._lock:
            self._tasks.append(task.model_copy())
            logger.debug("Task appended", task_id=task.id, total_tasks=len(self._tasks))
            return self._snapshot()

    async def update(self, task: Task) -> tuple[bool, list[Task]]:
        """
        Overwrite the description of the first task with a matching id.

        Returns:
            (updated, snapshot) where updated is False when no task matched
        """
        async with self._lock:
            for existing in self._tasks:
                if existing.id == task.id:
                    existing.description = task.description
                    logger.debug("Task updated", task_id=task.id)
                    return True, self._snapshot()
            logger.debug("Update skipped, no matching task", task_id=task.id)
            return False, self._snapshot()

    async def remove(self, task_id: int) -> tuple[bool, list[Task]]:
        """
        Remove the first task with a matching id, keeping the order of the rest.

        Returns:
            (removed, snapshot) where removed is False when no task matched
        """
        async with self._lock:
            for index, existing in enumerate(self._tasks):
                if existing.id == task_id:
                    del self._tasks[index]
                    logger.debug("Task removed", task_id=task_id, total_tasks=len(self._tasks))
                    return True, self._snapshot()
            logger.debug("Remove skipped, no matching task", task_id=task_id)
            return False, self._snapshot()

    async def count(self) -> int:
        """Get total number of tasks."""
        async with self._lock:
            return len(self._tasks)


# Global store instance (initialized once at startup)
_task_store: TaskStore | None = None


def get_task_store() -> TaskStore:
    """
    Get the global task store instance.

    Raises:
        RuntimeError: If store not initialized
    """
    if _task_store is None:
        raise RuntimeError("Task store not initialized. Call initialize_store() first.")
    return _task_store


def initialize_store(tasks: list[Task] | None = None) -> TaskStore:
    """Initialize the global task store, seeded unless tasks are given."""
    global _task_store
    _task_store = TaskStore(seed_tasks() if tasks is None else tasks)
    logger.info("Global task store initialized", total_tasks=len(_task_store._tasks))
    return _task_store


def reset_store() -> None:
    """Reset the global store (for testing)."""
    global _task_store
    _task_store = None
