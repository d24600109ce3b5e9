"""
Task service: CRUD over the task store with cache-aside refresh.

Reads check the cache first and fall back to the store. Writes go to the store
first, then the post-mutation snapshot is written to the cache. The cache is
only refreshed once the response body has been encoded.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import TypeAdapter, ValidationError
import structlog

from todo_api.core.cache import TaskCache
from todo_api.core.errors import DecodeError, EncodeError
from todo_api.core.task_store import Task, TaskStore

logger = structlog.get_logger(__name__)

_task_list_adapter = TypeAdapter(list[Task])


def encode_tasks(tasks: list[Task]) -> bytes:
    """Serialize a task list the same way for responses and cache entries."""
    try:
        return _task_list_adapter.dump_json(tasks)
    except (TypeError, ValueError) as e:
        raise EncodeError("Failed to encode task list", details={"error": str(e)}) from e


def encode_task(task: Task) -> bytes:
    try:
        return task.model_dump_json().encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodeError("Failed to encode task", details={"error": str(e)}) from e


def decode_task(body: bytes) -> Task:
    """
    Parse a request body as a single task.

    Raises:
        DecodeError: If the body is not a JSON object with an integer id
    """
    try:
        return Task.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError("Malformed task body", details={"errors": e.error_count()}) from e


@dataclass
class ListResult:
    """
    Body for a list request.

    Attributes:
        body: JSON bytes to send
        from_cache: True when body came straight from the cache
    """

    body: bytes
    from_cache: bool


class TaskService:
    """
    Cache-aside operations on the task list.

    Mutations respond with the submitted task, not the full list.
    """

    def __init__(self, store: TaskStore, cache: TaskCache, cache_key: str = "tasks", ttl_seconds: int = 600):
        self.store = store
        self.cache = cache
        self.cache_key = cache_key
        self.ttl_seconds = ttl_seconds

    async def list_tasks(self) -> ListResult:
        """
        Return the task list, cached bytes verbatim on a hit.

        On a miss the caller is expected to schedule populate_cache(result.body).
        """
        cached = await self.cache.get(self.cache_key)
        if cached.is_hit:
            return ListResult(body=cached.value, from_cache=True)

        tasks = await self.store.list()
        return ListResult(body=encode_tasks(tasks), from_cache=False)

    async def populate_cache(self, body: bytes) -> bool:
        """
        Fill an empty cache with a snapshot read on a list miss.

        Uses NX so a snapshot written by a mutation in the meantime is kept.
        """
        stored = await self.cache.set(self.cache_key, body, ttl=self.ttl_seconds, only_if_absent=True)
        if not stored:
            logger.debug("Cache populate skipped", key=self.cache_key)
        return stored

    async def refresh_cache(self, body: bytes) -> bool:
        """Best-effort overwrite with a post-mutation snapshot; failures are logged only."""
        stored = await self.cache.set(self.cache_key, body, ttl=self.ttl_seconds)
        if not stored:
            logger.warning("Cache refresh skipped", key=self.cache_key)
        return stored

    async def create_task(self, body: bytes) -> bytes:
        task = decode_task(body)
        snapshot = await self.store.append(task)
        logger.info("Task created", task_id=task.id)
        return await self._respond(task, snapshot)

    async def update_task(self, body: bytes) -> bytes:
        task = decode_task(body)
        updated, snapshot = await self.store.update(task)
        logger.info("Task update processed", task_id=task.id, updated=updated)
        return await self._respond(task, snapshot)

    async def delete_task(self, body: bytes) -> bytes:
        task = decode_task(body)
        removed, snapshot = await self.store.remove(task.id)
        logger.info("Task delete processed", task_id=task.id, removed=removed)
        return await self._respond(task, snapshot)

    async def _respond(self, task: Task, snapshot: list[Task]) -> bytes:
        # An EncodeError here propagates as a 500 and the cache is left untouched.
        response_body = encode_task(task)
        await self.refresh_cache(encode_tasks(snapshot))
        return response_body
