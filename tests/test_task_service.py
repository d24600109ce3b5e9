"""
Unit tests for the cache-aside TaskService.
"""

import json
from unittest.mock import patch

import pytest

from todo_api.core.cache import TaskCache
from todo_api.core.errors import DecodeError, EncodeError
from todo_api.core.task_store import Task, TaskStore, seed_tasks
from todo_api.services.task_service import (
    TaskService,
    decode_task,
    encode_task,
    encode_tasks,
)

from .fakes import FakeRedis, UnavailableRedis


@pytest.fixture
def redis():
    return FakeRedis()


@pytest.fixture
def service(redis):
    return TaskService(TaskStore(seed_tasks()), TaskCache(redis), cache_key="tasks", ttl_seconds=600)


class TestCodec:
    """Test request decoding and response encoding."""

    def test_encode_tasks_shape(self):
        body = encode_tasks([Task(id=1, description="Open computer")])
        assert json.loads(body) == [{"id": 1, "description": "Open computer"}]

    def test_encode_task_shape(self):
        assert json.loads(encode_task(Task(id=4, description="X"))) == {"id": 4, "description": "X"}

    def test_decode_id_only(self):
        assert decode_task(b'{"id": 2}') == Task(id=2, description="")

    def test_decode_matches_field_names_case_insensitively(self):
        assert decode_task(b'{"ID": 4, "Description": "X"}') == Task(id=4, description="X")

    def test_decode_null_description_reads_as_empty(self):
        assert decode_task(b'{"id": 4, "description": null}') == Task(id=4, description="")

    @pytest.mark.parametrize(
        "body",
        [
            b"",
            b"not json",
            b'{"id": 1',
            b"[]",
            b'{"description": "no id"}',
            b'{"id": "1"}',
            b'{"id": 1.5}',
            b'{"id": null}',
            b'{"ID": "4"}',
        ],
    )
    def test_decode_rejects_malformed(self, body):
        with pytest.raises(DecodeError):
            decode_task(body)


class TestListTasks:
    """Test the read path."""

    @pytest.mark.asyncio
    async def test_miss_serializes_store(self, service):
        result = await service.list_tasks()

        assert result.from_cache is False
        assert [t["id"] for t in json.loads(result.body)] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_hit_returns_cached_bytes_verbatim(self, service, redis):
        redis.data["tasks"] = b'[{"id":9,"description":"cached"}]'

        result = await service.list_tasks()

        assert result.from_cache is True
        assert result.body == b'[{"id":9,"description":"cached"}]'

    @pytest.mark.asyncio
    async def test_list_does_not_write_cache_itself(self, service, redis):
        await service.list_tasks()
        assert redis.set_calls == []

    @pytest.mark.asyncio
    async def test_refresh_cache_uses_ttl(self, service, redis):
        assert await service.refresh_cache(b"[]") is True
        assert redis.set_calls == [("tasks", b"[]", 600)]

    @pytest.mark.asyncio
    async def test_populate_cache_fills_empty_key(self, service, redis):
        assert await service.populate_cache(b"[]") is True
        assert redis.data["tasks"] == b"[]"

    @pytest.mark.asyncio
    async def test_late_populate_keeps_newer_mutation_snapshot(self, service, redis):
        """A list miss whose cache fill runs after a create must not roll the cache back."""
        miss = await service.list_tasks()
        assert miss.from_cache is False

        await service.create_task(b'{"id": 4, "description": "X"}')
        assert await service.populate_cache(miss.body) is False

        result = await service.list_tasks()
        assert result.from_cache is True
        assert [t["id"] for t in json.loads(result.body)] == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_cache_outage_falls_back_to_store(self):
        service = TaskService(TaskStore(seed_tasks()), TaskCache(UnavailableRedis()))

        result = await service.list_tasks()

        assert result.from_cache is False
        assert len(json.loads(result.body)) == 3
        assert await service.refresh_cache(result.body) is False


class TestMutations:
    """Test create/update/delete with cache refresh."""

    @pytest.mark.asyncio
    async def test_create_echoes_task_and_refreshes_cache(self, service, redis):
        body = await service.create_task(b'{"id": 4, "description": "X"}')

        assert json.loads(body) == {"id": 4, "description": "X"}
        cached = json.loads(redis.data["tasks"])
        assert cached[-1] == {"id": 4, "description": "X"}
        assert len(cached) == 4

    @pytest.mark.asyncio
    async def test_update_unknown_id_still_refreshes(self, service, redis):
        body = await service.update_task(b'{"id": 99, "description": "ghost"}')

        assert json.loads(body) == {"id": 99, "description": "ghost"}
        assert [t["id"] for t in json.loads(redis.data["tasks"])] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_delete_refreshes_cache(self, service, redis):
        await service.delete_task(b'{"id": 2}')

        assert [t["id"] for t in json.loads(redis.data["tasks"])] == [1, 3]

    @pytest.mark.asyncio
    async def test_decode_error_leaves_store_untouched(self, service, redis):
        with pytest.raises(DecodeError):
            await service.create_task(b"{broken")

        assert await service.store.count() == 3
        assert redis.set_calls == []

    @pytest.mark.asyncio
    async def test_encode_error_skips_cache_refresh(self, service, redis):
        with patch(
            "todo_api.services.task_service.encode_task",
            side_effect=EncodeError("boom"),
        ):
            with pytest.raises(EncodeError):
                await service.create_task(b'{"id": 4, "description": "X"}')

        assert redis.set_calls == []

    @pytest.mark.asyncio
    async def test_cache_write_failure_is_not_fatal(self):
        service = TaskService(TaskStore(seed_tasks()), TaskCache(UnavailableRedis()))

        body = await service.create_task(b'{"id": 4, "description": "X"}')

        assert json.loads(body)["id"] == 4
        assert await service.store.count() == 4
