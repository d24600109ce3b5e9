"""
Redis-backed cache facade for task list snapshots.

The facade never lets a cache failure reach the caller:
- get() returns a CacheResult that is either a hit carrying the raw bytes or a
  miss. An absent key and a failed read both come back as a miss.
- set() returns False when the write failed; callers treat that as non-fatal.

Every Redis round-trip is bounded by socket timeouts so a slow backend cannot
hold a request open indefinitely.

Example:
    cache = TaskCache.from_url("redis://localhost:6379/0", timeout_seconds=2.0)
    await cache.set("tasks", b'[{"id":1,"description":"Open computer"}]', ttl=600)
    result = await cache.get("tasks")
    if result.is_hit:
        body = result.value
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError
import structlog

from todo_api.core.errors import CacheError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CacheResult:
    """Outcome of a cache read: Hit(bytes) or Miss."""

    value: bytes | None = None

    @classmethod
    def hit(cls, value: bytes) -> CacheResult:
        return cls(value=value)

    @classmethod
    def miss(cls) -> CacheResult:
        return cls(value=None)

    @property
    def is_hit(self) -> bool:
        return self.value is not None


class TaskCache:
    """
    Thin wrapper around an async Redis client.

    Values are stored and returned as raw bytes; serialization is the caller's
    concern so cached bodies can be served verbatim.
    """

    def __init__(self, client: Redis):
        self._client = client
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._errors = 0

    @classmethod
    def from_url(cls, redis_url: str, timeout_seconds: float = 2.0) -> TaskCache:
        """
        Create a cache with a lazily connecting Redis client.

        Args:
            redis_url: Connection URL, e.g. redis://localhost:6379/0
            timeout_seconds: Connect and read/write timeout per round-trip
        """
        if not redis_url:
            raise ValueError("redis_url is required")

        client = Redis.from_url(
            redis_url,
            decode_responses=False,
            socket_timeout=timeout_seconds,
            socket_connect_timeout=timeout_seconds,
        )
        return cls(client)

    async def _read(self, key: str) -> bytes | None:
        try:
            data = await self._client.get(key)
        except (RedisError, OSError) as e:
            raise CacheError(f"Failed to read key '{key}'", details={"error": str(e)}) from e
        if isinstance(data, str):
            data = data.encode("utf-8")
        return data

    async def get(self, key: str) -> CacheResult:
        """Retrieve raw bytes for key, reporting any failure as a miss."""
        try:
            data = await self._read(key)
        except CacheError as e:
            self._errors += 1
            self._misses += 1
            logger.warning("Cache read failed, treating as miss", key=key, **e.details)
            return CacheResult.miss()

        if data is None:
            self._misses += 1
            logger.debug("Cache miss", key=key)
            return CacheResult.miss()

        self._hits += 1
        logger.debug("Cache hit", key=key, size=len(data))
        return CacheResult.hit(data)

    async def set(self, key: str, value: bytes | str, ttl: int, only_if_absent: bool = False) -> bool:
        """
        Store value under key with an expiry of ttl seconds.

        Args:
            only_if_absent: Write with NX so an existing entry is never replaced

        Returns:
            True if stored, False if the write failed or was skipped by NX
        """
        try:
            if only_if_absent:
                stored = await self._client.set(key, value, ex=ttl, nx=True)
            else:
                stored = await self._client.set(key, value, ex=ttl)
        except (RedisError, OSError) as e:
            self._errors += 1
            logger.error("Error setting cache", key=key, ttl=ttl, error=str(e))
            return False

        if stored:
            self._sets += 1
            logger.info("Cache set", key=key, ttl=ttl, only_if_absent=only_if_absent)
        elif only_if_absent:
            logger.debug("Cache set skipped, key already present", key=key)
        return bool(stored)

    async def ping(self) -> bool:
        """Check connectivity without raising."""
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError) as e:
            logger.warning("Cache ping failed", error=str(e))
            return False

    def stats(self) -> dict[str, Any]:
        """Counters since startup."""
        total = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "sets": self._sets,
            "errors": self._errors,
            "hit_rate": round(self._hits / total * 100, 2) if total else 0.0,
        }

    async def close(self) -> None:
        """Close the Redis client and release resources."""
        try:
            await self._client.aclose()
            logger.info("Closed Redis cache client")
        except (RedisError, OSError) as e:
            logger.warning("Error closing Redis client", error=str(e))


# Global cache instance (initialized once at startup)
_task_cache: TaskCache | None = None


def get_task_cache() -> TaskCache:
    """
    Get the global cache instance.

    Raises:
        RuntimeError: If cache not initialized
    """
    if _task_cache is None:
        raise RuntimeError("Task cache not initialized. Call initialize_cache() first.")
    return _task_cache


def initialize_cache(
    redis_url: str | None = None,
    timeout_seconds: float = 2.0,
    client: Redis | None = None,
) -> TaskCache:
    """
    Initialize the global cache.

    Args:
        redis_url: Connection URL, used when no client is given
        timeout_seconds: Per round-trip timeout for the created client
        client: Pre-built async Redis client (or compatible fake)
    """
    global _task_cache
    if client is not None:
        _task_cache = TaskCache(client)
    else:
        _task_cache = TaskCache.from_url(redis_url or "", timeout_seconds=timeout_seconds)
    logger.info("Global task cache initialized")
    return _task_cache


async def close_cache() -> None:
    """Close and drop the global cache."""
    global _task_cache
    if _task_cache is not None:
        await _task_cache.close()
    _task_cache = None


def reset_cache() -> None:
    """Reset the global cache (for testing)."""
    global _task_cache
    _task_cache = None
