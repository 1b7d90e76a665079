"""Cache backend port and its Redis implementation.

The port is the cache collaborator of the cache-aside layer: plain
get/set/delete/flush plus a per-aggregate key index used for exact
invalidation. Unit tests inject an in-memory double conforming to the
Protocol.
"""

from typing import Protocol

import redis.asyncio as aioredis

# Deletes every member of the index set, then the index and the extra keys.
# Runs atomically on the server so a window written concurrently is either
# purged or recorded in a fresh index, never orphaned.
_PURGE_INDEX_LUA = """
local members = redis.call('SMEMBERS', KEYS[1])
for _, key in ipairs(members) do
    redis.call('DEL', key)
end
redis.call('DEL', unpack(KEYS))
return #members
"""


class CacheBackend(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(
        self,
        key: str,
        value: str,
        ttl_seconds: int,
        index_key: str | None = None,
    ) -> None: ...

    async def delete(self, *keys: str) -> None: ...

    async def purge_index(self, index_key: str, *keys: str) -> int: ...

    async def flush_all(self) -> None: ...


class RedisCacheBackend:
    """Concrete backend over a shared ``redis.asyncio`` client (decode_responses=True)."""

    def __init__(self, client: aioredis.Redis) -> None:
        self._redis = client
        self._purge = client.register_script(_PURGE_INDEX_LUA)

    async def get(self, key: str) -> str | None:
        return await self._redis.get(key)

    async def set(
        self,
        key: str,
        value: str,
        ttl_seconds: int,
        index_key: str | None = None,
    ) -> None:
        if index_key is None:
            await self._redis.set(key, value, ex=ttl_seconds)
            return
        # Index TTL is refreshed on every add so it never expires before a member.
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.set(key, value, ex=ttl_seconds)
            pipe.sadd(index_key, key)
            pipe.expire(index_key, ttl_seconds)
            await pipe.execute()

    async def delete(self, *keys: str) -> None:
        if keys:
            await self._redis.delete(*keys)

    async def purge_index(self, index_key: str, *keys: str) -> int:
        return int(await self._purge(keys=[index_key, *keys]))

    async def flush_all(self) -> None:
        await self._redis.flushdb()
