"""CacheAside — read-through / write-invalidate mediation between services and the store.

Read path:
  1. render the key from a structured descriptor
  2. GET; on hit deserialize and return (no store read)
  3. on miss call the loader, SET the serialized result with the TTL, return it

Negative results (loader returned None) are never cached, so a lookup of a
nonexistent id always reaches the store.

Write path: services commit to the store first, then call ``invalidate``.
Invalidation is best-effort and not transactional with the store write.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar, cast

from pydantic import TypeAdapter

from src.bl_cache.backend import CacheBackend
from src.bl_cache.keys import Aggregate, EntityKey
from src.bl_common.pagination import Page, PaginationInfo, Window

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600

T = TypeVar("T")

_COUNT_ADAPTER: TypeAdapter[int] = TypeAdapter(int)


class CacheAside:
    def __init__(self, backend: CacheBackend, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        self._backend = backend
        self._ttl = ttl_seconds

    async def _read_through(
        self,
        key: str,
        adapter: TypeAdapter[T],
        loader: Callable[[], Awaitable[T | None]],
        index: Aggregate | None = None,
    ) -> T | None:
        raw = await self._backend.get(key)
        if raw is not None:
            logger.debug("Cache hit: %s", key)
            return adapter.validate_json(raw)

        logger.debug("Cache miss: %s", key)
        value = await loader()
        if value is None:
            return None

        payload = adapter.dump_json(value).decode()
        await self._backend.set(
            key,
            payload,
            self._ttl,
            index_key=index.index_key() if index is not None else None,
        )
        return value

    async def entity(
        self,
        key: EntityKey,
        adapter: TypeAdapter[T],
        loader: Callable[[], Awaitable[T | None]],
    ) -> T | None:
        """Single-entity lookup. Returns None (uncached) when the store has no row."""
        return await self._read_through(key.render(), adapter, loader)

    async def count(
        self,
        aggregate: Aggregate,
        loader: Callable[[], Awaitable[int]],
    ) -> int:
        total = await self._read_through(aggregate.count_key(), _COUNT_ADAPTER, loader)
        return total if total is not None else 0

    async def page(
        self,
        aggregate: Aggregate,
        window: Window,
        adapter: TypeAdapter[Page[T]],
        load_items: Callable[[Window], Awaitable[list[T]]],
        load_total: Callable[[], Awaitable[int]],
    ) -> Page[T]:
        """Paginated lookup.

        The total comes from the aggregate's own count key, so ``total`` on a
        freshly built page always agrees with the count query.
        """

        async def load() -> Page[T]:
            total = await self.count(aggregate, load_total)
            items = await load_items(window)
            return adapter.validate_python(
                {"items": items, "pagination": PaginationInfo.for_window(total, window)}
            )

        result = await self._read_through(
            aggregate.window_key(window), adapter, load, index=aggregate
        )
        # load() never returns None
        return cast(Page[T], result)

    async def invalidate(
        self,
        entities: Iterable[EntityKey] = (),
        aggregates: Iterable[Aggregate] = (),
    ) -> None:
        """Delete entity keys, then every tracked window plus the count of each aggregate."""
        entity_keys = [key.render() for key in entities]
        if entity_keys:
            await self._backend.delete(*entity_keys)
            logger.debug("Invalidated entity keys: %s", entity_keys)

        for aggregate in dict.fromkeys(aggregates):
            purged = await self._backend.purge_index(
                aggregate.index_key(), aggregate.count_key()
            )
            logger.debug("Invalidated aggregate %s (%d windows)", aggregate.prefix, purged)

    async def flush(self) -> None:
        await self._backend.flush_all()
        logger.info("Cache flushed")
