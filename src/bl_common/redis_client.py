"""Redis client construction for the cache-aside layer.

The client is created once in the application lifespan and handed to
RedisCacheBackend; failing to reach Redis at startup is fatal.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.bl_common.errors import CacheUnavailableError

logger = logging.getLogger(__name__)


async def create_redis(url: str) -> aioredis.Redis:
    """Connect and PING. Raises CacheUnavailableError if Redis is unreachable."""
    client = aioredis.from_url(url, decode_responses=True)
    try:
        await client.ping()
    except (RedisError, OSError) as exc:
        await client.aclose()
        raise CacheUnavailableError(str(exc)) from exc
    logger.info("Redis connected: %s", url)
    return client


async def close_redis(client: aioredis.Redis) -> None:
    """Close the Redis connection pool."""
    await client.aclose()
