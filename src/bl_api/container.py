"""Service container — built once per process in the application lifespan.

The session factory and cache backend are passed in explicitly; nothing here
reaches for module-level connection state.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.bl_cache.aside import DEFAULT_TTL_SECONDS, CacheAside
from src.bl_cache.backend import CacheBackend
from src.bl_comment.application.service import CommentService
from src.bl_post.application.service import PostService
from src.bl_user.application.service import UserService


@dataclass
class Services:
    cache: CacheAside
    users: UserService
    posts: PostService
    comments: CommentService


def build_services(
    sessions: async_sessionmaker[AsyncSession],
    backend: CacheBackend,
    ttl_seconds: int = DEFAULT_TTL_SECONDS,
) -> Services:
    cache = CacheAside(backend, ttl_seconds=ttl_seconds)
    return Services(
        cache=cache,
        users=UserService(sessions, cache),
        posts=PostService(sessions, cache),
        comments=CommentService(sessions, cache),
    )
