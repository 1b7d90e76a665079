"""PostService — cache-aside reads and write-then-invalidate mutations for posts.

A post belongs to two aggregates: all posts, and the posts of its author.
Every write invalidates both, plus the post key where the row already existed.
"""

import logging

from pydantic import TypeAdapter
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.bl_cache.aside import CacheAside
from src.bl_cache.keys import (
    ALL_COMMENTS,
    ALL_POSTS,
    Aggregate,
    comments_by_post,
    post_key,
    posts_by_author,
)
from src.bl_common.pagination import Page, Window
from src.bl_post.application.schemas import PostOut
from src.bl_post.domain.models import Post
from src.bl_post.domain.repository import PostRepositoryProtocol
from src.bl_post.infrastructure.persistence import PostRepository

logger = logging.getLogger(__name__)

_POST = TypeAdapter(PostOut)
_POST_PAGE = TypeAdapter(Page[PostOut])


class PostService:
    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        cache: CacheAside,
        repo: PostRepositoryProtocol | None = None,
    ) -> None:
        self._sessions = sessions
        self._cache = cache
        self._repo: PostRepositoryProtocol = repo or PostRepository()

    # ------------------------------------------------------------------
    # Reads (cache-aside)
    # ------------------------------------------------------------------

    async def get_post(self, post_id: int) -> PostOut | None:
        async def load() -> PostOut | None:
            async with self._sessions() as db:
                post = await self._repo.get_by_id(db, post_id)
            return PostOut.from_domain(post) if post else None

        return await self._cache.entity(post_key(post_id), _POST, load)

    async def count_posts(self) -> int:
        return await self._cache.count(ALL_POSTS, self._load_count)

    async def list_posts(self, limit: int, offset: int) -> Page[PostOut]:
        window = Window.of(limit, offset)

        async def load_items(w: Window) -> list[PostOut]:
            async with self._sessions() as db:
                posts = await self._repo.list_window(db, w)
            return [PostOut.from_domain(p) for p in posts]

        return await self._cache.page(ALL_POSTS, window, _POST_PAGE, load_items, self._load_count)

    async def list_posts_by_author(
        self, author_id: int, limit: int, offset: int
    ) -> Page[PostOut]:
        window = Window.of(limit, offset)

        async def load_items(w: Window) -> list[PostOut]:
            async with self._sessions() as db:
                posts = await self._repo.list_window_by_author(db, author_id, w)
            return [PostOut.from_domain(p) for p in posts]

        async def load_total() -> int:
            async with self._sessions() as db:
                return await self._repo.count_by_author(db, author_id)

        return await self._cache.page(
            posts_by_author(author_id), window, _POST_PAGE, load_items, load_total
        )

    async def _load_count(self) -> int:
        async with self._sessions() as db:
            return await self._repo.count(db)

    # ------------------------------------------------------------------
    # Relationship resolution (store only, never cached)
    # ------------------------------------------------------------------

    async def load_post(self, post_id: int) -> PostOut | None:
        async with self._sessions() as db:
            post = await self._repo.get_by_id(db, post_id)
        return PostOut.from_domain(post) if post else None

    async def load_posts_by_author(self, author_id: int) -> list[PostOut]:
        async with self._sessions() as db:
            posts = await self._repo.list_by_author(db, author_id)
        return [PostOut.from_domain(p) for p in posts]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_post(self, title: str, content: str, author_id: int) -> PostOut:
        async with self._sessions() as db, db.begin():
            post = await self._repo.create(db, title, content, author_id)
        logger.info("Post created: id=%s author_id=%s", post.id, author_id)

        await self._cache.invalidate(aggregates=[ALL_POSTS, posts_by_author(author_id)])
        return PostOut.from_domain(post)

    async def update_post(
        self,
        post_id: int,
        title: str | None = None,
        content: str | None = None,
    ) -> PostOut | None:
        if title is None and content is None:
            return await self.get_post(post_id)

        async with self._sessions() as db, db.begin():
            post = await self._repo.update(db, post_id, title, content)
        logger.info("Post updated: id=%s found=%s", post_id, post is not None)

        await self._invalidate_post(post_id, post)
        return PostOut.from_domain(post) if post else None

    async def delete_post(self, post_id: int) -> bool:
        """Delete a post and, by cascade, its comments. Missing ids are not an error."""
        async with self._sessions() as db, db.begin():
            post = await self._repo.delete(db, post_id)
        logger.info("Post deleted: id=%s found=%s", post_id, post is not None)

        await self._invalidate_post(
            post_id, post, extra=[comments_by_post(post_id), ALL_COMMENTS]
        )
        return True

    async def increment_views(self, post_id: int) -> PostOut | None:
        return await self._increment(post_id, "views")

    async def like_post(self, post_id: int) -> PostOut | None:
        return await self._increment(post_id, "likes")

    async def _increment(self, post_id: int, counter: str) -> PostOut | None:
        async with self._sessions() as db, db.begin():
            post = await self._repo.increment(db, post_id, counter)
        if post is None:
            return None
        logger.debug("Post %s incremented: id=%s", counter, post_id)

        await self._invalidate_post(post_id, post)
        return PostOut.from_domain(post)

    async def _invalidate_post(
        self,
        post_id: int,
        post: Post | None,
        extra: list[Aggregate] | None = None,
    ) -> None:
        aggregates = [ALL_POSTS, *(extra or [])]
        if post is not None:
            aggregates.append(posts_by_author(post.author_id))
        await self._cache.invalidate(entities=[post_key(post_id)], aggregates=aggregates)
