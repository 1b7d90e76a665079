"""CommentService — cache-aside reads and write-then-invalidate mutations for comments.

Comments have no single-entity query, so writes only touch aggregates: all
comments, and the comments of the owning post.
"""

import logging

from pydantic import TypeAdapter
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.bl_cache.aside import CacheAside
from src.bl_cache.keys import ALL_COMMENTS, comments_by_post
from src.bl_comment.application.schemas import CommentOut
from src.bl_comment.domain.models import Comment
from src.bl_comment.domain.repository import CommentRepositoryProtocol
from src.bl_comment.infrastructure.persistence import CommentRepository
from src.bl_common.pagination import Page, Window

logger = logging.getLogger(__name__)

_COMMENT_PAGE = TypeAdapter(Page[CommentOut])


class CommentService:
    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        cache: CacheAside,
        repo: CommentRepositoryProtocol | None = None,
    ) -> None:
        self._sessions = sessions
        self._cache = cache
        self._repo: CommentRepositoryProtocol = repo or CommentRepository()

    # ------------------------------------------------------------------
    # Reads (cache-aside)
    # ------------------------------------------------------------------

    async def count_comments(self) -> int:
        return await self._cache.count(ALL_COMMENTS, self._load_count)

    async def list_comments(self, limit: int, offset: int) -> Page[CommentOut]:
        window = Window.of(limit, offset)

        async def load_items(w: Window) -> list[CommentOut]:
            async with self._sessions() as db:
                comments = await self._repo.list_window(db, w)
            return [CommentOut.from_domain(c) for c in comments]

        return await self._cache.page(
            ALL_COMMENTS, window, _COMMENT_PAGE, load_items, self._load_count
        )

    async def list_comments_by_post(
        self, post_id: int, limit: int, offset: int
    ) -> Page[CommentOut]:
        window = Window.of(limit, offset)

        async def load_items(w: Window) -> list[CommentOut]:
            async with self._sessions() as db:
                comments = await self._repo.list_window_by_post(db, post_id, w)
            return [CommentOut.from_domain(c) for c in comments]

        async def load_total() -> int:
            async with self._sessions() as db:
                return await self._repo.count_by_post(db, post_id)

        return await self._cache.page(
            comments_by_post(post_id), window, _COMMENT_PAGE, load_items, load_total
        )

    async def _load_count(self) -> int:
        async with self._sessions() as db:
            return await self._repo.count(db)

    # ------------------------------------------------------------------
    # Relationship resolution (store only, never cached)
    # ------------------------------------------------------------------

    async def load_comments_by_post(self, post_id: int) -> list[CommentOut]:
        async with self._sessions() as db:
            comments = await self._repo.list_by_post(db, post_id)
        return [CommentOut.from_domain(c) for c in comments]

    async def load_comments_by_author(self, author_id: int) -> list[CommentOut]:
        async with self._sessions() as db:
            comments = await self._repo.list_by_author(db, author_id)
        return [CommentOut.from_domain(c) for c in comments]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_comment(self, content: str, author_id: int, post_id: int) -> CommentOut:
        async with self._sessions() as db, db.begin():
            comment = await self._repo.create(db, content, author_id, post_id)
        logger.info("Comment created: id=%s post_id=%s", comment.id, post_id)

        await self._invalidate(comment)
        return CommentOut.from_domain(comment)

    async def update_comment(self, comment_id: int, content: str) -> CommentOut | None:
        async with self._sessions() as db, db.begin():
            comment = await self._repo.update(db, comment_id, content)
        logger.info("Comment updated: id=%s found=%s", comment_id, comment is not None)

        await self._invalidate(comment)
        return CommentOut.from_domain(comment) if comment else None

    async def delete_comment(self, comment_id: int) -> bool:
        async with self._sessions() as db, db.begin():
            comment = await self._repo.delete(db, comment_id)
        logger.info("Comment deleted: id=%s found=%s", comment_id, comment is not None)

        await self._invalidate(comment)
        return True

    async def _invalidate(self, comment: Comment | None) -> None:
        aggregates = [ALL_COMMENTS]
        if comment is not None:
            aggregates.append(comments_by_post(comment.post_id))
        await self._cache.invalidate(aggregates=aggregates)
