"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bl_comment.domain.models import Comment
from src.bl_common.pagination import Window


class CommentRepositoryProtocol(Protocol):
    async def list_window(self, db: AsyncSession, window: Window) -> list[Comment]: ...

    async def count(self, db: AsyncSession) -> int: ...

    async def list_window_by_post(
        self, db: AsyncSession, post_id: int, window: Window
    ) -> list[Comment]: ...

    async def count_by_post(self, db: AsyncSession, post_id: int) -> int: ...

    async def list_by_post(self, db: AsyncSession, post_id: int) -> list[Comment]: ...

    async def list_by_author(self, db: AsyncSession, author_id: int) -> list[Comment]: ...

    async def create(
        self,
        db: AsyncSession,
        content: str,
        author_id: int,
        post_id: int,
    ) -> Comment: ...

    async def update(self, db: AsyncSession, comment_id: int, content: str) -> Comment | None: ...

    async def delete(self, db: AsyncSession, comment_id: int) -> Comment | None: ...
