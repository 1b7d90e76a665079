"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bl_common.pagination import Window
from src.bl_post.domain.models import Post


class PostRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, post_id: int) -> Post | None: ...

    async def list_window(self, db: AsyncSession, window: Window) -> list[Post]: ...

    async def count(self, db: AsyncSession) -> int: ...

    async def list_window_by_author(
        self, db: AsyncSession, author_id: int, window: Window
    ) -> list[Post]: ...

    async def count_by_author(self, db: AsyncSession, author_id: int) -> int: ...

    async def list_by_author(self, db: AsyncSession, author_id: int) -> list[Post]: ...

    async def create(
        self,
        db: AsyncSession,
        title: str,
        content: str,
        author_id: int,
    ) -> Post: ...

    async def update(
        self,
        db: AsyncSession,
        post_id: int,
        title: str | None,
        content: str | None,
    ) -> Post | None: ...

    async def delete(self, db: AsyncSession, post_id: int) -> Post | None: ...

    async def increment(self, db: AsyncSession, post_id: int, counter: str) -> Post | None: ...
