"""PostRepository — concrete implementation of PostRepositoryProtocol.

Listings are ordered by id so a (limit, offset) window is stable between
the cached page and the store.
"""

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bl_common.database import FOREIGN_KEY_VIOLATION, integrity_violation
from src.bl_common.errors import UserNotFoundError
from src.bl_common.pagination import Window
from src.bl_post.domain.models import Post
from src.bl_post.infrastructure.db_models import PostModel

COUNTERS = ("views", "likes")


def _to_domain(model: PostModel) -> Post:
    return Post(
        id=model.id,
        title=model.title,
        content=model.content,
        author_id=model.author_id,
        views=model.views,
        likes=model.likes,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class PostRepository:
    async def get_by_id(self, db: AsyncSession, post_id: int) -> Post | None:
        result = await db.execute(select(PostModel).where(PostModel.id == post_id))
        model = result.scalar_one_or_none()
        return _to_domain(model) if model else None

    async def list_window(self, db: AsyncSession, window: Window) -> list[Post]:
        result = await db.execute(
            select(PostModel)
            .order_by(PostModel.id)
            .limit(window.limit)
            .offset(window.offset)
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def count(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count()).select_from(PostModel))
        return int(result.scalar_one())

    async def list_window_by_author(
        self, db: AsyncSession, author_id: int, window: Window
    ) -> list[Post]:
        result = await db.execute(
            select(PostModel)
            .where(PostModel.author_id == author_id)
            .order_by(PostModel.id)
            .limit(window.limit)
            .offset(window.offset)
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def count_by_author(self, db: AsyncSession, author_id: int) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(PostModel)
            .where(PostModel.author_id == author_id)
        )
        return int(result.scalar_one())

    async def list_by_author(self, db: AsyncSession, author_id: int) -> list[Post]:
        result = await db.execute(
            select(PostModel).where(PostModel.author_id == author_id).order_by(PostModel.id)
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def create(
        self,
        db: AsyncSession,
        title: str,
        content: str,
        author_id: int,
    ) -> Post:
        try:
            result = await db.execute(
                insert(PostModel)
                .values(title=title, content=content, author_id=author_id)
                .returning(PostModel)
            )
        except IntegrityError as exc:
            code, _ = integrity_violation(exc)
            if code == FOREIGN_KEY_VIOLATION:
                raise UserNotFoundError(author_id) from exc
            raise
        return _to_domain(result.scalar_one())

    async def update(
        self,
        db: AsyncSession,
        post_id: int,
        title: str | None,
        content: str | None,
    ) -> Post | None:
        values: dict[str, str] = {}
        if title is not None:
            values["title"] = title
        if content is not None:
            values["content"] = content
        if not values:
            return await self.get_by_id(db, post_id)

        result = await db.execute(
            update(PostModel)
            .where(PostModel.id == post_id)
            .values(**values)
            .returning(PostModel)
        )
        model = result.scalar_one_or_none()
        return _to_domain(model) if model else None

    async def delete(self, db: AsyncSession, post_id: int) -> Post | None:
        """Delete and return the removed row (None if it did not exist)."""
        result = await db.execute(
            delete(PostModel).where(PostModel.id == post_id).returning(PostModel)
        )
        model = result.scalar_one_or_none()
        return _to_domain(model) if model else None

    async def increment(self, db: AsyncSession, post_id: int, counter: str) -> Post | None:
        """Atomically add one to ``views`` or ``likes``."""
        if counter not in COUNTERS:
            raise ValueError(f"Unknown post counter: {counter}")
        column = getattr(PostModel, counter)
        result = await db.execute(
            update(PostModel)
            .where(PostModel.id == post_id)
            .values({column: column + 1})
            .returning(PostModel)
        )
        model = result.scalar_one_or_none()
        return _to_domain(model) if model else None
