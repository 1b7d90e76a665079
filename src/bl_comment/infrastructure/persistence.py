"""CommentRepository — concrete implementation of CommentRepositoryProtocol."""

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bl_comment.domain.models import Comment
from src.bl_comment.infrastructure.db_models import CommentModel
from src.bl_common.database import FOREIGN_KEY_VIOLATION, integrity_violation
from src.bl_common.errors import PostNotFoundError, UserNotFoundError
from src.bl_common.pagination import Window

_POST_FK = "fk_comments_post_id"


def _to_domain(model: CommentModel) -> Comment:
    return Comment(
        id=model.id,
        content=model.content,
        author_id=model.author_id,
        post_id=model.post_id,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class CommentRepository:
    async def list_window(self, db: AsyncSession, window: Window) -> list[Comment]:
        result = await db.execute(
            select(CommentModel)
            .order_by(CommentModel.id)
            .limit(window.limit)
            .offset(window.offset)
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def count(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count()).select_from(CommentModel))
        return int(result.scalar_one())

    async def list_window_by_post(
        self, db: AsyncSession, post_id: int, window: Window
    ) -> list[Comment]:
        result = await db.execute(
            select(CommentModel)
            .where(CommentModel.post_id == post_id)
            .order_by(CommentModel.id)
            .limit(window.limit)
            .offset(window.offset)
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def count_by_post(self, db: AsyncSession, post_id: int) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(CommentModel)
            .where(CommentModel.post_id == post_id)
        )
        return int(result.scalar_one())

    async def list_by_post(self, db: AsyncSession, post_id: int) -> list[Comment]:
        result = await db.execute(
            select(CommentModel)
            .where(CommentModel.post_id == post_id)
            .order_by(CommentModel.id)
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def list_by_author(self, db: AsyncSession, author_id: int) -> list[Comment]:
        result = await db.execute(
            select(CommentModel)
            .where(CommentModel.author_id == author_id)
            .order_by(CommentModel.id)
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def create(
        self,
        db: AsyncSession,
        content: str,
        author_id: int,
        post_id: int,
    ) -> Comment:
        try:
            result = await db.execute(
                insert(CommentModel)
                .values(content=content, author_id=author_id, post_id=post_id)
                .returning(CommentModel)
            )
        except IntegrityError as exc:
            code, message = integrity_violation(exc)
            if code == FOREIGN_KEY_VIOLATION:
                if _POST_FK in message:
                    raise PostNotFoundError(post_id) from exc
                raise UserNotFoundError(author_id) from exc
            raise
        return _to_domain(result.scalar_one())

    async def update(self, db: AsyncSession, comment_id: int, content: str) -> Comment | None:
        result = await db.execute(
            update(CommentModel)
            .where(CommentModel.id == comment_id)
            .values(content=content)
            .returning(CommentModel)
        )
        model = result.scalar_one_or_none()
        return _to_domain(model) if model else None

    async def delete(self, db: AsyncSession, comment_id: int) -> Comment | None:
        result = await db.execute(
            delete(CommentModel).where(CommentModel.id == comment_id).returning(CommentModel)
        )
        model = result.scalar_one_or_none()
        return _to_domain(model) if model else None
