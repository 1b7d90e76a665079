"""UserRepository — concrete implementation of UserRepositoryProtocol.

Writes use INSERT/UPDATE/DELETE ... RETURNING so server-side defaults
(id, created_at, trigger-maintained updated_at) come back in one round trip.
Uniqueness is enforced by the store; the violation is translated here.
"""

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bl_comment.infrastructure.db_models import CommentModel
from src.bl_common.database import UNIQUE_VIOLATION, integrity_violation
from src.bl_common.errors import EmailExistsError
from src.bl_common.pagination import Window
from src.bl_post.infrastructure.db_models import PostModel
from src.bl_user.domain.models import User, UserDeletion
from src.bl_user.infrastructure.db_models import UserModel

_EMAIL_CONSTRAINT = "uq_users_email"


def _to_domain(model: UserModel) -> User:
    return User(
        id=model.id,
        name=model.name,
        email=model.email,
        password_hash=model.password_hash,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def _is_email_conflict(exc: IntegrityError) -> bool:
    code, message = integrity_violation(exc)
    return code == UNIQUE_VIOLATION or _EMAIL_CONSTRAINT in message


class UserRepository:
    async def get_by_id(self, db: AsyncSession, user_id: int) -> User | None:
        result = await db.execute(select(UserModel).where(UserModel.id == user_id))
        model = result.scalar_one_or_none()
        return _to_domain(model) if model else None

    async def list_window(self, db: AsyncSession, window: Window) -> list[User]:
        result = await db.execute(
            select(UserModel)
            .order_by(UserModel.id)
            .limit(window.limit)
            .offset(window.offset)
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def count(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count()).select_from(UserModel))
        return int(result.scalar_one())

    async def create(
        self,
        db: AsyncSession,
        name: str,
        email: str,
        password_hash: str,
    ) -> User:
        try:
            result = await db.execute(
                insert(UserModel)
                .values(name=name, email=email, password_hash=password_hash)
                .returning(UserModel)
            )
        except IntegrityError as exc:
            if _is_email_conflict(exc):
                raise EmailExistsError(email) from exc
            raise
        return _to_domain(result.scalar_one())

    async def update(
        self,
        db: AsyncSession,
        user_id: int,
        name: str | None,
        email: str | None,
    ) -> User | None:
        values: dict[str, str] = {}
        if name is not None:
            values["name"] = name
        if email is not None:
            values["email"] = email
        if not values:
            return await self.get_by_id(db, user_id)

        try:
            result = await db.execute(
                update(UserModel)
                .where(UserModel.id == user_id)
                .values(**values)
                .returning(UserModel)
            )
        except IntegrityError as exc:
            if _is_email_conflict(exc):
                raise EmailExistsError(email) from exc
            raise
        model = result.scalar_one_or_none()
        return _to_domain(model) if model else None

    async def delete(self, db: AsyncSession, user_id: int) -> UserDeletion:
        # Collect what the FK cascades will remove before the rows disappear.
        post_ids = (
            await db.execute(select(PostModel.id).where(PostModel.author_id == user_id))
        ).scalars().all()
        commented_post_ids = (
            await db.execute(
                select(CommentModel.post_id)
                .where(CommentModel.author_id == user_id)
                .distinct()
            )
        ).scalars().all()

        result = await db.execute(
            delete(UserModel).where(UserModel.id == user_id).returning(UserModel.id)
        )
        deleted = result.scalar_one_or_none() is not None
        return UserDeletion(
            deleted=deleted,
            post_ids=list(post_ids),
            commented_post_ids=list(commented_post_ids),
        )
