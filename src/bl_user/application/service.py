"""UserService — cache-aside reads and write-then-invalidate mutations for users.

Each call opens its own session from the injected factory. Writes commit
before invalidating, so a reader that repopulates a key after the purge sees
the committed row.
"""

import logging

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.bl_cache.aside import CacheAside
from src.bl_cache.keys import (
    ALL_COMMENTS,
    ALL_POSTS,
    ALL_USERS,
    Aggregate,
    EntityKey,
    comments_by_post,
    post_key,
    posts_by_author,
    user_key,
)
from src.bl_common.errors import InvalidInputError
from src.bl_common.pagination import Page, Window
from src.bl_user.application.schemas import CreateUserInput, UpdateUserInput, UserOut
from src.bl_user.auth.password import hash_password
from src.bl_user.domain.models import UserDeletion
from src.bl_user.domain.repository import UserRepositoryProtocol
from src.bl_user.infrastructure.persistence import UserRepository

logger = logging.getLogger(__name__)

_USER = TypeAdapter(UserOut)
_USER_PAGE = TypeAdapter(Page[UserOut])


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err["loc"])
    return f"{field}: {err['msg']}"


class UserService:
    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        cache: CacheAside,
        repo: UserRepositoryProtocol | None = None,
    ) -> None:
        self._sessions = sessions
        self._cache = cache
        self._repo: UserRepositoryProtocol = repo or UserRepository()

    # ------------------------------------------------------------------
    # Reads (cache-aside)
    # ------------------------------------------------------------------

    async def get_user(self, user_id: int) -> UserOut | None:
        async def load() -> UserOut | None:
            async with self._sessions() as db:
                user = await self._repo.get_by_id(db, user_id)
            return UserOut.from_domain(user) if user else None

        return await self._cache.entity(user_key(user_id), _USER, load)

    async def count_users(self) -> int:
        return await self._cache.count(ALL_USERS, self._load_count)

    async def list_users(self, limit: int, offset: int) -> Page[UserOut]:
        window = Window.of(limit, offset)

        async def load_items(w: Window) -> list[UserOut]:
            async with self._sessions() as db:
                users = await self._repo.list_window(db, w)
            return [UserOut.from_domain(u) for u in users]

        return await self._cache.page(ALL_USERS, window, _USER_PAGE, load_items, self._load_count)

    async def _load_count(self) -> int:
        async with self._sessions() as db:
            return await self._repo.count(db)

    # ------------------------------------------------------------------
    # Relationship resolution (store only, never cached)
    # ------------------------------------------------------------------

    async def load_user(self, user_id: int) -> UserOut | None:
        async with self._sessions() as db:
            user = await self._repo.get_by_id(db, user_id)
        return UserOut.from_domain(user) if user else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_user(self, name: str, email: str, password: str) -> UserOut:
        try:
            data = CreateUserInput(name=name, email=email, password=password)
        except ValidationError as exc:
            raise InvalidInputError(_first_error(exc)) from exc

        async with self._sessions() as db, db.begin():
            user = await self._repo.create(
                db, data.name, data.email, hash_password(data.password)
            )
        logger.info("User created: id=%s", user.id)

        await self._cache.invalidate(aggregates=[ALL_USERS])
        return UserOut.from_domain(user)

    async def update_user(
        self,
        user_id: int,
        name: str | None = None,
        email: str | None = None,
    ) -> UserOut | None:
        try:
            data = UpdateUserInput(name=name, email=email)
        except ValidationError as exc:
            raise InvalidInputError(_first_error(exc)) from exc
        if data.name is None and data.email is None:
            return await self.get_user(user_id)

        async with self._sessions() as db, db.begin():
            user = await self._repo.update(db, user_id, data.name, data.email)
        logger.info("User updated: id=%s found=%s", user_id, user is not None)

        await self._cache.invalidate(entities=[user_key(user_id)], aggregates=[ALL_USERS])
        return UserOut.from_domain(user) if user else None

    async def delete_user(self, user_id: int) -> bool:
        """Delete a user. Deleting an id that does not exist is not an error."""
        async with self._sessions() as db, db.begin():
            deletion = await self._repo.delete(db, user_id)
        logger.info(
            "User deleted: id=%s found=%s cascaded_posts=%d",
            user_id,
            deletion.deleted,
            len(deletion.post_ids),
        )

        entities, aggregates = self._deletion_footprint(user_id, deletion)
        await self._cache.invalidate(entities=entities, aggregates=aggregates)
        return True

    @staticmethod
    def _deletion_footprint(
        user_id: int, deletion: UserDeletion
    ) -> tuple[list[EntityKey], list[Aggregate]]:
        """Keys made stale by a user delete, including rows removed by FK cascades."""
        entities = [user_key(user_id)]
        aggregates = [ALL_USERS, posts_by_author(user_id), ALL_POSTS, ALL_COMMENTS]
        for post_id in deletion.post_ids:
            entities.append(post_key(post_id))
            aggregates.append(comments_by_post(post_id))
        for post_id in deletion.commented_post_ids:
            aggregates.append(comments_by_post(post_id))
        return entities, aggregates
