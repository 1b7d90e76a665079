"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bl_common.pagination import Window
from src.bl_user.domain.models import User, UserDeletion


class UserRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, user_id: int) -> User | None: ...

    async def list_window(self, db: AsyncSession, window: Window) -> list[User]: ...

    async def count(self, db: AsyncSession) -> int: ...

    async def create(
        self,
        db: AsyncSession,
        name: str,
        email: str,
        password_hash: str,
    ) -> User: ...

    async def update(
        self,
        db: AsyncSession,
        user_id: int,
        name: str | None,
        email: str | None,
    ) -> User | None: ...

    async def delete(self, db: AsyncSession, user_id: int) -> UserDeletion: ...
