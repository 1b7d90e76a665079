"""Mutation root. Each mutation commits to the store, then invalidates the cache."""

import strawberry
from strawberry.types import Info

from src.bl_api.graphql.types import Comment, Post, User


@strawberry.type
class Mutation:
    # --- Users ---

    @strawberry.mutation
    async def create_user(self, info: Info, name: str, email: str, password: str) -> User:
        user = await info.context.services.users.create_user(name, email, password)
        return User.from_out(user)

    @strawberry.mutation
    async def update_user(
        self,
        info: Info,
        id: int,  # noqa: A002
        name: str | None = None,
        email: str | None = None,
    ) -> User | None:
        user = await info.context.services.users.update_user(id, name=name, email=email)
        return User.from_out(user) if user else None

    @strawberry.mutation
    async def delete_user(self, info: Info, id: int) -> bool:  # noqa: A002
        return await info.context.services.users.delete_user(id)

    # --- Posts ---

    @strawberry.mutation
    async def create_post(self, info: Info, title: str, content: str, author_id: int) -> Post:
        post = await info.context.services.posts.create_post(title, content, author_id)
        return Post.from_out(post)

    @strawberry.mutation
    async def update_post(
        self,
        info: Info,
        id: int,  # noqa: A002
        title: str | None = None,
        content: str | None = None,
    ) -> Post | None:
        post = await info.context.services.posts.update_post(id, title=title, content=content)
        return Post.from_out(post) if post else None

    @strawberry.mutation
    async def delete_post(self, info: Info, id: int) -> bool:  # noqa: A002
        return await info.context.services.posts.delete_post(id)

    @strawberry.mutation
    async def increment_post_views(self, info: Info, id: int) -> Post | None:  # noqa: A002
        post = await info.context.services.posts.increment_views(id)
        return Post.from_out(post) if post else None

    @strawberry.mutation
    async def like_post(self, info: Info, id: int) -> Post | None:  # noqa: A002
        post = await info.context.services.posts.like_post(id)
        return Post.from_out(post) if post else None

    # --- Comments ---

    @strawberry.mutation
    async def create_comment(
        self, info: Info, content: str, author_id: int, post_id: int
    ) -> Comment:
        comment = await info.context.services.comments.create_comment(content, author_id, post_id)
        return Comment.from_out(comment)

    @strawberry.mutation
    async def update_comment(
        self, info: Info, id: int, content: str  # noqa: A002
    ) -> Comment | None:
        comment = await info.context.services.comments.update_comment(id, content)
        return Comment.from_out(comment) if comment else None

    @strawberry.mutation
    async def delete_comment(self, info: Info, id: int) -> bool:  # noqa: A002
        return await info.context.services.comments.delete_comment(id)
