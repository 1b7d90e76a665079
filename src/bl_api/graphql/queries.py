"""Query root. Top-level lookups, lists and counts go through the cache-aside services."""

import strawberry
from strawberry.types import Info

from src.bl_api.graphql.types import (
    PaginatedComments,
    PaginatedPosts,
    PaginatedUsers,
    Post,
    User,
)
from src.bl_common.pagination import DEFAULT_LIMIT


@strawberry.type
class Query:
    # --- Users ---

    @strawberry.field
    async def user(self, info: Info, id: int) -> User | None:  # noqa: A002
        user = await info.context.services.users.get_user(id)
        return User.from_out(user) if user else None

    @strawberry.field
    async def users(
        self, info: Info, limit: int = DEFAULT_LIMIT, offset: int = 0
    ) -> PaginatedUsers:
        page = await info.context.services.users.list_users(limit, offset)
        return PaginatedUsers.from_page(page)

    @strawberry.field
    async def user_count(self, info: Info) -> int:
        return await info.context.services.users.count_users()

    # --- Posts ---

    @strawberry.field
    async def post(self, info: Info, id: int) -> Post | None:  # noqa: A002
        post = await info.context.services.posts.get_post(id)
        return Post.from_out(post) if post else None

    @strawberry.field
    async def posts(
        self, info: Info, limit: int = DEFAULT_LIMIT, offset: int = 0
    ) -> PaginatedPosts:
        page = await info.context.services.posts.list_posts(limit, offset)
        return PaginatedPosts.from_page(page)

    @strawberry.field
    async def posts_by_author(
        self, info: Info, author_id: int, limit: int = DEFAULT_LIMIT, offset: int = 0
    ) -> PaginatedPosts:
        page = await info.context.services.posts.list_posts_by_author(author_id, limit, offset)
        return PaginatedPosts.from_page(page)

    @strawberry.field
    async def post_count(self, info: Info) -> int:
        return await info.context.services.posts.count_posts()

    # --- Comments ---

    @strawberry.field
    async def comments_by_post(
        self, info: Info, post_id: int, limit: int = DEFAULT_LIMIT, offset: int = 0
    ) -> PaginatedComments:
        page = await info.context.services.comments.list_comments_by_post(post_id, limit, offset)
        return PaginatedComments.from_page(page)

    @strawberry.field
    async def comments(
        self, info: Info, limit: int = DEFAULT_LIMIT, offset: int = 0
    ) -> PaginatedComments:
        page = await info.context.services.comments.list_comments(limit, offset)
        return PaginatedComments.from_page(page)

    @strawberry.field
    async def comment_count(self, info: Info) -> int:
        return await info.context.services.comments.count_comments()

    # --- Health ---

    @strawberry.field
    def health(self) -> str:
        return "Server is running!"
