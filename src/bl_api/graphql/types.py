"""GraphQL object types.

Built from the cached pydantic payloads (UserOut, PostOut, CommentOut).
Relationship fields resolve straight from the store through the services'
``load_*`` methods; they never touch the cache.
"""

from datetime import datetime

import strawberry
from strawberry.types import Info

from src.bl_comment.application.schemas import CommentOut
from src.bl_common.pagination import Page
from src.bl_common.pagination import PaginationInfo as PaginationModel
from src.bl_post.application.schemas import PostOut
from src.bl_user.application.schemas import UserOut


@strawberry.type
class PaginationInfo:
    total: int
    limit: int
    offset: int
    has_more: bool

    @classmethod
    def from_model(cls, info: PaginationModel) -> "PaginationInfo":
        return cls(
            total=info.total,
            limit=info.limit,
            offset=info.offset,
            has_more=info.has_more,
        )


@strawberry.type
class User:
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    async def posts(self, info: Info) -> list["Post"]:
        posts = await info.context.services.posts.load_posts_by_author(self.id)
        return [Post.from_out(p) for p in posts]

    @strawberry.field
    async def comments(self, info: Info) -> list["Comment"]:
        comments = await info.context.services.comments.load_comments_by_author(self.id)
        return [Comment.from_out(c) for c in comments]

    @classmethod
    def from_out(cls, user: UserOut) -> "User":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@strawberry.type
class Post:
    id: int
    title: str
    content: str
    author_id: int
    views: int
    likes: int
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    async def author(self, info: Info) -> User | None:
        user = await info.context.services.users.load_user(self.author_id)
        return User.from_out(user) if user else None

    @strawberry.field
    async def comments(self, info: Info) -> list["Comment"]:
        comments = await info.context.services.comments.load_comments_by_post(self.id)
        return [Comment.from_out(c) for c in comments]

    @classmethod
    def from_out(cls, post: PostOut) -> "Post":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author_id=post.author_id,
            views=post.views,
            likes=post.likes,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


@strawberry.type
class Comment:
    id: int
    content: str
    author_id: int
    post_id: int
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    async def author(self, info: Info) -> User | None:
        user = await info.context.services.users.load_user(self.author_id)
        return User.from_out(user) if user else None

    @strawberry.field
    async def post(self, info: Info) -> Post | None:
        post = await info.context.services.posts.load_post(self.post_id)
        return Post.from_out(post) if post else None

    @classmethod
    def from_out(cls, comment: CommentOut) -> "Comment":
        return cls(
            id=comment.id,
            content=comment.content,
            author_id=comment.author_id,
            post_id=comment.post_id,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


@strawberry.type
class PaginatedUsers:
    users: list[User]
    total: int
    pagination: PaginationInfo

    @classmethod
    def from_page(cls, page: Page[UserOut]) -> "PaginatedUsers":
        return cls(
            users=[User.from_out(u) for u in page.items],
            total=page.pagination.total,
            pagination=PaginationInfo.from_model(page.pagination),
        )


@strawberry.type
class PaginatedPosts:
    data: list[Post]
    pagination: PaginationInfo

    @classmethod
    def from_page(cls, page: Page[PostOut]) -> "PaginatedPosts":
        return cls(
            data=[Post.from_out(p) for p in page.items],
            pagination=PaginationInfo.from_model(page.pagination),
        )


@strawberry.type
class PaginatedComments:
    data: list[Comment]
    pagination: PaginationInfo

    @classmethod
    def from_page(cls, page: Page[CommentOut]) -> "PaginatedComments":
        return cls(
            data=[Comment.from_out(c) for c in page.items],
            pagination=PaginationInfo.from_model(page.pagination),
        )
