"""Pydantic schemas for bl_post. PostOut is the cached payload."""

from datetime import datetime

from pydantic import BaseModel

from src.bl_post.domain.models import Post


class PostOut(BaseModel):
    id: int
    title: str
    content: str
    author_id: int
    views: int
    likes: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, post: Post) -> "PostOut":
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
