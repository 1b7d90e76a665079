"""Pydantic schemas for bl_comment. CommentOut is the cached payload."""

from datetime import datetime

from pydantic import BaseModel

from src.bl_comment.domain.models import Comment


class CommentOut(BaseModel):
    id: int
    content: str
    author_id: int
    post_id: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, comment: Comment) -> "CommentOut":
        return cls(
            id=comment.id,
            content=comment.content,
            author_id=comment.author_id,
            post_id=comment.post_id,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )
