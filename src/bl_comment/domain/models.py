"""Domain models for bl_comment — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Comment:
    id: int
    content: str
    author_id: int
    post_id: int
    created_at: datetime
    updated_at: datetime
