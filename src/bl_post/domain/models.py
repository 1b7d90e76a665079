"""Domain models for bl_post — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Post:
    id: int
    title: str
    content: str
    author_id: int
    views: int
    likes: int
    created_at: datetime
    updated_at: datetime
