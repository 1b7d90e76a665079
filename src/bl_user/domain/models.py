"""Domain models for bl_user — pure dataclasses, no business logic."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class User:
    id: int
    name: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime


@dataclass
class UserDeletion:
    """What a user delete removed, including rows dropped by FK cascades."""

    deleted: bool
    post_ids: list[int] = field(default_factory=list)          # the user's own posts
    commented_post_ids: list[int] = field(default_factory=list)  # posts the user commented on
