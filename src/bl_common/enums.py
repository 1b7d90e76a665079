"""Global enums."""

from enum import Enum


class EntityKind(str, Enum):
    """Entity kinds that participate in cache keys.

    ``value`` is the singular key segment (``user:42``); ``collection`` is the
    plural aggregate segment (``users:count``).
    """

    USER = "user"
    POST = "post"
    COMMENT = "comment"

    @property
    def collection(self) -> str:
        return f"{self.value}s"
