"""Structured cache keys.

Every key the cache-aside layer reads, writes or invalidates is rendered from
one of these value objects, so the code that populates a key and the code
that invalidates it cannot drift apart.

Rendered forms:
    EntityKey(USER, 7)                         -> user:7
    Aggregate(POST).count_key()                -> posts:count
    Aggregate(POST).window_key(Window(10, 0))  -> posts:paginated:10:0
    Aggregate(POST, EntityKey(USER, 7))        -> user:7:posts:10:0, user:7:posts:count
    Aggregate(...).index_key()                 -> <prefix>:index
"""

from dataclasses import dataclass

from src.bl_common.enums import EntityKind
from src.bl_common.pagination import Window


@dataclass(frozen=True)
class EntityKey:
    kind: EntityKind
    id: int

    def render(self) -> str:
        return f"{self.kind.value}:{self.id}"


@dataclass(frozen=True)
class Aggregate:
    """A countable, pageable collection of one entity kind.

    ``parent`` scopes the collection to the children of one entity, e.g. the
    posts of user 7. A top-level aggregate has no parent.
    """

    kind: EntityKind
    parent: EntityKey | None = None

    @classmethod
    def scoped(cls, kind: EntityKind, parent_kind: EntityKind, parent_id: int) -> "Aggregate":
        return cls(kind=kind, parent=EntityKey(parent_kind, parent_id))

    @property
    def prefix(self) -> str:
        if self.parent is None:
            return self.kind.collection
        return f"{self.parent.render()}:{self.kind.collection}"

    def count_key(self) -> str:
        return f"{self.prefix}:count"

    def index_key(self) -> str:
        return f"{self.prefix}:index"

    def window_key(self, window: Window) -> str:
        if self.parent is None:
            return f"{self.prefix}:paginated:{window.limit}:{window.offset}"
        return f"{self.prefix}:{window.limit}:{window.offset}"


# Aggregates shared by several services
ALL_USERS = Aggregate(EntityKind.USER)
ALL_POSTS = Aggregate(EntityKind.POST)
ALL_COMMENTS = Aggregate(EntityKind.COMMENT)


def user_key(user_id: int) -> EntityKey:
    return EntityKey(EntityKind.USER, user_id)


def post_key(post_id: int) -> EntityKey:
    return EntityKey(EntityKind.POST, post_id)


def posts_by_author(author_id: int) -> Aggregate:
    return Aggregate.scoped(EntityKind.POST, EntityKind.USER, author_id)


def comments_by_post(post_id: int) -> Aggregate:
    return Aggregate.scoped(EntityKind.COMMENT, EntityKind.POST, post_id)
