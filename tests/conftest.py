"""Shared test fixtures.

Unit tests run the real services and CacheAside against in-memory doubles:
  - FakeCacheBackend conforms to CacheBackend (no TTL expiry; that is Redis' job)
  - FakeSessionFactory stands in for async_sessionmaker
  - Fake*Repository conform to the repository Protocols and count store calls
"""

from collections import Counter
from datetime import UTC, datetime

import bcrypt
import pytest

from src.bl_api.container import Services
from src.bl_cache.aside import CacheAside
from src.bl_comment.application.service import CommentService
from src.bl_comment.domain.models import Comment
from src.bl_common.errors import EmailExistsError, PostNotFoundError, UserNotFoundError
from src.bl_common.pagination import Window
from src.bl_post.application.service import PostService
from src.bl_post.domain.models import Post
from src.bl_user.application.service import UserService
from src.bl_user.domain.models import User, UserDeletion

# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


class FakeCacheBackend:
    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.indexes: dict[str, set[str]] = {}
        self.deleted: list[str] = []

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def set(
        self,
        key: str,
        value: str,
        ttl_seconds: int,
        index_key: str | None = None,
    ) -> None:
        self.store[key] = value
        self.ttls[key] = ttl_seconds
        if index_key is not None:
            self.indexes.setdefault(index_key, set()).add(key)

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self.deleted.append(key)
            self.store.pop(key, None)
            self.indexes.pop(key, None)

    async def purge_index(self, index_key: str, *keys: str) -> int:
        members = self.indexes.pop(index_key, set())
        await self.delete(*sorted(members), index_key, *keys)
        return len(members)

    async def flush_all(self) -> None:
        self.store.clear()
        self.ttls.clear()
        self.indexes.clear()


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


class FakeSession:
    """Usable as ``async with factory() as db, db.begin():``."""

    def __init__(self) -> None:
        self.begun = 0

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc_info: object) -> bool:
        return False

    def begin(self) -> "FakeSession":
        self.begun += 1
        return self


class FakeSessionFactory:
    def __init__(self) -> None:
        self.sessions: list[FakeSession] = []

    def __call__(self) -> FakeSession:
        session = FakeSession()
        self.sessions.append(session)
        return session

    @property
    def transactions(self) -> int:
        return sum(s.begun for s in self.sessions)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


def _now() -> datetime:
    return datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def _window(rows: list, window: Window) -> list:
    return rows[window.offset:window.offset + window.limit]


class FakeStore:
    """Shared tables so cascades behave like the real FK constraints."""

    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self.posts: dict[int, Post] = {}
        self.comments: dict[int, Comment] = {}
        self._next = Counter()

    def next_id(self, table: str) -> int:
        self._next[table] += 1
        return self._next[table]


class FakeUserRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.calls: Counter[str] = Counter()

    async def get_by_id(self, db, user_id: int) -> User | None:
        self.calls["get_by_id"] += 1
        return self.store.users.get(user_id)

    async def list_window(self, db, window: Window) -> list[User]:
        self.calls["list_window"] += 1
        return _window(sorted(self.store.users.values(), key=lambda u: u.id), window)

    async def count(self, db) -> int:
        self.calls["count"] += 1
        return len(self.store.users)

    async def create(self, db, name: str, email: str, password_hash: str) -> User:
        self.calls["create"] += 1
        if any(u.email == email for u in self.store.users.values()):
            raise EmailExistsError(email)
        user = User(
            id=self.store.next_id("users"),
            name=name,
            email=email,
            password_hash=password_hash,
            created_at=_now(),
            updated_at=_now(),
        )
        self.store.users[user.id] = user
        return user

    async def update(self, db, user_id: int, name: str | None, email: str | None) -> User | None:
        self.calls["update"] += 1
        user = self.store.users.get(user_id)
        if user is None:
            return None
        if email is not None and any(
            u.email == email and u.id != user_id for u in self.store.users.values()
        ):
            raise EmailExistsError(email)
        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        return user

    async def delete(self, db, user_id: int) -> UserDeletion:
        self.calls["delete"] += 1
        post_ids = sorted(p.id for p in self.store.posts.values() if p.author_id == user_id)
        commented = sorted(
            {c.post_id for c in self.store.comments.values() if c.author_id == user_id}
        )
        deleted = self.store.users.pop(user_id, None) is not None
        if deleted:
            for post_id in post_ids:
                self.store.posts.pop(post_id)
            for comment in list(self.store.comments.values()):
                if comment.author_id == user_id or comment.post_id in post_ids:
                    self.store.comments.pop(comment.id)
        return UserDeletion(deleted=deleted, post_ids=post_ids, commented_post_ids=commented)


class FakePostRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.calls: Counter[str] = Counter()

    def _sorted(self, author_id: int | None = None) -> list[Post]:
        posts = sorted(self.store.posts.values(), key=lambda p: p.id)
        if author_id is not None:
            posts = [p for p in posts if p.author_id == author_id]
        return posts

    async def get_by_id(self, db, post_id: int) -> Post | None:
        self.calls["get_by_id"] += 1
        return self.store.posts.get(post_id)

    async def list_window(self, db, window: Window) -> list[Post]:
        self.calls["list_window"] += 1
        return _window(self._sorted(), window)

    async def count(self, db) -> int:
        self.calls["count"] += 1
        return len(self.store.posts)

    async def list_window_by_author(self, db, author_id: int, window: Window) -> list[Post]:
        self.calls["list_window_by_author"] += 1
        return _window(self._sorted(author_id), window)

    async def count_by_author(self, db, author_id: int) -> int:
        self.calls["count_by_author"] += 1
        return len(self._sorted(author_id))

    async def list_by_author(self, db, author_id: int) -> list[Post]:
        self.calls["list_by_author"] += 1
        return self._sorted(author_id)

    async def create(self, db, title: str, content: str, author_id: int) -> Post:
        self.calls["create"] += 1
        if author_id not in self.store.users:
            raise UserNotFoundError(author_id)
        post = Post(
            id=self.store.next_id("posts"),
            title=title,
            content=content,
            author_id=author_id,
            views=0,
            likes=0,
            created_at=_now(),
            updated_at=_now(),
        )
        self.store.posts[post.id] = post
        return post

    async def update(
        self, db, post_id: int, title: str | None, content: str | None
    ) -> Post | None:
        self.calls["update"] += 1
        post = self.store.posts.get(post_id)
        if post is None:
            return None
        if title is not None:
            post.title = title
        if content is not None:
            post.content = content
        return post

    async def delete(self, db, post_id: int) -> Post | None:
        self.calls["delete"] += 1
        post = self.store.posts.pop(post_id, None)
        if post is not None:
            for comment in list(self.store.comments.values()):
                if comment.post_id == post_id:
                    self.store.comments.pop(comment.id)
        return post

    async def increment(self, db, post_id: int, counter: str) -> Post | None:
        self.calls["increment"] += 1
        post = self.store.posts.get(post_id)
        if post is None:
            return None
        setattr(post, counter, getattr(post, counter) + 1)
        return post


class FakeCommentRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.calls: Counter[str] = Counter()

    def _sorted(self, post_id: int | None = None) -> list[Comment]:
        comments = sorted(self.store.comments.values(), key=lambda c: c.id)
        if post_id is not None:
            comments = [c for c in comments if c.post_id == post_id]
        return comments

    async def list_window(self, db, window: Window) -> list[Comment]:
        self.calls["list_window"] += 1
        return _window(self._sorted(), window)

    async def count(self, db) -> int:
        self.calls["count"] += 1
        return len(self.store.comments)

    async def list_window_by_post(self, db, post_id: int, window: Window) -> list[Comment]:
        self.calls["list_window_by_post"] += 1
        return _window(self._sorted(post_id), window)

    async def count_by_post(self, db, post_id: int) -> int:
        self.calls["count_by_post"] += 1
        return len(self._sorted(post_id))

    async def list_by_post(self, db, post_id: int) -> list[Comment]:
        self.calls["list_by_post"] += 1
        return self._sorted(post_id)

    async def list_by_author(self, db, author_id: int) -> list[Comment]:
        self.calls["list_by_author"] += 1
        return [c for c in self._sorted() if c.author_id == author_id]

    async def create(self, db, content: str, author_id: int, post_id: int) -> Comment:
        self.calls["create"] += 1
        if author_id not in self.store.users:
            raise UserNotFoundError(author_id)
        if post_id not in self.store.posts:
            raise PostNotFoundError(post_id)
        comment = Comment(
            id=self.store.next_id("comments"),
            content=content,
            author_id=author_id,
            post_id=post_id,
            created_at=_now(),
            updated_at=_now(),
        )
        self.store.comments[comment.id] = comment
        return comment

    async def update(self, db, comment_id: int, content: str) -> Comment | None:
        self.calls["update"] += 1
        comment = self.store.comments.get(comment_id)
        if comment is None:
            return None
        comment.content = content
        return comment

    async def delete(self, db, comment_id: int) -> Comment | None:
        self.calls["delete"] += 1
        return self.store.comments.pop(comment_id, None)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch: pytest.MonkeyPatch) -> None:
    """Minimum bcrypt cost so user creation stays fast in tests."""
    original = bcrypt.gensalt
    monkeypatch.setattr(bcrypt, "gensalt", lambda rounds=4, prefix=b"2b": original(rounds, prefix))


@pytest.fixture
def backend() -> FakeCacheBackend:
    return FakeCacheBackend()


@pytest.fixture
def cache(backend: FakeCacheBackend) -> CacheAside:
    return CacheAside(backend, ttl_seconds=3600)


@pytest.fixture
def sessions() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def user_repo(store: FakeStore) -> FakeUserRepository:
    return FakeUserRepository(store)


@pytest.fixture
def post_repo(store: FakeStore) -> FakePostRepository:
    return FakePostRepository(store)


@pytest.fixture
def comment_repo(store: FakeStore) -> FakeCommentRepository:
    return FakeCommentRepository(store)


@pytest.fixture
def users(sessions, cache, user_repo) -> UserService:
    return UserService(sessions, cache, repo=user_repo)


@pytest.fixture
def posts(sessions, cache, post_repo) -> PostService:
    return PostService(sessions, cache, repo=post_repo)


@pytest.fixture
def comments(sessions, cache, comment_repo) -> CommentService:
    return CommentService(sessions, cache, repo=comment_repo)


@pytest.fixture
def services(cache, users, posts, comments) -> Services:
    return Services(cache=cache, users=users, posts=posts, comments=comments)
