"""Unit tests for CommentService."""

import pytest

from src.bl_cache.keys import ALL_COMMENTS, comments_by_post
from src.bl_common.errors import PostNotFoundError, UserNotFoundError


@pytest.fixture
async def author(users):
    return await users.create_user("Alice", "alice@example.com", "secret")


@pytest.fixture
async def post(posts, author):
    return await posts.create_post("Hello", "World", author.id)


class TestListComments:
    async def test_by_post_scoped_and_paginated(self, posts, comments, author, post) -> None:
        other = await posts.create_post("Other", "body", author.id)
        for i in range(3):
            await comments.create_comment(f"c{i}", author.id, post.id)
        await comments.create_comment("elsewhere", author.id, other.id)

        page = await comments.list_comments_by_post(post.id, limit=2, offset=0)

        assert [c.content for c in page.items] == ["c0", "c1"]
        assert page.pagination.total == 3
        assert page.pagination.has_more is True

    async def test_all_comments_cached(self, comments, comment_repo, author, post) -> None:
        await comments.create_comment("c0", author.id, post.id)

        await comments.list_comments(limit=10, offset=0)
        await comments.list_comments(limit=10, offset=0)

        assert comment_repo.calls["list_window"] == 1
        assert comment_repo.calls["count"] == 1

    async def test_count(self, comments, author, post) -> None:
        assert await comments.count_comments() == 0
        await comments.create_comment("c0", author.id, post.id)
        assert await comments.count_comments() == 1


class TestCreateComment:
    async def test_create_refreshes_post_scope(self, comments, backend, author, post) -> None:
        await comments.list_comments_by_post(post.id, limit=10, offset=0)

        created = await comments.create_comment("new", author.id, post.id)

        assert comments_by_post(post.id).index_key() not in backend.indexes
        page = await comments.list_comments_by_post(post.id, limit=10, offset=0)
        assert [c.id for c in page.items] == [created.id]

    async def test_unknown_author(self, comments, backend, post) -> None:
        backend.deleted.clear()
        with pytest.raises(UserNotFoundError):
            await comments.create_comment("x", 404, post.id)
        assert backend.deleted == []

    async def test_unknown_post(self, comments, author) -> None:
        with pytest.raises(PostNotFoundError) as exc_info:
            await comments.create_comment("x", author.id, 404)
        assert exc_info.value.code == 2001


class TestUpdateComment:
    async def test_update_visible_in_listing(self, comments, author, post) -> None:
        created = await comments.create_comment("typo", author.id, post.id)
        await comments.list_comments(limit=10, offset=0)

        updated = await comments.update_comment(created.id, "fixed")

        assert updated.content == "fixed"
        assert (await comments.list_comments(limit=10, offset=0)).items[0].content == "fixed"

    async def test_update_missing(self, comments) -> None:
        assert await comments.update_comment(404, "nothing") is None


class TestDeleteComment:
    async def test_delete_invalidates_both_aggregates(
        self, comments, backend, author, post
    ) -> None:
        created = await comments.create_comment("bye", author.id, post.id)
        await comments.list_comments(limit=10, offset=0)
        await comments.list_comments_by_post(post.id, limit=10, offset=0)

        assert await comments.delete_comment(created.id) is True

        assert ALL_COMMENTS.count_key() not in backend.store
        assert comments_by_post(post.id).count_key() not in backend.store
        assert await comments.count_comments() == 0

    async def test_delete_missing_still_true(self, comments, backend) -> None:
        backend.deleted.clear()

        assert await comments.delete_comment(404) is True
        assert ALL_COMMENTS.count_key() in backend.deleted


class TestRelationshipLoaders:
    async def test_loaders_bypass_cache(self, comments, backend, author, post) -> None:
        await comments.create_comment("c0", author.id, post.id)
        stored = dict(backend.store)

        by_post = await comments.load_comments_by_post(post.id)
        by_author = await comments.load_comments_by_author(author.id)

        assert [c.content for c in by_post] == ["c0"]
        assert [c.content for c in by_author] == ["c0"]
        assert backend.store == stored
