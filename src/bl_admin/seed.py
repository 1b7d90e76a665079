"""Seed the store with sample data and flush the cache.

Usage:
    python -m src.bl_admin.seed                      # sample users, posts, comments
    python -m src.bl_admin.seed --bulk-users 1000    # N generated users only

Existing rows are wiped first. The cache is flushed afterwards, since every
cached entry is stale once the tables have been rewritten behind the
cache-aside layer.
"""

import argparse
import asyncio
import logging
import random
import string

from sqlalchemy import delete, insert
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bl_cache.aside import CacheAside
from src.bl_cache.backend import RedisCacheBackend
from src.bl_comment.infrastructure.db_models import CommentModel
from src.bl_common.database import build_engine, build_session_factory
from src.bl_common.redis_client import close_redis, create_redis
from src.bl_post.infrastructure.db_models import PostModel
from src.bl_user.auth.password import hash_password
from src.bl_user.infrastructure.db_models import UserModel

logger = logging.getLogger(__name__)

BULK_BATCH_SIZE = 100
_BULK_DOMAINS = ("demo", "example", "sample", "user", "account")

SAMPLE_USERS = [
    {"name": "Alice Johnson", "email": "alice@example.com", "password": "password_1"},
    {"name": "Bob Smith", "email": "bob@example.com", "password": "password_2"},
    {"name": "Charlie Brown", "email": "charlie@example.com", "password": "password_3"},
]

# (author index into SAMPLE_USERS, title, content, views, likes)
SAMPLE_POSTS = [
    (0, "Getting Started with GraphQL", "Build GraphQL APIs in Python from the ground up.", 150, 45),
    (0, "SQLAlchemy Async Tutorial", "Type-safe async queries with SQLAlchemy 2.0.", 200, 67),
    (1, "Redis Caching Best Practices", "Efficient cache-aside strategies with Redis.", 300, 89),
    (1, "GraphQL Schema Design", "Designing schemas that grow with your application.", 250, 76),
    (2, "Full Stack Python", "Shipping entire applications with typed Python.", 180, 52),
]

# (author index, post index, content)
SAMPLE_COMMENTS = [
    (1, 0, "Great introduction, thanks!"),
    (2, 0, "Very helpful for beginners."),
    (0, 2, "Cache invalidation is the hard part."),
    (2, 3, "Pagination examples would be nice."),
    (0, 4, "Looking forward to part two."),
]


def bulk_users(count: int, rng: random.Random) -> list[dict[str, str]]:
    """Generate ``count`` users with unique emails."""
    users = []
    for num in range(1, count + 1):
        domain = rng.choice(_BULK_DOMAINS)
        suffix = "".join(rng.choices(string.ascii_lowercase + string.digits, k=6))
        users.append(
            {
                "name": f"User {num}",
                "email": f"user{num}.{domain}{suffix}@{domain}.com",
                "password": f"password_{num}",
            }
        )
    return users


async def _wipe(db: AsyncSession) -> None:
    await db.execute(delete(CommentModel))
    await db.execute(delete(PostModel))
    await db.execute(delete(UserModel))


async def _insert_users(db: AsyncSession, users: list[dict[str, str]]) -> list[int]:
    """Insert in batches; the returned ids line up with ``users`` by position."""
    ids: list[int] = []
    for start in range(0, len(users), BULK_BATCH_SIZE):
        batch = users[start:start + BULK_BATCH_SIZE]
        result = await db.execute(
            insert(UserModel).returning(UserModel.id, sort_by_parameter_order=True),
            [
                {
                    "name": u["name"],
                    "email": u["email"],
                    "password_hash": hash_password(u["password"]),
                }
                for u in batch
            ],
        )
        ids.extend(result.scalars().all())
        logger.info("Inserted %d/%d users", len(ids), len(users))
    return ids


async def seed_sample(db: AsyncSession) -> None:
    user_ids = await _insert_users(db, SAMPLE_USERS)

    post_result = await db.execute(
        insert(PostModel).returning(PostModel.id, sort_by_parameter_order=True),
        [
            {
                "title": title,
                "content": content,
                "author_id": user_ids[author],
                "views": views,
                "likes": likes,
            }
            for author, title, content, views, likes in SAMPLE_POSTS
        ],
    )
    post_ids = list(post_result.scalars().all())

    await db.execute(
        insert(CommentModel),
        [
            {"content": content, "author_id": user_ids[author], "post_id": post_ids[post]}
            for author, post, content in SAMPLE_COMMENTS
        ],
    )
    logger.info(
        "Seeded %d users, %d posts, %d comments",
        len(user_ids),
        len(post_ids),
        len(SAMPLE_COMMENTS),
    )


async def run(bulk_users_count: int | None) -> None:
    engine = build_engine(settings.DATABASE_URL)
    redis = await create_redis(settings.REDIS_URL)
    sessions = build_session_factory(engine)
    try:
        async with sessions() as db, db.begin():
            await _wipe(db)
            if bulk_users_count:
                await _insert_users(db, bulk_users(bulk_users_count, random.Random()))
            else:
                await seed_sample(db)
        await CacheAside(RedisCacheBackend(redis)).flush()
    finally:
        await engine.dispose()
        await close_redis(redis)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the blog database.")
    parser.add_argument(
        "--bulk-users",
        type=int,
        default=None,
        metavar="N",
        help="insert N generated users instead of the sample data set",
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(run(args.bulk_users))


if __name__ == "__main__":
    main()
