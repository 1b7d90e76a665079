"""003: create posts table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE posts (
            id              SERIAL          PRIMARY KEY,
            title           VARCHAR(255)    NOT NULL,
            content         TEXT            NOT NULL,
            author_id       INTEGER         NOT NULL,
            views           INTEGER         NOT NULL DEFAULT 0,
            likes           INTEGER         NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT fk_posts_author_id FOREIGN KEY (author_id)
                REFERENCES users (id) ON DELETE CASCADE,
            CONSTRAINT ck_posts_views_non_negative CHECK (views >= 0),
            CONSTRAINT ck_posts_likes_non_negative CHECK (likes >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_posts_author_id ON posts (author_id);")
    op.execute("""
        CREATE TRIGGER trg_posts_updated_at
            BEFORE UPDATE ON posts
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS posts CASCADE;")
