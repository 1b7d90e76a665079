"""004: create comments table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE comments (
            id              SERIAL          PRIMARY KEY,
            content         TEXT            NOT NULL,
            author_id       INTEGER         NOT NULL,
            post_id         INTEGER         NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT fk_comments_author_id FOREIGN KEY (author_id)
                REFERENCES users (id) ON DELETE CASCADE,
            CONSTRAINT fk_comments_post_id FOREIGN KEY (post_id)
                REFERENCES posts (id) ON DELETE CASCADE
        );
    """)
    op.execute("CREATE INDEX idx_comments_post_id ON comments (post_id);")
    op.execute("CREATE INDEX idx_comments_author_id ON comments (author_id);")
    op.execute("""
        CREATE TRIGGER trg_comments_updated_at
            BEFORE UPDATE ON comments
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS comments CASCADE;")
