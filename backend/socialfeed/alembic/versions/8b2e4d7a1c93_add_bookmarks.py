"""add bookmarks

Revision ID: 8b2e4d7a1c93
Revises: 3f1c9a7e2b40
Create Date: 2026-10-16 09:30:00.000000

"""

import sqlalchemy as sa
import sqlmodel.sql.sqltypes
from alembic import op

# revision identifiers, used by Alembic.
revision = "8b2e4d7a1c93"
down_revision = "3f1c9a7e2b40"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "bookmark",
        sa.Column("entry_guid", sqlmodel.sql.sqltypes.AutoString(length=2048), nullable=False),
        sa.Column("feed_url", sqlmodel.sql.sqltypes.AutoString(length=2048), nullable=False),
        sa.Column("title", sqlmodel.sql.sqltypes.AutoString(length=1024), nullable=False),
        sa.Column("pub_date", sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column("link", sqlmodel.sql.sqltypes.AutoString(length=2048), nullable=False),
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("bookmarked_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["user_id"], ["user.id"], name="fk_bookmark_user", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "entry_guid", name="uq_bookmark_user_entry"),
    )
    op.create_index(op.f("ix_bookmark_entry_guid"), "bookmark", ["entry_guid"])
    op.create_index(op.f("ix_bookmark_user_id"), "bookmark", ["user_id"])
    op.create_index(op.f("ix_bookmark_bookmarked_at"), "bookmark", ["bookmarked_at"])


def downgrade():
    op.drop_index(op.f("ix_bookmark_bookmarked_at"), table_name="bookmark")
    op.drop_index(op.f("ix_bookmark_user_id"), table_name="bookmark")
    op.drop_index(op.f("ix_bookmark_entry_guid"), table_name="bookmark")
    op.drop_table("bookmark")
