"""initial social tables

Revision ID: 3f1c9a7e2b40
Revises:
Create Date: 2026-09-28 10:15:00.000000

"""

import sqlalchemy as sa
import sqlmodel.sql.sqltypes
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c9a7e2b40"
down_revision = None
branch_labels = None
depends_on = None


def _str(length: int):
    return sqlmodel.sql.sqltypes.AutoString(length=length)


def _user_fk(table_name: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        ["user_id"], ["user.id"], name=f"fk_{table_name}_user", ondelete="CASCADE"
    )


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", _str(64), nullable=False),
        sa.Column("email", _str(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("name", _str(255), nullable=True),
        sa.Column("bio", _str(500), nullable=True),
        sa.Column("profile_image", _str(2048), nullable=True),
        sa.Column("profile_image_key", _str(255), nullable=True),
        sa.Column("hashed_password", _str(255), nullable=False),
        sa.Column("rss_keys", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_username"), "user", ["username"], unique=True)
    op.create_index(op.f("ix_user_email"), "user", ["email"], unique=True)

    op.create_table(
        "following",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("post_id", _str(255), nullable=False),
        sa.Column("feed_url", _str(2048), nullable=False),
        sa.Column("followed_at", sa.DateTime(), nullable=False),
        _user_fk("following"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_following_user_post"),
    )
    op.create_index(op.f("ix_following_user_id"), "following", ["user_id"])
    op.create_index(op.f("ix_following_post_id"), "following", ["post_id"])
    op.create_index(op.f("ix_following_feed_url"), "following", ["feed_url"])
    op.create_index(op.f("ix_following_followed_at"), "following", ["followed_at"])

    op.create_table(
        "friendship",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("requester_id", sa.Uuid(), nullable=False),
        sa.Column("requestee_id", sa.Uuid(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "PENDING",
                "ACCEPTED",
                name="friendshipstatus",
                native_enum=False,
            ),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["requester_id"], ["user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["requestee_id"], ["user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "requester_id", "requestee_id", name="uq_friendship_requester_requestee"
        ),
    )
    op.create_index(op.f("ix_friendship_requester_id"), "friendship", ["requester_id"])
    op.create_index(op.f("ix_friendship_requestee_id"), "friendship", ["requestee_id"])

    op.create_table(
        "comment",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("username", _str(64), nullable=False),
        sa.Column("entry_guid", _str(2048), nullable=False),
        sa.Column("feed_url", _str(2048), nullable=False),
        sa.Column("content", _str(500), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("parent_id", sa.Uuid(), nullable=True),
        sa.Column("like_count", sa.Integer(), nullable=False),
        _user_fk("comment"),
        sa.ForeignKeyConstraint(["parent_id"], ["comment.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_comment_user_id"), "comment", ["user_id"])
    op.create_index(op.f("ix_comment_entry_guid"), "comment", ["entry_guid"])
    op.create_index(op.f("ix_comment_created_at"), "comment", ["created_at"])
    op.create_index(op.f("ix_comment_parent_id"), "comment", ["parent_id"])

    op.create_table(
        "commentlike",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("comment_id", sa.Uuid(), nullable=False),
        sa.Column("liked_at", sa.DateTime(), nullable=False),
        _user_fk("commentlike"),
        sa.ForeignKeyConstraint(["comment_id"], ["comment.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "comment_id", name="uq_commentlike_user_comment"),
    )
    op.create_index(op.f("ix_commentlike_user_id"), "commentlike", ["user_id"])
    op.create_index(op.f("ix_commentlike_comment_id"), "commentlike", ["comment_id"])

    for table_name, stamp, unique_name in (
        ("retweet", "retweeted_at", "uq_retweet_user_entry"),
        ("like", "liked_at", "uq_like_user_entry"),
    ):
        op.create_table(
            table_name,
            sa.Column("entry_guid", _str(2048), nullable=False),
            sa.Column("feed_url", _str(2048), nullable=False),
            sa.Column("title", _str(1024), nullable=False),
            sa.Column("pub_date", _str(64), nullable=False),
            sa.Column("link", _str(2048), nullable=False),
            sa.Column("id", sa.Uuid(), nullable=False),
            sa.Column("user_id", sa.Uuid(), nullable=False),
            sa.Column(stamp, sa.DateTime(), nullable=False),
            _user_fk(table_name),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("user_id", "entry_guid", name=unique_name),
        )
        op.create_index(op.f(f"ix_{table_name}_entry_guid"), table_name, ["entry_guid"])
        op.create_index(op.f(f"ix_{table_name}_user_id"), table_name, ["user_id"])
        op.create_index(op.f(f"ix_{table_name}_{stamp}"), table_name, [stamp])

    op.create_table(
        "ratelimiterstate",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", _str(64), nullable=False),
        sa.Column("key", _str(255), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False),
        sa.Column("window_start", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", "key", name="uq_ratelimiterstate_name_key"),
    )
    op.create_index(op.f("ix_ratelimiterstate_name"), "ratelimiterstate", ["name"])
    op.create_index(
        op.f("ix_ratelimiterstate_window_start"), "ratelimiterstate", ["window_start"]
    )

    op.create_table(
        "report",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", _str(255), nullable=False),
        sa.Column("email", _str(255), nullable=False),
        sa.Column(
            "reason",
            sa.Enum(
                "SPAM",
                "INAPPROPRIATE",
                "INTELLECTUAL",
                "OTHER",
                name="reportreason",
                native_enum=False,
            ),
            nullable=False,
        ),
        sa.Column("description", _str(2000), nullable=False),
        sa.Column("post_slug", _str(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _user_fk("report"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_report_user_id"), "report", ["user_id"])

    op.create_table(
        "submission",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", _str(255), nullable=False),
        sa.Column("email", _str(255), nullable=False),
        sa.Column(
            "type",
            sa.Enum("PODCAST", "NEWSLETTER", name="submissiontype", native_enum=False),
            nullable=False,
        ),
        sa.Column("publication_name", _str(100), nullable=False),
        sa.Column("rss_feed", _str(2048), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _user_fk("submission"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_submission_user_id"), "submission", ["user_id"])


def downgrade():
    op.drop_table("submission")
    op.drop_table("report")
    op.drop_table("ratelimiterstate")
    op.drop_table("like")
    op.drop_table("retweet")
    op.drop_table("commentlike")
    op.drop_table("comment")
    op.drop_table("friendship")
    op.drop_table("following")
    op.drop_table("user")
