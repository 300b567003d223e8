"""
Initial schema: users, versions, tags, servers, server tags and votes.

Revision ID: 20260101_000000_initial_schema
Revises:
Create Date: 2026-01-01 00:00:00
"""

import sqlalchemy as sa

from alembic import op  # type: ignore[reportMissingImports]

# revision identifiers, used by Alembic.
revision = "20260101_000000_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # users (id is the OAuth provider's member id)
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=50), server_default=sa.text("'user'"), nullable=False),
        sa.Column("banned", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("posts", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id", name="users_pkey"),
    )

    # versions
    op.create_table(
        "versions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="versions_pkey"),
        sa.UniqueConstraint("name", name="versions_name_key"),
    )

    # tags
    op.create_table(
        "tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint("id", name="tags_pkey"),
        sa.UniqueConstraint("name", name="tags_name_key"),
    )

    # servers
    op.create_table(
        "servers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(length=280), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("cover", sa.Text(), nullable=True),
        sa.Column("ip", sa.String(length=255), nullable=False),
        sa.Column("slots", sa.Integer(), nullable=True),
        sa.Column("published", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.ForeignKeyConstraint(
            ["author_id"], ["users.id"], ondelete="CASCADE", name="servers_author_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["version_id"], ["versions.id"], ondelete="SET NULL", name="servers_version_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="servers_pkey"),
    )
    op.create_index("idx_servers_author", "servers", ["author_id"])
    op.create_index("idx_servers_published", "servers", ["published"])

    # server_tags
    op.create_table(
        "server_tags",
        sa.Column("server_id", sa.Integer(), nullable=False),
        sa.Column("tag_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["server_id"], ["servers.id"], ondelete="CASCADE", name="server_tags_server_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["tag_id"], ["tags.id"], ondelete="CASCADE", name="server_tags_tag_id_fkey"
        ),
        sa.PrimaryKeyConstraint("server_id", "tag_id", name="server_tags_pkey"),
    )

    # votes
    op.create_table(
        "votes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=False),
        sa.Column("server_id", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["author_id"], ["users.id"], ondelete="CASCADE", name="votes_author_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["server_id"], ["servers.id"], ondelete="CASCADE", name="votes_server_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="votes_pkey"),
    )
    op.create_index(
        "idx_votes_server_author_created", "votes", ["server_id", "author_id", "created_at"]
    )


def downgrade() -> None:
    op.drop_index("idx_votes_server_author_created", table_name="votes")
    op.drop_table("votes")
    op.drop_table("server_tags")
    op.drop_index("idx_servers_published", table_name="servers")
    op.drop_index("idx_servers_author", table_name="servers")
    op.drop_table("servers")
    op.drop_table("tags")
    op.drop_table("versions")
    op.drop_table("users")
