"""
Database models for ServerList (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKeyConstraint,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


server_tags = Table(
    "server_tags",
    Base.metadata,
    Column("server_id", Integer, nullable=False),
    Column("tag_id", Integer, nullable=False),
    ForeignKeyConstraint(
        ["server_id"], ["servers.id"], ondelete="CASCADE", name="server_tags_server_id_fkey"
    ),
    ForeignKeyConstraint(["tag_id"], ["tags.id"], ondelete="CASCADE", name="server_tags_tag_id_fkey"),
    PrimaryKeyConstraint("server_id", "tag_id", name="server_tags_pkey"),
)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (PrimaryKeyConstraint("id", name="users_pkey"),)

    # Primary key is the OAuth provider's member id, not a local sequence
    id: Mapped[int] = mapped_column(Integer, autoincrement=False)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    photo_url: Mapped[str | None] = mapped_column(Text)
    email: Mapped[str | None] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(50), server_default=text("'user'"), nullable=False)
    banned: Mapped[bool] = mapped_column(Boolean, server_default=text("false"), nullable=False)
    posts: Mapped[int] = mapped_column(Integer, server_default=text("0"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )

    servers: Mapped[list["Servers"]] = relationship(
        "Servers", uselist=True, back_populates="author"
    )
    votes: Mapped[list["Votes"]] = relationship("Votes", uselist=True, back_populates="author")


class Versions(Base):
    __tablename__ = "versions"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="versions_pkey"),
        UniqueConstraint("name", name="versions_name_key"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    servers: Mapped[list["Servers"]] = relationship(
        "Servers", uselist=True, back_populates="version"
    )


class Tags(Base):
    __tablename__ = "tags"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="tags_pkey"),
        UniqueConstraint("name", name="tags_name_key"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    servers: Mapped[list["Servers"]] = relationship(
        "Servers", secondary=server_tags, uselist=True, back_populates="tags"
    )


class Servers(Base):
    __tablename__ = "servers"
    __table_args__ = (
        ForeignKeyConstraint(
            ["author_id"], ["users.id"], ondelete="CASCADE", name="servers_author_id_fkey"
        ),
        ForeignKeyConstraint(
            ["version_id"], ["versions.id"], ondelete="SET NULL", name="servers_version_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="servers_pkey"),
        Index("idx_servers_author", "author_id"),
        Index("idx_servers_published", "published"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    author_id: Mapped[int] = mapped_column(Integer, nullable=False)
    version_id: Mapped[int | None] = mapped_column(Integer)
    title: Mapped[str] = mapped_column(String(280), nullable=False)
    content: Mapped[str | None] = mapped_column(Text)
    cover: Mapped[str | None] = mapped_column(Text)
    ip: Mapped[str] = mapped_column(String(255), nullable=False)
    slots: Mapped[int | None] = mapped_column(Integer)
    published: Mapped[bool] = mapped_column(Boolean, server_default=text("false"), nullable=False)
    last_updated: Mapped[datetime | None] = mapped_column(DateTime(True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )

    author: Mapped["Users"] = relationship("Users", back_populates="servers")
    version: Mapped["Versions | None"] = relationship("Versions", back_populates="servers")
    tags: Mapped[list["Tags"]] = relationship(
        "Tags", secondary=server_tags, uselist=True, back_populates="servers"
    )
    votes: Mapped[list["Votes"]] = relationship(
        "Votes", uselist=True, back_populates="server", passive_deletes=True
    )


class Votes(Base):
    __tablename__ = "votes"
    __table_args__ = (
        ForeignKeyConstraint(
            ["author_id"], ["users.id"], ondelete="CASCADE", name="votes_author_id_fkey"
        ),
        ForeignKeyConstraint(
            ["server_id"], ["servers.id"], ondelete="CASCADE", name="votes_server_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="votes_pkey"),
        Index("idx_votes_server_author_created", "server_id", "author_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    author_id: Mapped[int] = mapped_column(Integer, nullable=False)
    server_id: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP"), nullable=False
    )

    author: Mapped["Users"] = relationship("Users", back_populates="votes")
    server: Mapped["Servers"] = relationship("Servers", back_populates="votes")


target_metadata = Base.metadata

__all__ = [
    "Base",
    "Servers",
    "Tags",
    "Users",
    "Versions",
    "Votes",
    "server_tags",
    "target_metadata",
]
