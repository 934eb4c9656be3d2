"""Post database model using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import JSON, DateTime, Index, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

from app.configs.settings import MAX_TITLE_LENGTH

# JSONB on PostgreSQL keeps the tag containment test indexable
TagsType = JSON().with_variant(JSONB(), "postgresql")


class PostDB(SQLModel, table=True):
    """
    Post database model.

    Rows are never physically removed: ``deleted_at`` marks a soft delete and
    is never cleared once set.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    __table_args__ = (
        Index("ix_posts_status_deleted", "status", "deleted_at"),
        Index("ix_posts_author_status", "author_id", "status"),
    )

    # Primary key
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Post ID",
    )

    # Foreign key to User (immutable after creation)
    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            Uuid,
            ForeignKey("users.uuid"),
            nullable=False,
            index=True,
        ),
        description="Author ID (foreign key to users.uuid)",
    )

    # Required fields
    title: str = Field(
        sa_column=Column(String(MAX_TITLE_LENGTH), nullable=False),
        description="Post title",
    )
    slug: str = Field(
        sa_column=Column(String(MAX_TITLE_LENGTH), unique=True, nullable=False, index=True),
        description="URL-friendly slug derived from the title (unique)",
    )
    content: str = Field(
        sa_column=Column(String(50000), nullable=False),
        description="Post content",
    )
    status: str = Field(
        default="draft",
        sa_column=Column(String(20), nullable=False, index=True),
        description="Post status (draft, published)",
    )
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(TagsType, nullable=False),
        description="Post tags, in the order given",
    )

    # Soft delete marker
    deleted_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True, index=True),
        description="Soft delete timestamp (null while active)",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "author_id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Hello World",
                "slug": "hello-world",
                "content": "My first post.",
                "status": "draft",
                "tags": ["intro"],
                "deleted_at": None,
            },
        },
    )
