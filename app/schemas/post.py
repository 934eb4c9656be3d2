"""
Post schemas for the Blog API.

Request bodies validate and normalise client input; response models expose
posts with camelCase keys and a reduced author projection.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.configs.settings import MAX_CONTENT_LENGTH, MAX_TAG_LENGTH, MAX_TAGS, MAX_TITLE_LENGTH
from app.utils.helpers import generate_slug

PostStatus = Literal["draft", "published"]


def _clean_title(v: str) -> str:
    title = v.strip()
    if not title:
        mssg = "Please add a title"
        raise ValueError(mssg)
    if len(title) > MAX_TITLE_LENGTH:
        mssg = f"Title must be at most {MAX_TITLE_LENGTH} characters"
        raise ValueError(mssg)
    if not generate_slug(title):
        mssg = "Title must contain at least one letter or digit"
        raise ValueError(mssg)
    return title


def _clean_content(v: str) -> str:
    if not v.strip():
        mssg = "Please add content"
        raise ValueError(mssg)
    if len(v) > MAX_CONTENT_LENGTH:
        mssg = f"Content must be at most {MAX_CONTENT_LENGTH} characters"
        raise ValueError(mssg)
    return v


def _clean_tags(v: list[str]) -> list[str]:
    tags = [tag.strip() for tag in v]
    for tag in tags:
        if not 1 <= len(tag) <= MAX_TAG_LENGTH:
            mssg = f"Each tag must be 1-{MAX_TAG_LENGTH} characters"
            raise ValueError(mssg)
    return tags


class PostCreate(BaseModel):
    """Post creation model (request body; author comes from the token)."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Hello World",
                "content": "My first post.",
                "tags": ["intro", "misc"],
                "status": "published",
            },
        },
    )

    title: str = Field(..., description="Post title", examples=["Hello World"])
    content: str = Field(..., description="Post content", examples=["My first post."])
    tags: list[str] = Field(
        default_factory=list,
        max_length=MAX_TAGS,
        description="Post tags, order preserved",
    )
    status: PostStatus = Field(default="draft", description="Post status")

    @field_validator("title", mode="after")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Trim the title and make sure a slug can be derived from it."""
        return _clean_title(v)

    @field_validator("content", mode="after")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _clean_content(v)

    @field_validator("tags", mode="after")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class PostUpdate(BaseModel):
    """Post update model (all fields optional, merged into the stored post)."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Hello Again",
                "status": "published",
                "tags": ["intro"],
            },
        },
    )

    title: str | None = None
    content: str | None = None
    tags: list[str] | None = Field(default=None, max_length=MAX_TAGS)
    status: PostStatus | None = None

    @field_validator("title", mode="after")
    @classmethod
    def validate_title_if_provided(cls, v: str | None) -> str | None:
        return v if v is None else _clean_title(v)

    @field_validator("content", mode="after")
    @classmethod
    def validate_content_if_provided(cls, v: str | None) -> str | None:
        return v if v is None else _clean_content(v)

    @field_validator("tags", mode="after")
    @classmethod
    def validate_tags_if_provided(cls, v: list[str] | None) -> list[str] | None:
        return v if v is None else _clean_tags(v)

    @model_validator(mode="after")
    def validate_not_empty(self) -> "PostUpdate":
        """Reject bodies that carry no updatable field."""
        if not self.model_dump(exclude_none=True):
            mssg = "Provide at least one of title, content, tags or status"
            raise ValueError(mssg)
        return self


class PostAuthor(BaseModel):
    """Author projection embedded in post responses (no sensitive data)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str | None = None


class PostResponse(BaseModel):
    """Post response model."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    title: str
    slug: str
    content: str
    author: PostAuthor
    status: str
    tags: list[str]
    deleted_at: datetime | None = Field(default=None, alias="deletedAt")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class PostListResponse(BaseModel):
    """One page of visible posts."""

    count: int = Field(description="Number of posts in this page")
    total: int = Field(description="Number of posts matching the query")
    pages: int = Field(description="Number of pages at the requested limit")
    page: int = Field(description="Requested page number")
    data: list[PostResponse]


class MessageResponse(BaseModel):
    """Plain ``{message}`` acknowledgement."""

    message: str
