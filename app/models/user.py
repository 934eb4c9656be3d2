"""``users`` table."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


def _now() -> datetime:
    return datetime.now(tz=UTC)


class UserDB(SQLModel, table=True):
    """
    Registered account.

    Rows are never hard-deleted. ``password_hash`` stays on this model and is
    left out of every response schema.
    """

    __tablename__ = cast("declared_attr[str]", "users")

    uuid: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    name: str = Field(sa_column=Column(String(100), nullable=False))
    # Stored lowercased; uniqueness is case-insensitive as a result.
    email: str = Field(sa_column=Column(String(255), unique=True, nullable=False, index=True))
    password_hash: str = Field(sa_column=Column(String(255), nullable=False))
    created_at: datetime = Field(
        default_factory=_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "uuid": "0b9f3c4e-5a61-4d2e-9d1c-7f2a8e6b3c10",
                "name": "Alice Author",
                "email": "alice@example.com",
            },
        },
    )
