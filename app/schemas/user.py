"""
User schemas for authentication and authorization.

``CurrentUser`` is the identity attached to authenticated requests; it never
carries the password hash.
"""

from datetime import datetime
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    SecretStr,
    field_validator,
)

from app.configs.settings import MIN_PASSWORD_LENGTH


class UserCreate(BaseModel):
    """User registration model."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "John Doe",
                "email": "johndoe@gmail.com",
                "password": "secret123",
            },
        },
    )

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="Email address", examples=["johndoe@gmail.com"])
    password: SecretStr = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        description="Password",
        examples=["secret123"],
    )

    @field_validator("name", mode="after")
    @classmethod
    def strip_name(cls, v: str) -> str:
        name = v.strip()
        if not name:
            mssg = "Please add a name"
            raise ValueError(mssg)
        return name

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class CurrentUser(BaseModel):
    """Identity resolved from a bearer token."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True, frozen=True)

    id: UUID = Field(validation_alias=AliasChoices("uuid", "id"))
    name: str
    email: str
    created_at: datetime


class UserResponse(BaseModel):
    """User response model (safe for API responses)."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID = Field(validation_alias=AliasChoices("uuid", "id"))
    name: str
    email: str
    created_at: datetime = Field(alias="createdAt")


class RegisterResponse(UserResponse):
    """Registered user plus a ready-to-use access token."""

    token: str
