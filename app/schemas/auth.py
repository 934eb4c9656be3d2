from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """Login credentials."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class Token(BaseModel):
    """Token schema for JWT access tokens."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    token_type: str = Field(default="bearer", alias="tokenType")


class TokenData(BaseModel):
    """Token data schema for extracted token payload."""

    user_id: UUID
    jti: str
    token_type: str
