from app.schemas.auth import LoginRequest, Token, TokenData
from app.schemas.health import HealthCheckResponse
from app.schemas.post import (
    MessageResponse,
    PostAuthor,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostStatus,
    PostUpdate,
)
from app.schemas.user import CurrentUser, RegisterResponse, UserCreate, UserResponse

__all__ = [
    "CurrentUser",
    "HealthCheckResponse",
    "LoginRequest",
    "MessageResponse",
    "PostAuthor",
    "PostCreate",
    "PostListResponse",
    "PostResponse",
    "PostStatus",
    "PostUpdate",
    "RegisterResponse",
    "Token",
    "TokenData",
    "UserCreate",
    "UserResponse",
]
