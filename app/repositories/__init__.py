"""Repository layer for database operations."""

from app.repositories.post import PostListParams, PostPage, PostRepository
from app.repositories.user import UserRepository

__all__ = ["PostListParams", "PostPage", "PostRepository", "UserRepository"]
