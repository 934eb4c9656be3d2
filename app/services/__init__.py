from app.services.auth import AuthService
from app.services.post import PostService

__all__ = ["AuthService", "PostService"]
