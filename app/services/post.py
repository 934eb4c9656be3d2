"""Post service: ownership rules, soft delete and visibility-aware reads."""

from logging import getLogger
from uuid import UUID

from app.configs import file_logger
from app.errors.auth import Forbidden
from app.errors.base import InternalError
from app.errors.database import NotFound
from app.models import PostDB
from app.repositories import PostListParams, PostPage, PostRepository
from app.schemas.post import PostAuthor, PostCreate, PostUpdate
from app.schemas.user import CurrentUser

logger = file_logger(getLogger(__name__))

POST_NOT_FOUND = "Post not found"


class PostService:
    """
    Controller logic for posts.

    The caller's identity is always an explicit argument: ``None`` means an
    anonymous request.
    """

    def __init__(self, repo: PostRepository) -> None:
        self.repo = repo

    async def create(self, payload: PostCreate, user: CurrentUser) -> tuple[PostDB, PostAuthor]:
        """
        Create a post authored by the caller.

        Raises:
            ValidationError: If the title yields no slug
            DuplicateEntryError: If the slug is already taken
        """
        post = await self.repo.create(payload, author_id=user.id)
        return post, PostAuthor(id=user.id, name=user.name, email=user.email)

    async def list_posts(self, params: PostListParams, user: CurrentUser | None) -> PostPage:
        return await self.repo.list_visible(params, viewer_id=user.id if user else None)

    async def get_by_slug(self, slug: str) -> tuple[PostDB, PostAuthor]:
        """
        Public single-post lookup.

        Only active, published posts are reachable; drafts stay hidden even
        from their author.
        """
        found = await self.repo.get_published_by_slug(slug)
        if found is None:
            raise NotFound(POST_NOT_FOUND)
        return found

    async def get_owned(self, post_id: UUID, user: CurrentUser) -> tuple[PostDB, PostAuthor]:
        """
        Direct lookup for the author, soft-deleted posts included.

        Raises:
            NotFound: If no post has this id
            Forbidden: If the caller is not the author
        """
        post = await self.repo.get_by_id(post_id, include_deleted=True)
        if post is None:
            raise NotFound(POST_NOT_FOUND)
        self._ensure_owner(post, user)
        return post, await self._author(post)

    async def update(
        self,
        post_id: UUID,
        payload: PostUpdate,
        user: CurrentUser,
    ) -> tuple[PostDB, PostAuthor]:
        """
        Merge the payload into an active post owned by the caller.

        Raises:
            NotFound: If the post is absent or soft-deleted
            Forbidden: If the caller is not the author
            DuplicateEntryError: If a new title collides with another slug
        """
        post = await self._load_active(post_id)
        self._ensure_owner(post, user)
        updated = await self.repo.update(post, payload)
        return updated, await self._author(updated)

    async def soft_delete(self, post_id: UUID, user: CurrentUser) -> PostDB:
        """
        Soft delete an active post owned by the caller.

        Raises:
            NotFound: If the post is absent or already deleted
            Forbidden: If the caller is not the author
        """
        post = await self._load_active(post_id)
        self._ensure_owner(post, user)
        return await self.repo.soft_delete(post)

    async def _load_active(self, post_id: UUID) -> PostDB:
        post = await self.repo.get_by_id(post_id)
        if post is None:
            raise NotFound(POST_NOT_FOUND)
        return post

    @staticmethod
    def _ensure_owner(post: PostDB, user: CurrentUser) -> None:
        if post.author_id != user.id:
            logger.warning(f"User {user.id} denied access to post {post.id}")
            raise Forbidden

    async def _author(self, post: PostDB) -> PostAuthor:
        author = await self.repo.get_author(post.author_id)
        if author is None:
            # author_id is a non-null foreign key
            raise InternalError(f"Author {post.author_id} of post {post.id} is missing")
        return author
