"""Post repository for database operations."""

from dataclasses import dataclass
from logging import getLogger
from math import ceil
from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, and_, func, or_, select
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.compiler import SQLCompiler
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.functions import FunctionElement

from app.configs import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, file_logger
from app.errors.database import DuplicateEntryError
from app.errors.validation import ValidationError
from app.models import PostDB, UserDB
from app.repositories.base import BaseRepository
from app.schemas.post import PostAuthor, PostCreate, PostUpdate
from app.utils.helpers import generate_slug, utc_now

logger = file_logger(getLogger(__name__))

PUBLISHED = "published"


class tags_contain(FunctionElement):  # noqa: N801
    """
    ``tags_contain(column, tag)``: true when the JSON array ``column`` holds ``tag``.

    Renders as ``jsonb_exists`` on PostgreSQL and as a ``json_each`` lookup on
    SQLite.
    """

    name = "tags_contain"
    type = Boolean()
    inherit_cache = True


@compiles(tags_contain)
def _compile_tags_contain(element: tags_contain, compiler: SQLCompiler, **kw: Any) -> str:
    column, tag = element.clauses.clauses
    return compiler.process(func.jsonb_exists(column, tag), **kw)


@compiles(tags_contain, "sqlite")
def _compile_tags_contain_sqlite(
    element: tags_contain,
    compiler: SQLCompiler,
    **kw: Any,
) -> str:
    column, tag = element.clauses.clauses
    return (
        f"EXISTS (SELECT 1 FROM json_each({compiler.process(column, **kw)}) "
        f"WHERE json_each.value = {compiler.process(tag, **kw)})"
    )


@dataclass(frozen=True)
class PostListParams:
    """
    Normalised listing parameters.

    Parameters
    ----------
    search : str | None
        Case-insensitive substring matched against title or content.
    tag : str | None
        Tag the post must carry.
    page : int
        1-based page number.
    limit : int
        Page size.
    """

    search: str | None = None
    tag: str | None = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PostPage:
    """A page of visible posts with their resolved authors."""

    items: list[tuple[PostDB, PostAuthor]]
    total: int
    page: int
    limit: int

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0


def visibility_clause(viewer_id: UUID | None) -> ColumnElement[bool]:
    """
    Build the visibility predicate for a caller.

    Anonymous callers see published posts only; an identified caller also
    sees their own drafts.
    """
    published = PostDB.status == PUBLISHED
    if viewer_id is None:
        return published
    return or_(published, PostDB.author_id == viewer_id)


def search_clause(term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match on title or content."""
    return or_(
        PostDB.title.icontains(term, autoescape=True),
        PostDB.content.icontains(term, autoescape=True),
    )


def build_list_conditions(
    params: PostListParams,
    viewer_id: UUID | None,
) -> list[ColumnElement[bool]]:
    """
    Compose the listing predicates, each one AND-ed with the others.

    The shape is always ``active AND visibility [AND search] [AND tag]``; the
    search group never widens what visibility allows.
    """
    conditions: list[ColumnElement[bool]] = [
        PostDB.deleted_at.is_(None),
        visibility_clause(viewer_id),
    ]
    if params.search:
        conditions.append(search_clause(params.search))
    if params.tag:
        conditions.append(tags_contain(PostDB.tags, params.tag))
    return conditions


class PostRepository(BaseRepository[PostDB]):
    """
    Repository for Post database operations.

    Slug derivation and timestamp upkeep are done explicitly by ``create`` and
    ``update``; the model itself has no lifecycle hooks.
    """

    model = PostDB

    async def create(self, post: PostCreate, author_id: UUID) -> PostDB:
        """
        Create a new post owned by ``author_id``.

        Args:
            post: Validated creation payload
            author_id: UUID of the authenticated author

        Returns:
            PostDB: Created post

        Raises:
            ValidationError: If no slug can be derived from the title
            DuplicateEntryError: If the derived slug is already taken
        """
        slug = await self._available_slug(post.title)
        now = utc_now()

        db_post = PostDB(
            author_id=author_id,
            title=post.title,
            slug=slug,
            content=post.content,
            status=post.status,
            tags=list(post.tags),
            created_at=now,
            updated_at=now,
        )
        created = await self._save(db_post)
        logger.info(f"Post {created.id} created with slug '{slug}'")
        return created

    async def get_by_id(self, record_id: UUID, *, include_deleted: bool = False) -> PostDB | None:
        """
        Get a post by ID.

        Args:
            record_id: Post UUID
            include_deleted: Also return soft-deleted posts

        Returns:
            PostDB | None: Post if found, None otherwise
        """
        statement = select(PostDB).where(PostDB.id == record_id)
        if not include_deleted:
            statement = statement.where(PostDB.deleted_at.is_(None))
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_published_by_slug(self, slug: str) -> tuple[PostDB, PostAuthor] | None:
        """
        Get an active, published post by slug with its author's name.

        Caller identity plays no part here: an author's own draft is not
        reachable by slug.

        Args:
            slug: Post slug

        Returns:
            tuple[PostDB, PostAuthor] | None: Post and author, or None
        """
        statement = (
            select(PostDB, UserDB.uuid, UserDB.name)
            .join(UserDB, UserDB.uuid == PostDB.author_id)
            .where(
                PostDB.slug == slug,
                PostDB.status == PUBLISHED,
                PostDB.deleted_at.is_(None),
            )
        )
        result = await self.session.execute(statement)
        row = result.one_or_none()
        if row is None:
            return None
        post, author_id, author_name = row
        return post, PostAuthor(id=author_id, name=author_name)

    async def list_visible(
        self,
        params: PostListParams,
        viewer_id: UUID | None = None,
    ) -> PostPage:
        """
        Run the visibility-aware search/filter/paginate query.

        Args:
            params: Search term, tag and pagination
            viewer_id: Identified caller, if any

        Returns:
            PostPage: The requested page plus the total number of matches
        """
        conditions = build_list_conditions(params, viewer_id)

        statement = (
            select(PostDB, UserDB.uuid, UserDB.name, UserDB.email)
            .join(UserDB, UserDB.uuid == PostDB.author_id)
            .where(and_(*conditions))
            .order_by(PostDB.created_at, PostDB.id)
            .offset(params.skip)
            .limit(params.limit)
        )
        result = await self.session.execute(statement)
        items = [
            (post, PostAuthor(id=author_id, name=name, email=email))
            for post, author_id, name, email in result.all()
        ]

        total_statement = select(func.count()).select_from(PostDB).where(and_(*conditions))
        total = (await self.session.execute(total_statement)).scalar() or 0

        logger.debug(
            f"Listed {len(items)} of {total} posts (page={params.page}, limit={params.limit}, "
            f"search={params.search!r}, tag={params.tag!r}, viewer={viewer_id})",
        )
        return PostPage(items=items, total=total, page=params.page, limit=params.limit)

    async def get_author(self, author_id: UUID) -> PostAuthor | None:
        """
        Resolve the author projection (id, name, email) for one user.

        Args:
            author_id: User UUID

        Returns:
            PostAuthor | None: Projection if the user exists
        """
        result = await self.session.execute(
            select(UserDB.uuid, UserDB.name, UserDB.email).where(UserDB.uuid == author_id),
        )
        row = result.one_or_none()
        if row is None:
            return None
        return PostAuthor(id=row.uuid, name=row.name, email=row.email)

    async def update(self, db_post: PostDB, post_update: PostUpdate) -> PostDB:
        """
        Merge the provided fields into a stored post.

        A supplied title always re-derives the slug. ``author_id`` and
        ``deleted_at`` are never touched.

        Args:
            db_post: Post loaded by the caller
            post_update: Fields to merge

        Returns:
            PostDB: Updated post

        Raises:
            DuplicateEntryError: If the new slug belongs to another post
        """
        update_data = post_update.model_dump(exclude_unset=True, exclude_none=True)

        if "title" in update_data:
            update_data["slug"] = await self._available_slug(
                update_data["title"],
                exclude_id=db_post.id,
            )

        update_data["updated_at"] = utc_now()

        for key, value in update_data.items():
            setattr(db_post, key, value)

        updated = await self._save(db_post)
        logger.info(f"Post {updated.id} updated: {sorted(update_data)}")
        return updated

    async def soft_delete(self, db_post: PostDB) -> PostDB:
        """
        Mark a post as deleted without removing the row.

        An existing ``deleted_at`` is kept as is.

        Args:
            db_post: Post loaded by the caller

        Returns:
            PostDB: The soft-deleted post
        """
        if db_post.deleted_at is None:
            now = utc_now()
            db_post.deleted_at = now
            db_post.updated_at = now
            db_post = await self._save(db_post)
            logger.info(f"Post {db_post.id} soft-deleted")
        return db_post

    async def _available_slug(self, title: str, exclude_id: UUID | None = None) -> str:
        """
        Derive the slug for ``title`` and make sure no other post holds it.

        Soft-deleted posts keep their slug, so they count as holders too.
        """
        slug = generate_slug(title)
        if not slug:
            raise ValidationError(detail="Title must contain at least one letter or digit")
        if await self._exists("slug", slug, exclude_id=exclude_id):
            raise DuplicateEntryError(detail=f"Post with slug '{slug}' already exists")
        return slug

    def _duplicate_message(self, reason: str) -> str:
        if "slug" in reason.lower():
            return "Post with this slug already exists"
        return super()._duplicate_message(reason)
