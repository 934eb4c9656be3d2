# app/routes/post.py

"""
Post Routes.

CRUD, soft delete, and the visibility-aware listing for blog posts.

Summary
-------
Endpoints include:
  - List posts (search, tag filter, pagination; optional identity)
  - Get post by slug (public, published only)
  - Get own post by id (author only, soft-deleted included)
  - Create post
  - Update post
  - Soft delete post

Authentication
--------------
Write operations require ``Authorization: Bearer <token>``. The listing reads
the header when present and falls back to anonymous visibility otherwise.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from app.dependencies import CurrentUserDep, OptionalUserDep, PostQueryListDep, PostServiceDep
from app.managers import POST_CREATE_LIMIT, limiter
from app.models import PostDB
from app.schemas import (
    MessageResponse,
    PostAuthor,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostUpdate,
)

router = APIRouter(prefix="/api/posts", tags=["📝 Posts"])

POST_EXAMPLE = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "title": "Hello World",
    "slug": "hello-world",
    "content": "My first post.",
    "author": {
        "id": "123e4567-e89b-12d3-a456-426614174111",
        "name": "John Doe",
        "email": "johndoe@gmail.com",
    },
    "status": "published",
    "tags": ["intro"],
    "deletedAt": None,
    "createdAt": "2025-01-01T00:00:00Z",
    "updatedAt": "2025-01-01T00:00:00Z",
}

UNAUTHORIZED_RESPONSE = {
    "description": "Missing or invalid bearer token",
    "content": {"application/json": {"example": {"message": "Not authorized, no token"}}},
}
FORBIDDEN_RESPONSE = {
    "description": "Caller is not the author",
    "content": {
        "application/json": {"example": {"message": "Not authorized to modify this post"}},
    },
}
NOT_FOUND_RESPONSE = {
    "description": "Not found",
    "content": {"application/json": {"example": {"message": "Post not found"}}},
}
RATE_LIMIT_RESPONSE = {
    "description": "Rate limit exceeded",
    "content": {
        "application/json": {"example": {"message": "Too many requests, limit is 10 per 1 minute"}},
    },
}


def to_post_response(post: PostDB, author: PostAuthor) -> PostResponse:
    """
    Build the API representation of a post with its author projection.

    Parameters
    ----------
    post : PostDB
        Database post entity.
    author : PostAuthor
        Resolved author projection.

    Returns
    -------
    PostResponse
        Validated response model.
    """
    return PostResponse(
        id=post.id,
        title=post.title,
        slug=post.slug,
        content=post.content,
        author=author,
        status=post.status,
        tags=list(post.tags or []),
        deleted_at=post.deleted_at,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=PostListResponse,
    summary="List posts",
    description=(
        "List active posts visible to the caller. Anonymous callers see published posts; "
        "an authenticated caller also sees their own drafts. Supports `search` (title or "
        "content), `tag`, `page` and `limit`."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "count": 1,
                        "total": 1,
                        "pages": 1,
                        "page": 1,
                        "data": [POST_EXAMPLE],
                    },
                },
            },
        },
    },
    operation_id="posts_list",
)
async def list_posts(
    query: PostQueryListDep,
    service: PostServiceDep,
    user: OptionalUserDep,
) -> PostListResponse:
    """
    List posts with visibility, search, tag filter and pagination.

    Parameters
    ----------
    query : PostListQuery
        Parsed listing parameters.
    service : PostService
        Post service dependency.
    user : CurrentUser | None
        Caller, when a valid bearer token was sent.

    Returns
    -------
    PostListResponse
        One page of posts plus totals.
    """
    page = await service.list_posts(query.to_params(), user)
    return PostListResponse(
        count=page.count,
        total=page.total,
        pages=page.pages,
        page=page.page,
        data=[to_post_response(post, author) for post, author in page.items],
    )


@router.get(
    "/by-id/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Get own post by ID",
    description="Retrieve one of your own posts by UUID, including drafts and soft-deleted posts.",
    responses={
        200: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        401: UNAUTHORIZED_RESPONSE,
        403: FORBIDDEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="posts_get_by_id",
)
async def get_post_by_id(
    post_id: UUID,
    service: PostServiceDep,
    user: CurrentUserDep,
) -> PostResponse:
    post, author = await service.get_owned(post_id, user)
    return to_post_response(post, author)


@router.get(
    "/{slug}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Get post by slug",
    description="Retrieve a published, active post by its slug.",
    responses={
        200: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="posts_get_by_slug",
)
async def get_post_by_slug(slug: str, service: PostServiceDep) -> PostResponse:
    """
    Get a post by slug.

    Parameters
    ----------
    slug : str
        URL-friendly post identifier.
    service : PostService
        Post service dependency.

    Returns
    -------
    PostResponse
        Post data with author name.
    """
    post, author = await service.get_by_slug(slug)
    return to_post_response(post, author)


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    status_code=HTTP_201_CREATED,
    summary="Create a new post",
    description="Create a post authored by the caller. The slug is derived from the title.",
    responses={
        201: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        400: {
            "description": "Bad request",
            "content": {
                "application/json": {
                    "example": {"message": "Post with slug 'hello-world' already exists"},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="posts_create",
)
@limiter.limit(POST_CREATE_LIMIT)
async def create_post(
    request: Request,
    response: Response,
    post: Annotated[
        PostCreate,
        Body(
            examples={
                "basic": {
                    "summary": "Basic post creation",
                    "value": {
                        "title": "Hello World",
                        "content": "My first post.",
                        "tags": ["intro"],
                        "status": "published",
                    },
                },
            },
        ),
    ],
    service: PostServiceDep,
    user: CurrentUserDep,
) -> PostResponse:
    """
    Create a new post.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    post : PostCreate
        Post input payload.
    service : PostService
        Post service dependency.
    user : CurrentUser
        Authenticated author.

    Returns
    -------
    PostResponse
        Created post data.

    Raises
    ------
    DuplicateEntryError
        If the derived slug already exists.
    """
    db_post, author = await service.create(post, user)
    return to_post_response(db_post, author)


@router.put(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Update a post",
    description=(
        "Update title, content, tags or status of an active post you own. "
        "A new title re-derives the slug."
    ),
    responses={
        200: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        400: {
            "description": "Bad request",
            "content": {
                "application/json": {
                    "example": {
                        "message": "Provide at least one of title, content, tags or status",
                    },
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        403: FORBIDDEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="posts_update",
)
async def update_post(
    post_id: UUID,
    post_update: PostUpdate,
    service: PostServiceDep,
    user: CurrentUserDep,
) -> PostResponse:
    """
    Update a post.

    Parameters
    ----------
    post_id : UUID
        Post identifier.
    post_update : PostUpdate
        Fields to merge.
    service : PostService
        Post service dependency.
    user : CurrentUser
        Authenticated caller; must be the author.

    Returns
    -------
    PostResponse
        Updated post data.
    """
    db_post, author = await service.update(post_id, post_update, user)
    return to_post_response(db_post, author)


@router.delete(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Soft delete a post",
    description="Mark an active post you own as deleted. The row is kept.",
    responses={
        200: {"content": {"application/json": {"example": {"message": "Post soft-deleted"}}}},
        401: UNAUTHORIZED_RESPONSE,
        403: FORBIDDEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="posts_delete",
)
async def delete_post(
    post_id: UUID,
    service: PostServiceDep,
    user: CurrentUserDep,
) -> MessageResponse:
    await service.soft_delete(post_id, user)
    return MessageResponse(message="Post soft-deleted")
