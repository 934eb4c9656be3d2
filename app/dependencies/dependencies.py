# app/dependencies/dependencies.py

"""Application dependencies: sessions, repositories, services and bearer authentication."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, MAX_PAGE, MAX_PAGE_LIMIT
from app.db import get_session
from app.errors.auth import Unauthorized
from app.managers.token_manager import decode_access_token
from app.monitoring import bind_user_id
from app.repositories import PostListParams, PostRepository, UserRepository
from app.schemas.user import CurrentUser
from app.services import AuthService, PostService
from app.utils.helpers import parse_positive_int

bearer_scheme = HTTPBearer(auto_error=False, description="JWT access token")

NO_TOKEN_MESSAGE = "Not authorized, no token"
TOKEN_FAILED_MESSAGE = "Not authorized, token failed"


def get_user_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> UserRepository:
    """
    Resolve the `UserRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    UserRepository
        Repository instance bound to the session.
    """
    return UserRepository(session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]


def get_post_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> PostRepository:
    """
    Resolve the `PostRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    PostRepository
        Repository instance bound to the session.
    """
    return PostRepository(session)


PostRepoDep = Annotated[PostRepository, Depends(get_post_repository)]


def get_auth_service(repo: UserRepoDep) -> AuthService:
    return AuthService(repo)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def get_post_service(repo: PostRepoDep) -> PostService:
    return PostService(repo)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]


async def _resolve_user(
    credentials: HTTPAuthorizationCredentials | None,
    repo: UserRepository,
) -> CurrentUser:
    """
    Turn bearer credentials into the caller's identity.

    Raises
    ------
    Unauthorized
        If the header is missing, the token does not verify, or its user is gone.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized(NO_TOKEN_MESSAGE)

    token_data = decode_access_token(credentials.credentials)
    if token_data is None:
        raise Unauthorized(TOKEN_FAILED_MESSAGE)

    user = await repo.get_by_id(token_data.user_id)
    if user is None:
        raise Unauthorized(TOKEN_FAILED_MESSAGE)

    return CurrentUser.model_validate(user)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    repo: UserRepoDep,
) -> CurrentUser:
    """
    Require an authenticated caller.

    Parameters
    ----------
    credentials : HTTPAuthorizationCredentials | None
        Parsed ``Authorization: Bearer`` header, if any.
    repo : UserRepository
        User repository for the token's user id.

    Returns
    -------
    CurrentUser
        The caller, without password hash.

    Raises
    ------
    Unauthorized
        On any missing or invalid credential.
    """
    user = await _resolve_user(credentials, repo)
    bind_user_id(str(user.id))
    return user


async def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    repo: UserRepoDep,
) -> CurrentUser | None:
    """Identify the caller when possible; anonymous (None) otherwise. Never raises."""
    try:
        user = await _resolve_user(credentials, repo)
    except Unauthorized:
        return None
    bind_user_id(str(user.id))
    return user


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
OptionalUserDep = Annotated[CurrentUser | None, Depends(get_optional_user)]


@dataclass(frozen=True)
class PostListQuery:
    """
    Raw query container for post listing.

    Parameters
    ----------
    search : str | None
        Optional substring to look for in title or content.
    tag : str | None
        Optional tag filter.
    page : int
        1-based page number.
    limit : int
        Page size.
    """

    search: str | None = None
    tag: str | None = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT

    def to_params(self) -> PostListParams:
        return PostListParams(search=self.search, tag=self.tag, page=self.page, limit=self.limit)


def get_post_list_query(
    search: Annotated[str | None, Query(description="Search in title or content")] = None,
    tag: Annotated[str | None, Query(description="Only posts carrying this tag")] = None,
    page: Annotated[str | None, Query(description="Page number (default 1)")] = None,
    limit: Annotated[
        str | None,
        Query(description=f"Page size (default {DEFAULT_PAGE_LIMIT}, max {MAX_PAGE_LIMIT})"),
    ] = None,
) -> PostListQuery:
    """
    Dependency to construct `PostListQuery` from query parameters.

    ``page`` and ``limit`` are read as text so that absent, non-numeric or
    non-positive values fall back to the defaults instead of failing.

    Returns
    -------
    PostListQuery
        Aggregated query parameters object.
    """
    return PostListQuery(
        search=(search or "").strip() or None,
        tag=(tag or "").strip() or None,
        page=parse_positive_int(page, DEFAULT_PAGE, MAX_PAGE),
        limit=parse_positive_int(limit, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT),
    )


PostQueryListDep = Annotated[PostListQuery, Depends(get_post_list_query)]
