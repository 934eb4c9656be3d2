"""Tests for the bearer authentication dependencies."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from app.configs import MAX_PAGE
from app.dependencies import get_current_user, get_optional_user, get_post_list_query
from app.errors import Unauthorized
from app.managers.token_manager import create_access_token
from app.models import UserDB
from app.schemas import CurrentUser


@pytest.fixture
def stored_user() -> UserDB:
    return UserDB(
        uuid=uuid4(),
        name="Test User",
        email="test@example.com",
        password_hash="$argon2id$v=19$m=8192,t=1,p=1$somehash",
        created_at=datetime.now(tz=UTC),
    )


@pytest.fixture
def repo(stored_user: UserDB) -> MagicMock:
    mock = MagicMock()
    mock.get_by_id = AsyncMock(return_value=stored_user)
    return mock


def credentials_for(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentUser:
    async def test_resolves_user_without_password_hash(
        self,
        stored_user: UserDB,
        repo: MagicMock,
    ) -> None:
        token = create_access_token(user_id=stored_user.uuid)

        user = await get_current_user(credentials_for(token), repo)

        assert isinstance(user, CurrentUser)
        assert user.id == stored_user.uuid
        assert not hasattr(user, "password_hash")
        repo.get_by_id.assert_awaited_once_with(stored_user.uuid)

    async def test_missing_credentials(self, repo: MagicMock) -> None:
        with pytest.raises(Unauthorized, match="no token"):
            await get_current_user(None, repo)

    async def test_invalid_token(self, repo: MagicMock) -> None:
        with pytest.raises(Unauthorized, match="token failed"):
            await get_current_user(credentials_for("garbage"), repo)

        repo.get_by_id.assert_not_awaited()

    async def test_user_no_longer_exists(self, repo: MagicMock) -> None:
        repo.get_by_id.return_value = None
        token = create_access_token(user_id=uuid4())

        with pytest.raises(Unauthorized, match="token failed"):
            await get_current_user(credentials_for(token), repo)


class TestGetOptionalUser:
    async def test_returns_user_for_valid_token(
        self,
        stored_user: UserDB,
        repo: MagicMock,
    ) -> None:
        token = create_access_token(user_id=stored_user.uuid)

        user = await get_optional_user(credentials_for(token), repo)

        assert user is not None
        assert user.id == stored_user.uuid

    async def test_anonymous_without_header(self, repo: MagicMock) -> None:
        assert await get_optional_user(None, repo) is None

    async def test_anonymous_for_bad_token(self, repo: MagicMock) -> None:
        assert await get_optional_user(credentials_for("garbage"), repo) is None

    async def test_anonymous_when_user_no_longer_exists(self, repo: MagicMock) -> None:
        repo.get_by_id.return_value = None
        token = create_access_token(user_id=uuid4())

        assert await get_optional_user(credentials_for(token), repo) is None
        repo.get_by_id.assert_awaited_once()

    async def test_anonymous_for_expired_token(
        self,
        stored_user: UserDB,
        repo: MagicMock,
    ) -> None:
        token = create_access_token(user_id=stored_user.uuid, expires_delta=timedelta(seconds=-1))

        assert await get_optional_user(credentials_for(token), repo) is None
        repo.get_by_id.assert_not_awaited()


class TestPostListQuery:
    def test_defaults(self) -> None:
        query = get_post_list_query()

        assert (query.search, query.tag, query.page, query.limit) == (None, None, 1, 10)

    def test_parses_and_trims(self) -> None:
        query = get_post_list_query(search="  python ", tag=" web ", page="3", limit="25")

        assert (query.search, query.tag, query.page, query.limit) == ("python", "web", 3, 25)

    def test_blank_filters_are_dropped(self) -> None:
        query = get_post_list_query(search="   ", tag="")

        assert query.search is None
        assert query.tag is None

    def test_limit_is_capped(self) -> None:
        assert get_post_list_query(limit="5000").limit == 100

    def test_page_is_capped(self) -> None:
        assert get_post_list_query(page="99999999999999999999").page == MAX_PAGE

    def test_to_params_computes_skip(self) -> None:
        params = get_post_list_query(page="2", limit="5").to_params()

        assert params.skip == 5
