"""Tests for registration, login and the current-user endpoint."""

import pytest
from httpx import AsyncClient

from app.models import UserDB

REGISTER_URL = "/api/auth/register"
LOGIN_URL = "/api/auth/login"
ME_URL = "/api/auth/me"


class TestRegister:
    async def test_register_returns_user_and_token(self, client: AsyncClient) -> None:
        response = await client.post(
            REGISTER_URL,
            json={"name": "  Jane  ", "email": "Jane@Example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Jane"
        assert data["email"] == "jane@example.com"
        assert data["token"]
        assert "createdAt" in data
        assert "password" not in data
        assert "password_hash" not in data

    async def test_duplicate_email_returns_400(self, client: AsyncClient, author: UserDB) -> None:
        response = await client.post(
            REGISTER_URL,
            json={"name": "Again", "email": "alice@example.com", "password": "secret123"},
        )

        assert response.status_code == 400
        assert "already registered" in response.json()["message"]

    @pytest.mark.parametrize(
        "body",
        [
            {"name": "Jane", "email": "not-an-email", "password": "secret123"},
            {"name": "Jane", "email": "jane@example.com", "password": "short"},
            {"name": "   ", "email": "jane@example.com", "password": "secret123"},
            {"email": "jane@example.com", "password": "secret123"},
        ],
    )
    async def test_invalid_registration(self, client: AsyncClient, body: dict) -> None:
        response = await client.post(REGISTER_URL, json=body)

        assert response.status_code == 400
        assert response.json()["message"]


class TestLogin:
    async def test_login_returns_bearer_token(self, client: AsyncClient, author: UserDB) -> None:
        response = await client.post(
            LOGIN_URL,
            json={"email": "ALICE@example.com", "password": "secret123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["tokenType"] == "bearer"
        assert data["accessToken"]

    async def test_wrong_password(self, client: AsyncClient, author: UserDB) -> None:
        response = await client.post(
            LOGIN_URL,
            json={"email": "alice@example.com", "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid email or password"}

    async def test_unknown_email(self, client: AsyncClient) -> None:
        response = await client.post(
            LOGIN_URL,
            json={"email": "ghost@example.com", "password": "secret123"},
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid email or password"}


class TestMe:
    async def test_me_requires_token(self, client: AsyncClient) -> None:
        response = await client.get(ME_URL)

        assert response.status_code == 401
        assert response.json() == {"message": "Not authorized, no token"}

    async def test_me_returns_profile(
        self,
        client: AsyncClient,
        author: UserDB,
        author_headers: dict[str, str],
    ) -> None:
        response = await client.get(ME_URL, headers=author_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(author.uuid)
        assert data["email"] == "alice@example.com"

    async def test_token_for_missing_user_fails(
        self,
        client: AsyncClient,
        headers_for,
    ) -> None:
        ghost = UserDB(name="Ghost", email="ghost@example.com", password_hash="x")

        response = await client.get(ME_URL, headers=headers_for(ghost))

        assert response.status_code == 401
        assert response.json() == {"message": "Not authorized, token failed"}


async def test_register_login_create_round_trip(client: AsyncClient) -> None:
    await client.post(
        REGISTER_URL,
        json={"name": "Jane", "email": "jane@example.com", "password": "secret123"},
    )
    login = await client.post(
        LOGIN_URL,
        json={"email": "jane@example.com", "password": "secret123"},
    )
    headers = {"Authorization": f"Bearer {login.json()['accessToken']}"}

    created = await client.post(
        "/api/posts",
        json={"title": "First Post", "content": "Hi", "status": "published"},
        headers=headers,
    )

    assert created.status_code == 201
    assert created.json()["author"]["name"] == "Jane"
