# tests/routes/test_post_routes.py
"""End-to-end tests for the /api/posts endpoints."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient

from app.configs import settings
from app.configs.settings import MAX_CONTENT_LENGTH, MAX_PAGE
from app.db import async_session_maker
from app.models import PostDB, UserDB

POSTS_URL = "/api/posts"


async def create_post(
    client: AsyncClient,
    headers: dict[str, str],
    title: str = "Hello World",
    **fields: object,
) -> dict:
    body = {"title": title, "content": f"Content of {title}", **fields}
    response = await client.post(POSTS_URL, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def load_post(post_id: str) -> PostDB:
    async with async_session_maker() as s:
        post = await s.get(PostDB, UUID(post_id))
        assert post is not None
        return post


class TestCreatePost:
    async def test_create_returns_201_with_author(
        self,
        client: AsyncClient,
        author: UserDB,
        author_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            POSTS_URL,
            json={
                "title": "Hello World",
                "content": "My first post.",
                "tags": ["intro"],
                "status": "published",
            },
            headers=author_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["slug"] == "hello-world"
        assert data["status"] == "published"
        assert data["tags"] == ["intro"]
        assert data["deletedAt"] is None
        assert "createdAt" in data
        assert "updatedAt" in data
        assert data["author"] == {
            "id": str(author.uuid),
            "name": "Alice Author",
            "email": "alice@example.com",
        }

    async def test_defaults_to_draft_without_tags(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        data = await create_post(client, author_headers)

        assert data["status"] == "draft"
        assert data["tags"] == []

    async def test_requires_token(self, client: AsyncClient, db: None) -> None:
        response = await client.post(POSTS_URL, json={"title": "T", "content": "C"})

        assert response.status_code == 401
        assert response.json() == {"message": "Not authorized, no token"}

    async def test_rejects_invalid_token(self, client: AsyncClient, db: None) -> None:
        response = await client.post(
            POSTS_URL,
            json={"title": "T", "content": "C"},
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Not authorized, token failed"}

    async def test_rejects_non_bearer_scheme(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        token = author_headers["Authorization"].removeprefix("Bearer ")
        response = await client.post(
            POSTS_URL,
            json={"title": "T", "content": "C"},
            headers={"Authorization": f"Basic {token}"},
        )

        assert response.status_code == 401

    @pytest.mark.parametrize(
        "body",
        [
            {"content": "no title"},
            {"title": "   ", "content": "blank title"},
            {"title": "No content"},
            {"title": "Bad status", "content": "x", "status": "archived"},
            {"title": "Bad tags", "content": "x", "tags": "not-a-list"},
            {"title": "!!!", "content": "no slug"},
        ],
    )
    async def test_invalid_body_returns_400_message(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
        body: dict,
    ) -> None:
        response = await client.post(POSTS_URL, json=body, headers=author_headers)

        assert response.status_code == 400
        assert response.json()["message"]

    async def test_duplicate_title_returns_400(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        await create_post(client, author_headers, "Hello World")

        response = await client.post(
            POSTS_URL,
            json={"title": "Hello World", "content": "again"},
            headers=author_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Post with slug 'hello-world' already exists"}

    async def test_overlong_content_returns_400(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            POSTS_URL,
            json={"title": "Long read", "content": "x" * (MAX_CONTENT_LENGTH + 1)},
            headers=author_headers,
        )

        assert response.status_code == 400
        assert "content" in response.json()["message"]


class TestListPosts:
    async def test_anonymous_listing_hides_drafts(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        await create_post(client, author_headers, "Public", status="published")
        await create_post(client, author_headers, "Private", status="draft")

        response = await client.get(POSTS_URL)

        assert response.status_code == 200
        data = response.json()
        assert [p["title"] for p in data["data"]] == ["Public"]
        assert data["count"] == 1
        assert data["total"] == 1
        assert data["pages"] == 1
        assert data["page"] == 1

    async def test_author_sees_own_drafts_other_user_does_not(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
        other_headers: dict[str, str],
    ) -> None:
        await create_post(client, author_headers, "Public", status="published")
        await create_post(client, author_headers, "Private", status="draft")

        mine = (await client.get(POSTS_URL, headers=author_headers)).json()
        theirs = (await client.get(POSTS_URL, headers=other_headers)).json()

        assert sorted(p["title"] for p in mine["data"]) == ["Private", "Public"]
        assert [p["title"] for p in theirs["data"]] == ["Public"]

    async def test_invalid_token_falls_back_to_anonymous(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        await create_post(client, author_headers, "Private", status="draft")

        response = await client.get(POSTS_URL, headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 200
        assert response.json()["data"] == []

    async def test_search_and_tag(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        await create_post(client, author_headers, "Python Web", status="published", tags=["web"])
        await create_post(client, author_headers, "Python Data", status="published", tags=["data"])
        await create_post(client, author_headers, "Rust Web", status="published", tags=["web"])

        response = await client.get(POSTS_URL, params={"search": "PYTHON", "tag": "web"})

        assert [p["title"] for p in response.json()["data"]] == ["Python Web"]

    async def test_pagination(
        self,
        client: AsyncClient,
        author: UserDB,
        make_post,
    ) -> None:
        base = datetime(2025, 1, 1, tzinfo=UTC)
        for i in range(1, 13):
            await make_post(author, f"Post {i}", created_at=base + timedelta(minutes=i))

        response = await client.get(POSTS_URL, params={"page": "2", "limit": "5"})

        data = response.json()
        assert [p["title"] for p in data["data"]] == [f"Post {i}" for i in range(6, 11)]
        assert data["count"] == 5
        assert data["total"] == 12
        assert data["pages"] == 3
        assert data["page"] == 2

    @pytest.mark.parametrize(
        ("params", "expected_page", "expected_count"),
        [
            ({"page": "abc", "limit": "xyz"}, 1, 10),
            ({"page": "0", "limit": "-3"}, 1, 10),
            ({"page": "", "limit": ""}, 1, 10),
            ({"limit": "1000"}, 1, 12),
            ({"page": "99999999999999999999"}, MAX_PAGE, 0),
        ],
    )
    async def test_out_of_range_pagination_is_normalised(
        self,
        client: AsyncClient,
        author: UserDB,
        make_post,
        params: dict[str, str],
        expected_page: int,
        expected_count: int,
    ) -> None:
        base = datetime(2025, 1, 1, tzinfo=UTC)
        for i in range(1, 13):
            await make_post(author, f"Post {i}", created_at=base + timedelta(minutes=i))

        response = await client.get(POSTS_URL, params=params)

        assert response.status_code == 200
        data = response.json()
        assert data["page"] == expected_page
        assert data["count"] == expected_count


class TestGetBySlug:
    async def test_published_post_is_public(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        await create_post(client, author_headers, "Hello World", status="published")

        response = await client.get(f"{POSTS_URL}/hello-world")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Hello World"
        assert data["author"]["name"] == "Alice Author"
        assert data["author"]["email"] is None

    async def test_draft_is_not_found_even_for_author(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        await create_post(client, author_headers, "Hello World", status="draft")

        response = await client.get(f"{POSTS_URL}/hello-world", headers=author_headers)

        assert response.status_code == 404
        assert response.json() == {"message": "Post not found"}

    async def test_unknown_slug(self, client: AsyncClient, db: None) -> None:
        response = await client.get(f"{POSTS_URL}/nope")

        assert response.status_code == 404


class TestUpdatePost:
    async def test_author_can_update(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        post = await create_post(client, author_headers, "Old Title", tags=["a"])

        response = await client.put(
            f"{POSTS_URL}/{post['id']}",
            json={"title": "New Title", "status": "published"},
            headers=author_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "New Title"
        assert data["slug"] == "new-title"
        assert data["status"] == "published"
        assert data["tags"] == ["a"]
        assert data["content"] == post["content"]
        assert data["author"]["id"] == post["author"]["id"]

    async def test_non_author_is_forbidden_and_record_unchanged(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
        other_headers: dict[str, str],
    ) -> None:
        post = await create_post(client, author_headers, "Mine")

        response = await client.put(
            f"{POSTS_URL}/{post['id']}",
            json={"title": "Hijacked"},
            headers=other_headers,
        )

        assert response.status_code == 403
        assert response.json() == {"message": "Not authorized to modify this post"}
        stored = await load_post(post["id"])
        assert stored.title == "Mine"

    async def test_legacy_ownership_status(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
        other_headers: dict[str, str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        post = await create_post(client, author_headers, "Mine")
        monkeypatch.setattr(settings, "LEGACY_OWNERSHIP_401", True)

        response = await client.put(
            f"{POSTS_URL}/{post['id']}",
            json={"title": "Hijacked"},
            headers=other_headers,
        )

        assert response.status_code == 401

    async def test_unknown_post(self, client: AsyncClient, author_headers: dict[str, str]) -> None:
        response = await client.put(
            f"{POSTS_URL}/{uuid4()}",
            json={"title": "Whatever"},
            headers=author_headers,
        )

        assert response.status_code == 404

    async def test_empty_body_rejected(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        post = await create_post(client, author_headers, "Mine")

        response = await client.put(f"{POSTS_URL}/{post['id']}", json={}, headers=author_headers)

        assert response.status_code == 400

    async def test_overlong_content_rejected(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        post = await create_post(client, author_headers, "Mine")

        response = await client.put(
            f"{POSTS_URL}/{post['id']}",
            json={"content": "x" * (MAX_CONTENT_LENGTH + 1)},
            headers=author_headers,
        )

        assert response.status_code == 400
        stored = await load_post(post["id"])
        assert stored.content == post["content"]

    async def test_requires_token(self, client: AsyncClient, db: None) -> None:
        response = await client.put(f"{POSTS_URL}/{uuid4()}", json={"title": "x"})

        assert response.status_code == 401


class TestDeletePost:
    async def test_soft_delete_flow(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        post = await create_post(client, author_headers, "Doomed", status="published")

        response = await client.delete(f"{POSTS_URL}/{post['id']}", headers=author_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Post soft-deleted"}

        listing = (await client.get(POSTS_URL, headers=author_headers)).json()
        assert listing["data"] == []
        assert (await client.get(f"{POSTS_URL}/doomed")).status_code == 404

        direct = await client.get(f"{POSTS_URL}/by-id/{post['id']}", headers=author_headers)
        assert direct.status_code == 200
        assert direct.json()["deletedAt"] is not None

        stored = await load_post(post["id"])
        assert stored.deleted_at is not None

    async def test_deleting_twice_is_not_found(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        post = await create_post(client, author_headers, "Doomed")
        await client.delete(f"{POSTS_URL}/{post['id']}", headers=author_headers)

        response = await client.delete(f"{POSTS_URL}/{post['id']}", headers=author_headers)

        assert response.status_code == 404

    async def test_updating_deleted_post_is_not_found(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        post = await create_post(client, author_headers, "Doomed")
        await client.delete(f"{POSTS_URL}/{post['id']}", headers=author_headers)

        response = await client.put(
            f"{POSTS_URL}/{post['id']}",
            json={"content": "revived?"},
            headers=author_headers,
        )

        assert response.status_code == 404

    async def test_non_author_is_forbidden(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
        other_headers: dict[str, str],
    ) -> None:
        post = await create_post(client, author_headers, "Mine")

        response = await client.delete(f"{POSTS_URL}/{post['id']}", headers=other_headers)

        assert response.status_code == 403
        stored = await load_post(post["id"])
        assert stored.deleted_at is None


class TestGetById:
    async def test_author_reads_own_draft(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
    ) -> None:
        post = await create_post(client, author_headers, "Draft", status="draft")

        response = await client.get(f"{POSTS_URL}/by-id/{post['id']}", headers=author_headers)

        assert response.status_code == 200
        assert response.json()["id"] == post["id"]

    async def test_other_user_is_forbidden(
        self,
        client: AsyncClient,
        author_headers: dict[str, str],
        other_headers: dict[str, str],
    ) -> None:
        post = await create_post(client, author_headers, "Draft", status="draft")

        response = await client.get(f"{POSTS_URL}/by-id/{post['id']}", headers=other_headers)

        assert response.status_code == 403

    async def test_unknown_id(self, client: AsyncClient, author_headers: dict[str, str]) -> None:
        response = await client.get(f"{POSTS_URL}/by-id/{uuid4()}", headers=author_headers)

        assert response.status_code == 404
