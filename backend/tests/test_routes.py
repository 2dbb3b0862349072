"""
Postboard Backend — API Route Tests
======================================

What:  End-to-end HTTP tests through the FastAPI app (ASGITransport).
How:   The repository dependency is replaced by the in-memory fake, so the
       full stack (auth dependency, services, exception handlers,
       middleware) runs without a database.

What we test:
    ✅ Status codes: 200/201/204 on success, 400/401/403/404 on failure
    ✅ camelCase wire format and the {"post"}/{"posts"}/{"comment"} envelopes
    ✅ Error bodies share one shape and carry the request id
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from postboard.routes import health
from postboard.security import create_access_token

NEW_POST = {"title": "Lego", "content": "Bricks", "category": "toys", "tags": ["Fun", "fun"]}


class TestPostRoutes:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_camel_case_post(self, test_client, auth_headers):
        response = await test_client.post("/posts", json=NEW_POST, headers=auth_headers(1))

        assert response.status_code == 201
        post = response.json()["post"]
        assert post["title"] == "Lego"
        assert post["userId"] == 1
        assert post["categoryId"] == 1
        assert "createdAt" in post
        assert post["user"] == {"id": 1, "firstName": "Alice", "lastName": "Author"}
        assert [t["name"] for t in post["tags"]] == ["fun"]

    @pytest.mark.asyncio
    async def test_get_by_id(self, test_client, repo):
        seeded = repo.seed_post(2, "books", "Dune")

        response = await test_client.get(f"/posts/{seeded.id}")

        assert response.status_code == 200
        assert response.json()["post"]["title"] == "Dune"
        assert response.json()["post"]["category"]["name"] == "books"

    @pytest.mark.asyncio
    async def test_get_missing_post_is_404(self, test_client):
        response = await test_client.get("/posts/999")

        assert response.status_code == 404
        body = response.json()
        assert body["status"] == 404
        assert body["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_non_numeric_segment_lists_category(self, test_client, repo):
        repo.seed_post(1, "toys", "older")
        repo.seed_post(1, "toys", "newer")
        repo.seed_post(1, "books", "other")

        response = await test_client.get("/posts/toys")

        assert response.status_code == 200
        assert [p["title"] for p in response.json()["posts"]] == ["newer", "older"]

    @pytest.mark.asyncio
    async def test_list_pagination_query(self, test_client, repo):
        for i in range(12):
            repo.seed_post(1, "toys", f"toy {i}")

        response = await test_client.get("/posts/toys", params={"page": "2", "limit": "5"})

        assert [p["title"] for p in response.json()["posts"]] == [
            "toy 6", "toy 5", "toy 4", "toy 3", "toy 2",
        ]

    @pytest.mark.asyncio
    async def test_non_numeric_page_is_400(self, test_client):
        response = await test_client.get("/posts/toys", params={"page": "abc"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid type for page or limit"

    @pytest.mark.asyncio
    async def test_create_without_token_is_401(self, test_client, repo):
        response = await test_client.post("/posts", json=NEW_POST)

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"] == "authentication_error"
        assert repo.posts == {}

    @pytest.mark.asyncio
    async def test_garbage_token_is_401(self, test_client):
        response = await test_client.post(
            "/posts", json=NEW_POST, headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_for_unknown_user_is_401(self, test_client):
        headers = {"Authorization": f"Bearer {create_access_token(99)}"}

        response = await test_client.post("/posts", json=NEW_POST, headers=headers)

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_mistyped_title_is_400(self, test_client, auth_headers, repo):
        body = {**NEW_POST, "title": 5}

        response = await test_client.post("/posts", json=body, headers=auth_headers(1))

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert repo.posts == {}

    @pytest.mark.asyncio
    async def test_non_string_tag_is_400(self, test_client, auth_headers):
        body = {**NEW_POST, "tags": ["fun", 3]}

        response = await test_client.post("/posts", json=body, headers=auth_headers(1))

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_category_is_400(self, test_client, auth_headers):
        body = {**NEW_POST, "category": "gadgets"}

        response = await test_client.post("/posts", json=body, headers=auth_headers(1))

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "category"

    @pytest.mark.asyncio
    async def test_update_by_owner(self, test_client, auth_headers, repo):
        seeded = repo.seed_post(1, "toys", "old", tags=["fun"])

        response = await test_client.put(
            f"/posts/{seeded.id}",
            json={"title": "new", "content": "body", "tags": ["Kids"]},
            headers=auth_headers(1),
        )

        assert response.status_code == 200
        post = response.json()["post"]
        assert post["title"] == "new"
        assert sorted(t["name"] for t in post["tags"]) == ["fun", "kids"]

    @pytest.mark.asyncio
    async def test_update_by_other_user_is_403(self, test_client, auth_headers, repo):
        seeded = repo.seed_post(1, "toys", "old")

        response = await test_client.put(
            f"/posts/{seeded.id}",
            json={"title": "mine now", "content": "x", "tags": []},
            headers=auth_headers(2),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"
        assert (await repo.get_post(seeded.id)).title == "old"

    @pytest.mark.asyncio
    async def test_update_non_numeric_id_is_400(self, test_client, auth_headers):
        response = await test_client.put(
            "/posts/abc",
            json={"title": "t", "content": "c", "tags": []},
            headers=auth_headers(1),
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_by_owner(self, test_client, auth_headers, repo):
        seeded = repo.seed_post(1, "toys", "bye")
        repo.seed_comment(seeded.id, 2, "comment")

        response = await test_client.delete(f"/posts/{seeded.id}", headers=auth_headers(1))

        assert response.status_code == 200
        assert response.json() == {"message": "Post deleted"}
        assert repo.posts == {}
        assert repo.comments == {}

    @pytest.mark.asyncio
    async def test_delete_missing_post_is_404(self, test_client, auth_headers):
        response = await test_client.delete("/posts/31", headers=auth_headers(1))

        assert response.status_code == 404


class TestCommentRoutes:

    @pytest.mark.asyncio
    async def test_create_returns_201(self, test_client, auth_headers, repo):
        post = repo.seed_post(1, "toys", "hello")

        response = await test_client.post(
            f"/posts/{post.id}/comments", json={"content": "nice"}, headers=auth_headers(2)
        )

        assert response.status_code == 201
        comment = response.json()["comment"]
        assert comment["postId"] == post.id
        assert comment["userId"] == 2
        assert comment["content"] == "nice"

    @pytest.mark.asyncio
    async def test_comment_on_missing_post_is_404(self, test_client, auth_headers):
        response = await test_client.post(
            "/posts/55/comments", json={"content": "nice"}, headers=auth_headers(2)
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_content_is_400(self, test_client, auth_headers, repo):
        post = repo.seed_post(1, "toys", "hello")

        response = await test_client.post(
            f"/posts/{post.id}/comments", json={}, headers=auth_headers(2)
        )

        assert response.status_code == 400
        assert response.json()["details"]["errors"][0]["field"] == "content"

    @pytest.mark.asyncio
    async def test_update_by_author(self, test_client, auth_headers, repo):
        post = repo.seed_post(1, "toys", "hello")
        comment = repo.seed_comment(post.id, 2, "first")

        response = await test_client.put(
            f"/comments/{comment.id}", json={"content": "edited"}, headers=auth_headers(2)
        )

        assert response.status_code == 200
        assert response.json()["comment"]["content"] == "edited"

    @pytest.mark.asyncio
    async def test_update_by_other_user_is_403(self, test_client, auth_headers, repo):
        post = repo.seed_post(1, "toys", "hello")
        comment = repo.seed_comment(post.id, 2, "first")

        response = await test_client.put(
            f"/comments/{comment.id}", json={"content": "edited"}, headers=auth_headers(1)
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_delete_returns_204_with_empty_body(self, test_client, auth_headers, repo):
        post = repo.seed_post(1, "toys", "hello")
        comment = repo.seed_comment(post.id, 2, "bye")

        response = await test_client.delete(f"/comments/{comment.id}", headers=auth_headers(2))

        assert response.status_code == 204
        assert response.content == b""
        assert repo.comments == {}

    @pytest.mark.asyncio
    async def test_delete_missing_comment_is_404(self, test_client, auth_headers):
        response = await test_client.delete("/comments/8", headers=auth_headers(2))

        assert response.status_code == 404
        assert response.json()["details"]["resource"] == "comment"


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_error_body_carries_client_request_id(self, test_client):
        response = await test_client.get("/posts/999", headers={"X-Request-ID": "trace-42"})

        body = response.json()
        assert set(body) == {"status", "error", "message", "details", "requestId"}
        assert body["requestId"] == "trace-42"
        assert response.headers["X-Request-ID"] == "trace-42"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("supplied", ["has space", "x" * 65, "semi;colon"])
    async def test_unsafe_client_request_id_replaced(self, test_client, supplied):
        response = await test_client.get("/posts/999", headers={"X-Request-ID": supplied})

        rid = response.headers["X-Request-ID"]
        assert rid != supplied
        assert len(rid) == 8
        assert response.json()["requestId"] == rid

    @pytest.mark.asyncio
    async def test_generated_request_id_on_success(self, test_client):
        response = await test_client.get("/posts/toys")

        assert len(response.headers["X-Request-ID"]) == 8


class TestHealthRoute:

    @pytest.mark.asyncio
    async def test_healthy_when_database_answers(self, test_client, monkeypatch):
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        monkeypatch.setattr(health, "engine", engine)

        response = await test_client.get("/health")
        await engine.dispose()

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert "uptimeSeconds" in body
