"""End-to-end tests for the HTTP layer."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api_base.config import Settings
from api_base.core.cursor import encode_cursor
from api_base.http.application import create_app


class TestCollectionEndpoint:
    """Tests for paginated collection responses."""

    @pytest.mark.asyncio
    async def test_first_page(self, test_client):
        """Test the first page and its next cursor."""
        response = await test_client.get("/api/posts", params={"limit": "2"})

        assert response.status_code == 200
        body = response.json()
        assert [post["id"] for post in body["data"]] == [1, 2]
        assert body["pagination"] == {
            "cursors": {"current": None, "previous": None, "next": encode_cursor(2)},
            "count": 2,
            "pageSize": 2,
        }

    @pytest.mark.asyncio
    async def test_walk_pages(self, test_client):
        """Test following next cursors visits every record once."""
        seen = []
        cursor = None
        for _ in range(5):
            params = {"limit": "2"}
            if cursor:
                params["cursor"] = cursor
            body = (await test_client.get("/api/posts", params=params)).json()
            seen.extend(post["id"] for post in body["data"])
            cursor = body["pagination"]["cursors"]["next"]
            if not body["data"]:
                break

        assert seen == [1, 2, 3, 4, 5]
        assert cursor is None

    @pytest.mark.asyncio
    async def test_page_after_last_is_empty(self, test_client):
        """Test a cursor past the end yields an empty page."""
        response = await test_client.get("/api/posts", params={"cursor": encode_cursor(5)})
        body = response.json()

        assert body["data"] == []
        assert body["pagination"]["count"] == 0
        assert body["pagination"]["cursors"]["current"] == encode_cursor(5)
        assert body["pagination"]["cursors"]["next"] is None

    @pytest.mark.asyncio
    async def test_garbage_cursor_starts_from_beginning(self, test_client):
        """Test an undecodable cursor is treated as no cursor."""
        response = await test_client.get("/api/posts", params={"cursor": "%%%", "limit": "1"})
        body = response.json()

        assert response.status_code == 200
        assert body["data"][0]["id"] == 1
        assert body["pagination"]["cursors"]["current"] is None

    @pytest.mark.asyncio
    async def test_huge_cursor_starts_from_beginning(self, test_client):
        """Test a cursor too large for an id column is treated as no cursor."""
        response = await test_client.get("/api/posts", params={"cursor": encode_cursor(10**40), "limit": "2"})
        body = response.json()

        assert response.status_code == 200
        assert [post["id"] for post in body["data"]] == [1, 2]
        assert body["pagination"]["cursors"]["current"] is None

    @pytest.mark.asyncio
    async def test_limit_capped(self, test_client):
        """Test oversized limits are capped to the maximum."""
        body = (await test_client.get("/api/posts", params={"limit": "500"})).json()
        assert body["pagination"]["pageSize"] == 50

    @pytest.mark.asyncio
    async def test_embeds_on_collection(self, test_client):
        """Test embeds are loaded and attached to each item."""
        body = (await test_client.get("/api/posts", params={"embed": "author", "limit": "2"})).json()
        assert [post["author"]["name"] for post in body["data"]] == ["Alice", "Alice"]

    @pytest.mark.asyncio
    async def test_cors_header(self, test_client):
        """Test envelopes carry the allow-origin header."""
        response = await test_client.get("/api/posts")
        assert response.headers["access-control-allow-origin"] == "*"


class TestItemEndpoint:
    """Tests for single item responses."""

    @pytest.mark.asyncio
    async def test_item_without_embeds(self, test_client):
        """Test the item envelope and available embeds."""
        response = await test_client.get("/api/posts/1")

        assert response.status_code == 200
        assert response.json() == {
            "data": {"id": 1, "title": "Post 1"},
            "meta": {"available_embeds": ["author", "comments", "comments.author"]},
        }

    @pytest.mark.asyncio
    async def test_nested_embed(self, test_client):
        """Test a dotted embed loads the chain of relations."""
        response = await test_client.get("/api/posts/1", params={"embed": "comments.author"})
        data = response.json()["data"]

        assert data["comments"] == [
            {"id": 1, "text": "First!", "author": {"id": 2, "name": "Bob"}},
            {"id": 2, "text": "Thanks", "author": {"id": 1, "name": "Alice"}},
        ]
        assert "author" not in data

    @pytest.mark.asyncio
    async def test_unknown_embed_ignored(self, test_client):
        """Test non-whitelisted embeds are dropped silently."""
        response = await test_client.get("/api/posts/1", params={"embed": "password,author"})
        data = response.json()["data"]

        assert response.status_code == 200
        assert data["author"] == {"id": 1, "name": "Alice"}
        assert "password" not in data

    @pytest.mark.asyncio
    async def test_function_transformer(self, test_client):
        """Test endpoints can transform with a plain function."""
        response = await test_client.get("/api/items/7")
        assert response.json()["data"] == {"id": 7}

    @pytest.mark.asyncio
    async def test_context_dependency(self, test_client):
        """Test the context dependency decodes query parameters."""
        params = {"current": encode_cursor(4), "previous": encode_cursor(2), "page_size": "3", "embed": "a,b"}
        response = await test_client.get("/api/context", params=params)

        assert response.json() == {"current": 4, "previous": 2, "page_size": 3, "embeds": ["a", "b"]}


class TestErrorResponses:
    """Tests for error envelopes."""

    @pytest.mark.asyncio
    async def test_not_found(self, test_client):
        """Test a raised NotFoundError renders a 404 envelope."""
        response = await test_client.get("/api/posts/999")

        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "404-001", "http_code": 404, "message": "Post not found"}
        }

    @pytest.mark.asyncio
    async def test_forbidden_from_responder(self, test_client):
        """Test a responder shortcut renders a 403 envelope."""
        response = await test_client.post("/api/posts/2/publish")

        assert response.status_code == 403
        assert response.json()["error"] == {
            "code": "403-001",
            "http_code": 403,
            "message": "Only drafts can be published",
        }

    @pytest.mark.asyncio
    async def test_forbidden_raised(self, test_client):
        """Test a raised ForbiddenError uses the default message."""
        response = await test_client.get("/api/admin")

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_success_notification(self, test_client):
        """Test a success notification."""
        response = await test_client.post("/api/posts/1/publish")

        assert response.status_code == 200
        assert response.json()["notification"]["style"] == "success"
        assert response.json()["notification"]["message"] == "Post published"

    @pytest.mark.asyncio
    async def test_validation_failed(self, test_client):
        """Test ValidationFailed renders a 422 notification."""
        response = await test_client.post("/api/posts", json={"body": "far too long for a post"})

        assert response.status_code == 422
        notification = response.json()["notification"]
        assert notification["result"] == "error"
        assert notification["style"] == "danger"
        assert notification["messages"] == ["required", "too long", "invalid"]
        assert notification["message"] == "required<br>too long<br>invalid"

    @pytest.mark.asyncio
    async def test_created(self, test_client):
        """Test a valid payload gets a 201 notification."""
        response = await test_client.post("/api/posts", json={"title": "New"})

        assert response.status_code == 201
        assert response.json()["notification"]["messages"] == ["Created"]

    @pytest.mark.asyncio
    async def test_request_validation(self, test_client):
        """Test FastAPI validation errors become a 422 notification."""
        response = await test_client.get("/api/posts/abc")

        assert response.status_code == 422
        body = response.json()
        assert body["notification"]["result"] == "error"
        assert list(body["errors"]) == ["post_id"]

    @pytest.mark.asyncio
    async def test_unhandled_error_is_hidden(self, test_client):
        """Test unexpected exceptions render a generic 500 envelope."""
        response = await test_client.get("/api/boom")

        assert response.status_code == 500
        assert response.json() == {
            "error": {"code": "500-001", "http_code": 500, "message": "Internal Error"}
        }
        assert "hunter2" not in response.text

    @pytest.mark.asyncio
    async def test_unhandled_error_keeps_correlation_id(self, test_client):
        """Test the 500 envelope still echoes the correlation ID."""
        response = await test_client.get("/api/boom", headers={"X-Correlation-ID": "trace-500"})

        assert response.status_code == 500
        assert response.headers["x-correlation-id"] == "trace-500"


class TestVersionHeader:
    """Tests for the API version gate."""

    @pytest.mark.asyncio
    async def test_matching_version(self, test_client):
        """Test the served version is accepted."""
        response = await test_client.get("/api/posts", headers={"api-version": "1"})
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_missing_header_defaults_to_one(self, test_client):
        """Test requests without a version header are served."""
        response = await test_client.get("/api/posts/1")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_unsupported_version(self, test_client):
        """Test a mismatched version is rejected with a coded error."""
        response = await test_client.get("/api/posts", headers={"api-version": "2"})

        assert response.status_code == 400
        assert response.json() == {
            "error": {
                "code": "400-002",
                "http_code": 400,
                "message": "Unsupported API Version.",
            }
        }

    @pytest.mark.asyncio
    async def test_paths_outside_prefix_not_checked(self, test_client):
        """Test the gate only applies under the API prefix."""
        response = await test_client.get("/health", headers={"api-version": "2"})
        assert response.status_code == 200


class TestCors:
    """Tests for CORS handling."""

    @pytest.mark.asyncio
    async def test_preflight(self, test_client):
        """Test a preflight request is answered directly."""
        response = await test_client.options(
            "/api/posts",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "PATCH",
                "Access-Control-Request-Headers": "Authorization",
            },
        )

        assert response.status_code == 200
        assert "PATCH" in response.headers["access-control-allow-methods"]

    @pytest.mark.asyncio
    async def test_preflight_ignores_version(self, test_client):
        """Test preflight succeeds whatever the version header."""
        response = await test_client.options(
            "/api/posts",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "GET",
                "api-version": "9",
            },
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_bare_options(self, test_client):
        """Test an OPTIONS request without preflight headers is answered 200."""
        response = await test_client.options("/api/posts")

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "HEAD, GET, POST, PUT, PATCH, DELETE"
        assert "Authorization" in response.headers["access-control-allow-headers"]

    @pytest.mark.asyncio
    async def test_bare_options_unknown_path(self, test_client):
        """Test bare OPTIONS is answered even where no route exists."""
        response = await test_client.options("/api/nowhere", headers={"api-version": "9"})
        assert response.status_code == 200


class TestCorrelation:
    """Tests for correlation IDs."""

    @pytest.mark.asyncio
    async def test_generated(self, test_client):
        """Test a correlation ID is generated when missing."""
        response = await test_client.get("/health")
        assert response.headers["x-correlation-id"]

    @pytest.mark.asyncio
    async def test_echoed(self, test_client):
        """Test the caller's correlation ID is echoed."""
        response = await test_client.get("/health", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["x-correlation-id"] == "abc-123"


class TestCreateApp:
    """Tests for the application factory."""

    @pytest.mark.asyncio
    async def test_metrics_route(self):
        """Test the factory installs the metrics endpoint."""
        app = create_app(Settings(environment="test", log_json=False))
        assert isinstance(app, FastAPI)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            await client.get("/missing", params={"cursor": "%%%"})
            response = await client.get("/metrics")

        assert response.status_code == 200
        assert "api_responses_total" in response.text
        assert 'api_cursor_requests_total{state="rejected"}' in response.text
