"""
Happy Thoughts Backend — Application Wiring Tests
==================================================

What:  Endpoint listing, health check, request IDs, CORS headers and the
       500 response for unexpected errors.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from happy_thoughts.config import Settings
from happy_thoughts.main import create_app
from happy_thoughts.services.thought_service import thought_service


class TestEndpointListing:
    """GET /"""

    @pytest.mark.asyncio
    async def test_lists_thought_routes(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        routes = {entry["path"]: entry["methods"] for entry in response.json()}
        assert routes["/thoughts"] == ["GET", "POST"]
        assert routes["/thoughts/{thought_id}"] == ["DELETE", "PATCH", "PUT"]
        assert routes["/thoughts/{thought_id}/likes"] == ["POST"]
        assert routes["/"] == ["GET"]
        assert routes["/health"] == ["GET"]

    @pytest.mark.asyncio
    async def test_excludes_docs(self, test_client):
        response = await test_client.get("/")

        paths = [entry["path"] for entry in response.json()]
        assert "/openapi.json" not in paths
        assert "/docs" not in paths
        assert paths == sorted(paths)

    @pytest.mark.asyncio
    async def test_matches_openapi_paths(self, app, test_client):
        response = await test_client.get("/")

        paths = [entry["path"] for entry in response.json()]
        assert paths == sorted(app.openapi()["paths"])


class TestHealth:
    """GET /health"""

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_unhealthy_when_database_unreachable(self, test_settings, engine):
        app = create_app(test_settings, engine=engine)
        broken = MagicMock()
        broken.connect.side_effect = OSError("connection refused")
        app.state.engine = broken

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"


class TestRequestId:
    """X-Request-ID middleware"""

    @pytest.mark.asyncio
    async def test_generated(self, test_client):
        response = await test_client.get("/thoughts")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_echoed(self, test_client):
        response = await test_client.get("/thoughts", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_included_in_error_body(self, test_client):
        response = await test_client.post(
            "/thoughts/nope/likes", headers={"X-Request-ID": "trace-me"}
        )

        assert response.status_code == 400
        assert response.json()["request_id"] == "trace-me"


class TestCors:
    """Cross-origin requests are allowed from anywhere by default."""

    @pytest.mark.asyncio
    async def test_simple_request(self, test_client):
        response = await test_client.get("/thoughts", headers={"Origin": "http://example.com"})

        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_preflight(self, test_client):
        response = await test_client.options(
            "/thoughts",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert "POST" in response.headers["access-control-allow-methods"]

    @pytest.mark.asyncio
    async def test_configured_origins_only(self, engine):
        narrowed = Settings(
            database_url="sqlite+aiosqlite://",
            log_level="WARNING",
            cors_origins="http://a.test,http://b.test",
        )
        app = create_app(narrowed, engine=engine)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            allowed = await client.get("/thoughts", headers={"Origin": "http://b.test"})
            denied = await client.get("/thoughts", headers={"Origin": "http://evil.test"})

        assert allowed.headers["access-control-allow-origin"] == "http://b.test"
        assert "access-control-allow-origin" not in denied.headers


class TestUnexpectedErrors:
    """Unhandled exceptions still get the middleware headers."""

    @pytest.mark.asyncio
    async def test_500_carries_request_id_and_cors(self, test_client, monkeypatch):
        monkeypatch.setattr(
            thought_service, "list_thoughts", AsyncMock(side_effect=RuntimeError("boom"))
        )

        response = await test_client.get(
            "/thoughts",
            headers={"Origin": "http://example.com", "X-Request-ID": "crash-1"},
        )

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "crash-1"
        assert response.headers["access-control-allow-origin"] == "*"
        body = response.json()
        assert body == {
            "error": "internal_server_error",
            "message": "An unexpected error occurred.",
            "request_id": "crash-1",
        }
        assert "boom" not in response.text
