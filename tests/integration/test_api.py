"""API integration tests - response envelope, middleware and auth"""

import pytest


class TestHealthCheck:
    @pytest.mark.asyncio
    async def test_health_check_response_structure(self, client):
        response = await client.get("/health")

        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["message"] == "OK"
        assert data["data"]["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_health_check_is_not_logged(self, client):
        """/health is excluded from the logging middleware"""
        response = await client.get("/health")

        assert "x-request-id" not in response.headers


class TestMiddleware:
    @pytest.mark.asyncio
    async def test_request_id_header_in_response(self, client):
        response = await client.get("/api/v1/")

        assert "x-request-id" in response.headers
        assert len(response.headers["x-request-id"]) == 36  # UUID

    @pytest.mark.asyncio
    async def test_process_time_header_in_response(self, client):
        response = await client.get("/api/v1/")

        assert response.headers["x-process-time"].endswith("ms")

    @pytest.mark.asyncio
    async def test_custom_request_id_forwarded(self, client):
        response = await client.get(
            "/api/v1/",
            headers={"X-Request-ID": "custom-request-id-12345"},
        )

        assert response.headers["x-request-id"] == "custom-request-id-12345"


class TestAuth:
    @pytest.mark.asyncio
    async def test_invalid_api_key(self, client):
        response = await client.get(
            "/api/v1/recommendations/settings",
            headers={"X-Internal-Api-Key": "wrong-key"},
        )

        assert response.status_code == 401
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "INVALID_API_KEY"

    @pytest.mark.asyncio
    async def test_missing_api_key(self, client):
        response = await client.get("/api/v1/recommendations/settings")

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert response.json()["error"]["detail"]["errors"][0]["loc"] == [
            "header",
            "X-Internal-Api-Key",
        ]


class TestErrorEnvelope:
    @pytest.mark.asyncio
    async def test_not_found_envelope(self, client, api_key_header):
        response = await client.get(
            "/api/v1/recommendations/users/reader-1",
            params={"current_article_id": "missing"},
            headers=api_key_header,
        )

        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "Article not found."
        assert data["error"]["code"] == "ARTICLE_NOT_FOUND"
        assert data["error"]["detail"] == {"article_id": "missing"}

    @pytest.mark.asyncio
    async def test_unknown_route_envelope(self, client):
        response = await client.get("/api/v1/unknown")

        assert response.status_code == 404
        assert response.json()["success"] is False
        assert response.json()["error"]["code"] == "NOT_FOUND"
