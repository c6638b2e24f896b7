"""Health probes and app wiring."""

from __future__ import annotations

import pytest

from clipstream import __version__


class TestHealth:
    @pytest.mark.asyncio
    async def test_liveness(self, client):
        response = await client.get("/health/live")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "clipstream", "version": __version__}

    @pytest.mark.asyncio
    async def test_readiness(self, client):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json() == {
            "ready": True,
            "checks": {"database": "healthy"},
            "storage_backend": "local",
        }


class TestAppWiring:
    @pytest.mark.asyncio
    async def test_responses_carry_request_id_and_timing(self, client):
        response = await client.get("/health/live", headers={"X-Request-ID": "trace-1"})

        assert response.headers["x-request-id"] == "trace-1"
        assert "x-process-time" in response.headers

    @pytest.mark.asyncio
    async def test_problem_details_carry_request_id(self, client):
        response = await client.get("/api/videos/999", headers={"X-Request-ID": "trace-2"})

        assert response.status_code == 404
        assert response.json()["request_id"] == "trace-2"

    @pytest.mark.asyncio
    async def test_openapi_lists_feature_routes(self, client):
        paths = (await client.get("/openapi.json")).json()["paths"]

        for path in ("/api/videos", "/api/videos/following", "/api/comments", "/api/users/register"):
            assert path in paths
