"""
TripLink Backend — Middleware Tests
=====================================

Runs each middleware on a minimal FastAPI app so limits and headers can be
checked without the full application.
"""

import logging

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from triplink.middleware.logging import RequestLoggingMiddleware, level_for_status
from triplink.middleware.rate_limit import RateLimitMiddleware
from triplink.middleware.request_id import RequestIDMiddleware


def build_app(max_requests: int = 2) -> FastAPI:
    app = FastAPI()

    @app.get("/ping")
    async def ping():
        return {"pong": True}

    @app.get("/api/health")
    async def health():
        return {"status": "ok"}

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window_seconds=60)
    return app


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_requests_over_limit_get_429(self):
        transport = ASGITransport(app=build_app(max_requests=2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200
            limited = await client.get("/ping")

        assert limited.status_code == 429
        assert limited.json()["error"] == "rate_limited"
        assert int(limited.headers["Retry-After"]) >= 1

    @pytest.mark.asyncio
    async def test_health_is_never_limited(self):
        transport = ASGITransport(app=build_app(max_requests=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            statuses = [(await client.get("/api/health")).status_code for _ in range(5)]

        assert statuses == [200] * 5


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self):
        transport = ASGITransport(app=build_app(max_requests=10))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/ping")

        assert len(response.headers["X-Request-ID"]) == 8


class TestAccessLog:

    def test_level_follows_status(self):
        assert level_for_status(200) == logging.INFO
        assert level_for_status(404) == logging.WARNING
        assert level_for_status(503) == logging.ERROR

    @pytest.mark.asyncio
    async def test_request_is_logged(self, caplog):
        transport = ASGITransport(app=build_app(max_requests=10))
        with caplog.at_level(logging.INFO, logger="triplink.access"):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                await client.get("/ping")

        assert any("GET /ping 200" in record.getMessage() for record in caplog.records)
