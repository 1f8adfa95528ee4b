"""
미들웨어 통합 테스트 모듈

Rationale:
    httpx.AsyncClient + ASGITransport로 실제 FastAPI 앱에 요청을 보내
    미들웨어 체인 전체(Trace ID, Cache-Control, CORS)의 동작을 검증합니다.

실행: pytest tests/core/test_middleware.py -v
"""

import uuid
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from garden.main import app


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


class TestTraceIDMiddleware:

    @pytest.mark.asyncio
    async def test_trace_id_auto_generated(self, client):
        """Trace ID 미전송 시 UUIDv4가 자동 생성되어 응답 헤더에 포함되는지 검증"""
        response = await client.get("/ping")

        trace_id = response.headers.get("X-Trace-ID")
        assert trace_id is not None
        assert str(uuid.UUID(trace_id, version=4)) == trace_id

    @pytest.mark.asyncio
    async def test_trace_id_passthrough(self, client):
        """UUID 형식의 X-Trace-ID는 그대로 응답에 반환"""
        custom_trace_id = str(uuid.uuid4())
        response = await client.get("/ping", headers={"X-Trace-ID": custom_trace_id})

        assert response.headers.get("X-Trace-ID") == custom_trace_id

    @pytest.mark.asyncio
    async def test_invalid_trace_id_is_replaced(self, client):
        """형식이 잘못된 Trace ID는 새 UUID로 교체"""
        response = await client.get("/ping", headers={"X-Trace-ID": "not-a-uuid"})

        trace_id = response.headers.get("X-Trace-ID")
        assert trace_id != "not-a-uuid"
        uuid.UUID(trace_id)

    @pytest.mark.asyncio
    async def test_trace_id_on_error_response(self, client):
        """에러 응답(422)에도 Trace ID가 포함되는지 검증"""
        response = await client.get("/api/pricing/food-range", params={"nights": -1})

        assert response.status_code == 422
        assert response.headers.get("X-Trace-ID") is not None


class TestCacheControlMiddleware:

    @pytest.mark.asyncio
    async def test_api_path_is_not_cached(self, client):
        """/api 경로에는 캐시 방지 헤더 추가"""
        response = await client.get("/api/pricing/food-range", params={"nights": 7})

        assert response.status_code == 200
        assert "no-store" in response.headers.get("Cache-Control", "")
        assert response.headers.get("Pragma") == "no-cache"
        assert response.headers.get("Expires") == "0"

    @pytest.mark.asyncio
    async def test_non_api_path_untouched(self, client):
        response = await client.get("/ping")

        assert response.status_code == 200
        assert "Cache-Control" not in response.headers


class TestCORS:

    @pytest.mark.asyncio
    async def test_preflight_allowed_origin(self, client):
        response = await client.options(
            "/api/pricing/quote",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers.get("access-control-allow-origin") == "http://localhost:3000"
