import logging
import uuid
import re
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from garden.core.context import set_trace_id

logger = logging.getLogger(__name__)

# UUID 형식 검증 정규식 (8-4-4-4-12)
UUID_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$',
    re.IGNORECASE
)


class TraceIDMiddleware(BaseHTTPMiddleware):
    """
    HTTP 요청 추적을 위한 Trace ID 관리 미들웨어

    - 요청 헤더(X-Trace-ID)가 UUID 형식이면 해당 값을 사용
    - 없거나 형식이 잘못되었으면 새로운 UUIDv4를 생성
    - 응답 헤더(X-Trace-ID)에 포함하여 클라이언트에 반환
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        trace_id = request.headers.get("X-Trace-ID")

        if trace_id and not UUID_PATTERN.match(trace_id):
            logger.warning(f"Invalid Trace ID received: {trace_id}")
            trace_id = None

        if not trace_id:
            trace_id = str(uuid.uuid4())

        set_trace_id(trace_id)
        request.state.trace_id = trace_id

        response = await call_next(request)

        response.headers["X-Trace-ID"] = trace_id
        return response


class CacheControlMiddleware(BaseHTTPMiddleware):
    """
    API 경로에 대해 Cache-Control 헤더를 추가하여 캐싱을 방지합니다.
    가격 견적은 입력마다 새로 계산되어야 하므로 프록시 캐시를 허용하지 않습니다.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        if request.url.path.startswith("/api"):
            response.headers["Cache-Control"] = (
                "no-store, no-cache, must-revalidate, max-age=0"
            )
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"

        return response
