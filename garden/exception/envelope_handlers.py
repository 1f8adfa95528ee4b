import logging
import traceback

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from garden.core.config import IS_DEBUG
from garden.core.error_codes import ErrorCode
from garden.core.response import error_response, ValidationErrorDetail
from garden.exception.base_exception import BaseCustomException
from garden.exception.common.rate_limit_exception import RateLimitException

logger = logging.getLogger("garden")

# 예약/크레딧 거절은 사용자 단위로 추적해야 하므로 X-User-Id를 로그에 남김
USER_SCOPED_CATEGORIES = {"BOOKING", "CREDITS"}


def _rejection_log(request: Request, status_code: int, error_code: str, message: str) -> dict:
    """
    Build the structured log entry for a rejected request.

    The error code prefix (`DISCOUNT`, `STAY`, `BOOKING`, ...) is logged as `category`
    so pricing rejections can be counted per kind.
    """
    category = error_code.split("-", 1)[0]
    entry = {
        "event": "request_rejected",
        "status": status_code,
        "errorCode": error_code,
        "category": category,
        "message": message,
        "client_ip": request.client.host if request.client else None,
        "path": request.url.path,
    }
    if category in USER_SCOPED_CATEGORIES:
        entry["user_id"] = request.headers.get("X-User-Id")
    return entry


async def custom_exception_handler(request: Request, exc: BaseCustomException):
    """
    비즈니스 로직 예외(BaseCustomException)를 ApiResponse 포맷으로 변환

    Rationale:
        할인 코드 거절, 중복 확정 요청 등은 4xx 에러이므로 경고 수준으로 로깅합니다.
        할인 코드 거절(DISCOUNT)과 요청 한도 초과(RATE)가 함께 늘면 코드 대입 시도로 봅니다.
    """
    error_code_value = exc.error_code.value if hasattr(exc.error_code, 'value') else exc.error_code

    logger.warning(_rejection_log(request, exc.status_code, error_code_value, exc.message))
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            message=exc.message,
            code=error_code_value
        ).model_dump()
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    HTTPException을 ApiResponse 포맷으로 변환 (X-User-Id 헤더 누락 등)
    """
    error_code = ErrorCode.http_error(exc.status_code)
    logger.warning(_rejection_log(request, exc.status_code, error_code, str(exc.detail)))
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            message=exc.detail,
            code=error_code
        ).model_dump()
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Pydantic Validation Error를 ApiResponse 포맷으로 변환 (422)

    Rationale:
        checkOut <= checkIn 인 주(week)처럼 구조적으로 잘못된 입력을
        필드별 에러로 돌려주어 프론트엔드가 바로 표시할 수 있게 합니다.
    """
    error_details = {}
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        error_details[field] = ValidationErrorDetail(
            message=error["msg"],
            type=error["type"],
            input=error.get("input")
        )

    entry = _rejection_log(
        request, status.HTTP_422_UNPROCESSABLE_ENTITY, ErrorCode.VALIDATION_ERROR, "Please check your input."
    )
    entry["fields"] = sorted(error_details)
    logger.warning(entry)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response(
            message="Please check your input.",
            code=ErrorCode.VALIDATION_ERROR,
            result=error_details
        ).model_dump(mode="json")
    )


async def global_exception_handler_envelope(request: Request, exc: Exception):
    """
    모든 예외(500 포함)를 ApiResponse 포맷으로 변환

    Rationale:
        상세 스택 트레이스는 로그에만 기록하고, 클라이언트에게는 일반 메시지만 반환합니다.
    """
    logger.exception(
        f"Unhandled Exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "client_ip": request.client.host if request.client else None,
        }
    )

    if IS_DEBUG:
        error_result = {
            "error_detail": str(exc),
            "stack_trace": traceback.format_exc()
        }
    else:
        error_result = None

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            message="Internal server error. Please contact the team.",
            code=ErrorCode.INTERNAL_ERROR,
            result=error_result
        ).model_dump()
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    """
    slowapi의 RateLimitExceeded 예외를 비즈니스 예외(RateLimitException)로 변환하여
    일관된 에러 응답 포맷을 유지합니다.
    """
    rate_limit_exc = RateLimitException()
    return await custom_exception_handler(request, rate_limit_exc)
